"""
Sequential bus identifiers (NIA), formatted as PREFIX-NNNN.

The next identifier is derived from the most recently modified bus. That
bus is not always the newest one: editing an old bus makes it the latest,
and the derived NIA then belongs to a bus that already exists. The buses
table enforces NIA uniqueness, so such a value (or one lost to a concurrent
creation) is rejected on insert and BusService.create_bus retries once with
an identifier taken after the highest NIA in use.
"""

import logging
import re
from typing import Iterable, Optional

from models.bus import Bus
from repositories.bus_repository import BusRepository

logger = logging.getLogger(__name__)

PAD_WIDTH = 4


def parse_identifier_number(identifier: Optional[str], prefix: str) -> Optional[int]:
    """Numeric suffix of `PREFIX-<digits>`, or None when the pattern does not match."""
    if not identifier:
        return None
    match = re.search(rf"{re.escape(prefix)}-(\d+)", identifier)
    if not match:
        return None
    return int(match.group(1))


def format_identifier(number: int, prefix: str) -> str:
    # Numbers above 9999 keep their natural width
    return f"{prefix}-{str(number).zfill(PAD_WIDTH)}"


def next_identifier(latest: Optional[str], prefix: str) -> str:
    """
    Identifier following `latest`.

    A missing latest identifier starts the sequence at 1. So does one that
    does not match PREFIX-<digits>, which can collide with an early bus; the
    unique constraint turns that into a rejected insert.
    """
    number = parse_identifier_number(latest, prefix)
    if number is None:
        if latest:
            logger.warning(
                "Latest bus identifier does not match the expected pattern, restarting sequence",
                extra={"latest": latest, "prefix": prefix}
            )
        return format_identifier(1, prefix)
    return format_identifier(number + 1, prefix)


async def generate_next_identifier(repository: BusRepository, prefix: str) -> str:
    latest_bus = await repository.find_latest(Bus.updated_at)
    latest = latest_bus.nia if latest_bus else None
    identifier = next_identifier(latest, prefix)
    logger.debug("Generated bus identifier", extra={"latest": latest, "nia": identifier})
    return identifier


def highest_identifier_number(identifiers: Iterable[Optional[str]], prefix: str) -> int:
    """Largest numeric suffix among `identifiers`, 0 when none matches."""
    numbers = (parse_identifier_number(identifier, prefix) for identifier in identifiers)
    return max((number for number in numbers if number is not None), default=0)


async def generate_identifier_after_highest(repository: BusRepository, prefix: str) -> str:
    highest = highest_identifier_number(await repository.find_identifiers(), prefix)
    identifier = format_identifier(highest + 1, prefix)
    logger.info("Generated bus identifier after highest", extra={"highest": highest, "nia": identifier})
    return identifier
