import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

# Models
from models.bus import Bus, BusStatus
from models.route import Route, RouteStop
from models.user import User, DriverStatus

# Data access
from repositories.bus_repository import BusRepository
from services.route_service import RouteService
from services.identifiers import generate_identifier_after_highest, generate_next_identifier

# Schemas
from schemas.bus import BusCreate, BusUpdate, BusDetailsUpdate

from core.environment import get_bus_id_prefix
from core.metrics import track_performance
from core.retry import async_retry

# Exceptions
from services.exceptions import (
    ConstraintViolationError,
    IdentifierConflictError,
    InvalidArgumentError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

BUS_NOT_FOUND = "Este autocarro não existe"
ROUTE_NOT_FOUND = "Esta rota não existe !"
ROUTE_REQUIRED = "Informe a nova rota"
STATUS_REQUIRED = "Informe o novo status"

NOT_AVAILABLE = "N/A"


def available_criteria():
    """Driver AVAILABLE or IN_TRANSIT, and the bus itself IN_TRANSIT."""
    return (
        Bus.driver.has(User.status.in_([DriverStatus.AVAILABLE, DriverStatus.IN_TRANSIT])),
        Bus.status.in_([BusStatus.IN_TRANSIT]),
    )


def inactive_criteria():
    """Driver OFFLINE, or the bus had an accident or broke down."""
    return (
        or_(
            Bus.driver.has(User.status == DriverStatus.OFFLINE),
            Bus.status.in_([BusStatus.ACCIDENT, BusStatus.BREAKDOWN]),
        ),
    )


def _bus_to_dict(bus: Bus) -> Dict[str, Any]:
    return {column.key: getattr(bus, column.key) for column in Bus.__table__.columns}


class BusService:
    """
    Business logic for the bus fleet.

    Covers creation with sequential NIA assignment, the dashboard listings
    (pending, available, inactive), lookups by driver for the driver app,
    and the two driver-keyed mutations: route reassignment and status change.

    Collaborators are passed in explicitly; by default they are built on
    the given session.
    """

    def __init__(
        self,
        db: AsyncSession,
        route_service: Optional[RouteService] = None,
        repository: Optional[BusRepository] = None,
        id_prefix: Optional[str] = None,
    ):
        self.db = db
        self.repository = repository or BusRepository(db)
        self.route_service = route_service or RouteService(db)
        self.id_prefix = id_prefix or get_bus_id_prefix()

    async def generate_nia(self) -> str:
        return await generate_next_identifier(self.repository, self.id_prefix)

    @track_performance(service_name="BusService")
    async def create_bus(self, data: BusCreate) -> Bus:
        """
        Creates a bus with the next sequential NIA.

        The first NIA follows the most recently modified bus. If that NIA is
        already taken (a stale latest bus or a concurrent creation), the insert
        is retried once with the NIA after the highest one in use; a second
        NIA collision is raised as IdentifierConflictError. Conflicts on plate
        or driver are raised as ConstraintViolationError without a retry.
        """
        nia_sources = iter((self.generate_nia, self._nia_after_highest))
        return await self._insert_with_next_nia(data.model_dump(), nia_sources)

    async def _nia_after_highest(self) -> str:
        return await generate_identifier_after_highest(self.repository, self.id_prefix)

    @async_retry(max_attempts=2, base_delay=0, retry_on=(IdentifierConflictError,))
    async def _insert_with_next_nia(self, fields: Dict[str, Any], nia_sources) -> Bus:
        # One source per attempt
        nia = await next(nia_sources)()
        try:
            bus = await self.repository.insert({**fields, "nia": nia})
        except ConstraintViolationError as e:
            if await self.repository.find_first(Bus.nia == nia) is not None:
                raise IdentifierConflictError(e.message) from e
            raise
        logger.info("Bus created", extra={"bus_id": bus.id, "nia": nia})
        return bus

    async def buses(self) -> List[Dict[str, Any]]:
        """All buses flattened with the driver's name and the route's name."""
        buses = await self.repository.find_many(
            options=(selectinload(Bus.driver), selectinload(Bus.route))
        )
        return [
            {
                **_bus_to_dict(bus),
                "driver_name": bus.driver.name if bus.driver and bus.driver.name else NOT_AVAILABLE,
                "route": bus.route.name if bus.route and bus.route.name else NOT_AVAILABLE,
            }
            for bus in buses
        ]

    async def buses_with_route(self) -> List[Bus]:
        return await self.repository.find_many(Bus.route_id.is_not(None))

    async def count_buses(self) -> Dict[str, int]:
        count = await self.repository.count()
        return {"count": count}

    @track_performance(service_name="BusService")
    async def pending_buses(self) -> Dict[str, Any]:
        """Buses waiting for a driver."""
        buses = await self.repository.find_many(Bus.driver_id.is_(None))
        return {"count": len(buses), "buses": buses}

    @track_performance(service_name="BusService")
    async def available_buses(self) -> Dict[str, Any]:
        buses = await self.repository.find_many(*available_criteria())
        return {"count": len(buses), "buses": buses}

    @track_performance(service_name="BusService")
    async def inactive_buses(self) -> Dict[str, Any]:
        buses = await self.repository.find_many(*inactive_criteria())
        return {"count": len(buses), "buses": buses}

    async def find_bus_by_id(self, bus_id: int) -> Optional[Bus]:
        return await self.repository.find_by_key(bus_id)

    async def find_bus_by_driver_id(self, driver_id: int) -> Optional[Bus]:
        return await self.repository.find_by_driver_id(driver_id)

    async def find_bus_and_details_by_driver_id(self, driver_id: int) -> Optional[Bus]:
        return await self.repository.find_by_driver_id(
            driver_id,
            options=(selectinload(Bus.driver), selectinload(Bus.route)),
        )

    async def provide_bus_details(self, driver_id: int) -> Optional[Bus]:
        """Bus of the driver with its route and the route's stops in order."""
        return await self.repository.find_by_driver_id(
            driver_id,
            options=(
                selectinload(Bus.route)
                .selectinload(Route.route_stops)
                .selectinload(RouteStop.stop),
            ),
        )

    async def update_bus(self, bus_id: int, data: BusUpdate) -> Bus:
        return await self.repository.update(bus_id, data.model_dump(exclude_unset=True))

    async def update_bus_details(self, bus_id: int, data: BusDetailsUpdate) -> Bus:
        # driver app (manage screen)
        return await self.repository.update(bus_id, data.model_dump(exclude_unset=True))

    async def delete_bus(self, bus_id: int) -> Bus:
        return await self.repository.delete(bus_id)

    @track_performance(service_name="BusService")
    async def change_route(self, driver_id: int, new_route_id: Optional[int]) -> Bus:
        """
        Moves the driver's bus to another route.

        Raises:
            NotFoundError: no bus is assigned to the driver, or the route does not exist
            InvalidArgumentError: no route given (checked before any route lookup)
        """
        bus = await self.repository.find_by_driver_id(driver_id)
        if not bus:
            logger.info("Route change rejected: no bus for driver", extra={"driver_id": driver_id})
            raise NotFoundError(BUS_NOT_FOUND)

        if not new_route_id:
            raise InvalidArgumentError(ROUTE_REQUIRED)

        new_route = await self.route_service.find_one(new_route_id)
        if not new_route:
            logger.info(
                "Route change rejected: unknown route",
                extra={"driver_id": driver_id, "route_id": new_route_id}
            )
            raise NotFoundError(ROUTE_NOT_FOUND)

        return await self.repository.update(bus.id, {"route_id": new_route_id})

    @track_performance(service_name="BusService")
    async def change_status(self, driver_id: int, status: Optional[BusStatus]) -> Bus:
        """
        Sets the operational status of the driver's bus.

        Raises:
            NotFoundError: no bus is assigned to the driver
            InvalidArgumentError: no status given
        """
        bus = await self.repository.find_by_driver_id(driver_id)
        if not bus:
            logger.info("Status change rejected: no bus for driver", extra={"driver_id": driver_id})
            raise NotFoundError(BUS_NOT_FOUND)

        if not status:
            raise InvalidArgumentError(STATUS_REQUIRED)

        return await self.repository.update(bus.id, {"status": status})
