"""
Repositories package: data-access layer.

One repository per aggregate root. Repositories run queries and commit
mutations; they do not raise business-rule errors beyond not-found and
unique-constraint conflicts.
"""

from .base import SQLAlchemyRepository
from .bus_repository import BusRepository
from .route_repository import RouteRepository
from .user_repository import UserRepository
