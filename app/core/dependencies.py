"""
FastAPI dependency providers.

Wires each service to a request-scoped AsyncSession so endpoints can
declare `svc: BusService = Depends(get_bus_service)`.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.db import get_db
from services.bus_service import BusService
from services.route_service import RouteService
from services.user_service import UserService


def get_route_service(db: AsyncSession = Depends(get_db)) -> RouteService:
    return RouteService(db=db)


def get_bus_service(
    db: AsyncSession = Depends(get_db),
    route_service: RouteService = Depends(get_route_service),
) -> BusService:
    return BusService(db=db, route_service=route_service)


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db=db)
