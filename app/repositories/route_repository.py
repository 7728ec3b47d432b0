from typing import Optional

from sqlalchemy.orm import selectinload

from models.route import Route, RouteStop
from repositories.base import SQLAlchemyRepository


class RouteRepository(SQLAlchemyRepository[Route]):
    model = Route
    not_found_message = "Esta rota não existe !"
    conflict_message = "Já existe uma rota com este nome"

    async def resolve_route(self, route_id: int) -> Optional[Route]:
        """Route with its ordered stops, or None when the reference does not resolve."""
        return await self.find_by_key(
            route_id,
            options=(selectinload(Route.route_stops).selectinload(RouteStop.stop),),
        )
