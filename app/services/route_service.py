from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from models.route import Route
from repositories.route_repository import RouteRepository


class RouteService:
    """Route lookups needed by the bus service. Route CRUD lives elsewhere."""

    def __init__(self, db: AsyncSession, repository: Optional[RouteRepository] = None):
        self.db = db
        self.repository = repository or RouteRepository(db)

    async def find_one(self, route_id: int) -> Optional[Route]:
        return await self.repository.resolve_route(route_id)
