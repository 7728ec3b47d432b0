from typing import List

from sqlalchemy import select

from models.bus import Bus
from repositories.base import SQLAlchemyRepository


class BusRepository(SQLAlchemyRepository[Bus]):
    model = Bus
    not_found_message = "Este autocarro não existe"
    conflict_message = "Já existe um autocarro com este NIA, matrícula ou motorista"

    async def find_by_driver_id(self, driver_id: int, options=()):
        return await self.find_first(Bus.driver_id == driver_id, options=options)

    async def find_identifiers(self) -> List[str]:
        result = await self.db.execute(select(Bus.nia))
        return list(result.scalars().all())
