import logging
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from services.exceptions import ConstraintViolationError, NotFoundError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class SQLAlchemyRepository(Generic[ModelT]):
    """
    Generic async data-access object for one mapped model.

    Every mutation commits on its own, so a unique constraint violation is
    detected at the statement that caused it and the session is rolled back
    before ConstraintViolationError is raised. Any other SQLAlchemyError
    propagates unchanged.

    Subclasses set `model` and `not_found_message`.
    """

    model: Type[ModelT]
    not_found_message: str = "Registo não encontrado"
    conflict_message: str = "Já existe um registo com estes dados"

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_latest(self, sort_key, options: Sequence = ()) -> Optional[ModelT]:
        stmt = (
            select(self.model)
            .options(*options)
            .order_by(sort_key.desc(), self.model.id.desc())
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def find_by_key(self, key: Any, options: Sequence = ()) -> Optional[ModelT]:
        return await self.db.get(self.model, key, options=list(options))

    async def find_first(self, *criteria, options: Sequence = ()) -> Optional[ModelT]:
        stmt = select(self.model).where(*criteria).options(*options).limit(1)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def find_many(self, *criteria, options: Sequence = (), order_by=None) -> List[ModelT]:
        stmt = select(self.model).where(*criteria).options(*options)
        stmt = stmt.order_by(order_by if order_by is not None else self.model.id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count(self, *criteria) -> int:
        stmt = select(func.count()).select_from(self.model).where(*criteria)
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def insert(self, fields: Dict[str, Any]) -> ModelT:
        record = self.model(**fields)
        self.db.add(record)
        await self._commit()
        await self.db.refresh(record)
        return record

    async def update(self, key: Any, fields: Dict[str, Any]) -> ModelT:
        record = await self.find_by_key(key)
        if record is None:
            raise NotFoundError(self.not_found_message)

        for name, value in fields.items():
            setattr(record, name, value)

        await self._commit()
        await self.db.refresh(record)
        return record

    async def delete(self, key: Any) -> ModelT:
        record = await self.find_by_key(key)
        if record is None:
            raise NotFoundError(self.not_found_message)

        await self.db.delete(record)
        await self._commit()
        return record

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(
                f"Unique constraint violated on {self.model.__tablename__}",
                extra={"error": str(e.orig)}
            )
            raise ConstraintViolationError(self.conflict_message) from e
