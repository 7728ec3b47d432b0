import logging
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from core.passwords import hash_password_async
from models.user import User
from repositories.user_repository import UserRepository
from schemas.user import UserCreate, UserUpdate, UserWhere
from services.exceptions import InvalidArgumentError, NotFoundError

logger = logging.getLogger(__name__)

EMAIL_IN_USE = "Já encontramos uma conta com este e-mail !"
NUMBER_IN_USE = "Já encontramos uma conta com este número !"
PASSWORD_NOT_STRING = "A senha deve ser uma string"
USER_NOT_FOUND = "Utilizador não encontrado"


class UserService:
    def __init__(self, db: AsyncSession, repository: Optional[UserRepository] = None):
        self.db = db
        self.repository = repository or UserRepository(db)

    async def create_user(self, data: UserCreate) -> User:
        if await self.user(UserWhere(email=data.email)):
            raise InvalidArgumentError(EMAIL_IN_USE)

        if await self.user(UserWhere(number=data.number)):
            raise InvalidArgumentError(NUMBER_IN_USE)

        fields = data.model_dump()
        fields["password"] = await hash_password_async(data.password)

        # A concurrent signup with the same email/number is rejected by the
        # unique constraints and surfaces as ConstraintViolationError
        user = await self.repository.insert(fields)
        logger.info("User created", extra={"user_id": user.id, "role": user.role})
        return user

    async def user(self, where: UserWhere) -> Optional[User]:
        if where.id is not None:
            return await self.repository.find_by_key(where.id)
        if where.email is not None:
            return await self.repository.find_first(User.email == where.email)
        return await self.repository.find_first(User.number == where.number)

    async def update_user(self, where: UserWhere, data: UserUpdate) -> User:
        existing = await self._require(where)
        return await self.repository.update(existing.id, data.model_dump(exclude_unset=True))

    async def update_password(self, where: UserWhere, password: Any) -> User:
        if not isinstance(password, str):
            raise InvalidArgumentError(PASSWORD_NOT_STRING)

        existing = await self._require(where)
        hashed_password = await hash_password_async(password)
        return await self.repository.update(existing.id, {"password": hashed_password})

    async def delete_user(self, where: UserWhere) -> User:
        existing = await self._require(where)
        return await self.repository.delete(existing.id)

    async def _require(self, where: UserWhere) -> User:
        existing = await self.user(where)
        if not existing:
            raise NotFoundError(USER_NOT_FOUND)
        return existing
