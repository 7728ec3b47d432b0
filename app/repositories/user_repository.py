from models.user import User
from repositories.base import SQLAlchemyRepository


class UserRepository(SQLAlchemyRepository[User]):
    model = User
    not_found_message = "Utilizador não encontrado"
    conflict_message = "Já encontramos uma conta com este e-mail ou número !"
