from typing import List, Optional, Sequence
import uuid

from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError

from docshare.core.db import Database
from docshare.db.models.user import User as UserModel
from docshare.domains.identity.entities import Identity


def name_key(name: str) -> str:
    """Ключ префиксного поиска: первое слово имени без учета регистра (в том числе не ASCII)"""
    parts = name.split()
    return parts[0].casefold() if parts else ""


class UserRepository:
    """Каталог пользователей поверх таблицы users"""

    def __init__(self, database: Database):
        self.database = database

    async def create(self, name: str, email: str, user_id: Optional[uuid.UUID] = None) -> Identity:
        """Создание пользователя (регистрация вне ядра, используется для начального наполнения)"""
        async with self.database.session() as session:
            db_user = UserModel(
                uuid=user_id or uuid.uuid4(), name=name, name_key=name_key(name), email=email.lower()
            )
            session.add(db_user)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise ValueError("User with this email already exists")
            await session.refresh(db_user)
            return self._to_domain(db_user)

    async def find_by_id(self, user_id: uuid.UUID) -> Optional[Identity]:
        """Получение пользователя по UUID"""
        async with self.database.session() as session:
            result = await session.execute(select(UserModel).where(UserModel.uuid == user_id))
            db_user = result.scalar_one_or_none()
            return self._to_domain(db_user) if db_user else None

    async def find_by_email(self, email: str) -> Optional[Identity]:
        """Получение пользователя по email"""
        async with self.database.session() as session:
            result = await session.execute(
                select(UserModel).where(UserModel.email == email.strip().lower())
            )
            db_user = result.scalar_one_or_none()
            return self._to_domain(db_user) if db_user else None

    async def find_by_name_prefix(self, token: str) -> Sequence[Identity]:
        """Пользователи, у которых первое слово имени начинается с token (без учета регистра)"""
        if not token or any(ch.isspace() for ch in token):
            return []

        async with self.database.session() as session:
            result = await session.execute(
                select(UserModel)
                .where(UserModel.name_key.startswith(token.casefold(), autoescape=True))
                .order_by(UserModel.name.asc(), UserModel.uuid.asc())
            )
            return [self._to_domain(db_user) for db_user in result.scalars().all()]

    async def search(
        self, query: str, exclude_id: Optional[uuid.UUID] = None, limit: int = 10
    ) -> List[Identity]:
        """Поиск по подстроке имени или email"""
        query = query.strip()
        stmt = select(UserModel).where(
            or_(UserModel.name.icontains(query, autoescape=True), UserModel.email.icontains(query, autoescape=True))
        )
        if exclude_id is not None:
            stmt = stmt.where(UserModel.uuid != exclude_id)

        async with self.database.session() as session:
            result = await session.execute(stmt.order_by(UserModel.name.asc()).limit(limit))
            return [self._to_domain(db_user) for db_user in result.scalars().all()]

    def _to_domain(self, db_user: UserModel) -> Identity:
        """Преобразование модели БД в доменную сущность"""
        return Identity(id=db_user.uuid, display_name=db_user.name, email=db_user.email)
