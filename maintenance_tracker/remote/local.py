"""In-process backend on SQLAlchemy: same contract as the hosted service.

Used for local development, demos (see ``scripts/seed_data.py``) and tests.
Rows go in and come out as JSON-compatible dicts, and the PostgREST
``alias:table(col, ...)`` projection is honoured for embedded relations.
"""

import logging
import re
import uuid
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any

from jose import JWTError
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from maintenance_tracker.auth.jwt import DEFAULT_ALGORITHM, create_access_token, decode_token
from maintenance_tracker.auth.passwords import hash_password, verify_password
from maintenance_tracker.database import Base, transaction
from maintenance_tracker.models import Accommodation, AuthAccount, Task, User
from maintenance_tracker.remote.base import (
    AuthEvent,
    AuthUser,
    Filters,
    Order,
    RemoteDataService,
    RemoteServiceError,
    Row,
    RowNotFound,
    Session,
)

logger = logging.getLogger(__name__)

TABLES: dict[str, type[Base]] = {
    "accommodations": Accommodation,
    "tasks": Task,
    "users": User,
}

_EMBED = re.compile(r"(?P<alias>\w+)\s*:\s*(?P<table>\w+)\s*\((?P<columns>[^)]*)\)")


@dataclass(frozen=True)
class _Embed:
    alias: str
    table: str
    columns: tuple[str, ...] | None


@dataclass(frozen=True)
class _Projection:
    columns: tuple[str, ...] | None  # None means every column
    embeds: tuple[_Embed, ...]


def _split_columns(text: str) -> tuple[str, ...] | None:
    names = tuple(name.strip() for name in text.split(",") if name.strip())
    if not names or "*" in names:
        return None
    return names


def _parse_projection(columns: str) -> _Projection:
    embeds = tuple(
        _Embed(m.group("alias"), m.group("table"), _split_columns(m.group("columns")))
        for m in _EMBED.finditer(columns)
    )
    return _Projection(columns=_split_columns(_EMBED.sub("", columns)), embeds=embeds)


def _to_json(value: Any) -> Any:
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


def _column(model: type[Base], name: str):  # type: ignore[no-untyped-def]
    try:
        return model.__table__.columns[name]
    except KeyError:
        raise RemoteServiceError(
            f"column {model.__tablename__}.{name} does not exist",
            code="42703",
            status_code=400,
        ) from None


def _coerce(model: type[Base], name: str, value: Any) -> Any:
    """Convert a JSON value into what the column's Python type expects."""
    column = _column(model, name)
    if value is None:
        return None
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return value
    if isinstance(value, python_type):
        return value
    try:
        if python_type is uuid.UUID:
            return uuid.UUID(str(value))
        if python_type is datetime:
            return datetime.fromisoformat(str(value))
        if python_type is date:
            return date.fromisoformat(str(value))
        if python_type is Decimal:
            return Decimal(str(value))
    except (ValueError, InvalidOperation):
        raise RemoteServiceError(
            f'invalid input syntax for {model.__tablename__}.{name}: "{value}"',
            code="22P02",
            status_code=400,
        ) from None
    return value


def _serialize(obj: Base, columns: tuple[str, ...] | None) -> Row:
    table = obj.__table__
    names = columns or tuple(c.name for c in table.columns)
    row: Row = {}
    for name in names:
        _column(type(obj), name)
        row[name] = _to_json(getattr(obj, name))
    return row


class LocalDataService(RemoteDataService):
    """RemoteDataService backed by a SQL database through async SQLAlchemy."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        secret_key: str,
        algorithm: str = DEFAULT_ALGORITHM,
        session_ttl: timedelta = timedelta(minutes=60),
        engine: AsyncEngine | None = None,
    ) -> None:
        super().__init__()
        self._session_factory = session_factory
        self._engine = engine
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._session_ttl = session_ttl
        self._session: Session | None = None

    @asynccontextmanager
    async def _db(self) -> AsyncIterator[AsyncSession]:
        try:
            async with transaction(self._session_factory) as db:
                yield db
        except IntegrityError as exc:
            detail = str(exc.orig)
            if "FOREIGN KEY" in detail.upper():
                code = "23503"
            elif "UNIQUE" in detail.upper():
                code = "23505"
            else:
                code = "23000"
            raise RemoteServiceError(detail, code=code, status_code=409) from exc
        except SQLAlchemyError as exc:
            raise RemoteServiceError(str(exc), status_code=500) from exc

    @staticmethod
    def _model(table: str) -> type[Base]:
        try:
            return TABLES[table]
        except KeyError:
            raise RemoteServiceError(
                f'relation "public.{table}" does not exist',
                code="42P01",
                status_code=404,
            ) from None

    @staticmethod
    def _where(model: type[Base], filters: Filters | None) -> list:  # type: ignore[type-arg]
        clauses = []
        for name, value in (filters or {}).items():
            column = _column(model, name)
            coerced = _coerce(model, name, value)
            clauses.append(column.is_(None) if coerced is None else column == coerced)
        return clauses

    async def _rows(
        self,
        db: AsyncSession,
        model: type[Base],
        objects: Sequence[Base],
        projection: _Projection,
    ) -> list[Row]:
        rows = [_serialize(obj, projection.columns) for obj in objects]
        for embed in projection.embeds:
            target = self._model(embed.table)
            fk_name = self._foreign_key_to(model, target)
            keys = {getattr(obj, fk_name) for obj in objects} - {None}
            related: dict[Any, Base] = {}
            if keys:
                result = await db.execute(select(target).where(_column(target, "id").in_(keys)))
                related = {item.id: item for item in result.scalars()}
            for obj, row in zip(objects, rows):
                match = related.get(getattr(obj, fk_name))
                row[embed.alias] = _serialize(match, embed.columns) if match is not None else None
        return rows

    @staticmethod
    def _foreign_key_to(model: type[Base], target: type[Base]) -> str:
        for fk in model.__table__.foreign_keys:
            if fk.column.table.name == target.__tablename__:
                return fk.parent.name
        raise RemoteServiceError(
            f"Could not find a relationship between '{model.__tablename__}' and '{target.__tablename__}'",
            code="PGRST200",
            status_code=400,
        )

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    async def register_user(
        self,
        email: str,
        password: str,
        full_name: str,
        role: str = "supervisor",
        *,
        with_profile: bool = True,
    ) -> AuthUser:
        """Provision an auth account and, unless told otherwise, its profile row."""
        account = AuthAccount(email=email.strip().lower(), hashed_password=hash_password(password))
        async with self._db() as db:
            db.add(account)
            await db.flush()
            if with_profile:
                db.add(User(id=account.id, role=role, full_name=full_name))
                await db.flush()
        logger.info("Registered local account %s", account.id)
        return AuthUser(id=str(account.id), email=account.email)

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    async def get_session(self) -> Session | None:
        session = self._session
        if session is None:
            return None
        try:
            decode_token(session.access_token, self._secret_key, algorithm=self._algorithm)
        except JWTError:
            logger.info("Session for %s is no longer valid", session.user.id)
            self._session = None
            return None
        return session

    async def get_user(self) -> AuthUser | None:
        session = await self.get_session()
        return session.user if session is not None else None

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        async with self._db() as db:
            result = await db.execute(select(AuthAccount).where(AuthAccount.email == email.strip().lower()))
            account = result.scalar_one_or_none()

        if account is None or not verify_password(password, account.hashed_password):
            raise RemoteServiceError("Invalid login credentials", code="invalid_credentials", status_code=400)

        token, expires_at = create_access_token(
            {"sub": str(account.id), "email": account.email},
            self._secret_key,
            expires_delta=self._session_ttl,
            algorithm=self._algorithm,
        )
        self._session = Session(
            access_token=token,
            user=AuthUser(id=str(account.id), email=account.email),
            expires_at=expires_at,
        )
        logger.info("Signed in as %s", account.id)
        await self._emit(AuthEvent.SIGNED_IN, self._session)
        return self._session

    async def sign_out(self) -> None:
        if self._session is not None:
            logger.info("Signed out %s", self._session.user.id)
        self._session = None
        await self._emit(AuthEvent.SIGNED_OUT, None)

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    async def select(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Filters | None = None,
        order: Order | None = None,
    ) -> list[Row]:
        model = self._model(table)
        query = select(model).where(*self._where(model, filters))
        if order is not None:
            column = _column(model, order.column)
            query = query.order_by(column.desc() if order.descending else column.asc())
        async with self._db() as db:
            result = await db.execute(query)
            return await self._rows(db, model, list(result.scalars()), _parse_projection(columns))

    async def select_one(self, table: str, filters: Filters, *, columns: str = "*") -> Row:
        model = self._model(table)
        async with self._db() as db:
            result = await db.execute(select(model).where(*self._where(model, filters)))
            obj = result.scalar_one_or_none()
            if obj is None:
                raise RowNotFound()
            return (await self._rows(db, model, [obj], _parse_projection(columns)))[0]

    async def insert(self, table: str, row: Row, *, columns: str = "*") -> Row:
        model = self._model(table)
        obj = model(**{name: _coerce(model, name, value) for name, value in row.items()})
        async with self._db() as db:
            db.add(obj)
            await db.flush()
            await db.refresh(obj)
            return (await self._rows(db, model, [obj], _parse_projection(columns)))[0]

    async def update(self, table: str, filters: Filters, patch: Row, *, columns: str = "*") -> Row:
        model = self._model(table)
        async with self._db() as db:
            result = await db.execute(select(model).where(*self._where(model, filters)))
            obj = result.scalar_one_or_none()
            if obj is None:
                raise RowNotFound()
            for name, value in patch.items():
                setattr(obj, name, _coerce(model, name, value))
            await db.flush()
            await db.refresh(obj)
            return (await self._rows(db, model, [obj], _parse_projection(columns)))[0]

    async def delete(self, table: str, filters: Filters) -> None:
        model = self._model(table)
        async with self._db() as db:
            await db.execute(delete(model).where(*self._where(model, filters)))

    async def aclose(self) -> None:
        """Dispose the engine if this service was handed ownership of it."""
        if self._engine is not None:
            await self._engine.dispose()
