"""SQLAlchemy backend.

Blocking database work runs in a worker thread so the async submission flow
can await each call. Every call uses its own session and commits on success.
"""

import asyncio
import logging
from contextlib import contextmanager
from datetime import date
from typing import Callable, Iterator, Optional

from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from fleetcontract.exceptions import (
    DuplicateKeyError,
    GatewayError,
    IdentifierGenerationError,
    RecordNotFoundError,
)
from fleetcontract.gateway.base import (
    BUSINESS_KEYS,
    Entity,
    IdentifierGenerator,
    PersistenceGateway,
    Record,
    business_key,
    format_contract_number,
)
from fleetcontract.gateway.tables import MODELS, Base, ContractSequenceRow, to_record
from fleetcontract.models.catalog import ContractType

logger = logging.getLogger(__name__)


class SqlGateway(PersistenceGateway):
    """Persistence gateway over any SQLAlchemy-supported database."""

    def __init__(self, url: Optional[str] = None, engine: Optional[Engine] = None) -> None:
        """Initialize the gateway.

        Args:
            url: SQLAlchemy database URL
            engine: Existing engine (takes precedence over url)

        Raises:
            GatewayError: If the URL cannot be parsed or its driver is missing
        """
        if engine is None:
            if not url:
                raise ValueError("A database URL or engine is required")
            try:
                engine = create_engine(url, pool_pre_ping=True)
            except (SQLAlchemyError, ImportError) as e:
                # ImportError: dialect driver not installed
                raise GatewayError("Invalid database URL", str(e)) from e
        self.engine = engine
        self._sessions = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    def create_schema(self) -> None:
        """Create any missing tables.

        Raises:
            GatewayError: If the database cannot be reached
        """
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            logger.debug("Schema creation failed: %s", e)
            raise GatewayError("Could not open database", str(e)) from e

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Session that commits on success and maps driver errors to GatewayError."""
        session = self._sessions()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.debug("Database error: %s", e)
            raise GatewayError("Database error", str(e)) from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ─────────────────────────────────────────────────────────────────────
    # PersistenceGateway
    # ─────────────────────────────────────────────────────────────────────

    async def find_by_key(self, entity: Entity, key: str) -> Optional[Record]:
        return await asyncio.to_thread(self._find_by_key, entity, key)

    async def create(self, entity: Entity, fields: Record) -> Record:
        return await asyncio.to_thread(self._create, entity, fields)

    async def update(self, entity: Entity, record_id: str, fields: Record) -> Record:
        return await asyncio.to_thread(self._update, entity, record_id, fields)

    async def delete(self, entity: Entity, record_id: str) -> None:
        await asyncio.to_thread(self._delete, entity, record_id)

    async def close(self) -> None:
        self.engine.dispose()

    def _find_by_key(self, entity: Entity, key: str) -> Optional[Record]:
        model = MODELS[entity]
        column = getattr(model, business_key(entity))
        with self.session() as session:
            row = session.scalars(select(model).where(column == key)).first()
            return to_record(row) if row is not None else None

    def _create(self, entity: Entity, fields: Record) -> Record:
        model = MODELS[entity]
        row = model(**fields)
        try:
            with self.session() as session:
                session.add(row)
                session.flush()
                record = to_record(row)
        except GatewayError as e:
            if isinstance(e.__cause__, IntegrityError) and entity in BUSINESS_KEYS:
                raise DuplicateKeyError(entity.value, str(fields.get(BUSINESS_KEYS[entity]))) from e
            raise
        return record

    def _update(self, entity: Entity, record_id: str, fields: Record) -> Record:
        with self.session() as session:
            row = session.get(MODELS[entity], record_id)
            if row is None:
                raise RecordNotFoundError(entity.value, record_id)
            for name, value in fields.items():
                setattr(row, name, value)
            session.flush()
            return to_record(row)

    def _delete(self, entity: Entity, record_id: str) -> None:
        with self.session() as session:
            row = session.get(MODELS[entity], record_id)
            if row is None:
                raise RecordNotFoundError(entity.value, record_id)
            session.delete(row)


class SqlNumberGenerator(IdentifierGenerator):
    """Contract numbers from the contrato_sequencias table.

    The counter row is read and bumped in one transaction, so a number is
    never issued twice for the same type and year.
    """

    def __init__(self, gateway: SqlGateway, clock: Callable[[], date] = date.today) -> None:
        self._gateway = gateway
        self._clock = clock

    async def next(self, contract_type: ContractType) -> str:
        return await asyncio.to_thread(self._next, contract_type)

    def _next(self, contract_type: ContractType) -> str:
        year = self._clock().year
        try:
            with self._gateway.session() as session:
                row = session.scalars(
                    select(ContractSequenceRow)
                    .where(
                        ContractSequenceRow.tipo == contract_type.value,
                        ContractSequenceRow.ano == year,
                    )
                    .with_for_update()
                ).first()
                if row is None:
                    row = ContractSequenceRow(tipo=contract_type.value, ano=year, ultimo=0)
                    session.add(row)
                row.ultimo += 1
                sequence = row.ultimo
        except GatewayError as e:
            raise IdentifierGenerationError(contract_type.value, e.details) from e
        return format_contract_number(contract_type, year, sequence)
