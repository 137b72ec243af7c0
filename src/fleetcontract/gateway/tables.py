"""SQLAlchemy models for the contract store.

Table and column names follow the store schema shared with the other tools
that read it, so they stay in Portuguese.
"""

from datetime import date, datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from fleetcontract.gateway.base import Entity
from fleetcontract.models.catalog import ContractStatus, VehicleStatus


def _uuid() -> str:
    return str(uuid4())


class Base(DeclarativeBase):
    pass


class ClientRow(Base):
    __tablename__ = "clientes"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    nif: Mapped[str] = mapped_column(String, unique=True, index=True)
    nome_empresa: Mapped[str] = mapped_column(String)
    provincia: Mapped[str] = mapped_column(String)
    morada: Mapped[str] = mapped_column(String)
    email_empresa: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, onupdate=datetime.now)


class ContactRow(Base):
    __tablename__ = "responsaveis"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    cliente_id: Mapped[str] = mapped_column(ForeignKey("clientes.id", ondelete="CASCADE"), index=True)
    nome: Mapped[str] = mapped_column(String)
    cargo: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    email: Mapped[str] = mapped_column(String)
    telefone: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)


class ContractRow(Base):
    __tablename__ = "contratos"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    numero_contrato: Mapped[str] = mapped_column(String, unique=True, index=True)
    tipo: Mapped[str] = mapped_column(String(8))
    cliente_id: Mapped[str] = mapped_column(ForeignKey("clientes.id"), index=True)
    data_inicio: Mapped[date] = mapped_column(Date)
    data_fim: Mapped[date] = mapped_column(Date)
    duracao_meses: Mapped[int] = mapped_column(Integer)
    km_total: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    status: Mapped[str] = mapped_column(String, default=ContractStatus.ACTIVE.value)
    observacoes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, onupdate=datetime.now)


class VehicleRow(Base):
    __tablename__ = "viaturas"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    cliente_id: Mapped[str] = mapped_column(ForeignKey("clientes.id"), index=True)
    vin: Mapped[str] = mapped_column(String(17), unique=True, index=True)
    matricula: Mapped[str] = mapped_column(String)
    marca: Mapped[str] = mapped_column(String)
    modelo: Mapped[str] = mapped_column(String)
    ano_fabrico: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    tipo_operacao: Mapped[str] = mapped_column(String)
    km_atual: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    km_mensal_estimado: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    contrato_ativo_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("contratos.id", ondelete="SET NULL"), nullable=True
    )
    status: Mapped[str] = mapped_column(String, default=VehicleStatus.ACTIVE.value)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, onupdate=datetime.now)


class ContractVehicleRow(Base):
    __tablename__ = "contrato_viaturas"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    contrato_id: Mapped[str] = mapped_column(ForeignKey("contratos.id", ondelete="CASCADE"), index=True)
    viatura_id: Mapped[str] = mapped_column(ForeignKey("viaturas.id", ondelete="CASCADE"), index=True)
    km_contrato: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


class ContractSequenceRow(Base):
    """Last issued contract number per type and year."""

    __tablename__ = "contrato_sequencias"

    tipo: Mapped[str] = mapped_column(String(8), primary_key=True)
    ano: Mapped[int] = mapped_column(Integer, primary_key=True)
    ultimo: Mapped[int] = mapped_column(Integer, default=0)


MODELS: dict[Entity, type[Base]] = {
    Entity.CLIENT: ClientRow,
    Entity.CONTACT: ContactRow,
    Entity.VEHICLE: VehicleRow,
    Entity.CONTRACT: ContractRow,
    Entity.CONTRACT_VEHICLE: ContractVehicleRow,
}


def to_record(row: Base) -> dict:
    """Plain dict of a row's columns."""
    return {column.name: getattr(row, column.key) for column in row.__table__.columns}
