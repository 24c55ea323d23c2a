from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, List

from sqlalchemy import (
    String, Integer, DateTime, ForeignKey, JSON,
    UniqueConstraint, Index, func, text
)
from sqlalchemy.dialects.postgresql import JSONB

from sqlalchemy.orm import (
    DeclarativeBase, Mapped, mapped_column, relationship
)


# base
class Base(DeclarativeBase):
    pass


# JSONB no Postgres, JSON nos demais (sqlite nos testes)
JSONDocument = JSON().with_variant(JSONB(), "postgresql")


# models
class ProfessionalORM(Base):
    __tablename__ = "profissional_anamnese"
    __table_args__ = (
        UniqueConstraint("email", name="uq_profissional_email"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    nome: Mapped[str] = mapped_column(String(140), nullable=False)
    email: Mapped[str] = mapped_column(String(160), nullable=False)
    # texto puro, herdado do sistema original (ver DESIGN.md)
    senha: Mapped[str] = mapped_column(String(255), nullable=False)
    telefone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    fichas: Mapped[List["FichaAnamneseORM"]] = relationship(back_populates="professional")


class FichaAnamneseORM(Base):
    __tablename__ = "ficha_anamnese"
    __table_args__ = (
        # um CPF por profissional
        Index("uq_ficha_cpf_profissional", "cpf", "id_profissional", unique=True),
        # um CPF entre as fichas sem profissional
        Index(
            "uq_ficha_cpf_sem_profissional",
            "cpf",
            unique=True,
            postgresql_where=text("id_profissional IS NULL"),
            sqlite_where=text("id_profissional IS NULL"),
        ),
        Index("ix_ficha_nome", "nome"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    nome: Mapped[str] = mapped_column(String(200), nullable=False)
    cpf: Mapped[str] = mapped_column(String(11), nullable=False)

    dados_cliente: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False, default=dict)
    avaliacao: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False, default=dict)
    info_tattoo: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False, default=dict)

    termos: Mapped[str] = mapped_column(String(1), nullable=False, default="N")
    data_preenchimento_ficha: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    id_profissional: Mapped[Optional[int]] = mapped_column(
        ForeignKey("profissional_anamnese.id"),
        nullable=True,
        index=True,
    )

    professional: Mapped[Optional["ProfessionalORM"]] = relationship(back_populates="fichas")
