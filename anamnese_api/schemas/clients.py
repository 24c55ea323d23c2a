from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from anamnese_api.infra.models import FichaAnamneseORM
from anamnese_api.schemas.common import CamelModel, MessageOut
from anamnese_api.services.cpf import format_cpf


def _doc_text(doc: Any, key: str) -> Optional[str]:
    if not isinstance(doc, dict):
        return None
    value = doc.get(key)
    if value is None or value == "":
        return None
    return str(value)


class ClientSummary(CamelModel):
    id: int
    nome: str
    cpf: str
    cpf_formatado: str
    email: Optional[str] = None
    celular: Optional[str] = None
    data_nascimento: Optional[str] = None

    @classmethod
    def from_ficha(cls, ficha: FichaAnamneseORM) -> "ClientSummary":
        dados = ficha.dados_cliente or {}
        return cls(
            id=ficha.id,
            nome=ficha.nome,
            cpf=ficha.cpf,
            cpf_formatado=format_cpf(ficha.cpf),
            email=_doc_text(dados, "email"),
            celular=_doc_text(dados, "celular"),
            data_nascimento=_doc_text(dados, "dataNascimento"),
        )


class ClientRecordOut(CamelModel):
    id: int
    nome: str
    cpf: str
    dados_cliente: dict[str, Any]
    avaliacao: dict[str, Any]
    info_tattoo: dict[str, Any]
    termos: str
    data_preenchimento_ficha: datetime
    professional_id: Optional[int] = None

    @classmethod
    def from_ficha(cls, ficha: FichaAnamneseORM) -> "ClientRecordOut":
        return cls(
            id=ficha.id,
            nome=ficha.nome,
            cpf=ficha.cpf,
            dados_cliente=ficha.dados_cliente or {},
            avaliacao=ficha.avaliacao or {},
            info_tattoo=ficha.info_tattoo or {},
            termos=ficha.termos,
            data_preenchimento_ficha=ficha.data_preenchimento_ficha,
            professional_id=ficha.id_profissional,
        )


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class ClientListOut(MessageOut):
    data: list[ClientSummary]
    pagination: Pagination


class ClientSearchOut(MessageOut):
    data: list[ClientSummary]


class ClientLookupOut(MessageOut):
    data: Optional[ClientRecordOut] = None
