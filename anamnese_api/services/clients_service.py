from __future__ import annotations

import logging
import math
from typing import Any, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from anamnese_api.config import LIST_DEFAULT_PAGE_SIZE, LIST_PAGE_SIZES, settings
from anamnese_api.infra.models import FichaAnamneseORM
from anamnese_api.services.cpf import CPF_LENGTH, normalize_cpf
from anamnese_api.services.errors import StorageError, ValidationError

logger = logging.getLogger(__name__)

SEARCH_MIN_CHARS = 2
SEARCH_MIN_CPF_DIGITS = 3


# helpers
def _parse_int(value: Any) -> Optional[int]:
    # query string chega como texto; lixo vira None
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    raw = str(value).strip()
    sign = -1 if raw[:1] == "-" else 1
    if raw[:1] in ("+", "-"):
        raw = raw[1:]
    if not (raw.isascii() and raw.isdigit()):
        return None
    return sign * int(raw)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def normalize_page(page: Any) -> int:
    page = _parse_int(page)
    if page is None or page < 1:
        return 1
    return page


def normalize_page_size(limit: Any) -> int:
    """Encaixa no tamanho permitido mais próximo (empate vai para o menor)."""
    limit = _parse_int(limit)
    if limit is None or limit < 1:
        return LIST_DEFAULT_PAGE_SIZE
    if limit in LIST_PAGE_SIZES:
        return limit
    return min(LIST_PAGE_SIZES, key=lambda size: (abs(size - limit), size))


def normalize_search_limit(limit: Any) -> int:
    limit = _parse_int(limit)
    if limit is None:
        return settings.SEARCH_DEFAULT_LIMIT
    return max(1, min(limit, settings.SEARCH_MAX_LIMIT))


def _valid_rows():
    # linhas antigas com nome/cpf vazios ficam de fora
    return (
        FichaAnamneseORM.nome.is_not(None),
        FichaAnamneseORM.cpf.is_not(None),
        func.trim(FichaAnamneseORM.nome) != "",
        func.trim(FichaAnamneseORM.cpf) != "",
    )


def list_clients(
    db: Session,
    *,
    page: Any = 1,
    limit: Any = LIST_DEFAULT_PAGE_SIZE,
    professional_id: Optional[int] = None,
) -> Tuple[list[FichaAnamneseORM], dict[str, int]]:
    page = normalize_page(page)
    limit = normalize_page_size(limit)

    stmt = select(FichaAnamneseORM).where(*_valid_rows())
    if professional_id is not None:
        stmt = stmt.where(FichaAnamneseORM.id_profissional == professional_id)

    try:
        total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
        items = db.execute(
            stmt.order_by(func.lower(FichaAnamneseORM.nome).asc(), FichaAnamneseORM.id.asc())
            .offset((page - 1) * limit)
            .limit(limit)
        ).scalars().all()
    except SQLAlchemyError as e:
        logger.exception("[clients] erro ao listar clientes")
        raise StorageError("Erro ao listar clientes.", detail=str(e))

    pagination = {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": math.ceil(total / limit) if total else 0,
    }
    return list(items), pagination


def search_clients(
    db: Session,
    q: Optional[str],
    *,
    limit: Any = None,
    professional_id: Optional[int] = None,
) -> list[FichaAnamneseORM]:
    query = (q or "").strip()
    if len(query) < SEARCH_MIN_CHARS:
        return []

    limit = normalize_search_limit(limit)
    digits = normalize_cpf(query)
    only_digits = query.isdigit()

    name_match = FichaAnamneseORM.nome.ilike(f"%{_escape_like(query)}%", escape="\\")
    stmt = select(FichaAnamneseORM)

    if only_digits and len(digits) >= SEARCH_MIN_CPF_DIGITS:
        stmt = stmt.where(FichaAnamneseORM.cpf.like(f"%{digits}%"))
    elif len(digits) >= SEARCH_MIN_CPF_DIGITS:
        stmt = stmt.where(or_(name_match, FichaAnamneseORM.cpf.like(f"%{digits}%")))
    else:
        stmt = stmt.where(name_match)

    if professional_id is not None:
        stmt = stmt.where(FichaAnamneseORM.id_profissional == professional_id)

    stmt = stmt.order_by(func.lower(FichaAnamneseORM.nome).asc(), FichaAnamneseORM.id.asc()).limit(limit)

    try:
        return list(db.execute(stmt).scalars().all())
    except SQLAlchemyError as e:
        logger.exception("[clients] erro na busca q=%r", query)
        raise StorageError("Erro ao buscar clientes.", detail=str(e))


def get_client(
    db: Session,
    *,
    cpf: Optional[str] = None,
    client_id: Optional[int] = None,
    professional_id: Optional[int] = None,
) -> Optional[FichaAnamneseORM]:
    stmt = select(FichaAnamneseORM)

    if cpf is not None and cpf.strip():
        cpf_digits = normalize_cpf(cpf)
        if len(cpf_digits) != CPF_LENGTH:
            raise ValidationError("CPF inválido")
        stmt = stmt.where(FichaAnamneseORM.cpf == cpf_digits)
    elif client_id is not None:
        if client_id < 1:
            raise ValidationError("id inválido")
        stmt = stmt.where(FichaAnamneseORM.id == client_id)
    else:
        raise ValidationError("CPF ou id é obrigatório")

    if professional_id is not None:
        stmt = stmt.where(FichaAnamneseORM.id_profissional == professional_id)

    try:
        return db.execute(stmt.order_by(FichaAnamneseORM.id.asc()).limit(1)).scalars().first()
    except SQLAlchemyError as e:
        logger.exception("[clients] erro ao consultar cliente")
        raise StorageError("Erro ao buscar cliente.", detail=str(e))
