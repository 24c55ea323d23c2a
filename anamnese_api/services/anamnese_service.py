from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from anamnese_api.infra.models import FichaAnamneseORM, ProfessionalORM
from anamnese_api.services.cpf import format_cpf, is_valid_cpf, normalize_cpf
from anamnese_api.services.errors import (
    AuthorizationError,
    ConflictError,
    StorageError,
    ValidationError,
)
from anamnese_api.services.record_mapper import coerce_professional_id, map_to_storage

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "Já existe uma ficha de anamnese preenchida para este CPF"


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def resolve_professional_id(
    db: Session,
    *,
    explicit: Any,
    authenticated: Optional[int],
) -> Optional[int]:
    """
    Decide a qual profissional a ficha pertence.

    - professionalId explícito precisa existir (400);
    - token e professionalId explícito precisam bater (403);
    - só token: usa o do token (o profissional ainda precisa existir);
    - nenhum: ficha sem profissional.
    """
    explicit_id: Optional[int] = None
    if not _is_blank(explicit):
        explicit_id = coerce_professional_id(explicit)
        if explicit_id is None:
            raise ValidationError("professionalId inválido.")
        if db.get(ProfessionalORM, explicit_id) is None:
            raise ValidationError("Profissional não encontrado.")

    if explicit_id is not None and authenticated is not None:
        if explicit_id != authenticated:
            raise AuthorizationError("professionalId não corresponde ao profissional autenticado.")
        return explicit_id

    if explicit_id is not None:
        return explicit_id

    if authenticated is not None:
        if db.get(ProfessionalORM, authenticated) is None:
            raise ValidationError("Profissional não encontrado.")
        return authenticated

    return None


def find_duplicate(db: Session, cpf: str, professional_id: Optional[int]) -> Optional[int]:
    stmt = select(FichaAnamneseORM.id).where(FichaAnamneseORM.cpf == cpf)
    if professional_id is None:
        stmt = stmt.where(FichaAnamneseORM.id_profissional.is_(None))
    else:
        stmt = stmt.where(FichaAnamneseORM.id_profissional == professional_id)
    return db.scalar(stmt.limit(1))


def submit_anamnese(
    db: Session,
    submission: Mapping[str, Any],
    *,
    token_professional_id: Optional[int] = None,
) -> FichaAnamneseORM:
    if _is_blank(submission.get("nome")) or _is_blank(submission.get("cpf")):
        raise ValidationError("Nome e CPF são obrigatórios")

    cpf = normalize_cpf(submission.get("cpf"))
    if not is_valid_cpf(cpf):
        logger.info("[anamnese] CPF inválido recebido: %r", submission.get("cpf"))
        raise ValidationError("CPF inválido")

    try:
        professional_id = resolve_professional_id(
            db,
            explicit=submission.get("professionalId"),
            authenticated=token_professional_id,
        )

        data = map_to_storage(submission, professional_id)

        if find_duplicate(db, cpf, professional_id) is not None:
            logger.info(
                "[anamnese] ficha duplicada cpf=%s profissional=%s",
                format_cpf(cpf), professional_id,
            )
            raise ConflictError(DUPLICATE_MESSAGE)

        ficha = FichaAnamneseORM(**data)
        db.add(ficha)
        db.flush()
        db.commit()
    except IntegrityError:
        # outra requisição inseriu o mesmo cpf/profissional entre a checagem e o insert
        db.rollback()
        logger.info("[anamnese] violação de unicidade cpf=%s", format_cpf(cpf))
        raise ConflictError(DUPLICATE_MESSAGE)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("[anamnese] erro ao salvar ficha")
        raise StorageError("Erro ao salvar a ficha. Tente novamente.", detail=str(e))

    logger.info(
        "[anamnese] ficha %s salva cpf=%s profissional=%s termos=%s",
        ficha.id, format_cpf(cpf), professional_id, ficha.termos,
    )
    return ficha
