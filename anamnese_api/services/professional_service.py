from __future__ import annotations

import logging
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from anamnese_api.config import settings
from anamnese_api.infra.models import ProfessionalORM
from anamnese_api.services.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from anamnese_api.services.token_service import encode_token, professional_id_from_token

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Email ou senha inválidos"


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def _check_password_length(senha: str) -> None:
    if len(senha) < settings.PASSWORD_MIN_LENGTH:
        raise ValidationError(
            f"A senha deve ter no mínimo {settings.PASSWORD_MIN_LENGTH} caracteres"
        )


def get_by_email(db: Session, email: str) -> Optional[ProfessionalORM]:
    try:
        return db.execute(
            select(ProfessionalORM).where(ProfessionalORM.email == normalize_email(email))
        ).scalars().first()
    except SQLAlchemyError as e:
        logger.exception("[professionals] erro ao buscar profissional")
        raise StorageError("Erro ao verificar profissional. Tente novamente.", detail=str(e))


def create_professional(
    db: Session,
    *,
    nome: Optional[str],
    email: Optional[str],
    senha: Optional[str],
    telefone: Optional[str] = None,
) -> ProfessionalORM:
    nome = (nome or "").strip()
    email = normalize_email(email)
    senha = senha or ""

    if not nome or not email or not senha:
        raise ValidationError("Nome, email e senha são obrigatórios")
    if "@" not in email:
        raise ValidationError("Email inválido")
    _check_password_length(senha)

    if get_by_email(db, email) is not None:
        raise ConflictError("Email já cadastrado.")

    professional = ProfessionalORM(
        nome=nome,
        email=email,
        senha=senha,
        telefone=(telefone or "").strip() or None,
    )
    db.add(professional)
    try:
        db.flush()
        db.commit()
    except IntegrityError:
        # corrida: outro cadastro com o mesmo email
        db.rollback()
        raise ConflictError("Email já cadastrado.")
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("[professionals] erro ao criar profissional")
        raise StorageError("Erro ao criar conta. Tente novamente.", detail=str(e))

    logger.info("[professionals] profissional %s criado", professional.id)
    return professional


def authenticate(
    db: Session,
    *,
    email: Optional[str],
    senha: Optional[str],
) -> Tuple[ProfessionalORM, str]:
    if not normalize_email(email) or not senha:
        raise ValidationError("Email e senha são obrigatórios")

    professional = get_by_email(db, email or "")
    # comparação em texto puro, como no cadastro
    if professional is None or professional.senha != senha:
        logger.info("[professionals] login recusado para %s", normalize_email(email))
        raise AuthenticationError(INVALID_CREDENTIALS)

    return professional, encode_token(professional)


def reset_password(db: Session, *, email: Optional[str], nova_senha: Optional[str]) -> ProfessionalORM:
    if not normalize_email(email) or not nova_senha:
        raise ValidationError("Email e nova senha são obrigatórios")
    _check_password_length(nova_senha)

    professional = get_by_email(db, email or "")
    if professional is None:
        raise NotFoundError("Profissional não encontrado")

    professional.senha = nova_senha
    try:
        db.flush()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("[professionals] erro ao redefinir senha")
        raise StorageError("Erro ao redefinir senha. Tente novamente.", detail=str(e))

    logger.info("[professionals] senha redefinida para profissional %s", professional.id)
    return professional


def email_exists(db: Session, email: Optional[str]) -> bool:
    if not normalize_email(email):
        raise ValidationError("Email é obrigatório")
    return get_by_email(db, email or "") is not None


def validate_session(db: Session, token: Optional[str]) -> ProfessionalORM:
    professional_id = professional_id_from_token(token)
    if professional_id is None:
        raise AuthenticationError("Sessão inválida.")

    try:
        professional = db.get(ProfessionalORM, professional_id)
    except SQLAlchemyError as e:
        logger.exception("[professionals] erro ao validar sessão")
        raise StorageError("Erro ao verificar autenticação.", detail=str(e))

    if professional is None:
        raise AuthenticationError("Sessão inválida.")
    return professional
