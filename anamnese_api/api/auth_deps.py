from __future__ import annotations

from typing import Optional

from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from anamnese_api.api.deps import DBSession
from anamnese_api.infra.models import ProfessionalORM
from anamnese_api.services.token_service import professional_id_from_token

TOKEN_COOKIE = "profissional_token"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/professionals/session", auto_error=False)


def get_token(
    bearer: Optional[str] = Depends(oauth2_scheme),
    cookie_token: Optional[str] = Cookie(default=None, alias=TOKEN_COOKIE),
) -> Optional[str]:
    """Token do header Authorization: Bearer ou do cookie profissional_token."""
    return bearer or cookie_token or None


def optional_professional_id(token: Optional[str] = Depends(get_token)) -> Optional[int]:
    # token ilegível = sem profissional autenticado, não é erro
    return professional_id_from_token(token)


def get_current_professional(
    professional_id: Optional[int] = Depends(optional_professional_id),
    db: Session = DBSession,
) -> ProfessionalORM:
    cred_exc = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Autenticação necessária",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if professional_id is None:
        raise cred_exc

    professional = db.get(ProfessionalORM, professional_id)
    if not professional:
        raise cred_exc
    return professional
