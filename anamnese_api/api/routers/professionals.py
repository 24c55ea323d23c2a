from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from anamnese_api.api.auth_deps import get_token
from anamnese_api.api.deps import DBSession
from anamnese_api.schemas.common import MessageOut
from anamnese_api.schemas.professionals import (
    EmailCheckIn,
    EmailCheckOut,
    LoginIn,
    PasswordResetIn,
    ProfessionalCreate,
    ProfessionalCreatedOut,
    ProfessionalOut,
    SessionOut,
    TokenOut,
)
from anamnese_api.services import professional_service

router = APIRouter()


@router.post("", response_model=ProfessionalCreatedOut, status_code=201)
def signup(payload: ProfessionalCreate, db: Session = DBSession):
    # confirmação de senha é feita no front
    professional = professional_service.create_professional(
        db,
        nome=payload.nome,
        email=payload.email,
        senha=payload.senha,
        telefone=payload.telefone,
    )
    return ProfessionalCreatedOut(
        message="Conta criada com sucesso!",
        data=ProfessionalOut.model_validate(professional),
    )


@router.post("/session", response_model=TokenOut)
def login(payload: LoginIn, db: Session = DBSession):
    professional, token = professional_service.authenticate(
        db, email=payload.email, senha=payload.senha
    )
    return TokenOut(
        message="Autenticação realizada com sucesso!",
        token=token,
        professional=ProfessionalOut.model_validate(professional),
    )


@router.get("/session", response_model=SessionOut)
def check_session(
    db: Session = DBSession,
    token: Optional[str] = Depends(get_token),
):
    professional = professional_service.validate_session(db, token)
    return SessionOut(
        message="Sessão válida",
        professional=ProfessionalOut.model_validate(professional),
    )


@router.post("/password", response_model=MessageOut)
def reset_password(payload: PasswordResetIn, db: Session = DBSession):
    professional_service.reset_password(
        db, email=payload.email, nova_senha=payload.nova_senha
    )
    return MessageOut(message="Senha redefinida com sucesso!")


@router.post("/email-check", response_model=EmailCheckOut)
def email_check(payload: EmailCheckIn, db: Session = DBSession):
    exists = professional_service.email_exists(db, payload.email)
    return EmailCheckOut(
        message="Email verificado com sucesso" if exists else "Email não encontrado",
        exists=exists,
    )
