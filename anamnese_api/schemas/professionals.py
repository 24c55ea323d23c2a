from __future__ import annotations

from typing import Optional

from anamnese_api.schemas.common import CamelModel, MessageOut


# entradas como Optional: campos faltando viram 400 com mensagem no serviço
class ProfessionalCreate(CamelModel):
    nome: Optional[str] = None
    email: Optional[str] = None
    senha: Optional[str] = None
    telefone: Optional[str] = None


class LoginIn(CamelModel):
    email: Optional[str] = None
    senha: Optional[str] = None


class PasswordResetIn(CamelModel):
    email: Optional[str] = None
    nova_senha: Optional[str] = None


class EmailCheckIn(CamelModel):
    email: Optional[str] = None


class ProfessionalOut(CamelModel):
    id: int
    nome: str
    email: str


class ProfessionalCreatedOut(MessageOut):
    data: ProfessionalOut


class TokenOut(MessageOut):
    token: str
    professional: ProfessionalOut


class SessionOut(MessageOut):
    authenticated: bool = True
    professional: ProfessionalOut


class EmailCheckOut(MessageOut):
    exists: bool
