from __future__ import annotations

from typing import Any, Optional


class AnamneseError(Exception):
    """
    Erro de domínio convertido em resposta {success: false, message}.
    O handler registrado em main.py usa status_code e to_body().
    """

    status_code = 400

    def __init__(self, message: str, *, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_body(self, *, expose_detail: bool = False) -> dict[str, Any]:
        body: dict[str, Any] = {"success": False, "message": self.message}
        if expose_detail and self.detail:
            body["error"] = self.detail
        return body


class ValidationError(AnamneseError):
    status_code = 400


class AuthenticationError(AnamneseError):
    status_code = 401


class AuthorizationError(AnamneseError):
    status_code = 403


class NotFoundError(AnamneseError):
    status_code = 404

    def __init__(self, message: str, *, status_code: int = 404, detail: Optional[str] = None):
        super().__init__(message, detail=detail)
        self.status_code = status_code


class ConflictError(AnamneseError):
    status_code = 400


class StorageError(AnamneseError):
    status_code = 500
