from __future__ import annotations

from typing import Optional, Union

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from anamnese_api.api.auth_deps import get_current_professional, optional_professional_id
from anamnese_api.api.deps import DBSession
from anamnese_api.infra.models import ProfessionalORM
from anamnese_api.schemas.clients import (
    ClientListOut,
    ClientLookupOut,
    ClientRecordOut,
    ClientSearchOut,
    ClientSummary,
    Pagination,
)
from anamnese_api.services import clients_service
from anamnese_api.services.errors import AuthorizationError

router = APIRouter()


@router.get("/search", response_model=ClientSearchOut)
def search_clients(
    db: Session = DBSession,
    q: Optional[str] = Query(default=None, description="Busca por nome ou CPF"),
    limit: Optional[str] = Query(default=None),
    professional: ProfessionalORM = Depends(get_current_professional),
):
    """Autocomplete de clientes do profissional autenticado."""
    if len((q or "").strip()) < clients_service.SEARCH_MIN_CHARS:
        return ClientSearchOut(message="Digite pelo menos 2 caracteres para buscar", data=[])

    fichas = clients_service.search_clients(
        db, q, limit=limit, professional_id=professional.id
    )
    if not fichas:
        return ClientSearchOut(message="Nenhum cliente encontrado", data=[])

    return ClientSearchOut(
        message="Clientes encontrados com sucesso!",
        data=[ClientSummary.from_ficha(f) for f in fichas],
    )


def _lookup(
    db: Session,
    *,
    cpf: Optional[str],
    client_id: Optional[int],
    professional_id: Optional[int],
) -> ClientLookupOut:
    ficha = clients_service.get_client(
        db, cpf=cpf, client_id=client_id, professional_id=professional_id
    )
    if ficha is None:
        return ClientLookupOut(message="Cliente não encontrado", data=None)
    return ClientLookupOut(
        message="Cliente encontrado com sucesso!",
        data=ClientRecordOut.from_ficha(ficha),
    )


def _list(
    db: Session,
    *,
    professional: ProfessionalORM,
    page: Optional[str],
    limit: Optional[str],
    professional_filter: Optional[int],
) -> ClientListOut:
    if professional_filter is not None and professional_filter != professional.id:
        raise AuthorizationError("Sem permissão para listar clientes de outro profissional.")

    fichas, pagination = clients_service.list_clients(
        db, page=page, limit=limit, professional_id=professional.id
    )
    return ClientListOut(
        message="Clientes listados com sucesso!" if fichas else "Nenhum cliente cadastrado",
        data=[ClientSummary.from_ficha(f) for f in fichas],
        pagination=Pagination(**pagination),
    )


@router.get("", response_model=Union[ClientLookupOut, ClientListOut])
def get_or_list_clients(
    db: Session = DBSession,
    cpf: Optional[str] = Query(default=None),
    id: Optional[int] = Query(default=None),
    page: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
    professional_filter: Optional[int] = Query(default=None, alias="professionalId"),
    token_professional_id: Optional[int] = Depends(optional_professional_id),
):
    """
    Com cpf ou id: consulta uma ficha. Sem eles: listagem paginada dos
    clientes do profissional autenticado.
    """
    if cpf is not None or id is not None:
        return _lookup(
            db, cpf=cpf, client_id=id, professional_id=token_professional_id
        )

    professional = get_current_professional(token_professional_id, db)
    return _list(
        db,
        professional=professional,
        page=page,
        limit=limit,
        professional_filter=professional_filter,
    )
