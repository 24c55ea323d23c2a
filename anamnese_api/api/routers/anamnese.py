from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from anamnese_api.api.auth_deps import optional_professional_id
from anamnese_api.api.deps import DBSession
from anamnese_api.schemas.anamnese import AnamneseSubmission, SubmissionData, SubmissionOut
from anamnese_api.services.anamnese_service import submit_anamnese

router = APIRouter()


@router.post("", response_model=SubmissionOut, status_code=201)
def create_submission(
    payload: AnamneseSubmission,
    db: Session = DBSession,
    token_professional_id: Optional[int] = Depends(optional_professional_id),
):
    """
    Recebe a ficha de anamnese. O profissional vem do token (opcional) ou do
    campo professionalId; os dois juntos precisam bater.
    """
    ficha = submit_anamnese(
        db,
        payload.as_form(),
        token_professional_id=token_professional_id,
    )
    return SubmissionOut(
        message="Ficha de anamnese salva com sucesso!",
        data=SubmissionData(id=ficha.id, professional_id=ficha.id_profissional),
    )
