from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import ConfigDict, field_validator

from anamnese_api.schemas.common import CamelModel, MessageOut

Scalar = Optional[Union[str, int, float, bool]]

TIPOS_SANGUINEOS = ("O-", "O+", "A-", "A+", "B-", "B+", "AB-", "AB+")


class AnamneseSubmission(CamelModel):
    """
    Ficha enviada pelo formulário.

    Chaves desconhecidas são recusadas. Os blocos aninhados aceitam qualquer
    valor aqui: o mapeamento troca o que não for objeto por {}.
    """

    model_config = ConfigDict(extra="forbid")

    # dados pessoais
    nome: Scalar = None
    cpf: Scalar = None
    endereco: Scalar = None
    rg: Scalar = None
    data_nascimento: Scalar = None
    idade: Scalar = None
    como_nos_conheceu: Optional[Any] = None
    telefone: Scalar = None
    celular: Scalar = None
    email: Scalar = None

    # avaliação médica
    avaliacao_medica: Optional[Any] = None
    outras_questoes_medicas: Optional[Any] = None
    outro_problema: Scalar = None
    tipo_sanguineo: Scalar = None

    # tatuagem e consentimento
    procedimento: Optional[Any] = None
    declaracoes: Optional[Any] = None
    aceite_termos: Optional[bool] = False

    professional_id: Scalar = None

    @field_validator("tipo_sanguineo")
    @classmethod
    def _tipo_sanguineo(cls, v: Scalar) -> Scalar:
        if v is None or v == "":
            return v
        tipo = str(v).strip().upper()
        if tipo and tipo not in TIPOS_SANGUINEOS:
            raise ValueError("tipoSanguineo inválido")
        return tipo

    def as_form(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class SubmissionData(CamelModel):
    id: int
    professional_id: Optional[int] = None


class SubmissionOut(MessageOut):
    data: SubmissionData
