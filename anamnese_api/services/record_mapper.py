from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from anamnese_api.services.cpf import normalize_cpf


TERMOS_ACEITOS = "S"
TERMOS_NAO_ACEITOS = "N"

DECLARACOES = (
    "veracidadeInformacoes",
    "seguirCuidados",
    "permanenciaTatuagem",
    "condicoesHigienicas",
)


# helpers
def as_text(value: Any) -> str:
    """Escalar -> str. Nunca devolve None."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def as_document(value: Any) -> dict[str, Any]:
    # listas e escalares viram {}
    if isinstance(value, dict):
        return dict(value)
    return {}


def coerce_professional_id(value: Any) -> Optional[int]:
    """Inteiro positivo ou None (bool, texto não numérico, zero e negativos)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        return int(value) if value > 0 else None
    if isinstance(value, str):
        raw = value.strip()
        # "²".isdigit() é True, mas int("²") falha
        if not (raw.isascii() and raw.isdigit()):
            return None
        n = int(raw)
        return n if n > 0 else None
    return None


def compute_termos(aceite_termos: Any, declaracoes: Any) -> str:
    if aceite_termos is not True:
        return TERMOS_NAO_ACEITOS
    if not isinstance(declaracoes, dict) or not declaracoes:
        return TERMOS_NAO_ACEITOS
    # declaração ausente conta como não aceita
    if all(declaracoes.get(key) is True for key in DECLARACOES):
        return TERMOS_ACEITOS
    return TERMOS_NAO_ACEITOS


def map_to_storage(
    submission: Mapping[str, Any],
    professional_id: Any = None,
    *,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """
    Monta o registro da ficha a partir do formulário plano.

    submission usa as chaves do formulário (camelCase). O retorno tem as
    colunas de ficha_anamnese: dados_cliente, avaliacao e info_tattoo são
    documentos JSON; termos é 'S' só com aceite e todas as declarações true.
    """
    g = submission.get

    dados_cliente = {
        "endereco": as_text(g("endereco")),
        "rg": as_text(g("rg")),
        "dataNascimento": as_text(g("dataNascimento")),
        "idade": as_text(g("idade")),
        "comoNosConheceu": as_document(g("comoNosConheceu")),
        "telefone": as_text(g("telefone")),
        "celular": as_text(g("celular")),
        "email": as_text(g("email")),
    }

    avaliacao = {
        "avaliacaoMedica": as_document(g("avaliacaoMedica")),
        "outrasQuestoesMedicas": as_document(g("outrasQuestoesMedicas")),
        "outroProblema": as_text(g("outroProblema")),
        "tipoSanguineo": as_text(g("tipoSanguineo")),
    }

    declaracoes = as_document(g("declaracoes"))
    info_tattoo = {
        "procedimento": as_document(g("procedimento")),
        "declaracoes": declaracoes,
    }

    return {
        "nome": as_text(g("nome")).strip(),
        "cpf": normalize_cpf(g("cpf")),
        "dados_cliente": dados_cliente,
        "avaliacao": avaliacao,
        "info_tattoo": info_tattoo,
        "termos": compute_termos(g("aceiteTermos"), declaracoes),
        "data_preenchimento_ficha": now or datetime.now(timezone.utc),
        "id_profissional": coerce_professional_id(professional_id),
    }
