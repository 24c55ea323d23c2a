from __future__ import annotations

import base64
import binascii
import json
import time
from typing import Any, Optional

from anamnese_api.infra.models import ProfessionalORM
from anamnese_api.services.record_mapper import coerce_professional_id


# Token do profissional: base64 de {"id", "nome", "email", "timestamp"}.
# Sem assinatura: qualquer um consegue forjar (ver DESIGN.md).

def encode_token(professional: ProfessionalORM) -> str:
    payload = {
        "id": professional.id,
        "nome": professional.nome,
        "email": professional.email,
        "timestamp": int(time.time() * 1000),
    }
    raw = json.dumps(payload, ensure_ascii=False).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def decode_token(token: Optional[str]) -> Optional[dict[str, Any]]:
    token = (token or "").strip()
    if not token:
        return None

    # aceita alfabeto url-safe e padding faltando
    token = token.replace("-", "+").replace("_", "/")
    token += "=" * (-len(token) % 4)

    try:
        raw = base64.b64decode(token, validate=True)
        data = json.loads(raw.decode("utf-8"))
    except (binascii.Error, ValueError):
        return None

    if not isinstance(data, dict):
        return None
    return data


def professional_id_from_token(token: Optional[str]) -> Optional[int]:
    data = decode_token(token)
    if data is None:
        return None
    return coerce_professional_id(data.get("id"))
