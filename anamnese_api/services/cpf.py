"""
Normalização e validação de CPF (Cadastro de Pessoas Físicas).

O CPF tem 11 dígitos, sendo os dois últimos dígitos verificadores.
"""
from __future__ import annotations

import re
from typing import Any

_NON_DIGITS = re.compile(r"[^0-9]")

CPF_LENGTH = 11


def normalize_cpf(value: Any) -> str:
    """
    Remove tudo que não for dígito decimal.
    Exemplo: '529.982.247-25' -> '52998224725'. None/vazio -> ''.
    Não garante 11 dígitos: quem precisa disso confere o tamanho.
    """
    if value is None or value == "":
        return ""
    return _NON_DIGITS.sub("", str(value))


def _check_digit(digits: str, first_weight: int) -> int:
    total = sum(int(d) * w for d, w in zip(digits, range(first_weight, 1, -1)))
    remainder = (total * 10) % 11
    return 0 if remainder >= 10 else remainder


def is_valid_cpf(value: Any) -> bool:
    cpf = normalize_cpf(value)
    if len(cpf) != CPF_LENGTH:
        return False

    # 000.000.000-00, 111.111.111-11, ... passam no cálculo mas não existem
    if cpf == cpf[0] * CPF_LENGTH:
        return False

    if _check_digit(cpf[:9], 10) != int(cpf[9]):
        return False
    return _check_digit(cpf[:10], 11) == int(cpf[10])


def format_cpf(value: Any) -> str:
    cpf = normalize_cpf(value)
    if len(cpf) != CPF_LENGTH:
        return cpf
    return f"{cpf[:3]}.{cpf[3:6]}.{cpf[6:9]}-{cpf[9:]}"
