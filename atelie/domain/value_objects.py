# atelie/domain/value_objects.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation

from .erros import ErroValidacao


def valor_monetario(raw: object, campo: str = "valor") -> Decimal:
    """Converte para Decimal. Nunca float binario, nunca negativo.

    Floats passam por str() para nao herdar o erro de representacao binaria.
    """
    if isinstance(raw, bool):
        raise ErroValidacao(f"{campo} invalido: {raw!r}")
    try:
        valor = raw if isinstance(raw, Decimal) else Decimal(str(raw))
    except (InvalidOperation, ValueError) as err:
        raise ErroValidacao(f"{campo} invalido: {raw!r}") from err
    if not valor.is_finite():
        raise ErroValidacao(f"{campo} invalido: {raw!r}")
    if valor < Decimal("0"):
        raise ErroValidacao(f"{campo} nao pode ser negativo")
    return valor


def texto_obrigatorio(raw: str, campo: str) -> str:
    """Texto nao-vazio, trimado."""
    stripped = (raw or "").strip()
    if not stripped:
        raise ErroValidacao(f"{campo} nao pode ser vazio")
    return stripped


def texto_opcional(raw: str | None) -> str | None:
    if raw is None:
        return None
    stripped = raw.strip()
    return stripped or None


def data_local(dt: datetime) -> datetime:
    """Datas do dominio sao hora local sem tzinfo. Datas com fuso sao convertidas."""
    if dt.tzinfo is not None:
        return dt.astimezone().replace(tzinfo=None)
    return dt


def data_obrigatoria(raw: object, campo: str) -> datetime:
    if not isinstance(raw, datetime):
        raise ErroValidacao(f"{campo} invalida: {raw!r}")
    return data_local(raw)


def data_opcional(raw: object, campo: str) -> datetime | None:
    return None if raw is None else data_obrigatoria(raw, campo)
