# atelie/infrastructure/serializacao.py
#
# Conversao entre entidades de dominio e dicts JSON-compativeis.
#
# Design decisions:
#   - Decimal vira string: o JSON nunca carrega dinheiro como float.
#   - datetime vira ISO-8601. Datas com fuso (vindas do servidor) sao convertidas
#     para a hora local e guardadas sem tzinfo, como o resto do dominio.
#   - Chaves desconhecidas (created_at, organizacao_id...) sao ignoradas na leitura.
#   - valor_total do item nunca e lido: ItemOrdem recalcula no construtor.
from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from atelie.domain.erros import ErroValidacao
from atelie.domain.ordem.entities import ItemOrdem
from atelie.domain.registros import ENTIDADE_POR_TIPO, Registro, TipoRegistro
from atelie.domain.value_objects import data_local

_CAMPOS_DATA = frozenset({
    "data_cadastro", "data_abertura", "data_prevista", "data_conclusao",
    "data_vencimento", "data_pagamento", "data",
})
_CAMPOS_DECIMAL = frozenset({"valor", "valor_total"})


def para_json(valor: Any) -> Any:
    if isinstance(valor, Enum):
        return valor.value
    if isinstance(valor, Decimal):
        return str(valor)
    if isinstance(valor, datetime):
        return valor.isoformat()
    if isinstance(valor, ItemOrdem):
        return {
            "servico_id": valor.servico_id,
            "quantidade": valor.quantidade,
            "valor_unitario": str(valor.valor_unitario),
            "valor_total": str(valor.valor_total),
        }
    if isinstance(valor, (list, tuple)):
        return [para_json(v) for v in valor]
    return valor


def registro_para_dict(registro: Registro) -> dict[str, Any]:
    return {f.name: para_json(getattr(registro, f.name)) for f in dataclasses.fields(registro)}


def campos_para_dict(campos: Mapping[str, Any]) -> dict[str, Any]:
    return {k: para_json(v) for k, v in campos.items()}


def ler_data(raw: Any) -> datetime | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        dt = raw
    else:
        texto = str(raw)
        if texto.endswith("Z"):
            texto = texto[:-1] + "+00:00"
        dt = datetime.fromisoformat(texto)
    return data_local(dt)


def ler_item(dados: Mapping[str, Any]) -> ItemOrdem:
    return ItemOrdem(
        servico_id=str(dados["servico_id"]),
        quantidade=int(dados["quantidade"]),
        valor_unitario=Decimal(str(dados["valor_unitario"])),
    )


def dict_para_registro(tipo: TipoRegistro, dados: Mapping[str, Any]) -> Registro:
    """Hidrata a entidade. Campo obrigatorio ausente vira ErroValidacao."""
    entidade = ENTIDADE_POR_TIPO[tipo]
    nomes = {f.name for f in dataclasses.fields(entidade) if f.init}
    kwargs: dict[str, Any] = {}
    for nome in nomes:
        if nome not in dados:
            continue
        valor = dados[nome]
        if nome in _CAMPOS_DATA:
            valor = ler_data(valor)
        elif nome in _CAMPOS_DECIMAL and valor is not None:
            valor = Decimal(str(valor))
        elif nome == "itens":
            valor = tuple(ler_item(i) for i in (valor or []))
        elif nome == "id":
            valor = str(valor)
        kwargs[nome] = valor
    try:
        return entidade(**kwargs)  # type: ignore[no-any-return]
    except TypeError as err:
        raise ErroValidacao(f"registro de {tipo.value} incompleto: {err}") from err
