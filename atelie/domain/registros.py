# atelie/domain/registros.py
from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from contextlib import AbstractContextManager
from enum import Enum
from typing import Any, Protocol, Union, runtime_checkable

from .cliente.entities import Cliente
from .financeiro.entities import ContaFinanceira, MovimentoCaixa
from .ordem.entities import OrdemServico
from .servico.entities import Servico

Registro = Union[Cliente, Servico, OrdemServico, ContaFinanceira, MovimentoCaixa]


class TipoRegistro(str, Enum):
    CLIENTE = "clientes"
    SERVICO = "servicos"
    ORDEM = "ordens_servico"
    CONTA = "contas_financeiras"
    MOVIMENTO = "movimentos_caixa"


ENTIDADE_POR_TIPO: dict[TipoRegistro, type] = {
    TipoRegistro.CLIENTE: Cliente,
    TipoRegistro.SERVICO: Servico,
    TipoRegistro.ORDEM: OrdemServico,
    TipoRegistro.CONTA: ContaFinanceira,
    TipoRegistro.MOVIMENTO: MovimentoCaixa,
}

# Ordenacao faz parte do contrato: a UI depende dela.
# (chave, decrescente)
ORDENACAO: dict[TipoRegistro, tuple[Callable[[Any], Any], bool]] = {
    TipoRegistro.CLIENTE: (lambda r: r.nome, False),
    TipoRegistro.SERVICO: (lambda r: r.nome, False),
    TipoRegistro.ORDEM: (lambda r: r.data_abertura, True),
    TipoRegistro.CONTA: (lambda r: r.data_vencimento, True),
    TipoRegistro.MOVIMENTO: (lambda r: r.data, True),
}


def ordenar(tipo: TipoRegistro, registros: Iterable[Registro]) -> list[Registro]:
    chave, decrescente = ORDENACAO[tipo]
    return sorted(registros, key=chave, reverse=decrescente)


class RecordStore(Protocol):
    """Persistencia dos cinco tipos de registro.

    Filtrar pela conta/organizacao dona dos dados e responsabilidade da
    implementacao (RLS no servidor, coluna de escopo, ou nada no modo local).
    Falhas de IO sobem como ArmazenamentoIndisponivel.
    """

    def listar_clientes(self) -> list[Cliente]: ...
    def listar_servicos(self) -> list[Servico]: ...
    def listar_ordens(self) -> list[OrdemServico]: ...
    def listar_contas(self) -> list[ContaFinanceira]: ...
    def listar_movimentos(self) -> list[MovimentoCaixa]: ...
    def inserir(self, tipo: TipoRegistro, registro: Registro) -> Registro: ...
    def atualizar(self, tipo: TipoRegistro, id: str, campos: Mapping[str, Any]) -> Registro: ...
    def excluir(self, tipo: TipoRegistro, id: str) -> None: ...


@runtime_checkable
class TransactionalRecordStore(Protocol):
    """Capacidade opcional: agrupar varias escritas numa unidade atomica."""

    def transacao(self) -> AbstractContextManager[None]: ...
