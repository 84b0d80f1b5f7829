"""Regras de agregacao do CRM. Funcoes puras, zero IO.

Todo valor derivado (total da ordem, saldo do caixa, totais a pagar/receber)
sai daqui, sempre recalculado a partir do conjunto completo de registros.
Entrada malformada e problema de quem chama: nada aqui valida.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import TypeVar

from atelie.domain.cliente.entities import Cliente
from atelie.domain.financeiro.entities import ContaFinanceira, MovimentoCaixa
from atelie.domain.financeiro.enums import Periodo, StatusConta, TipoConta, TipoMovimento
from atelie.domain.ordem.entities import ItemOrdem, OrdemServico
from atelie.domain.ordem.enums import StatusOrdem
from atelie.domain.servico.entities import Servico

T = TypeVar("T")

_ZERO = Decimal("0")
_CENTAVOS = Decimal("0.01")
_JANELA_SEMANA = timedelta(days=7)


@dataclass(frozen=True)
class TotaisFinanceiros:
    receber: Decimal
    pagar: Decimal


@dataclass(frozen=True)
class ResumoCaixa:
    entradas: Decimal
    saidas: Decimal
    qtd_entradas: int
    qtd_saidas: int

    @property
    def saldo(self) -> Decimal:
        return self.entradas - self.saidas


@dataclass(frozen=True)
class ResumoOrdens:
    pendentes: int
    em_andamento: int
    concluidas: int
    canceladas: int
    receita: Decimal  # soma das ordens concluidas


def calcular_total_ordem(itens: Iterable[ItemOrdem]) -> Decimal:
    """Soma de quantidade * valor_unitario. Precisao total; arredonda so na apresentacao."""
    return sum((item.valor_unitario * item.quantidade for item in itens), _ZERO)


def calcular_saldo_caixa(movimentos: Iterable[MovimentoCaixa]) -> Decimal:
    saldo = _ZERO
    for movimento in movimentos:
        if movimento.tipo == TipoMovimento.ENTRADA:
            saldo += movimento.valor
        else:
            saldo -= movimento.valor
    return saldo


def calcular_totais_pendentes(contas: Iterable[ContaFinanceira]) -> TotaisFinanceiros:
    return _totalizar(c for c in contas if c.status == StatusConta.PENDENTE)


def esta_vencida(conta: ContaFinanceira, agora: datetime) -> bool:
    """Predicado de leitura, nunca persistido. Conta paga nunca esta vencida."""
    return conta.status == StatusConta.PENDENTE and conta.data_vencimento < agora


def calcular_totais_vencidos(contas: Iterable[ContaFinanceira], agora: datetime) -> TotaisFinanceiros:
    return _totalizar(c for c in contas if esta_vencida(c, agora))


def filtrar_por_periodo(
    registros: Iterable[T],
    campo: str,
    periodo: Periodo,
    agora: datetime,
) -> list[T]:
    """Filtra pelo campo datetime `campo`. Registros sem data ficam de fora.

    SEMANA e a janela movel [agora - 7 dias, agora], nao a semana do calendario.
    """
    periodo = Periodo(periodo)
    resultado: list[T] = []
    for registro in registros:
        valor: datetime | None = getattr(registro, campo)
        if valor is not None and _no_periodo(valor, periodo, agora):
            resultado.append(registro)
    return resultado


def resumir_caixa(
    movimentos: Iterable[MovimentoCaixa],
    periodo: Periodo,
    agora: datetime,
) -> ResumoCaixa:
    no_periodo = filtrar_por_periodo(movimentos, "data", periodo, agora)
    entradas = [m for m in no_periodo if m.tipo == TipoMovimento.ENTRADA]
    saidas = [m for m in no_periodo if m.tipo == TipoMovimento.SAIDA]
    return ResumoCaixa(
        entradas=sum((m.valor for m in entradas), _ZERO),
        saidas=sum((m.valor for m in saidas), _ZERO),
        qtd_entradas=len(entradas),
        qtd_saidas=len(saidas),
    )


def resumir_ordens(ordens: Sequence[OrdemServico]) -> ResumoOrdens:
    def contar(status: StatusOrdem) -> int:
        return sum(1 for o in ordens if o.status == status)

    return ResumoOrdens(
        pendentes=contar(StatusOrdem.PENDENTE),
        em_andamento=contar(StatusOrdem.EM_ANDAMENTO),
        concluidas=contar(StatusOrdem.CONCLUIDA),
        canceladas=contar(StatusOrdem.CANCELADA),
        receita=sum((o.valor_total for o in ordens if o.status == StatusOrdem.CONCLUIDA), _ZERO),
    )


def filtrar_clientes(clientes: Iterable[Cliente], termo: str | None = None) -> list[Cliente]:
    """Busca em nome, telefone ou email, sem diferenciar maiusculas."""
    termo_norm = _normalizar(termo)
    return [
        c for c in clientes
        if termo_norm in c.nome.lower()
        or termo_norm in c.telefone.lower()
        or termo_norm in (c.email or "").lower()
    ]


def filtrar_servicos(servicos: Iterable[Servico], termo: str | None = None) -> list[Servico]:
    termo_norm = _normalizar(termo)
    return [s for s in servicos if termo_norm in s.nome.lower() or termo_norm in s.tipo.lower()]


def filtrar_ordens(
    ordens: Iterable[OrdemServico],
    cliente_de: Callable[[OrdemServico], Cliente | None],
    termo: str | None = None,
    status: StatusOrdem | None = None,
) -> list[OrdemServico]:
    """Busca no nome do cliente ou no status. Cliente excluido nao casa pelo nome."""
    termo_norm = _normalizar(termo)

    def casa(ordem: OrdemServico) -> bool:
        if termo_norm in ordem.status.value:
            return True
        cliente = cliente_de(ordem)
        return cliente is not None and termo_norm in cliente.nome.lower()

    return [o for o in ordens if (status is None or o.status == status) and casa(o)]


def filtrar_contas(
    contas: Iterable[ContaFinanceira],
    termo: str | None = None,
    tipo: TipoConta | None = None,
    status: StatusConta | None = None,
) -> list[ContaFinanceira]:
    """Busca por descricao (sem diferenciar maiusculas) + filtros exatos. None = todos."""
    termo_norm = _normalizar(termo)
    return [
        c for c in contas
        if termo_norm in c.descricao.lower()
        and (tipo is None or c.tipo == tipo)
        and (status is None or c.status == status)
    ]


def filtrar_movimentos(
    movimentos: Iterable[MovimentoCaixa],
    termo: str | None = None,
    tipo: TipoMovimento | None = None,
    categoria: str | None = None,
) -> list[MovimentoCaixa]:
    """Busca em descricao ou categoria + filtros exatos. None = todos."""
    termo_norm = _normalizar(termo)
    return [
        m for m in movimentos
        if (termo_norm in m.descricao.lower() or termo_norm in m.categoria.lower())
        and (tipo is None or m.tipo == tipo)
        and (categoria is None or m.categoria == categoria)
    ]


def formatar_valor(valor: Decimal) -> str:
    """Arredondamento de apresentacao: 2 casas, meio para cima."""
    return str(valor.quantize(_CENTAVOS, rounding=ROUND_HALF_UP))


def _normalizar(termo: str | None) -> str:
    return (termo or "").strip().lower()


def _totalizar(contas: Iterable[ContaFinanceira]) -> TotaisFinanceiros:
    receber = _ZERO
    pagar = _ZERO
    for conta in contas:
        if conta.tipo == TipoConta.RECEBER:
            receber += conta.valor
        else:
            pagar += conta.valor
    return TotaisFinanceiros(receber=receber, pagar=pagar)


def _no_periodo(valor: datetime, periodo: Periodo, agora: datetime) -> bool:
    if periodo == Periodo.HOJE:
        return valor.date() == agora.date()
    if periodo == Periodo.SEMANA:
        return agora - _JANELA_SEMANA <= valor <= agora
    if periodo == Periodo.MES:
        return (valor.year, valor.month) == (agora.year, agora.month)
    return valor.year == agora.year
