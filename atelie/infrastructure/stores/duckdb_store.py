# atelie/infrastructure/stores/duckdb_store.py
from __future__ import annotations

import threading
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import fields
from decimal import Decimal
from enum import Enum
from typing import Any

import duckdb

from atelie.domain.cliente.entities import Cliente
from atelie.domain.erros import ArmazenamentoIndisponivel, NaoEncontrado
from atelie.domain.financeiro.entities import ContaFinanceira, MovimentoCaixa
from atelie.domain.ordem.entities import ItemOrdem, OrdemServico
from atelie.domain.registros import ENTIDADE_POR_TIPO, Registro, TipoRegistro
from atelie.domain.servico.entities import Servico
from atelie.infrastructure.serializacao import dict_para_registro

# Colunas = campos da entidade (itens ficam na tabela itens_ordem).
_COLUNAS: dict[TipoRegistro, tuple[str, ...]] = {
    tipo: tuple(f.name for f in fields(entidade) if f.name != "itens")
    for tipo, entidade in ENTIDADE_POR_TIPO.items()
}

_ORDER_BY: dict[TipoRegistro, str] = {
    TipoRegistro.CLIENTE: '"nome" ASC',
    TipoRegistro.SERVICO: '"nome" ASC',
    TipoRegistro.ORDEM: '"data_abertura" DESC',
    TipoRegistro.CONTA: '"data_vencimento" DESC',
    TipoRegistro.MOVIMENTO: '"data" DESC',
}


def _nativo(valor: Any) -> Any:
    if isinstance(valor, Enum):
        return valor.value
    if isinstance(valor, Decimal):
        return str(valor)
    return valor


def _anexar_itens(linha: dict[str, Any], itens: list[dict[str, Any]]) -> None:
    """O total da ordem sai dos itens lidos, nunca da coluna espelho."""
    linha["itens"] = itens
    linha["valor_total"] = sum(
        (Decimal(str(i["valor_unitario"])) * i["quantidade"] for i in itens), Decimal("0")
    )


def _q(coluna: str) -> str:
    return f'"{coluna}"'


class DuckDBRecordStore:
    """RecordStore relacional embarcado, escopado por organizacao_id.

    Cada instancia usa seu proprio cursor (conexao duplicada sobre o mesmo
    banco), entao sessoes diferentes nao compartilham estado de transacao.
    Nomes de tabela e coluna vem do codigo, nunca de input do usuario.
    """

    def __init__(self, conn: duckdb.DuckDBPyConnection, organizacao_id: str) -> None:
        self._conn = conn.cursor()
        self._organizacao_id = organizacao_id
        self._lock = threading.RLock()
        self._em_transacao = False

    # -- leitura ---------------------------------------------------------

    def listar_clientes(self) -> list[Cliente]:
        return self._listar(TipoRegistro.CLIENTE)  # type: ignore[return-value]

    def listar_servicos(self) -> list[Servico]:
        return self._listar(TipoRegistro.SERVICO)  # type: ignore[return-value]

    def listar_ordens(self) -> list[OrdemServico]:
        return self._listar(TipoRegistro.ORDEM)  # type: ignore[return-value]

    def listar_contas(self) -> list[ContaFinanceira]:
        return self._listar(TipoRegistro.CONTA)  # type: ignore[return-value]

    def listar_movimentos(self) -> list[MovimentoCaixa]:
        return self._listar(TipoRegistro.MOVIMENTO)  # type: ignore[return-value]

    # -- escrita ---------------------------------------------------------

    def inserir(self, tipo: TipoRegistro, registro: Registro) -> Registro:
        colunas = _COLUNAS[tipo]
        valores = [_nativo(getattr(registro, c)) for c in colunas]
        with self._escrita():
            self._executar(
                f"INSERT INTO {tipo.value} (organizacao_id, {', '.join(map(_q, colunas))}) "  # noqa: S608
                f"VALUES (?, {', '.join('?' for _ in colunas)})",
                [self._organizacao_id, *valores],
            )
            if isinstance(registro, OrdemServico):
                self._gravar_itens(registro.id, registro.itens)
        return self._obter(tipo, registro.id)

    def atualizar(self, tipo: TipoRegistro, id: str, campos: Mapping[str, Any]) -> Registro:
        colunas = [c for c in campos if c != "itens"]
        with self._escrita():
            self._garantir_existe(tipo, id)
            if colunas:
                sets = ", ".join(f"{_q(c)} = ?" for c in colunas)
                self._executar(
                    f"UPDATE {tipo.value} SET {sets} WHERE organizacao_id = ? AND id = ?",  # noqa: S608
                    [*(_nativo(campos[c]) for c in colunas), self._organizacao_id, id],
                )
            if "itens" in campos:
                self._executar(
                    "DELETE FROM itens_ordem WHERE organizacao_id = ? AND ordem_id = ?",
                    [self._organizacao_id, id],
                )
                self._gravar_itens(id, campos["itens"])
        return self._obter(tipo, id)

    def excluir(self, tipo: TipoRegistro, id: str) -> None:
        with self._escrita():
            self._garantir_existe(tipo, id)
            self._executar(
                f"DELETE FROM {tipo.value} WHERE organizacao_id = ? AND id = ?",  # noqa: S608
                [self._organizacao_id, id],
            )
            if tipo == TipoRegistro.ORDEM:
                self._executar(
                    "DELETE FROM itens_ordem WHERE organizacao_id = ? AND ordem_id = ?",
                    [self._organizacao_id, id],
                )

    @contextmanager
    def transacao(self) -> Iterator[None]:
        with self._lock:
            if self._em_transacao:
                yield
                return
            self._executar("BEGIN TRANSACTION")
            self._em_transacao = True
            try:
                yield
            except BaseException:
                self._em_transacao = False
                self._executar("ROLLBACK")
                raise
            self._em_transacao = False
            self._executar("COMMIT")

    # -- internos --------------------------------------------------------

    @contextmanager
    def _escrita(self) -> Iterator[None]:
        """Toda escrita isolada vira uma transacao; dentro de transacao() so participa."""
        with self.transacao():
            yield

    def _executar(self, sql: str, params: Sequence[Any] | None = None) -> duckdb.DuckDBPyConnection:
        try:
            return self._conn.execute(sql, params) if params is not None else self._conn.execute(sql)
        except duckdb.Error as err:
            raise ArmazenamentoIndisponivel(f"DuckDB: {err}") from err

    def _select(self, tipo: TipoRegistro, where: str = "", params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        colunas = _COLUNAS[tipo]
        rows = self._executar(
            f"SELECT {', '.join(map(_q, colunas))} FROM {tipo.value} "  # noqa: S608
            f"WHERE organizacao_id = ? {where} ORDER BY {_ORDER_BY[tipo]}",
            [self._organizacao_id, *params],
        ).fetchall()
        return [dict(zip(colunas, row)) for row in rows]

    def _listar(self, tipo: TipoRegistro) -> list[Registro]:
        with self._lock:
            linhas = self._select(tipo)
            if tipo == TipoRegistro.ORDEM:
                itens = self._itens_por_ordem()
                for linha in linhas:
                    _anexar_itens(linha, itens.get(linha["id"], []))
        return [dict_para_registro(tipo, linha) for linha in linhas]

    def _obter(self, tipo: TipoRegistro, id: str) -> Registro:
        with self._lock:
            linhas = self._select(tipo, "AND id = ?", [id])
            if not linhas:
                raise NaoEncontrado(tipo.value, id)
            linha = linhas[0]
            if tipo == TipoRegistro.ORDEM:
                _anexar_itens(linha, self._itens_por_ordem(id).get(id, []))
        return dict_para_registro(tipo, linha)

    def _garantir_existe(self, tipo: TipoRegistro, id: str) -> None:
        row = self._executar(
            f"SELECT count(*) FROM {tipo.value} WHERE organizacao_id = ? AND id = ?",  # noqa: S608
            [self._organizacao_id, id],
        ).fetchone()
        if not row or row[0] == 0:
            raise NaoEncontrado(tipo.value, id)

    def _itens_por_ordem(self, ordem_id: str | None = None) -> dict[str, list[dict[str, Any]]]:
        sql = (
            "SELECT ordem_id, servico_id, quantidade, valor_unitario FROM itens_ordem "
            "WHERE organizacao_id = ?"
        )
        params: list[Any] = [self._organizacao_id]
        if ordem_id is not None:
            sql += " AND ordem_id = ?"
            params.append(ordem_id)
        rows = self._executar(sql + " ORDER BY ordem_id, posicao", params).fetchall()
        agrupado: dict[str, list[dict[str, Any]]] = {}
        for row in rows:
            agrupado.setdefault(str(row[0]), []).append(
                {"servico_id": row[1], "quantidade": row[2], "valor_unitario": row[3]}
            )
        return agrupado

    def _gravar_itens(self, ordem_id: str, itens: Sequence[ItemOrdem]) -> None:
        for posicao, item in enumerate(itens):
            self._executar(
                "INSERT INTO itens_ordem VALUES (?, ?, ?, ?, ?, ?, ?)",
                [
                    self._organizacao_id, ordem_id, posicao, item.servico_id,
                    item.quantidade, str(item.valor_unitario), str(item.valor_total),
                ],
            )
