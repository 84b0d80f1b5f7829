# atelie/infrastructure/stores/local_store.py
#
# RecordStore local: memoria + um unico blob JSON em disco (perfil de um usuario).
#
# Design decisions:
#   - O blob inteiro e regravado apos cada mutacao. A escrita vai para um .tmp
#     e so entao substitui o arquivo final (os.replace), entao um crash no meio
#     nunca deixa um JSON truncado.
#   - Se a gravacao falhar, a memoria volta ao estado anterior: o que nao foi
#     persistido nao aparece em nenhuma leitura.
#   - transacao() adia a gravacao ate o fim do bloco e restaura o snapshot em
#     caso de erro. Isso torna marcar_conta_paga atomica tambem no modo local.
#   - Sem filtro por conta: e um store de usuario unico.
from __future__ import annotations

import json
import logging
import os
import threading
import uuid
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import replace
from decimal import Decimal
from pathlib import Path
from typing import Any

from atelie.domain.cliente.entities import Cliente
from atelie.domain.erros import ArmazenamentoIndisponivel, ErroValidacao, NaoEncontrado
from atelie.domain.financeiro.entities import ContaFinanceira, MovimentoCaixa
from atelie.domain.ordem.entities import OrdemServico
from atelie.domain.registros import Registro, TipoRegistro, ordenar
from atelie.domain.servico.entities import Servico
from atelie.infrastructure.serializacao import dict_para_registro, registro_para_dict

logger = logging.getLogger(__name__)

# Chaves do blob, uma por colecao.
CHAVES_BLOB: dict[TipoRegistro, str] = {
    TipoRegistro.CLIENTE: "clientes",
    TipoRegistro.SERVICO: "servicos",
    TipoRegistro.ORDEM: "ordensServico",
    TipoRegistro.CONTA: "contasFinanceiras",
    TipoRegistro.MOVIMENTO: "movimentosCaixa",
}

# Catalogo inicial de um atelie novo.
SERVICOS_INICIAIS: tuple[tuple[str, str, str, str], ...] = (
    ("Bainha Simples", "Ajuste", "15.00", "Bainha simples em calça ou saia"),
    ("Bainha Invisível", "Ajuste", "25.00", "Bainha invisível em peças delicadas"),
    ("Ajuste na Cintura", "Ajuste", "30.00", "Apertar ou alargar cintura"),
    ("Costura de Vestido", "Confecção", "150.00", "Confecção completa de vestido"),
    ("Aplicação de Zíper", "Conserto", "20.00", "Troca ou aplicação de zíper"),
)

_Dados = dict[TipoRegistro, list[Registro]]


class LocalRecordStore:
    def __init__(self, path: Path | str, semear_servicos: bool = True) -> None:
        self._path = Path(path)
        self._lock = threading.RLock()
        self._em_transacao = False
        self._dados: _Dados = {t: [] for t in TipoRegistro}
        self._carregar(semear_servicos)

    @property
    def path(self) -> Path:
        return self._path

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
        def aplicar(dados: _Dados) -> None:
            dados[tipo].append(registro)

        self._mutar(aplicar)
        return registro

    def atualizar(self, tipo: TipoRegistro, id: str, campos: Mapping[str, Any]) -> Registro:
        resultado: list[Registro] = []

        def aplicar(dados: _Dados) -> None:
            indice = self._indice(dados, tipo, id)
            novo = replace(dados[tipo][indice], **campos)
            dados[tipo][indice] = novo
            resultado.append(novo)

        self._mutar(aplicar)
        return resultado[0]

    def excluir(self, tipo: TipoRegistro, id: str) -> None:
        def aplicar(dados: _Dados) -> None:
            del dados[tipo][self._indice(dados, tipo, id)]

        self._mutar(aplicar)

    @contextmanager
    def transacao(self) -> Iterator[None]:
        with self._lock:
            if self._em_transacao:
                yield
                return
            snapshot = self._copiar()
            self._em_transacao = True
            try:
                yield
            except BaseException:
                self._dados = snapshot
                raise
            finally:
                self._em_transacao = False
            try:
                self._gravar()
            except BaseException:
                self._dados = snapshot
                raise

    # -- internos --------------------------------------------------------

    def _listar(self, tipo: TipoRegistro) -> list[Registro]:
        with self._lock:
            return ordenar(tipo, self._dados[tipo])

    def _copiar(self) -> _Dados:
        return {t: list(v) for t, v in self._dados.items()}

    @staticmethod
    def _indice(dados: _Dados, tipo: TipoRegistro, id: str) -> int:
        for i, registro in enumerate(dados[tipo]):
            if registro.id == id:
                return i
        raise NaoEncontrado(tipo.value, id)

    def _mutar(self, aplicar: Callable[[_Dados], None]) -> None:
        with self._lock:
            if self._em_transacao:
                aplicar(self._dados)
                return
            snapshot = self._copiar()
            try:
                aplicar(self._dados)
                self._gravar()
            except BaseException:
                self._dados = snapshot
                raise

    def _carregar(self, semear_servicos: bool) -> None:
        if not self._path.exists():
            if semear_servicos:
                self._dados[TipoRegistro.SERVICO] = [
                    Servico(id=str(uuid.uuid4()), nome=n, tipo=t, valor=Decimal(v), descricao=d)
                    for n, t, v, d in SERVICOS_INICIAIS
                ]
                self._gravar()
                logger.info("catalogo inicial criado em %s", self._path)
            return
        try:
            blob = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as err:
            raise ArmazenamentoIndisponivel(f"Falha ao ler {self._path}: {err}") from err
        try:
            for tipo, chave in CHAVES_BLOB.items():
                self._dados[tipo] = [dict_para_registro(tipo, d) for d in blob.get(chave) or []]
        except (ErroValidacao, KeyError, ValueError) as err:
            raise ArmazenamentoIndisponivel(f"Blob local corrompido em {self._path}: {err}") from err

    def _gravar(self) -> None:
        if self._em_transacao:
            return
        blob = {
            chave: [registro_para_dict(r) for r in self._dados[tipo]]
            for tipo, chave in CHAVES_BLOB.items()
        }
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(blob, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as err:
            if tmp_path.exists():
                tmp_path.unlink()
            raise ArmazenamentoIndisponivel(f"Falha ao gravar {self._path}: {err}") from err
