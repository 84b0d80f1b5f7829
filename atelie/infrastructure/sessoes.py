# atelie/infrastructure/sessoes.py
#
# Registro das sessoes abertas, indexado pelo access token.
#
# Design decisions:
#   - Cada token tem exatamente uma SessaoCRM. Reabrir com o mesmo token
#     encerra a sessao anterior antes de publicar a nova.
#   - A carga inicial acontece fora do lock do registro: uma carga lenta
#     (store remoto) nao bloqueia as outras sessoes.
#   - Encerrar fecha o store quando ele tem recursos proprios (cliente HTTP).
from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from atelie.application.services.sessao_crm import SessaoCRM
from atelie.domain.registros import RecordStore

logger = logging.getLogger(__name__)

FabricaStore = Callable[[str, "str | None"], RecordStore]


class RegistroSessoes:
    def __init__(self, fabrica_store: FabricaStore) -> None:
        self._fabrica_store = fabrica_store
        self._lock = threading.Lock()
        self._sessoes: dict[str, tuple[SessaoCRM, RecordStore]] = {}

    def abrir(self, access_token: str, organizacao_id: str | None = None) -> SessaoCRM:
        store = self._fabrica_store(access_token, organizacao_id)
        sessao = SessaoCRM(store)
        try:
            sessao.carregar()
        except Exception:
            _fechar_store(store)
            raise
        with self._lock:
            anterior = self._sessoes.get(access_token)
            self._sessoes[access_token] = (sessao, store)
        if anterior is not None:
            _finalizar(*anterior)
        logger.info("sessao aberta (%d ativas)", len(self))
        return sessao

    def obter(self, access_token: str) -> SessaoCRM | None:
        with self._lock:
            par = self._sessoes.get(access_token)
        return par[0] if par else None

    def encerrar(self, access_token: str) -> bool:
        with self._lock:
            par = self._sessoes.pop(access_token, None)
        if par is None:
            return False
        _finalizar(*par)
        logger.info("sessao encerrada (%d ativas)", len(self))
        return True

    def encerrar_todas(self) -> None:
        with self._lock:
            pares = list(self._sessoes.values())
            self._sessoes.clear()
        for par in pares:
            _finalizar(*par)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessoes)


def _finalizar(sessao: SessaoCRM, store: RecordStore) -> None:
    sessao.encerrar()
    _fechar_store(store)


def _fechar_store(store: RecordStore) -> None:
    close = getattr(store, "close", None)
    if callable(close):
        close()
