# atelie/infrastructure/log.py
#
# Logging do servico, com tempo decorrido desde a subida.
#
# Design decisions:
#   - Modulos usam logging.getLogger(__name__); so este arquivo mexe em handlers.
#   - Saida em stdout com flush por linha, prefixo [atelie MM:SS].
#   - configurar_logging() e idempotente: chamar duas vezes nao duplica handler.
from __future__ import annotations

import logging
import sys
import time

_start = time.monotonic()
_HANDLER_NAME = "atelie-stdout"


class _ElapsedFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        elapsed = time.monotonic() - _start
        minutes, seconds = divmod(int(elapsed), 60)
        message = super().format(record)
        return f"[atelie {minutes:02d}:{seconds:02d}] {record.levelname} {record.name}: {message}"


def configurar_logging(level: str = "INFO") -> None:
    """Instala o handler de stdout no logger raiz do pacote."""
    root = logging.getLogger("atelie")
    root.setLevel(level)
    if any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(_ElapsedFormatter("%(message)s"))
    root.addHandler(handler)
