# atelie/application/dtos/_tipos.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import Field

Valor = Annotated[Decimal, Field(ge=0)]
Texto = Annotated[str, Field(min_length=1)]


def iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt else None
