# atelie/interfaces/api/main.py
from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from atelie.domain.erros import (
    AcessoNegado,
    ArmazenamentoIndisponivel,
    ErroCRM,
    ErroValidacao,
    EstadoInvalido,
    NaoEncontrado,
)
from atelie.infrastructure.config import get_settings
from atelie.infrastructure.log import configurar_logging
from atelie.interfaces.api.dependencies import get_registro

logger = logging.getLogger(__name__)

_STATUS_POR_ERRO: tuple[tuple[type[ErroCRM], int], ...] = (
    (NaoEncontrado, 404),
    (EstadoInvalido, 409),
    (ErroValidacao, 422),
    (AcessoNegado, 403),
    (ArmazenamentoIndisponivel, 503),
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    configurar_logging(settings.log_level)
    if settings.store == "duckdb":
        from atelie.infrastructure.duckdb_connection import get_connection
        get_connection()  # valida conexao no startup
    logger.info("atelie API no ar (store=%s)", settings.store)
    yield
    get_registro().encerrar_todas()


app = FastAPI(
    title="Atelie CRM API",
    debug=get_settings().debug,  # NUNCA True em producao
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url=None,
)


@app.exception_handler(ErroCRM)
async def erro_crm_handler(request: Request, exc: ErroCRM) -> JSONResponse:
    status_code = next((s for tipo, s in _STATUS_POR_ERRO if isinstance(exc, tipo)), 500)
    if status_code >= 500:
        logger.warning("%s %s falhou: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.middleware("http")
async def add_security_headers(request: Request, call_next: object) -> Response:
    response = await call_next(request)  # type: ignore[misc]
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response  # type: ignore[return-value]


app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["*"],
)

# Routers: rotas fixas (/contas/resumo) antes das parametrizadas (/contas/{id})
from atelie.interfaces.api.routes.caixa_routes import router as caixa_router  # noqa: E402
from atelie.interfaces.api.routes.cliente_routes import router as cliente_router  # noqa: E402
from atelie.interfaces.api.routes.conta_routes import router as conta_router  # noqa: E402
from atelie.interfaces.api.routes.ordem_routes import router as ordem_router  # noqa: E402
from atelie.interfaces.api.routes.resumo_routes import router as resumo_router  # noqa: E402
from atelie.interfaces.api.routes.servico_routes import router as servico_router  # noqa: E402
from atelie.interfaces.api.routes.sessao_routes import router as sessao_router  # noqa: E402
from atelie.interfaces.api.routes.status_routes import router as status_router  # noqa: E402

app.include_router(status_router, prefix="/api")
app.include_router(sessao_router, prefix="/api")
app.include_router(cliente_router, prefix="/api")
app.include_router(servico_router, prefix="/api")
app.include_router(ordem_router, prefix="/api")
app.include_router(conta_router, prefix="/api")
app.include_router(caixa_router, prefix="/api")
app.include_router(resumo_router, prefix="/api")
