from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .db import close_db
from .errors import register_error_handlers
from .logging_config import configure_logging
from .middleware.logging import StructuredLoggingMiddleware
from .routers import scoring
from .validate_env import validate_env


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    validate_env()
    configure_logging(service="box-office-league-api")
    yield
    await close_db()


app = FastAPI(title="box-office-league", version="1.0.0", lifespan=lifespan)

app.add_middleware(StructuredLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(scoring.router)


@app.get("/healthz")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
