from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from snapsolve.api.router import router as mcq_router
from snapsolve.core.config import get_settings
from snapsolve.core.logging import configure_logging
from snapsolve.infra.db.session import init_db

settings = get_settings()
configure_logging(settings.log_level)
init_db()

app = FastAPI(title=settings.app_name, version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

app.include_router(mcq_router, prefix=settings.api_prefix)


@app.get("/healthz", tags=["health"])
def healthz() -> dict[str, str]:
    return {"ok": "true"}
