from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from league_api.config import settings
from league_api.db import close_db
from league_api.logging_config import configure_logging
from league_api.middleware.logging import AccessLogMiddleware
from league_api.middleware.rate_limit import RateLimitMiddleware
from league_api.routers import draft_websocket, drafts
from league_api.validate_env import validate_env


@asynccontextmanager
async def lifespan(_: FastAPI):
    validate_env()
    configure_logging(service="league-api", environment=settings.environment)
    yield
    await close_db()


app = FastAPI(title="league-api", version="1.0.0", lifespan=lifespan)

app.add_middleware(AccessLogMiddleware)
app.add_middleware(RateLimitMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(drafts.router)
app.include_router(draft_websocket.router)


@app.get("/healthz")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
