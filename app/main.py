from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lootgen import version
from app.api.router import api_router
from app.services.generator_facade import load_startup_config

logger = logging.getLogger(__name__)

app = FastAPI(title="Loot Generator", version=version().split(" ", 1)[-1])


@app.on_event("startup")
def _startup_load_config() -> None:
    # Bulk-load LOOT_CONFIG_PATH (if set) before serving any request.
    load_startup_config()


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def _auth_guard_middleware(request: Request, call_next):
    """Optional admin guard.

    If LOOT_ADMIN_TOKEN is configured, require it on state-changing API calls.
    """
    required_token = (os.environ.get("LOOT_ADMIN_TOKEN") or "").strip()
    if not required_token:
        return await call_next(request)

    path = request.url.path or ""
    method = (request.method or "GET").upper()
    if method != "POST" or not path.startswith("/api/"):
        return await call_next(request)

    provided = (request.headers.get("X-Admin-Token") or "").strip()
    if provided != required_token:
        return JSONResponse(status_code=401, content={"detail": "Unauthorized: invalid X-Admin-Token"})

    return await call_next(request)


app.include_router(api_router)
