from fastapi import APIRouter

from app.api.routes import config, loot

api_router = APIRouter()
api_router.include_router(config.router)
api_router.include_router(loot.router)
