from fastapi import APIRouter

from screener.api.v1 import batches, health, history

api_v1_router = APIRouter()
api_v1_router.include_router(health.router)
api_v1_router.include_router(batches.router)
api_v1_router.include_router(history.router)
