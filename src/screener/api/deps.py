from functools import lru_cache

import httpx
from fastapi import Depends, Request

from screener.core.config import get_settings
from screener.core.http import get_http_client
from screener.services.batch_orchestrator import BatchOrchestrator
from screener.services.batch_registry import BatchRegistry
from screener.services.scoring_client import ScoringClient
from screener.storage.history import HistoryRecorder
from screener.storage.memory import InMemoryHistoryRecorder

__all__ = [
    "get_batch_registry",
    "get_history_recorder",
    "get_orchestrator",
    "get_scoring_client",
]


@lru_cache
def get_history_recorder() -> InMemoryHistoryRecorder:
    settings = get_settings()
    return InMemoryHistoryRecorder(max_entries=settings.history_max_entries)


@lru_cache
def get_batch_registry() -> BatchRegistry:
    settings = get_settings()
    return BatchRegistry(max_runs=settings.batch_max_runs)


def _shared_http_client(request: Request) -> httpx.AsyncClient:
    client = getattr(request.app.state, "http_client", None)
    if client is None:
        client = get_http_client()
        request.app.state.http_client = client
    return client


def get_scoring_client(request: Request) -> ScoringClient:
    return ScoringClient.from_settings(_shared_http_client(request), get_settings())


def get_orchestrator(
    client: ScoringClient = Depends(get_scoring_client),
    history: HistoryRecorder = Depends(get_history_recorder),
) -> BatchOrchestrator:
    settings = get_settings()
    return BatchOrchestrator(client, history=history, strict=settings.debug)
