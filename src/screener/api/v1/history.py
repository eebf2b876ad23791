import uuid

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response

from screener.api.deps import get_history_recorder
from screener.core.exceptions import NotFoundError
from screener.schemas.analysis import Recommendation
from screener.schemas.history import HistoryEntry
from screener.services.export import history_to_csv
from screener.storage.memory import InMemoryHistoryRecorder

router = APIRouter(tags=["history"])


@router.get("/history", response_model=list[HistoryEntry])
async def list_history(
    q: str = Query(default=""),
    recommendation: Recommendation | None = Query(default=None),
    history: InMemoryHistoryRecorder = Depends(get_history_recorder),
) -> list[HistoryEntry]:
    return history.search(q, recommendation)


@router.get("/history.csv")
async def export_history(
    q: str = Query(default=""),
    recommendation: Recommendation | None = Query(default=None),
    history: InMemoryHistoryRecorder = Depends(get_history_recorder),
) -> Response:
    return Response(
        content=history_to_csv(history.search(q, recommendation)),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="screening-history.csv"'},
    )


@router.delete("/history/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_history_entry(
    entry_id: uuid.UUID,
    history: InMemoryHistoryRecorder = Depends(get_history_recorder),
) -> None:
    if not history.remove(entry_id):
        raise NotFoundError("History entry", str(entry_id))


@router.delete("/history", status_code=status.HTTP_204_NO_CONTENT)
async def clear_history(
    history: InMemoryHistoryRecorder = Depends(get_history_recorder),
) -> None:
    history.clear()
