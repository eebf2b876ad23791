import logging
import uuid

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response

from screener.api.deps import get_batch_registry, get_orchestrator
from screener.core.exceptions import BatchValidationError, NotFoundError
from screener.schemas.batch import (
    BatchCreate,
    BatchSnapshot,
    CandidateResult,
    ComparisonView,
    SelectionRead,
    SortDir,
    SortField,
)
from screener.services.batch_orchestrator import BatchOrchestrator, BatchRun
from screener.services.batch_registry import BatchRegistry
from screener.services.export import results_to_csv
from screener.services.result_aggregate import MAX_SELECTED

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/batches", tags=["batches"])


def _get_run(registry: BatchRegistry, batch_id: uuid.UUID) -> BatchRun:
    batch = registry.get(batch_id)
    if batch is None:
        raise NotFoundError("Batch", str(batch_id))
    return batch


@router.post("/", response_model=BatchSnapshot, status_code=status.HTTP_202_ACCEPTED)
async def submit_batch(
    data: BatchCreate,
    orchestrator: BatchOrchestrator = Depends(get_orchestrator),
    registry: BatchRegistry = Depends(get_batch_registry),
) -> BatchSnapshot:
    """Queue every resume against the job description and start scoring."""
    try:
        batch = orchestrator.create_run(data.job_description, data.resumes, data.candidate_info)
    except ValueError as e:
        raise BatchValidationError(str(e)) from e

    registry.submit(orchestrator, batch)
    logger.info("Accepted batch %s (%d resumes)", batch.id, batch.total)
    return batch.snapshot()


@router.get("/{batch_id}", response_model=BatchSnapshot)
async def get_batch(
    batch_id: uuid.UUID,
    registry: BatchRegistry = Depends(get_batch_registry),
) -> BatchSnapshot:
    return _get_run(registry, batch_id).snapshot()


@router.delete("/{batch_id}", status_code=status.HTTP_204_NO_CONTENT)
async def discard_batch(
    batch_id: uuid.UUID,
    registry: BatchRegistry = Depends(get_batch_registry),
) -> None:
    _get_run(registry, batch_id)
    registry.discard(batch_id)


@router.get("/{batch_id}/results", response_model=list[CandidateResult])
async def list_results(
    batch_id: uuid.UUID,
    sort: SortField = Query(default=SortField.MATCH_SCORE),
    direction: SortDir = Query(default=SortDir.DESC),
    registry: BatchRegistry = Depends(get_batch_registry),
) -> list[CandidateResult]:
    return _get_run(registry, batch_id).results.sorted_by(sort, direction)


@router.get("/{batch_id}/results.csv")
async def export_results(
    batch_id: uuid.UUID,
    sort: SortField = Query(default=SortField.MATCH_SCORE),
    direction: SortDir = Query(default=SortDir.DESC),
    registry: BatchRegistry = Depends(get_batch_registry),
) -> Response:
    batch = _get_run(registry, batch_id)
    content = results_to_csv(
        batch.results.sorted_by(sort, direction),
        job_title=batch.candidate_info.job_title or "",
    )
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="batch-{batch_id}.csv"'},
    )


@router.get("/{batch_id}/selection", response_model=SelectionRead)
async def get_selection(
    batch_id: uuid.UUID,
    registry: BatchRegistry = Depends(get_batch_registry),
) -> SelectionRead:
    batch = _get_run(registry, batch_id)
    return SelectionRead(selected_ids=batch.results.selected_ids, max_selected=MAX_SELECTED)


@router.post("/{batch_id}/selection/{candidate_id}", response_model=SelectionRead)
async def toggle_selection(
    batch_id: uuid.UUID,
    candidate_id: str,
    registry: BatchRegistry = Depends(get_batch_registry),
) -> SelectionRead:
    """Toggle a candidate in the comparison set; a full set ignores new picks."""
    batch = _get_run(registry, batch_id)
    if candidate_id not in batch.results:
        raise NotFoundError("Candidate result", candidate_id)
    batch.results.toggle_select(candidate_id)
    return SelectionRead(selected_ids=batch.results.selected_ids, max_selected=MAX_SELECTED)


@router.get("/{batch_id}/comparison", response_model=ComparisonView)
async def compare_selection(
    batch_id: uuid.UUID,
    registry: BatchRegistry = Depends(get_batch_registry),
) -> ComparisonView:
    batch = _get_run(registry, batch_id)
    try:
        return batch.results.compare()
    except ValueError as e:
        raise BatchValidationError(str(e)) from e
