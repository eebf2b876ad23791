from collections.abc import Callable, Iterator
from typing import Any

from screener.schemas.batch import CandidateResult, ComparisonView, SortDir, SortField

MAX_SELECTED = 3

_SORT_KEYS: dict[SortField, Callable[[CandidateResult], Any]] = {
    SortField.FILE_NAME: lambda c: c.file_name.casefold(),
    SortField.MATCH_SCORE: lambda c: c.result.match_score,
    SortField.RECOMMENDATION: lambda c: c.result.recommendation.value,
    SortField.TIMESTAMP: lambda c: c.timestamp,
}


class ResultAggregate:
    """Completed candidate results of one batch, in completion order."""

    def __init__(self) -> None:
        self._results: list[CandidateResult] = []
        self._index: dict[str, CandidateResult] = {}
        self._selected: list[str] = []

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[CandidateResult]:
        return iter(list(self._results))

    def __contains__(self, candidate_id: object) -> bool:
        return candidate_id in self._index

    def append(self, result: CandidateResult) -> None:
        if result.id in self._index:
            raise ValueError(f"Result for '{result.id}' already recorded")
        self._results.append(result)
        self._index[result.id] = result

    def get(self, candidate_id: str) -> CandidateResult | None:
        return self._index.get(candidate_id)

    def snapshot(self) -> list[CandidateResult]:
        return list(self._results)

    def sorted_by(
        self, field: SortField = SortField.MATCH_SCORE, direction: SortDir = SortDir.DESC
    ) -> list[CandidateResult]:
        """Return a sorted copy; equal keys keep completion order in both directions."""
        return sorted(
            self._results,
            key=_SORT_KEYS[SortField(field)],
            reverse=SortDir(direction) is SortDir.DESC,
        )

    @property
    def selected_ids(self) -> list[str]:
        return list(self._selected)

    def toggle_select(self, candidate_id: str) -> bool:
        """Toggle ``candidate_id`` in the comparison selection.

        Selecting beyond ``MAX_SELECTED`` or selecting an unknown id does
        nothing. Returns whether the id is selected afterwards.
        """
        if candidate_id in self._selected:
            self._selected.remove(candidate_id)
            return False
        if candidate_id in self._index and len(self._selected) < MAX_SELECTED:
            self._selected.append(candidate_id)
            return True
        return False

    def compare(self, candidate_ids: list[str] | None = None) -> ComparisonView:
        ids = self.selected_ids if candidate_ids is None else list(dict.fromkeys(candidate_ids))
        if len(ids) < 2:
            raise ValueError("Comparison needs at least two candidates")
        missing = [cid for cid in ids if cid not in self._index]
        if missing:
            raise KeyError(missing[0])

        candidates = sorted(
            (self._index[cid] for cid in ids),
            key=lambda c: c.result.match_score,
            reverse=True,
        )
        top = candidates[0]
        return ComparisonView(
            candidates=candidates,
            top_candidate_id=top.id,
            max_score=top.result.match_score,
        )
