"""Bounded in-process history of completed analyses, newest first."""

import uuid

from screener.schemas.analysis import AnalysisResult, Recommendation
from screener.schemas.history import HistoryEntry
from screener.storage.history import HistoryRecorder


class InMemoryHistoryRecorder(HistoryRecorder):
    def __init__(self, max_entries: int = 20) -> None:
        self.max_entries = max_entries
        self._entries: list[HistoryEntry] = []

    def record(self, candidate_label: str, job_label: str, result: AnalysisResult) -> None:
        entry = HistoryEntry(candidate_name=candidate_label, job_title=job_label, result=result)
        # Oldest entries fall off the end once the cap is reached
        self._entries = [entry, *self._entries][: self.max_entries]

    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    def search(
        self,
        query: str = "",
        recommendation: Recommendation | None = None,
    ) -> list[HistoryEntry]:
        needle = query.strip().lower()
        matches: list[HistoryEntry] = []
        for entry in self._entries:
            if recommendation is not None and entry.result.recommendation != recommendation:
                continue
            if needle and not any(
                needle in text.lower()
                for text in (entry.candidate_name, entry.job_title, entry.result.summary)
            ):
                continue
            matches.append(entry)
        return matches

    def remove(self, entry_id: uuid.UUID) -> bool:
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.id != entry_id]
        return len(self._entries) != before

    def clear(self) -> None:
        self._entries = []
