from abc import ABC, abstractmethod

from screener.schemas.analysis import AnalysisResult


class HistoryRecorder(ABC):
    @abstractmethod
    def record(self, candidate_label: str, job_label: str, result: AnalysisResult) -> None:
        """Persist one completed analysis. The caller ignores the outcome."""
        ...
