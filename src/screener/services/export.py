import csv
import io
from collections.abc import Iterable

from screener.schemas.batch import CandidateResult
from screener.schemas.history import HistoryEntry

CSV_HEADERS = [
    "Candidate",
    "Job Title",
    "Score",
    "Recommendation",
    "Summary",
    "Strengths",
    "Concerns",
    "Reasoning",
    "Date",
]

DATE_FORMAT = "%Y-%m-%d %H:%M"


def _row(candidate: str, job_title: str, entry: HistoryEntry | CandidateResult) -> list[str]:
    result = entry.result
    return [
        candidate,
        job_title,
        str(result.match_score),
        result.recommendation.value,
        result.summary,
        "; ".join(result.strengths),
        "; ".join(result.concerns),
        result.reasoning,
        entry.timestamp.strftime(DATE_FORMAT),
    ]


def history_to_csv(entries: Iterable[HistoryEntry]) -> str:
    """Render history entries as CSV text with a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for entry in entries:
        writer.writerow(_row(entry.candidate_name, entry.job_title, entry))
    return buffer.getvalue()


def results_to_csv(results: Iterable[CandidateResult], job_title: str = "") -> str:
    """Render batch results as CSV; the candidate column holds the file name."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for result in results:
        writer.writerow(_row(result.file_name, job_title, result))
    return buffer.getvalue()
