"""
qcommerce_insights/services/response_shaper.py
------------------------------------------------
Turns a validated ResponseRecord into the three views the outbound calls need:

  - demographics summary  — "Name: Asha, Age: 29, Gender: female, ..."
  - Likert response lines — "<prompt> - Response: <value>", catalog order
  - export record         — {"Timestamp": iso, <prompt>: <value>, ...}

Pure: no I/O, no logging of answers.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from qcommerce_insights.models.domain._time import utcnow
from qcommerce_insights.models.domain.questions import (
    OTHER_VALUE,
    QuestionDefinition,
    ResponseRecord,
    companion_id,
)
from qcommerce_insights.models.domain.submission import ShapedSubmission
from qcommerce_insights.questions.catalog import DEMOGRAPHIC_LABELS, TIMESTAMP_KEY, Catalog


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def answer_value(record: ResponseRecord, q: QuestionDefinition) -> Any:
    """The stored answer, with the "other" sentinel replaced by its free text."""
    value = record.get(q.id)
    if q.has_other and value == OTHER_VALUE:
        return record.get(companion_id(q.id)) or ""
    return "" if value is None else value


def demographics_summary(record: ResponseRecord, catalog: Catalog) -> str:
    parts: List[str] = []
    for qid, label in DEMOGRAPHIC_LABELS.items():
        q = catalog.get(qid)
        if q is None:
            continue
        value = answer_value(record, q)
        if _present(value):
            parts.append(f"{label}: {value}")
    return ", ".join(parts)


def likert_response_lines(
    record: ResponseRecord,
    catalog: Catalog,
    prefixes: Optional[Iterable[str]] = None,
) -> List[str]:
    return [
        f"{q.prompt} - Response: {answer_value(record, q)}"
        for q in catalog.likert(prefixes)
    ]


def export_record(
    record: ResponseRecord,
    catalog: Catalog,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    row: Dict[str, Any] = {TIMESTAMP_KEY: (now or utcnow()).isoformat()}
    for q in catalog.answerable():
        row[q.prompt] = answer_value(record, q)
    return row


def shape(
    record: ResponseRecord,
    catalog: Catalog,
    *,
    likert_prefixes: Optional[Iterable[str]] = None,
    now: Optional[datetime] = None,
) -> ShapedSubmission:
    prefixes = tuple(likert_prefixes) if likert_prefixes else None
    return ShapedSubmission(
        demographics_summary=demographics_summary(record, catalog),
        likert_response_lines=likert_response_lines(record, catalog, prefixes),
        export_record=export_record(record, catalog, now=now),
    )
