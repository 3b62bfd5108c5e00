"""
qcommerce_insights/services/response_schema.py
------------------------------------------------
Declarative validation of survey answers.

The schema is a pydantic model generated from the question catalog: one field
per answerable question (aliased to the question id) plus one optional
free-text companion per "single choice with other" question. The same per-field
types back both full-record validation (before submission) and single-step
validation (before the wizard advances).

Usage
-----
    from qcommerce_insights.services.response_schema import ResponseSchema

    schema = ResponseSchema(DEFAULT_CATALOG)
    errors = schema.validate_step("age", {"age": "abc"})   # {"age": "..."}
    clean = schema.validate(record)   # raises ResponseValidationError
"""
from __future__ import annotations

import logging
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Type

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    create_model,
)

from qcommerce_insights.errors import ResponseValidationError
from qcommerce_insights.models.domain.questions import (
    OTHER_VALUE,
    QuestionDefinition,
    QuestionKind,
    ResponseRecord,
    companion_id,
)
from qcommerce_insights.questions.catalog import Catalog

logger = logging.getLogger(__name__)

# question id -> inclusive (min, max) for number questions
NUMBER_BOUNDS: Dict[str, Tuple[int, int]] = {"age": (1, 120)}
DEFAULT_NUMBER_BOUNDS: Tuple[int, int] = (0, 1_000_000)

REQUIRED_MSG = "This field is required"
OTHER_REQUIRED_MSG = "Please specify"


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _blank_to_none(value: Any) -> Any:
    return None if _is_blank(value) else value


def _as_choice_value(value: Any) -> Any:
    # Likert answers may arrive as JSON numbers
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return value


def _field_type(q: QuestionDefinition) -> Any:
    """Pydantic type for a single answer, ignoring required-ness."""
    if q.kind == QuestionKind.TEXT:
        return Annotated[str, Field(max_length=500)]
    if q.kind == QuestionKind.NUMBER:
        lo, hi = NUMBER_BOUNDS.get(q.id, DEFAULT_NUMBER_BOUNDS)
        return Annotated[int, Field(ge=lo, le=hi)]
    values = tuple(q.choice_values())
    return Annotated[Literal[values], BeforeValidator(_as_choice_value)]  # type: ignore[valid-type]


def _annotation(q: QuestionDefinition) -> Any:
    inner = _field_type(q)
    if q.required:
        if q.kind == QuestionKind.TEXT:
            return Annotated[inner, Field(min_length=1), BeforeValidator(_strip)]
        return inner
    return Annotated[Optional[inner], BeforeValidator(_blank_to_none)]


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


class ResponseSchema:
    """Validates ResponseRecords against the catalog."""

    def __init__(self, catalog: Catalog):
        self.catalog = catalog
        self._adapters: Dict[str, TypeAdapter] = {}
        fields: Dict[str, Any] = {}

        for idx, q in enumerate(catalog.answerable()):
            annotation = _annotation(q)
            self._adapters[q.id] = TypeAdapter(annotation)
            default = ... if q.required else None
            fields[f"q{idx}"] = (annotation, Field(default, alias=q.id))
            if q.has_other:
                fields[f"q{idx}_other"] = (
                    Optional[str],
                    Field(None, alias=companion_id(q.id)),
                )

        self.model: Type[BaseModel] = create_model(  # type: ignore[call-overload]
            "SurveyResponse",
            __config__=ConfigDict(extra="ignore", populate_by_name=False),
            **fields,
        )

    # ── Full record ───────────────────────────────────────────────────────────

    def validate(self, record: ResponseRecord) -> ResponseRecord:
        """
        Validate a complete record.

        Returns the cleaned record keyed by question id (numbers coerced,
        blanks of optional questions normalised to None). Raises
        ResponseValidationError with one message per failing field.
        """
        errors: Dict[str, str] = {}
        cleaned: ResponseRecord = {}
        try:
            parsed = self.model.model_validate(dict(record))
            cleaned = parsed.model_dump(by_alias=True)
        except ValidationError as exc:
            errors.update(self._collect(exc, record))

        errors.update(self._companion_errors(record))
        if errors:
            ordered = {k: errors[k] for k in self._field_order() if k in errors}
            logger.debug("Response validation failed on %d field(s): %s", len(ordered), list(ordered))
            raise ResponseValidationError(ordered)
        return cleaned

    def is_valid(self, record: ResponseRecord) -> bool:
        try:
            self.validate(record)
        except ResponseValidationError:
            return False
        return True

    # ── Single step ───────────────────────────────────────────────────────────

    def validate_step(self, question_id: str, record: ResponseRecord) -> Dict[str, str]:
        """Field-level errors for one question (and its companion); empty when valid."""
        q = self.catalog.get(question_id)
        if q is None or not q.is_answerable:
            return {}

        value = record.get(question_id)
        if q.required and _is_blank(value):
            return {question_id: REQUIRED_MSG}
        try:
            self._adapters[question_id].validate_python(value)
        except ValidationError as exc:
            return {question_id: self._message(q, exc.errors()[0], value)}
        return self._companion_errors(record, only=q)

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _companion_errors(
        self,
        record: ResponseRecord,
        only: Optional[QuestionDefinition] = None,
    ) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        targets = [only] if only is not None else self.catalog.answerable()
        for q in targets:
            if not q.has_other:
                continue
            if record.get(q.id) == OTHER_VALUE and _is_blank(record.get(companion_id(q.id))):
                errors[companion_id(q.id)] = OTHER_REQUIRED_MSG
        return errors

    def _collect(self, exc: ValidationError, record: ResponseRecord) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        for err in exc.errors():
            loc = err.get("loc") or ()
            field = str(loc[0]) if loc else "__root__"
            if field in errors:
                continue
            q = self.catalog.get(field)
            if q is None:
                errors[field] = err.get("msg", "Invalid value")
                continue
            errors[field] = self._message(q, err, record.get(field))
        return errors

    def _message(self, q: QuestionDefinition, err: Dict[str, Any], value: Any) -> str:
        kind = err.get("type", "")
        if kind == "missing" or (q.required and _is_blank(value)):
            return REQUIRED_MSG
        if kind in ("int_parsing", "int_type", "int_from_float"):
            return "Please enter a whole number"
        if kind in ("greater_than_equal", "less_than_equal"):
            lo, hi = NUMBER_BOUNDS.get(q.id, DEFAULT_NUMBER_BOUNDS)
            return f"Please enter a number between {lo} and {hi}"
        if kind == "literal_error":
            return "Please choose one of the listed options"
        if kind == "string_too_long":
            return "Answer is too long"
        return err.get("msg", "Invalid value")

    def _field_order(self) -> List[str]:
        order: List[str] = []
        for q in self.catalog.answerable():
            order.append(q.id)
            if q.has_other:
                order.append(companion_id(q.id))
        order.append("__root__")
        return order
