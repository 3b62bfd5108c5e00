"""
qcommerce_insights/services/summary_service.py
------------------------------------------------
LLM-backed summarizer for a respondent's answers.

Contract: ``{demographics: str, responses: [str]} -> {summary: str}``.

Import
------
    from qcommerce_insights.services.summary_service import SummaryService

    svc = SummaryService(settings)
    result = await svc.summarize("Age: 29", ["... - Response: 4"])
    print(result.summary)
"""
from __future__ import annotations

import json
import logging
import re
from typing import List, Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser
from langchain_openai import ChatOpenAI

from qcommerce_insights.config import Settings
from qcommerce_insights.errors import SummarizationError
from qcommerce_insights.models.domain.submission import SurveySummary
from qcommerce_insights.prompts.summary_prompts import (
    SURVEY_SUMMARY_PROMPT,
    format_responses,
)

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


def parse_summary(raw: str) -> SurveySummary:
    """
    Parse the model output into a SurveySummary.

    Accepts bare JSON, JSON inside a markdown code block, or plain text (used
    verbatim). Raises SummarizationError when nothing usable came back.
    """
    text = (raw or "").strip()
    if not text:
        raise SummarizationError("Summarizer returned an empty response")

    candidates = [text]
    fenced = _FENCED_JSON.search(text)
    if fenced:
        candidates.append(fenced.group(1).strip())

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict) and isinstance(parsed.get("summary"), str):
            summary = parsed["summary"].strip()
            if not summary:
                raise SummarizationError("Summarizer returned an empty summary")
            return SurveySummary(summary=summary)

    # model ignored the JSON instruction; use the raw text
    return SurveySummary(summary=text)


class SummaryService:
    """Runs the survey summary prompt against the configured chat model."""

    def __init__(self, settings: Settings, llm: Optional[BaseChatModel] = None):
        self.settings = settings
        self._llm = llm
        self._chain = None

    @property
    def chain(self):
        # Built on first use so the app starts without OPENAI_API_KEY
        if self._chain is None:
            llm = self._llm or ChatOpenAI(
                model=self.settings.summary_model,
                temperature=self.settings.summary_temperature,
                api_key=self.settings.openai_api_key,
            )
            self._chain = SURVEY_SUMMARY_PROMPT | llm | StrOutputParser()
        return self._chain

    async def summarize(self, demographics: str, responses: List[str]) -> SurveySummary:
        try:
            raw = await self.chain.ainvoke({
                "demographics": demographics or "(not provided)",
                "responses": format_responses(responses),
            })
        except Exception as e:
            raise SummarizationError(f"Summarizer call failed: {e}") from e

        summary = parse_summary(raw)
        logger.info("Survey summary generated (%d chars, %d responses)", len(summary.summary), len(responses))
        return summary
