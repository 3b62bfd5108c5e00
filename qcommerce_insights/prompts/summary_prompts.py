"""
qcommerce_insights/prompts/summary_prompts.py
-----------------------------------------------
Prompt template for the respondent-facing survey summary.

Inputs:
  - demographics — "Name: ..., Age: ..., ..." (may be empty)
  - responses    — numbered block of "<statement> - Response: <1-5>" lines
"""
from __future__ import annotations

from typing import List

from langchain_core.prompts import ChatPromptTemplate

LIKERT_SCALE_NOTE = (
    "Responses use a 5-point agreement scale: "
    "1 = Strongly Disagree, 2 = Disagree, 3 = Neutral, 4 = Agree, 5 = Strongly Agree."
)

SURVEY_SUMMARY_PROMPT = ChatPromptTemplate.from_messages([
    (
        "system",
        "You are an AI assistant that summarizes survey responses and provides a "
        "personalized short summary of the user's overall sentiment and key takeaways.\n\n"
        "The survey asks how often the respondent notices dark patterns (manipulative "
        "design choices) in quick commerce apps, and how those apps shape their online "
        "consumer behavior.\n\n"
        + LIKERT_SCALE_NOTE
        + "\n\n"
        "Provide a concise and visually appealing summary as if it were a streaming "
        "recommendation screen. Address the respondent directly. Do not invent answers "
        "that are not listed.\n\n"
        "Respond with ONLY valid JSON in this exact format:\n"
        '{{"summary": "<the summary text>"}}',
    ),
    (
        "human",
        "Demographics: {demographics}\n\n"
        "Survey Responses:\n{responses}",
    ),
])


def format_responses(responses: List[str]) -> str:
    """Number the response lines the way the prompt expects."""
    if not responses:
        return "(No responses provided.)"
    return "\n".join(f"{i}. {line}" for i, line in enumerate(responses, 1))
