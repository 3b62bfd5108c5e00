"""
qcommerce_insights/questions/catalog.py
-----------------------------------------
The ordered question catalog that drives the survey wizard.

The catalog is static: it is built once at import time and never mutated.
Order matters. It drives wizard traversal and "QUESTION n" numbering as well
as the column order of the export record.

Usage
-----
    from qcommerce_insights.questions.catalog import DEFAULT_CATALOG

    DEFAULT_CATALOG.answerable()          # every non-header entry
    DEFAULT_CATALOG.display_number(2)     # 2 -> "QUESTION 2"
"""
from __future__ import annotations

import math
import re
from typing import Dict, Iterable, List, Optional, Tuple

from qcommerce_insights.models.domain.questions import (
    Choice,
    QuestionDefinition,
    QuestionKind,
)

# question id -> label used in the demographics summary, in summary order
DEMOGRAPHIC_LABELS: Dict[str, str] = {
    "name": "Name",
    "age": "Age",
    "gender": "Gender",
    "education": "Educational Qualification",
    "maritalStatus": "Marital Status",
    "employmentStatus": "Employability Status",
}

MINUTES_PER_QUESTION = 0.15

# first column of every export record; no answerable prompt may reuse it
TIMESTAMP_KEY = "Timestamp"

_EXAMPLE_RE = re.compile(r"(.*)\((Example:.*)\)", re.DOTALL)


class Catalog:
    """Immutable, ordered collection of question definitions."""

    def __init__(self, questions: Iterable[QuestionDefinition]):
        self._questions: Tuple[QuestionDefinition, ...] = tuple(questions)
        if not self._questions:
            raise ValueError("catalog must contain at least one question")

        self._by_id: Dict[str, int] = {}
        prompts: Dict[str, str] = {}
        for idx, q in enumerate(self._questions):
            if q.id in self._by_id:
                raise ValueError(f"duplicate question id {q.id!r}")
            self._by_id[q.id] = idx
            if q.is_answerable:
                # prompt text is the export key, so it must be unique too
                if q.prompt == TIMESTAMP_KEY:
                    raise ValueError(
                        f"question {q.id!r} uses the reserved export column {TIMESTAMP_KEY!r} as its prompt"
                    )
                if q.prompt in prompts:
                    raise ValueError(
                        f"questions {prompts[q.prompt]!r} and {q.id!r} share the same prompt"
                    )
                prompts[q.prompt] = q.id

        self._answerable: Tuple[QuestionDefinition, ...] = tuple(
            q for q in self._questions if q.is_answerable
        )
        if not self._answerable:
            raise ValueError("catalog must contain at least one answerable question")
        self._answerable_pos: Dict[str, int] = {
            q.id: pos for pos, q in enumerate(self._answerable)
        }

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self):
        return iter(self._questions)

    def __getitem__(self, step: int) -> QuestionDefinition:
        return self._questions[step]

    def __contains__(self, question_id: object) -> bool:
        return question_id in self._by_id

    @property
    def questions(self) -> Tuple[QuestionDefinition, ...]:
        return self._questions

    def answerable(self) -> Tuple[QuestionDefinition, ...]:
        return self._answerable

    def get(self, question_id: str) -> Optional[QuestionDefinition]:
        idx = self._by_id.get(question_id)
        return None if idx is None else self._questions[idx]

    def index_of(self, question_id: str) -> int:
        return self._by_id[question_id]

    def answerable_index(self, step: int) -> Optional[int]:
        """Position of ``step`` among answerable questions, None for headers."""
        return self._answerable_pos.get(self._questions[step].id)

    def preceding_answerable_index(self, step: int) -> Optional[int]:
        """Answerable position of the nearest answerable entry before ``step``."""
        for idx in range(step - 1, -1, -1):
            pos = self._answerable_pos.get(self._questions[idx].id)
            if pos is not None:
                return pos
        return None

    @property
    def last_answerable_step(self) -> int:
        return self._by_id[self._answerable[-1].id]

    def display_number(self, step: int) -> Optional[int]:
        pos = self.answerable_index(step)
        return None if pos is None else pos + 1

    @property
    def estimated_minutes(self) -> int:
        return math.ceil(len(self._answerable) * MINUTES_PER_QUESTION)

    def likert(self, prefixes: Optional[Iterable[str]] = None) -> List[QuestionDefinition]:
        wanted = tuple(prefixes) if prefixes else ()
        return [
            q for q in self._answerable
            if q.kind == QuestionKind.LIKERT and (not wanted or q.id.startswith(wanted))
        ]


def split_example(prompt: str) -> Tuple[str, Optional[str]]:
    """Split ``"text (Example: ...)"`` into the main text and the example."""
    match = _EXAMPLE_RE.match(prompt)
    if not match:
        return prompt, None
    return match.group(1).strip(), match.group(2).strip()


def personalize(prompt: str, name: Optional[str]) -> str:
    return prompt.replace("{name}", (name or "").strip() or "you")


# ── Default catalog ───────────────────────────────────────────────────────────

DARK_PATTERN_ITEMS: List[str] = [
    "Adding additional products to users’ shopping carts without their consent in quick com apps. (Example: An extra snack or trial product gets added automatically at checkout.)",
    "Revealing previously undisclosed charges to users right before they make a purchase in quick com apps. (Example: Delivery fees or platform charges appear only on the final bill.)",
    "Charging users a recurring fee under the pretense of a one-time fee or a free trial in quick com apps. (Example: A “free delivery trial” turns into an auto-renewed paid plan.)",
    "Indicating to users that a deal or discount will expire using a counting-down timer in quick com apps. (Example: “Hurry! 10 minutes left to claim this offer.”)",
    "Indicating to users that a deal or sale will expire soon without specifying a deadline in quick com apps. (Example: “Offer valid for a short time only.”)",
    "Using language and emotion (shame) to steer users away from making a certain choice in quick com apps. (Example: A pop-up says, “No thanks, I don’t like saving money.”)",
    "Using style and visual presentation to steer users to or away from certain choices in quick com apps. (Example: Costlier delivery options are shown in bold while cheaper ones are hidden.)",
    "Using confusing language to steer users into making certain choices in quick com apps. (Example: Opt-out boxes for promotions are worded in a tricky way.)",
    "Pre-selecting more expensive variations of a product, or pressuring the user to accept the more expensive variations of a product and related products in quick com apps. (Example: A larger pack of groceries is pre-selected instead of the smaller one.)",
    "Informing the user about the activity on the platform (e.g., purchases, views, visits) in quick com apps. (Example: “20 people ordered this item in the last 5 minutes.”)",
    "Testimonials on a product page whose origin is unclear in quick com apps. (Example: Generic reviews like “Great product!” without buyer verification.)",
    "Indicating to users that limited quantities of a product are available, increasing its desirability in quick com apps. (Example: “Only 2 units left – order now.”)",
    "Indicating to users that a product is in high demand and likely to sell out soon, increasing its desirability in quick com apps. (Example: “Selling fast! Almost gone.”)",
    "Making it easy for the user to sign up for a service but hard to cancel it in quick com apps. (Example: Cancelling or modifying an order requires multiple steps.)",
    "Coercing users to create accounts or share their information to complete their tasks in quick com apps. (Example: The app forces sign-up before browsing products.)",
]

CONSUMER_BEHAVIOR_ITEMS: List[str] = [
    "The quick commerce app has an attractive and appealing design.",
    "The quick commerce app interface is user-friendly and easy to navigate.",
    "The quick commerce app provides clear product information.",
    "The quick commerce app has a good reputation in the market.",
    "I trust this quick commerce app’s brand and services.",
    "The quick commerce app provides reliable and quality products.",
    "I have a positive attitude toward shopping on quick commerce apps.",
    "Shopping on quick commerce apps is a good idea for purchasing products.",
    "I find shopping on quick commerce apps to be advantageous.",
    "I trust quick commerce apps to protect my personal information.",
    "I believe quick commerce apps will deliver products as promised.",
    "I trust the payment security systems of quick commerce apps.",
    "The convenience of shopping from home motivates my purchases on quick commerce apps.",
    "Promotional offers and discounts affect my decisions when using quick commerce apps.",
    "An urgent need for products drives me to shop using quick commerce apps",
]


def _likert_block(prefix: str, items: List[str]) -> List[QuestionDefinition]:
    return [
        QuestionDefinition(id=f"{prefix}_{i}", kind=QuestionKind.LIKERT, prompt=text, required=True)
        for i, text in enumerate(items, start=1)
    ]


def _choices(*pairs: Tuple[str, str]) -> Tuple[Choice, ...]:
    return tuple(Choice(label=label, value=value) for label, value in pairs)


DEFAULT_QUESTIONS: List[QuestionDefinition] = [
    QuestionDefinition(
        id="intro",
        kind=QuestionKind.HEADER,
        prompt="Alright let's get to know you a bit",
    ),
    QuestionDefinition(
        id="name",
        kind=QuestionKind.TEXT,
        prompt="What is your name? (Optional)",
        required=False,
    ),
    QuestionDefinition(
        id="age",
        kind=QuestionKind.NUMBER,
        prompt="What is your age (in completed years)?",
        required=True,
    ),
    QuestionDefinition(
        id="gender",
        kind=QuestionKind.SINGLE_CHOICE_OTHER,
        prompt="Gender",
        required=True,
        choices=_choices(("Male", "male"), ("Female", "female")),
    ),
    QuestionDefinition(
        id="education",
        kind=QuestionKind.SINGLE_CHOICE,
        prompt="Educational Qualification",
        required=True,
        choices=_choices(
            ("10th grade", "10th"),
            ("12th grade", "12th"),
            ("Undergraduation", "ug"),
            ("Post-graduation", "pg"),
            ("PhD", "phd"),
            ("Postdoctoral researcher", "postdoc"),
        ),
    ),
    QuestionDefinition(
        id="maritalStatus",
        kind=QuestionKind.SINGLE_CHOICE,
        prompt="Marital Status",
        required=True,
        choices=_choices(
            ("Single", "single"),
            ("Married", "married"),
            ("Widowed", "widowed"),
            ("Divorced", "divorced"),
        ),
    ),
    QuestionDefinition(
        id="employmentStatus",
        kind=QuestionKind.SINGLE_CHOICE,
        prompt="Employability Status",
        required=True,
        choices=_choices(
            ("Employed", "employed"),
            ("Unemployed", "unemployed"),
            ("Retired", "retired"),
        ),
    ),
    QuestionDefinition(
        id="darkPatternsHeader",
        kind=QuestionKind.HEADER,
        prompt="Great! Let's see if you experience dark patterns in quick commerce apps",
    ),
    *_likert_block("dp", DARK_PATTERN_ITEMS),
    QuestionDefinition(
        id="ocbHeader",
        kind=QuestionKind.HEADER,
        prompt="Now, let's see how they affect Online Consumer Behavior",
    ),
    *_likert_block("ocb", CONSUMER_BEHAVIOR_ITEMS),
]

DEFAULT_CATALOG = Catalog(DEFAULT_QUESTIONS)
