"""
Category Rule Tables.

Responsibilities:
- Declare the closed, ordered set of field categories.
- Declare the stopwords dropped before text comparison.
- Bundle both into an immutable RuleSet handed to every scorer.

Non-Responsibilities:
- No scoring.
- No classification logic.

Invariant:
Rule order is priority order. The first rule that matches wins, so the
tables are tuples and must never be rebuilt from a mapping.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import FrozenSet, Optional, Pattern, Tuple


class Category(str, Enum):
    IDENTITY = "identity"
    CONTACT = "contact"
    NUMERIC = "numeric"
    SELECTION = "selection"
    BOOLEAN = "boolean"
    MESSAGE = "message"
    ADDRESS = "address"
    DATE = "date"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class CategoryRule:
    category: Category
    patterns: Tuple[str, ...]
    types: FrozenSet[str]
    value_patterns: Tuple[Pattern[str], ...] = ()

    def matches_text(self, text: str) -> bool:
        """True when any keyword fragment occurs inside ``text``."""
        return any(pattern in text for pattern in self.patterns)


@dataclass(frozen=True)
class RuleSet:
    categories: Tuple[CategoryRule, ...]
    stopwords: FrozenSet[str]
    max_tokens: Optional[int] = None

    def with_token_limit(self, max_tokens: Optional[int]) -> "RuleSet":
        return replace(self, max_tokens=max_tokens or None)


CATEGORY_RULES: Tuple[CategoryRule, ...] = (
    CategoryRule(
        category=Category.IDENTITY,
        patterns=(
            "name",
            "fullname",
            "username",
            "user",
            "login",
            "firstname",
            "lastname",
            "surname",
        ),
        types=frozenset({"text", "string"}),
        value_patterns=(re.compile(r"[A-Za-z\s\-'.]+"),),
    ),
    CategoryRule(
        category=Category.CONTACT,
        patterns=(
            "email",
            "mail",
            "e-mail",
            "phone",
            "telephone",
            "mobile",
            "cell",
            "fax",
            "contact",
        ),
        types=frozenset({"email", "tel", "text"}),
        value_patterns=(
            re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+"),  # email
            re.compile(r"[\d+\-()\s.]+"),  # phone
        ),
    ),
    CategoryRule(
        category=Category.NUMERIC,
        patterns=("age", "year", "number", "amount", "quantity", "count", "total"),
        types=frozenset({"number", "range"}),
        value_patterns=(re.compile(r"\d+"),),
    ),
    CategoryRule(
        category=Category.SELECTION,
        patterns=("category", "type", "group", "option", "choice", "select", "topic"),
        types=frozenset({"select", "select-one", "radio"}),
    ),
    CategoryRule(
        category=Category.BOOLEAN,
        patterns=(
            "subscribe",
            "newsletter",
            "agree",
            "accept",
            "terms",
            "consent",
            "opt",
        ),
        types=frozenset({"checkbox", "radio"}),
        value_patterns=(re.compile(r"yes|no|true|false|0|1", re.IGNORECASE),),
    ),
    CategoryRule(
        category=Category.MESSAGE,
        patterns=("message", "comment", "feedback", "description", "details", "notes"),
        types=frozenset({"textarea", "text"}),
    ),
    CategoryRule(
        category=Category.ADDRESS,
        patterns=("address", "street", "city", "state", "country", "zip", "postal", "code"),
        types=frozenset({"text", "string"}),
    ),
    CategoryRule(
        category=Category.DATE,
        patterns=("date", "day", "month", "year", "birth", "dob", "start", "end"),
        types=frozenset({"date", "datetime-local", "text"}),
        value_patterns=(
            re.compile(r"\d{4}-\d{2}-\d{2}"),  # YYYY-MM-DD
            re.compile(r"\d{1,2}/\d{1,2}/\d{2,4}"),  # M/D/YY or MM/DD/YYYY
        ),
    ),
)

STOPWORDS: FrozenSet[str] = frozenset(
    {
        "a",
        "an",
        "the",
        "and",
        "or",
        "but",
        "is",
        "are",
        "was",
        "were",
        "be",
        "been",
        "being",
        "to",
        "from",
        "in",
        "out",
        "on",
        "off",
        "for",
        "of",
        "by",
        "with",
        "about",
        "against",
        "between",
        "into",
        "through",
        "during",
        "before",
        "after",
        "above",
        "below",
        "up",
        "down",
        "please",
        "enter",
        "your",
        "you",
        "this",
        "that",
        "field",
        "input",
        "select",
        "choose",
        "fill",
        "write",
        "required",
        "optional",
        "form",
        "submit",
        "reset",
        "clear",
    }
)

DEFAULT_RULES = RuleSet(categories=CATEGORY_RULES, stopwords=STOPWORDS)


__all__ = [
    "Category",
    "CategoryRule",
    "RuleSet",
    "CATEGORY_RULES",
    "STOPWORDS",
    "DEFAULT_RULES",
]
