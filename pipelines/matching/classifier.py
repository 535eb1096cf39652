"""Field categorization against the ordered rule table."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Pattern, Tuple

from .descriptors import FieldDescriptor
from .rules import DEFAULT_RULES, Category, RuleSet

SEMANTIC_PATTERNS: Tuple[Tuple[str, Pattern[str]], ...] = (
    ("email", re.compile(r"email|e-mail")),
    ("name", re.compile(r"name|fullname|full[\s-]name|first[\s-]name|last[\s-]name")),
    ("phone", re.compile(r"phone|mobile|cell|telephone")),
    ("address", re.compile(r"address|street|city|state|zip|postal")),
    ("password", re.compile(r"password|pwd|pass")),
    ("username", re.compile(r"username|user[\s-]name|login")),
    ("creditcard", re.compile(r"card|credit|ccv|cvv|cvc|expir")),
    ("date", re.compile(r"date|dob|birth|day|month|year")),
)


def category_haystack(field: FieldDescriptor) -> str:
    return " ".join(
        (field.label, field.name, field.placeholder, field.id, field.css_class)
    ).lower()


@lru_cache(maxsize=4096)
def category_of(field: FieldDescriptor, rules: RuleSet = DEFAULT_RULES) -> Category:
    haystack = category_haystack(field)
    for rule in rules.categories:
        # A keyword hit decides on its own, whatever the field type.
        if rule.matches_text(haystack):
            return rule.category
    return Category.UNKNOWN


def same_known_category(
    field1: FieldDescriptor, field2: FieldDescriptor, rules: RuleSet = DEFAULT_RULES
) -> bool:
    category = category_of(field1, rules)
    return category is not Category.UNKNOWN and category is category_of(field2, rules)


def semantic_type(field: FieldDescriptor) -> str:
    """Finer-grained label for display; never used in scoring."""
    text = " ".join((field.label, field.name, field.placeholder, field.id)).lower()
    for label, pattern in SEMANTIC_PATTERNS:
        if pattern.search(text):
            return label
    return "unknown"


__all__ = [
    "category_haystack",
    "category_of",
    "same_known_category",
    "semantic_type",
]
