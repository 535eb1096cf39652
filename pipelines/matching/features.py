"""
Feature Extraction for Field Matching.

Responsibilities:
- Tokenize free text into comparable tokens.
- Compute individual text and value similarity features.

Non-Responsibilities:
- No field-level weighting.
- No threshold logic.
- No persistence.

Invariant:
Missing data scores 0, never an error. Every ratio with an empty
denominator is 0.
"""

from __future__ import annotations

import re
from typing import List, Sequence

from . import config
from .rules import DEFAULT_RULES, RuleSet

_NON_WORD_RE = re.compile(r"[^\w\s]", re.ASCII)


def tokenize(text: str, rules: RuleSet = DEFAULT_RULES) -> List[str]:
    if not text:
        return []
    cleaned = _NON_WORD_RE.sub(" ", text.lower())
    tokens = [token for token in cleaned.split() if token not in rules.stopwords]
    if rules.max_tokens:
        tokens = tokens[: rules.max_tokens]
    return tokens


def exact_match_score(tokens1: Sequence[str], tokens2: Sequence[str]) -> float:
    """Jaccard overlap of the two token sets."""
    set1, set2 = set(tokens1), set(tokens2)
    union = set1 | set2
    if not union:
        return 0.0
    return len(set1 & set2) / len(union)


def partial_match_score(tokens1: Sequence[str], tokens2: Sequence[str]) -> float:
    """Share of all token pairs where one token contains the other."""
    total = len(tokens1) * len(tokens2)
    if total == 0:
        return 0.0
    matches = sum(1 for t1 in tokens1 for t2 in tokens2 if t1 in t2 or t2 in t1)
    return matches / total


def order_match_score(tokens1: Sequence[str], tokens2: Sequence[str]) -> float:
    """Share of position-aligned tokens that are identical."""
    length = min(len(tokens1), len(tokens2))
    if length == 0:
        return 0.0
    aligned = sum(1 for i in range(length) if tokens1[i] == tokens2[i])
    return aligned / length


def length_ratio_score(tokens1: Sequence[str], tokens2: Sequence[str]) -> float:
    longest = max(len(tokens1), len(tokens2))
    if longest == 0:
        return 0.0
    return min(len(tokens1), len(tokens2)) / longest


def shared_category_shortcut(
    tokens1: Sequence[str], tokens2: Sequence[str], rules: RuleSet = DEFAULT_RULES
) -> bool:
    """True when both token lists hit a keyword of the same category.

    Rules are tried in declared order and the first shared one decides; no
    attempt is made to find a better category further down the table.
    """
    for rule in rules.categories:
        hit1 = any(pattern in token for pattern in rule.patterns for token in tokens1)
        if hit1 and any(pattern in token for pattern in rule.patterns for token in tokens2):
            return True
    return False


def text_similarity(text1: str, text2: str, rules: RuleSet = DEFAULT_RULES) -> float:
    if not text1 or not text2 or not text1.strip() or not text2.strip():
        return 0.0

    tokens1 = tokenize(text1, rules)
    tokens2 = tokenize(text2, rules)
    if not tokens1 or not tokens2:
        return 0.0

    if shared_category_shortcut(tokens1, tokens2, rules):
        return config.CATEGORY_SHORTCUT_SCORE

    return (
        exact_match_score(tokens1, tokens2) * config.EXACT_MATCH_WEIGHT
        + partial_match_score(tokens1, tokens2) * config.PARTIAL_MATCH_WEIGHT
        + order_match_score(tokens1, tokens2) * config.ORDER_MATCH_WEIGHT
        + length_ratio_score(tokens1, tokens2) * config.LENGTH_RATIO_WEIGHT
    )


def value_similarity(value1: str, value2: str, rules: RuleSet = DEFAULT_RULES) -> float:
    if not value1 or not value2:
        return 0.0

    for rule in rules.categories:
        for pattern in rule.value_patterns:
            if pattern.fullmatch(value1) and pattern.fullmatch(value2):
                return config.VALUE_PATTERN_SCORE

    return text_similarity(value1, value2, rules)


__all__ = [
    "tokenize",
    "exact_match_score",
    "partial_match_score",
    "order_match_score",
    "length_ratio_score",
    "shared_category_shortcut",
    "text_similarity",
    "value_similarity",
]
