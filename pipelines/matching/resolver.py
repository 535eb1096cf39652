"""
Field Match Resolver.

Responsibilities:
- Score a candidate field against every pool entry.
- Apply the per-pair acceptance threshold.
- Return an explainable result: the adopted field, its score and the
  threshold it cleared.

Non-Responsibilities:
- No database access.
- No feature computation.
- No writing values anywhere.

Invariant:
This module must be deterministic given the same inputs. Ties go to the
first entry in pool order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from . import config
from .classifier import same_known_category
from .descriptors import FieldDescriptor
from .rules import DEFAULT_RULES, RuleSet
from .scoring import field_similarity

logger = logging.getLogger("formmatch.matching.resolver")


@dataclass(frozen=True)
class FieldMatch:
    field: Optional[FieldDescriptor]
    score: float
    threshold: Optional[float] = None

    @property
    def matched(self) -> bool:
        return self.field is not None


NO_MATCH = FieldMatch(field=None, score=0.0)


def threshold_for(
    candidate: FieldDescriptor, entry: FieldDescriptor, rules: RuleSet = DEFAULT_RULES
) -> float:
    if same_known_category(candidate, entry, rules):
        return config.SAME_CATEGORY_FIELD_THRESHOLD
    return config.FIELD_THRESHOLD


def best_field_match(
    candidate: FieldDescriptor,
    pool: Sequence[FieldDescriptor],
    rules: RuleSet = DEFAULT_RULES,
    max_pool: Optional[int] = None,
) -> FieldMatch:
    if max_pool:
        pool = pool[:max_pool]

    best = NO_MATCH

    for entry in pool:
        score = field_similarity(candidate, entry, rules)
        threshold = threshold_for(candidate, entry, rules)
        logger.debug(
            "Field similarity %s -> %s = %.3f (threshold %.1f)",
            candidate.display_name(),
            entry.display_name(),
            score,
            threshold,
        )
        if score > best.score and score > threshold:
            best = FieldMatch(field=entry, score=score, threshold=threshold)

    return best


__all__ = [
    "FieldMatch",
    "NO_MATCH",
    "threshold_for",
    "best_field_match",
]
