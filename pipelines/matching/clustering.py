"""Greedy seed-based grouping of similar fields."""

from __future__ import annotations

from functools import partial
from typing import Callable, List, Optional, Sequence, Set

from . import config
from .descriptors import FieldDescriptor
from .rules import DEFAULT_RULES, RuleSet
from .scoring import field_similarity

Similarity = Callable[[FieldDescriptor, FieldDescriptor], float]


def cluster_fields(
    fields: Sequence[FieldDescriptor],
    rules: RuleSet = DEFAULT_RULES,
    similarity: Optional[Similarity] = None,
    threshold: float = config.CLUSTER_THRESHOLD,
) -> List[List[FieldDescriptor]]:
    """Group fields by similarity to a seed.

    Each unassigned field, in input order, seeds a new group and pulls in every
    later unassigned field scoring above ``threshold`` against the seed. Members
    are only ever compared with the seed, so groups do not merge transitively.
    """
    score = similarity or partial(field_similarity, rules=rules)
    assigned: Set[int] = set()
    groups: List[List[FieldDescriptor]] = []

    for i, seed in enumerate(fields):
        if i in assigned:
            continue
        group = [seed]
        assigned.add(i)
        for j in range(i + 1, len(fields)):
            if j in assigned:
                continue
            if score(seed, fields[j]) > threshold:
                group.append(fields[j])
                assigned.add(j)
        groups.append(group)

    return groups


__all__ = ["Similarity", "cluster_fields"]
