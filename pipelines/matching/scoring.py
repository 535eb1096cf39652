"""
Scoring Logic for Field and Form Matching.

Responsibilities:
- Compute a deterministic similarity score between two fields.
- Compute a deterministic similarity score between two forms.

Non-Responsibilities:
- No database access.
- No candidate selection.
- No threshold decisions.

Invariant:
Given identical inputs, this module must always return the same score,
and every score is symmetric in its two arguments.
"""

from __future__ import annotations

from collections import Counter
from typing import Callable, Mapping

from . import config
from .classifier import category_of, same_known_category
from .descriptors import FieldDescriptor, FormDescriptor
from .features import text_similarity, value_similarity
from .rules import DEFAULT_RULES, RuleSet

FormScorer = Callable[..., float]


def type_compatibility(type1: str, type2: str, rules: RuleSet = DEFAULT_RULES) -> float:
    if type1 == type2:
        return config.TYPE_EQUAL_SCORE
    for rule in rules.categories:
        if type1 in rule.types and type2 in rule.types:
            return config.TYPE_RELATED_SCORE
    return config.TYPE_UNRELATED_SCORE


def field_similarity(
    field1: FieldDescriptor, field2: FieldDescriptor, rules: RuleSet = DEFAULT_RULES
) -> float:
    """Score two fields in [0, 1].

    The type term is added at full weight while the text and value terms are
    pre-weighted, so the raw sum can approach 2.0 before the same-category
    boost. The result is clamped to 1.0, which makes strongly related fields
    saturate at exactly 1.0.
    """
    if field1.id and field1.id == field2.id:
        return 1.0
    if field1.name and field1.name == field2.name:
        return 1.0

    score = (
        type_compatibility(field1.type, field2.type, rules)
        + text_similarity(field1.label, field2.label, rules) * config.LABEL_WEIGHT
        + text_similarity(field1.name, field2.name, rules) * config.NAME_WEIGHT
        + text_similarity(field1.placeholder, field2.placeholder, rules)
        * config.PLACEHOLDER_WEIGHT
        + text_similarity(field1.css_class, field2.css_class, rules) * config.CLASS_WEIGHT
        + value_similarity(field1.value, field2.value, rules) * config.VALUE_WEIGHT
    )

    if same_known_category(field1, field2, rules):
        score *= config.SAME_CATEGORY_BOOST

    return min(config.FIELD_SCORE_CEILING, score)


def distribution_similarity(dist1: Mapping[str, int], dist2: Mapping[str, int]) -> float:
    """Average min/max count ratio over the union of keys."""
    keys = set(dist1) | set(dist2)
    if not keys:
        return 0.0
    total = 0.0
    for key in keys:
        count1 = dist1.get(key, 0)
        count2 = dist2.get(key, 0)
        total += min(count1, count2) / max(count1, count2)
    return total / len(keys)


def type_distribution(form: FormDescriptor) -> Counter:
    return Counter(field.type for field in form.fields)


def category_distribution(form: FormDescriptor, rules: RuleSet = DEFAULT_RULES) -> Counter:
    return Counter(category_of(field, rules).value for field in form.fields)


def size_similarity(form1: FormDescriptor, form2: FormDescriptor) -> float:
    largest = max(len(form1.fields), len(form2.fields))
    if largest == 0:
        return 0.0
    return min(len(form1.fields), len(form2.fields)) / largest


def form_similarity(
    form1: FormDescriptor, form2: FormDescriptor, rules: RuleSet = DEFAULT_RULES
) -> float:
    """Structural similarity of two forms: type mix, category mix and size."""
    if form1.id == form2.id:
        return 1.0

    type_sim = distribution_similarity(type_distribution(form1), type_distribution(form2))
    category_sim = distribution_similarity(
        category_distribution(form1, rules), category_distribution(form2, rules)
    )
    return (
        type_sim * config.FORM_TYPE_WEIGHT
        + category_sim * config.FORM_CATEGORY_WEIGHT
        + size_similarity(form1, form2) * config.FORM_SIZE_WEIGHT
    )


def pool_form_similarity(
    form1: FormDescriptor, form2: FormDescriptor, rules: RuleSet = DEFAULT_RULES
) -> float:
    """Category-weighted variant used when screening stored pools.

    Unlike form_similarity there is no identifier short-circuit.
    """
    category_sim = distribution_similarity(
        category_distribution(form1, rules), category_distribution(form2, rules)
    )
    type_sim = distribution_similarity(type_distribution(form1), type_distribution(form2))
    return (
        category_sim * config.POOL_CATEGORY_WEIGHT
        + type_sim * config.POOL_TYPE_WEIGHT
        + size_similarity(form1, form2) * config.POOL_SIZE_WEIGHT
    )


FORM_SCORERS = {
    "structure": form_similarity,
    "pool": pool_form_similarity,
}


__all__ = [
    "FormScorer",
    "FORM_SCORERS",
    "type_compatibility",
    "field_similarity",
    "distribution_similarity",
    "type_distribution",
    "category_distribution",
    "size_similarity",
    "form_similarity",
    "pool_form_similarity",
]
