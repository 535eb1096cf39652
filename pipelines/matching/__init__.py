"""Structural and textual matching of form fields and forms."""

from .candidate_selector import StoredForms, form_key, pooled_fields, relevant_forms
from .classifier import category_of, semantic_type
from .clustering import cluster_fields
from .descriptors import FieldDescriptor, FormDescriptor
from .features import text_similarity, tokenize, value_similarity
from .resolver import FieldMatch, best_field_match
from .rules import DEFAULT_RULES, Category, CategoryRule, RuleSet
from .scoring import (
    FORM_SCORERS,
    field_similarity,
    form_similarity,
    pool_form_similarity,
)

__all__ = [
    "Category",
    "CategoryRule",
    "RuleSet",
    "DEFAULT_RULES",
    "FieldDescriptor",
    "FormDescriptor",
    "tokenize",
    "category_of",
    "semantic_type",
    "text_similarity",
    "value_similarity",
    "field_similarity",
    "form_similarity",
    "pool_form_similarity",
    "FORM_SCORERS",
    "StoredForms",
    "form_key",
    "relevant_forms",
    "pooled_fields",
    "FieldMatch",
    "best_field_match",
    "cluster_fields",
]
