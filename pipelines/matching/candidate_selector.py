"""
Candidate Form Selection.

Responsibilities:
- Select the stored forms whose structure is close enough to the current
  form for their fields to become fill candidates.
- Search stored forms from every origin, not only the current one.

Non-Responsibilities:
- No field-level matching.
- No persistence.

Invariant:
Selection is a pure function of the current form, the stored pool and
the scorer; the pool is never mutated.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Sequence

from . import config
from .descriptors import FieldDescriptor, FormDescriptor
from .rules import DEFAULT_RULES, RuleSet
from .scoring import FormScorer, form_similarity

logger = logging.getLogger("formmatch.matching.candidates")

StoredForms = Mapping[str, Mapping[str, Sequence[FieldDescriptor]]]


def form_key(origin: str, form_id: str) -> str:
    return f"{origin}/{form_id}"


def relevant_forms(
    current_form: FormDescriptor,
    stored_forms: StoredForms,
    rules: RuleSet = DEFAULT_RULES,
    scorer: FormScorer = form_similarity,
    threshold: float = config.RELEVANT_FORM_THRESHOLD,
) -> Dict[str, List[FieldDescriptor]]:
    """Map ``origin/form_id`` to stored fields for every form scoring above threshold."""
    relevant: Dict[str, List[FieldDescriptor]] = {}
    for origin, forms in stored_forms.items():
        for form_id, fields in forms.items():
            stored = FormDescriptor.of(form_id, fields)
            score = scorer(current_form, stored, rules)
            logger.debug(
                "Form similarity %s -> %s = %.3f", current_form.id, form_key(origin, form_id), score
            )
            if score > threshold:
                relevant[form_key(origin, form_id)] = list(fields)
    return relevant


def pooled_fields(relevant: Mapping[str, Sequence[FieldDescriptor]]) -> List[FieldDescriptor]:
    """Flatten selected forms into one candidate pool, keeping selection order."""
    pool: List[FieldDescriptor] = []
    for fields in relevant.values():
        pool.extend(fields)
    return pool


__all__ = [
    "StoredForms",
    "form_key",
    "relevant_forms",
    "pooled_fields",
]
