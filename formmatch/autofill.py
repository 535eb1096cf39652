"""
Learning filled forms and planning how to fill new ones.

Glue between extraction, the matching engine and the repository. Nothing
here writes into a live document: a fill is a plan of (field, value)
decisions for the caller to apply.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pipelines.matching.candidate_selector import StoredForms, pooled_fields, relevant_forms
from pipelines.matching.descriptors import FieldDescriptor, FormDescriptor
from pipelines.matching.resolver import best_field_match

from .env import Settings, get_settings
from .extraction import filled_fields
from .logger import get_logger

logger = get_logger()

PASSWORD_TYPE = "password"


@dataclass(frozen=True)
class FillDecision:
    target: FieldDescriptor
    source: FieldDescriptor
    value: str
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target": self.target.display_name(),
            "source": self.source.display_name(),
            "value": self.value,
            "score": round(self.score, 3),
        }


@dataclass
class FillPlan:
    form_id: str
    relevant_forms: List[str] = field(default_factory=list)
    decisions: List[FillDecision] = field(default_factory=list)
    unmatched: List[FieldDescriptor] = field(default_factory=list)

    @property
    def has_candidates(self) -> bool:
        return bool(self.relevant_forms)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "form_id": self.form_id,
            "relevant_forms": list(self.relevant_forms),
            "fills": [d.to_dict() for d in self.decisions],
            "unmatched": [f.display_name() for f in self.unmatched],
        }


def _allowed(f: FieldDescriptor, settings: Settings) -> bool:
    return settings.fill_passwords or f.type != PASSWORD_TYPE


def learn_form(repo, origin: str, form: FormDescriptor, settings: Optional[Settings] = None) -> int:
    """Store the filled fields of ``form``. Returns how many were learned."""
    settings = settings or get_settings()
    fields = [f for f in filled_fields(form) if _allowed(f, settings)]
    if not fields:
        logger.debug("Nothing to learn", origin=origin, form_id=form.id)
        return 0

    repo.save_form(origin, form.id, fields)
    repo.increment_statistic("forms_detected")
    repo.increment_statistic("fields_learned", len(fields))
    logger.record_form_learned(len(fields))
    logger.info("Learned form", origin=origin, form_id=form.id, fields=len(fields))
    return len(fields)


def plan_fill(form: FormDescriptor, stored_forms: StoredForms, settings: Optional[Settings] = None) -> FillPlan:
    """Match every fillable field of ``form`` against the relevant stored forms."""
    settings = settings or get_settings()
    rules = settings.rules()

    relevant = relevant_forms(form, stored_forms, rules=rules, scorer=settings.form_scorer_func())
    plan = FillPlan(form_id=form.id, relevant_forms=list(relevant))
    if not relevant:
        logger.debug("No matching forms found", form_id=form.id)
        return plan

    pool = [f for f in pooled_fields(relevant) if _allowed(f, settings)]
    for target in form.fields:
        if not _allowed(target, settings):
            continue
        match = best_field_match(target, pool, rules=rules, max_pool=settings.pool_limit())
        if match.matched:
            plan.decisions.append(
                FillDecision(target=target, source=match.field, value=match.field.value, score=match.score)
            )
        else:
            plan.unmatched.append(target)
    return plan


def autofill(repo, form: FormDescriptor, origin: str, settings: Optional[Settings] = None) -> FillPlan:
    """Plan a fill for ``form`` from everything the repository has learned."""
    logger.record_fill_attempt(origin)
    plan = plan_fill(form, repo.load_forms(), settings)
    logger.record_field_outcomes(len(plan.decisions), len(plan.unmatched))
    if plan.has_candidates:
        repo.increment_statistic("forms_filled")
        logger.record_form_filled(origin)
    logger.info(
        "Planned fill",
        origin=origin,
        form_id=form.id,
        candidates=len(plan.relevant_forms),
        filled=len(plan.decisions),
        unmatched=len(plan.unmatched),
    )
    return plan
