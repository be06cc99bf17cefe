"""Cascading suggestion pipeline.

Layers are evaluated in order and the first one returning a suggestion with
a line wins:

1. user rules, ascending priority
2. counterparty memory from earlier classifications
3. Naive Bayes over earlier classifications, when enough data exists
4. keyword heuristics with a per-flow-type default line

Nothing here persists; suggestions are proposals only.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Sequence

from euer.database.base import Database
from euer.domain.bayes import NaiveBayesModel, example_text, train_naive_bayes
from euer.domain.catalog import CatalogService
from euer.domain.entities import (
    ClassificationCandidate,
    LineDefinition,
    Rule,
    RuleField,
    RuleOperator,
    Suggestion,
    SuggestionLayer,
    TrainingExample,
)
from euer.domain.keywords import suggest_by_keywords

logger = logging.getLogger(__name__)


@dataclass
class PipelineContext:
    """Pre-loaded inputs reused across a batch of suggestions."""

    rules: list[Rule] = field(default_factory=list)
    counterparty_memory: dict[str, str] = field(default_factory=dict)
    bayes_model: Optional[NaiveBayesModel] = None
    lines: list[LineDefinition] = field(default_factory=list)


Layer = Callable[[PipelineContext, ClassificationCandidate], Optional[Suggestion]]


def normalize_text(value: str) -> str:
    """Case-fold and collapse whitespace."""
    return " ".join((value or "").casefold().split())


def rule_matches(rule: Rule, candidate: ClassificationCandidate) -> bool:
    """Check whether a rule matches the candidate's text."""
    fields = []
    if rule.field in (RuleField.COUNTERPARTY, RuleField.ANY):
        fields.append(candidate.counterparty)
    if rule.field in (RuleField.PURPOSE, RuleField.ANY):
        fields.append(candidate.purpose)

    needle = normalize_text(rule.value)
    for value in fields:
        haystack = normalize_text(value)
        if rule.operator == RuleOperator.CONTAINS and needle in haystack:
            return True
        if rule.operator == RuleOperator.EQUALS and haystack == needle:
            return True
        if rule.operator == RuleOperator.STARTS_WITH and haystack.startswith(needle):
            return True
    return False


def apply_rules(context: PipelineContext, candidate: ClassificationCandidate) -> Optional[Suggestion]:
    for rule in sorted(context.rules, key=lambda r: r.priority):
        if not rule.active or not rule_matches(rule, candidate):
            continue
        return Suggestion(
            line_id=rule.target_eur_line_id,
            reason=f"Regel: „{rule.value}\" ({rule.field.value}/{rule.operator.value})",
            layer=SuggestionLayer.RULE,
        )
    return None


def apply_counterparty_memory(
    context: PipelineContext, candidate: ClassificationCandidate
) -> Optional[Suggestion]:
    line_id = context.counterparty_memory.get(normalize_text(candidate.counterparty))
    if not line_id:
        return None
    return Suggestion(
        line_id=line_id,
        reason=f"Bisherige Zuordnung für „{candidate.counterparty}\"",
        layer=SuggestionLayer.COUNTERPARTY,
    )


def apply_bayes(context: PipelineContext, candidate: ClassificationCandidate) -> Optional[Suggestion]:
    if context.bayes_model is None:
        return None
    prediction = context.bayes_model.predict(example_text(candidate.counterparty, candidate.purpose))
    if prediction is None:
        return None
    return Suggestion(
        line_id=prediction.line_id,
        reason=f"KI-Vorschlag ({round(prediction.confidence * 100)}% Konfidenz)",
        layer=SuggestionLayer.BAYES,
    )


def apply_keywords(context: PipelineContext, candidate: ClassificationCandidate) -> Optional[Suggestion]:
    suggestion = suggest_by_keywords(candidate, context.lines)
    if not suggestion.line_id:
        return None
    return Suggestion(line_id=suggestion.line_id, reason=suggestion.reason, layer=SuggestionLayer.KEYWORD)


LAYERS: tuple[Layer, ...] = (apply_rules, apply_counterparty_memory, apply_bayes, apply_keywords)


def classify_item(
    context: PipelineContext,
    candidate: ClassificationCandidate,
    layers: Sequence[Layer] = LAYERS,
) -> Suggestion:
    """Return the first non-empty suggestion, or an empty one."""
    for layer in layers:
        suggestion = layer(context, candidate)
        if suggestion is not None and suggestion.line_id:
            return suggestion
    return Suggestion()


def build_counterparty_memory(history: Iterable[TrainingExample]) -> dict[str, str]:
    """Map normalized counterparty names to their most recently used line."""
    memory: dict[str, str] = {}
    for example in sorted(history, key=lambda e: e.updated_at):
        key = normalize_text(example.counterparty)
        if key and example.eur_line_id:
            memory[key] = example.eur_line_id
    return memory


class ClassificationPipeline:
    """Service that builds pipeline contexts from the database."""

    def __init__(self, db: Database, catalog_service: Optional[CatalogService] = None):
        """Initialize classification pipeline.

        Args:
            db: Database instance
            catalog_service: Optional catalog service; defaults to the
                shipped schedules
        """
        self.db = db
        self.catalog_service = catalog_service or CatalogService()

    def build_context(
        self, tax_year: int, lines: Optional[list[LineDefinition]] = None
    ) -> PipelineContext:
        """Load rules, build counterparty memory and train the Bayes model once.

        Args:
            tax_year: Tax year to build the context for
            lines: Already loaded catalog lines; loaded when omitted

        Returns:
            Context to reuse for every event of a batch
        """
        if lines is None:
            lines = self.catalog_service.load(tax_year)

        rules = self.db.list_rules(tax_year, active_only=True)
        history = self.db.list_classification_history(tax_year)
        bayes_model = train_naive_bayes(history)
        if bayes_model is None:
            logger.debug(
                "Skipping Naive Bayes layer for %s: %d training examples", tax_year, len(history)
            )

        context = PipelineContext(
            rules=rules,
            counterparty_memory=build_counterparty_memory(history),
            bayes_model=bayes_model,
            lines=list(lines),
        )
        logger.debug(
            "Built pipeline context for %s: %d rules, %d remembered counterparties",
            tax_year,
            len(rules),
            len(context.counterparty_memory),
        )
        return context

    def suggest(self, context: PipelineContext, candidate: ClassificationCandidate) -> Suggestion:
        """Suggest a line for one event."""
        return classify_item(context, candidate)
