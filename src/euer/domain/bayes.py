"""Multinomial Naive Bayes over event text.

Trained from historical classifications (counterparty and purpose text to
line ID). The confidence is the logistic function of the log-probability gap
between the best and second-best class; it is a ranking heuristic, not a
calibrated posterior.
"""

import math
import re
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Optional

from euer.domain.entities import TrainingExample

MIN_TRAINING_EXAMPLES = 20
MIN_CONFIDENCE = 0.6

_NON_WORD = re.compile(r"[^a-zäöüß0-9\s]")


@dataclass(frozen=True)
class BayesPrediction:
    """Predicted line with its confidence."""

    line_id: str
    confidence: float


@dataclass
class NaiveBayesModel:
    """Per-class document and word counts."""

    class_counts: dict[str, int]
    word_counts: dict[str, Counter]
    total_docs: int
    vocabulary_size: int

    def predict(self, text: str) -> Optional[BayesPrediction]:
        return predict_naive_bayes(self, text)


def tokenize(text: str) -> list[str]:
    """Lower-case, strip punctuation, split on whitespace, drop 1-char tokens."""
    cleaned = _NON_WORD.sub("", text.lower())
    return [word for word in cleaned.split() if len(word) > 1]


def example_text(counterparty: str, purpose: str) -> str:
    return f"{counterparty} {purpose}"


def train_naive_bayes(examples: Iterable[TrainingExample]) -> Optional[NaiveBayesModel]:
    """Train a model, or return None below ``MIN_TRAINING_EXAMPLES``."""
    examples = list(examples)
    if len(examples) < MIN_TRAINING_EXAMPLES:
        return None

    class_counts: dict[str, int] = {}
    word_counts: dict[str, Counter] = {}
    vocabulary: set[str] = set()

    for example in examples:
        cls = example.eur_line_id
        class_counts[cls] = class_counts.get(cls, 0) + 1
        words = tokenize(example_text(example.counterparty, example.purpose))
        word_counts.setdefault(cls, Counter()).update(words)
        vocabulary.update(words)

    return NaiveBayesModel(
        class_counts=class_counts,
        word_counts=word_counts,
        total_docs=len(examples),
        vocabulary_size=len(vocabulary),
    )


def predict_naive_bayes(model: NaiveBayesModel, text: str) -> Optional[BayesPrediction]:
    """Predict the most likely line for a text.

    Returns None for texts without tokens and for predictions whose
    confidence is below ``MIN_CONFIDENCE``.
    """
    words = tokenize(text)
    if not words or model.vocabulary_size == 0:
        return None

    best_class = None
    best_log_prob = -math.inf
    second_log_prob = -math.inf

    for cls, count in model.class_counts.items():
        log_prob = math.log(count / model.total_docs)
        class_words = model.word_counts.get(cls, Counter())
        denominator = sum(class_words.values()) + model.vocabulary_size
        for word in words:
            # Laplace smoothing
            log_prob += math.log((class_words.get(word, 0) + 1) / denominator)

        if log_prob > best_log_prob:
            second_log_prob = best_log_prob
            best_log_prob = log_prob
            best_class = cls
        elif log_prob > second_log_prob:
            second_log_prob = log_prob

    if best_class is None:
        return None

    if second_log_prob == -math.inf:
        confidence = 1.0
    else:
        confidence = 1 / (1 + math.exp(-(best_log_prob - second_log_prob)))

    if confidence < MIN_CONFIDENCE:
        return None
    return BayesPrediction(line_id=best_class, confidence=confidence)
