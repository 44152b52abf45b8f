# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Grouping and counting primitives shared by the pipeline and insights.

Free-text diagnosis labels are grouped by a normalized key (case-folded,
accent-stripped, whitespace-collapsed) so "Drusen", "drusen " and "DRUSEN"
count together. The label reported for a group is its most frequent original
spelling, ties going to the spelling seen first.
"""

from __future__ import annotations

import unicodedata
from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from oculointelligence.models import ModelFeedbackRecord


def normalize_label(label: str) -> str:
    """Grouping key for a free-text label.

    >>> normalize_label("  Edema   Macular Diabético ")
    'edema macular diabetico'
    """
    decomposed = unicodedata.normalize("NFD", label.lower().strip())
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return " ".join(stripped.split())


def display_label(label: str) -> str:
    return " ".join(label.split())


@dataclass
class LabelTally:
    """Occurrences of one normalized label across a set of records."""

    key: str
    count: int = 0
    examples: list[str] = field(default_factory=list)
    spellings: Counter[str] = field(default_factory=Counter)

    @property
    def label(self) -> str:
        return self.spellings.most_common(1)[0][0] if self.spellings else self.key


def tally_labels(
    records: Iterable[ModelFeedbackRecord],
    labels_of: Callable[[ModelFeedbackRecord], Sequence[str]],
    *,
    max_examples: int = 5,
) -> dict[str, LabelTally]:
    """Count the records mentioning each label.

    A label repeated within one record counts once for that record.
    Results keep first-appearance order.

    Args:
        records: Feedback records to scan.
        labels_of: Selects the label list to tally from a record.
        max_examples: Exam identifiers kept per label.
    """
    tallies: dict[str, LabelTally] = {}
    for record in records:
        seen: set[str] = set()
        for raw in labels_of(record):
            key = normalize_label(raw)
            if not key or key in seen:
                continue
            seen.add(key)
            tally = tallies.setdefault(key, LabelTally(key=key))
            tally.count += 1
            tally.spellings[display_label(raw)] += 1
            if len(tally.examples) < max_examples:
                tally.examples.append(str(record.exam_id))
    return tallies


def top_labels(tallies: dict[str, LabelTally], limit: int) -> list[LabelTally]:
    """Highest counts first; equal counts keep first-appearance order."""
    return sorted(tallies.values(), key=lambda tally: -tally.count)[:limit]


def group_by_exam_type(
    records: Iterable[ModelFeedbackRecord],
) -> dict[str, list[ModelFeedbackRecord]]:
    """Group records by exam category, in first-appearance order."""
    groups: dict[str, list[ModelFeedbackRecord]] = {}
    for record in records:
        groups.setdefault(record.exam_type, []).append(record)
    return groups


__all__ = [
    "LabelTally",
    "display_label",
    "group_by_exam_type",
    "normalize_label",
    "tally_labels",
    "top_labels",
]
