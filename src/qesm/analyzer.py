"""
Questionnaire Analyzer: read-only projections used by collaborators.

This module provides lightweight queries over a Questionnaire:
    - Storable variables and their possible values (quota setup)
    - Skip-logic targets available to a step

IMPORTANT: It does NOT modify the questionnaire. Every result is derived
from the document alone.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from qesm.model import (
    END_OF_SURVEY,
    LanguageSelectionStep,
    MultipleChoiceStep,
    NumericStep,
    Questionnaire,
    STORING_STEPS,
    is_blank,
)

# Multiple-choice values are strings; numeric values are (from, to) bounds.
StoreValue = Union[str, Tuple[Optional[int], Optional[int]]]


@dataclass
class StoreValues:
    """Possible values of one stored variable."""

    type: str
    values: List[StoreValue] = field(default_factory=list)


def step_store_values(questionnaire: Questionnaire) -> Dict[str, StoreValues]:
    """
    Enumerate every variable a step stores, with the values it can take.

    The language-selection step is skipped: its store is a reserved
    pseudo-variable, not survey data. Steps with a blank store are skipped too.
    When two steps share a store name the later one wins.

    Returns:
        Dict of store name -> StoreValues
    """
    result: Dict[str, StoreValues] = {}
    for step in questionnaire.steps:
        if isinstance(step, LanguageSelectionStep) or not isinstance(step, STORING_STEPS):
            continue
        if is_blank(step.store):
            continue

        if isinstance(step, MultipleChoiceStep):
            values: List[StoreValue] = [choice.value for choice in step.choices]
        elif isinstance(step, NumericStep):
            values = [(r.from_, r.to) for r in step.ranges]
        else:
            values = []
        result[step.store] = StoreValues(type=step.type.value, values=values)
    return result


def skip_options(questionnaire: Questionnaire, step_id: str) -> List[str]:
    """
    Targets a choice or range of `step_id` may skip to.

    Only later steps are offered, in order, followed by END_OF_SURVEY.
    An unknown step id yields an empty list.
    """
    index = questionnaire.step_index(step_id)
    if index == -1:
        return []
    return [step.id for step in questionnaire.steps[index + 1:]] + [END_OF_SURVEY]
