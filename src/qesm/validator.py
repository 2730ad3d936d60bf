"""
Questionnaire Validator: path-keyed content errors.

Produces a map from a path inside the questionnaire
(e.g. "steps[2].choices[0].sms") to the human-readable problems found there.

IMPORTANT: This module does NOT modify the questionnaire and never blocks an
edit. It only annotates; callers decide whether to allow saving.

Rules are evaluated against the active language and the enabled modes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from qesm.model import (
    AudioSource,
    Choice,
    ChoiceResponses,
    LanguageSelectionStep,
    Mode,
    MultipleChoiceStep,
    NumericStep,
    PROMPTED_STEPS,
    Questionnaire,
    Step,
    is_blank,
)

ErrorsByPath = Dict[str, List[str]]

_IVR_TOKEN_RE = re.compile(r"^[0-9#*]+$")


@dataclass
class ValidationContext:
    """What the rules need to know about the questionnaire as a whole."""

    sms: bool
    ivr: bool
    mobileweb: bool
    language: str
    errors: ErrorsByPath = field(default_factory=dict)

    def add_error(self, path: str, message: str) -> None:
        self.errors.setdefault(path, []).append(message)


def validate(questionnaire: Questionnaire) -> ErrorsByPath:
    """
    Validate a questionnaire from scratch.

    Returns:
        Dict mapping each offending path to a non-empty list of messages;
        empty when the questionnaire is valid.
    """
    context = ValidationContext(
        sms=questionnaire.has_mode(Mode.SMS),
        ivr=questionnaire.has_mode(Mode.IVR),
        mobileweb=questionnaire.has_mode(Mode.MOBILEWEB),
        language=questionnaire.active_language,
    )
    for index, step in enumerate(questionnaire.steps):
        _validate_step(f"steps[{index}]", step, context)
    return context.errors


# =========================================================================
# STEPS
# =========================================================================


def _validate_step(path: str, step: Step, context: ValidationContext) -> None:
    if isinstance(step, PROMPTED_STEPS):
        _validate_prompt(path, step, context)

    if isinstance(step, MultipleChoiceStep):
        _validate_choices(f"{path}.choices", step.choices, context)
    elif isinstance(step, NumericStep) and step.refusal is not None and step.refusal.enabled:
        _validate_responses(f"{path}.refusal", step.refusal.responses_for(context.language), context)


def _validate_prompt(path: str, step: Step, context: ValidationContext) -> None:
    entry = step.prompt.get(context.language)

    # The language-selection SMS prompt is generated from the language list.
    needs_sms = not isinstance(step, LanguageSelectionStep)
    if context.sms and needs_sms and (entry is None or is_blank(entry.sms)):
        context.add_error(f"{path}.prompt.sms", "SMS prompt must not be blank")

    if context.ivr:
        ivr = entry.ivr if entry is not None else None
        # A missing voice prompt is an empty text-to-speech one.
        if ivr is None or (ivr.audio_source is AudioSource.TTS and is_blank(ivr.text)):
            context.add_error(f"{path}.prompt.ivr.text", "Voice prompt must not be blank")

    if context.mobileweb and (entry is None or is_blank(entry.mobileweb)):
        context.add_error(f"{path}.prompt.mobileweb", "Mobile web prompt must not be blank")


# =========================================================================
# CHOICES
# =========================================================================


def _validate_choices(path: str, choices: Sequence[Choice], context: ValidationContext) -> None:
    if len(choices) < 2:
        context.add_error(path, "Must have at least two responses")

    for index, choice in enumerate(choices):
        if is_blank(choice.value):
            context.add_error(f"{path}[{index}].value", "Response must not be blank")
        _validate_responses(f"{path}[{index}]", choice.responses_for(context.language), context)

    # Only the later of two clashing choices is flagged.
    values: List[str] = []
    sms_seen: List[str] = []
    ivr_seen: List[str] = []
    for index, choice in enumerate(choices):
        if choice.value in values:
            context.add_error(f"{path}[{index}].value", "Value already used in a previous response")
        values.append(choice.value)

        responses = choice.responses_for(context.language)
        for token in responses.sms:
            if token in sms_seen:
                context.add_error(f"{path}[{index}].sms", f'Value "{token}" already used in a previous response')
        sms_seen.extend(responses.sms)

        for token in responses.ivr:
            if token in ivr_seen:
                context.add_error(f"{path}[{index}].ivr", f'Value "{token}" already used in a previous response')
        ivr_seen.extend(responses.ivr)


def _validate_responses(path: str, responses: ChoiceResponses, context: ValidationContext) -> None:
    if context.sms and not responses.sms:
        context.add_error(f"{path}.sms", "SMS must not be blank")

    if context.ivr:
        if not responses.ivr:
            context.add_error(f"{path}.ivr", '"Phone call" must not be blank')
        elif any(not _IVR_TOKEN_RE.match(token) for token in responses.ivr):
            context.add_error(f"{path}.ivr", '"Phone call" must only consist of single digits, "#" or "*"')
