"""
Questionnaire Document Model

Defines the value objects an editing session works on:
    - Prompts (per-language, per-channel text)
    - Choices, Ranges and Refusals (answer definitions)
    - Steps (polymorphic question units)
    - Questionnaire (root aggregate)

ARCHITECTURAL RULE:
    These objects:
        - Are frozen; every edit builds a new value
        - Know nothing about rendering, transport or persistence
        - Carry no behaviour beyond lookup helpers and invariant checks

Collections are tuples. Mappings (prompts, responses, settings) are plain
dicts that are never mutated after construction; updates always build a
new dict.
"""

from __future__ import annotations

import uuid
from abc import ABC
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import ClassVar, Dict, Optional, Tuple


class QuestionnaireInvariantError(ValueError):
    """Raised when a Questionnaire would break its language invariants."""
    pass


class UnknownStepTypeError(ValueError):
    """Raised when a step is converted into a variant that cannot be built."""
    pass


class Mode(Enum):
    """Delivery channels a questionnaire can be answered through."""

    SMS = "sms"
    IVR = "ivr"
    MOBILEWEB = "mobileweb"


class StepType(Enum):
    MULTIPLE_CHOICE = "multiple-choice"
    NUMERIC = "numeric"
    EXPLANATION = "explanation"
    FLAG = "flag"
    LANGUAGE_SELECTION = "language-selection"


class Disposition(Enum):
    COMPLETED = "completed"
    PARTIAL = "partial"
    INELIGIBLE = "ineligible"


class AudioSource(Enum):
    TTS = "tts"
    UPLOAD = "upload"


# Skip-logic target meaning "finish the survey here".
END_OF_SURVEY = "end"

# Well-known keys of Questionnaire.settings
QUOTA_COMPLETED_MSG = "quotaCompletedMsg"
ERROR_MSG = "errorMsg"

# Pseudo-variable written by the language-selection step.
LANGUAGE_STORE = "language"


def is_blank(value: Optional[str]) -> bool:
    """True for None, the empty string and whitespace-only strings."""
    return value is None or value.strip() == ""


def new_step_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class AudioPrompt:
    """
    Voice prompt for one language.

    Properties:
        text: Text read by text-to-speech (ignored when a recording is used)
        audio_source: TTS or UPLOAD
        audio_id: Identifier of the uploaded recording, if any
    """

    text: str = ""
    audio_source: AudioSource = AudioSource.TTS
    audio_id: Optional[str] = None


@dataclass(frozen=True)
class LanguagePrompt:
    """Prompt content of one language, one optional entry per channel."""

    sms: Optional[str] = None
    ivr: Optional[AudioPrompt] = None
    mobileweb: Optional[str] = None


# language code -> LanguagePrompt
Prompt = Dict[str, LanguagePrompt]


def default_prompt(language: str) -> Prompt:
    """Empty SMS + text-to-speech skeleton for a single language."""
    return {language: LanguagePrompt(sms="", ivr=AudioPrompt())}


def prompt_text(prompt: Prompt, language: str, mode: Mode) -> Optional[str]:
    """Text of one channel of one language (the TTS text for IVR)."""
    entry = prompt.get(language)
    if entry is None:
        return None
    if mode is Mode.IVR:
        return entry.ivr.text if entry.ivr is not None else None
    if mode is Mode.MOBILEWEB:
        return entry.mobileweb
    return entry.sms


def with_prompt_text(prompt: Prompt, language: str, mode: Mode, text: str) -> Prompt:
    """Copy of `prompt` with one channel text replaced; IVR keeps its audio settings."""
    entry = prompt.get(language, LanguagePrompt())
    if mode is Mode.IVR:
        entry = replace(entry, ivr=replace(entry.ivr or AudioPrompt(), text=text))
    elif mode is Mode.MOBILEWEB:
        entry = replace(entry, mobileweb=text)
    else:
        entry = replace(entry, sms=text)
    return {**prompt, language: entry}


def prompt_slot_is_empty(prompt: Prompt, language: str, mode: Mode) -> bool:
    """
    True when a channel of a language has nothing a human entered.

    An IVR slot counts as empty only while it still uses text-to-speech
    with blank text; an uploaded recording is content.
    """
    entry = prompt.get(language)
    if entry is None:
        return True
    if mode is Mode.IVR:
        ivr = entry.ivr
        return ivr is None or (ivr.audio_source is AudioSource.TTS and is_blank(ivr.text))
    return is_blank(prompt_text(prompt, language, mode))


@dataclass(frozen=True)
class ChoiceResponses:
    """Tokens a respondent may answer with, for one language."""

    sms: Tuple[str, ...] = ()
    ivr: Tuple[str, ...] = ()
    mobileweb: Optional[str] = None


@dataclass(frozen=True)
class Choice:
    """
    One selectable answer of a multiple-choice step.

    Properties:
        value: Stored value / display label
        responses: language code -> ChoiceResponses
        skip_logic: Step id to jump to, END_OF_SURVEY, or None (next step)
    """

    value: str = ""
    responses: Dict[str, ChoiceResponses] = field(default_factory=dict)
    skip_logic: Optional[str] = None

    def responses_for(self, language: str) -> ChoiceResponses:
        return self.responses.get(language, ChoiceResponses())


@dataclass(frozen=True)
class Range:
    """
    Closed integer interval of a numeric step.

    from_ / to of None mean an open bound (-inf / +inf).
    """

    from_: Optional[int] = None
    to: Optional[int] = None
    skip_logic: Optional[str] = None


@dataclass(frozen=True)
class Refusal:
    """Pre-defined "declined to answer" option of a numeric step."""

    enabled: bool = False
    responses: Dict[str, ChoiceResponses] = field(default_factory=dict)
    skip_logic: Optional[str] = None

    def responses_for(self, language: str) -> ChoiceResponses:
        return self.responses.get(language, ChoiceResponses())


@dataclass(frozen=True)
class Step(ABC):
    """
    Base class of every step variant.

    Only `id` and `title` are shared by all variants. The variant tag is
    exposed as the class attribute `type`.

    ARCHITECTURAL RULE:
        The id is generated once, when the step is created, and is never
        reused for another step.
    """

    id: str
    title: str = ""

    type: ClassVar[StepType]


@dataclass(frozen=True)
class MultipleChoiceStep(Step):
    store: str = ""
    prompt: Prompt = field(default_factory=dict)
    choices: Tuple[Choice, ...] = ()

    type: ClassVar[StepType] = StepType.MULTIPLE_CHOICE


@dataclass(frozen=True)
class NumericStep(Step):
    """
    Numeric question whose answers are partitioned into ranges.

    Properties:
        min_value / max_value: Optional bounds of accepted answers
        ranges_delimiters: Raw comma-separated boundaries as typed by the author
        ranges: Materialized partition, ordered by `from_`
        refusal: Optional "declined to answer" option
    """

    store: str = ""
    prompt: Prompt = field(default_factory=dict)
    min_value: Optional[int] = None
    max_value: Optional[int] = None
    ranges_delimiters: Optional[str] = None
    ranges: Tuple[Range, ...] = (Range(),)
    refusal: Optional[Refusal] = None

    type: ClassVar[StepType] = StepType.NUMERIC


@dataclass(frozen=True)
class ExplanationStep(Step):
    prompt: Prompt = field(default_factory=dict)
    skip_logic: Optional[str] = None

    type: ClassVar[StepType] = StepType.EXPLANATION


@dataclass(frozen=True)
class FlagStep(Step):
    disposition: Disposition = Disposition.COMPLETED
    skip_logic: Optional[str] = None

    type: ClassVar[StepType] = StepType.FLAG


@dataclass(frozen=True)
class LanguageSelectionStep(Step):
    """
    Asks the respondent which language to continue in.

    language_choices[0] is a placeholder slot (always None); the remaining
    slots are language codes in the order they are offered.
    """

    store: str = LANGUAGE_STORE
    prompt: Prompt = field(default_factory=dict)
    language_choices: Tuple[Optional[str], ...] = (None,)

    type: ClassVar[StepType] = StepType.LANGUAGE_SELECTION


PROMPTED_STEPS = (MultipleChoiceStep, NumericStep, ExplanationStep, LanguageSelectionStep)
STORING_STEPS = (MultipleChoiceStep, NumericStep, LanguageSelectionStep)


def new_multiple_choice_step(step_id: str, language: str) -> MultipleChoiceStep:
    return MultipleChoiceStep(id=step_id, title="", store="", prompt=default_prompt(language), choices=())


def new_language_selection_step(step_id: str, languages: Tuple[str, ...], language: str) -> LanguageSelectionStep:
    return LanguageSelectionStep(
        id=step_id,
        title="Language selection",
        prompt=default_prompt(language),
        language_choices=(None,) + tuple(languages),
    )


def convertible_step_type(step_type) -> StepType:
    """
    Resolve the target of a step conversion.

    Raises:
        UnknownStepTypeError: Target is unknown or is the language-selection
            variant, which is only ever created by language operations
    """
    try:
        target = step_type if isinstance(step_type, StepType) else StepType(step_type)
    except ValueError:
        raise UnknownStepTypeError(f"unknown step type: {step_type}")
    if target is StepType.LANGUAGE_SELECTION:
        raise UnknownStepTypeError(f"cannot convert a step into {target.value}")
    return target


def convert_step(step: Step, step_type) -> Step:
    """
    Convert a step into another variant.

    Variant-specific fields are reset to the target's defaults. The id and
    title always survive; store and prompt survive whenever both the source
    and the target variant carry them.

    Args:
        step: Step to convert
        step_type: Target StepType (or its string value)

    Returns:
        A new step of the target variant

    Raises:
        UnknownStepTypeError: See convertible_step_type()
    """
    target = convertible_step_type(step_type)

    store = getattr(step, "store", "") if isinstance(step, STORING_STEPS) else ""
    prompt = getattr(step, "prompt", {}) if isinstance(step, PROMPTED_STEPS) else {}

    if target is StepType.MULTIPLE_CHOICE:
        return MultipleChoiceStep(id=step.id, title=step.title, store=store, prompt=prompt, choices=())
    if target is StepType.NUMERIC:
        return NumericStep(id=step.id, title=step.title, store=store, prompt=prompt)
    if target is StepType.EXPLANATION:
        return ExplanationStep(id=step.id, title=step.title, prompt=prompt)
    return FlagStep(id=step.id, title=step.title)


@dataclass(frozen=True)
class Questionnaire:
    """
    Root aggregate edited by a session.

    Properties:
        name: Free text
        id: Server identifier, None while unsaved
        project_id: Owning project
        modes: Enabled channels, without duplicates
        languages: Language codes, unique, in the order they were added
        default_language: Source language for autocomplete and translation
        active_language: Language currently being edited / previewed
        steps: Ordered steps
        settings: message key -> Prompt (quota completed, error, thank you...)

    INVARIANTS (checked on construction):
        - languages is non-empty and has no duplicates
        - default_language and active_language are members of languages
        - with more than one language, steps[0] is the only
          LanguageSelectionStep; with one language there is none
    """

    name: str = ""
    id: Optional[int] = None
    project_id: Optional[int] = None
    modes: Tuple[Mode, ...] = (Mode.SMS, Mode.IVR)
    languages: Tuple[str, ...] = ("en",)
    default_language: str = "en"
    active_language: str = "en"
    steps: Tuple[Step, ...] = ()
    settings: Dict[str, Prompt] = field(default_factory=dict)

    def __post_init__(self):
        if not self.languages:
            raise QuestionnaireInvariantError("a questionnaire needs at least one language")
        if len(set(self.languages)) != len(self.languages):
            raise QuestionnaireInvariantError(f"duplicate languages: {list(self.languages)}")
        if self.default_language not in self.languages:
            raise QuestionnaireInvariantError(f"default language {self.default_language!r} is not enabled")
        if self.active_language not in self.languages:
            raise QuestionnaireInvariantError(f"active language {self.active_language!r} is not enabled")

        positions = [i for i, s in enumerate(self.steps) if isinstance(s, LanguageSelectionStep)]
        if len(self.languages) > 1:
            if positions != [0]:
                raise QuestionnaireInvariantError(
                    "a multi-language questionnaire must start with its only language-selection step"
                )
        elif positions:
            raise QuestionnaireInvariantError("a single-language questionnaire has no language-selection step")

    @property
    def language_selection_step(self) -> Optional[LanguageSelectionStep]:
        if self.steps and isinstance(self.steps[0], LanguageSelectionStep):
            return self.steps[0]
        return None

    def has_mode(self, mode: Mode) -> bool:
        return mode in self.modes

    def step_index(self, step_id: str) -> int:
        """Position of a step, or -1 when absent."""
        for index, step in enumerate(self.steps):
            if step.id == step_id:
                return index
        return -1

    def get_step(self, step_id: str) -> Optional[Step]:
        """
        Retrieve a step by id.

        Args:
            step_id: Step identifier

        Returns:
            Step object or None if not found
        """
        index = self.step_index(step_id)
        return self.steps[index] if index != -1 else None
