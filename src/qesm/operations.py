"""
Edit Operation Set

The closed set of named, parameterized messages the reducer understands.
Every operation is a frozen record tagged with a `type` string, so it can
be logged, serialized and replayed.

ARCHITECTURAL RULE:
    Operations carry everything the reducer needs, including ids for steps
    they create. Ids are generated when the operation is built, never when
    it is reduced, so replaying a recorded operation log always yields the
    same questionnaire.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field
from typing import ClassVar, Dict, Mapping, Optional, Tuple, Type, Union

from qesm.model import AudioPrompt, Questionnaire, new_step_id


@dataclass(frozen=True)
class Translation:
    language: str
    text: str


@dataclass(frozen=True)
class AutocompleteItem:
    """A previously used text offered by the autocomplete service, with its known translations."""

    id: str
    text: str
    translations: Tuple[Translation, ...] = ()


class Operation(ABC):
    """
    Base class for all operations.

    Subclasses are frozen dataclasses declaring a class-level `type` tag.
    """

    type: ClassVar[str]


class LifecycleOperation(Operation):
    """Fetch / receive / save signals coming from the persistence layer."""
    pass


# =========================================================================
# LIFECYCLE
# =========================================================================


@dataclass(frozen=True)
class Fetch(LifecycleOperation):
    project_id: int
    id: Optional[int]

    type: ClassVar[str] = "FETCH"


@dataclass(frozen=True)
class Receive(LifecycleOperation):
    questionnaire: Questionnaire

    type: ClassVar[str] = "RECEIVE"


@dataclass(frozen=True)
class NewQuestionnaire(LifecycleOperation):
    project_id: int
    language: str = "en"
    modes: Tuple[str, ...] = ("sms", "ivr")

    type: ClassVar[str] = "NEW_QUESTIONNAIRE"


@dataclass(frozen=True)
class Saving(LifecycleOperation):
    type: ClassVar[str] = "SAVING"


@dataclass(frozen=True)
class Saved(LifecycleOperation):
    """End of a save. `questionnaire` is the canonical copy echoed back by the server."""

    questionnaire: Optional[Questionnaire] = None
    failed: bool = False

    type: ClassVar[str] = "SAVED"


# =========================================================================
# QUESTIONNAIRE-LEVEL EDITS
# =========================================================================


@dataclass(frozen=True)
class ChangeName(Operation):
    name: str

    type: ClassVar[str] = "CHANGE_NAME"


@dataclass(frozen=True)
class ToggleMode(Operation):
    mode: str

    type: ClassVar[str] = "TOGGLE_MODE"


@dataclass(frozen=True)
class AddLanguage(Operation):
    language: str
    selection_step_id: str = field(default_factory=new_step_id)

    type: ClassVar[str] = "ADD_LANGUAGE"


@dataclass(frozen=True)
class RemoveLanguage(Operation):
    language: str

    type: ClassVar[str] = "REMOVE_LANGUAGE"


@dataclass(frozen=True)
class ReorderLanguages(Operation):
    language: str
    index: int

    type: ClassVar[str] = "REORDER_LANGUAGES"


@dataclass(frozen=True)
class SetDefaultLanguage(Operation):
    language: str

    type: ClassVar[str] = "SET_DEFAULT_LANGUAGE"


@dataclass(frozen=True)
class SetActiveLanguage(Operation):
    language: str

    type: ClassVar[str] = "SET_ACTIVE_LANGUAGE"


@dataclass(frozen=True)
class SetQuestionnaireMsg(Operation):
    """
    Set settings[key][active language][mode].

    For the ivr mode `value` may be a plain string (the text-to-speech text)
    or a full AudioPrompt.
    """

    key: str
    mode: str
    value: Union[str, AudioPrompt]

    type: ClassVar[str] = "SET_QUESTIONNAIRE_MSG"


@dataclass(frozen=True)
class AutocompleteQuestionnaireMsg(Operation):
    key: str
    mode: str
    item: AutocompleteItem

    type: ClassVar[str] = "AUTOCOMPLETE_QUESTIONNAIRE_MSG"


@dataclass(frozen=True)
class ImportTranslations(Operation):
    """Fill empty translation slots. `translations` maps a default-language source string to {language: text}."""

    translations: Mapping[str, Mapping[str, str]]

    type: ClassVar[str] = "IMPORT_TRANSLATIONS"


# =========================================================================
# STEP EDITS
# =========================================================================


@dataclass(frozen=True)
class AddStep(Operation):
    step_id: str = field(default_factory=new_step_id)

    type: ClassVar[str] = "ADD_STEP"


@dataclass(frozen=True)
class DeleteStep(Operation):
    step_id: str

    type: ClassVar[str] = "DELETE_STEP"


@dataclass(frozen=True)
class ChangeStepType(Operation):
    step_id: str
    step_type: str

    type: ClassVar[str] = "CHANGE_STEP_TYPE"


@dataclass(frozen=True)
class ChangeStepTitle(Operation):
    step_id: str
    title: str

    type: ClassVar[str] = "CHANGE_STEP_TITLE"


@dataclass(frozen=True)
class ChangeStepStore(Operation):
    step_id: str
    store: str

    type: ClassVar[str] = "CHANGE_STEP_STORE"


@dataclass(frozen=True)
class ChangeStepPromptSms(Operation):
    step_id: str
    prompt: str

    type: ClassVar[str] = "CHANGE_STEP_PROMPT_SMS"


@dataclass(frozen=True)
class ChangeStepPromptIvr(Operation):
    step_id: str
    text: str
    audio_source: str = "tts"

    type: ClassVar[str] = "CHANGE_STEP_PROMPT_IVR"


@dataclass(frozen=True)
class ChangeStepPromptMobileWeb(Operation):
    step_id: str
    prompt: str

    type: ClassVar[str] = "CHANGE_STEP_PROMPT_MOBILEWEB"


@dataclass(frozen=True)
class ChangeStepAudioIdIvr(Operation):
    step_id: str
    audio_id: str

    type: ClassVar[str] = "CHANGE_STEP_AUDIO_ID_IVR"


@dataclass(frozen=True)
class AutocompleteStepPromptSms(Operation):
    step_id: str
    item: AutocompleteItem

    type: ClassVar[str] = "AUTOCOMPLETE_STEP_PROMPT_SMS"


@dataclass(frozen=True)
class AutocompleteStepPromptIvr(Operation):
    step_id: str
    item: AutocompleteItem

    type: ClassVar[str] = "AUTOCOMPLETE_STEP_PROMPT_IVR"


@dataclass(frozen=True)
class ChangeExplanationStepSkipLogic(Operation):
    step_id: str
    skip_logic: Optional[str]

    type: ClassVar[str] = "CHANGE_EXPLANATION_STEP_SKIP_LOGIC"


@dataclass(frozen=True)
class ChangeDisposition(Operation):
    step_id: str
    disposition: str

    type: ClassVar[str] = "CHANGE_DISPOSITION"


# =========================================================================
# CHOICES, RANGES, REFUSALS
# =========================================================================


@dataclass(frozen=True)
class AddChoice(Operation):
    step_id: str

    type: ClassVar[str] = "ADD_CHOICE"


@dataclass(frozen=True)
class DeleteChoice(Operation):
    step_id: str
    index: int

    type: ClassVar[str] = "DELETE_CHOICE"


@dataclass(frozen=True)
class ChangeChoice(Operation):
    """
    Rewrite one choice of a multiple-choice step.

    sms_values / ivr_values are comma-separated token lists. With
    auto_complete set and both lists empty, the tokens are copied from the
    first earlier choice with the same value.
    """

    step_id: str
    index: int
    value: str
    sms_values: str = ""
    ivr_values: str = ""
    skip_logic: Optional[str] = None
    auto_complete: bool = False

    type: ClassVar[str] = "CHANGE_CHOICE"


@dataclass(frozen=True)
class ChangeNumericRanges(Operation):
    step_id: str
    min_value: str = ""
    max_value: str = ""
    ranges_delimiters: str = ""

    type: ClassVar[str] = "CHANGE_NUMERIC_RANGES"


@dataclass(frozen=True)
class ChangeRangeSkipLogic(Operation):
    step_id: str
    skip_logic: Optional[str]
    range_index: int

    type: ClassVar[str] = "CHANGE_RANGE_SKIP_LOGIC"


@dataclass(frozen=True)
class ToggleAcceptsRefusals(Operation):
    step_id: str

    type: ClassVar[str] = "TOGGLE_ACCEPTS_REFUSALS"


@dataclass(frozen=True)
class ChangeRefusal(Operation):
    step_id: str
    sms_values: str = ""
    ivr_values: str = ""
    skip_logic: Optional[str] = None

    type: ClassVar[str] = "CHANGE_REFUSAL"


OPERATION_TYPES: Dict[str, Type[Operation]] = {
    cls.type: cls
    for cls in (
        Fetch, Receive, NewQuestionnaire, Saving, Saved,
        ChangeName, ToggleMode,
        AddLanguage, RemoveLanguage, ReorderLanguages, SetDefaultLanguage, SetActiveLanguage,
        SetQuestionnaireMsg, AutocompleteQuestionnaireMsg, ImportTranslations,
        AddStep, DeleteStep, ChangeStepType, ChangeStepTitle, ChangeStepStore,
        ChangeStepPromptSms, ChangeStepPromptIvr, ChangeStepPromptMobileWeb, ChangeStepAudioIdIvr,
        AutocompleteStepPromptSms, AutocompleteStepPromptIvr,
        ChangeExplanationStepSkipLogic, ChangeDisposition,
        AddChoice, DeleteChoice, ChangeChoice,
        ChangeNumericRanges, ChangeRangeSkipLogic, ToggleAcceptsRefusals, ChangeRefusal,
    )
}
