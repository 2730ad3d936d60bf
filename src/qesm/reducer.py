"""
Questionnaire Reducer

Pure state transition function: (EditorState, Operation) -> EditorState

    - No side effects, no IO
    - The input state is never modified; unchanged parts are shared
    - Unknown operations return the input state unchanged
    - The validator runs after every transition and its result is kept in
      EditorState.errors

Given the same initial state and the same operations, replay() always
produces the same state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from qesm.model import (
    AudioPrompt,
    AudioSource,
    Choice,
    ChoiceResponses,
    Disposition,
    ExplanationStep,
    FlagStep,
    LanguagePrompt,
    LanguageSelectionStep,
    Mode,
    MultipleChoiceStep,
    NumericStep,
    PROMPTED_STEPS,
    Questionnaire,
    Range,
    Refusal,
    Step,
    convert_step,
    convertible_step_type,
    new_language_selection_step,
    new_multiple_choice_step,
    prompt_slot_is_empty,
    with_prompt_text,
)
from qesm import operations as ops
from qesm.serialization import SerializationError, operation_from_dict
from qesm.translation import apply_translations
from qesm.validator import validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Filter:
    """Identifies the questionnaire a session is (or will be) showing."""

    project_id: Optional[int]
    id: Optional[int]


@dataclass(frozen=True)
class EditorState:
    """
    Everything an editing session exposes to rendering code.

    Properties:
        fetching: A fetch is outstanding
        filter: (project_id, id) of the questionnaire being edited
        dirty: data has edits not yet handed to the persistence layer
        saving: A save is outstanding
        data: Current questionnaire, None before the first RECEIVE
        errors: Validator output for `data`, keyed by path
    """

    fetching: bool = False
    filter: Optional[Filter] = None
    dirty: bool = False
    saving: bool = False
    data: Optional[Questionnaire] = None
    errors: Dict[str, List[str]] = field(default_factory=dict)


INITIAL_STATE = EditorState()

OperationLike = Union[ops.Operation, Mapping]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def reduce(state: EditorState, operation: OperationLike) -> EditorState:
    """
    Apply one operation to the editor state.

    Operations may be Operation objects or their dict form
    ({"type": ..., ...}); unknown types and malformed dicts are ignored.
    """
    if isinstance(operation, Mapping):
        if operation.get("type") not in ops.OPERATION_TYPES:
            logger.debug("Ignoring unknown operation type %r", operation.get("type"))
            return state
        try:
            operation = operation_from_dict(operation)
        except SerializationError as e:
            logger.warning("Ignoring malformed operation: %s", e)
            return state

    lifecycle = _LIFECYCLE_HANDLERS.get(type(operation))
    if lifecycle is not None:
        new_state = lifecycle(state, operation)
    else:
        handler = _HANDLERS.get(type(operation))
        if handler is None:
            logger.debug("Ignoring unknown operation %r", operation)
            return state
        if state.data is None:
            logger.debug("Ignoring %s: no questionnaire loaded", operation.type)
            return state
        logger.debug("Applying %s", operation.type)
        data = handler(state.data, operation)
        if data is state.data:
            return state
        new_state = replace(state, data=data, dirty=True)

    if new_state is state:
        return state
    errors = validate(new_state.data) if new_state.data is not None else {}
    return replace(new_state, errors=errors)


def replay(state: EditorState, operations: Iterable[OperationLike]) -> EditorState:
    """
    Fold a sequence of operations through reduce().
    replay(s, [o1, o2]) == reduce(reduce(s, o1), o2)
    """
    for operation in operations:
        state = reduce(state, operation)
    return state


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


def _fetch(state: EditorState, op: ops.Fetch) -> EditorState:
    new_filter = Filter(project_id=op.project_id, id=op.id)
    if state.filter == new_filter:
        return replace(state, fetching=True)
    return replace(state, fetching=True, filter=new_filter, data=None, dirty=False)


def _receive(state: EditorState, op: ops.Receive) -> EditorState:
    questionnaire = op.questionnaire
    arriving = Filter(project_id=questionnaire.project_id, id=questionnaire.id)
    if state.filter != arriving:
        logger.info("Discarding questionnaire %s/%s: superseded by %s", arriving.project_id, arriving.id, state.filter)
        return state
    return replace(state, fetching=False, dirty=False, data=questionnaire)


def _new_questionnaire(state: EditorState, op: ops.NewQuestionnaire) -> EditorState:
    questionnaire = Questionnaire(
        project_id=op.project_id,
        modes=tuple(Mode(mode) for mode in op.modes),
        languages=(op.language,),
        default_language=op.language,
        active_language=op.language,
    )
    return replace(
        state,
        fetching=False,
        filter=Filter(project_id=op.project_id, id=None),
        dirty=False,
        saving=False,
        data=questionnaire,
    )


def _saving(state: EditorState, op: ops.Saving) -> EditorState:
    return replace(state, saving=True, dirty=False)


def _saved(state: EditorState, op: ops.Saved) -> EditorState:
    if op.failed:
        return replace(state, saving=False, dirty=state.data is not None)

    echoed = op.questionnaire
    if echoed is None or state.dirty or state.data is None:
        # Edits made while saving stay local and keep the state dirty.
        return replace(state, saving=False)

    active = state.data.active_language
    if active in echoed.languages and echoed.active_language != active:
        echoed = replace(echoed, active_language=active)
    return replace(
        state,
        saving=False,
        filter=Filter(project_id=echoed.project_id, id=echoed.id),
        data=echoed,
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _replace_at(items: tuple, index: int, item) -> tuple:
    return items[:index] + (item,) + items[index + 1:]


def _remove_at(items: tuple, index: int) -> tuple:
    return items[:index] + items[index + 1:]


def _split_values(values: Optional[str]) -> Tuple[str, ...]:
    """Comma-separated tokens, trimmed, empties dropped."""
    if not values:
        return ()
    return tuple(token.strip() for token in values.split(",") if token.strip())


def _parse_mode(value: str) -> Optional[Mode]:
    try:
        return Mode(value)
    except ValueError:
        return None


def _change_step(quiz: Questionnaire, step_id: str, func: Callable[[Step], Step], kinds=Step) -> Questionnaire:
    """Replace the step with `step_id` by func(step), keeping its position."""
    index = quiz.step_index(step_id)
    if index == -1:
        logger.debug("No step with id %s", step_id)
        return quiz
    step = quiz.steps[index]
    if not isinstance(step, kinds):
        logger.debug("Step %s is a %s step, operation does not apply", step_id, step.type.value)
        return quiz
    changed = func(step)
    if changed is step:
        return quiz
    return replace(quiz, steps=_replace_at(quiz.steps, index, changed))


def _autocomplete_prompt(quiz: Questionnaire, prompt, mode: Mode, item: ops.AutocompleteItem):
    """Default language gets item.text; translations only fill empty slots."""
    prompt = with_prompt_text(prompt, quiz.default_language, mode, item.text)
    for translation in item.translations:
        if translation.language == quiz.default_language or translation.language not in quiz.languages:
            continue
        if prompt_slot_is_empty(prompt, translation.language, mode):
            prompt = with_prompt_text(prompt, translation.language, mode, translation.text)
    return prompt


def _without_skip_to(step: Step, target_id: str) -> Step:
    """Clear every skip-logic reference of `step` that points at target_id."""
    if isinstance(step, MultipleChoiceStep):
        if any(c.skip_logic == target_id for c in step.choices):
            choices = tuple(replace(c, skip_logic=None) if c.skip_logic == target_id else c for c in step.choices)
            step = replace(step, choices=choices)
    elif isinstance(step, NumericStep):
        if any(r.skip_logic == target_id for r in step.ranges):
            ranges = tuple(replace(r, skip_logic=None) if r.skip_logic == target_id else r for r in step.ranges)
            step = replace(step, ranges=ranges)
        if step.refusal is not None and step.refusal.skip_logic == target_id:
            step = replace(step, refusal=replace(step.refusal, skip_logic=None))
    elif isinstance(step, (ExplanationStep, FlagStep)):
        if step.skip_logic == target_id:
            step = replace(step, skip_logic=None)
    return step


# ---------------------------------------------------------------------------
# Questionnaire-level edits
# ---------------------------------------------------------------------------


def _change_name(quiz: Questionnaire, op: ops.ChangeName) -> Questionnaire:
    return replace(quiz, name=op.name.strip())


def _toggle_mode(quiz: Questionnaire, op: ops.ToggleMode) -> Questionnaire:
    mode = _parse_mode(op.mode)
    if mode is None:
        logger.debug("Ignoring unknown mode %r", op.mode)
        return quiz
    if mode in quiz.modes:
        return replace(quiz, modes=tuple(m for m in quiz.modes if m is not mode))
    return replace(quiz, modes=quiz.modes + (mode,))


def _add_language(quiz: Questionnaire, op: ops.AddLanguage) -> Questionnaire:
    if op.language in quiz.languages:
        return quiz

    languages = quiz.languages + (op.language,)
    selection = quiz.language_selection_step
    if selection is not None:
        selection = replace(selection, language_choices=selection.language_choices + (op.language,))
        steps = _replace_at(quiz.steps, 0, selection)
    elif quiz.step_index(op.selection_step_id) != -1:
        logger.info("Ignoring language %s: step id %s already in use", op.language, op.selection_step_id)
        return quiz
    else:
        selection = new_language_selection_step(op.selection_step_id, languages, quiz.default_language)
        steps = (selection,) + quiz.steps
    return replace(quiz, languages=languages, steps=steps)


def _remove_language(quiz: Questionnaire, op: ops.RemoveLanguage) -> Questionnaire:
    if op.language not in quiz.languages:
        return quiz
    if op.language == quiz.default_language:
        logger.info("Refusing to remove default language %s", op.language)
        return quiz

    languages = tuple(lang for lang in quiz.languages if lang != op.language)
    steps = quiz.steps
    selection = quiz.language_selection_step
    if len(languages) == 1:
        if selection is not None:
            steps = steps[1:]
    elif selection is not None:
        choices = tuple(c for c in selection.language_choices if c != op.language)
        steps = _replace_at(steps, 0, replace(selection, language_choices=choices))

    active = quiz.default_language if quiz.active_language == op.language else quiz.active_language
    return replace(quiz, languages=languages, steps=steps, active_language=active)


def _reorder_languages(quiz: Questionnaire, op: ops.ReorderLanguages) -> Questionnaire:
    selection = quiz.language_selection_step
    if selection is None or op.language not in selection.language_choices:
        return quiz

    choices = [c for c in selection.language_choices if c != op.language]
    # Slot 0 stays the placeholder.
    choices.insert(max(op.index, 1), op.language)
    return replace(quiz, steps=_replace_at(quiz.steps, 0, replace(selection, language_choices=tuple(choices))))


def _set_default_language(quiz: Questionnaire, op: ops.SetDefaultLanguage) -> Questionnaire:
    if op.language not in quiz.languages:
        logger.info("Ignoring default language %s: not enabled", op.language)
        return quiz
    return replace(quiz, default_language=op.language, active_language=op.language)


def _set_active_language(quiz: Questionnaire, op: ops.SetActiveLanguage) -> Questionnaire:
    if op.language not in quiz.languages:
        logger.info("Ignoring active language %s: not enabled", op.language)
        return quiz
    return replace(quiz, active_language=op.language)


def _set_questionnaire_msg(quiz: Questionnaire, op: ops.SetQuestionnaireMsg) -> Questionnaire:
    mode = _parse_mode(op.mode)
    if mode is None:
        return quiz

    language = quiz.active_language
    prompt = quiz.settings.get(op.key, {})
    if isinstance(op.value, AudioPrompt):
        entry = prompt.get(language, LanguagePrompt())
        prompt = {**prompt, language: replace(entry, ivr=op.value)}
    else:
        prompt = with_prompt_text(prompt, language, mode, op.value)
    return replace(quiz, settings={**quiz.settings, op.key: prompt})


def _autocomplete_questionnaire_msg(quiz: Questionnaire, op: ops.AutocompleteQuestionnaireMsg) -> Questionnaire:
    mode = _parse_mode(op.mode)
    if mode is None:
        return quiz
    prompt = _autocomplete_prompt(quiz, quiz.settings.get(op.key, {}), mode, op.item)
    return replace(quiz, settings={**quiz.settings, op.key: prompt})


def _import_translations(quiz: Questionnaire, op: ops.ImportTranslations) -> Questionnaire:
    translated = apply_translations(quiz, op.translations)
    return quiz if translated == quiz else translated


# ---------------------------------------------------------------------------
# Step edits
# ---------------------------------------------------------------------------


def _add_step(quiz: Questionnaire, op: ops.AddStep) -> Questionnaire:
    if quiz.step_index(op.step_id) != -1:
        logger.info("Ignoring new step: id %s already in use", op.step_id)
        return quiz
    return replace(quiz, steps=quiz.steps + (new_multiple_choice_step(op.step_id, quiz.default_language),))


def _delete_step(quiz: Questionnaire, op: ops.DeleteStep) -> Questionnaire:
    step = quiz.get_step(op.step_id)
    if step is None:
        return quiz
    if isinstance(step, LanguageSelectionStep):
        logger.info("Refusing to delete the language-selection step; remove languages instead")
        return quiz
    steps = tuple(_without_skip_to(s, op.step_id) for s in quiz.steps if s.id != op.step_id)
    return replace(quiz, steps=steps)


def _change_step_type(quiz: Questionnaire, op: ops.ChangeStepType) -> Questionnaire:
    convertible_step_type(op.step_type)
    if isinstance(quiz.get_step(op.step_id), LanguageSelectionStep):
        logger.info("Refusing to change the type of the language-selection step")
        return quiz
    return _change_step(quiz, op.step_id, lambda step: convert_step(step, op.step_type))


def _change_step_title(quiz: Questionnaire, op: ops.ChangeStepTitle) -> Questionnaire:
    return _change_step(quiz, op.step_id, lambda step: replace(step, title=op.title.strip()))


def _change_step_store(quiz: Questionnaire, op: ops.ChangeStepStore) -> Questionnaire:
    return _change_step(
        quiz, op.step_id, lambda step: replace(step, store=op.store.strip()), (MultipleChoiceStep, NumericStep)
    )


def _change_step_prompt_sms(quiz: Questionnaire, op: ops.ChangeStepPromptSms) -> Questionnaire:
    return _change_step(
        quiz,
        op.step_id,
        lambda step: replace(step, prompt=with_prompt_text(step.prompt, quiz.active_language, Mode.SMS, op.prompt)),
        PROMPTED_STEPS,
    )


def _change_step_prompt_mobileweb(quiz: Questionnaire, op: ops.ChangeStepPromptMobileWeb) -> Questionnaire:
    return _change_step(
        quiz,
        op.step_id,
        lambda step: replace(
            step, prompt=with_prompt_text(step.prompt, quiz.active_language, Mode.MOBILEWEB, op.prompt)
        ),
        PROMPTED_STEPS,
    )


def _change_step_prompt_ivr(quiz: Questionnaire, op: ops.ChangeStepPromptIvr) -> Questionnaire:
    language = quiz.active_language
    try:
        audio_source = AudioSource(op.audio_source)
    except ValueError:
        logger.debug("Ignoring unknown audio source %r", op.audio_source)
        return quiz

    def change(step):
        entry = step.prompt.get(language, LanguagePrompt())
        ivr = replace(entry.ivr or AudioPrompt(), text=op.text, audio_source=audio_source)
        return replace(step, prompt={**step.prompt, language: replace(entry, ivr=ivr)})

    return _change_step(quiz, op.step_id, change, PROMPTED_STEPS)


def _change_step_audio_id_ivr(quiz: Questionnaire, op: ops.ChangeStepAudioIdIvr) -> Questionnaire:
    language = quiz.active_language

    def change(step):
        entry = step.prompt.get(language, LanguagePrompt())
        ivr = replace(entry.ivr or AudioPrompt(), audio_id=op.audio_id, audio_source=AudioSource.UPLOAD)
        return replace(step, prompt={**step.prompt, language: replace(entry, ivr=ivr)})

    return _change_step(quiz, op.step_id, change, PROMPTED_STEPS)


def _autocomplete_step_prompt_sms(quiz: Questionnaire, op: ops.AutocompleteStepPromptSms) -> Questionnaire:
    return _change_step(
        quiz,
        op.step_id,
        lambda step: replace(step, prompt=_autocomplete_prompt(quiz, step.prompt, Mode.SMS, op.item)),
        PROMPTED_STEPS,
    )


def _autocomplete_step_prompt_ivr(quiz: Questionnaire, op: ops.AutocompleteStepPromptIvr) -> Questionnaire:
    return _change_step(
        quiz,
        op.step_id,
        lambda step: replace(step, prompt=_autocomplete_prompt(quiz, step.prompt, Mode.IVR, op.item)),
        PROMPTED_STEPS,
    )


def _change_explanation_step_skip_logic(quiz: Questionnaire, op: ops.ChangeExplanationStepSkipLogic) -> Questionnaire:
    return _change_step(quiz, op.step_id, lambda step: replace(step, skip_logic=op.skip_logic), ExplanationStep)


def _change_disposition(quiz: Questionnaire, op: ops.ChangeDisposition) -> Questionnaire:
    try:
        disposition = Disposition(op.disposition)
    except ValueError:
        logger.debug("Ignoring unknown disposition %r", op.disposition)
        return quiz
    return _change_step(quiz, op.step_id, lambda step: replace(step, disposition=disposition), FlagStep)


# ---------------------------------------------------------------------------
# Choices
# ---------------------------------------------------------------------------


def _add_choice(quiz: Questionnaire, op: ops.AddChoice) -> Questionnaire:
    choice = Choice(value="", responses={lang: ChoiceResponses() for lang in quiz.languages}, skip_logic=None)
    return _change_step(
        quiz, op.step_id, lambda step: replace(step, choices=step.choices + (choice,)), MultipleChoiceStep
    )


def _delete_choice(quiz: Questionnaire, op: ops.DeleteChoice) -> Questionnaire:
    def change(step):
        if not 0 <= op.index < len(step.choices):
            return step
        return replace(step, choices=_remove_at(step.choices, op.index))

    return _change_step(quiz, op.step_id, change, MultipleChoiceStep)


def _find_prior_choice(quiz: Questionnaire, before: int, value: str) -> Optional[Choice]:
    """First choice valued `value` in the multiple-choice steps preceding position `before`."""
    for step in quiz.steps[:before]:
        if not isinstance(step, MultipleChoiceStep):
            continue
        for choice in step.choices:
            if choice.value == value:
                return choice
    return None


def _change_choice(quiz: Questionnaire, op: ops.ChangeChoice) -> Questionnaire:
    language = quiz.active_language
    sms = _split_values(op.sms_values)
    ivr = _split_values(op.ivr_values)

    if op.auto_complete and not sms and not ivr:
        match = _find_prior_choice(quiz, quiz.step_index(op.step_id), op.value)
        if match is not None:
            tokens = match.responses_for(language)
            sms, ivr = tokens.sms, tokens.ivr

    def change(step):
        if not 0 <= op.index < len(step.choices):
            return step
        choice = step.choices[op.index]
        responses = {**choice.responses, language: replace(choice.responses_for(language), sms=sms, ivr=ivr)}
        choice = replace(choice, value=op.value, responses=responses, skip_logic=op.skip_logic)
        return replace(step, choices=_replace_at(step.choices, op.index, choice))

    return _change_step(quiz, op.step_id, change, MultipleChoiceStep)


# ---------------------------------------------------------------------------
# Numeric ranges and refusals
# ---------------------------------------------------------------------------


def _parse_optional_int(text: Optional[str]) -> Tuple[Optional[int], bool]:
    """(value, ok). Blank text is a valid "no value"."""
    if text is None or text.strip() == "":
        return None, True
    try:
        return int(text.strip()), True
    except ValueError:
        return None, False


def _build_ranges(min_value: Optional[int], max_value: Optional[int], delimiters: List[int],
                  previous: Tuple[Range, ...]) -> Tuple[Range, ...]:
    """
    Partition [min, max] at the delimiters.

    Each range ends one below the next range's start; the last one ends at
    max_value. A range whose bounds match a previous range keeps its skip logic.
    """
    starts: List[Optional[int]] = [min_value] + delimiters

    ranges = []
    for i, start in enumerate(starts):
        end = starts[i + 1] - 1 if i < len(starts) - 1 else max_value
        kept = next((r for r in previous if r.from_ == start and r.to == end), None)
        ranges.append(kept if kept is not None else Range(from_=start, to=end, skip_logic=None))
    return tuple(ranges)


def _change_numeric_ranges(quiz: Questionnaire, op: ops.ChangeNumericRanges) -> Questionnaire:
    min_value, min_ok = _parse_optional_int(op.min_value)
    max_value, max_ok = _parse_optional_int(op.max_value)

    delimiters: List[int] = []
    delimiters_ok = True
    for token in (op.ranges_delimiters or "").split(","):
        if not token.strip():
            continue
        number, ok = _parse_optional_int(token)
        if not ok:
            delimiters_ok = False
            break
        delimiters.append(number)

    boundaries = [v for v in [min_value] + delimiters + [max_value] if v is not None]
    ascending = all(a < b for a, b in zip(boundaries, boundaries[1:]))

    def change(step):
        step = replace(step, min_value=min_value, max_value=max_value, ranges_delimiters=op.ranges_delimiters)
        if not (min_ok and max_ok and delimiters_ok and ascending):
            # Pending edit: keep the last valid partition.
            return step
        return replace(step, ranges=_build_ranges(min_value, max_value, delimiters, step.ranges))

    return _change_step(quiz, op.step_id, change, NumericStep)


def _change_range_skip_logic(quiz: Questionnaire, op: ops.ChangeRangeSkipLogic) -> Questionnaire:
    def change(step):
        if not 0 <= op.range_index < len(step.ranges):
            return step
        new_range = replace(step.ranges[op.range_index], skip_logic=op.skip_logic)
        return replace(step, ranges=_replace_at(step.ranges, op.range_index, new_range))

    return _change_step(quiz, op.step_id, change, NumericStep)


def _toggle_accepts_refusals(quiz: Questionnaire, op: ops.ToggleAcceptsRefusals) -> Questionnaire:
    def change(step):
        refusal = step.refusal or Refusal()
        return replace(step, refusal=replace(refusal, enabled=not refusal.enabled))

    return _change_step(quiz, op.step_id, change, NumericStep)


def _change_refusal(quiz: Questionnaire, op: ops.ChangeRefusal) -> Questionnaire:
    language = quiz.active_language

    def change(step):
        refusal = step.refusal or Refusal(enabled=True)
        tokens = replace(refusal.responses_for(language), sms=_split_values(op.sms_values),
                         ivr=_split_values(op.ivr_values))
        refusal = replace(refusal, responses={**refusal.responses, language: tokens}, skip_logic=op.skip_logic)
        return replace(step, refusal=refusal)

    return _change_step(quiz, op.step_id, change, NumericStep)


_LIFECYCLE_HANDLERS: Dict[type, Callable[[EditorState, ops.Operation], EditorState]] = {
    ops.Fetch: _fetch,
    ops.Receive: _receive,
    ops.NewQuestionnaire: _new_questionnaire,
    ops.Saving: _saving,
    ops.Saved: _saved,
}

_HANDLERS: Dict[type, Callable[[Questionnaire, ops.Operation], Questionnaire]] = {
    ops.ChangeName: _change_name,
    ops.ToggleMode: _toggle_mode,
    ops.AddLanguage: _add_language,
    ops.RemoveLanguage: _remove_language,
    ops.ReorderLanguages: _reorder_languages,
    ops.SetDefaultLanguage: _set_default_language,
    ops.SetActiveLanguage: _set_active_language,
    ops.SetQuestionnaireMsg: _set_questionnaire_msg,
    ops.AutocompleteQuestionnaireMsg: _autocomplete_questionnaire_msg,
    ops.ImportTranslations: _import_translations,
    ops.AddStep: _add_step,
    ops.DeleteStep: _delete_step,
    ops.ChangeStepType: _change_step_type,
    ops.ChangeStepTitle: _change_step_title,
    ops.ChangeStepStore: _change_step_store,
    ops.ChangeStepPromptSms: _change_step_prompt_sms,
    ops.ChangeStepPromptIvr: _change_step_prompt_ivr,
    ops.ChangeStepPromptMobileWeb: _change_step_prompt_mobileweb,
    ops.ChangeStepAudioIdIvr: _change_step_audio_id_ivr,
    ops.AutocompleteStepPromptSms: _autocomplete_step_prompt_sms,
    ops.AutocompleteStepPromptIvr: _autocomplete_step_prompt_ivr,
    ops.ChangeExplanationStepSkipLogic: _change_explanation_step_skip_logic,
    ops.ChangeDisposition: _change_disposition,
    ops.AddChoice: _add_choice,
    ops.DeleteChoice: _delete_choice,
    ops.ChangeChoice: _change_choice,
    ops.ChangeNumericRanges: _change_numeric_ranges,
    ops.ChangeRangeSkipLogic: _change_range_skip_logic,
    ops.ToggleAcceptsRefusals: _toggle_accepts_refusals,
    ops.ChangeRefusal: _change_refusal,
}
