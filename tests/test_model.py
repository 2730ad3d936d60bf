"""
Tests for the questionnaire document model.

These tests verify:
    - Value object defaults
    - Questionnaire language invariants
    - Prompt helpers
    - Step type conversion
"""

import dataclasses

import pytest
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
    Questionnaire,
    QuestionnaireInvariantError,
    Range,
    StepType,
    UnknownStepTypeError,
    convert_step,
    convertible_step_type,
    default_prompt,
    is_blank,
    new_language_selection_step,
    new_multiple_choice_step,
    prompt_slot_is_empty,
    prompt_text,
    with_prompt_text,
)


def _mc_step(step_id="s1") -> MultipleChoiceStep:
    return MultipleChoiceStep(
        id=step_id,
        title="Do you smoke?",
        store="Smokes",
        prompt={"en": LanguagePrompt(sms="Do you smoke?", ivr=AudioPrompt(text="Do you smoke?"))},
        choices=(
            Choice(value="Yes", responses={"en": ChoiceResponses(sms=("Y", "1"), ivr=("1",))}),
            Choice(value="No", responses={"en": ChoiceResponses(sms=("N", "2"), ivr=("2",))}),
        ),
    )


class TestBlank:
    @pytest.mark.parametrize("value", [None, "", "   ", "\t\n"])
    def test_blank_values(self, value):
        """None and whitespace-only strings are blank."""
        assert is_blank(value)

    def test_non_blank(self):
        assert not is_blank(" x ")


class TestValueObjects:
    """Test defaults of the small value objects."""

    def test_audio_prompt_defaults_to_tts(self):
        prompt = AudioPrompt()
        assert prompt.text == ""
        assert prompt.audio_source is AudioSource.TTS
        assert prompt.audio_id is None

    def test_choice_responses_for_missing_language(self):
        """A language without responses yields empty token lists."""
        choice = Choice(value="Yes")
        assert choice.responses_for("fr") == ChoiceResponses()

    def test_numeric_step_starts_with_one_open_range(self):
        step = NumericStep(id="n")
        assert step.ranges == (Range(),)
        assert step.refusal is None

    def test_models_are_frozen(self):
        step = _mc_step()
        with pytest.raises(dataclasses.FrozenInstanceError):
            step.title = "changed"

    def test_step_type_tags(self):
        assert MultipleChoiceStep.type is StepType.MULTIPLE_CHOICE
        assert NumericStep.type is StepType.NUMERIC
        assert ExplanationStep.type is StepType.EXPLANATION
        assert FlagStep.type is StepType.FLAG
        assert LanguageSelectionStep.type is StepType.LANGUAGE_SELECTION


class TestPromptHelpers:
    def test_default_prompt_skeleton(self):
        prompt = default_prompt("en")
        assert prompt == {"en": LanguagePrompt(sms="", ivr=AudioPrompt())}

    def test_prompt_text_per_mode(self):
        prompt = {"en": LanguagePrompt(sms="hi", ivr=AudioPrompt(text="hello"), mobileweb="hey")}
        assert prompt_text(prompt, "en", Mode.SMS) == "hi"
        assert prompt_text(prompt, "en", Mode.IVR) == "hello"
        assert prompt_text(prompt, "en", Mode.MOBILEWEB) == "hey"
        assert prompt_text(prompt, "fr", Mode.SMS) is None

    def test_with_prompt_text_leaves_other_languages(self):
        prompt = {"en": LanguagePrompt(sms="hi"), "fr": LanguagePrompt(sms="salut")}
        updated = with_prompt_text(prompt, "en", Mode.SMS, "hello")
        assert updated["en"].sms == "hello"
        assert updated["fr"] is prompt["fr"]
        assert prompt["en"].sms == "hi"

    def test_with_prompt_text_keeps_audio_settings(self):
        prompt = {"en": LanguagePrompt(ivr=AudioPrompt(text="", audio_source=AudioSource.UPLOAD, audio_id="a1"))}
        updated = with_prompt_text(prompt, "en", Mode.IVR, "spoken")
        assert updated["en"].ivr == AudioPrompt(text="spoken", audio_source=AudioSource.UPLOAD, audio_id="a1")

    def test_uploaded_audio_is_not_an_empty_slot(self):
        prompt = {"en": LanguagePrompt(ivr=AudioPrompt(text="", audio_source=AudioSource.UPLOAD, audio_id="a1"))}
        assert not prompt_slot_is_empty(prompt, "en", Mode.IVR)

    def test_blank_tts_is_an_empty_slot(self):
        prompt = {"en": LanguagePrompt(sms="  ", ivr=AudioPrompt(text=" "))}
        assert prompt_slot_is_empty(prompt, "en", Mode.IVR)
        assert prompt_slot_is_empty(prompt, "en", Mode.SMS)
        assert prompt_slot_is_empty(prompt, "fr", Mode.SMS)


class TestQuestionnaireInvariants:
    """Test the invariants checked on construction."""

    def test_defaults(self):
        q = Questionnaire()
        assert q.languages == ("en",)
        assert q.modes == (Mode.SMS, Mode.IVR)
        assert q.id is None
        assert q.language_selection_step is None

    def test_requires_a_language(self):
        with pytest.raises(QuestionnaireInvariantError):
            Questionnaire(languages=())

    def test_rejects_duplicate_languages(self):
        with pytest.raises(QuestionnaireInvariantError):
            Questionnaire(languages=("en", "en"))

    def test_default_language_must_be_enabled(self):
        with pytest.raises(QuestionnaireInvariantError):
            Questionnaire(languages=("en",), default_language="fr")

    def test_active_language_must_be_enabled(self):
        with pytest.raises(QuestionnaireInvariantError):
            Questionnaire(languages=("en",), active_language="fr")

    def test_multi_language_needs_selection_step_first(self):
        with pytest.raises(QuestionnaireInvariantError):
            Questionnaire(languages=("en", "fr"), steps=(_mc_step(),))

    def test_selection_step_must_not_move(self):
        selection = new_language_selection_step("lang", ("en", "fr"), "en")
        with pytest.raises(QuestionnaireInvariantError):
            Questionnaire(languages=("en", "fr"), steps=(_mc_step(), selection))

    def test_single_language_rejects_selection_step(self):
        selection = new_language_selection_step("lang", ("en",), "en")
        with pytest.raises(QuestionnaireInvariantError):
            Questionnaire(languages=("en",), steps=(selection,))

    def test_multi_language_with_selection_step(self):
        selection = new_language_selection_step("lang", ("en", "fr"), "en")
        q = Questionnaire(languages=("en", "fr"), steps=(selection, _mc_step()))
        assert q.language_selection_step is selection
        assert selection.language_choices == (None, "en", "fr")
        assert selection.store == "language"


class TestQuestionnaireLookup:
    def test_get_step(self):
        step = _mc_step("abc")
        q = Questionnaire(steps=(step,))
        assert q.get_step("abc") is step
        assert q.step_index("abc") == 0

    def test_missing_step(self):
        q = Questionnaire(steps=(_mc_step("abc"),))
        assert q.get_step("nope") is None
        assert q.step_index("nope") == -1

    def test_has_mode(self):
        q = Questionnaire(modes=(Mode.SMS,))
        assert q.has_mode(Mode.SMS)
        assert not q.has_mode(Mode.IVR)


class TestStepFactories:
    def test_new_multiple_choice_step(self):
        step = new_multiple_choice_step("new", "fr")
        assert step.id == "new"
        assert step.title == ""
        assert step.choices == ()
        assert step.prompt == default_prompt("fr")


class TestConvertStep:
    """Test step variant conversion."""

    def test_to_numeric_keeps_common_fields(self):
        step = _mc_step()
        numeric = convert_step(step, StepType.NUMERIC)
        assert isinstance(numeric, NumericStep)
        assert numeric.id == step.id
        assert numeric.title == step.title
        assert numeric.store == step.store
        assert numeric.prompt == step.prompt
        assert numeric.ranges == (Range(),)

    def test_accepts_string_type(self):
        assert isinstance(convert_step(_mc_step(), "explanation"), ExplanationStep)

    def test_to_explanation_drops_store(self):
        explanation = convert_step(_mc_step(), StepType.EXPLANATION)
        assert not hasattr(explanation, "store")
        assert explanation.prompt == _mc_step().prompt

    def test_to_flag(self):
        flag = convert_step(_mc_step(), StepType.FLAG)
        assert isinstance(flag, FlagStep)
        assert flag.disposition is Disposition.COMPLETED
        assert flag.title == "Do you smoke?"

    def test_flag_back_to_multiple_choice(self):
        """Flag steps have no prompt; converting back starts from empty fields."""
        mc = convert_step(FlagStep(id="f", title="Done"), StepType.MULTIPLE_CHOICE)
        assert mc == MultipleChoiceStep(id="f", title="Done", store="", prompt={}, choices=())

    def test_resets_choices(self):
        mc = convert_step(_mc_step(), StepType.MULTIPLE_CHOICE)
        assert mc.choices == ()

    def test_unknown_type_raises(self):
        with pytest.raises(UnknownStepTypeError):
            convert_step(_mc_step(), "matrix")

    def test_language_selection_target_raises(self):
        with pytest.raises(UnknownStepTypeError):
            convert_step(_mc_step(), StepType.LANGUAGE_SELECTION)

    @pytest.mark.parametrize("value", ["numeric", StepType.FLAG])
    def test_convertible_step_type(self, value):
        assert convertible_step_type(value) is StepType(value)
