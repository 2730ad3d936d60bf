"""
Tests for the questionnaire validator.

The validator never changes the questionnaire; it only reports problems
keyed by their path inside it.
"""

from dataclasses import replace

from qesm.examples import build_example_questionnaire
from qesm.model import (
    AudioPrompt,
    AudioSource,
    Choice,
    ChoiceResponses,
    FlagStep,
    LanguagePrompt,
    Mode,
    MultipleChoiceStep,
    NumericStep,
    Questionnaire,
    Refusal,
    new_language_selection_step,
)
from qesm.validator import validate


def build_step(choices, prompt=None) -> MultipleChoiceStep:
    return MultipleChoiceStep(
        id="s1",
        title="Q",
        store="Q",
        prompt=prompt if prompt is not None else {"en": LanguagePrompt(sms="Q?", ivr=AudioPrompt(text="Q?"))},
        choices=tuple(choices),
    )


def build_choice(value, sms=(), ivr=()) -> Choice:
    return Choice(value=value, responses={"en": ChoiceResponses(sms=tuple(sms), ivr=tuple(ivr))})


def build_questionnaire(*steps, modes=(Mode.SMS, Mode.IVR)) -> Questionnaire:
    return Questionnaire(modes=modes, steps=tuple(steps))


class TestValidQuestionnaires:
    def test_example_is_valid(self):
        assert validate(build_example_questionnaire()) == {}

    def test_numeric_example_is_valid(self):
        assert validate(build_example_questionnaire(with_numeric=True)) == {}

    def test_empty_questionnaire_is_valid(self):
        assert validate(Questionnaire()) == {}

    def test_flag_steps_need_nothing(self):
        assert validate(build_questionnaire(FlagStep(id="f"))) == {}


class TestPrompts:
    """Test prompt rules for each enabled mode."""

    def test_blank_sms_prompt(self):
        step = build_step(
            [build_choice("Yes", ["Y"], ["1"]), build_choice("No", ["N"], ["2"])],
            prompt={"en": LanguagePrompt(sms="  ", ivr=AudioPrompt(text="Q?"))},
        )
        assert validate(build_questionnaire(step)) == {"steps[0].prompt.sms": ["SMS prompt must not be blank"]}

    def test_missing_prompt_reports_both_channels(self):
        step = build_step([build_choice("Yes", ["Y"], ["1"]), build_choice("No", ["N"], ["2"])], prompt={})
        errors = validate(build_questionnaire(step))
        assert errors == {
            "steps[0].prompt.sms": ["SMS prompt must not be blank"],
            "steps[0].prompt.ivr.text": ["Voice prompt must not be blank"],
        }

    def test_uploaded_audio_exempt_from_blank_text(self):
        prompt = {"en": LanguagePrompt(sms="Q?", ivr=AudioPrompt(text="", audio_source=AudioSource.UPLOAD, audio_id="x"))}
        step = build_step([build_choice("Yes", ["Y"], ["1"]), build_choice("No", ["N"], ["2"])], prompt=prompt)
        assert validate(build_questionnaire(step)) == {}

    def test_disabled_modes_are_not_checked(self):
        step = build_step([build_choice("Yes", ["Y"]), build_choice("No", ["N"])],
                          prompt={"en": LanguagePrompt(sms="Q?")})
        assert validate(build_questionnaire(step, modes=(Mode.SMS,))) == {}

    def test_mobileweb_prompt_required_when_enabled(self):
        step = build_step([build_choice("Yes"), build_choice("No")], prompt={"en": LanguagePrompt(mobileweb=" ")})
        errors = validate(build_questionnaire(step, modes=(Mode.MOBILEWEB,)))
        assert errors == {"steps[0].prompt.mobileweb": ["Mobile web prompt must not be blank"]}

    def test_language_selection_step_skips_only_sms_prompt(self):
        """The SMS menu is generated; the voice prompt still has to be written."""
        selection = new_language_selection_step("lang", ("en", "fr"), "en")
        q = Questionnaire(languages=("en", "fr"), steps=(selection,))
        assert validate(q) == {"steps[0].prompt.ivr.text": ["Voice prompt must not be blank"]}

    def test_language_selection_step_mobileweb_prompt_checked(self):
        selection = new_language_selection_step("lang", ("en", "fr"), "en")
        q = Questionnaire(languages=("en", "fr"), modes=(Mode.MOBILEWEB,), steps=(selection,))
        assert validate(q) == {"steps[0].prompt.mobileweb": ["Mobile web prompt must not be blank"]}

    def test_active_language_is_checked(self):
        q = build_example_questionnaire()
        selection = new_language_selection_step("lang", ("en", "fr"), "en")
        q = replace(q, languages=("en", "fr"), active_language="fr", steps=(selection,) + q.steps)
        errors = validate(q)
        assert errors["steps[1].prompt.sms"] == ["SMS prompt must not be blank"]
        assert errors["steps[2].prompt.ivr.text"] == ["Voice prompt must not be blank"]


class TestChoices:
    def test_needs_two_choices(self):
        errors = validate(build_questionnaire(build_step([build_choice("Yes", ["Y"], ["1"])])))
        assert errors == {"steps[0].choices": ["Must have at least two responses"]}

    def test_blank_value(self):
        errors = validate(build_questionnaire(build_step([
            build_choice("Yes", ["Y"], ["1"]),
            build_choice(" ", ["N"], ["2"]),
        ])))
        assert errors == {"steps[0].choices[1].value": ["Response must not be blank"]}

    def test_missing_tokens(self):
        errors = validate(build_questionnaire(build_step([
            build_choice("Yes", ["Y"], ["1"]),
            build_choice("No"),
        ])))
        assert errors == {
            "steps[0].choices[1].sms": ["SMS must not be blank"],
            "steps[0].choices[1].ivr": ['"Phone call" must not be blank'],
        }

    def test_ivr_tokens_must_be_keypad_keys(self):
        errors = validate(build_questionnaire(build_step([
            build_choice("Yes", ["Y"], ["1", "#"]),
            build_choice("No", ["N"], ["two"]),
        ])))
        assert errors == {
            "steps[0].choices[1].ivr": ['"Phone call" must only consist of single digits, "#" or "*"'],
        }

    def test_duplicate_value_flags_later_choice(self):
        errors = validate(build_questionnaire(build_step([
            build_choice("Yes", ["Y"], ["1"]),
            build_choice("Yes", ["S"], ["2"]),
        ])))
        assert errors == {"steps[0].choices[1].value": ["Value already used in a previous response"]}

    def test_every_duplicate_token_is_reported(self):
        errors = validate(build_questionnaire(build_step([
            build_choice("Yes", ["Y", "1"], ["1"]),
            build_choice("No", ["N", "2"], ["2"]),
            build_choice("Maybe", ["Y", "2"], ["1"]),
        ])))
        assert errors == {
            "steps[0].choices[2].sms": [
                'Value "Y" already used in a previous response',
                'Value "2" already used in a previous response',
            ],
            "steps[0].choices[2].ivr": ['Value "1" already used in a previous response'],
        }

    def test_same_token_in_different_steps_is_fine(self):
        first = build_step([build_choice("Yes", ["Y"], ["1"]), build_choice("No", ["N"], ["2"])])
        second = replace(first, id="s2")
        assert validate(build_questionnaire(first, second)) == {}


class TestRefusal:
    def _numeric(self, refusal) -> NumericStep:
        return NumericStep(
            id="n",
            store="Age",
            prompt={"en": LanguagePrompt(sms="Age?", ivr=AudioPrompt(text="Age?"))},
            refusal=refusal,
        )

    def test_disabled_refusal_not_checked(self):
        assert validate(build_questionnaire(self._numeric(Refusal(enabled=False)))) == {}

    def test_enabled_refusal_needs_tokens(self):
        errors = validate(build_questionnaire(self._numeric(Refusal(enabled=True))))
        assert errors == {
            "steps[0].refusal.sms": ["SMS must not be blank"],
            "steps[0].refusal.ivr": ['"Phone call" must not be blank'],
        }

    def test_enabled_refusal_with_tokens(self):
        refusal = Refusal(enabled=True, responses={"en": ChoiceResponses(sms=("skip",), ivr=("*",))})
        assert validate(build_questionnaire(self._numeric(refusal))) == {}
