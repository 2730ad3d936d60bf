"""
Example questionnaire builder.

Builds a small smoking/exercise questionnaire with two multiple-choice
steps, optionally followed by a numeric step, in a single language. Used by
the tests and handy for experiments in a REPL.
"""
from qesm.model import (
    AudioPrompt,
    Choice,
    ChoiceResponses,
    ERROR_MSG,
    LanguagePrompt,
    Mode,
    MultipleChoiceStep,
    NumericStep,
    QUOTA_COMPLETED_MSG,
    Questionnaire,
    Range,
)

SMOKE_STEP_ID = "17141bea-a81c-4227-bdda-f5f69188b0e7"
EXERCISE_STEP_ID = "b6588daa-cd81-40b1-8cac-ff2e72a15c15"
AGE_STEP_ID = "c3f1ae72-64a8-4a0d-9c63-5c2a3c8e1f44"


def _prompt(language: str, text: str) -> dict:
    return {language: LanguagePrompt(sms=text, ivr=AudioPrompt(text=text))}


def _choice(language: str, value: str, sms, ivr, skip_logic=None) -> Choice:
    return Choice(
        value=value,
        responses={language: ChoiceResponses(sms=tuple(sms), ivr=tuple(ivr))},
        skip_logic=skip_logic,
    )


def build_example_questionnaire(language: str = "en", with_numeric: bool = False) -> Questionnaire:
    steps = [
        MultipleChoiceStep(
            id=SMOKE_STEP_ID,
            title="Do you smoke?",
            store="Smokes",
            prompt=_prompt(language, "Do you smoke?"),
            choices=(
                _choice(language, "Yes", ["Yes", "Y", "1"], ["1"]),
                _choice(language, "No", ["No", "N", "2"], ["2"], skip_logic=EXERCISE_STEP_ID),
            ),
        ),
        MultipleChoiceStep(
            id=EXERCISE_STEP_ID,
            title="Do you exercise?",
            store="Exercises",
            prompt=_prompt(language, "Do you exercise?"),
            choices=(
                _choice(language, "Yes", ["Yes", "Y", "1"], ["1"]),
                _choice(language, "No", ["No", "N", "2"], ["2"]),
            ),
        ),
    ]

    if with_numeric:
        steps.append(NumericStep(
            id=AGE_STEP_ID,
            title="How old are you?",
            store="Age",
            prompt=_prompt(language, "How old are you?"),
            min_value=0,
            max_value=100,
            ranges_delimiters="18,65",
            ranges=(
                Range(from_=0, to=17, skip_logic=None),
                Range(from_=18, to=64, skip_logic=None),
                Range(from_=65, to=100, skip_logic=None),
            ),
        ))

    return Questionnaire(
        id=1,
        project_id=1,
        name="Foo",
        modes=(Mode.SMS, Mode.IVR),
        languages=(language,),
        default_language=language,
        active_language=language,
        steps=tuple(steps),
        settings={
            QUOTA_COMPLETED_MSG: {language: LanguagePrompt(sms="Quota completed")},
            ERROR_MSG: {language: LanguagePrompt(sms="You have entered an invalid answer")},
        },
    )
