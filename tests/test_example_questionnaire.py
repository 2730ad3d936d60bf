"""
Test the example questionnaire builder.

Validates that the builder creates the expected steps, skip logic and
settings, and that the result is valid as built.
"""

from qesm.examples import AGE_STEP_ID, EXERCISE_STEP_ID, SMOKE_STEP_ID, build_example_questionnaire
from qesm.model import ERROR_MSG, QUOTA_COMPLETED_MSG, NumericStep
from qesm.validator import validate


def test_example_questionnaire_structure():
    q = build_example_questionnaire()

    assert [s.id for s in q.steps] == [SMOKE_STEP_ID, EXERCISE_STEP_ID]
    assert q.language_selection_step is None

    # "No" to smoking skips straight to the exercise question
    smoke = q.get_step(SMOKE_STEP_ID)
    assert [c.value for c in smoke.choices] == ["Yes", "No"]
    assert smoke.choices[1].skip_logic == EXERCISE_STEP_ID

    assert set(q.settings) == {QUOTA_COMPLETED_MSG, ERROR_MSG}
    assert validate(q) == {}


def test_example_with_numeric_step():
    q = build_example_questionnaire(language="fr", with_numeric=True)

    age = q.get_step(AGE_STEP_ID)
    assert isinstance(age, NumericStep)
    assert [(r.from_, r.to) for r in age.ranges] == [(0, 17), (18, 64), (65, 100)]
    assert q.languages == ("fr",)
    assert "fr" in age.prompt
    assert validate(q) == {}
