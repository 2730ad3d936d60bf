import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from qesm.examples import build_example_questionnaire  # noqa: E402
from qesm.reducer import EditorState  # noqa: E402


@pytest.fixture
def questionnaire():
    return build_example_questionnaire()


@pytest.fixture
def state(questionnaire):
    """A loaded, clean editor state holding the example questionnaire."""
    return EditorState(data=questionnaire)
