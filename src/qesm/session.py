"""
Editing session: the single writer of an EditorState.

Runs every operation through reduce() and talks to the persistence
collaborator. After a dispatch that leaves the state dirty and no save
outstanding, the session saves right away (autosave), so at most one save
is ever in flight.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Protocol, Union

from qesm.config import EditorSettings, load_settings
from qesm.log import setup_logging
from qesm.model import Questionnaire
from qesm.operations import Fetch, ImportTranslations, NewQuestionnaire, Receive, Saved, Saving
from qesm.reducer import INITIAL_STATE, EditorState, OperationLike, reduce
from qesm.translation import build_translation_lookup

logger = logging.getLogger(__name__)


class QuestionnaireRepository(Protocol):
    """Persistence collaborator. save() returns the canonical stored copy."""

    def fetch(self, project_id: int, questionnaire_id: int) -> Questionnaire:
        ...

    def save(self, project_id: int, questionnaire: Questionnaire) -> Questionnaire:
        ...


class EditorSession:
    def __init__(self, repository: QuestionnaireRepository, settings: Optional[EditorSettings] = None,
                 autosave: bool = True):
        self.repository = repository
        self.settings = settings or EditorSettings()
        self.autosave = autosave
        self._state = INITIAL_STATE

    @classmethod
    def open(cls, repository: QuestionnaireRepository, settings_path: Optional[Union[str, Path]] = None,
             autosave: bool = True) -> EditorSession:
        """
        Load settings (file, then QESM_* environment), configure logging from
        them and start a session.
        """
        settings = load_settings(settings_path)
        setup_logging(settings.log_level, json_logs=settings.log_json)
        logger.info("Editor session started (default language %s)", settings.default_language)
        return cls(repository, settings, autosave=autosave)

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def questionnaire(self) -> Optional[Questionnaire]:
        return self._state.data

    def dispatch(self, operation: OperationLike) -> EditorState:
        self._state = reduce(self._state, operation)
        if self.autosave and self._state.dirty and not self._state.saving:
            self.save()
        return self._state

    def fetch(self, project_id: int, questionnaire_id: int) -> Optional[Questionnaire]:
        self.dispatch(Fetch(project_id=project_id, id=questionnaire_id))
        self.dispatch(Receive(self.repository.fetch(project_id, questionnaire_id)))
        return self._state.data

    def create(self, project_id: int) -> Optional[Questionnaire]:
        """Start a new questionnaire with the configured language and modes and store it."""
        self.dispatch(NewQuestionnaire(
            project_id=project_id,
            language=self.settings.default_language,
            modes=self.settings.default_modes,
        ))
        self.save()
        return self._state.data

    def save(self) -> None:
        data = self._state.data
        if data is None or self._state.saving:
            return

        self._store(data)

    def import_translations(self, rows: List[List[str]]) -> Optional[Questionnaire]:
        """
        Fill empty translations from a translation matrix.

        The translations become an IMPORT_TRANSLATIONS edit, so they are
        kept in the state (and autosaved) like any other edit. A failed
        save leaves them in place, dirty.

        Raises:
            TranslationCSVError: If the matrix is unusable
        """
        data = self._state.data
        if data is None:
            return None
        lookup = build_translation_lookup(data, rows, self.settings.language_names)
        logger.info("Importing translations for %d source strings", len(lookup))
        self.dispatch(ImportTranslations(lookup))
        return self._state.data

    def _store(self, questionnaire: Questionnaire) -> None:
        self._state = reduce(self._state, Saving())
        try:
            stored = self.repository.save(questionnaire.project_id, questionnaire)
        except Exception:
            logger.exception("Saving questionnaire %s failed", questionnaire.id)
            self._state = reduce(self._state, Saved(failed=True))
            raise
        logger.info("Saved questionnaire %s", stored.id)
        self._state = reduce(self._state, Saved(stored))
