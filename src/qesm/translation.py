"""
Translation spreadsheet export / import.

Export builds a matrix of strings:

    header:  <default language name>, <other language name>, ...
    rows:    one per distinct default-language source string, in step order:
                 - step SMS prompt
                 - step IVR prompt text
                 - comma-joined SMS tokens of each multiple-choice choice
             then the SMS text of the quota-completed and error messages.

Import reads such a matrix back and fills target-language slots that are
still empty. It never overwrites content a human already entered.

IVR choice tokens are not translated: they are keypad digits shared by
every language.
"""

from __future__ import annotations

import csv
import logging
import warnings
from dataclasses import replace
from io import StringIO
from typing import Dict, List, Mapping, Optional, Sequence, Set

from qesm.languages import language_code, language_name
from qesm.model import (
    ERROR_MSG,
    QUOTA_COMPLETED_MSG,
    Choice,
    ChoiceResponses,
    LanguageSelectionStep,
    Mode,
    MultipleChoiceStep,
    PROMPTED_STEPS,
    Prompt,
    Questionnaire,
    Step,
    is_blank,
    prompt_slot_is_empty,
    prompt_text,
    with_prompt_text,
)

logger = logging.getLogger(__name__)

TRANSLATED_SETTINGS = (QUOTA_COMPLETED_MSG, ERROR_MSG)

# source string -> {language code -> translated string}
TranslationLookup = Dict[str, Dict[str, str]]


class TranslationCSVError(ValueError):
    """Raised when a translation spreadsheet cannot be used."""
    pass


def _join_tokens(tokens: Sequence[str]) -> str:
    return ", ".join(tokens)


def _split_tokens(text: str) -> tuple:
    return tuple(token.strip() for token in text.split(",") if token.strip())


def _ordered_languages(questionnaire: Questionnaire) -> List[str]:
    default = questionnaire.default_language
    return [default] + [lang for lang in questionnaire.languages if lang != default]


# =========================================================================
# EXPORT
# =========================================================================


def csv_for_translation(questionnaire: Questionnaire,
                        language_names: Optional[Mapping[str, str]] = None) -> List[List[str]]:
    """
    Build the translation matrix of a questionnaire.

    Args:
        questionnaire: Questionnaire to export
        language_names: Optional code -> display name overrides

    Returns:
        List of rows; the first row holds language display names
    """
    languages = _ordered_languages(questionnaire)
    default = questionnaire.default_language
    rows = [[language_name(lang, language_names) for lang in languages]]
    exported: Set[str] = set()

    def emit(source: Optional[str], cells: List[str]) -> None:
        if is_blank(source) or source in exported:
            return
        exported.add(source)
        rows.append(cells)

    def emit_prompt(prompt: Prompt, mode: Mode) -> None:
        emit(prompt_text(prompt, default, mode), [prompt_text(prompt, lang, mode) or "" for lang in languages])

    for step in questionnaire.steps:
        if isinstance(step, LanguageSelectionStep):
            continue
        if isinstance(step, PROMPTED_STEPS):
            emit_prompt(step.prompt, Mode.SMS)
            emit_prompt(step.prompt, Mode.IVR)
        if isinstance(step, MultipleChoiceStep):
            for choice in step.choices:
                emit(
                    _join_tokens(choice.responses_for(default).sms),
                    [_join_tokens(choice.responses_for(lang).sms) for lang in languages],
                )

    for key in TRANSLATED_SETTINGS:
        if key in questionnaire.settings:
            emit_prompt(questionnaire.settings[key], Mode.SMS)

    return rows


def translation_csv_to_string(rows: List[List[str]]) -> str:
    """Render a translation matrix as CSV text with every cell quoted."""
    buffer = StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue()


# =========================================================================
# IMPORT
# =========================================================================


def parse_translation_csv(csv_content: str) -> List[List[str]]:
    """Parse CSV text into a translation matrix."""
    return [row for row in csv.reader(StringIO(csv_content))]


def parse_translation_csv_file(filepath: str) -> List[List[str]]:
    """
    Read a translation spreadsheet from disk.

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    try:
        with open(filepath, 'r', encoding='utf-8', newline='') as f:
            content = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Translation CSV file not found: {filepath}")
    return parse_translation_csv(content)


def _header_codes(questionnaire: Questionnaire, header: Sequence[str],
                  language_names: Optional[Mapping[str, str]]) -> List[Optional[str]]:
    codes: List[Optional[str]] = []
    for name in header:
        code = language_code(name, language_names)
        if code is None and name.strip() in questionnaire.languages:
            code = name.strip()
        if code is None or code not in questionnaire.languages:
            warnings.warn(f"Ignoring translation column {name!r}: not a language of this questionnaire", UserWarning)
            code = None
        codes.append(code)
    return codes


def build_translation_lookup(questionnaire: Questionnaire, rows: List[List[str]],
                             language_names: Optional[Mapping[str, str]] = None) -> TranslationLookup:
    """
    Map each default-language source string to its non-blank translations.

    Raises:
        TranslationCSVError: Empty matrix or no default-language column
    """
    if not rows or not any(cell.strip() for cell in rows[0]):
        raise TranslationCSVError("Translation CSV is empty")

    codes = _header_codes(questionnaire, rows[0], language_names)
    default = questionnaire.default_language
    if default not in codes:
        raise TranslationCSVError(f"Missing column for default language: {language_name(default, language_names)}")
    source_column = codes.index(default)

    lookup: TranslationLookup = {}
    for row in rows[1:]:
        if source_column >= len(row) or is_blank(row[source_column]):
            continue
        translations = {}
        for column, code in enumerate(codes):
            if code is None or code == default or column >= len(row) or is_blank(row[column]):
                continue
            translations[code] = row[column]
        lookup.setdefault(row[source_column], {}).update(translations)
    return lookup


def _translate_prompt(prompt: Prompt, default: str, mode: Mode, lookup: TranslationLookup) -> Prompt:
    translations = lookup.get(prompt_text(prompt, default, mode) or "")
    if not translations:
        return prompt
    for language, text in translations.items():
        if prompt_slot_is_empty(prompt, language, mode):
            prompt = with_prompt_text(prompt, language, mode, text)
    return prompt


def _translate_choice(choice: Choice, default: str, lookup: TranslationLookup) -> Choice:
    source = choice.responses_for(default)
    translations = lookup.get(_join_tokens(source.sms))
    if not translations:
        return choice

    responses = dict(choice.responses)
    for language, text in translations.items():
        if language in responses:
            if not responses[language].sms:
                responses[language] = replace(responses[language], sms=_split_tokens(text))
        else:
            responses[language] = ChoiceResponses(sms=_split_tokens(text), ivr=source.ivr)
    return replace(choice, responses=responses)


def _translate_step(step: Step, default: str, lookup: TranslationLookup) -> Step:
    if isinstance(step, LanguageSelectionStep) or not isinstance(step, PROMPTED_STEPS):
        return step
    prompt = _translate_prompt(step.prompt, default, Mode.SMS, lookup)
    prompt = _translate_prompt(prompt, default, Mode.IVR, lookup)
    if prompt is not step.prompt:
        step = replace(step, prompt=prompt)
    if isinstance(step, MultipleChoiceStep):
        step = replace(step, choices=tuple(_translate_choice(c, default, lookup) for c in step.choices))
    return step


def apply_translations(questionnaire: Questionnaire, lookup: Mapping[str, Mapping[str, str]]) -> Questionnaire:
    """
    Fill empty translation slots from a source string -> translations lookup.

    Only languages enabled on the questionnaire, other than the default one,
    are written; translations into any other language are dropped.
    """
    default = questionnaire.default_language
    targets = set(questionnaire.languages) - {default}
    lookup = {
        source: {language: text for language, text in translations.items() if language in targets}
        for source, translations in lookup.items()
    }

    steps = tuple(_translate_step(step, default, lookup) for step in questionnaire.steps)
    settings = dict(questionnaire.settings)
    for key in TRANSLATED_SETTINGS:
        if key in settings:
            settings[key] = _translate_prompt(settings[key], default, Mode.SMS, lookup)
    return replace(questionnaire, steps=steps, settings=settings)


def upload_csv_for_translation(questionnaire: Questionnaire, rows: List[List[str]],
                               language_names: Optional[Mapping[str, str]] = None) -> Questionnaire:
    """
    Fill empty translations of a questionnaire from a translation matrix.

    Args:
        questionnaire: Questionnaire to augment
        rows: Matrix as produced by csv_for_translation() / parse_translation_csv()
        language_names: Optional code -> display name overrides

    Returns:
        A new Questionnaire; slots that already had content are untouched

    Raises:
        TranslationCSVError: If the matrix is unusable
    """
    lookup = build_translation_lookup(questionnaire, rows, language_names)
    logger.info("Importing translations for %d source strings", len(lookup))
    return apply_translations(questionnaire, lookup)
