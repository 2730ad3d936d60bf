"""
Serialization helpers for questionnaires and operations.

Provides lossless JSON/YAML round-trip via an intermediate dict
representation. Dict keys follow the persistence API's camelCase wire
format ("skipLogic", "defaultLanguage", ...). Channel entries that are None
are omitted rather than written as null.
"""
from __future__ import annotations

import json
from dataclasses import fields
from typing import Any, Dict, List, Mapping, Optional

import yaml

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
    Prompt,
    Questionnaire,
    Range,
    Refusal,
    Step,
    StepType,
)
from qesm import operations as ops


class SerializationError(TypeError):
    """Raised when a payload cannot be turned into a model object."""
    pass


def audio_prompt_to_dict(a: AudioPrompt) -> Dict[str, Any]:
    d = {"text": a.text, "audioSource": a.audio_source.value}
    if a.audio_id is not None:
        d["audioId"] = a.audio_id
    return d


def audio_prompt_from_dict(d: Dict[str, Any]) -> AudioPrompt:
    return AudioPrompt(
        text=d.get("text", ""),
        audio_source=AudioSource(d.get("audioSource", "tts")),
        audio_id=d.get("audioId"),
    )


def prompt_to_dict(p: Prompt) -> Dict[str, Any]:
    out = {}
    for language, entry in p.items():
        d: Dict[str, Any] = {}
        if entry.sms is not None:
            d["sms"] = entry.sms
        if entry.ivr is not None:
            d["ivr"] = audio_prompt_to_dict(entry.ivr)
        if entry.mobileweb is not None:
            d["mobileweb"] = entry.mobileweb
        out[language] = d
    return out


def prompt_from_dict(d: Optional[Dict[str, Any]]) -> Prompt:
    if not d:
        return {}
    return {
        language: LanguagePrompt(
            sms=entry.get("sms"),
            ivr=audio_prompt_from_dict(entry["ivr"]) if entry.get("ivr") is not None else None,
            mobileweb=entry.get("mobileweb"),
        )
        for language, entry in d.items()
    }


def responses_to_dict(responses: Dict[str, ChoiceResponses]) -> Dict[str, Any]:
    out = {}
    for language, r in responses.items():
        d: Dict[str, Any] = {"sms": list(r.sms), "ivr": list(r.ivr)}
        if r.mobileweb is not None:
            d["mobileweb"] = r.mobileweb
        out[language] = d
    return out


def responses_from_dict(d: Optional[Dict[str, Any]]) -> Dict[str, ChoiceResponses]:
    if not d:
        return {}
    return {
        language: ChoiceResponses(
            sms=tuple(r.get("sms", [])),
            ivr=tuple(r.get("ivr", [])),
            mobileweb=r.get("mobileweb"),
        )
        for language, r in d.items()
    }


def choice_to_dict(c: Choice) -> Dict[str, Any]:
    return {"value": c.value, "responses": responses_to_dict(c.responses), "skipLogic": c.skip_logic}


def choice_from_dict(d: Dict[str, Any]) -> Choice:
    return Choice(value=d.get("value", ""), responses=responses_from_dict(d.get("responses")), skip_logic=d.get("skipLogic"))


def range_to_dict(r: Range) -> Dict[str, Any]:
    return {"from": r.from_, "to": r.to, "skipLogic": r.skip_logic}


def range_from_dict(d: Dict[str, Any]) -> Range:
    return Range(from_=d.get("from"), to=d.get("to"), skip_logic=d.get("skipLogic"))


def refusal_to_dict(r: Optional[Refusal]) -> Optional[Dict[str, Any]]:
    if r is None:
        return None
    return {"enabled": r.enabled, "responses": responses_to_dict(r.responses), "skipLogic": r.skip_logic}


def refusal_from_dict(d: Optional[Dict[str, Any]]) -> Optional[Refusal]:
    if d is None:
        return None
    return Refusal(enabled=d.get("enabled", False), responses=responses_from_dict(d.get("responses")), skip_logic=d.get("skipLogic"))


def step_to_dict(s: Step) -> Dict[str, Any]:
    d: Dict[str, Any] = {"id": s.id, "type": s.type.value, "title": s.title}
    if isinstance(s, MultipleChoiceStep):
        d.update(store=s.store, prompt=prompt_to_dict(s.prompt), choices=[choice_to_dict(c) for c in s.choices])
    elif isinstance(s, NumericStep):
        d.update(
            store=s.store,
            prompt=prompt_to_dict(s.prompt),
            minValue=s.min_value,
            maxValue=s.max_value,
            rangesDelimiters=s.ranges_delimiters,
            ranges=[range_to_dict(r) for r in s.ranges],
            refusal=refusal_to_dict(s.refusal),
        )
    elif isinstance(s, ExplanationStep):
        d.update(prompt=prompt_to_dict(s.prompt), skipLogic=s.skip_logic)
    elif isinstance(s, FlagStep):
        d.update(disposition=s.disposition.value, skipLogic=s.skip_logic)
    elif isinstance(s, LanguageSelectionStep):
        d.update(store=s.store, prompt=prompt_to_dict(s.prompt), languageChoices=list(s.language_choices))
    else:
        raise SerializationError(f"Unsupported Step type: {type(s)}")
    return d


def step_from_dict(d: Dict[str, Any]) -> Step:
    try:
        t = StepType(d.get("type"))
    except ValueError:
        raise SerializationError(f"Unsupported step dict type: {d.get('type')}")

    base = {"id": d["id"], "title": d.get("title", "")}
    if t is StepType.MULTIPLE_CHOICE:
        return MultipleChoiceStep(
            **base,
            store=d.get("store", ""),
            prompt=prompt_from_dict(d.get("prompt")),
            choices=tuple(choice_from_dict(c) for c in d.get("choices", [])),
        )
    if t is StepType.NUMERIC:
        return NumericStep(
            **base,
            store=d.get("store", ""),
            prompt=prompt_from_dict(d.get("prompt")),
            min_value=d.get("minValue"),
            max_value=d.get("maxValue"),
            ranges_delimiters=d.get("rangesDelimiters"),
            ranges=tuple(range_from_dict(r) for r in d.get("ranges", [{}])),
            refusal=refusal_from_dict(d.get("refusal")),
        )
    if t is StepType.EXPLANATION:
        return ExplanationStep(**base, prompt=prompt_from_dict(d.get("prompt")), skip_logic=d.get("skipLogic"))
    if t is StepType.FLAG:
        return FlagStep(**base, disposition=Disposition(d.get("disposition", "completed")), skip_logic=d.get("skipLogic"))
    return LanguageSelectionStep(
        **base,
        store=d.get("store", "language"),
        prompt=prompt_from_dict(d.get("prompt")),
        language_choices=tuple(d.get("languageChoices", [None])),
    )


def questionnaire_to_dict(q: Questionnaire) -> Dict[str, Any]:
    return {
        "id": q.id,
        "projectId": q.project_id,
        "name": q.name,
        "modes": [m.value for m in q.modes],
        "languages": list(q.languages),
        "defaultLanguage": q.default_language,
        "activeLanguage": q.active_language,
        "steps": [step_to_dict(s) for s in q.steps],
        "settings": {key: prompt_to_dict(p) for key, p in q.settings.items()},
    }


def questionnaire_from_dict(d: Dict[str, Any]) -> Questionnaire:
    default_language = d.get("defaultLanguage", "en")
    return Questionnaire(
        id=d.get("id"),
        project_id=d.get("projectId"),
        name=d.get("name", ""),
        modes=tuple(Mode(m) for m in d.get("modes", [])),
        languages=tuple(d.get("languages") or [default_language]),
        default_language=default_language,
        active_language=d.get("activeLanguage") or default_language,
        steps=tuple(step_from_dict(s) for s in d.get("steps", [])),
        settings={key: prompt_from_dict(p) for key, p in (d.get("settings") or {}).items()},
    )


def questionnaire_to_json(q: Questionnaire) -> str:
    return json.dumps(questionnaire_to_dict(q), sort_keys=True)


def questionnaire_from_json(s: str) -> Questionnaire:
    d = json.loads(s)
    return questionnaire_from_dict(d)


def questionnaire_to_yaml(q: Questionnaire) -> str:
    return yaml.safe_dump(questionnaire_to_dict(q))


def questionnaire_from_yaml(s: str) -> Questionnaire:
    d = yaml.safe_load(s)
    return questionnaire_from_dict(d)


# =========================================================================
# OPERATIONS
# =========================================================================


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _encode_value(value: Any) -> Any:
    if isinstance(value, Questionnaire):
        return questionnaire_to_dict(value)
    if isinstance(value, AudioPrompt):
        return audio_prompt_to_dict(value)
    if isinstance(value, ops.AutocompleteItem):
        return {
            "id": value.id,
            "text": value.text,
            "translations": [{"language": t.language, "text": t.text} for t in value.translations],
        }
    if isinstance(value, tuple):
        return list(value)
    return value


def _decode_value(name: str, value: Any) -> Any:
    if value is None:
        return None
    if name == "questionnaire":
        return questionnaire_from_dict(value)
    if name == "item":
        return ops.AutocompleteItem(
            id=value["id"],
            text=value["text"],
            translations=tuple(ops.Translation(language=t["language"], text=t["text"]) for t in value.get("translations", [])),
        )
    if name == "value" and isinstance(value, Mapping):
        return audio_prompt_from_dict(value)
    if isinstance(value, list):
        return tuple(value)
    return value


def operation_to_dict(op: ops.Operation) -> Dict[str, Any]:
    d: Dict[str, Any] = {"type": op.type}
    for f in fields(op):
        d[_camel(f.name)] = _encode_value(getattr(op, f.name))
    return d


def operation_from_dict(d: Mapping[str, Any]) -> ops.Operation:
    cls = ops.OPERATION_TYPES.get(d.get("type"))
    if cls is None:
        raise SerializationError(f"Unsupported operation dict type: {d.get('type')}")
    kwargs = {}
    try:
        for f in fields(cls):
            key = _camel(f.name)
            if key in d:
                kwargs[f.name] = _decode_value(f.name, d[key])
        return cls(**kwargs)
    except (KeyError, TypeError, ValueError) as e:
        raise SerializationError(f"Malformed {d.get('type')} operation: {e}")


def operations_to_json(operations: List[ops.Operation]) -> str:
    return json.dumps([operation_to_dict(op) for op in operations])


def operations_from_json(s: str) -> List[ops.Operation]:
    return [operation_from_dict(d) for d in json.loads(s)]
