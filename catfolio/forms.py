from __future__ import annotations

from typing import Any, Iterable, Optional

from flask import request
from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict

from .errors import ValidationError


def json_body() -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError({"_body": ["Expected a JSON object."]})
    return payload


def _as_form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def json_formdata(payload: dict) -> MultiDict:
    # nulls are left out so Optional() fields skip them
    data = MultiDict()
    for key, value in payload.items():
        if value is None:
            continue
        data.add(key, _as_form_value(value))
    return data


def validate_json(
    form_cls: type[FlaskForm],
    payload: dict,
    not_null: Iterable[str] = (),
) -> FlaskForm:
    errors: dict[str, list[str]] = {}
    for key in not_null:
        if key not in payload:
            continue
        value = payload[key]
        if value is None or (isinstance(value, str) and not value.strip()):
            errors[key] = ["This field cannot be empty."]

    form = form_cls(formdata=json_formdata(payload), meta={"csrf": False})
    if not form.validate():
        errors.update(form.errors)
    if errors:
        raise ValidationError(errors)
    return form


def clean_text(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None


def submitted(form: FlaskForm, payload: dict, names: Iterable[str]) -> dict:
    out = {}
    for name in names:
        if name not in payload:
            continue
        if payload[name] is None:
            out[name] = None
            continue
        value = form[name].data
        out[name] = clean_text(value) if isinstance(value, str) else value
    return out
