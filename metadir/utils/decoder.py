"""Decode raw YAML or JSON payloads into directory records.

JSON is a subset of YAML, so a single YAML parse handles both formats.
Decoding is strict: unknown keys are rejected and every required key
must be present.
"""

from __future__ import annotations

from datetime import date
from typing import Any

import yaml

from metadir.directory.errors import DecodeError, ValidationError
from metadir.directory.models import Maintainer, Record

REQUIRED_FIELDS = ("version", "source", "company")
OPTIONAL_FIELDS = ("title", "website", "license", "description", "maintainers")
REQUIRED_MAINTAINER_FIELDS = ("name", "email")


def decode_payload(raw: bytes | str) -> Record:
    """Turn a raw request body into a candidate Record.

    Raises DecodeError when the body cannot be parsed into a mapping and
    ValidationError when keys are missing, unknown, or of the wrong type.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"payload is not valid UTF-8: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise DecodeError(f"invalid payload: {e}") from e

    if not isinstance(data, dict):
        raise DecodeError("payload must be a mapping of metadata fields")

    return _record_from_dict(data)


def _record_from_dict(data: dict) -> Record:
    unknown = sorted((k for k in data if k not in REQUIRED_FIELDS + OPTIONAL_FIELDS), key=str)
    if unknown:
        raise ValidationError(str(unknown[0]), "unknown field", data[unknown[0]])

    for name in REQUIRED_FIELDS:
        if name not in data or data[name] is None:
            raise ValidationError(name, "required field is missing")

    return Record(
        source=_string(data, "source"),
        company=_string(data, "company"),
        version=_version(data["version"]),
        title=_string(data, "title"),
        website=_string(data, "website"),
        license=_string(data, "license"),
        description=_string(data, "description"),
        maintainers=_maintainers(data.get("maintainers")),
    )


def _maintainers(value: Any) -> tuple[Maintainer, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ValidationError("maintainers", "must be a list", value)

    maintainers = []
    for i, item in enumerate(value):
        prefix = f"maintainers[{i}]"
        if not isinstance(item, dict):
            raise ValidationError(prefix, "must be a mapping with name and email", item)
        unknown = sorted((k for k in item if k not in REQUIRED_MAINTAINER_FIELDS), key=str)
        if unknown:
            raise ValidationError(f"{prefix}.{unknown[0]}", "unknown field", item[unknown[0]])
        for name in REQUIRED_MAINTAINER_FIELDS:
            if item.get(name) is None:
                raise ValidationError(f"{prefix}.{name}", "required field is missing")
        maintainers.append(
            Maintainer(
                name=_string(item, "name", prefix=prefix),
                email=_string(item, "email", prefix=prefix),
            )
        )
    return tuple(maintainers)


def _string(data: dict, name: str, prefix: str = "") -> str:
    value = data.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        field = f"{prefix}.{name}" if prefix else name
        raise ValidationError(field, f"must be a string, got {type(value).__name__}", value)
    return value


def _version(value: Any) -> str:
    # YAML reads `version: 1.0` as a float and `version: 2024-01-01` as a date
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return str(value)
    raise ValidationError("version", f"must be a scalar, got {type(value).__name__}", value)
