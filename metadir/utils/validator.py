"""Validator — check metadata records before they reach the directory.

Validation never touches the directory indexes. Callers run it first and
only hand a record to the directory once it passes.
"""

from __future__ import annotations

import re

from email_validator import EmailNotValidError
from email_validator import validate_email as check_mailbox
from pydantic import NameEmail

from metadir.directory.errors import ValidationError
from metadir.directory.models import Record

_NAMED_MAILBOX = re.compile(r"^\s*(?P<name>[^<>]*?)\s*<(?P<addr>[^<>]*)>\s*$")


def validate_email(value: str, field: str = "email") -> NameEmail:
    """Check that ``value`` is a mailbox address.

    Accepts a bare ``user@domain`` or the ``Display Name <user@domain>``
    form. Only syntax is checked: local hosts such as ``root@localhost``
    and special-use domains pass. Raises ValidationError naming ``field``
    otherwise.
    """
    name, addr = None, value
    match = _NAMED_MAILBOX.match(value)
    if match:
        name, addr = match.group("name").strip('"') or None, match.group("addr")

    try:
        result = check_mailbox(addr, check_deliverability=False, globally_deliverable=False)
    except EmailNotValidError as e:
        raise ValidationError(field, f"invalid email address {value!r} ({e})", value) from e

    return NameEmail(name or result.local_part, result.normalized)


def validate_record(record: Record) -> Record:
    """Validate a record for storage.

    Requires a non-empty source and company and a named, valid mailbox
    for every maintainer. Returns the record unchanged on success.
    """
    if not record.source:
        raise ValidationError("source", "required field is empty", record.source)
    if not record.company:
        raise ValidationError("company", "required field is empty", record.company)

    for i, maintainer in enumerate(record.maintainers):
        if not maintainer.name:
            raise ValidationError(f"maintainers[{i}].name", "required field is empty", maintainer.name)
        validate_email(maintainer.email, field=f"maintainers[{i}].email")

    return record
