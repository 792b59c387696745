"""Directory data models — records, maintainers, and queries."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Maintainer:
    """A contact responsible for an application."""

    name: str
    email: str


@dataclass(frozen=True)
class Record:
    """Metadata for one application, keyed by its source identifier."""

    # Identity
    source: str
    company: str
    version: str = ""

    # Description
    title: str = ""
    website: str = ""
    license: str = ""
    description: str = ""

    # Contacts
    maintainers: tuple[Maintainer, ...] = ()


@dataclass
class MetadataQuery:
    """Query for reading the directory.

    An empty string means the filter was not supplied. ``source`` takes
    precedence over ``company`` and ``title``.
    """

    source: str = ""
    company: str = ""
    title: str = ""
