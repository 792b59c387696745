"""End-to-end checks against a running metadir service.

Replays a fixed sequence of publishes and queries using payload files
from a directory, and reports whether each response looks right. The
steps depend on each other and must run in order against a fresh
service.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from metadir.client import MetadataClient

PAYLOAD_FILES = (
    "valid_example_1.yaml",
    "valid_example_2.yaml",
    "invalid_email.yaml",
    "missing_version.yaml",
    "valid_replace_last.yaml",
    "valid_same_company.yaml",
    "valid_different_company.yaml",
)

RANDOM_SOURCE = "https://github.com/random/repo"


@dataclass
class SmokeStep:
    """Outcome of one request in the smoke run."""

    name: str
    passed: bool
    response: Any = None


def _sources(response: Any) -> list[str]:
    if not isinstance(response, list):
        return []
    return [r.get("source", "") for r in response]


def run_smoke(client: MetadataClient, payload_dir: str | Path) -> list[SmokeStep]:
    """Run every smoke step and return their outcomes in order."""
    payload_dir = Path(payload_dir)
    missing = [name for name in PAYLOAD_FILES if not (payload_dir / name).exists()]
    if missing:
        raise FileNotFoundError(f"Missing payload files in {payload_dir}: {', '.join(missing)}")

    steps: list[SmokeStep] = []

    def check(name: str, response: Any, predicate: Callable[[Any], bool]) -> None:
        steps.append(SmokeStep(name=name, passed=bool(predicate(response)), response=response))

    def publish(filename: str) -> Any:
        return client.create((payload_dir / filename).read_bytes())

    check("publish valid payload", publish("valid_example_1.yaml"), lambda r: isinstance(r, dict))
    check(
        "get by source",
        client.query(source=RANDOM_SOURCE),
        lambda r: _sources(r) == [RANDOM_SOURCE],
    )
    check("unknown source is empty", client.query(source="https://not/stored/repo"), lambda r: r == [])
    check("title alone is rejected", client.query(title="Title only shouldn't work"), lambda r: isinstance(r, str))
    check("invalid email is rejected", publish("invalid_email.yaml"), lambda r: isinstance(r, str))
    check("missing version is rejected", publish("missing_version.yaml"), lambda r: isinstance(r, str))

    check("publish second payload", publish("valid_example_2.yaml"), lambda r: isinstance(r, dict))
    check(
        "get by company and title",
        client.query(company="Upbound Inc.", title="Valid App 2"),
        lambda r: _sources(r) == ["https://github.com/upbound/repo"],
    )

    check("replace same source", publish("valid_replace_last.yaml"), lambda r: isinstance(r, dict))
    check(
        "get replaced source",
        client.query(source=RANDOM_SOURCE),
        lambda r: isinstance(r, list) and len(r) == 1 and r[0].get("version") == "0.0.2",
    )

    check("publish same company", publish("valid_same_company.yaml"), lambda r: isinstance(r, dict))
    check(
        "get company list",
        client.query(company="Random Inc."),
        lambda r: sorted(_sources(r)) == sorted([RANDOM_SOURCE, "https://github.com/random/other-repo"]),
    )

    check("move source to new company", publish("valid_different_company.yaml"), lambda r: isinstance(r, dict))
    check(
        "old company no longer lists source",
        client.query(company="Random Inc."),
        lambda r: isinstance(r, list) and RANDOM_SOURCE not in _sources(r),
    )
    check(
        "new company lists source",
        client.query(company="New Random LLC."),
        lambda r: _sources(r) == [RANDOM_SOURCE],
    )
    check(
        "source reflects new company",
        client.query(source=RANDOM_SOURCE),
        lambda r: isinstance(r, list) and len(r) == 1 and r[0].get("company") == "New Random LLC.",
    )

    return steps
