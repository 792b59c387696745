"""Tests for the in-memory metadata directory."""

import threading

import pytest

from metadir.directory.errors import InvalidQueryError, ValidationError
from metadir.directory.memory_directory import MetadataDirectory
from metadir.directory.models import Maintainer, MetadataQuery, Record


def _record(source: str = "https://github.com/acme/app", company: str = "Acme", **overrides) -> Record:
    return Record(
        source=source,
        company=company,
        version=overrides.get("version", "1.0.0"),
        title=overrides.get("title", "App"),
        maintainers=overrides.get(
            "maintainers", (Maintainer(name="Jane Doe", email="jane@acme.io"),)
        ),
    )


def _sources(records) -> set[str]:
    return {r.source for r in records}


def test_upsert_and_get_by_source():
    directory = MetadataDirectory()
    record = _record()

    stored = directory.upsert(record)
    assert stored == record

    result = directory.query(MetadataQuery(source=record.source))
    assert result == [record]


def test_missing_source_returns_empty():
    directory = MetadataDirectory()
    directory.upsert(_record())

    assert directory.query(MetadataQuery(source="https://not/stored/repo")) == []
    assert directory.get("https://not/stored/repo") is None


def test_source_takes_precedence_over_company():
    directory = MetadataDirectory()
    record = _record(company="Acme")
    directory.upsert(record)

    result = directory.query(MetadataQuery(source=record.source, company="Globex", title="nope"))
    assert result == [record]


def test_title_only_query_is_invalid():
    directory = MetadataDirectory()
    with pytest.raises(InvalidQueryError):
        directory.query(MetadataQuery(title="X"))


def test_empty_query_is_invalid():
    directory = MetadataDirectory()
    with pytest.raises(InvalidQueryError):
        directory.query(MetadataQuery())


def test_query_by_company_returns_all_members():
    directory = MetadataDirectory()
    directory.upsert(_record("s1", "Acme"))
    directory.upsert(_record("s2", "Acme"))
    directory.upsert(_record("s3", "Globex"))

    assert _sources(directory.query(MetadataQuery(company="Acme"))) == {"s1", "s2"}
    assert _sources(directory.query(MetadataQuery(company="Globex"))) == {"s3"}
    assert directory.query(MetadataQuery(company="Initech")) == []


def test_title_narrows_company_query():
    directory = MetadataDirectory()
    directory.upsert(_record("s1", "Acme", title="Rocket"))
    directory.upsert(_record("s2", "Acme", title="Anvil"))

    narrowed = directory.query(MetadataQuery(company="Acme", title="Rocket"))
    assert _sources(narrowed) == {"s1"}
    assert _sources(narrowed) <= _sources(directory.query(MetadataQuery(company="Acme")))
    assert directory.query(MetadataQuery(company="Acme", title="Missing")) == []


def test_company_change_moves_source():
    directory = MetadataDirectory()
    directory.upsert(_record("s1", "Acme"))
    moved = directory.upsert(_record("s1", "Globex", version="2.0.0"))

    assert directory.query(MetadataQuery(company="Acme")) == []
    assert directory.query(MetadataQuery(company="Globex")) == [moved]
    assert directory.query(MetadataQuery(source="s1")) == [moved]


def test_company_change_keeps_other_members():
    directory = MetadataDirectory()
    directory.upsert(_record("s1", "Acme"))
    directory.upsert(_record("s2", "Acme"))
    directory.upsert(_record("s1", "Globex"))

    assert _sources(directory.query(MetadataQuery(company="Acme"))) == {"s2"}
    assert _sources(directory.query(MetadataQuery(company="Globex"))) == {"s1"}


def test_emptied_company_is_pruned():
    directory = MetadataDirectory()
    directory.upsert(_record("s1", "Acme"))
    directory.upsert(_record("s1", "Globex"))

    assert directory.companies() == ["Globex"]


def test_replace_same_company_has_no_duplicates():
    directory = MetadataDirectory()
    directory.upsert(_record("s1", "Acme", version="1.0.0"))
    latest = directory.upsert(_record("s1", "Acme", version="1.0.1"))

    result = directory.query(MetadataQuery(company="Acme"))
    assert result == [latest]
    assert len(directory) == 1


def test_invalid_email_is_not_stored():
    directory = MetadataDirectory()
    bad = _record(maintainers=(Maintainer(name="Jane", email="janeacme.io"),))

    with pytest.raises(ValidationError) as excinfo:
        directory.upsert(bad)

    assert excinfo.value.field == "maintainers[0].email"
    assert directory.query(MetadataQuery(source=bad.source)) == []
    assert directory.companies() == []


def test_invalid_replacement_keeps_previous_record():
    directory = MetadataDirectory()
    original = directory.upsert(_record("s1", "Acme"))

    with pytest.raises(ValidationError):
        directory.upsert(_record("s1", "Globex", maintainers=(Maintainer(name="X", email="nope"),)))

    assert directory.get("s1") == original
    assert directory.companies() == ["Acme"]


def test_empty_company_is_rejected():
    directory = MetadataDirectory()
    with pytest.raises(ValidationError) as excinfo:
        directory.upsert(_record("s1", ""))
    assert excinfo.value.field == "company"
    assert "s1" not in directory


def test_empty_source_is_rejected():
    directory = MetadataDirectory()
    with pytest.raises(ValidationError) as excinfo:
        directory.upsert(_record("", "Acme"))
    assert excinfo.value.field == "source"
    assert len(directory) == 0


def test_acme_to_globex_scenario():
    directory = MetadataDirectory()
    directory.upsert(Record(source="s1", company="Acme"))
    directory.upsert(Record(source="s1", company="Globex"))

    assert directory.query(MetadataQuery(company="Acme")) == []
    result = directory.query(MetadataQuery(company="Globex"))
    assert len(result) == 1
    assert result[0].source == "s1"
    assert result[0].company == "Globex"


def test_company_index_matches_records_after_many_upserts():
    directory = MetadataDirectory()
    companies = ["Acme", "Globex", "Initech"]
    for i in range(30):
        directory.upsert(_record(f"s{i % 7}", companies[i % len(companies)]))

    for source in [f"s{i}" for i in range(7)]:
        owner = directory.get(source).company
        for company in companies:
            members = _sources(directory.query(MetadataQuery(company=company)))
            assert (source in members) == (company == owner)


def test_concurrent_company_moves_keep_indexes_consistent():
    directory = MetadataDirectory()
    sources = [f"s{i}" for i in range(5)]
    for source in sources:
        directory.upsert(_record(source, "Acme"))

    stop = threading.Event()
    violations = []

    def writer(offset: int):
        companies = ["Acme", "Globex"]
        for i in range(300):
            for source in sources:
                directory.upsert(_record(source, companies[(i + offset) % 2]))

    def reader():
        while not stop.is_set():
            with directory._lock:
                for source in sources:
                    homes = [c for c, members in directory._by_company.items() if source in members]
                    if homes != [directory._by_source[source].company]:
                        violations.append((source, homes))

    readers = [threading.Thread(target=reader) for _ in range(2)]
    writers = [threading.Thread(target=writer, args=(n,)) for n in range(3)]
    for t in readers + writers:
        t.start()
    for t in writers:
        t.join()
    stop.set()
    for t in readers:
        t.join()

    assert violations == []
    assert len(directory) == len(sources)


def test_concurrent_queries_see_whole_records():
    directory = MetadataDirectory()
    sources = [f"s{i}" for i in range(5)]
    for source in sources:
        directory.upsert(_record(source, "Acme"))

    stop = threading.Event()
    violations = []

    def writer(offset: int):
        companies = ["Acme", "Globex"]
        for i in range(300):
            for source in sources:
                directory.upsert(_record(source, companies[(i + offset) % 2]))

    def reader():
        while not stop.is_set():
            for company in ("Acme", "Globex"):
                found = [r.source for r in directory.query(MetadataQuery(company=company))]
                if len(found) != len(set(found)):
                    violations.append(("duplicate", company, found))
                for record in directory.query(MetadataQuery(company=company)):
                    if record.company != company:
                        violations.append(("stale", company, record.source))
            for source in sources:
                if len(directory.query(MetadataQuery(source=source))) != 1:
                    violations.append(("missing", source))

    readers = [threading.Thread(target=reader) for _ in range(2)]
    writers = [threading.Thread(target=writer, args=(n,)) for n in range(3)]
    for t in readers + writers:
        t.start()
    for t in writers:
        t.join()
    stop.set()
    for t in readers:
        t.join()

    assert violations == []
    owners = {s: directory.get(s).company for s in sources}
    acme = _sources(directory.query(MetadataQuery(company="Acme")))
    globex = _sources(directory.query(MetadataQuery(company="Globex")))
    assert acme | globex == set(sources)
    assert acme & globex == set()
    assert acme == {s for s, c in owners.items() if c == "Acme"}
