from datetime import datetime, timedelta, timezone

import pytest

from taskops.models import Task
from taskops.tasks_repo import TaskStore, TaskStoreError

from fakes import NOW, make_task


@pytest.fixture()
def seeded(sqlite_store):
    sqlite_store.insert_tasks([
        make_task("a", "Oldest", client="Harper", created_at=NOW - timedelta(days=3)),
        make_task("b", "Newest", 'Say "hi"', assistant="Ben", foh=True, created_at=NOW),
        make_task("c", "Middle", boh=True, created_at=NOW - timedelta(days=1)),
    ])
    return sqlite_store


def test_fetch_all_is_newest_first(seeded):
    tasks = seeded.fetch_all()
    assert [t.id for t in tasks] == ["b", "c", "a"]
    newest = tasks[0]
    assert newest.task_description == 'Say "hi"'
    assert newest.assistant == "Ben"
    assert newest.client == ""
    assert newest.foh is True and newest.boh is False
    assert newest.created_at == NOW


def test_update_fields(seeded):
    assert seeded.update_fields("a", {"boh": True}) == 1
    a = next(t for t in seeded.fetch_all() if t.id == "a")
    assert a.boh is True and a.foh is False


def test_update_missing_id_touches_nothing(seeded):
    assert seeded.update_fields("zzz", {"boh": True}) == 0


def test_update_fields_bulk(seeded):
    assert seeded.update_fields_bulk(["a", "b"], {"boh": True}) == 2
    flags = {t.id: t.boh for t in seeded.fetch_all()}
    assert flags == {"a": True, "b": True, "c": True}


def test_bulk_with_no_ids_is_a_noop(seeded):
    assert seeded.update_fields_bulk([], {"boh": True}) == 0
    assert seeded.delete_bulk([]) == 0
    assert len(seeded.fetch_all()) == 3


def test_delete_bulk(seeded):
    assert seeded.delete_bulk(["a", "c"]) == 2
    assert [t.id for t in seeded.fetch_all()] == ["b"]


def test_only_task_fields_can_be_patched(seeded):
    with pytest.raises(ValueError):
        seeded.update_fields("a", {"created_at": NOW})
    with pytest.raises(ValueError):
        seeded.update_fields_bulk(["a"], {})


def test_delete_all(seeded):
    assert seeded.delete_all() == 3
    assert seeded.fetch_all() == []


def test_missing_table_raises_store_error(tmp_path):
    store = TaskStore(f"sqlite:///{(tmp_path / 'empty.db').as_posix()}")
    with pytest.raises(TaskStoreError):
        store.fetch_all()


def test_task_from_dict_normalises_values():
    t = Task.from_dict({
        "id": 7,
        "record_id": None,
        "task_name": None,
        "task_description": "desc",
        "client": "Harper",
        "assistant": None,
        "boh": 1,
        "foh": None,
        "created_at": "2024-05-15T14:00:00+02:00",
    })
    assert t.id == "7"
    assert t.record_id == ""
    assert t.task_name == ""
    assert t.assistant == ""
    assert (t.boh, t.foh) == (True, False)
    assert t.created_at == datetime(2024, 5, 15, 12, 0)


def test_task_from_dict_handles_bad_and_aware_timestamps():
    assert Task.from_dict({"id": "x", "created_at": "not a date"}).created_at is None
    aware = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)
    assert Task.from_dict({"id": "x", "created_at": aware}).created_at == datetime(2024, 5, 15, 12, 0)


@pytest.mark.parametrize("raw", ["2024/05/15 12:00", "15 May 2024 14:00 +0200", "2024-05-15T12:00:00Z"])
def test_task_from_dict_parses_non_iso_timestamps(raw):
    assert Task.from_dict({"id": "x", "created_at": raw}).created_at == datetime(2024, 5, 15, 12, 0)
