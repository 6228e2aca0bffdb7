"""Store codec — JSON round trip, strict decoding, atomic saves.

Tests cover:
    - Fresh start on missing / empty data file
    - load(save(S)) == S including order, statuses and id counters
    - Overwrite semantics (no merging with the previous file)
    - StoreCorrupt on malformed JSON (including parser limits) and on every
      kind of shape violation; whitespace is not a fresh start
    - StoreIOError on unreadable / unwritable locations
    - No temp files left behind; a failed cleanup still reports StoreIOError
"""

import json
from pathlib import Path

import pytest

from project_tracker.config import data_file
from project_tracker.errors import StoreCorrupt, StoreIOError
from project_tracker.models import Store, TaskStatus
from project_tracker.repository import Repository
from project_tracker.storage import Storage, decode, encode, load, save


def _valid():
    return {
        "version": 1,
        "next_project_id": 2,
        "projects": [
            {
                "id": 1,
                "name": "Website",
                "next_task_id": 3,
                "tasks": [
                    {"id": 1, "description": "Design mockups", "status": "done"},
                    {"id": 2, "description": "Write copy", "status": "pending"},
                ],
            }
        ],
    }


# ─── Fresh start ─────────────────────────────────────────────────

def test_missing_file_loads_empty_store(data_dir):
    assert load(data_dir) == Store()
    assert not data_dir.exists()


def test_empty_file_loads_empty_store(data_dir):
    data_dir.mkdir()
    data_file(data_dir).write_text("")
    assert load(data_dir) == Store()


# ─── Round trip ──────────────────────────────────────────────────

def test_round_trip_preserves_everything(data_dir, website):
    garden = website.add_project("Garden")
    website.add_task(garden, "Plant tomatoes")
    website.add_task(garden, "Water")
    website.remove_task(garden, 1)
    website.set_task_status(1, 2, TaskStatus.DONE)
    website.set_task_status(garden, 2, TaskStatus.IN_PROGRESS)

    save(website.store, data_dir)
    loaded = load(data_dir)

    assert loaded == website.store
    assert list(loaded.projects) == [1, garden]
    assert loaded.projects[garden].next_task_id == 3


def test_round_trip_keeps_unicode(data_dir, repo):
    repo.add_project("Café ☕")
    save(repo.store, data_dir)
    assert "Café ☕" in data_file(data_dir).read_text(encoding="utf-8")
    assert load(data_dir) == repo.store


def test_counters_survive_reload(data_dir, website):
    website.remove_project(1)
    save(website.store, data_dir)
    reloaded = Repository(load(data_dir))
    assert reloaded.add_project("Website") == 2


def test_save_overwrites_previous_content(data_dir, website):
    save(website.store, data_dir)
    website.remove_project(1)
    save(website.store, data_dir)
    assert load(data_dir).projects == {}


def test_save_creates_directory_and_leaves_no_temp_files(tmp_path, website):
    target = tmp_path / "a" / "b"
    save(website.store, target)
    assert [p.name for p in target.iterdir()] == ["data.json"]


def test_encode_shape(website):
    data = encode(website.store)
    assert data["version"] == 1
    assert data["projects"][0]["tasks"][1] == {"id": 2, "description": "Write copy", "status": "pending"}


# ─── Corruption ──────────────────────────────────────────────────

def test_invalid_json_is_corrupt(data_dir):
    data_dir.mkdir()
    data_file(data_dir).write_text("{not json")
    with pytest.raises(StoreCorrupt) as exc:
        load(data_dir)
    assert exc.value.path == data_file(data_dir)


def test_invalid_utf8_is_corrupt(data_dir):
    data_dir.mkdir()
    data_file(data_dir).write_bytes(b"\xff\xfe\x00")
    with pytest.raises(StoreCorrupt):
        load(data_dir)


def test_decode_accepts_valid_document():
    store = decode(_valid())
    assert store.projects[1].tasks[0].status is TaskStatus.DONE


def _mutations():
    def drop(*path):
        def apply(d):
            target = d
            for key in path[:-1]:
                target = target[key]
            del target[path[-1]]
        return apply

    def put(value, *path):
        def apply(d):
            target = d
            for key in path[:-1]:
                target = target[key]
            target[path[-1]] = value
        return apply

    return {
        "unrelated object": lambda d: d.clear() or d.update({"x": []}),
        "missing version": drop("version"),
        "wrong version": put(2, "version"),
        "projects not a list": put({}, "projects"),
        "missing next_project_id": drop("next_project_id"),
        "project id as string": put("1", "projects", 0, "id"),
        "project id as bool": put(True, "projects", 0, "id"),
        "zero project id": put(0, "projects", 0, "id"),
        "blank project name": put("  ", "projects", 0, "name"),
        "project counter too low": put(1, "next_project_id"),
        "task counter too low": put(2, "projects", 0, "next_task_id"),
        "missing tasks": drop("projects", 0, "tasks"),
        "task not an object": put("oops", "projects", 0, "tasks", 0),
        "unknown status": put("finished", "projects", 0, "tasks", 0, "status"),
        "alias status": put("d", "projects", 0, "tasks", 0, "status"),
        "completed bool instead of status": drop("projects", 0, "tasks", 0, "status"),
        "empty description": put("", "projects", 0, "tasks", 0, "description"),
        "duplicate task id": put(1, "projects", 0, "tasks", 1, "id"),
        "description not text": put(5, "projects", 0, "tasks", 0, "description"),
    }


@pytest.mark.parametrize("name", sorted(_mutations()))
def test_decode_rejects_malformed(name):
    data = _valid()
    _mutations()[name](data)
    with pytest.raises(StoreCorrupt):
        decode(data)


def test_decode_rejects_duplicate_projects():
    data = _valid()
    data["next_project_id"] = 3
    twin = json.loads(json.dumps(data["projects"][0]))
    data["projects"].append(twin)
    with pytest.raises(StoreCorrupt, match="duplicate project id"):
        decode(data)
    twin["id"] = 2
    with pytest.raises(StoreCorrupt, match="duplicate project name"):
        decode(data)


def test_decode_rejects_top_level_list():
    with pytest.raises(StoreCorrupt):
        decode([])


def test_corrupt_file_is_left_in_place(data_dir):
    data_dir.mkdir()
    data_file(data_dir).write_text("[]")
    with pytest.raises(StoreCorrupt):
        load(data_dir)
    assert data_file(data_dir).read_text() == "[]"


# ─── I/O failures ────────────────────────────────────────────────

def test_unreadable_location_raises_io_error(data_dir):
    data_file(data_dir).mkdir(parents=True)  # a directory where the file should be
    with pytest.raises(StoreIOError) as exc:
        Storage.load(data_dir)
    assert exc.value.operation == "read"


def test_unwritable_location_raises_io_error(tmp_path, website):
    blocker = tmp_path / "file"
    blocker.write_text("")
    with pytest.raises(StoreIOError) as exc:
        Storage.save(website.store, blocker / "sub")
    assert exc.value.code == "STORE_IO"
    assert exc.value.operation == "write"


def test_failed_replace_keeps_old_file_and_cleans_temp(data_dir, website, monkeypatch):
    save(website.store, data_dir)
    original = data_file(data_dir).read_text()

    def boom(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("project_tracker.storage.os.replace", boom)
    website.remove_project(1)
    with pytest.raises(StoreIOError):
        save(website.store, data_dir)
    assert data_file(data_dir).read_text() == original
    assert [p.name for p in data_dir.iterdir()] == ["data.json"]


# ─── Parser limits and edge cases ────────────────────────────────

@pytest.mark.parametrize("content", [
    '{"version": ' + "9" * 5000 + "}",
    "[" * 100000 + "]" * 100000,
], ids=["oversized integer", "deep nesting"])
def test_unparsable_content_is_corrupt(data_dir, content):
    data_dir.mkdir()
    data_file(data_dir).write_text(content)
    with pytest.raises(StoreCorrupt):
        load(data_dir)


def test_whitespace_only_file_is_corrupt(data_dir):
    data_dir.mkdir()
    data_file(data_dir).write_text("  \n")
    with pytest.raises(StoreCorrupt):
        load(data_dir)


def test_failed_cleanup_still_raises_io_error(data_dir, website, monkeypatch):
    def boom(*args, **kwargs):
        raise OSError("read-only filesystem")

    monkeypatch.setattr("project_tracker.storage.os.replace", boom)
    monkeypatch.setattr(Path, "unlink", boom)
    with pytest.raises(StoreIOError) as exc:
        save(website.store, data_dir)
    assert exc.value.operation == "write"
