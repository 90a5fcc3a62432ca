from __future__ import annotations

import stat
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

import source.loader as loader
from cache.snapshot import read_snapshot, write_snapshot
from contract.layout import EXTENSION_API_JSON, EXTENSION_API_SNAPSHOT
from source.godot import GodotExecutionFailed, generate_api_json
from source.loader import (
    ApiFileNotFound,
    NoApiSource,
    load_database,
    load_database_from_file,
    store_api_source,
)

_FIXTURE = Path(__file__).parent / "fixtures" / "extension_api_min.json"

_OTHER_API = b'{"classes": [{"name": "FromGodot"}]}'


def _fail_godot(godot_path: str, destination_dir: Path) -> None:
    msg = "godot must not run"
    raise AssertionError(msg)


def _fake_godot(
    data: bytes,
) -> tuple[Callable[[str, Path], None], list[tuple[str, Path]]]:
    calls: list[tuple[str, Path]] = []

    def run(godot_path: str, destination_dir: Path) -> None:
        calls.append((godot_path, destination_dir))
        (destination_dir / EXTENSION_API_JSON).write_bytes(data)

    return run, calls


def _write_executable(path: Path, script: str) -> Path:
    path.write_text(script, encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return path


def test_snapshot_tier_wins(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(loader, "generate_api_json", _fail_godot)
    write_snapshot(tmp_path / EXTENSION_API_SNAPSHOT, _FIXTURE.read_bytes())
    (tmp_path / EXTENSION_API_JSON).write_bytes(_OTHER_API)

    db = load_database(tmp_path)

    assert "Node" in db
    assert "FromGodot" not in db


def test_json_tier_used_when_snapshot_missing(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(loader, "generate_api_json", _fail_godot)
    (tmp_path / EXTENSION_API_JSON).write_bytes(_FIXTURE.read_bytes())

    db = load_database(tmp_path)

    assert "Node2D.position" in db
    assert read_snapshot(tmp_path / EXTENSION_API_SNAPSHOT) == _FIXTURE.read_bytes()


def test_corrupt_snapshot_falls_back_to_json(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(loader, "generate_api_json", _fail_godot)
    snapshot_path = tmp_path / EXTENSION_API_SNAPSHOT
    write_snapshot(snapshot_path, _OTHER_API)
    blob = bytearray(snapshot_path.read_bytes())
    blob[-2] ^= 0xFF
    snapshot_path.write_bytes(bytes(blob))
    (tmp_path / EXTENSION_API_JSON).write_bytes(_FIXTURE.read_bytes())

    db = load_database(tmp_path)

    assert "Node" in db
    assert read_snapshot(snapshot_path) == _FIXTURE.read_bytes()


def test_godot_tier_runs_when_cache_empty(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    run, calls = _fake_godot(_OTHER_API)
    monkeypatch.setattr(loader, "generate_api_json", run)
    cache_dir = tmp_path / "cache"

    db = load_database(cache_dir, godot_path="/opt/godot")

    assert db.keys() == ["FromGodot"]
    assert calls == [("/opt/godot", cache_dir)]
    assert read_snapshot(cache_dir / EXTENSION_API_SNAPSHOT) == _OTHER_API


def test_invalid_json_falls_back_to_godot(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    run, calls = _fake_godot(_OTHER_API)
    monkeypatch.setattr(loader, "generate_api_json", run)
    (tmp_path / EXTENSION_API_JSON).write_bytes(b"{ invalid json")

    db = load_database(tmp_path)

    assert db.keys() == ["FromGodot"]
    assert len(calls) == 1


def test_godot_failure_propagates(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def broken(godot_path: str, destination_dir: Path) -> None:
        msg = "godot exited with status 1"
        raise GodotExecutionFailed(msg)

    monkeypatch.setattr(loader, "generate_api_json", broken)

    with pytest.raises(GodotExecutionFailed):
        load_database(tmp_path)


def test_no_source_when_godot_output_unusable(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    run, _ = _fake_godot(b"not json")
    monkeypatch.setattr(loader, "generate_api_json", run)

    with pytest.raises(NoApiSource) as excinfo:
        load_database(tmp_path)

    assert "snapshot: missing" in str(excinfo.value)


def test_store_api_source_writes_json_and_snapshot(tmp_path: Path) -> None:
    cache_dir = tmp_path / "cache"

    store_api_source(cache_dir, _OTHER_API)

    assert (cache_dir / EXTENSION_API_JSON).read_bytes() == _OTHER_API
    assert read_snapshot(cache_dir / EXTENSION_API_SNAPSHOT) == _OTHER_API


@pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX shell")
def test_generate_api_json_runs_in_destination(tmp_path: Path) -> None:
    godot = _write_executable(
        tmp_path / "godot",
        '#!/bin/sh\n[ "$1" = "--dump-extension-api-with-docs" ] || exit 3\n'
        "printf '{\"classes\": []}' > extension_api.json\n",
    )
    destination = tmp_path / "out"
    destination.mkdir()

    generate_api_json(str(godot), destination)

    assert (destination / EXTENSION_API_JSON).read_bytes() == b'{"classes": []}'


@pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX shell")
def test_generate_api_json_nonzero_exit(tmp_path: Path) -> None:
    godot = _write_executable(
        tmp_path / "godot", "#!/bin/sh\necho 'no display' >&2\nexit 1\n"
    )

    with pytest.raises(GodotExecutionFailed, match="no display"):
        generate_api_json(str(godot), tmp_path)


def test_generate_api_json_missing_executable(tmp_path: Path) -> None:
    with pytest.raises(GodotExecutionFailed):
        generate_api_json(str(tmp_path / "no-such-godot"), tmp_path)


def test_load_database_from_file(tmp_path: Path) -> None:
    db = load_database_from_file(_FIXTURE)

    assert "Node2D.position" in db
    assert not any(tmp_path.iterdir())


def test_load_database_from_missing_file(tmp_path: Path) -> None:
    missing = tmp_path / "extension_api.json"

    with pytest.raises(ApiFileNotFound) as excinfo:
        load_database_from_file(missing)

    assert excinfo.value.path == missing


def test_trailing_data_in_cached_json_is_not_served(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    run, calls = _fake_godot(_OTHER_API)
    monkeypatch.setattr(loader, "generate_api_json", run)
    (tmp_path / EXTENSION_API_JSON).write_bytes(
        b'{"classes": [{"name": "Stale"}]} garbage'
    )

    db = load_database(tmp_path)

    assert db.keys() == ["FromGodot"]
    assert len(calls) == 1
    assert read_snapshot(tmp_path / EXTENSION_API_SNAPSHOT) == _OTHER_API
