import json

import pytest

from scaffold.build.artifacts import ArtifactStore
from scaffold.errors import ArtifactError, ArtifactNotFoundError


@pytest.fixture
def empty_store(tmp_path):
    return ArtifactStore(tmp_path / "build")


def test_save_writes_hex_field(empty_store):
    path = empty_store.save("main", b"\x60\x80")
    assert path.name == "main.compiled.json"
    assert json.loads(path.read_text()) == {"hex": "6080"}
    assert empty_store.load("main") == b"\x60\x80"


def test_save_replaces_existing(empty_store):
    empty_store.save("main", b"\x01")
    empty_store.save("main", b"\x02")
    assert empty_store.load("main") == b"\x02"
    assert list(empty_store.build_dir.iterdir()) == [empty_store.path_for("main")]


def test_save_rejects_empty_code(empty_store):
    with pytest.raises(ArtifactError):
        empty_store.save("main", b"")
    assert not empty_store.exists("main")


def test_load_missing(empty_store):
    with pytest.raises(ArtifactNotFoundError, match="did you build"):
        empty_store.load("main")


def test_load_accepts_0x_prefix(empty_store):
    empty_store.build_dir.mkdir(parents=True)
    empty_store.path_for("main").write_text('{"hex": "0x6080"}')
    assert empty_store.load("main") == b"\x60\x80"


@pytest.mark.parametrize("content", ["not json", '{"code": "6080"}', '{"hex": ""}', '{"hex": "zz"}', "[]"])
def test_load_malformed(empty_store, content):
    empty_store.build_dir.mkdir(parents=True)
    empty_store.path_for("main").write_text(content)
    with pytest.raises(ArtifactError):
        empty_store.load("main")


def test_delete(empty_store):
    assert empty_store.delete("main") is False
    empty_store.save("main", b"\x01")
    assert empty_store.delete("main") is True
    assert not empty_store.exists("main")
