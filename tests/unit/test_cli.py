"""Tests for the command-line front end."""

import msgpack
import pytest

from semithreads.cli import build_parser, main
from semithreads.replica import load_slice
from semithreads.substrate import DirectorySubstrate


@pytest.fixture
def store(tmp_path, monkeypatch):
    path = tmp_path / "store"
    monkeypatch.setenv("ST_STORE", str(path))
    for name in ("ST_ACTOR", "ST_DEVICE", "ST_LOGGING", "ST_LOG_FILE", "ST_LOG_JSON"):
        monkeypatch.delenv(name, raising=False)
    return path


def run(capsys, *argv):
    code = main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out.strip(), captured.err.strip()


class TestParser:
    def test_thread_tags(self):
        args = build_parser().parse_args(["thread", "T", "B", "--tag", "a", "--tag", "b"])
        assert args.tags == ["a", "b"]

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestCommands:
    def test_thread_reply_show(self, store, capsys):
        assert run(capsys, "--actor", "alice", "thread", "Hello", "Hi all", "--tag", "intro") == (
            0,
            "alice 0",
            "",
        )
        assert run(capsys, "--actor", "bob", "reply", "alice", "0", "Welcome!")[1] == "bob 0"
        assert run(capsys, "--actor", "carol", "react", "alice", "0", "like")[1] == "ok"

        code, out, _ = run(capsys, "show")
        assert code == 0
        assert "Title: Hello" in out
        assert "Tags: intro (1)" in out
        assert "Body [0]: Welcome!" in out

    def test_actor_from_environment(self, store, capsys, monkeypatch):
        monkeypatch.setenv("ST_ACTOR", "dave")
        assert run(capsys, "thread", "T", "B")[1] == "dave 0"

    def test_device_flag(self, store, capsys):
        assert run(capsys, "--actor", "alice", "--device", "5", "thread", "T", "B")[1] == "alice 5"

    def test_edit_and_redact(self, store, capsys):
        run(capsys, "--actor", "alice", "thread", "T", "draft")
        code, out, _ = run(capsys, "--actor", "alice", "edit", "0", "final")
        assert (code, out) == (0, str(1 << 16))
        assert run(capsys, "--actor", "alice", "redact", "0", "0")[1] == "redacted"

        _, out, _ = run(capsys, "show")
        assert "draft" not in out
        assert "final" in out

    def test_tag_and_unreact(self, store, capsys):
        run(capsys, "--actor", "alice", "thread", "T", "B")
        run(capsys, "--actor", "bob", "tag", "alice", "0", "--add", "rust")
        run(capsys, "--actor", "bob", "react", "alice", "0", "like")
        run(capsys, "--actor", "bob", "react", "alice", "0", "like", "--off")

        bob = load_slice(DirectorySubstrate(store), "bob")
        assert bob.shared[("alice", 0)].tags["rust"].value == 1
        assert bob.shared[("alice", 0)].reactions["like"].value == 2

    def test_show_without_cache(self, store, capsys):
        run(capsys, "--actor", "alice", "thread", "T", "B")
        assert run(capsys, "show", "--no-cache")[0] == 0
        assert DirectorySubstrate(store).read_cache() is None


class TestErrors:
    def test_mutation_needs_actor(self, store, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["thread", "T", "B"])
        assert excinfo.value.code == 2
        assert "needs an actor" in capsys.readouterr().err

    def test_bad_device(self, store, capsys, monkeypatch):
        monkeypatch.setenv("ST_DEVICE", "lots")
        with pytest.raises(SystemExit) as excinfo:
            main(["show"])
        assert excinfo.value.code == 2

    def test_corrupt_store_exits_one(self, store, capsys):
        run(capsys, "--actor", "alice", "thread", "T", "B")
        for blob in (store / "objects").rglob("*"):
            if blob.is_file():
                blob.write_bytes(b"tampered")
        code, _, err = run(capsys, "show")
        assert code == 1
        assert err.startswith("error: ")
        assert "alice" in err

    def test_ill_typed_slice_exits_one(self, store, capsys):
        DirectorySubstrate(store).write("mallory", msgpack.packb({0: {0: {}, "x": {}}}))
        code, _, err = run(capsys, "show")
        assert code == 1
        assert "mallory" in err
