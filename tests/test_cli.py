"""End-to-end CLI tests with the broker replaced by an in-memory fake."""

import json
import re

import pytest

from fakes import FakeBroker

from sbpush.cli import main, parse_config

UUID4_RE = re.compile(r"correlationId=[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}\)")


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Empty working directory (no `.env`) with a valid payload file."""

    for name in ("SB_CONNECTION_STRING", "SB_ENDPOINT", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    (tmp_path / "payload.json").write_text(json.dumps({"a": 1, "b": [1, 2]}, indent=2))
    return tmp_path


def _exit_code(broker, argv):
    with pytest.raises(SystemExit) as excinfo:
        main(argv, client_factory=broker.client_factory)
    return excinfo.value.code


def test_push_to_queue(workdir, monkeypatch, capsys, broker):
    monkeypatch.setenv("SB_CONNECTION_STRING", "Endpoint=sb://test/")

    main(["-q", "orders", "-p", "payload.json", "--correlation-id", "abc-123"], client_factory=broker.client_factory)

    out = capsys.readouterr().out
    assert out.strip() == "Message sent successfully to queue: orders (correlationId=abc-123)"
    _, message = broker.sent[0]
    assert message.body == b'{"a":1,"b":[1,2]}'


def test_push_generates_correlation_id(workdir, monkeypatch, capsys, broker):
    monkeypatch.setenv("SB_ENDPOINT", "Endpoint=sb://test/")

    main(["--destination", "events", "--type", "topic", "--payload", "payload.json"], client_factory=broker.client_factory)

    assert UUID4_RE.search(capsys.readouterr().out)


def test_cid_alias(workdir):
    config = parse_config(["-Q", "orders", "-P", "payload.json", "--cid", "xyz"])

    assert config.queue == "orders"
    assert config.correlation_id == "xyz"


def test_missing_connection_string_fails_before_file_io(workdir, capsys, broker):
    """No connection string: exit 1, even when the payload file is absent."""

    code = _exit_code(broker, ["-q", "orders", "-p", "does-not-exist.json"])

    assert code == 1
    assert "SB_CONNECTION_STRING" in capsys.readouterr().err
    assert broker.connection_strings == []


def test_invalid_json_is_not_sent(workdir, monkeypatch, capsys, broker):
    monkeypatch.setenv("SB_CONNECTION_STRING", "Endpoint=sb://test/")
    (workdir / "bad.json").write_text("{invalid")

    code = _exit_code(broker, ["-q", "orders", "-p", "bad.json"])

    assert code == 1
    assert "content is not valid JSON" in capsys.readouterr().err
    assert broker.connection_strings == []


def test_queue_and_topic_together(workdir, capsys, broker):
    code = _exit_code(broker, ["--queue", "a", "--topic", "b", "--payload", "payload.json"])

    assert code == 1
    assert "Error: use only one destination: --queue or --topic" in capsys.readouterr().err


def test_missing_payload_flag(workdir, capsys, broker):
    code = _exit_code(broker, ["--queue", "orders"])

    assert code == 1
    assert "missing required parameter: --payload" in capsys.readouterr().err


def test_unknown_flag_exits_one(workdir, capsys, broker):
    code = _exit_code(broker, ["--queue", "orders", "--bogus"])

    assert code == 1
    assert "unrecognized arguments" in capsys.readouterr().err


def test_broker_failure_exits_one(workdir, monkeypatch, capsys):
    monkeypatch.setenv("SB_CONNECTION_STRING", "Endpoint=sb://test/")
    broker = FakeBroker(fail_send=True)

    code = _exit_code(broker, ["-q", "orders", "-p", "payload.json"])

    assert code == 1
    assert "could not send message" in capsys.readouterr().err
    assert broker.events[-2:] == ["sender_closed", "client_closed"]


def test_deeply_nested_payload_exits_one(workdir, monkeypatch, capsys, broker):
    """Overly deep nesting ends with a single error line, not a traceback."""

    monkeypatch.setenv("SB_CONNECTION_STRING", "Endpoint=sb://test/")
    (workdir / "deep.json").write_text("[" * 100000 + "]" * 100000)

    code = _exit_code(broker, ["-q", "orders", "-p", "deep.json"])

    assert code == 1
    assert "Error: content is not valid JSON" in capsys.readouterr().err
    assert broker.connection_strings == []


def test_unknown_log_level_exits_one(workdir, monkeypatch, capsys, broker):
    monkeypatch.setenv("SB_CONNECTION_STRING", "Endpoint=sb://test/")
    monkeypatch.setenv("LOG_LEVEL", "verbose")

    code = _exit_code(broker, ["-q", "orders", "-p", "payload.json"])

    assert code == 1
    assert "Error: invalid settings" in capsys.readouterr().err
