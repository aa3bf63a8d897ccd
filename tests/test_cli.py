# tests/test_cli.py
import json

import pytest

from bearer_auth.cli import main

from conftest import SECRET

NOW = "2024-01-01T12:00:00+00:00"


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("AUTH_SIGNING_KEY", SECRET)
    monkeypatch.delenv("AUTH_KEY_ID", raising=False)
    monkeypatch.delenv("AUTH_TOKEN_TTL_SECONDS", raising=False)
    monkeypatch.delenv("AUTH_ALLOWED_CLOCK_SKEW_SECONDS", raising=False)


def _run(capsys, *argv: str) -> dict:
    main(list(argv))
    return json.loads(capsys.readouterr().out)


def test_issue_and_verify(env, capsys):
    issued = _run(capsys, "--now", NOW, "issue", "alice", "--ttl", "60")
    assert issued["ok"] is True

    verified = _run(capsys, "--now", NOW, "verify", issued["token"])
    assert verified == {
        "ok": True,
        "status": "valid",
        "subject": "alice",
        "expires_at": "2024-01-01T12:01:00+00:00",
    }

    expired = _run(capsys, "--now", "2024-01-01T12:01:00+00:00", "verify", issued["token"])
    assert expired == {"ok": True, "status": "expired"}


def test_verify_garbage(env, capsys):
    assert _run(capsys, "verify", "garbage") == {"ok": True, "status": "malformed"}


def test_hash_password(capsys):
    result = _run(capsys, "hash-password", "wonderland")
    assert result["ok"] is True
    assert result["hash"].startswith("$argon2id$")


def test_missing_signing_key_fails(monkeypatch, capsys):
    monkeypatch.delenv("AUTH_SIGNING_KEY", raising=False)

    with pytest.raises(SystemExit) as exc_info:
        main(["issue", "alice"])

    assert exc_info.value.code == 1
    out = json.loads(capsys.readouterr().out)
    assert out["ok"] is False
    assert "AUTH_SIGNING_KEY" in out["error"]
