import json
import shutil
from pathlib import Path

import pytest

from keysmith.main import main


def _root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    (tmp_path / "db").mkdir()
    (tmp_path / "config").mkdir()
    shutil.copy(Path("db/schema.sql"), tmp_path / "db/schema.sql")
    shutil.copy(Path("config/keysmith.yaml"), tmp_path / "config/keysmith.yaml")
    monkeypatch.setenv("KEYSMITH_ROOT", str(tmp_path))
    monkeypatch.delenv("KEYSMITH_CONFIG_PATH", raising=False)
    return tmp_path


def test_cli_generate_then_get(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    _root(tmp_path, monkeypatch)
    assert main(["generate", "--account", "bob", "--resource", "email", "--identifier", "bob@example.com"]) == 0
    capsys.readouterr()

    assert main(["get", "--account", "bob", "--resource", "email"]) == 0
    secret = capsys.readouterr().out.rstrip("\n")
    assert len(secret) == 12

    assert main(["get", "--account", "bob", "--resource", "vault"]) == 0
    assert capsys.readouterr().out == "\n"


def test_cli_export(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    _root(tmp_path, monkeypatch)
    main(["generate", "--account", "bob", "--resource", "email", "--identifier", "bob"])
    capsys.readouterr()

    assert main(["export"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["keys"]["bob"]["email"]["owner_identifier"] == "bob"


def test_cli_invalid_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    root = _root(tmp_path, monkeypatch)
    (root / "config/keysmith.yaml").write_text("entropy:\n  mode: clock\n", encoding="utf-8")
    assert main(["get", "--account", "bob", "--resource", "email"]) == 2
