from pathlib import Path

import pytest
import yaml

from keysmith.config.settings import SettingsLoadError, ensure_storage_dirs, load_settings


def _write(tmp_path: Path, data: dict) -> Path:
    path = tmp_path / "keysmith.yaml"
    path.write_text(yaml.safe_dump(data, allow_unicode=False), encoding="utf-8")
    return path


def _shipped() -> dict:
    return yaml.safe_load(Path("config/keysmith.yaml").read_text(encoding="utf-8"))


def test_shipped_settings_load() -> None:
    settings = load_settings(Path("config/keysmith.yaml"))
    assert settings.generator.password_length == 12
    assert settings.generator.account_map_mode == "replace"
    assert settings.entropy.mode in {"seed", "system"}


def test_settings_defaults_for_optional_sections(tmp_path: Path) -> None:
    path = _write(tmp_path, {"version": "v", "storage": {"sqlite": "a.db", "events_dir": "ev"}})
    settings = load_settings(path)
    assert settings.generator.password_length == 12
    assert settings.entropy.mode == "seed"
    assert settings.logging.level == "INFO"


def test_settings_reject_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SettingsLoadError):
        load_settings(tmp_path / "missing.yaml")


def test_settings_reject_invalid_entropy_mode(tmp_path: Path) -> None:
    src = _shipped()
    src["entropy"]["mode"] = "clock"
    with pytest.raises(SettingsLoadError):
        load_settings(_write(tmp_path, src))


def test_settings_reject_invalid_account_map_mode(tmp_path: Path) -> None:
    src = _shipped()
    src["generator"]["account_map_mode"] = "append"
    with pytest.raises(SettingsLoadError):
        load_settings(_write(tmp_path, src))


def test_settings_reject_zero_length(tmp_path: Path) -> None:
    src = _shipped()
    src["generator"]["password_length"] = 0
    with pytest.raises(SettingsLoadError):
        load_settings(_write(tmp_path, src))


def test_settings_reject_missing_storage_key(tmp_path: Path) -> None:
    src = _shipped()
    del src["storage"]["sqlite"]
    with pytest.raises(SettingsLoadError):
        load_settings(_write(tmp_path, src))


def test_settings_reject_non_mapping_root(tmp_path: Path) -> None:
    path = tmp_path / "keysmith.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(SettingsLoadError):
        load_settings(path)


def test_ensure_storage_dirs(tmp_path: Path) -> None:
    settings = load_settings(Path("config/keysmith.yaml"))
    ensure_storage_dirs(tmp_path, settings.storage)
    assert (tmp_path / settings.storage.events_dir).is_dir()
    assert (tmp_path / settings.storage.sqlite).parent.is_dir()


def test_settings_accept_every_owned_mode(tmp_path: Path) -> None:
    from keysmith.core.keystore import ACCOUNT_MAP_MODES
    from keysmith.entropy.factory import ENTROPY_MODES

    for entropy_mode in sorted(ENTROPY_MODES):
        for map_mode in sorted(ACCOUNT_MAP_MODES):
            src = _shipped()
            src["entropy"]["mode"] = entropy_mode
            src["generator"]["account_map_mode"] = map_mode
            settings = load_settings(_write(tmp_path, src))
            assert settings.entropy.mode == entropy_mode
            assert settings.generator.account_map_mode == map_mode


def test_settings_follow_owning_mode_sets(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import keysmith.config.settings as settings_module

    monkeypatch.setattr(settings_module, "ENTROPY_MODES", {"seed"})
    src = _shipped()
    src["entropy"]["mode"] = "system"
    with pytest.raises(SettingsLoadError):
        load_settings(_write(tmp_path, src))
