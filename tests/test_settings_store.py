import json

import pytest

from config import DEFAULT_SETTINGS
from core.settings_store import SettingsStore


def test_defaults_before_any_write(settings):
    for key, default in DEFAULT_SETTINGS.items():
        assert settings.get(key) == default


@pytest.mark.parametrize("key", sorted(DEFAULT_SETTINGS))
def test_reset_to_default_restores_documented_value(settings, key):
    default = DEFAULT_SETTINGS[key]
    if isinstance(default, bool):
        changed = not default
    elif isinstance(default, int):
        changed = default + 5
    elif key == "captureFileType":
        changed = "jpg"
    elif key == "recordingFileType":
        changed = "mp4"
    else:
        changed = default + "-changed"

    settings.set(key, changed)
    assert settings.get(key) == changed

    settings.reset_to_default(key)
    assert settings.get(key) == default


def test_values_persist_across_instances(tmp_path):
    path = str(tmp_path / "settings.json")
    first = SettingsStore(path=path)
    first.set("toastTimeout", 7)
    first.set("imgurClientId", "abc123")

    second = SettingsStore(path=path)
    assert second.get("toastTimeout") == 7
    assert second.get("imgurClientId") == "abc123"


def test_reset_is_persisted(tmp_path):
    path = str(tmp_path / "settings.json")
    store = SettingsStore(path=path)
    store.set("saveToDisk", False)
    store.reset_to_default("saveToDisk")

    assert SettingsStore(path=path).get("saveToDisk") is True


def test_unknown_key_raises(settings):
    with pytest.raises(KeyError):
        settings.get("nope")
    with pytest.raises(KeyError):
        settings.set("nope", 1)
    with pytest.raises(KeyError):
        settings.reset_to_default("nope")


@pytest.mark.parametrize(
    "key, value",
    [
        ("toastTimeout", -1),
        ("toastTimeout", 1.5),
        ("toastTimeout", True),
        ("saveToDisk", "yes"),
        ("captureFileType", "exe"),
        ("recordingFileType", "avi"),
        ("capturePath", 3),
    ],
)
def test_invalid_values_are_rejected(settings, key, value):
    with pytest.raises(ValueError):
        settings.set(key, value)
    assert settings.get(key) == DEFAULT_SETTINGS[key]


def test_corrupt_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    store = SettingsStore(path=str(path))
    assert store.get("toastTimeout") == DEFAULT_SETTINGS["toastTimeout"]


def test_invalid_stored_value_is_ignored(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"toastTimeout": "soon", "saveToDisk": False, "legacy": 1}), encoding="utf-8")

    store = SettingsStore(path=str(path))
    assert store.get("toastTimeout") == DEFAULT_SETTINGS["toastTimeout"]
    assert store.get("saveToDisk") is False


def test_reset_all(settings):
    settings.set("toastTimeout", 9)
    settings.set("uploadMedia", True)
    settings.reset_all()
    assert settings.as_dict() == DEFAULT_SETTINGS


def test_export_then_import_into_fresh_store(settings, tmp_path):
    settings.set("captureFileType", "jpg")
    settings.set("recordAudio", False)
    exported = tmp_path / "export.json"
    settings.export_to(str(exported))

    data = json.loads(exported.read_text(encoding="utf-8"))
    assert set(data) == set(DEFAULT_SETTINGS)

    other = SettingsStore(path=str(tmp_path / "other.json"))
    applied = other.import_from(str(exported))
    assert applied == len(DEFAULT_SETTINGS)
    assert other.get("captureFileType") == "jpg"
    assert other.get("recordAudio") is False


def test_import_skips_unknown_and_invalid(settings, tmp_path):
    source = tmp_path / "import.json"
    source.write_text(json.dumps({"toastTimeout": 4, "captureFileType": "exe", "extra": True}), encoding="utf-8")

    assert settings.import_from(str(source)) == 1
    assert settings.get("toastTimeout") == 4
    assert settings.get("captureFileType") == "png"


def test_get_path_expands_user(settings):
    settings.set("capturePath", "~/shots")
    assert not settings.get_path("capturePath").startswith("~")
