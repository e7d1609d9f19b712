from __future__ import annotations

from pathlib import Path

import pytest

from packmanifest.errors import ManifestError, MissingEntryError
from packmanifest.manifest import Manifest
from packmanifest.types import PackType


def make_manifest(make_settings, fake_compiler, fake_dev_server, **env):
    env.setdefault("compile", "0")
    return Manifest(make_settings(**env), fake_compiler, fake_dev_server)


def test_lookup_full_name(make_settings, write_manifest, fake_compiler, fake_dev_server):
    write_manifest({"calendar.js": "/packs/calendar-HASH.js"})
    m = make_manifest(make_settings, fake_compiler, fake_dev_server)
    assert m.lookup("calendar.js") == "/packs/calendar-HASH.js"


def test_lookup_appends_extension_for_type(make_settings, write_manifest, fake_compiler, fake_dev_server):
    write_manifest({"calendar.css": "/packs/calendar-HASH.css"})
    m = make_manifest(make_settings, fake_compiler, fake_dev_server)
    assert m.lookup("calendar", PackType.STYLESHEET) == "/packs/calendar-HASH.css"
    assert m.lookup("calendar", "stylesheet") == "/packs/calendar-HASH.css"


def test_lookup_other_type_uses_raw_extension(make_settings, write_manifest, fake_compiler, fake_dev_server):
    write_manifest({"logo.svg": "/packs/logo-HASH.svg"})
    m = make_manifest(make_settings, fake_compiler, fake_dev_server)
    assert m.lookup("logo", "svg") == "/packs/logo-HASH.svg"


def test_lookup_entrypoint_strips_extension(make_settings, write_manifest, fake_compiler, fake_dev_server):
    write_manifest({"entrypoints": {"calendar": {"assets": {"js": "/packs/calendar-HASH.js"}}}})
    m = make_manifest(make_settings, fake_compiler, fake_dev_server)
    assert m.lookup_entrypoint("calendar.js", PackType.JAVASCRIPT) == "/packs/calendar-HASH.js"
    assert m.lookup_entrypoint("calendar", "javascript") == "/packs/calendar-HASH.js"


def test_lookup_entrypoint_returns_chunk_list(make_settings, write_manifest, fake_compiler, fake_dev_server):
    chunks = ["/packs/vendors-HASH.chunk.js", "/packs/calendar-HASH.js"]
    write_manifest({"entrypoints": {"calendar": {"assets": {"js": chunks}}}})
    m = make_manifest(make_settings, fake_compiler, fake_dev_server)
    assert m.lookup_entrypoint_or_fail("calendar", "javascript") == chunks


@pytest.mark.parametrize(
    "data",
    [
        {},
        {"entrypoints": {}},
        {"entrypoints": {"calendar": {}}},
        {"entrypoints": {"calendar": {"assets": {"css": "/packs/calendar.css"}}}},
        # value where a mapping was expected
        {"entrypoints": {"calendar": "/packs/calendar.js"}},
        {"entrypoints": {"calendar": {"assets": {"js": []}}}},
    ],
)
def test_lookup_entrypoint_soft_miss(data, make_settings, write_manifest, fake_compiler, fake_dev_server):
    write_manifest(data)
    m = make_manifest(make_settings, fake_compiler, fake_dev_server)
    assert m.lookup_entrypoint("calendar", "javascript") is None
    with pytest.raises(MissingEntryError):
        m.lookup_entrypoint_or_fail("calendar", "javascript")


def test_missing_entry_message(make_settings, write_manifest, manifest_path, fake_compiler, fake_dev_server):
    write_manifest({"application.js": "/packs/application-HASH.js"})
    m = make_manifest(make_settings, fake_compiler, fake_dev_server)
    assert m.lookup("calendar.js") is None
    with pytest.raises(MissingEntryError) as exc:
        m.lookup_or_fail("calendar", "javascript")
    msg = str(exc.value)
    assert "Can't find calendar.js in" in msg
    assert str(manifest_path) in msg
    assert "Your manifest contains:" in msg
    assert '"application.js": "/packs/application-HASH.js"' in msg
    assert exc.value.name == "calendar.js"
    assert isinstance(exc.value, LookupError)


def test_missing_manifest_file_is_empty(make_settings, manifest_path, fake_compiler, fake_dev_server):
    assert not manifest_path.exists()
    m = make_manifest(make_settings, fake_compiler, fake_dev_server)
    m.refresh()
    assert m.data == {}
    assert m.loaded is True
    assert m.lookup("calendar.js") is None
    assert m.lookup_entrypoint("calendar", "javascript") is None
    with pytest.raises(MissingEntryError):
        m.lookup_or_fail("calendar.js")


def test_invalid_json_raises_manifest_error(make_settings, manifest_path, fake_compiler, fake_dev_server):
    manifest_path.parent.mkdir(parents=True)
    manifest_path.write_text("{not json", encoding="utf-8")
    m = make_manifest(make_settings, fake_compiler, fake_dev_server)
    with pytest.raises(ManifestError):
        m.refresh()


def test_non_object_manifest_raises(make_settings, write_manifest, fake_compiler, fake_dev_server):
    write_manifest(["calendar.js"])  # type: ignore[arg-type]
    m = make_manifest(make_settings, fake_compiler, fake_dev_server)
    with pytest.raises(ManifestError):
        m.lookup("calendar.js")


def test_empty_string_value_is_absent(make_settings, write_manifest, fake_compiler, fake_dev_server):
    write_manifest({"calendar.js": "", "blank.js": "   ", "entrypoints": {"blank": {"assets": {"js": " \t"}}}})
    m = make_manifest(make_settings, fake_compiler, fake_dev_server)
    assert m.lookup("calendar.js") is None
    assert m.lookup("blank.js") is None
    assert m.lookup_entrypoint("blank", "javascript") is None


def test_manifest_removed_during_read_is_empty(make_settings, write_manifest, manifest_path, fake_compiler, fake_dev_server, monkeypatch):
    write_manifest({"calendar.js": "/packs/calendar-HASH.js"})
    original_read_text = Path.read_text

    def vanishing_read_text(self, *args, **kwargs):
        if self == manifest_path:
            raise FileNotFoundError(str(self))
        return original_read_text(self, *args, **kwargs)

    monkeypatch.setattr(Path, "read_text", vanishing_read_text)
    m = make_manifest(make_settings, fake_compiler, fake_dev_server)
    assert m.lookup("calendar.js") is None
    assert m.data == {}
