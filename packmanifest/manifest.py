"""Resolve logical pack names to compiled, content-hashed paths.

The bundler writes a JSON manifest that maps ``calendar.js`` style names to
``/packs/calendar-1016838bab065ae1e314.js`` and lists the chunks of each
entrypoint under ``entrypoints``. ``Manifest`` reads that file, compiling
first when on-demand compilation is enabled and no dev server is running.
"""

from __future__ import annotations

import json
import logging
import posixpath
from pathlib import Path
from typing import Any, Dict, Mapping, Protocol

from .errors import ManifestError, MissingEntryError
from .logging_utils import tagged
from .types import PackType, PackTypeLike


logger = logging.getLogger("packmanifest.manifest")

ENTRYPOINTS_KEY = "entrypoints"


class _Config(Protocol):
    compile: bool
    cache_manifest: bool
    public_path_prefix: str

    @property
    def absolute_manifest_path(self) -> Path:
        ...


class _Compiler(Protocol):
    def compile(self) -> Any:
        ...


class _DevServer(Protocol):
    def running(self) -> bool:
        ...


def dig(data: Any, *keys: str) -> Any:
    """Walk nested mappings, returning None when any key is missing.

    A non-mapping value in the middle of the path also ends the walk with None;
    nothing else is suppressed.
    """
    current = data
    for key in keys:
        if not isinstance(current, Mapping) or key not in current:
            return None
        current = current[key]
    return current


def _presence(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    if isinstance(value, (list, dict)) and not value:
        return None
    return value


def manifest_name(name: str, pack_type: PackType) -> str:
    """Entrypoints are keyed without their extension; strip ``.<ext>`` if given."""
    suffix = f".{pack_type.extension}"
    if name.endswith(suffix):
        return name[: -len(suffix)]
    return name


def full_pack_name(name: str, pack_type: PackType) -> str:
    if posixpath.splitext(name)[1]:
        return name
    return f"{name}.{pack_type.extension}"


class Manifest:
    def __init__(self, config: _Config, compiler: _Compiler, dev_server: _DevServer) -> None:
        self.config = config
        self.compiler = compiler
        self.dev_server = dev_server
        self.data: Dict[str, Any] = {}
        self.loaded = False

    @property
    def path(self) -> Path:
        return self.config.absolute_manifest_path

    def refresh(self) -> None:
        self.reload()

    def reload(self) -> Dict[str, Any]:
        self.data = self._load()
        self.loaded = True
        return self.data

    def get_or_load(self) -> Dict[str, Any]:
        if self.config.cache_manifest and self.loaded:
            return self.data
        return self.reload()

    def lookup_entrypoint(self, name: str, pack_type: PackTypeLike = PackType.JAVASCRIPT) -> Any:
        """Return the asset(s) of entrypoint ``name`` for ``pack_type``, or None.

        Example::

            manifest.lookup_entrypoint("calendar.js", "javascript")
            # => ["/packs/vendor-16838bab065ae1e314.js", "/packs/calendar-1016838bab065ae1e314.js"]
        """
        self._compile_if_needed()
        ptype = PackType.coerce(pack_type)
        data = self.get_or_load()
        return _presence(dig(data, ENTRYPOINTS_KEY, manifest_name(str(name), ptype), "assets", ptype.extension))

    def lookup_entrypoint_or_fail(self, name: str, pack_type: PackTypeLike = PackType.JAVASCRIPT) -> Any:
        found = self.lookup_entrypoint(name, pack_type)
        if found is None:
            raise self._missing_entry(name, pack_type)
        return found

    def lookup(self, name: str, pack_type: PackTypeLike = PackType.JAVASCRIPT) -> Any:
        """Return the compiled path for ``name``, or None when the manifest lacks it.

        Example::

            manifest.lookup("calendar.js")  # => "/packs/calendar-1016838bab065ae1e122.js"
        """
        self._compile_if_needed()
        ptype = PackType.coerce(pack_type)
        data = self.get_or_load()
        return _presence(data.get(full_pack_name(str(name), ptype)))

    def lookup_or_fail(self, name: str, pack_type: PackTypeLike = PackType.JAVASCRIPT) -> Any:
        found = self.lookup(name, pack_type)
        if found is None:
            raise self._missing_entry(name, pack_type)
        return found

    def compiling(self) -> bool:
        return bool(self.config.compile) and not self.dev_server.running()

    def _compile_if_needed(self) -> None:
        if self.compiling():
            with tagged("Packs"):
                self.compiler.compile()

    def _missing_entry(self, name: str, pack_type: PackTypeLike) -> MissingEntryError:
        bundle_name = full_pack_name(str(name), PackType.coerce(pack_type))
        logger.warning("Missing manifest entry", extra={"pack": bundle_name, "manifest_path": self.path})
        return MissingEntryError(bundle_name, self.path, self.data)

    def _load(self) -> Dict[str, Any]:
        path = self.path
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("Manifest not found at %s; using empty manifest", path)
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ManifestError(f"Manifest at {path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ManifestError(f"Manifest at {path} must contain a JSON object")
        return data
