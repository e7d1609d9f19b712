"""Template helpers emitting ``<script>``/``<link>`` tags for compiled packs.

Usable directly or registered as Jinja2 globals via ``register_jinja_helpers``.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

from markupsafe import Markup, escape

from .instance import get_manifest
from .manifest import Manifest
from .types import PackType


def _manifest(manifest: Optional[Manifest]) -> Manifest:
    return manifest if manifest is not None else get_manifest()


def _attrs(options: dict[str, Any]) -> str:
    parts = []
    for key, value in options.items():
        if value is None or value is False:
            continue
        attr = key.rstrip("_").replace("_", "-")
        if value is True:
            parts.append(f" {attr}")
        else:
            parts.append(f' {attr}="{escape(value)}"')
    return "".join(parts)


def _public_path(manifest: Manifest, value: Any) -> str:
    """Anchor bare manifest values (``calendar-HASH.js``) at the public path prefix."""
    path = str(value)
    if path.startswith("/") or "://" in path:
        return path
    return f"{manifest.config.public_path_prefix}{path}"


def _as_list(manifest: Manifest, value: Any) -> List[str]:
    if isinstance(value, (list, tuple)):
        return [_public_path(manifest, v) for v in value]
    return [_public_path(manifest, value)]


def _unique(paths: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    out: List[str] = []
    for p in paths:
        if p not in seen:
            seen.add(p)
            out.append(p)
    return out


def _script_tags(paths: Iterable[str], options: dict[str, Any]) -> Markup:
    extra = _attrs(options)
    return Markup("\n").join(Markup(f'<script src="{escape(p)}"{extra}></script>') for p in paths)


def _link_tags(paths: Iterable[str], options: dict[str, Any]) -> Markup:
    opts = {"media": "screen", **options}
    extra = _attrs(opts)
    return Markup("\n").join(Markup(f'<link rel="stylesheet" href="{escape(p)}"{extra}>') for p in paths)


def asset_pack_path(name: str, manifest: Optional[Manifest] = None) -> str:
    """Return the compiled path for a pack, e.g. ``asset_pack_path("calendar.css")``."""
    m = _manifest(manifest)
    return _public_path(m, m.lookup_or_fail(name))


def asset_pack_url(name: str, host: str, manifest: Optional[Manifest] = None) -> str:
    path = asset_pack_path(name, manifest)
    if "://" in path:
        return path
    return f"{host.rstrip('/')}/{path.lstrip('/')}"


def javascript_pack_tag(*names: str, manifest: Optional[Manifest] = None, **options: Any) -> Markup:
    m = _manifest(manifest)
    paths = [_public_path(m, m.lookup_or_fail(n, PackType.JAVASCRIPT)) for n in names]
    return _script_tags(paths, options)


def stylesheet_pack_tag(*names: str, manifest: Optional[Manifest] = None, **options: Any) -> Markup:
    m = _manifest(manifest)
    paths = [_public_path(m, m.lookup_or_fail(n, PackType.STYLESHEET)) for n in names]
    return _link_tags(paths, options)


def javascript_packs_with_chunks_tag(*names: str, manifest: Optional[Manifest] = None, **options: Any) -> Markup:
    """Script tags for every chunk of the named entrypoints; shared chunks appear once."""
    m = _manifest(manifest)
    chunks = [c for n in names for c in _as_list(m, m.lookup_entrypoint_or_fail(n, PackType.JAVASCRIPT))]
    return _script_tags(_unique(chunks), options)


def stylesheet_packs_with_chunks_tag(*names: str, manifest: Optional[Manifest] = None, **options: Any) -> Markup:
    m = _manifest(manifest)
    chunks = [c for n in names for c in _as_list(m, m.lookup_entrypoint_or_fail(n, PackType.STYLESHEET))]
    return _link_tags(_unique(chunks), options)


def register_jinja_helpers(env: Any) -> Any:
    """Expose the pack helpers as globals on a Jinja2 ``Environment``."""
    env.globals.update(
        asset_pack_path=asset_pack_path,
        asset_pack_url=asset_pack_url,
        javascript_pack_tag=javascript_pack_tag,
        stylesheet_pack_tag=stylesheet_pack_tag,
        javascript_packs_with_chunks_tag=javascript_packs_with_chunks_tag,
        stylesheet_packs_with_chunks_tag=stylesheet_packs_with_chunks_tag,
    )
    return env
