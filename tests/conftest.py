from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any, Callable

import pytest

# Ensure project root is importable as a module path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from packmanifest.instance import reset_packer
from packmanifest.logging_utils import current_tags
from packmanifest.settings import PackSettings


class FakeCompiler:
    def __init__(self, on_compile: Callable[[], Any] | None = None) -> None:
        self.calls = 0
        self.tags: list[tuple[str, ...]] = []
        self._on_compile = on_compile

    def compile(self) -> bool:
        self.calls += 1
        self.tags.append(current_tags())
        if self._on_compile is not None:
            self._on_compile()
        return True


class FakeDevServer:
    def __init__(self, running: bool = False) -> None:
        self.is_running = running

    def running(self) -> bool:
        return self.is_running


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("PACKS_") or key in {"JSON_LOGS", "NODE_ENV"}:
            monkeypatch.delenv(key, raising=False)
    reset_packer()
    yield
    reset_packer()


@pytest.fixture()
def manifest_path(tmp_path) -> Path:
    return tmp_path / "public" / "packs" / "manifest.json"


@pytest.fixture()
def write_manifest(manifest_path) -> Callable[[dict], Path]:
    def _write(data: dict) -> Path:
        manifest_path.parent.mkdir(parents=True, exist_ok=True)
        manifest_path.write_text(json.dumps(data), encoding="utf-8")
        return manifest_path

    return _write


@pytest.fixture()
def make_settings(monkeypatch, tmp_path, manifest_path) -> Callable[..., PackSettings]:
    def _make(**env: str) -> PackSettings:
        monkeypatch.setenv("PACKS_ROOT_PATH", str(tmp_path))
        monkeypatch.setenv("PACKS_MANIFEST_PATH", str(manifest_path))
        for key, value in env.items():
            monkeypatch.setenv(f"PACKS_{key.upper()}", value)
        return PackSettings()

    return _make


@pytest.fixture()
def fake_compiler() -> FakeCompiler:
    return FakeCompiler()


@pytest.fixture()
def fake_dev_server() -> FakeDevServer:
    return FakeDevServer(running=False)


@pytest.fixture()
def make_compiler() -> Callable[..., FakeCompiler]:
    return FakeCompiler
