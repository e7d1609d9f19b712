from __future__ import annotations

from functools import lru_cache
from typing import Optional

from .compiler import Compiler
from .dev_server import DevServer
from .manifest import Manifest
from .settings import PackSettings, get_settings, reset_settings_cache


class Packer:
    """Wires configuration, dev server probe, compiler and manifest together."""

    def __init__(self, config: Optional[PackSettings] = None) -> None:
        self.config = config or get_settings()
        self.dev_server = DevServer(self.config)
        self.compiler = Compiler(self.config)
        self.manifest = Manifest(self.config, self.compiler, self.dev_server)


@lru_cache(maxsize=1)
def get_packer() -> Packer:
    return Packer()


def get_manifest() -> Manifest:
    return get_packer().manifest


def reset_packer() -> None:
    """Testing helper: drop the process-wide packer and cached settings."""
    get_packer.cache_clear()
    reset_settings_cache()
