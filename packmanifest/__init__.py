from .errors import ManifestError, MissingEntryError, PackError
from .instance import Packer, get_manifest, get_packer, reset_packer
from .manifest import Manifest
from .settings import PackSettings, get_settings
from .types import PackType

__all__ = [
    "Manifest",
    "ManifestError",
    "MissingEntryError",
    "PackError",
    "PackSettings",
    "PackType",
    "Packer",
    "get_manifest",
    "get_packer",
    "get_settings",
    "reset_packer",
]
