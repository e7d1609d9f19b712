from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping


class PackError(Exception):
    """Base class for pack lookup failures."""


class ManifestError(PackError):
    """The manifest file exists but cannot be read as a JSON object."""


class MissingEntryError(PackError, LookupError):
    """A pack name could not be resolved through the manifest."""

    def __init__(self, name: str, manifest_path: Path | str, data: Mapping[str, Any]) -> None:
        self.name = name
        self.manifest_path = manifest_path
        super().__init__(missing_entry_message(name, manifest_path, data))


def missing_entry_message(name: str, manifest_path: Path | str, data: Mapping[str, Any]) -> str:
    contents = json.dumps(dict(data), ensure_ascii=False, indent=2)
    return (
        f"Can't find {name} in {manifest_path}. Possible causes:\n"
        "1. You forgot to install node packages (try `npm install`) or are running an incompatible version of Node\n"
        "2. Your app has code with a non-standard extension (like a `.jsx` file) but the bundler is not configured for it\n"
        "3. You have set PACKS_COMPILE=false for this environment\n"
        "   (unless you are running the bundler in watch mode or the dev server, in which case maybe it isn't running?)\n"
        "4. The bundler has not yet re-run to reflect updates.\n"
        "5. You have misconfigured the PACKS_* settings.\n"
        "6. Your bundler configuration is not creating a manifest.\n"
        "\n"
        "Your manifest contains:\n"
        f"{contents}\n"
    )
