from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PackSettings(BaseSettings):
    """Pack lookup configuration pulled from environment/.env."""

    root_path: Path = Field(Path("."), alias="PACKS_ROOT_PATH")
    manifest_path: Path = Field(Path("public/packs/manifest.json"), alias="PACKS_MANIFEST_PATH")
    public_output_path: Path = Field(Path("public/packs"), alias="PACKS_PUBLIC_OUTPUT_PATH")
    public_path_prefix: str = Field("/packs/", alias="PACKS_PUBLIC_PATH_PREFIX")
    # When false the manifest is re-read from disk on every lookup
    cache_manifest: bool = Field(False, alias="PACKS_CACHE_MANIFEST")
    compile: bool = Field(True, alias="PACKS_COMPILE")
    compile_command: str = Field("npx webpack", alias="PACKS_COMPILE_COMMAND")
    source_path: Path = Field(Path("app/javascript"), alias="PACKS_SOURCE_PATH")
    # Comma-separated, relative to root_path
    additional_paths: str = Field("", alias="PACKS_ADDITIONAL_PATHS")
    cache_path: Path = Field(Path("tmp/cache/packs"), alias="PACKS_CACHE_PATH")
    env: str = Field("development", alias="PACKS_ENV")
    dev_server_host: str = Field("localhost", alias="PACKS_DEV_SERVER_HOST")
    dev_server_port: int = Field(3035, alias="PACKS_DEV_SERVER_PORT")
    dev_server_connect_timeout: float = Field(0.01, alias="PACKS_DEV_SERVER_CONNECT_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("cache_manifest", mode="before")
    @classmethod
    def _parse_cache_manifest(cls, value) -> bool:
        if isinstance(value, bool):
            return value
        if value is None or value == "":
            return False
        return str(value).strip().lower() in {"1", "true", "yes", "on"}

    @field_validator("compile", mode="before")
    @classmethod
    def _parse_compile(cls, value) -> bool:
        if isinstance(value, bool):
            return value
        if value is None or value == "":
            return True
        return str(value).strip().lower() in {"1", "true", "yes", "on"}

    @field_validator("public_path_prefix", mode="before")
    @classmethod
    def _normalize_prefix(cls, value: str | None) -> str:
        val = (value or "/packs/").strip()
        if not val.endswith("/"):
            val += "/"
        return val

    def resolve(self, path: Path) -> Path:
        """Anchor a configured path at ``root_path`` unless it is absolute."""
        path = Path(path)
        if path.is_absolute():
            return path
        return (Path(self.root_path) / path).resolve()

    @property
    def additional_path_list(self) -> list[str]:
        return [p.strip() for p in (self.additional_paths or "").split(",") if p.strip()]

    @property
    def absolute_manifest_path(self) -> Path:
        return self.resolve(self.manifest_path)

    @property
    def absolute_source_path(self) -> Path:
        return self.resolve(self.source_path)

    @property
    def absolute_cache_path(self) -> Path:
        return self.resolve(self.cache_path)


@lru_cache(maxsize=1)
def get_settings() -> PackSettings:
    return PackSettings()


def reset_settings_cache() -> None:
    """Testing helper to clear cached settings."""
    get_settings.cache_clear()
