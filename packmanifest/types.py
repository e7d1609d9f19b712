from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union


@dataclass(frozen=True)
class PackType:
    """Asset kind qualifier: javascript, stylesheet, or any other extension.

    ``extension`` is the canonical file extension the manifest keys use.
    """

    name: str

    JAVASCRIPT: ClassVar["PackType"]
    STYLESHEET: ClassVar["PackType"]

    _EXTENSIONS: ClassVar[dict[str, str]] = {"javascript": "js", "stylesheet": "css"}

    @classmethod
    def other(cls, value: str) -> "PackType":
        return cls(str(value))

    @classmethod
    def coerce(cls, value: Union["PackType", str, None]) -> "PackType":
        if isinstance(value, PackType):
            return value
        if value is None:
            raise ValueError("pack type is required")
        text = str(value)
        lowered = text.strip().lower()
        if lowered in cls._EXTENSIONS:
            return cls(lowered)
        return cls(text)

    @property
    def is_other(self) -> bool:
        return self.name not in self._EXTENSIONS

    @property
    def extension(self) -> str:
        return self._EXTENSIONS.get(self.name, self.name)

    def __str__(self) -> str:
        return self.name


PackType.JAVASCRIPT = PackType("javascript")
PackType.STYLESHEET = PackType("stylesheet")


PackTypeLike = Union[PackType, str]
