from __future__ import annotations

import hashlib
import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .settings import PackSettings


logger = logging.getLogger("packmanifest.compiler")

# Files outside the source tree whose changes invalidate a previous build
_DEFAULT_WATCHED_FILES = ("package.json", "package-lock.json", "yarn.lock", "pnpm-lock.yaml")


class Compiler:
    """Runs the external bundler when watched sources changed since the last run."""

    def __init__(self, config: PackSettings) -> None:
        self.config = config

    def compile(self) -> bool:
        if self.fresh():
            logger.debug("Everything's up-to-date. Nothing to do")
            return True
        success = self._run_bundler()
        # The bundler writes its output even on failure; record the digest anyway
        # so an unchanged tree doesn't recompile on every request.
        self._record_compilation_digest()
        return success

    def fresh(self) -> bool:
        return self._last_compilation_digest() == self.watched_files_digest()

    def stale(self) -> bool:
        return not self.fresh()

    @property
    def digest_path(self) -> Path:
        return self.config.absolute_cache_path / f"last-compilation-digest-{self.config.env}"

    def watched_files_digest(self) -> str:
        root = Path(self.config.root_path).resolve()
        h = hashlib.sha1()
        for path in sorted(self._watched_files()):
            try:
                rel = path.relative_to(root)
            except ValueError:
                rel = path
            h.update(f"{rel}:{path.stat().st_mtime_ns}\n".encode("utf-8"))
        return h.hexdigest()

    def _watched_files(self) -> Iterator[Path]:
        roots: list[Path] = [self.config.absolute_source_path]
        roots.extend(self.config.resolve(Path(p)) for p in self.config.additional_path_list)
        roots.extend(self.config.resolve(Path(name)) for name in _DEFAULT_WATCHED_FILES)
        yield from _iter_files(roots)

    def _last_compilation_digest(self) -> Optional[str]:
        path = self.digest_path
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8").strip() or None

    def _record_compilation_digest(self) -> None:
        path = self.digest_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.watched_files_digest(), encoding="utf-8")

    def _run_bundler(self) -> bool:
        cmd = shlex.split(self.config.compile_command)
        logger.info("Compiling...", extra={"command": " ".join(cmd)})
        env = dict(os.environ, NODE_ENV=os.environ.get("NODE_ENV") or self.config.env)
        result = subprocess.run(
            cmd,
            cwd=str(Path(self.config.root_path).resolve()),
            env=env,
            capture_output=True,
            text=True,
        )
        if result.returncode == 0:
            logger.info("Compiled all packs in %s", self.config.resolve(self.config.public_output_path))
            if result.stderr:
                logger.warning(result.stderr)
            return True
        logger.error(
            "Compilation failed:\n%s\n%s",
            result.stderr,
            result.stdout,
            extra={"returncode": result.returncode},
        )
        return False


def _iter_files(roots: Iterable[Path]) -> Iterator[Path]:
    seen: set[Path] = set()
    for root in roots:
        if root.is_file():
            candidates: Iterable[Path] = [root]
        elif root.is_dir():
            candidates = (p for p in root.rglob("*") if p.is_file())
        else:
            continue
        for p in candidates:
            if p not in seen:
                seen.add(p)
                yield p
