"""Upstream parse: run the TypeDoc CLI over .d.ts sources and load its JSON."""

from __future__ import annotations

import asyncio
import subprocess
import tempfile
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .config import TypeDocConfig
from .loader import load_project_file
from .logging import get_logger
from .models import Project

Runner = Callable[[Sequence[str], Path], None]


class TypeDocError(RuntimeError):
    """Raised when TypeDoc cannot be run or reports problems with the sources."""


class TypeDocParser:
    """Builds TypeDoc's JSON project for a set of declaration files."""

    def __init__(self, config: TypeDocConfig | None = None, runner: Runner | None = None) -> None:
        self.config = config or TypeDocConfig()
        self._runner = runner or self._default_runner
        self.logger = get_logger("typedoc")

    def build_args(self, sources: Sequence[str], output: Path) -> List[str]:
        args = list(self.config.command)
        args.extend(["--json", str(output)])
        if self.config.tsconfig:
            args.extend(["--tsconfig", self.config.tsconfig])
        if self.config.exclude_internal:
            args.append("--excludeInternal")
        if self.config.exclude_private:
            args.append("--excludePrivate")
        if self.config.exclude_protected:
            args.append("--excludeProtected")
        # Any warning means the declarations did not convert cleanly.
        args.append("--treatWarningsAsErrors")
        args.extend(self.config.extra_args)
        args.extend(sources)
        return args

    def parse(self, sources: Sequence[str], *, cwd: Optional[Path] = None) -> Project:
        if not sources:
            raise TypeDocError("No declaration sources given")
        with tempfile.TemporaryDirectory(prefix="dtsdoc-") as tmp:
            output = Path(tmp) / "project.json"
            args = self.build_args(sources, output)
            self.logger.debug("Running %s", " ".join(args))
            self._runner(args, cwd or Path.cwd())
            if not output.exists():
                raise TypeDocError(f"failed to convert modules: {', '.join(sources)}")
            return load_project_file(output)

    @staticmethod
    def _default_runner(args: Sequence[str], cwd: Path) -> None:
        try:
            subprocess.run(
                list(args),
                cwd=str(cwd),
                check=True,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as exc:  # pragma: no cover - depends on environment
            raise TypeDocError(
                f"Unable to locate '{args[0]}'. Install typedoc or configure typedoc.command."
            ) from exc
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or exc.stdout or "").strip()
            raise TypeDocError(f"failed to parse typedoc: {detail}") from exc


async def parse(
    sources: Sequence[str],
    config: TypeDocConfig | None = None,
    *,
    cwd: Optional[Path] = None,
    runner: Runner | None = None,
) -> Project:
    """Run TypeDoc off the event loop; the only suspension point of a build."""
    parser = TypeDocParser(config, runner=runner)
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, lambda: parser.parse(sources, cwd=cwd))


__all__ = ["TypeDocError", "TypeDocParser", "parse"]
