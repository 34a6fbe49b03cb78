"""Pipeline orchestration for build/convert flows."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from .config import DtsDocConfig, load_config
from .loader import load_project_file
from .logging import get_logger
from .models import Project
from .reflection import ExtendedReflection
from .serialize import serialize_pages, write_pages
from .transform import transform_project
from .typedoc import Runner, parse
from .validate import HrefValidator

DEFAULT_OUTPUT = Path("types.json")


@dataclass
class BuildOutcome:
    """Result of one flattening run."""

    pages: Dict[str, ExtendedReflection]
    payload: Dict[str, object]
    output: Optional[Path] = None
    issues: List[str] = field(default_factory=list)


class Orchestrator:
    """Coordinates parse, transform, validation and output for a project."""

    def __init__(
        self,
        *,
        typedoc_runner: Runner | None = None,
        validator: HrefValidator | None = None,
        config_loader: Callable[[Path], DtsDocConfig] = load_config,
    ) -> None:
        self._typedoc_runner = typedoc_runner
        self.validator = validator or HrefValidator()
        self._config_loader = config_loader
        self.logger = get_logger("orchestrator")

    def run_build(
        self,
        sources: Sequence[str],
        *,
        config_path: Path | None = None,
        output: Path | None = None,
    ) -> BuildOutcome:
        """Parse .d.ts `sources` with TypeDoc and flatten the result."""
        return asyncio.run(self.build(sources, config_path=config_path, output=output))

    async def build(
        self,
        sources: Sequence[str],
        *,
        config_path: Path | None = None,
        output: Path | None = None,
    ) -> BuildOutcome:
        config = self._load_config(config_path)
        self.logger.info("Parsing %d declaration file(s) with TypeDoc", len(sources))
        project = await parse(
            sources, config.typedoc, cwd=config.root, runner=self._typedoc_runner
        )
        return self.run_project(project, config=config, output=output)

    def run_convert(
        self,
        project_json: Path,
        *,
        config_path: Path | None = None,
        output: Path | None = None,
    ) -> BuildOutcome:
        """Flatten an existing TypeDoc `--json` output file."""
        config = self._load_config(config_path)
        self.logger.info("Loading TypeDoc project from %s", project_json)
        project = load_project_file(project_json)
        return self.run_project(project, config=config, output=output)

    def run_project(
        self,
        project: Project,
        *,
        config: DtsDocConfig | None = None,
        output: Path | None = None,
        write: bool = True,
    ) -> BuildOutcome:
        """Flatten a loaded project; writes JSON unless `write` is False."""
        config = config or self._load_config(None)
        pages = transform_project(project, config.transform)

        issues = self.validator.validate(pages)
        for issue in issues:
            self.logger.warning("%s", issue)

        target = (output or config.output or DEFAULT_OUTPUT) if write else None
        if target is not None:
            payload = write_pages(pages, target)
            self.logger.info("Wrote %d pages to %s", len(pages), target)
        else:
            payload = serialize_pages(pages)
        return BuildOutcome(pages=pages, payload=payload, output=target, issues=issues)

    def _load_config(self, config_path: Path | None) -> DtsDocConfig:
        path = config_path if config_path is not None else Path.cwd()
        config = self._config_loader(path)
        self.logger.debug("Using configuration rooted at %s", config.root)
        return config


__all__ = ["BuildOutcome", "DEFAULT_OUTPUT", "Orchestrator"]
