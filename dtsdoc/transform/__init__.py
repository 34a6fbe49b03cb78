"""Flattening of a TypeDoc project into linked documentation pages.

A run has three phases that must happen in order:

1. find the namespaces that own pages (:mod:`.namespaces`);
2. walk every page root, creating one extended reflection per visited
   declaration and indexing them by id and qualified name (:mod:`.walker`);
3. resolve reference hrefs and ``{@link}`` annotations against the now
   complete indices (:mod:`.links`).
"""

from __future__ import annotations

from typing import Dict, Optional

from ..config import TransformConfig
from ..logging import get_logger
from ..models import Project
from ..reflection import ExtendedReflection
from .context import BuildContext
from .errors import InvariantViolation, MalformedEventShape, TransformError
from .links import LinkResolver, create_href, resolve_link
from .namespaces import find_namespace_roots
from .walker import TreeWalker, declaration_with


class Transform:
    """Converts one project; instances are single-use."""

    def __init__(self, project: Project, config: Optional[TransformConfig] = None) -> None:
        self.project = project
        self.ctx = BuildContext(config=config or TransformConfig())
        self.logger = get_logger("transform")
        self._done = False

    def run(self) -> Dict[str, ExtendedReflection]:
        if self._done:
            raise RuntimeError("Transform.run() may only be called once")
        self._done = True

        namespaces = find_namespace_roots(self.project, self.ctx)
        self.logger.debug("Found %d namespace roots", len(namespaces))

        walker = TreeWalker(self.ctx)
        for root in namespaces.values():
            walker.walk_root(root)

        LinkResolver(self.ctx).resolve()

        self.logger.info(
            "Flattened %d pages (%d reflections, %d references)",
            len(namespaces),
            len(self.ctx.nodes),
            len(self.ctx.pending),
        )
        return namespaces


def transform_project(
    project: Project, config: Optional[TransformConfig] = None
) -> Dict[str, ExtendedReflection]:
    """Return the page map for `project`, keyed by page (e.g. "networking.onc")."""
    return Transform(project, config).run()


__all__ = [
    "BuildContext",
    "InvariantViolation",
    "MalformedEventShape",
    "Transform",
    "TransformError",
    "create_href",
    "declaration_with",
    "resolve_link",
    "transform_project",
]
