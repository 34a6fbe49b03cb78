"""Selection of the namespaces that become documentation pages."""

from __future__ import annotations

from typing import Dict, Optional

from ..models import Declaration, Project
from ..reflection import ExtendedReflection
from .context import BuildContext


def page_key(qualified_name: str, prefix: str) -> str:
    """Strip the project-wide prefix, e.g. "chrome.networking.onc" -> "networking.onc"."""
    if prefix and qualified_name.startswith(prefix):
        return qualified_name[len(prefix) :]
    return qualified_name


def find_namespace_roots(project: Project, ctx: BuildContext) -> Dict[str, ExtendedReflection]:
    """Return namespaces with at least one non-namespace child, keyed by page.

    In nested namespaces like "networking.onc", "networking" is not a page
    when it only holds namespaces, but it is still descended into.
    """
    roots: Dict[str, ExtendedReflection] = {}
    prefix = ctx.config.namespace_prefix

    def traverse(node: Declaration, parent_name: Optional[str]) -> None:
        name = f"{parent_name}.{node.name}" if parent_name else node.name

        has_only_namespaces = True
        for child in node.children:
            if child.is_namespace:
                traverse(child, name)
            else:
                has_only_namespaces = False

        if not has_only_namespaces:
            key = page_key(name, prefix)
            root = ctx.create(node, name=name, page_href=key.replace(".", "_"))
            roots[key] = root
            ctx.index_name(root)

    for child in project.children:
        if child.is_namespace:
            traverse(child, None)

    return roots


__all__ = ["find_namespace_roots", "page_key"]
