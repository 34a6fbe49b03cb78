"""Checks that every generated href lands on an existing page and anchor."""

from __future__ import annotations

import re
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Set

from .reflection import ExtendedReflection


class HrefValidator:
    """Reports hrefs in a page map that point at missing pages or anchors."""

    _LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

    def validate(self, pages: Mapping[str, ExtendedReflection]) -> List[str]:
        """Return a list of issues discovered in the flattened pages."""
        anchors: Dict[str, Set[str]] = {}
        nodes: List[ExtendedReflection] = []
        for root in pages.values():
            anchors.setdefault(root.page_href, set())
            for node in iter_reflections(root):
                nodes.append(node)
                if node.page_id:
                    anchors[root.page_href].add(node.page_id)

        issues: List[str] = []
        for node in nodes:
            for href in self._hrefs(node):
                problem = self._check(href, node.page_href, anchors)
                if problem:
                    issues.append(f"{node.name}: {problem}")
        return issues

    def _hrefs(self, node: ExtendedReflection) -> Iterator[str]:
        if node.type_href:
            yield node.type_href
        for text in self._texts(node):
            for match in self._LINK_PATTERN.finditer(text):
                yield match.group(2).strip()

    @staticmethod
    def _texts(node: ExtendedReflection) -> Iterable[str]:
        texts: List[str] = []
        if node.resolved_comment:
            texts.append(node.resolved_comment)
        if node.feature.deprecated is not None and node.feature.deprecated.value:
            texts.append(node.feature.deprecated.value)
        texts.extend(pair.description for pair in node.enums or [])
        return texts

    @staticmethod
    def _check(href: str, page_href: str, anchors: Mapping[str, Set[str]]) -> Optional[str]:
        if not href:
            return "Empty link target detected"
        if href.startswith(("http://", "https://", "mailto:")):
            return None
        if href.startswith("#"):
            if href[1:] not in anchors.get(page_href, set()):
                return f"Anchor not found on page: {href}"
            return None
        if not href.startswith("../"):
            return None
        page, _, anchor = href[3:].partition("/")
        if page not in anchors:
            return f"Page not found: {href}"
        anchor = anchor.lstrip("#")
        if anchor and anchor not in anchors[page]:
            return f"Anchor not found: {href}"
        return None


def iter_reflections(root: ExtendedReflection) -> Iterator[ExtendedReflection]:
    """Yield `root` and every reflection reachable from it, depth first."""
    stack = [root]
    seen: Set[int] = set()
    while stack:
        node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        yield node
        stack.extend(reversed(child_reflections(node)))


def child_reflections(node: ExtendedReflection) -> List[ExtendedReflection]:
    """Direct children of `node`: properties, parameters, return and members."""
    children: List[ExtendedReflection] = []
    if node.type_info is not None:
        children.extend(node.type_info.properties)
    if node.method_info is not None:
        children.extend(node.method_info.parameters)
        if node.method_info.return_ is not None:
            children.append(node.method_info.return_)
    children.extend(node.members)
    return children


__all__ = ["HrefValidator", "child_reflections", "iter_reflections"]
