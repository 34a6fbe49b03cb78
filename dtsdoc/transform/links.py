"""Cross-reference resolution run once the whole project has been walked."""

from __future__ import annotations

import re
from typing import Mapping, Optional, TypeVar

from ..logging import get_logger
from ..models import ReferenceType
from ..reflection import ExtendedReflection
from .context import BuildContext
from .errors import InvariantViolation

# Matches "{@link target}" and "{@link target display text}".
LINK_PATTERN = re.compile(r"{@link (\S+?)(|\s+.+?)}")

T = TypeVar("T")

logger = get_logger("transform.links")


def create_href(source: ExtendedReflection, target: ExtendedReflection) -> Optional[str]:
    """Return a relative link from `source`'s page to `target`.

    Returns None when `target` is the page `source` is already on.
    """
    hash_id = f"#{target.page_id}" if target.page_id else ""
    if source.page_href == target.page_href:
        return hash_id or None
    return f"../{target.page_href}/{hash_id}"


def resolve_link(by_name: Mapping[str, T], id_: str, link: str) -> Optional[T]:
    """Look `link` up from the scope `id_`, innermost scope first.

    For id "foo.bar.zing.Hello" and link "Bar" this checks
    "foo.bar.zing.Hello.Bar", "foo.bar.zing.Bar", "foo.bar.Bar", "foo.Bar"
    and finally "Bar".
    """
    scope = id_.strip()
    link = link.strip()
    if not link:
        return None

    while True:
        candidate = by_name.get(f"{scope}.{link}" if scope else link)
        if candidate is not None:
            return candidate
        if not scope:
            return None
        last = scope.rfind(".")
        scope = scope[:last] if last > 0 else ""


class LinkResolver:
    """Finalizes reference hrefs and rewrites `{@link}` annotations in comments."""

    def __init__(self, ctx: BuildContext) -> None:
        self.ctx = ctx

    def resolve(self) -> None:
        self.fix_references()
        self.rewrite_comments()

    def fix_references(self) -> None:
        unresolved = 0
        for node in self.ctx.pending_references():
            type_ = node.type
            if not isinstance(type_, ReferenceType):
                raise InvariantViolation("bad pending reference", node=node.name)
            target = self.ctx.lookup_id(type_.id)
            if target is None:
                unresolved += 1
                continue
            node.type_href = create_href(node, target)
        if unresolved:
            logger.debug("%d references point outside the indexed project", unresolved)

    def rewrite_comments(self) -> None:
        for node in self.ctx.named():
            comment = node.comment
            if comment is not None and comment.short_text:
                text = self.insert_links(node, f"{comment.short_text}\n\n{comment.text}")
                if text:
                    node.resolved_comment = text

            deprecated = node.feature.deprecated
            if deprecated is not None and deprecated.value:
                deprecated.value = self.insert_links(node, deprecated.value)

            for pair in node.enums or []:
                pair.description = self.insert_links(node, pair.description)

    def insert_links(self, node: ExtendedReflection, raw: Optional[str]) -> str:
        """Replace `{@link ...}` annotations in `raw`, resolved from `node`'s scope."""

        def _replace(match: "re.Match[str]") -> str:
            link = match.group(1)
            text = match.group(2).strip() or f"`{link}`"
            handle = resolve_link(self.ctx.by_name, node.name, link)
            if handle is not None:
                href = create_href(node, self.ctx.nodes[handle])
                if href:
                    return f"[{text}]({href})"
            logger.debug("Unresolved link %r in %s", link, node.name)
            return text

        return LINK_PATTERN.sub(_replace, (raw or "").strip())


__all__ = ["LINK_PATTERN", "LinkResolver", "create_href", "resolve_link"]
