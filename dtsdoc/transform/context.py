"""Per-run build state threaded through the walk and resolve phases."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from ..config import TransformConfig
from ..models import Declaration
from ..reflection import ExtendedReflection


@dataclass
class BuildContext:
    """Handle table plus the id index, by-name index and pending references.

    Reflections are addressed by integer handles (their position in
    ``nodes``); the indices store handles so nothing is resolved until the
    walk has finished.
    """

    config: TransformConfig = field(default_factory=TransformConfig)
    nodes: List[ExtendedReflection] = field(default_factory=list)
    by_id: Dict[int, int] = field(default_factory=dict)
    by_name: Dict[str, int] = field(default_factory=dict)
    pending: List[int] = field(default_factory=list)

    def create(self, source: Declaration, *, name: str, page_href: str) -> ExtendedReflection:
        reflection = ExtendedReflection(
            source=source, name=name, page_href=page_href, handle=len(self.nodes)
        )
        self.nodes.append(reflection)
        return reflection

    def index_id(self, reflection: ExtendedReflection) -> None:
        # Virtual nodes are created with ids <= 0 and must never be link targets.
        if not reflection.is_virtual:
            self.by_id[reflection.id] = reflection.handle

    def index_name(self, reflection: ExtendedReflection) -> None:
        self.by_name[reflection.name] = reflection.handle

    def defer_reference(self, reflection: ExtendedReflection) -> None:
        self.pending.append(reflection.handle)

    def lookup_id(self, id_: Optional[int]) -> Optional[ExtendedReflection]:
        if id_ is None:
            return None
        handle = self.by_id.get(id_)
        return self.nodes[handle] if handle is not None else None

    def lookup_name(self, name: str) -> Optional[ExtendedReflection]:
        handle = self.by_name.get(name)
        return self.nodes[handle] if handle is not None else None

    def named(self) -> Iterator[ExtendedReflection]:
        for handle in self.by_name.values():
            yield self.nodes[handle]

    def pending_references(self) -> Iterator[ExtendedReflection]:
        for handle in self.pending:
            yield self.nodes[handle]


__all__ = ["BuildContext"]
