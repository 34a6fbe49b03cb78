"""Recognition of event marker references and synthesis of their shape."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..models import (
    Declaration,
    Flags,
    IntrinsicType,
    ReferenceType,
    ReflectionKind,
    ReflectionType,
    SomeType,
    UnionType,
)
from ..reflection import EventInfo
from .errors import MalformedEventShape

VIRTUAL_ID = -1
DECLARATIVE_NODE_NAME = "_declarative-fake"


@dataclass
class EventShape:
    """Result of upgrading an event reference.

    ``parameters`` is None for declarative events, which are not callable;
    ``nodes`` lists every declaration the walker must visit.
    """

    event: EventInfo
    parameters: Optional[List[Declaration]] = None
    nodes: List[Declaration] = field(default_factory=list)


def virtual_node(name: str, kind: ReflectionKind, type_: Optional[SomeType]) -> Declaration:
    return Declaration(id=VIRTUAL_ID, name=name, kind=kind, type=type_, flags=Flags())


def upgrade_event(
    reference: ReferenceType,
    *,
    custom_types: Sequence[str],
    node_name: str = "",
) -> EventShape:
    """Describe the event behind a reference such as ``events.Event<Callback>``."""
    arguments = reference.type_arguments
    if not arguments:
        raise MalformedEventShape(
            f"got reference to {reference.name} without argument", node=node_name or None
        )
    first = arguments[0]

    if reference.name in custom_types:
        # The custom form spells out every addListener parameter itself.
        parameters: List[Declaration] = []
        if isinstance(first, ReflectionType) and first.declaration is not None:
            signatures = first.declaration.signatures
            if signatures:
                parameters = list(signatures[0].parameters)
    elif isinstance(first, IntrinsicType):
        return _declarative(reference, first, node_name)
    else:
        parameters = [virtual_node("callback", ReflectionKind.PARAMETER, first)]

    return EventShape(event=EventInfo(), parameters=parameters, nodes=list(parameters))


def _declarative(reference: ReferenceType, first: IntrinsicType, node_name: str) -> EventShape:
    if first.name != "never":
        raise MalformedEventShape(
            f"unexpected first argument for declarative event: {first.name}",
            node=node_name or None,
        )
    arguments = reference.type_arguments
    if len(arguments) < 3:
        raise MalformedEventShape(
            f"declarative event {reference.name} missing conditions/actions",
            node=node_name or None,
        )

    conditions = _as_type_list(arguments[1])
    actions = _as_type_list(arguments[2])
    nodes = [
        virtual_node(DECLARATIVE_NODE_NAME, ReflectionKind.TYPE_ALIAS, type_)
        for type_ in conditions + actions
    ]
    return EventShape(event=EventInfo(conditions=conditions, actions=actions), nodes=nodes)


def _as_type_list(type_: SomeType) -> List[SomeType]:
    # A single condition or action is not wrapped in a union.
    if isinstance(type_, UnionType):
        return list(type_.types)
    return [type_]


__all__ = ["DECLARATIVE_NODE_NAME", "EventShape", "VIRTUAL_ID", "upgrade_event", "virtual_node"]
