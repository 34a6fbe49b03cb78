"""Output model: declarations extended with page placement and metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from .models import Comment, Declaration, ReflectionKind, SomeType


@dataclass
class DeprecatedInfo:
    value: str = ""
    since: Optional[str] = None


@dataclass
class FeatureInfo:
    """Availability metadata collected from documentation tags."""

    channel: str = "stable"
    since: Optional[str] = None
    deprecated: Optional[DeprecatedInfo] = None
    permissions: Optional[List[str]] = None
    manifest_keys: Optional[List[str]] = None
    min_manifest: Optional[str] = None
    max_manifest: Optional[str] = None
    platform_apps_only: bool = False
    disallow_service_workers: bool = False


@dataclass
class EnumPair:
    value: Any
    description: str


@dataclass
class TypeInfo:
    properties: List["ExtendedReflection"] = field(default_factory=list)


@dataclass
class MethodInfo:
    parameters: List["ExtendedReflection"] = field(default_factory=list)
    return_: Optional["ExtendedReflection"] = None
    is_async: bool = False


@dataclass
class EventInfo:
    """Event description; conditions/actions are only set for declarative events."""

    conditions: Optional[List[SomeType]] = None
    actions: Optional[List[SomeType]] = None

    @property
    def is_declarative(self) -> bool:
        return self.conditions is not None


@dataclass(eq=False)
class ExtendedReflection:
    """A declaration augmented with its page placement and rendering metadata."""

    source: Declaration
    name: str
    page_href: str
    handle: int = -1
    page_id: Optional[str] = None
    comment: Optional[Comment] = None
    resolved_comment: Optional[str] = None
    feature: FeatureInfo = field(default_factory=FeatureInfo)
    enums: Optional[List[EnumPair]] = None
    type_info: Optional[TypeInfo] = None
    method_info: Optional[MethodInfo] = None
    event_info: Optional[EventInfo] = None
    type_href: Optional[str] = None
    # Virtual type-alias children wrapping embedded types, in member order.
    members: List["ExtendedReflection"] = field(default_factory=list)

    @property
    def id(self) -> int:
        return self.source.id

    @property
    def short_name(self) -> str:
        return self.source.name

    @property
    def kind(self) -> ReflectionKind:
        return self.source.kind

    @property
    def type(self) -> Optional[SomeType]:
        return self.source.type

    @property
    def is_virtual(self) -> bool:
        return self.source.id <= 0

    def __repr__(self) -> str:
        return f"ExtendedReflection(name={self.name!r}, page_id={self.page_id!r})"


__all__ = [
    "DeprecatedInfo",
    "EnumPair",
    "EventInfo",
    "ExtendedReflection",
    "FeatureInfo",
    "MethodInfo",
    "TypeInfo",
]
