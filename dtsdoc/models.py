"""Input declaration model mirroring the TypeDoc JSON project shape."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntFlag
from typing import List, Optional, Tuple, Union


class ReflectionKind(IntFlag):
    """TypeDoc reflection kinds (bit flags, as serialized in project JSON)."""

    PROJECT = 0x1
    MODULE = 0x2
    NAMESPACE = 0x4
    ENUM = 0x8
    ENUM_MEMBER = 0x10
    VARIABLE = 0x20
    FUNCTION = 0x40
    CLASS = 0x80
    INTERFACE = 0x100
    CONSTRUCTOR = 0x200
    PROPERTY = 0x400
    METHOD = 0x800
    CALL_SIGNATURE = 0x1000
    INDEX_SIGNATURE = 0x2000
    CONSTRUCTOR_SIGNATURE = 0x4000
    PARAMETER = 0x8000
    TYPE_LITERAL = 0x10000
    TYPE_PARAMETER = 0x20000
    ACCESSOR = 0x40000
    GET_SIGNATURE = 0x80000
    SET_SIGNATURE = 0x100000
    OBJECT_LITERAL = 0x200000
    TYPE_ALIAS = 0x400000
    EVENT = 0x800000
    REFERENCE = 0x1000000

    VARIABLE_OR_PROPERTY = VARIABLE | PROPERTY


@dataclass(frozen=True)
class CommentTag:
    """A single `@tag text` pair from a doc comment."""

    tag: str
    text: str


@dataclass(frozen=True)
class Comment:
    """Documentation comment attached to a declaration or signature."""

    short_text: str = ""
    text: str = ""
    returns: str = ""
    tags: Tuple[CommentTag, ...] = ()


@dataclass(frozen=True)
class Flags:
    is_optional: bool = False


@dataclass(frozen=True)
class ReferenceType:
    name: str
    id: Optional[int] = None
    type_arguments: Tuple["SomeType", ...] = ()


@dataclass(frozen=True)
class ReflectionType:
    declaration: Optional["Declaration"] = None


@dataclass(frozen=True)
class UnionType:
    types: Tuple["SomeType", ...] = ()


@dataclass(frozen=True)
class IntersectionType:
    types: Tuple["SomeType", ...] = ()


@dataclass(frozen=True)
class ArrayType:
    element_type: "SomeType"


@dataclass(frozen=True)
class TupleType:
    elements: Tuple["SomeType", ...] = ()


@dataclass(frozen=True)
class IntrinsicType:
    name: str


@dataclass(frozen=True)
class LiteralType:
    value: Union[str, int, float, bool, None]


@dataclass(frozen=True)
class UnknownType:
    """Any TypeDoc type shape the flattener does not descend into."""

    type_name: str
    name: str = ""


SomeType = Union[
    ReferenceType,
    ReflectionType,
    UnionType,
    IntersectionType,
    ArrayType,
    TupleType,
    IntrinsicType,
    LiteralType,
    UnknownType,
]


@dataclass(frozen=True, eq=False)
class Signature:
    """One call signature of a function-like declaration."""

    name: str = ""
    parameters: Tuple["Declaration", ...] = ()
    type: Optional[SomeType] = None
    comment: Optional[Comment] = None


@dataclass(frozen=True, eq=False)
class Declaration:
    """A node of the input declaration tree.

    Instances are never modified once loaded; the transform builds a new
    tree of extended reflections that point back at them.
    """

    id: int
    name: str
    kind: ReflectionKind
    children: Tuple["Declaration", ...] = ()
    type: Optional[SomeType] = None
    signatures: Tuple[Signature, ...] = ()
    comment: Optional[Comment] = None
    flags: Flags = field(default_factory=Flags)

    @property
    def is_namespace(self) -> bool:
        return self.kind == ReflectionKind.NAMESPACE


@dataclass
class Project:
    """Root of a loaded TypeDoc project."""

    name: str
    children: List[Declaration] = field(default_factory=list)


def is_void(type_: Optional[SomeType]) -> bool:
    return isinstance(type_, IntrinsicType) and type_.name == "void"


__all__ = [
    "ArrayType",
    "Comment",
    "CommentTag",
    "Declaration",
    "Flags",
    "IntersectionType",
    "IntrinsicType",
    "LiteralType",
    "Project",
    "ReferenceType",
    "ReflectionKind",
    "ReflectionType",
    "Signature",
    "SomeType",
    "TupleType",
    "UnionType",
    "UnknownType",
    "is_void",
]
