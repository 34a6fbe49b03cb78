"""Loading of TypeDoc JSON output into the declaration model."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .models import (
    ArrayType,
    Comment,
    CommentTag,
    Declaration,
    Flags,
    IntersectionType,
    IntrinsicType,
    LiteralType,
    Project,
    ReferenceType,
    ReflectionKind,
    ReflectionType,
    Signature,
    SomeType,
    TupleType,
    UnionType,
    UnknownType,
)


class LoaderError(RuntimeError):
    """Raised when TypeDoc JSON does not have the expected project shape."""


def load_project_file(path: Path) -> Project:
    """Read a TypeDoc `--json` output file from disk."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise LoaderError(f"{path.name} is not valid JSON: {exc}") from exc
    return load_project(data)


def load_project(data: Any) -> Project:
    """Convert a decoded TypeDoc project object into a `Project`."""
    if not isinstance(data, Mapping):
        raise LoaderError("TypeDoc project must be a JSON object")
    name = data.get("name")
    children = [_declaration(child) for child in _as_list(data.get("children"))]
    return Project(name=name if isinstance(name, str) else "", children=children)


def _declaration(raw: Any) -> Declaration:
    if not isinstance(raw, Mapping):
        raise LoaderError(f"Expected a reflection object, got {type(raw).__name__}")
    if "id" not in raw or "name" not in raw or "kind" not in raw:
        raise LoaderError(f"Reflection is missing id/name/kind: {_preview(raw)}")
    return Declaration(
        id=int(raw["id"]),
        name=str(raw["name"]),
        kind=ReflectionKind(int(raw["kind"])),
        children=tuple(_declaration(child) for child in _as_list(raw.get("children"))),
        type=_type(raw.get("type")),
        signatures=tuple(_signature(sig) for sig in _as_list(raw.get("signatures"))),
        comment=_comment(raw.get("comment")),
        flags=Flags(is_optional=bool(_as_dict(raw.get("flags")).get("isOptional"))),
    )


def _signature(raw: Any) -> Signature:
    data = _as_dict(raw)
    return Signature(
        name=str(data.get("name", "")),
        parameters=tuple(_declaration(param) for param in _as_list(data.get("parameters"))),
        type=_type(data.get("type")),
        comment=_comment(data.get("comment")),
    )


def _type(raw: Any) -> Optional[SomeType]:
    if raw is None:
        return None
    data = _as_dict(raw)
    kind = data.get("type")
    if kind == "reference":
        target = data.get("id", data.get("target"))
        return ReferenceType(
            name=str(data.get("name", "")),
            id=target if isinstance(target, int) else None,
            type_arguments=_types(data.get("typeArguments")),
        )
    if kind == "reflection":
        declaration = data.get("declaration")
        return ReflectionType(
            declaration=_declaration(declaration) if declaration is not None else None
        )
    if kind == "union":
        return UnionType(types=_types(data.get("types")))
    if kind == "intersection":
        return IntersectionType(types=_types(data.get("types")))
    if kind == "array":
        element = _type(data.get("elementType"))
        if element is None:
            raise LoaderError(f"Array type without elementType: {_preview(data)}")
        return ArrayType(element_type=element)
    if kind == "tuple":
        return TupleType(elements=_types(data.get("elements")))
    if kind == "intrinsic":
        return IntrinsicType(name=str(data.get("name", "")))
    if kind in {"literal", "stringLiteral"}:
        return LiteralType(value=data.get("value"))
    return UnknownType(type_name=str(kind or "unknown"), name=str(data.get("name", "")))


def _types(raw: Any) -> Tuple[SomeType, ...]:
    result: List[SomeType] = []
    for item in _as_list(raw):
        parsed = _type(item)
        if parsed is not None:
            result.append(parsed)
    return tuple(result)


def _comment(raw: Any) -> Optional[Comment]:
    if raw is None:
        return None
    data = _as_dict(raw)
    if "summary" in data or "blockTags" in data:
        return _block_comment(data)
    tags = tuple(
        CommentTag(tag=str(tag.get("tag", "")), text=str(tag.get("text", "")))
        for tag in (_as_dict(item) for item in _as_list(data.get("tags")))
    )
    return Comment(
        short_text=str(data.get("shortText", "")),
        text=str(data.get("text", "")),
        returns=str(data.get("returns", "")),
        tags=tags,
    )


def _block_comment(data: Dict[str, Any]) -> Comment:
    # TypeDoc >= 0.23 emits display parts instead of shortText/text/tags.
    summary = _join_parts(data.get("summary"))
    short_text, _, text = summary.partition("\n\n")
    returns = ""
    tags: List[CommentTag] = []
    for block in (_as_dict(item) for item in _as_list(data.get("blockTags"))):
        name = str(block.get("tag", "")).lstrip("@")
        content = _join_parts(block.get("content"))
        if name in {"returns", "return"}:
            returns = content
            continue
        tags.append(CommentTag(tag=name, text=content))
    return Comment(
        short_text=short_text.strip(),
        text=text.strip(),
        returns=returns,
        tags=tuple(tags),
    )


def _join_parts(parts: Any) -> str:
    chunks: List[str] = []
    for part in (_as_dict(item) for item in _as_list(parts)):
        text = str(part.get("text", ""))
        if part.get("kind") == "inline-tag":
            # Keep inline tags in their source form so links can be rewritten later.
            text = f"{{{part.get('tag', '@link')} {text}}}"
        chunks.append(text)
    return "".join(chunks)


def _as_list(value: Any) -> Iterable[Any]:
    return value if isinstance(value, list) else []


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _preview(data: Any) -> str:
    text = json.dumps(data, default=str)
    return text if len(text) <= 120 else text[:117] + "..."


__all__ = ["LoaderError", "load_project", "load_project_file"]
