"""JSON serialization of the flattened page map for downstream renderers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .models import (
    ArrayType,
    Comment,
    IntersectionType,
    IntrinsicType,
    LiteralType,
    ReferenceType,
    ReflectionType,
    SomeType,
    TupleType,
    UnionType,
    UnknownType,
)
from .reflection import ExtendedReflection, FeatureInfo


def serialize_pages(pages: Mapping[str, ExtendedReflection]) -> Dict[str, Any]:
    """Return a JSON-ready mapping of page key to serialized page root."""
    return {key: serialize_reflection(root) for key, root in pages.items()}


def write_pages(pages: Mapping[str, ExtendedReflection], path: Path) -> Dict[str, Any]:
    payload = serialize_pages(pages)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    return payload


def serialize_reflection(node: ExtendedReflection) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": node.id,
        "name": node.short_name,
        "kind": int(node.kind),
        "flags": {"isOptional": True} if node.source.flags.is_optional else {},
        "_name": node.name,
        "_pageHref": node.page_href,
        "_feature": _feature(node.feature),
    }
    if node.page_id is not None:
        data["_pageId"] = node.page_id
    if node.comment is not None:
        data["comment"] = _comment(node.comment)
    if node.resolved_comment is not None:
        data["_comment"] = node.resolved_comment
    if node.type is not None:
        data["type"] = _reflection_type(node)
    if node.enums is not None:
        data["_enums"] = [
            {"value": pair.value, "description": pair.description} for pair in node.enums
        ]
    if node.type_info is not None:
        data["_type"] = {
            "properties": [serialize_reflection(child) for child in node.type_info.properties]
        }
    if node.method_info is not None:
        method: Dict[str, Any] = {
            "parameters": [serialize_reflection(param) for param in node.method_info.parameters]
        }
        if node.method_info.return_ is not None:
            method["return"] = serialize_reflection(node.method_info.return_)
        if node.method_info.is_async:
            method["isReturnsAsync"] = True
        data["_method"] = method
    if node.event_info is not None:
        event: Dict[str, Any] = {}
        if node.event_info.is_declarative:
            count = len(node.event_info.conditions or [])
            resolved = [_reflection_type(member) for member in node.members]
            event["conditions"] = resolved[:count]
            event["actions"] = resolved[count:]
        data["_event"] = event
    return data


def serialize_type(type_: Optional[SomeType]) -> Optional[Dict[str, Any]]:
    """Serialize a type in TypeDoc's JSON shape (without resolved hrefs)."""
    if type_ is None:
        return None
    if isinstance(type_, ReferenceType):
        data: Dict[str, Any] = {"type": "reference", "name": type_.name}
        if type_.id is not None:
            data["id"] = type_.id
        if type_.type_arguments:
            data["typeArguments"] = [serialize_type(arg) for arg in type_.type_arguments]
        return data
    if isinstance(type_, ReflectionType):
        # The declaration itself is flattened into _type/_method.
        return {"type": "reflection"}
    if isinstance(type_, UnionType):
        return {"type": "union", "types": [serialize_type(t) for t in type_.types]}
    if isinstance(type_, IntersectionType):
        return {"type": "intersection", "types": [serialize_type(t) for t in type_.types]}
    if isinstance(type_, ArrayType):
        return {"type": "array", "elementType": serialize_type(type_.element_type)}
    if isinstance(type_, TupleType):
        return {"type": "tuple", "elements": [serialize_type(t) for t in type_.elements]}
    if isinstance(type_, IntrinsicType):
        return {"type": "intrinsic", "name": type_.name}
    if isinstance(type_, LiteralType):
        return {"type": "literal", "value": type_.value}
    if isinstance(type_, UnknownType):
        return {"type": type_.type_name, "name": type_.name}
    raise TypeError(f"Unsupported type node: {type_!r}")


def _reflection_type(node: ExtendedReflection) -> Optional[Dict[str, Any]]:
    # Nested types carry the hrefs resolved on the virtual members that wrap them.
    data = serialize_type(node.type)
    if data is None:
        return None
    type_ = node.type
    if isinstance(type_, ReferenceType) and node.type_href:
        data["_href"] = node.type_href
    if not node.members or node.event_info is not None:
        return data
    nested: List[Optional[Dict[str, Any]]] = [_reflection_type(m) for m in node.members]
    if isinstance(type_, (UnionType, IntersectionType)):
        data["types"] = nested
    elif isinstance(type_, TupleType):
        data["elements"] = nested
    elif isinstance(type_, ArrayType):
        data["elementType"] = nested[0]
    elif isinstance(type_, ReferenceType):
        data["typeArguments"] = nested
    return data


def _comment(comment: Comment) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    if comment.short_text:
        data["shortText"] = comment.short_text
    if comment.text:
        data["text"] = comment.text
    if comment.returns:
        data["returns"] = comment.returns
    if comment.tags:
        data["tags"] = [{"tag": tag.tag, "text": tag.text} for tag in comment.tags]
    return data


def _feature(feature: FeatureInfo) -> Dict[str, Any]:
    data: Dict[str, Any] = {"channel": feature.channel}
    if feature.since is not None:
        data["since"] = feature.since
    if feature.deprecated is not None:
        deprecated: Dict[str, Any] = {"value": feature.deprecated.value}
        if feature.deprecated.since is not None:
            deprecated["since"] = feature.deprecated.since
        data["deprecated"] = deprecated
    if feature.permissions is not None:
        data["permissions"] = list(feature.permissions)
    if feature.manifest_keys is not None:
        data["manifestKeys"] = list(feature.manifest_keys)
    if feature.min_manifest is not None:
        data["minManifest"] = feature.min_manifest
    if feature.max_manifest is not None:
        data["maxManifest"] = feature.max_manifest
    if feature.platform_apps_only:
        data["platformAppsOnly"] = True
    if feature.disallow_service_workers:
        data["disallowServiceWorkers"] = True
    return data


__all__ = ["serialize_pages", "serialize_reflection", "serialize_type", "write_pages"]
