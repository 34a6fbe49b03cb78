"""Tests for dtsdoc.loader."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from dtsdoc.loader import LoaderError, load_project, load_project_file
from dtsdoc.models import (
    ArrayType,
    IntersectionType,
    IntrinsicType,
    LiteralType,
    ReferenceType,
    ReflectionKind,
    ReflectionType,
    TupleType,
    UnionType,
    UnknownType,
)


def _property(type_: Dict[str, Any], **extra: Any) -> Dict[str, Any]:
    return {"id": 2, "name": "value", "kind": 1024, "type": type_, **extra}


def _load_type(type_: Dict[str, Any]):
    project = load_project({"name": "p", "children": [_property(type_)]})
    return project.children[0].type


def test_load_project_reads_legacy_project(alarms_json: Dict[str, Any]) -> None:
    project = load_project(alarms_json)

    assert project.name == "chrome-types"
    (chrome,) = project.children
    assert chrome.kind == ReflectionKind.NAMESPACE
    alarms = chrome.children[0]
    alarm, get, on_alarm = alarms.children
    assert alarm.kind == ReflectionKind.INTERFACE
    assert alarm.children[1].flags.is_optional is True
    (sig,) = get.signatures
    assert sig.comment is not None
    assert sig.comment.returns == "The alarm, if any."
    assert sig.comment.tags[0].tag == "since"
    assert isinstance(sig.type, ReferenceType)
    assert sig.type.type_arguments == (ReferenceType(name="Alarm", id=3),)
    assert on_alarm.kind == ReflectionKind.VARIABLE
    assert isinstance(on_alarm.type, ReferenceType)
    listener = on_alarm.type.type_arguments[0]
    assert isinstance(listener, ReflectionType)
    assert listener.declaration is not None
    assert listener.declaration.signatures[0].parameters[0].name == "alarm"


def test_load_project_file_reads_from_disk(tmp_path: Path, alarms_json: Dict[str, Any]) -> None:
    path = tmp_path / "project.json"
    path.write_text(json.dumps(alarms_json), encoding="utf-8")

    project = load_project_file(path)

    assert project.children[0].name == "chrome"


def test_load_project_file_rejects_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(LoaderError, match="broken.json"):
        load_project_file(path)


def test_load_project_requires_object() -> None:
    with pytest.raises(LoaderError):
        load_project(["not", "a", "project"])


def test_reflection_missing_kind_is_rejected() -> None:
    with pytest.raises(LoaderError, match="missing id/name/kind"):
        load_project({"children": [{"id": 1, "name": "x"}]})


def test_composite_types_are_loaded() -> None:
    string = {"type": "intrinsic", "name": "string"}
    number = {"type": "intrinsic", "name": "number"}

    assert _load_type({"type": "union", "types": [string, number]}) == UnionType(
        types=(IntrinsicType("string"), IntrinsicType("number"))
    )
    assert _load_type({"type": "intersection", "types": [string]}) == IntersectionType(
        types=(IntrinsicType("string"),)
    )
    assert _load_type({"type": "array", "elementType": number}) == ArrayType(
        element_type=IntrinsicType("number")
    )
    assert _load_type({"type": "tuple", "elements": [number, string]}) == TupleType(
        elements=(IntrinsicType("number"), IntrinsicType("string"))
    )
    assert _load_type({"type": "literal", "value": "on"}) == LiteralType(value="on")
    assert _load_type({"type": "query", "name": "x"}) == UnknownType(type_name="query", name="x")


def test_reference_target_field_is_accepted() -> None:
    assert _load_type({"type": "reference", "target": 42, "name": "Tab"}) == ReferenceType(
        name="Tab", id=42
    )


def test_array_without_element_type_is_rejected() -> None:
    with pytest.raises(LoaderError, match="elementType"):
        _load_type({"type": "array"})


def test_block_comments_are_normalised() -> None:
    raw = _property(
        {"type": "intrinsic", "name": "string"},
        comment={
            "summary": [
                {"kind": "text", "text": "Short summary.\n\nSee "},
                {"kind": "inline-tag", "tag": "@link", "text": "Tab"},
                {"kind": "text", "text": " for details."},
            ],
            "blockTags": [
                {"tag": "@since", "content": [{"kind": "text", "text": "90"}]},
                {"tag": "@returns", "content": [{"kind": "text", "text": "A value."}]},
            ],
        },
    )

    comment = load_project({"children": [raw]}).children[0].comment

    assert comment is not None
    assert comment.short_text == "Short summary."
    assert comment.text == "See {@link Tab} for details."
    assert comment.returns == "A value."
    assert [(tag.tag, tag.text) for tag in comment.tags] == [("since", "90")]
