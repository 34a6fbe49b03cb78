"""Tests for href creation and `{@link}` resolution."""

from __future__ import annotations

from typing import List

import pytest

from dtsdoc.models import Declaration, IntrinsicType, ReflectionKind
from dtsdoc.reflection import ExtendedReflection
from dtsdoc.transform import transform_project
from dtsdoc.transform.context import BuildContext
from dtsdoc.transform.errors import InvariantViolation
from dtsdoc.transform.links import LINK_PATTERN, LinkResolver, create_href, resolve_link
from tests._fixtures.declarations import DeclarationBuilder, comment, project


class RecordingIndex(dict):
    """Dict that remembers every key looked up through ``get``."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.lookups: List[str] = []

    def get(self, key, default=None):  # type: ignore[override]
        self.lookups.append(key)
        return super().get(key, default)


def _reflection(name: str, page_href: str, page_id: str | None = None) -> ExtendedReflection:
    source = Declaration(id=1, name=name.rsplit(".", 1)[-1], kind=ReflectionKind.PROPERTY)
    return ExtendedReflection(source=source, name=name, page_href=page_href, page_id=page_id)


def test_resolve_link_walks_outward_through_scopes() -> None:
    index = RecordingIndex({"foo.Bar": "found"})

    assert resolve_link(index, "foo.bar.zing.Hello", "Bar") == "found"
    assert index.lookups == [
        "foo.bar.zing.Hello.Bar",
        "foo.bar.zing.Bar",
        "foo.bar.Bar",
        "foo.Bar",
    ]


def test_resolve_link_tries_bare_name_last() -> None:
    index = RecordingIndex({"Bar": "global"})

    assert resolve_link(index, "foo.Hello", "Bar") == "global"
    assert index.lookups == ["foo.Hello.Bar", "foo.Bar", "Bar"]


def test_resolve_link_accepts_dotted_links() -> None:
    index = {"chrome.tabs.Tab": "tab"}

    assert resolve_link(index, "chrome.windows.get", "tabs.Tab") == "tab"


def test_resolve_link_misses_return_none() -> None:
    assert resolve_link({}, "foo.bar", "Baz") is None
    assert resolve_link({"foo.bar.": "x"}, "foo.bar", "  ") is None


def test_resolve_link_is_deterministic() -> None:
    index = {"a.X": 1, "a.b.X": 2}
    results = {resolve_link(index, "a.b.c", "X") for _ in range(5)}
    assert results == {2}


def test_create_href_same_page_uses_anchor() -> None:
    source = _reflection("tabs.query", "tabs", "method-query")
    target = _reflection("tabs.Tab", "tabs", "type-Tab")

    assert create_href(source, target) == "#type-Tab"


def test_create_href_same_page_without_anchor_is_none() -> None:
    source = _reflection("tabs.query", "tabs", "method-query")
    root = _reflection("tabs", "tabs")

    assert create_href(source, root) is None


def test_create_href_other_page() -> None:
    source = _reflection("tabs.query", "tabs", "method-query")

    assert create_href(source, _reflection("windows.Window", "windows", "type-Window")) == (
        "../windows/#type-Window"
    )
    assert create_href(source, _reflection("windows", "windows")) == "../windows/"


def test_link_pattern_captures_display_text() -> None:
    plain = LINK_PATTERN.search("See {@link tabs.Tab}.")
    titled = LINK_PATTERN.search("See {@link tabs.Tab the tab}.")

    assert plain is not None and plain.group(1) == "tabs.Tab" and plain.group(2) == ""
    assert titled is not None and titled.group(1) == "tabs.Tab"
    assert titled.group(2).strip() == "the tab"


def _linked_pages(builder: DeclarationBuilder):
    window = builder.interface("Window", builder.prop("id"))
    windows = builder.namespace("windows", window)
    tab = builder.interface("Tab", builder.prop("windowId", comment=comment("See {@link windows.Window}.")))
    query = builder.prop(
        "active",
        IntrinsicType("boolean"),
        comment=comment(
            "Whether the {@link Tab tab} is active.",
            ("deprecated", "Use {@link Tab.windowId} instead."),
            text="Unlike {@link Missing}, this works.",
        ),
    )
    tabs = builder.namespace("tabs", tab, query)
    chrome = builder.namespace("chrome", tabs, windows)
    return transform_project(project(chrome))


def test_comments_get_markdown_links(builder: DeclarationBuilder) -> None:
    pages = _linked_pages(builder)

    tab, active = pages["tabs"].type_info.properties
    assert active.resolved_comment == (
        "Whether the [tab](#type-Tab) is active.\n\nUnlike `Missing`, this works."
    )
    (window_id,) = tab.type_info.properties
    assert window_id.resolved_comment == "See [`windows.Window`](../windows/#type-Window)."


def test_deprecation_text_is_linked(builder: DeclarationBuilder) -> None:
    pages = _linked_pages(builder)

    active = pages["tabs"].type_info.properties[1]
    assert active.feature.deprecated is not None
    assert active.feature.deprecated.value == (
        "Use [`Tab.windowId`](#property-Tab-windowId) instead."
    )


def test_enum_descriptions_are_linked(builder: DeclarationBuilder) -> None:
    mode = builder.prop(
        "mode",
        comment=comment(
            "The mode.",
            ("chrome-enum", '"fast" Faster than {@link slowMode}.'),
        ),
    )
    slow = builder.prop("slowMode", IntrinsicType("boolean"))

    page = transform_project(project(builder.namespace("api", mode, slow)))["api"]

    node = page.type_info.properties[0]
    assert node.enums[0].description == "Faster than [`slowMode`](#property-slowMode)."


def test_link_to_own_page_root_renders_plain_text(builder: DeclarationBuilder) -> None:
    prop = builder.prop("x", comment=comment("Part of {@link api}."))

    page = transform_project(project(builder.namespace("api", prop)))["api"]

    assert page.type_info.properties[0].resolved_comment == "Part of `api`."


def test_nodes_without_short_text_get_no_resolved_comment(builder: DeclarationBuilder) -> None:
    prop = builder.prop("x", comment=comment("", text="Only body text."))

    page = transform_project(project(builder.namespace("api", prop)))["api"]

    assert page.type_info.properties[0].resolved_comment is None


def test_pending_reference_must_be_a_reference() -> None:
    ctx = BuildContext()
    node = ctx.create(
        Declaration(id=5, name="x", kind=ReflectionKind.PROPERTY, type=IntrinsicType("string")),
        name="api.x",
        page_href="api",
    )
    ctx.defer_reference(node)

    with pytest.raises(InvariantViolation, match="bad pending reference"):
        LinkResolver(ctx).fix_references()


def test_insert_links_handles_missing_text() -> None:
    ctx = BuildContext()
    node = ctx.create(
        Declaration(id=5, name="x", kind=ReflectionKind.PROPERTY), name="api.x", page_href="api"
    )

    assert LinkResolver(ctx).insert_links(node, None) == ""
    assert LinkResolver(ctx).insert_links(node, "  plain  ") == "plain"
