"""Extraction of feature, enum and since/deprecation metadata from doc tags."""

from __future__ import annotations

import json
from typing import Dict, Iterable, List, Optional

from ..models import CommentTag
from ..reflection import DeprecatedInfo, EnumPair, FeatureInfo
from .errors import InvariantViolation

ENUM_TAG = "chrome-enum"

# "@chrome-param-since paramName 90" style tags, remapped onto the parameter.
_PARAM_TAGS: Dict[str, str] = {
    "chrome-param-since": "since",
    "chrome-param-deprecated-since": "chrome-deprecated-since",
    "chrome-param-deprecated": "deprecated",
}

_RETURN_TAGS: Dict[str, str] = {
    "chrome-returns-since": "since",
    "chrome-returns-deprecated-since": "chrome-deprecated-since",
    "chrome-returns-deprecated": "deprecated",
}


def extract_feature(tags: Iterable[CommentTag]) -> FeatureInfo:
    """Fold tags, in order, into a `FeatureInfo` (channel defaults to stable)."""
    out = FeatureInfo()
    # Shared so "deprecated" and "chrome-deprecated-since" merge in either order.
    deprecated = DeprecatedInfo()

    for item in tags:
        text = item.text.strip()
        tag = item.tag
        if tag == "chrome-platform-apps":
            out.platform_apps_only = True
        elif tag == "since":
            out.since = text
        elif tag == "chrome-channel":
            out.channel = text
        elif tag == "chrome-permission":
            out.permissions = (out.permissions or []) + [text]
        elif tag == "chrome-manifest":
            out.manifest_keys = (out.manifest_keys or []) + [text]
        elif tag == "deprecated":
            deprecated.value = text
            out.deprecated = deprecated
        elif tag == "chrome-deprecated-since":
            deprecated.since = text
            out.deprecated = deprecated
        elif tag == "chrome-min-manifest":
            out.min_manifest = text
        elif tag == "chrome-max-manifest":
            out.max_manifest = text
        elif tag == "chrome-disallow-service-workers":
            out.disallow_service_workers = True

    return out


def extract_enums(tags: Iterable[CommentTag]) -> Optional[List[EnumPair]]:
    """Return enum members declared via `@chrome-enum`, or None if there are none.

    Each tag looks like ``"foo\\_bar" Description``: the first token is a JSON
    literal (with markdown-escaped underscores) and the rest is prose.
    """
    enums: List[EnumPair] = []
    for item in tags:
        if item.tag != ENUM_TAG:
            continue
        # Values containing whitespace are not supported by this format.
        parts = item.text.split(None, 1)
        token = parts[0] if parts else ""
        description = parts[1].strip() if len(parts) > 1 else ""
        raw = token.replace("\\_", "_")
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise InvariantViolation(f"enum tag value is not a JSON literal: {token!r}") from exc
        enums.append(EnumPair(value=value, description=description))
    return enums or None


def param_tags(param_name: str, tags: Iterable[CommentTag]) -> List[CommentTag]:
    """Signature tags addressed to `param_name`, renamed to their plain form."""
    prefix = f"{param_name} "
    promoted: List[CommentTag] = []
    for item in tags:
        mapped = _PARAM_TAGS.get(item.tag)
        if mapped is None or not item.text.startswith(prefix):
            continue
        promoted.append(CommentTag(tag=mapped, text=item.text[len(prefix) :]))
    return promoted


def return_tags(tags: Iterable[CommentTag]) -> List[CommentTag]:
    """Signature tags describing the return value, renamed to their plain form."""
    return [
        CommentTag(tag=_RETURN_TAGS[item.tag], text=item.text)
        for item in tags
        if item.tag in _RETURN_TAGS
    ]


__all__ = ["ENUM_TAG", "extract_enums", "extract_feature", "param_tags", "return_tags"]
