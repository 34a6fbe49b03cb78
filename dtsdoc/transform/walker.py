"""Recursive flattening of a namespace's declarations into extended reflections."""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from ..logging import get_logger
from ..models import (
    ArrayType,
    Comment,
    CommentTag,
    Declaration,
    IntersectionType,
    ReferenceType,
    ReflectionKind,
    ReflectionType,
    SomeType,
    TupleType,
    UnionType,
    is_void,
)
from ..reflection import ExtendedReflection, MethodInfo, TypeInfo
from .context import BuildContext
from .events import upgrade_event, virtual_node
from .tags import extract_enums, extract_feature, param_tags, return_tags


def declaration_with(node: Declaration) -> Declaration:
    """Return the declaration a reflection type points at, or the node itself.

    Appears for inline interface types such as ``foo: {bar: string}``.
    """
    type_ = node.type
    if isinstance(type_, ReflectionType) and type_.declaration is not None:
        return declaration_with(type_.declaration)
    return node


def member_types(type_: Optional[SomeType]) -> List[SomeType]:
    """Types embedded in a composite type, in declaration order."""
    if isinstance(type_, (UnionType, IntersectionType)):
        return list(type_.types)
    if isinstance(type_, TupleType):
        return list(type_.elements)
    if isinstance(type_, ArrayType):
        return [type_.element_type]
    if isinstance(type_, ReferenceType):
        return list(type_.type_arguments)
    return []


class TreeWalker:
    """Visits every declaration below a page root exactly once."""

    def __init__(self, ctx: BuildContext) -> None:
        self.ctx = ctx
        self.logger = get_logger("transform.walker")

    def walk_root(self, root: ExtendedReflection) -> None:
        self.logger.debug("Walking page %s", root.name)
        self._visit(root, None, root)

    def walk(
        self,
        node: Declaration,
        parent: ExtendedReflection,
        namespace: ExtendedReflection,
    ) -> ExtendedReflection:
        reflection = self.ctx.create(
            node, name=f"{parent.name}.{node.name}", page_href=namespace.page_href
        )
        self.ctx.index_name(reflection)
        self._visit(reflection, parent, namespace)
        return reflection

    def _visit(
        self,
        reflection: ExtendedReflection,
        parent: Optional[ExtendedReflection],
        namespace: ExtendedReflection,
    ) -> None:
        config = self.ctx.config
        node = reflection.source
        role = "property" if node.kind & ReflectionKind.VARIABLE_OR_PROPERTY else "type"

        self.ctx.index_id(reflection)

        if isinstance(node.type, ReferenceType):
            if node.type.name in config.event_types:
                shape = upgrade_event(
                    node.type, custom_types=config.custom_event_types, node_name=reflection.name
                )
                walked = [self.walk(child, reflection, namespace) for child in shape.nodes]
                reflection.event_info = shape.event
                if shape.parameters is not None:
                    reflection.method_info = MethodInfo(parameters=walked)
                else:
                    reflection.members = walked
                role = "event"
            else:
                self.ctx.defer_reference(reflection)

        effective = declaration_with(node)
        comment = effective.comment if effective.comment is not None else node.comment

        # Namespace children were already picked up as page roots of their own.
        children = [child for child in effective.children if not child.is_namespace]
        if children:
            reflection.type_info = TypeInfo(
                properties=[self.walk(child, reflection, namespace) for child in children]
            )

        if effective.signatures:
            role = "method"
            comment = self._walk_signatures(reflection, effective, comment, namespace)

        if reflection.event_info is None:
            self._walk_members(reflection, effective, namespace)

        # Tags are read last since signatures may have supplied the comment.
        tags = comment.tags if comment is not None else ()
        reflection.comment = comment
        reflection.feature = extract_feature(tags)
        reflection.enums = extract_enums(tags)

        # The role is final only now, e.g. "method" or "property".
        if parent is not None:
            suffix = reflection.name[len(namespace.name) + 1 :]
            reflection.page_id = f"{role}-{suffix.replace('.', '-')}"

    def _walk_signatures(
        self,
        reflection: ExtendedReflection,
        effective: Declaration,
        comment: Optional[Comment],
        namespace: ExtendedReflection,
    ) -> Optional[Comment]:
        signatures = effective.signatures
        params: Dict[str, Declaration] = {}
        return_type: Optional[SomeType] = None
        return_comment: Optional[Comment] = None

        for signature in signatures:
            signature_tags = signature.comment.tags if signature.comment is not None else ()
            for param in signature.parameters:
                if param.name not in params or param.flags.is_optional:
                    params[param.name] = _with_tags(
                        param, param_tags(param.name, signature_tags)
                    )

            if signature.type is not None and not is_void(signature.type):
                # The comment lives on the signature, so the returning one donates it.
                if comment is None:
                    comment = signature.comment
                return_comment = signature.comment
                # Several returning overloads should agree; the last one wins.
                return_type = signature.type

        if comment is None:
            comment = signatures[0].comment

        method = MethodInfo(
            parameters=[self.walk(param, reflection, namespace) for param in params.values()]
        )

        if return_type is not None:
            returns = return_comment.returns if return_comment is not None else ""
            if not returns and comment is not None:
                returns = comment.returns
            extra = return_tags(return_comment.tags) if return_comment is not None else []
            virtual = replace(
                virtual_node("return", ReflectionKind.PARAMETER, return_type),
                comment=Comment(short_text=returns, tags=tuple(extra)),
            )
            method.return_ = self.walk(virtual, reflection, namespace)
            method.is_async = (
                isinstance(return_type, ReferenceType)
                and return_type.name in self.ctx.config.async_types
            )

        reflection.method_info = method
        return comment

    def _walk_members(
        self,
        reflection: ExtendedReflection,
        effective: Declaration,
        namespace: ExtendedReflection,
    ) -> None:
        # Embedded types are visited as virtual type aliases purely so nested
        # references and methods get indexed.
        type_ = effective.type
        hoisted: List[ExtendedReflection] = []
        for member in member_types(type_):
            child = self.walk(
                virtual_node(effective.name, ReflectionKind.TYPE_ALIAS, member),
                reflection,
                namespace,
            )
            reflection.members.append(child)
            if isinstance(type_, IntersectionType) and child.type_info is not None:
                hoisted.extend(child.type_info.properties)
        if hoisted:
            if reflection.type_info is None:
                reflection.type_info = TypeInfo()
            reflection.type_info.properties.extend(hoisted)


def _with_tags(param: Declaration, extra: Sequence[CommentTag]) -> Declaration:
    if not extra:
        return param
    comment = param.comment if param.comment is not None else Comment()
    return replace(param, comment=replace(comment, tags=comment.tags + tuple(extra)))


__all__ = ["TreeWalker", "declaration_with", "member_types"]
