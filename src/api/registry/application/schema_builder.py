"""Turn registry introspection payloads into graphql-core schemas."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

from graphql import (
    GraphQLEnumType,
    GraphQLError,
    GraphQLInputObjectType,
    GraphQLInterfaceType,
    GraphQLNamedType,
    GraphQLObjectType,
    GraphQLScalarType,
    GraphQLSchema,
    GraphQLUnionType,
    build_client_schema,
)

from registry.domain.exceptions import InvalidIntrospectionError
from registry.domain.type_refs import MAX_TYPE_REF_DEPTH, unwrap_type_ref

_KINDS: tuple[tuple[type[GraphQLNamedType], str], ...] = (
    (GraphQLScalarType, "SCALAR"),
    (GraphQLObjectType, "OBJECT"),
    (GraphQLInterfaceType, "INTERFACE"),
    (GraphQLUnionType, "UNION"),
    (GraphQLEnumType, "ENUM"),
    (GraphQLInputObjectType, "INPUT_OBJECT"),
)


@dataclass(frozen=True)
class SchemaSummary:
    """Names and kinds of what a schema exposes, minus introspection types."""

    types: dict[str, str] = field(default_factory=dict)
    directives: tuple[str, ...] = ()
    query_type: str | None = None
    mutation_type: str | None = None
    subscription_type: str | None = None


def _type_kind(named_type: GraphQLNamedType) -> str:
    for cls, kind in _KINDS:
        if isinstance(named_type, cls):
            return kind
    raise TypeError(f"Unknown GraphQL type class: {type(named_type).__name__}")


def describe_schema(schema: GraphQLSchema) -> SchemaSummary:
    """Summarize the user-visible types and directives of a schema."""
    return SchemaSummary(
        types={
            name: _type_kind(named_type)
            for name, named_type in schema.type_map.items()
            if not name.startswith("__")
        },
        directives=tuple(directive.name for directive in schema.directives),
        query_type=schema.query_type.name if schema.query_type else None,
        mutation_type=schema.mutation_type.name if schema.mutation_type else None,
        subscription_type=(
            schema.subscription_type.name if schema.subscription_type else None
        ),
    )


def _input_value_refs(values: Any) -> Iterator[Mapping[str, Any]]:
    for value in values or ():
        yield value["type"]


def _iter_type_refs(introspection: Mapping[str, Any]) -> Iterator[Mapping[str, Any]]:
    """Yield every type reference an introspection payload contains."""
    for type_ in introspection.get("types") or ():
        for field_ in type_.get("fields") or ():
            yield field_["type"]
            yield from _input_value_refs(field_.get("args"))
        yield from _input_value_refs(type_.get("inputFields"))
        yield from type_.get("interfaces") or ()
        yield from type_.get("possibleTypes") or ()

    for directive in introspection.get("directives") or ():
        yield from _input_value_refs(directive.get("args"))


def check_type_refs(
    introspection: Mapping[str, Any], max_depth: int = MAX_TYPE_REF_DEPTH
) -> None:
    """Ensure every type reference resolves to a named type within ``max_depth``.

    Raises:
        TruncatedTypeReferenceError: If a reference is deeper than the query follows.
        InvalidIntrospectionError: If the payload is not shaped like introspection.
    """
    try:
        for ref in _iter_type_refs(introspection):
            unwrap_type_ref(ref, max_depth=max_depth)
    except (AttributeError, KeyError, TypeError) as e:
        raise InvalidIntrospectionError(
            f"Malformed introspection payload: {e!r}"
        ) from e


def build_schema_from_introspection(introspection: Mapping[str, Any]) -> GraphQLSchema:
    """Build a client schema from the registry's introspection payload.

    Args:
        introspection: The ``introspection`` object of a registry schema,
            i.e. the contents of a standard ``__schema`` result.

    Returns:
        GraphQLSchema usable by validation and completion tooling.

    Raises:
        InvalidIntrospectionError: If the payload cannot be turned into a schema.
    """
    if not isinstance(introspection, Mapping) or not isinstance(
        introspection.get("types"), list
    ):
        raise InvalidIntrospectionError(
            "Introspection payload must be an object with a 'types' list"
        )

    check_type_refs(introspection)

    try:
        return build_client_schema({"__schema": dict(introspection)})
    except (GraphQLError, TypeError, KeyError) as e:
        raise InvalidIntrospectionError(f"Unable to build schema: {e}") from e
