"""The registry introspection request.

The request is declared as a selection tree so that the set of fields the
schema builder relies on is inspectable, and the type-reference fragment is
generated to ``MAX_TYPE_REF_DEPTH`` instead of being written out by hand.
``SCHEMA_QUERY`` is the rendered text sent to the registry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from registry.domain.type_refs import MAX_TYPE_REF_DEPTH

SCHEMA_QUERY_OPERATION_NAME = "GetSchemaByTag"

TYPE_REF_FRAGMENT = "IntrospectionTypeRef"
INPUT_VALUE_FRAGMENT = "IntrospectionInputValue"
FULL_TYPE_FRAGMENT = "IntrospectionFullType"

_INDENT = "  "


@dataclass(frozen=True)
class Field:
    """A selected field, optionally with raw argument text and sub-selections."""

    name: str
    arguments: str | None = None
    selections: tuple[Selection, ...] = ()


@dataclass(frozen=True)
class FragmentSpread:
    """A ``...Name`` spread of a named fragment."""

    name: str


Selection: TypeAlias = "Field | FragmentSpread"


@dataclass(frozen=True)
class Fragment:
    """A named fragment definition."""

    name: str
    type_condition: str
    selections: tuple[Selection, ...]


@dataclass(frozen=True)
class Operation:
    """A query operation together with the fragments it spreads."""

    name: str
    variables: str
    selections: tuple[Selection, ...]
    fragments: tuple[Fragment, ...] = ()

    def render(self) -> str:
        """Render the operation and its fragments as GraphQL text."""
        blocks = [
            f"query {self.name}({self.variables}) "
            + _render_selection_set(self.selections, 0)
        ]
        blocks.extend(
            f"fragment {fragment.name} on {fragment.type_condition} "
            + _render_selection_set(fragment.selections, 0)
            for fragment in self.fragments
        )
        return "\n\n".join(blocks) + "\n"


def _render_selection_set(selections: tuple[Selection, ...], depth: int) -> str:
    lines = ["{"]
    for selection in selections:
        lines.append(_INDENT * (depth + 1) + _render_selection(selection, depth + 1))
    lines.append(_INDENT * depth + "}")
    return "\n".join(lines)


def _render_selection(selection: Selection, depth: int) -> str:
    if isinstance(selection, FragmentSpread):
        return f"...{selection.name}"

    rendered = selection.name
    if selection.arguments:
        rendered += f"({selection.arguments})"
    if selection.selections:
        rendered += " " + _render_selection_set(selection.selections, depth)
    return rendered


def _fields(*names: str) -> tuple[Field, ...]:
    return tuple(Field(name) for name in names)


def type_ref_selections(max_depth: int = MAX_TYPE_REF_DEPTH) -> tuple[Selection, ...]:
    """Selections for a type reference following ``max_depth`` wrapper levels."""
    if max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {max_depth}")

    selections: tuple[Selection, ...] = _fields("kind", "name")
    if max_depth == 0:
        return selections
    return selections + (Field("ofType", selections=type_ref_selections(max_depth - 1)),)


def _type_ref() -> Field:
    return Field("type", selections=(FragmentSpread(TYPE_REF_FRAGMENT),))


def build_fragments(max_depth: int = MAX_TYPE_REF_DEPTH) -> tuple[Fragment, ...]:
    """Fragments describing a full type, an input value, and a type reference."""
    input_value_args = Field("args", selections=(FragmentSpread(INPUT_VALUE_FRAGMENT),))
    type_ref_list = (FragmentSpread(TYPE_REF_FRAGMENT),)

    full_type = Fragment(
        name=FULL_TYPE_FRAGMENT,
        type_condition="IntrospectionType",
        selections=(
            *_fields("kind", "name", "description"),
            Field(
                "fields",
                selections=(
                    *_fields("name", "description"),
                    input_value_args,
                    _type_ref(),
                    *_fields("isDeprecated", "deprecationReason"),
                ),
            ),
            Field("inputFields", selections=(FragmentSpread(INPUT_VALUE_FRAGMENT),)),
            Field("interfaces", selections=type_ref_list),
            Field(
                "enumValues",
                arguments="includeDeprecated: true",
                selections=_fields(
                    "name", "description", "isDeprecated", "deprecationReason"
                ),
            ),
            Field("possibleTypes", selections=type_ref_list),
        ),
    )
    input_value = Fragment(
        name=INPUT_VALUE_FRAGMENT,
        type_condition="IntrospectionInputValue",
        selections=(*_fields("name", "description"), _type_ref(), Field("defaultValue")),
    )
    type_ref = Fragment(
        name=TYPE_REF_FRAGMENT,
        type_condition="IntrospectionType",
        selections=type_ref_selections(max_depth),
    )
    return (full_type, input_value, type_ref)


def build_schema_operation(max_depth: int = MAX_TYPE_REF_DEPTH) -> Operation:
    """The ``GetSchemaByTag`` operation parameterized by ``$id`` and ``$tag``."""
    root_name = (Field("name"),)
    introspection = Field(
        "introspection",
        selections=(
            Field("queryType", selections=root_name),
            Field("mutationType", selections=root_name),
            Field("subscriptionType", selections=root_name),
            Field(
                "types",
                arguments="filter: { includeAbstractTypes: true }",
                selections=(FragmentSpread(FULL_TYPE_FRAGMENT),),
            ),
            Field(
                "directives",
                selections=(
                    *_fields("name", "description", "locations"),
                    Field("args", selections=(FragmentSpread(INPUT_VALUE_FRAGMENT),)),
                ),
            ),
        ),
    )
    return Operation(
        name=SCHEMA_QUERY_OPERATION_NAME,
        variables="$id: ID!, $tag: String!",
        selections=(
            Field(
                "service",
                arguments="id: $id",
                selections=(
                    Field(
                        "schema",
                        arguments="tag: $tag",
                        selections=(Field("hash"), introspection),
                    ),
                ),
            ),
        ),
        fragments=build_fragments(max_depth),
    )


def build_schema_query(max_depth: int = MAX_TYPE_REF_DEPTH) -> str:
    """Render the ``GetSchemaByTag`` query text."""
    return build_schema_operation(max_depth).render()


SCHEMA_OPERATION = build_schema_operation()
SCHEMA_QUERY = SCHEMA_OPERATION.render()
