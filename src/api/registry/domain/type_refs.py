"""Bounded resolution of introspection type references.

A type reference is a ``{kind, name, ofType}`` chain where wrapper kinds
(``NON_NULL``, ``LIST``) point at the next link through ``ofType`` and the
last link carries the named type. The registry query only follows
``MAX_TYPE_REF_DEPTH`` wrappers, so deeper chains arrive truncated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from registry.domain.exceptions import TruncatedTypeReferenceError

MAX_TYPE_REF_DEPTH = 7

WRAPPER_KINDS = frozenset({"NON_NULL", "LIST"})


@dataclass(frozen=True, slots=True)
class ResolvedTypeRef:
    """A type reference unwrapped down to its named type.

    ``wrappers`` lists wrapper kinds outermost first, so ``[String!]!`` is
    ``("NON_NULL", "LIST", "NON_NULL")`` around ``String``.
    """

    kind: str
    name: str
    wrappers: tuple[str, ...] = ()

    def render(self) -> str:
        """Render the reference in SDL notation, e.g. ``[String!]!``."""
        rendered = self.name
        for wrapper in reversed(self.wrappers):
            rendered = f"{rendered}!" if wrapper == "NON_NULL" else f"[{rendered}]"
        return rendered


def unwrap_type_ref(
    ref: Mapping[str, Any], max_depth: int = MAX_TYPE_REF_DEPTH
) -> ResolvedTypeRef:
    """Follow a type reference through its wrappers to the named type.

    Args:
        ref: An introspection type reference.
        max_depth: Maximum number of wrapper levels to follow.

    Returns:
        ResolvedTypeRef for the named type at the end of the chain.

    Raises:
        TruncatedTypeReferenceError: If the chain has more than ``max_depth``
            wrappers or ends without a named type.
    """
    wrappers: list[str] = []
    current: Mapping[str, Any] | None = ref

    while current is not None:
        kind = current.get("kind")
        if kind not in WRAPPER_KINDS:
            name = current.get("name")
            if not kind or not name:
                break
            return ResolvedTypeRef(kind=kind, name=name, wrappers=tuple(wrappers))

        if len(wrappers) == max_depth:
            break
        wrappers.append(kind)
        current = current.get("ofType")

    raise TruncatedTypeReferenceError(depth=max_depth, kinds=tuple(wrappers))
