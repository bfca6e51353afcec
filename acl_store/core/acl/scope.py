"""Scope identifiers for principals.

A Scope is a validated, non-empty string naming one principal. Distinct
strings are distinct scopes; there is no hierarchy between them.

Colon-separated input is combined piece by piece:

    >>> str(parse_scope(" public : private ")[0])
    'public:private'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from acl_store.core.acl.constants import SCOPE_SEPARATOR, UNKNOWN_SCOPE_STR
from acl_store.core.exceptions import CompositeError, InvalidScopeError
from acl_store.core.settings import get_acl_settings

__all__ = ["UNKNOWN_SCOPE", "Scope", "parse_scope"]


@dataclass(frozen=True, slots=True, order=True)
class Scope:
    """Canonical scope value.

    Equality, hashing and ordering all follow the canonical text.
    """

    value: str = ""

    def __str__(self) -> str:
        return self.value

    def combine(self, other: Scope) -> Scope:
        """Return a scope joining this one and ``other`` with ":".

        Empty sides are dropped rather than producing a dangling separator.
        """
        if not self.value:
            return Scope(other.value)
        if not other.value:
            return Scope(self.value)
        return Scope(f"{self.value}{SCOPE_SEPARATOR}{other.value}")

    @classmethod
    def from_string(cls, text: str, *, max_length: int | None = None) -> Scope:
        """Parse ``text`` into a Scope, raising on any failure.

        Args:
            text: Scope text (e.g., "alice" or "public:private").
            max_length: Longest accepted piece; defaults to ACL settings.

        Returns:
            The parsed Scope.

        Raises:
            InvalidScopeError: If the text is empty or any piece is invalid.
        """
        scope, error = parse_scope(text, max_length=max_length)
        if error is not None:
            raise InvalidScopeError(
                detail=error.detail,
                extra={"scope": text, "errors": [e.detail for e in error]},
            )
        return scope


UNKNOWN_SCOPE: Final[Scope] = Scope(UNKNOWN_SCOPE_STR)


def _validate_piece(piece: str, max_length: int) -> Scope:
    if len(piece) > max_length:
        raise InvalidScopeError(
            detail=f"scope {piece[:32]!r}... exceeds {max_length} characters",
            extra={"scope": piece, "max_length": max_length},
        )
    return Scope(piece)


def parse_scope(
    text: str, *, max_length: int | None = None
) -> tuple[Scope, CompositeError | None]:
    """Parse colon-separated scope text.

    The text is trimmed; empty input yields UNKNOWN_SCOPE and an error.
    Each non-empty piece is trimmed and validated on its own. Valid pieces
    are combined in order; invalid pieces are folded into the returned
    error without stopping the rest.

    Args:
        text: Scope text.
        max_length: Longest accepted piece; defaults to ACL settings.

    Returns:
        Tuple of (combined scope, accumulated error or None).
    """
    if max_length is None:
        max_length = get_acl_settings().max_scope_length

    trimmed = text.strip()
    if not trimmed:
        return UNKNOWN_SCOPE, CompositeError.compose(
            None,
            InvalidScopeError(detail=f"unknownScope for {text!r}", extra={"scope": text}),
        )

    scope = Scope()
    error: CompositeError | None = None

    for raw in trimmed.split(SCOPE_SEPARATOR):
        piece = raw.strip()
        if not piece:
            continue
        try:
            scope = scope.combine(_validate_piece(piece, max_length))
        except InvalidScopeError as exc:
            error = CompositeError.compose(error, exc)

    if not scope.value:
        # Nothing but separators
        if error is None:
            error = CompositeError.compose(
                None,
                InvalidScopeError(detail=f"unknownScope for {text!r}", extra={"scope": text}),
            )
        return UNKNOWN_SCOPE, error

    return scope, error
