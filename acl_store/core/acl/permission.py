"""Permission bit-field and its string codec.

A Permission is an unsigned bit-field. Every named capability owns exactly
one bit, except NONE which is the zero value:

    >>> str(Permission.READ | Permission.WRITE)
    'read|write'
    >>> parse_permission("write | read")
    (<Permission.READ|WRITE: 12>, None)

Rendering walks the set bits from the lowest upward, so the text form is
independent of the order the bits were combined in. Bits with no name
render as "unknown" instead of failing.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import KEEP, IntFlag
from typing import Final

from acl_store.core.acl.constants import PERMISSION_SEPARATOR, UNKNOWN_PERMISSION_STR
from acl_store.core.exceptions import CompositeError, InvalidPermissionError

__all__ = [
    "DELETE_PERMISSIONER",
    "EXECUTE_PERMISSIONER",
    "LIST_PERMISSIONER",
    "NONE_PERMISSIONER",
    "READ_PERMISSIONER",
    "WRITE_PERMISSIONER",
    "Permission",
    "Permissioner",
    "cleared_or_lone_permission",
    "decompose_permission",
    "format_permission",
    "parse_permission",
    "resolve_permission",
    "unit_permissioner",
]


class Permission(IntFlag, boundary=KEEP):
    """Combinable capability bits.

    Values can be combined using bitwise OR; unnamed bits are kept so a
    value read back from storage never loses information.

    Bit 0 is unassigned.
    """

    NONE = 0
    LIST = 1 << 1
    READ = 1 << 2
    WRITE = 1 << 3
    EXECUTE = 1 << 4
    DELETE = 1 << 5

    def __str__(self) -> str:
        return format_permission(self)

    def __format__(self, format_spec: str) -> str:
        return format(str(self), format_spec)


# Read-only after import
_PERMISSION_NAMES: Final[dict[int, str]] = {
    Permission.NONE: "none",
    Permission.LIST: "list",
    Permission.READ: "read",
    Permission.WRITE: "write",
    Permission.EXECUTE: "execute",
    Permission.DELETE: "delete",
}

_NAME_PERMISSIONS: Final[dict[str, Permission]] = {
    name: Permission(value) for value, name in _PERMISSION_NAMES.items()
}


def resolve_permission(name: str) -> Permission:
    """Resolve a single capability name.

    Args:
        name: Capability name, already trimmed (e.g., "read").

    Returns:
        The unit Permission for the name.

    Raises:
        InvalidPermissionError: If the name is not in the name table.
    """
    try:
        return _NAME_PERMISSIONS[name]
    except KeyError:
        raise InvalidPermissionError(
            detail=f"unknown permission {name!r}",
            extra={"permission": name},
        ) from None


def parse_permission(text: str) -> tuple[Permission, CompositeError | None]:
    """Parse pipe-separated capability names into one Permission.

    Tokens are trimmed and empty tokens are skipped. Unknown tokens are
    folded into the returned error without stopping the remaining tokens
    from resolving.

    Args:
        text: Text such as "read|write".

    Returns:
        Tuple of (OR of every resolved token, accumulated error or None).
        When no token resolves the Permission is NONE.

    Example:
        >>> permission, error = parse_permission("read|bogus|write")
        >>> str(permission), str(error)
        ('read|write', "unknown permission 'bogus'")
    """
    permission = Permission.NONE
    error: CompositeError | None = None

    for raw in text.split(PERMISSION_SEPARATOR):
        token = raw.strip()
        if not token:
            continue
        try:
            permission |= resolve_permission(token)
        except InvalidPermissionError as exc:
            error = CompositeError.compose(error, exc)

    return permission, error


def format_permission(permission: int) -> str:
    """Render a Permission as pipe-separated names, lowest bit first.

    NONE renders as "none"; unnamed bits render as "unknown".
    """
    value = int(permission)
    if value == 0:
        return _PERMISSION_NAMES[Permission.NONE]

    sections: list[str] = []
    bit = 1
    while bit <= value:
        if value & bit:
            sections.append(_PERMISSION_NAMES.get(bit, UNKNOWN_PERMISSION_STR))
        bit <<= 1

    return PERMISSION_SEPARATOR.join(sections)


def decompose_permission(permission: int) -> list[Permission]:
    """Split a Permission into its unit bits, lowest first.

    NONE decomposes to an empty list.
    """
    value = int(permission)
    units: list[Permission] = []
    bit = 1
    while bit <= value:
        if value & bit:
            units.append(Permission(bit))
        bit <<= 1
    return units


def cleared_or_lone_permission(permission: int) -> bool:
    """Return True if ``permission`` is zero or has exactly one bit set."""
    value = int(permission)
    return value == 0 or (value & (value - 1)) == 0


# =============================================================================
# Unit permission togglers
# =============================================================================


@dataclass(frozen=True, slots=True)
class Permissioner:
    """Set, unset and test one unit permission on a bit-field.

    Only NONE or a single capability bit may be captured. Anything else is
    a programming error and fails with AssertionError at construction; this
    is not an input-validation path.

    Example:
        >>> READ_PERMISSIONER.set(Permission.WRITE)
        <Permission.READ|WRITE: 12>
        >>> READ_PERMISSIONER.was_set(Permission.WRITE)
        False
    """

    unit: Permission

    def __post_init__(self) -> None:
        if not cleared_or_lone_permission(self.unit):
            raise AssertionError(
                "either the zeroth or only one bit has to be set, uniquely"
            )

    def set(self, current: Permission) -> Permission:
        """Return ``current`` with the unit bit set."""
        return Permission(int(current) | int(self.unit))

    def unset(self, current: Permission) -> Permission:
        """Return ``current`` with the unit bit cleared."""
        return Permission(int(current) & ~int(self.unit))

    def was_set(self, current: Permission) -> bool:
        """Return True if the unit bit is set in ``current``."""
        return (int(self.unit) & int(current)) != 0


def unit_permissioner(permission: Permission) -> Permissioner:
    """Build a Permissioner for a unit permission.

    Raises:
        AssertionError: If more than one bit is set.
    """
    return Permissioner(Permission(permission))


NONE_PERMISSIONER: Final[Permissioner] = unit_permissioner(Permission.NONE)
LIST_PERMISSIONER: Final[Permissioner] = unit_permissioner(Permission.LIST)
READ_PERMISSIONER: Final[Permissioner] = unit_permissioner(Permission.READ)
WRITE_PERMISSIONER: Final[Permissioner] = unit_permissioner(Permission.WRITE)
EXECUTE_PERMISSIONER: Final[Permissioner] = unit_permissioner(Permission.EXECUTE)
DELETE_PERMISSIONER: Final[Permissioner] = unit_permissioner(Permission.DELETE)
