"""Rule-language parser and canonical serializer.

Grammar (informal):
    text     := rule ("\\n" rule)*
    rule     := segment (":" segment)*
    segment  := scope ("-" perms)*
    perms    := name ("|" name)*

Every colon-delimited segment stands on its own: its first "-" token is
the scope and the remaining "-" tokens are permission lists unioned into
that scope's set. So in ``public:private-read|write`` only ``private``
receives read and write; ``public`` is registered with no permissions.

Parsing is lenient. A segment whose scope fails is skipped, an unknown
permission name is dropped, and every failure is folded into one
CompositeError returned next to the rules that did resolve.

Serialization is canonical: lines are sorted by scope text and the
permission names within a line are sorted too, so equal mappings always
produce identical text.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeAlias

from acl_store.core.acl.constants import (
    PERMISSION_DELIMITER,
    PERMISSION_SEPARATOR,
    RULE_SEPARATOR,
    SCOPE_DELIMITER,
)
from acl_store.core.acl.permission import (
    Permission,
    decompose_permission,
    parse_permission,
)
from acl_store.core.acl.scope import Scope, parse_scope
from acl_store.core.exceptions import (
    CompositeError,
    InvalidPermissionError,
    InvalidScopeError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

__all__ = ["RulesMap", "format_rules", "parse_rules"]

logger = logging.getLogger(__name__)

RulesMap: TypeAlias = dict[Scope, set[Permission]]


def parse_rules(
    text: str, *, max_scope_length: int | None = None
) -> tuple[RulesMap, CompositeError | None]:
    """Parse rule text into a scope -> permission-set mapping.

    Resolved permission tokens are split into unit capabilities before
    being added, so "read|write" contributes READ and WRITE separately.

    Args:
        text: Rule text, possibly empty.
        max_scope_length: Longest accepted scope piece; defaults to ACL settings.

    Returns:
        Tuple of (mapping, accumulated error or None). The mapping holds
        everything that resolved even when the error is set.

    Example:
        >>> rules, error = parse_rules("public:private-read|write")
        >>> sorted(str(scope) for scope in rules)
        ['private', 'public']
        >>> error is None
        True
    """
    rules: RulesMap = {}
    error: CompositeError | None = None

    for raw_rule in text.split(RULE_SEPARATOR):
        rule = raw_rule.strip()
        if not rule:
            continue

        for raw_segment in rule.split(SCOPE_DELIMITER):
            segment = raw_segment.strip()
            if not segment:
                continue

            scope_text, *permission_texts = segment.split(PERMISSION_DELIMITER)

            scope, scope_error = parse_scope(scope_text, max_length=max_scope_length)
            if scope_error is not None:
                error = CompositeError.compose(
                    error,
                    InvalidScopeError(
                        detail=f"scope {scope_text!r}: {scope_error.detail}",
                        extra={"scope": scope_text, "rule": rule},
                    ),
                )
                continue

            permissions = rules.setdefault(scope, set())

            for permission_text in permission_texts:
                if not permission_text.strip():
                    continue
                permission, permission_error = parse_permission(permission_text)
                if permission_error is not None:
                    error = CompositeError.compose(
                        error,
                        InvalidPermissionError(
                            detail=f"permission {permission_text!r}: {permission_error.detail}",
                            extra={"permission": permission_text, "scope": str(scope)},
                        ),
                    )
                permissions.update(decompose_permission(permission))

    logger.debug(
        "Parsed ACL rules",
        extra={"scope_count": len(rules), "error_count": len(error) if error else 0},
    )
    return rules, error


def format_rules(rules: Mapping[Scope, Iterable[Permission]]) -> str:
    """Render a scope -> permissions mapping as canonical rule text.

    A scope with no permissions renders as the bare scope text. An empty
    mapping renders as an empty string.
    """
    lines: dict[str, str] = {}

    for scope, permissions in rules.items():
        scope_text = str(scope)
        names = sorted(str(permission) for permission in permissions)
        if names:
            lines[scope_text] = (
                f"{scope_text}{PERMISSION_DELIMITER}{PERMISSION_SEPARATOR.join(names)}"
            )
        else:
            lines[scope_text] = scope_text

    return RULE_SEPARATOR.join(lines[key] for key in sorted(lines))
