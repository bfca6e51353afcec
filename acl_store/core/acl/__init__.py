"""In-process ACL bookkeeping.

Stores, for each principal ("scope"), the set of permissions it holds.
Enforcement and persistence are left to the host application; this
package only answers "is this scope registered, and which of these
permissions does it hold?".

Components:
    Permission Codec:
        - Permission: IntFlag with one bit per capability
        - parse_permission / format_permission: "read|write" <-> bits
        - Permissioner: set/unset/was_set helper for one unit permission

    Scope Codec:
        - Scope: validated principal identifier
        - parse_scope: lenient colon-separated scope parsing

    Rule Language:
        - parse_rules: rule text -> scope/permission mapping
        - format_rules: mapping -> canonical rule text

    Store:
        - AclStore: lock-guarded register/deregister/insert/remove/check
        - parse_acl: build a store from rule text, keeping partial results
        - format_acl: canonical text for a store (or "[nil]")

Rule Syntax:
    - One rule per line
    - ":" separates scope segments within a rule
    - "-" separates a scope from its permission list
    - "|" separates permissions within a list

Example:
    >>> from acl_store.core.acl import AclStore, Permission
    >>>
    >>> store = AclStore.from_text("private-execute:public-read|write")
    >>> store.check("public", Permission.READ, Permission.DELETE)
    ([<Permission.READ: 4>], [<Permission.DELETE: 32>])
    >>> print(store)
    private-execute
    public-read|write
"""

from __future__ import annotations

from acl_store.core.acl.constants import (
    NIL_ACL_REPR,
    PERMISSION_DELIMITER,
    PERMISSION_SEPARATOR,
    RULE_SEPARATOR,
    SCOPE_DELIMITER,
    SCOPE_SEPARATOR,
)
from acl_store.core.acl.permission import (
    DELETE_PERMISSIONER,
    EXECUTE_PERMISSIONER,
    LIST_PERMISSIONER,
    NONE_PERMISSIONER,
    READ_PERMISSIONER,
    WRITE_PERMISSIONER,
    Permission,
    Permissioner,
    cleared_or_lone_permission,
    decompose_permission,
    format_permission,
    parse_permission,
    resolve_permission,
    unit_permissioner,
)
from acl_store.core.acl.rules import RulesMap, format_rules, parse_rules
from acl_store.core.acl.scope import UNKNOWN_SCOPE, Scope, parse_scope
from acl_store.core.acl.store import AclStore, format_acl, parse_acl

__all__ = [
    "DELETE_PERMISSIONER",
    "EXECUTE_PERMISSIONER",
    "LIST_PERMISSIONER",
    "NIL_ACL_REPR",
    "NONE_PERMISSIONER",
    "PERMISSION_DELIMITER",
    "PERMISSION_SEPARATOR",
    "READ_PERMISSIONER",
    "RULE_SEPARATOR",
    "SCOPE_DELIMITER",
    "SCOPE_SEPARATOR",
    "UNKNOWN_SCOPE",
    "WRITE_PERMISSIONER",
    "AclStore",
    "Permission",
    "Permissioner",
    "RulesMap",
    "Scope",
    "cleared_or_lone_permission",
    "decompose_permission",
    "format_acl",
    "format_permission",
    "format_rules",
    "parse_acl",
    "parse_permission",
    "parse_rules",
    "parse_scope",
    "resolve_permission",
    "unit_permissioner",
]
