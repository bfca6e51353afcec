"""Scope/permission ACL store with a textual rule language."""

from __future__ import annotations

from acl_store.core.acl import (
    AclStore,
    Permission,
    Permissioner,
    Scope,
    format_acl,
    parse_acl,
    parse_permission,
    parse_scope,
)
from acl_store.core.exceptions import (
    AclException,
    CompositeError,
    InvalidPermissionError,
    InvalidScopeError,
    UninitializedAclError,
    UserAlreadyExistsError,
    UserDoesNotExistError,
)

__all__ = [
    "AclException",
    "AclStore",
    "CompositeError",
    "InvalidPermissionError",
    "InvalidScopeError",
    "Permission",
    "Permissioner",
    "Scope",
    "UninitializedAclError",
    "UserAlreadyExistsError",
    "UserDoesNotExistError",
    "format_acl",
    "parse_acl",
    "parse_permission",
    "parse_scope",
]
