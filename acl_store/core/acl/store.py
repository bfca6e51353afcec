"""Thread-safe ACL store.

The store maps each registered Scope to the set of Permission values it
holds. A scope present in the mapping is registered, even with an empty
set; an absent scope is unregistered.

Design decisions:
- One store-wide lock guards every read and write, so operations on a
  store are linearizable. There is no per-scope or reader/writer locking.
- A store built with ``AclStore()`` has no mapping until the first
  ``register_user``; queries against it report UninitializedAclError.
- Stores built from rule text are populated before they are shared and
  need no locking while parsing.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING
from uuid import uuid4

from acl_store.core.acl.constants import NIL_ACL_REPR
from acl_store.core.acl.rules import RulesMap, format_rules, parse_rules
from acl_store.core.acl.scope import Scope
from acl_store.core.exceptions import (
    InvalidScopeError,
    UninitializedAclError,
    UserAlreadyExistsError,
    UserDoesNotExistError,
)
from acl_store.core.settings import get_acl_settings

if TYPE_CHECKING:
    from collections.abc import Callable

    from acl_store.core.acl.permission import Permission
    from acl_store.core.exceptions import CompositeError

__all__ = ["AclStore", "format_acl", "parse_acl"]

logger = logging.getLogger(__name__)


def _new_uuid() -> str:
    return str(uuid4())


class AclStore:
    """Concurrency-safe scope -> permission-set container.

    Every public operation holds the store lock for its whole body and
    releases it on every exit path, including errors.

    Registered ids are kept verbatim. An id containing a rule-language
    separator ("-", "|" or a line break) is stored and queried normally,
    but ``str(store)`` renders it in a form that parses back differently:
    "user-3" reads back as scope "user" with an unknown permission "3".

    Example:
        >>> store = AclStore()
        >>> store.register_user("alice")
        >>> store.insert("alice", Permission.READ, Permission.WRITE)
        [<Permission.READ: 4>, <Permission.WRITE: 8>]
        >>> store.check("alice", Permission.WRITE, Permission.DELETE)
        ([<Permission.WRITE: 8>], [<Permission.DELETE: 32>])
        >>> str(store)
        'alice-read|write'

    Attributes:
        name: Free-form label.
        uuid: Opaque identifier assigned at construction.
        ttl: Time-to-live in seconds. Stored and reported, never enforced.
        parse_error: Errors accumulated when the store was built from text.
    """

    def __init__(
        self,
        *,
        name: str | None = None,
        ttl: int | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        """Initialize an empty, uninitialized store.

        Args:
            name: Store label (defaults to ACL settings).
            ttl: Informational TTL in seconds (defaults to ACL settings).
            id_factory: Callable producing the store uuid (defaults to UUID4).
        """
        settings = get_acl_settings()
        self.name = settings.name if name is None else name
        self.ttl = settings.default_ttl if ttl is None else ttl
        self.uuid = (id_factory or _new_uuid)()
        self.parse_error: CompositeError | None = None

        self._rules: RulesMap | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        strict: bool | None = None,
        name: str | None = None,
        ttl: int | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> AclStore:
        """Build a store from rule text.

        In lenient mode (the default) unresolved tokens are kept on
        ``parse_error`` and the partially populated store is returned.

        Args:
            text: Rule text.
            strict: Raise instead of keeping errors (defaults to ACL settings).
            name: Store label.
            ttl: Informational TTL in seconds.
            id_factory: Callable producing the store uuid.

        Returns:
            The populated store.

        Raises:
            CompositeError: In strict mode, if any token failed to resolve.
        """
        store, error = parse_acl(text, name=name, ttl=ttl, id_factory=id_factory)
        if strict is None:
            strict = get_acl_settings().strict_parsing
        if strict and error is not None:
            raise error
        return store

    # =========================================================================
    # Registration
    # =========================================================================

    def register_user(self, user_id: str) -> None:
        """Register a principal with an empty permission set.

        Raises:
            InvalidScopeError: If ``user_id`` is not a valid scope.
            UserAlreadyExistsError: If the scope is already registered.
        """
        with self._lock:
            scope = Scope.from_string(user_id)

            if self._rules is None:
                self._rules = {}

            if scope in self._rules:
                raise UserAlreadyExistsError(extra={"scope": str(scope)})

            self._rules[scope] = set()

        logger.debug(
            "Registered ACL scope",
            extra={"acl_uuid": self.uuid, "scope": str(scope)},
        )

    def deregister_user(self, user_id: str) -> None:
        """Remove a principal and all of its permissions.

        Raises:
            UninitializedAclError: If nothing was ever registered.
            InvalidScopeError: If ``user_id`` is not a valid scope.
            UserDoesNotExistError: If the scope is not registered.
        """
        with self._lock:
            if self._rules is None:
                raise UninitializedAclError()

            scope = Scope.from_string(user_id)

            if scope not in self._rules:
                raise UserDoesNotExistError(extra={"scope": str(scope)})

            del self._rules[scope]

        logger.debug(
            "Deregistered ACL scope",
            extra={"acl_uuid": self.uuid, "scope": str(scope)},
        )

    # =========================================================================
    # Permissions
    # =========================================================================

    def insert(self, user_id: str, *permissions: Permission) -> list[Permission]:
        """Grant permissions to a registered principal.

        Each permission is attempted independently. Permissions the scope
        already holds are left out of the result without raising.

        Args:
            user_id: Registered principal.
            *permissions: Permissions to grant.

        Returns:
            Permissions newly added by this call, in request order.

        Raises:
            InvalidScopeError: If ``user_id`` is not a valid scope.
            UserDoesNotExistError: If the scope is not registered.
        """
        added: list[Permission] = []

        with self._lock:
            scope, held = self._lookup(user_id)
            for permission in permissions:
                if permission not in held:
                    held.add(permission)
                    added.append(permission)

        logger.debug(
            "Inserted ACL permissions",
            extra={
                "acl_uuid": self.uuid,
                "scope": str(scope),
                "permissions": [str(p) for p in added],
            },
        )
        return added

    def remove(
        self, user_id: str, *permissions: Permission
    ) -> tuple[list[Permission], list[Permission]]:
        """Revoke permissions from a registered principal.

        A permission is classified as removed if it was held, or if an
        earlier occurrence in the same call already removed it. Anything
        else is classified as not removed.

        Args:
            user_id: Registered principal.
            *permissions: Permissions to revoke.

        Returns:
            Tuple of (removed, not_removed), each in request order.

        Raises:
            InvalidScopeError: If ``user_id`` is not a valid scope.
            UserDoesNotExistError: If the scope is not registered.
        """
        removed: list[Permission] = []
        not_removed: list[Permission] = []

        with self._lock:
            scope, held = self._lookup(user_id)
            removed_this_call: set[Permission] = set()

            for permission in permissions:
                if permission in held:
                    held.discard(permission)
                    removed_this_call.add(permission)
                    removed.append(permission)
                elif permission in removed_this_call:
                    removed.append(permission)
                else:
                    not_removed.append(permission)

        logger.debug(
            "Removed ACL permissions",
            extra={
                "acl_uuid": self.uuid,
                "scope": str(scope),
                "permissions": [str(p) for p in removed],
            },
        )
        return removed, not_removed

    def check(
        self, user_id: str, *permissions: Permission
    ) -> tuple[list[Permission], list[Permission]]:
        """Partition permissions by whether the principal holds them.

        Args:
            user_id: Registered principal.
            *permissions: Permissions to test.

        Returns:
            Tuple of (was_set, not_set), each in request order.

        Raises:
            UninitializedAclError: If nothing was ever registered.
            InvalidScopeError: If ``user_id`` is not a valid scope.
            UserDoesNotExistError: If the scope is not registered.
        """
        was_set: list[Permission] = []
        not_set: list[Permission] = []

        with self._lock:
            if self._rules is None:
                raise UninitializedAclError()

            _, held = self._lookup(user_id)
            for permission in permissions:
                if permission in held:
                    was_set.append(permission)
                else:
                    not_set.append(permission)

        return was_set, not_set

    # =========================================================================
    # Introspection
    # =========================================================================

    @property
    def is_initialized(self) -> bool:
        """Whether the mapping has been created."""
        with self._lock:
            return self._rules is not None

    def snapshot(self) -> dict[Scope, frozenset[Permission]]:
        """Return an immutable copy of the current mapping."""
        with self._lock:
            if self._rules is None:
                return {}
            return {scope: frozenset(held) for scope, held in self._rules.items()}

    def __contains__(self, user_id: object) -> bool:
        if not isinstance(user_id, str | Scope):
            return False
        with self._lock:
            if self._rules is None:
                return False
            if isinstance(user_id, Scope):
                return user_id in self._rules
            try:
                return Scope.from_string(user_id) in self._rules
            except InvalidScopeError:
                return False

    def __len__(self) -> int:
        with self._lock:
            return len(self._rules) if self._rules is not None else 0

    def __str__(self) -> str:
        with self._lock:
            if not self._rules:
                return ""
            return format_rules(self._rules)

    def __repr__(self) -> str:
        return f"AclStore(uuid={self.uuid!r}, name={self.name!r}, scopes={len(self)})"

    def _lookup(self, user_id: str) -> tuple[Scope, set[Permission]]:
        """Resolve a principal to its live permission set. Caller holds the lock."""
        scope = Scope.from_string(user_id)
        if self._rules is None or scope not in self._rules:
            logger.debug(
                "ACL scope lookup miss",
                extra={"acl_uuid": self.uuid, "scope": str(scope)},
            )
            raise UserDoesNotExistError(
                detail=f"no such userId {user_id!r} found",
                extra={"scope": str(scope)},
            )
        return scope, self._rules[scope]


def parse_acl(
    text: str,
    *,
    name: str | None = None,
    ttl: int | None = None,
    id_factory: Callable[[], str] | None = None,
) -> tuple[AclStore, CompositeError | None]:
    """Build a store from rule text, keeping partial results.

    The returned store is always populated with whatever resolved, and
    always initialized, even for empty text.

    Args:
        text: Rule text.
        name: Store label.
        ttl: Informational TTL in seconds.
        id_factory: Callable producing the store uuid.

    Returns:
        Tuple of (store, accumulated error or None).

    Example:
        >>> store, error = parse_acl("private-executex:organization")
        >>> len(store), str(error)
        (2, "permission 'executex': unknown permission 'executex'")
    """
    settings = get_acl_settings()
    store = AclStore(name=name, ttl=ttl, id_factory=id_factory)

    rules, error = parse_rules(text, max_scope_length=settings.max_scope_length)
    store._rules = rules
    store.parse_error = error

    if error is not None and settings.log_parse_errors:
        logger.warning(
            "ACL rule text contained %d unresolved token(s)",
            len(error),
            extra={"acl_uuid": store.uuid, "errors": [e.detail for e in error]},
        )

    return store, error


def format_acl(store: AclStore | None) -> str:
    """Render a store as canonical rule text; None renders as "[nil]"."""
    if store is None:
        return NIL_ACL_REPR
    return str(store)
