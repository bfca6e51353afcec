"""Custom exception classes for the ACL store."""

from __future__ import annotations

from typing import Any


class AclException(Exception):
    """Base ACL exception.

    All custom exceptions should inherit from this class. The fields
    mirror RFC 7807 Problem Details so a host application can surface
    them without translation.

    Attributes:
        detail: Human-readable error message.
        type: Error type identifier.
        title: Short, human-readable summary of the problem type.
        extra: Additional context-specific information about the error.

    Example:
            raise AclException(
            detail="Scope 'alice' is not registered",
            type="user-does-not-exist",
            extra={"scope": "alice"},
        )
    """

    default_title = "ACL Error"

    def __init__(
        self,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ACL exception.

        Args:
            detail: Human-readable error message.
            type: Error type identifier.
            title: Short summary of the problem type.
            extra: Additional context about the error.
        """
        self.detail = detail
        self.type = type
        self.title = title or self.default_title
        self.extra = extra or {}
        super().__init__(detail)


class InvalidScopeError(AclException):
    """Exception raised when a scope token fails parsing or validation.

    Example:
            raise InvalidScopeError(detail="unknownScope for ''", extra={"scope": ""})
    """

    default_title = "Invalid Scope"

    def __init__(
        self,
        detail: str,
        type: str = "invalid-scope",
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail=detail, type=type, extra=extra)


class InvalidPermissionError(AclException):
    """Exception raised when a permission token does not name a capability."""

    default_title = "Invalid Permission"

    def __init__(
        self,
        detail: str,
        type: str = "invalid-permission",
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail=detail, type=type, extra=extra)


class UserAlreadyExistsError(AclException):
    """Exception raised when registering a scope that is already registered."""

    default_title = "User Already Exists"

    def __init__(
        self,
        detail: str = "user already exists",
        type: str = "user-already-exists",
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail=detail, type=type, extra=extra)


class UserDoesNotExistError(AclException):
    """Exception raised when a scope has no entry in the store."""

    default_title = "User Does Not Exist"

    def __init__(
        self,
        detail: str = "user does not exist",
        type: str = "user-does-not-exist",
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail=detail, type=type, extra=extra)


class UninitializedAclError(AclException):
    """Exception raised when querying a store whose mapping was never created."""

    default_title = "Uninitialized ACL"

    def __init__(
        self,
        detail: str = "uninitialized ACL",
        type: str = "uninitialized-acl",
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail=detail, type=type, extra=extra)


class CompositeError(AclException):
    """Accumulated token-level failures from a lenient parse.

    Parsers fold every failure into one composite value and keep going,
    so callers get a best-effort result together with the full list of
    what could not be resolved.

    Example:
            err = CompositeError.compose(None, InvalidPermissionError("unknown permission 'x'"))
        err = CompositeError.compose(err, InvalidScopeError("unknownScope for ''"))
        assert len(err) == 2
    """

    default_title = "Composite Error"

    def __init__(self, errors: list[AclException] | None = None) -> None:
        """Initialize composite error.

        Args:
            errors: Errors already accumulated, in encounter order.
        """
        self.errors: list[AclException] = list(errors or [])
        super().__init__(
            detail=self._render(),
            type="composite-error",
            extra={"count": len(self.errors)},
        )

    @classmethod
    def compose(
        cls, existing: CompositeError | None, error: AclException
    ) -> CompositeError:
        """Fold ``error`` into ``existing``, creating the composite on first use.

        Nested composites are flattened so ``errors`` only ever holds leaf errors.

        Args:
            existing: Previously accumulated composite, or None.
            error: Error to append.

        Returns:
            The composite holding every error seen so far.
        """
        composite = existing if existing is not None else cls()
        if isinstance(error, CompositeError):
            composite.errors.extend(error.errors)
        else:
            composite.errors.append(error)
        composite._refresh()
        return composite

    def _render(self) -> str:
        return "\n".join(error.detail for error in self.errors)

    def _refresh(self) -> None:
        self.detail = self._render()
        self.extra["count"] = len(self.errors)
        self.args = (self.detail,)

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self):
        return iter(self.errors)
