"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: cache clearing and environment isolation
    - Store Fixtures: empty and registered ACL stores
"""

from __future__ import annotations

from collections.abc import Generator

import pytest

from acl_store.core.acl import AclStore
from acl_store.core.settings import clear_all_caches

# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(
    monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory
) -> Generator[None, None, None]:
    """Keep every test independent of the developer's env and conf/ files."""
    empty_conf = tmp_path_factory.mktemp("conf")
    monkeypatch.setenv("ACL_CONFIG_DIR", str(empty_conf))
    monkeypatch.setenv("LOGGING_CONFIG_DIR", str(empty_conf))
    for var in (
        "ACL_NAME",
        "ACL_DEFAULT_TTL",
        "ACL_STRICT_PARSING",
        "ACL_MAX_SCOPE_LENGTH",
        "ACL_LOG_PARSE_ERRORS",
    ):
        monkeypatch.delenv(var, raising=False)
    clear_all_caches()
    yield
    clear_all_caches()


# ============================================================================
# Store Fixtures
# ============================================================================


@pytest.fixture
def uids() -> list[str]:
    """Six distinct principal identifiers."""
    from uuid import uuid4

    return [str(uuid4()) for _ in range(6)]


@pytest.fixture
def store() -> AclStore:
    """A zero-valued store with no mapping yet."""
    return AclStore()


@pytest.fixture
def registered_store() -> AclStore:
    """A store with one registered principal, "ingredient"."""
    acl = AclStore()
    acl.register_user("ingredient")
    return acl
