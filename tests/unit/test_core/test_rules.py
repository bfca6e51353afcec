"""Unit tests for the rule-language parser and serializer."""

from __future__ import annotations

import pytest

from acl_store.core.acl.permission import Permission
from acl_store.core.acl.rules import format_rules, parse_rules
from acl_store.core.acl.scope import Scope
from acl_store.core.exceptions import InvalidPermissionError, InvalidScopeError


@pytest.mark.unit
class TestParseRules:
    """Tests for parse_rules."""

    @pytest.mark.parametrize(
        ("text", "scope_count"),
        [
            (":::private-execute:organization:organization", 2),
            (
                "public:::private-write|read|execute:private-execute||||||read:private:public-------------",
                2,
            ),
            ("public:organization:private:group:group-execute|read|write:::::::::::", 4),
            (
                "fd0389bf928e4fa4a70696ab85552f11:::private-write|read|execute"
                ":private-execute||||||read:private:public-------------",
                3,
            ),
            ("exampleorg.com-execute:organization:organization", 2),
            ("11083811380-execute|read|write", 1),
        ],
    )
    def test_groups_segments_by_scope(self, text: str, scope_count: int) -> None:
        rules, error = parse_rules(text)
        assert error is None
        assert len(rules) == scope_count

    def test_permissions_attach_to_their_own_segment(self) -> None:
        rules, error = parse_rules("public:group-execute|read|write")
        assert error is None
        assert rules[Scope("public")] == set()
        assert rules[Scope("group")] == {Permission.EXECUTE, Permission.READ, Permission.WRITE}

    def test_repeated_scope_unions_permissions(self) -> None:
        rules, _ = parse_rules("private-execute:private-read\nprivate-read|delete")
        assert rules == {Scope("private"): {Permission.EXECUTE, Permission.READ, Permission.DELETE}}

    def test_multiple_permission_groups_in_one_segment(self) -> None:
        rules, error = parse_rules("alice-read-write|list")
        assert error is None
        assert rules[Scope("alice")] == {Permission.READ, Permission.WRITE, Permission.LIST}

    def test_none_token_adds_nothing(self) -> None:
        rules, error = parse_rules("alice-none")
        assert error is None
        assert rules[Scope("alice")] == set()

    @pytest.mark.parametrize("text", ["", "\n\n", "  \n :: \n"])
    def test_blank_text_is_empty_mapping(self, text: str) -> None:
        assert parse_rules(text) == ({}, None)

    def test_handles_crlf_lines(self) -> None:
        rules, error = parse_rules("alice-read\r\nbob-write\r\n")
        assert error is None
        assert rules == {Scope("alice"): {Permission.READ}, Scope("bob"): {Permission.WRITE}}

    def test_unknown_permission_keeps_scope_and_errors(self) -> None:
        rules, error = parse_rules("private-executex:organization-user:organization:user")
        assert set(rules) == {Scope("private"), Scope("organization"), Scope("user")}
        assert rules[Scope("private")] == set()
        assert error is not None
        assert len(error) == 2
        assert all(isinstance(e, InvalidPermissionError) for e in error)

    def test_partial_permission_list_keeps_resolved_names(self) -> None:
        rules, error = parse_rules("public-w|read|x:private-exec:private-------------xm:pub")
        assert rules[Scope("public")] == {Permission.READ}
        assert Scope("pub") in rules
        assert error is not None
        assert len(error) == 3

    def test_unresolvable_scope_is_skipped(self) -> None:
        rules, error = parse_rules("alice-read:" + "y" * 12 + "-write", max_scope_length=8)
        assert rules == {Scope("alice"): {Permission.READ}}
        assert error is not None
        assert isinstance(error.errors[0], InvalidScopeError)

    def test_segment_with_empty_scope_is_skipped(self) -> None:
        rules, error = parse_rules("-read:alice-write")
        assert rules == {Scope("alice"): {Permission.WRITE}}
        assert error is not None


@pytest.mark.unit
class TestFormatRules:
    """Tests for format_rules."""

    def test_empty_mapping(self) -> None:
        assert format_rules({}) == ""

    def test_bare_scope(self) -> None:
        assert format_rules({Scope("public"): set()}) == "public"

    def test_lines_and_names_are_sorted(self) -> None:
        mapping = {
            Scope("public"): {Permission.WRITE, Permission.READ, Permission.EXECUTE},
            Scope("private"): {Permission.EXECUTE},
        }
        assert format_rules(mapping) == "private-execute\npublic-execute|read|write"

    @pytest.mark.parametrize(
        "text",
        [
            "private-execute:organization:organization:public-read|write|execute|list",
            "public-write|read|execute:private-execute:private:public",
            "public:organization:private:group:group-execute|read|write:::::::::::::::",
        ],
    )
    def test_serialized_text_reparses_to_same_mapping(self, text: str) -> None:
        rules, error = parse_rules(text)
        assert error is None

        rendered = format_rules(rules)
        assert rendered

        reparsed, reparse_error = parse_rules(rendered)
        assert reparse_error is None
        assert reparsed == rules
        assert format_rules(reparsed) == rendered
