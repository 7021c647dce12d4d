"""Unit tests for pkgcomplete.names."""

from __future__ import annotations

import pytest

from pkgcomplete.names import (
    ParsedQuery,
    is_valid_package_name,
    join_package_name,
    parse_query,
    split_package_name,
)


class TestParseQuery:
    def test_scoped_with_prefix(self) -> None:
        assert parse_query("@scope1/fo") == ParsedQuery(namespace="scope1", prefix="fo")

    def test_scoped_with_trailing_slash(self) -> None:
        assert parse_query("@scope1/") == ParsedQuery(namespace="scope1", prefix=None)

    def test_namespace_only(self) -> None:
        assert parse_query("@scope1") == ParsedQuery(namespace="scope1", prefix=None)

    def test_bare_prefix(self) -> None:
        assert parse_query("foo") == ParsedQuery(namespace=None, prefix="foo")

    def test_empty(self) -> None:
        assert parse_query("") == ParsedQuery()

    def test_lone_at(self) -> None:
        assert parse_query("@") == ParsedQuery()


class TestNameHelpers:
    def test_split_scoped(self) -> None:
        assert split_package_name("@scope1/foo") == ("scope1", "foo")

    def test_split_unscoped(self) -> None:
        assert split_package_name("foo") == (None, "foo")

    def test_join_scoped(self) -> None:
        assert join_package_name("scope1", "foo") == "@scope1/foo"

    def test_join_unscoped(self) -> None:
        assert join_package_name(None, "foo") == "foo"


class TestIsValidPackageName:
    @pytest.mark.parametrize(
        "name",
        ["foo", "foo-bar", "foo.js", "@scope/foo", "@my-org/pkg_name", "a" * 214],
    )
    def test_valid(self, name: str) -> None:
        assert is_valid_package_name(name)

    @pytest.mark.parametrize(
        "name",
        [
            "",
            "a" * 215,
            ".hidden",
            "_private",
            "@scope",
            "@scope/",
            "a/b",
            "@scope/a/b",
            "foo bar",
            "@sc ope/foo",
        ],
    )
    def test_invalid(self, name: str) -> None:
        assert not is_valid_package_name(name)
