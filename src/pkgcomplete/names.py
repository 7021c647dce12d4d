"""npm package name helpers: query parsing, scoping, and validation."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import quote

_MAX_NAME_LENGTH = 214
_NAME_RE = re.compile(r"^(?:@([^/]+?)/)?([^/]+?)$")
# Characters encodeURIComponent leaves alone on top of quote()'s own safe set.
_URI_COMPONENT_SAFE = "!*'()"


@dataclass(frozen=True)
class ParsedQuery:
    namespace: str | None = None  # without the leading "@"
    prefix: str | None = None


def parse_query(query: str) -> ParsedQuery:
    """Split a completion query into an optional namespace and name prefix.

    ``"@scope/fo"`` -> namespace ``scope``, prefix ``fo``; ``"@scope"`` -> namespace
    only; anything else is a bare prefix.
    """
    namespace: str | None = None
    prefix: str | None = None

    if "/" in query:
        namespace, _, prefix = query.partition("/")
    elif query.startswith("@"):
        namespace = query
    else:
        prefix = query

    if namespace is not None:
        namespace = namespace.removeprefix("@")

    return ParsedQuery(namespace=namespace or None, prefix=prefix or None)


def split_package_name(name: str) -> tuple[str | None, str]:
    """``"@scope/pkg"`` -> ``("scope", "pkg")``; ``"pkg"`` -> ``(None, "pkg")``."""
    parsed = parse_query(name)
    return parsed.namespace, parsed.prefix or ""


def join_package_name(namespace: str | None, name: str) -> str:
    return f"@{namespace}/{name}" if namespace else name


def is_valid_package_name(name: str) -> bool:
    """Apply npm's naming rules so obviously bad names never reach the registry."""
    if not name or len(name) > _MAX_NAME_LENGTH or name.startswith(("_", ".")):
        return False
    match = _NAME_RE.match(name)
    if match is None:
        return False
    scope, package = match.groups()
    if scope and quote(scope, safe=_URI_COMPONENT_SAFE) != scope:
        return False
    return quote(package, safe=_URI_COMPONENT_SAFE) == package
