"""Built-in content filters applied to asset sources."""

import re
from collections.abc import Callable

from ..errors import ResolutionError

Filter = Callable[[str], str]

_BLANK_RUN = re.compile(r"\n{3,}")


def strip_trailing_whitespace(content: str) -> str:
    """Remove trailing whitespace from every line."""
    return "\n".join(line.rstrip() for line in content.split("\n"))


def squeeze_blank_lines(content: str) -> str:
    """Collapse runs of blank lines into a single blank line."""
    return _BLANK_RUN.sub("\n\n", content)


FILTERS: dict[str, Filter] = {
    "strip": strip_trailing_whitespace,
    "squeeze": squeeze_blank_lines,
}


def resolve_filters(names: list[str]) -> list[Filter]:
    """Look up filters by name.

    Raises:
        ResolutionError: If a filter name is unknown
    """
    resolved = []
    for name in names:
        if name not in FILTERS:
            known = ", ".join(sorted(FILTERS))
            raise ResolutionError(f"Unknown filter '{name}' (known filters: {known})")
        resolved.append(FILTERS[name])
    return resolved


def apply_filters(content: bytes, filters: list[Filter]) -> bytes:
    """Run ``content`` through ``filters`` in order."""
    if not filters:
        return content
    text = content.decode("utf-8")
    for fn in filters:
        text = fn(text)
    return text.encode("utf-8")
