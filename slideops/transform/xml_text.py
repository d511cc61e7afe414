"""Format-preserving helpers for patching serialized XML text.

Nothing here parses the document into a tree. Matches are located with
regular expressions and a tag scanner that tracks nesting depth, and only
the located spans are rewritten; every other byte of the input is carried
through untouched.
"""

import re
from typing import Callable, Iterator

# A run text leaf: <a:t>...</a:t> (content never contains markup)
TEXT_LEAF = re.compile(r"(<a:t(?:\s[^>]*)?>)([^<]*)(</a:t>)")

# Any start, end or empty-element tag. Comments and CDATA sections are matched
# as a whole (with no tag name) so markup inside them is never counted.
# Declarations and processing instructions do not match.
_TAG = re.compile(
    r"<!--.*?-->"
    r"|<!\[CDATA\[.*?\]\]>"
    r"|<(/?)([A-Za-z_][\w.\-]*(?::[\w.\-]+)?)(?:\s[^>]*?)?(/?)>",
    re.DOTALL,
)

_ENTITY = re.compile(r"&(#x[0-9A-Fa-f]+|#[0-9]+|amp|lt|gt|quot|apos);")
_NAMED_ENTITIES = {"amp": "&", "lt": "<", "gt": ">", "quot": '"', "apos": "'"}


def escape_text(value: str) -> str:
    """Escape a string for use as XML character data."""
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def escape_attr(value: str) -> str:
    """Escape a string for use inside a double-quoted attribute value."""
    return value.replace("&", "&amp;").replace("<", "&lt;").replace('"', "&quot;")


def unescape_text(value: str) -> str:
    """Resolve the predefined XML entities and character references."""

    def resolve(match: re.Match) -> str:
        entity = match.group(1)
        if entity.startswith("#x"):
            return chr(int(entity[2:], 16))
        if entity.startswith("#"):
            return chr(int(entity[1:]))
        return _NAMED_ENTITIES[entity]

    return _ENTITY.sub(resolve, value)


def replace_text_leaves(xml: str, original: str, replacement: str) -> tuple[str, int]:
    """Replace the content of every ``<a:t>`` whose text equals ``original``.

    Comparison is on the unescaped text, so ``R&D`` matches ``R&amp;D``
    however the producer chose to escape it.

    Args:
        xml: Serialized XML.
        original: Exact literal text to match.
        replacement: New text (escaped on insertion).

    Returns:
        Tuple of (new XML, number of leaves replaced).
    """
    escaped = escape_text(replacement)
    count = 0

    def substitute(match: re.Match) -> str:
        nonlocal count
        if unescape_text(match.group(2)) != original:
            return match.group(0)
        count += 1
        return f"{match.group(1)}{escaped}{match.group(3)}"

    return TEXT_LEAF.sub(substitute, xml), count


def contains_text_leaf(fragment: str, text: str) -> bool:
    """Check whether a fragment has an ``<a:t>`` leaf with exactly ``text``."""
    return any(unescape_text(m.group(2)) == text for m in TEXT_LEAF.finditer(fragment))


def iter_element_spans(xml: str, name: str) -> Iterator[tuple[int, int]]:
    """Yield ``(start, end)`` of each outermost element named ``name``.

    Tags are scanned in order and the nesting depth of ``name`` is tracked;
    a span is emitted when the depth returns to zero. Unbalanced trailing
    start tags produce no span.

    Args:
        xml: Serialized XML.
        name: Qualified tag name, e.g. ``p:sp``.
    """
    depth = 0
    start = 0
    for match in _TAG.finditer(xml):
        if match.group(2) != name:
            continue
        closing, self_closing = match.group(1), match.group(3)
        if closing:
            if depth == 0:
                continue
            depth -= 1
            if depth == 0:
                yield start, match.end()
        elif self_closing:
            if depth == 0:
                yield match.start(), match.end()
        else:
            if depth == 0:
                start = match.start()
            depth += 1


def iter_child_spans(fragment: str) -> Iterator[tuple[str, int, int]]:
    """Yield ``(name, start, end)`` for each top-level element in a fragment.

    Args:
        fragment: Serialized element content (the body between a start tag
            and its end tag).
    """
    depth = 0
    start = 0
    current = ""
    for match in _TAG.finditer(fragment):
        closing, tag_name, self_closing = match.groups()
        if tag_name is None:
            continue
        if closing:
            depth -= 1
            if depth == 0:
                yield current, start, match.end()
            if depth < 0:
                return
        elif self_closing:
            if depth == 0:
                yield tag_name, match.start(), match.end()
        else:
            if depth == 0:
                current = tag_name
                start = match.start()
            depth += 1


def replace_child_elements(
    fragment: str,
    name: str,
    render: Callable[[str], str],
) -> tuple[str, int]:
    """Rewrite the top-level children named ``name`` inside a fragment.

    Args:
        fragment: Element body.
        name: Child tag name to rewrite.
        render: Called with the child's serialized text, returns its replacement.

    Returns:
        Tuple of (new fragment, number of children rewritten).
    """
    pieces: list[str] = []
    cursor = 0
    count = 0
    for tag_name, start, end in iter_child_spans(fragment):
        if tag_name != name:
            continue
        pieces.append(fragment[cursor:start])
        pieces.append(render(fragment[start:end]))
        cursor = end
        count += 1
    pieces.append(fragment[cursor:])
    return "".join(pieces), count


def set_attribute(tag_pattern: str, attribute: str, value: str) -> Callable[[str], tuple[str, int]]:
    """Build a patcher that overwrites an existing attribute on matching start tags.

    Tags that do not declare the attribute are left alone.

    Args:
        tag_pattern: Regex alternation of qualified tag names, e.g. ``a:latin|a:cs``.
        attribute: Attribute name.
        value: New, unescaped attribute value.

    Returns:
        Function mapping XML to (new XML, number of attributes rewritten).
    """
    pattern = re.compile(
        rf"(<(?:{tag_pattern})(?=[\s/>])[^>]*?\s{re.escape(attribute)}\s*=\s*)(\"[^\"]*\"|'[^']*')"
    )
    quoted = f'"{escape_attr(value)}"'

    def patch(xml: str) -> tuple[str, int]:
        return pattern.subn(lambda m: m.group(1) + quoted, xml)

    return patch
