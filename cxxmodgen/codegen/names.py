"""Qualified-name splitting.

Declarations arrive with flat, fully-qualified names such as
``ns::detail::(anonymous namespace)::helper``. These helpers turn them into
scope paths for the namespace tree and back into references usable from any
scope.
"""

from collections.abc import Iterable

__all__ = (
    'ANONYMOUS_SCOPE_MARKERS',
    'SCOPE_SEPARATOR',
    'qualify',
    'split_qualified_name',
    'split_scope',
    'strip_template_arguments',
)

SCOPE_SEPARATOR = '::'

# Spellings front ends use for unnamed namespaces.
ANONYMOUS_SCOPE_MARKERS = frozenset({'(anonymous namespace)', '(anonymous)'})

ScopePath = tuple[str, ...]

OPERATOR_KEYWORD = 'operator'
# Characters of overloaded operator symbols such as <<, -> or <=>.
OPERATOR_SYMBOL_CHARS = frozenset('<>=!+-*/%^&|~,')


def _skip_operator_symbol(name: str, index: int) -> int:
    while index < len(name) and name[index] == ' ':
        index += 1
    for bracket_pair in ('()', '[]'):
        if name.startswith(bracket_pair, index):
            return index + len(bracket_pair)
    while index < len(name) and name[index] in OPERATOR_SYMBOL_CHARS:
        index += 1
    return index


def _split_components(qualified_name: str) -> list[str]:
    """Split on separators outside template arguments and parentheses."""
    parts = []
    depth = 0
    start = index = 0
    while index < len(qualified_name):
        if depth == 0 and qualified_name.startswith(SCOPE_SEPARATOR, index):
            parts.append(qualified_name[start:index])
            index += len(SCOPE_SEPARATOR)
            start = index
            continue
        if qualified_name.startswith(OPERATOR_KEYWORD, index) and not (
            qualified_name[start:index].strip()
        ):
            # operator symbols are not brackets
            index = _skip_operator_symbol(
                qualified_name, index + len(OPERATOR_KEYWORD)
            )
            continue
        char = qualified_name[index]
        if char in '<(':
            depth += 1
        elif char in '>)':
            depth = max(depth - 1, 0)
        index += 1
    parts.append(qualified_name[start:])
    return parts


def split_scope(qualified_name: str) -> ScopePath:
    """Split a qualified name into its components.

    Anonymous-scope markers are dropped so their contents hoist to the
    nearest named scope, as are the empty components left by a leading
    ``::``. Separators inside template arguments do not split, so
    ``std::hash<ns::Foo>`` has the components ``std`` and ``hash<ns::Foo>``.

    Raises:
        ValueError: If the name is blank or consists only of dropped parts.
    """
    if not qualified_name or not qualified_name.strip():
        raise ValueError('Qualified name cannot be empty')

    components = tuple(
        part.strip()
        for part in _split_components(qualified_name)
        if part.strip() and part.strip() not in ANONYMOUS_SCOPE_MARKERS
    )
    if not components:
        raise ValueError(f"Qualified name '{qualified_name}' names no symbol")
    return components


def split_qualified_name(qualified_name: str) -> tuple[ScopePath, str]:
    """Split a qualified name into its enclosing scope path and leaf name.

    Example:
        >>> split_qualified_name('::a::(anonymous namespace)::b::f')
        (('a', 'b'), 'f')
        >>> split_qualified_name('x')
        ((), 'x')
    """
    components = split_scope(qualified_name)
    return components[:-1], components[-1]


def qualify(components: Iterable[str]) -> str:
    """Render components as a globally qualified reference, e.g. ``::a::f``."""
    return ''.join(SCOPE_SEPARATOR + part for part in components)


def strip_template_arguments(name: str) -> str:
    """Drop a trailing template argument list, e.g. ``hash<ns::Foo>`` -> ``hash``.

    The symbol of an operator name such as ``operator>`` is kept.
    """
    search_from = 0
    if name.startswith(OPERATOR_KEYWORD):
        search_from = _skip_operator_symbol(name, len(OPERATOR_KEYWORD))
    open_index = name.find('<', search_from)
    if open_index <= 0 or not name.endswith('>'):
        return name
    return name[:open_index].rstrip()
