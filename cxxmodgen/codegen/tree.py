"""Namespace tree structure for organizing statements by scope.

This module provides the NamespaceTree dataclass, which rebuilds the C++
namespace hierarchy from flat scope paths and renders it back as nested
``namespace`` blocks.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

EXPORT_PREFIX = 'export '


@dataclass
class NamespaceTree:
    """Tree structure representing a namespace hierarchy.

    Each node holds the statements declared directly in its namespace and its
    child namespaces. The root node has an empty name and stands for global
    scope. A scope path maps to exactly one node, reached by walking the
    children from the root.

    Statements are kept in a set, so inserting the same text twice is a
    no-op. Rendering sorts statements and child namespaces, which keeps the
    output identical across runs whatever order declarations arrived in.

    Attributes:
        name: The namespace name of this node ('' for the global scope).
        statements: Statements placed directly in this namespace.
        children: Child namespaces keyed by their simple name.
    """

    name: str = ''
    statements: set[str] = field(default_factory=set)
    children: dict[str, NamespaceTree] = field(default_factory=dict)

    def get_or_create(self, path: Sequence[str]) -> NamespaceTree:
        """Walk to the node at ``path``, creating missing nodes on the way.

        Args:
            path: Namespace components, e.g. ``('ns', 'detail')``.

        Returns:
            The node for the last component, or this node for an empty path.
        """
        current = self
        for part in path:
            if part not in current.children:
                current.children[part] = NamespaceTree(name=part)
            current = current.children[part]
        return current

    def insert(self, path: Sequence[str], statement: str) -> bool:
        """Add a statement to the namespace at ``path``.

        Returns:
            True if the statement was new, False if it was already present.
        """
        if not statement.strip():
            raise ValueError('Cannot insert an empty statement')
        node = self.get_or_create(path)
        if statement in node.statements:
            return False
        node.statements.add(statement)
        return True

    def get_node(self, path: Sequence[str]) -> NamespaceTree | None:
        """Get the node at ``path`` without creating anything.

        Returns:
            The node, or None if the path does not exist.
        """
        current = self
        for part in path:
            if part not in current.children:
                return None
            current = current.children[part]
        return current

    def walk(self) -> Iterator[tuple[list[str], NamespaceTree]]:
        """Iterate over all nodes depth-first, in rendering order.

        Yields:
            Tuples of (path, node) for each node in the tree.
        """
        yield from self._walk_recursive([])

    def _walk_recursive(
        self, current_path: list[str]
    ) -> Iterator[tuple[list[str], NamespaceTree]]:
        yield current_path, self

        for child_name, child_node in sorted(self.children.items()):
            yield from child_node._walk_recursive(current_path + [child_name])

    def count_statements(self) -> int:
        """Count the statements in this subtree."""
        total = len(self.statements)
        for child in self.children.values():
            total += child.count_statements()
        return total

    def is_empty(self) -> bool:
        return self.count_statements() == 0

    def serialize(self, use_export_prefix: bool = False) -> str:
        """Render the tree as C++ source text.

        Statements of a node come first, one per line, followed by one
        ``namespace <name> { ... }`` block per child.

        Args:
            use_export_prefix: Prefix every statement with ``export``.

        Returns:
            The rendered text, ending with a newline unless the tree is empty.
        """
        lines = list(self._render_lines(EXPORT_PREFIX if use_export_prefix else ''))
        return '\n'.join(lines) + '\n' if lines else ''

    def _render_lines(self, prefix: str) -> Iterator[str]:
        for statement in sorted(self.statements):
            yield prefix + statement

        for child_name, child_node in sorted(self.children.items()):
            yield f'namespace {child_name} {{'
            yield from child_node._render_lines(prefix)
            yield f'}}  // namespace {child_name}'
