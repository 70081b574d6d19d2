"""Symbol routing for module wrappers.

The SymbolRouter decides, for every declaration record, whether it is
re-exported from the module, collected into the internal-linkage header, or
dropped. Accepted records are inserted into the matching NamespaceTree.
"""

import logging
from collections import Counter
from collections.abc import Callable
from enum import Enum
from typing import assert_never

from cxxmodgen.codegen.names import (
    qualify,
    split_qualified_name,
    split_scope,
    strip_template_arguments,
)
from cxxmodgen.codegen.records import DeclarationRecord, DeclKind, Linkage
from cxxmodgen.codegen.tree import NamespaceTree
from cxxmodgen.config import InternalLinkageMode
from cxxmodgen.exceptions import RecordError

logger = logging.getLogger(__name__)

INTERNAL_LINKAGE_DIAGNOSTIC = '{} has internal linkage. Skipping.'


class RouteOutcome(str, Enum):
    """What happened to a routed record."""

    EXPORTED = 'exported'
    INTERNAL = 'internal'
    DUPLICATE = 'duplicate'
    IMPLICIT = 'implicit'
    FILTERED = 'filtered'
    REDECLARATION = 'redeclaration'
    SKIPPED_INTERNAL = 'skipped_internal'


def reexport_statement(record: DeclarationRecord) -> str:
    """Build the using-declaration that re-exports an entity by reference.

    The entity is named by its globally qualified name so the statement is
    valid wherever it is placed. Template entities are named without their
    arguments: a using-declaration cannot name a specialization, and
    re-exporting the template makes its specializations reachable.
    """
    scope, leaf = split_qualified_name(record.qualified_name)
    match record.kind:
        case DeclKind.TEMPLATE_ENTITY:
            leaf = strip_template_arguments(leaf)
        case (
            DeclKind.TYPE
            | DeclKind.ALIAS_OR_TYPEDEF
            | DeclKind.FUNCTION
            | DeclKind.VARIABLE
        ):
            pass
        case _:
            assert_never(record.kind)
    # for functions this names the whole overload set
    return f'using {qualify((*scope, leaf))};'


def _default_diagnostic(message: str) -> None:
    logger.warning(message)


class SymbolRouter:
    """Filters declaration records and inserts them into namespace trees.

    Records pass through these checks in order: implicit declarations are
    dropped, then records whose qualified name does not contain the filter
    string, then redeclarations. What remains is placed by linkage: external
    entities become ``using`` re-exports in the exported tree; internal ones
    either go verbatim into the internal tree or are skipped with a
    diagnostic, depending on the internal-linkage mode.

    The filter is a plain substring test on the qualified name, so ``Foo``
    also matches ``ns::FooBar::x``; an empty filter matches everything.

    Example:
        >>> router = SymbolRouter(NamespaceTree(), NamespaceTree())
        >>> router.route(record)
        <RouteOutcome.EXPORTED: 'exported'>
    """

    def __init__(
        self,
        exported_tree: NamespaceTree,
        internal_tree: NamespaceTree,
        filter: str = '',
        internal_linkage: InternalLinkageMode = InternalLinkageMode.SKIP,
        diagnostic: Callable[[str], None] | None = None,
    ):
        """Initialize the router.

        Args:
            exported_tree: Receives re-export statements.
            internal_tree: Receives the text of internal-linkage declarations.
            filter: Substring a qualified name must contain to be routed.
            internal_linkage: How internal-linkage declarations are handled.
            diagnostic: Callback for skip diagnostics. Defaults to a warning
                on this module's logger.
        """
        self.exported_tree = exported_tree
        self.internal_tree = internal_tree
        self.filter = filter
        self.internal_linkage = internal_linkage
        self._diagnostic = diagnostic or _default_diagnostic
        self.stats: Counter[RouteOutcome] = Counter()

    def matches_filter(self, qualified_name: str) -> bool:
        return self.filter in qualified_name

    def route(self, record: DeclarationRecord) -> RouteOutcome:
        """Route a single record, updating the trees as needed.

        Raises:
            RecordError: If an internal-linkage record has no text to emit
                while collecting into a header.
        """
        outcome = self._route(record)
        self.stats[outcome] += 1
        logger.debug(f'{record.qualified_name}: {outcome.value}')
        return outcome

    def _route(self, record: DeclarationRecord) -> RouteOutcome:
        if record.is_implicit:
            return RouteOutcome.IMPLICIT
        if not self.matches_filter(record.qualified_name):
            return RouteOutcome.FILTERED
        if not record.is_first_declaration:
            return RouteOutcome.REDECLARATION

        try:
            scope = split_scope(record.qualified_name)[:-1]
        except ValueError as e:
            raise RecordError(str(e)) from e

        match record.linkage:
            case Linkage.EXTERNAL:
                inserted = self.exported_tree.insert(
                    scope, reexport_statement(record)
                )
                return RouteOutcome.EXPORTED if inserted else RouteOutcome.DUPLICATE
            case Linkage.INTERNAL:
                return self._route_internal(record, scope)
            case _:
                assert_never(record.linkage)

    def _route_internal(
        self, record: DeclarationRecord, scope: tuple[str, ...]
    ) -> RouteOutcome:
        match self.internal_linkage:
            case InternalLinkageMode.HEADER:
                if record.raw_text is None or not record.raw_text.strip():
                    raise RecordError(
                        f"Internal-linkage declaration '{record.qualified_name}' "
                        'has no source text to place in the header'
                    )
                inserted = self.internal_tree.insert(scope, record.raw_text)
                return RouteOutcome.INTERNAL if inserted else RouteOutcome.DUPLICATE
            case InternalLinkageMode.SKIP:
                self._diagnostic(
                    INTERNAL_LINKAGE_DIAGNOSTIC.format(record.qualified_name)
                )
                return RouteOutcome.SKIPPED_INTERNAL
            case _:
                assert_never(self.internal_linkage)
