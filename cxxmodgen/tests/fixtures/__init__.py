"""Test fixtures for cxxmodgen tests.

This module provides record builders and sample record streams shaped like
the output of a semantic front end.
"""

import json
from pathlib import Path

from cxxmodgen.codegen.records import DeclarationRecord, DeclKind, Linkage


def make_record(
    qualified_name: str,
    kind: DeclKind = DeclKind.FUNCTION,
    linkage: Linkage = Linkage.EXTERNAL,
    is_first_declaration: bool = True,
    is_implicit: bool = False,
    raw_text: str | None = None,
) -> DeclarationRecord:
    """Create a DeclarationRecord for testing."""
    return DeclarationRecord(
        qualified_name=qualified_name,
        kind=kind,
        linkage=linkage,
        is_first_declaration=is_first_declaration,
        is_implicit=is_implicit,
        raw_text=raw_text,
    )


def write_source(directory: Path, name: str = 'a.h', content: str | None = None) -> Path:
    """Write a stand-in for the original header and return its path."""
    path = directory / name
    path.write_text(content if content is not None else SAMPLE_HEADER)
    return path


def write_jsonl(path: Path, records: list[dict]) -> Path:
    path.write_text('\n'.join(json.dumps(record) for record in records) + '\n')
    return path


SAMPLE_HEADER = """\
namespace ns { struct S; }
int x;
"""

# What a front end reports for SAMPLE_HEADER
SAMPLE_RECORDS = [
    {'qualifiedName': 'ns::S', 'kind': 'type', 'linkage': 'external'},
    {'qualifiedName': 'x', 'kind': 'variable', 'linkage': 'external'},
]

# A header mixing namespaces, redeclarations, implicit and internal symbols
MIXED_RECORDS = [
    {'qualified_name': 'lib::Widget', 'kind': 'type'},
    {
        'qualified_name': 'lib::Widget::Widget',
        'kind': 'function',
        'is_implicit': True,
    },
    {'qualified_name': 'lib::make_widget', 'kind': 'function'},
    {
        'qualified_name': 'lib::make_widget',
        'kind': 'function',
        'is_first_declaration': False,
    },
    {'qualified_name': 'lib::detail::size_type', 'kind': 'alias_or_typedef'},
    {
        'qualified_name': 'lib::(anonymous namespace)::counter',
        'kind': 'variable',
        'linkage': 'internal',
        'raw_text': 'static int counter = 0;',
    },
    {
        'qualified_name': 'lib::clamp',
        'kind': 'function',
        'linkage': 'internal',
        'raw_text': 'static inline int clamp(int v) { return v < 0 ? 0 : v; }',
    },
    {'qualified_name': 'other::Thing', 'kind': 'type'},
]
