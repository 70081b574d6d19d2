"""Module wrapper generation.

Classes:
    NamespaceTree: Namespace hierarchy holding deduplicated statements.
    SymbolRouter: Filters declaration records and places them in trees.
    WrapperEmitter: Renders trees and writes the wrapper artifacts.
    ModuleWrapper: Per-translation-unit orchestration.
    Codegen: Runs a ModuleWrapper over a configured unit.
"""

from cxxmodgen.codegen.codegen import Codegen, UnitResult, generate_all
from cxxmodgen.codegen.emitter import EmittedArtifacts, WrapperEmitter
from cxxmodgen.codegen.records import (
    DeclarationRecord,
    DeclKind,
    Linkage,
    load_records,
    parse_records,
)
from cxxmodgen.codegen.router import RouteOutcome, SymbolRouter
from cxxmodgen.codegen.tree import NamespaceTree
from cxxmodgen.codegen.wrapper import ModuleWrapper, WrapperState

__all__ = [
    'Codegen',
    'UnitResult',
    'generate_all',
    'EmittedArtifacts',
    'WrapperEmitter',
    'DeclarationRecord',
    'DeclKind',
    'Linkage',
    'load_records',
    'parse_records',
    'RouteOutcome',
    'SymbolRouter',
    'NamespaceTree',
    'ModuleWrapper',
    'WrapperState',
]
