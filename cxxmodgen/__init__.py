"""cxxmodgen - Generate C++20 module wrappers for existing headers.

cxxmodgen turns the declarations a semantic front end reports for a header
into a module interface unit that includes the header in its global module
fragment and re-exports its symbols, namespace by namespace. Declarations
with internal linkage, which cannot be re-exported, are skipped with a
diagnostic or collected into a companion header.

Quick Start:
    >>> from cxxmodgen import ModuleWrapper, WrapperConfig, load_records
    >>>
    >>> config = WrapperConfig(output_dir='./modules', filter='mylib::')
    >>> with ModuleWrapper('include/mylib.h', config) as wrapper:
    ...     wrapper.add_all(load_records('mylib.decls.jsonl'))
    # Creates ./modules/mylib.cppm

CLI Usage:
    $ cxxmodgen generate include/mylib.h --records mylib.decls.jsonl -o modules
    $ cxxmodgen run --config cxxmodgen.yaml
"""

from importlib.metadata import PackageNotFoundError, version

from cxxmodgen.codegen import (
    Codegen,
    DeclarationRecord,
    DeclKind,
    EmittedArtifacts,
    Linkage,
    ModuleWrapper,
    NamespaceTree,
    SymbolRouter,
    load_records,
)
from cxxmodgen.config import (
    GeneratorConfig,
    InternalLinkageMode,
    UnitConfig,
    WrapperConfig,
    get_config,
)
from cxxmodgen.exceptions import (
    ConfigurationError,
    CxxModGenError,
    OutputError,
    RecordError,
    RecordLoadError,
)

__all__ = [
    # Main classes
    'Codegen',
    'ModuleWrapper',
    'NamespaceTree',
    'SymbolRouter',
    'EmittedArtifacts',
    # Records
    'DeclarationRecord',
    'DeclKind',
    'Linkage',
    'load_records',
    # Configuration
    'WrapperConfig',
    'UnitConfig',
    'GeneratorConfig',
    'InternalLinkageMode',
    'get_config',
    # Exceptions
    'CxxModGenError',
    'ConfigurationError',
    'RecordError',
    'RecordLoadError',
    'OutputError',
]

try:
    __version__ = version('cxxmodgen')
except PackageNotFoundError:
    __version__ = 'unknown'
