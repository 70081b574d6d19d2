"""Declaration records reported by the semantic front end.

The front end walks the declaration tree of a translation unit and reports
one record per declaration. This module defines the record model and loads
record streams from JSON, JSON Lines and YAML files.
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel, to_snake

from cxxmodgen.exceptions import RecordLoadError

logger = logging.getLogger(__name__)

JSON_LINES_SUFFIXES = {'.jsonl', '.ndjson'}
YAML_SUFFIXES = {'.yaml', '.yml'}

# Declaration class names some front ends report instead of our kinds
KIND_ALIASES = {
    'tag': 'type',
    'record': 'type',
    'enum': 'type',
    'typedef_name': 'alias_or_typedef',
    'typedef': 'alias_or_typedef',
    'type_alias': 'alias_or_typedef',
    'var': 'variable',
    'template': 'template_entity',
}


class DeclKind(str, Enum):
    TYPE = 'type'
    ALIAS_OR_TYPEDEF = 'alias_or_typedef'
    FUNCTION = 'function'
    VARIABLE = 'variable'
    TEMPLATE_ENTITY = 'template_entity'


class Linkage(str, Enum):
    EXTERNAL = 'external'
    INTERNAL = 'internal'


class DeclarationRecord(BaseModel):
    """One declaration visited by the front end.

    Field names are accepted in snake_case or camelCase
    (``qualified_name`` / ``qualifiedName``).

    Attributes:
        qualified_name: Fully qualified name, e.g. ``ns::detail::helper``.
        kind: Category of the declared entity.
        linkage: Whether the entity can be referenced from other units.
        is_first_declaration: False for redeclarations of an entity.
        is_implicit: True for compiler-synthesized declarations.
        raw_text: Source text of the declaration; needed for internal-linkage
            entities when they are collected into a header.
    """

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    qualified_name: str = Field(..., min_length=1)
    kind: DeclKind
    linkage: Linkage = Linkage.EXTERNAL
    is_first_declaration: bool = True
    is_implicit: bool = False
    raw_text: str | None = None

    @field_validator('kind', mode='before')
    @classmethod
    def _normalize_kind(cls, value: Any) -> Any:
        if isinstance(value, str):
            key = to_snake(value.strip()).lower()
            return KIND_ALIASES.get(key, key)
        return value

    @field_validator('linkage', mode='before')
    @classmethod
    def _normalize_linkage(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


_records_adapter = TypeAdapter(list[DeclarationRecord])


def parse_records(data: Any, source: str = '<memory>') -> list[DeclarationRecord]:
    """Validate already-decoded record data.

    Args:
        data: A list of record mappings, or a mapping with a
            ``declarations`` list.
        source: Name of the origin, used in error messages.

    Raises:
        RecordLoadError: If the data does not describe a list of records.
    """
    if isinstance(data, dict) and 'declarations' in data:
        data = data['declarations']
    if data is None:
        return []
    try:
        return _records_adapter.validate_python(data)
    except ValidationError as e:
        raise RecordLoadError(source, cause=e) from e


def _load_json_lines(path: Path) -> list[DeclarationRecord]:
    records = []
    with open(path, encoding='utf-8') as f:
        for line_number, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                records.append(DeclarationRecord.model_validate_json(line))
            except ValidationError as e:
                raise RecordLoadError(str(path), cause=e, line=line_number) from e
    return records


def load_records(path: str | Path) -> list[DeclarationRecord]:
    """Load a declaration record stream from a file.

    The format follows the file suffix: ``.jsonl``/``.ndjson`` hold one JSON
    object per line, ``.yaml``/``.yml`` are YAML, anything else is JSON.
    Records keep their order in the file.

    Raises:
        RecordLoadError: If the file cannot be read or parsed.
    """
    path = Path(path)
    try:
        if path.suffix.lower() in JSON_LINES_SUFFIXES:
            records = _load_json_lines(path)
        elif path.suffix.lower() in YAML_SUFFIXES:
            data = yaml.safe_load(path.read_text(encoding='utf-8'))
            records = parse_records(data, str(path))
        else:
            data = json.loads(path.read_text(encoding='utf-8'))
            records = parse_records(data, str(path))
    except RecordLoadError:
        raise
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise RecordLoadError(str(path), cause=e) from e

    logger.debug(f'Loaded {len(records)} declaration records from {path}')
    return records
