import json
import os
import re
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from cxxmodgen.exceptions import ConfigurationError

DEFAULT_FILENAMES = ['cxxmodgen.yaml', 'cxxmodgen.yml']

DEFAULT_MODULE_EXTENSION = '.cppm'
DEFAULT_HEADER_EXTENSION = '.h'

# module-name: identifiers separated by dots, e.g. `fmt` or `boost.asio`
MODULE_NAME_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$')

ENV_VAR_PATTERN = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}')


class InternalLinkageMode(str, Enum):
    """What to do with declarations that have internal linkage."""

    SKIP = 'skip'
    HEADER = 'header'


class WrapperConfig(BaseModel):
    """Settings for generating the wrapper of a single translation unit."""

    model_config = ConfigDict(frozen=True)

    module_name: str | None = Field(
        None,
        description='Name of the generated module. Defaults to the base name of the source file.',
    )

    output_dir: Path = Field(
        default_factory=Path.cwd,
        description='Directory the generated files are written to.',
    )

    filter: str = Field(
        '',
        description='Only symbols whose qualified name contains this string are exported.',
    )

    internal_linkage: InternalLinkageMode = Field(
        InternalLinkageMode.SKIP,
        description='Skip internal-linkage symbols with a diagnostic, or collect them into a header.',
    )

    module_extension: str = Field(
        DEFAULT_MODULE_EXTENSION, description='File extension of the module source.'
    )

    header_extension: str = Field(
        DEFAULT_HEADER_EXTENSION,
        description='File extension of the header holding internal-linkage declarations.',
    )

    @field_validator('module_name')
    @classmethod
    def _check_module_name(cls, value: str | None) -> str | None:
        if value is not None and not MODULE_NAME_PATTERN.match(value):
            raise ValueError(f"'{value}' is not a valid module name")
        return value

    @field_validator('module_extension', 'header_extension')
    @classmethod
    def _check_extension(cls, value: str) -> str:
        if not value.startswith('.') or len(value) < 2 or '/' in value:
            raise ValueError(f"'{value}' is not a file extension (expected e.g. '.cppm')")
        return value

    @model_validator(mode='after')
    def _check_distinct_extensions(self) -> 'WrapperConfig':
        if self.module_extension == self.header_extension:
            raise ValueError('module_extension and header_extension must differ')
        return self

    @property
    def emit_header(self) -> bool:
        return self.internal_linkage is InternalLinkageMode.HEADER


class UnitConfig(WrapperConfig):
    """A translation unit to process: the original header and its record stream."""

    source: Path = Field(..., description='Path to the original header or source file.')

    records: Path = Field(
        ..., description='Path to the declaration records reported by the front end.'
    )


class GeneratorConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='CXXMODGEN_')

    units: list[UnitConfig] = Field(
        ..., description='List of translation units to wrap.'
    )


def _expand_env_vars(value: str) -> str:
    """Expand ``${VAR}`` and ``${VAR:-default}`` references in a string.

    Unset variables without a default raise ConfigurationError.
    """

    def replace(match: re.Match) -> str:
        name, default = match.group(1), match.group(2)
        if name in os.environ:
            return os.environ[name]
        if default is not None:
            return default
        raise ConfigurationError(f'Environment variable {name} is not set')

    return ENV_VAR_PATTERN.sub(replace, value)


def _expand_env_vars_recursive(data: Any) -> Any:
    if isinstance(data, str):
        return _expand_env_vars(data)
    if isinstance(data, dict):
        return {key: _expand_env_vars_recursive(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_expand_env_vars_recursive(item) for item in data]
    return data


def load_yaml(path: str | Path) -> dict:
    return yaml.load(Path(path).read_text(), Loader=yaml.FullLoader)


def load_json(path: str | Path) -> dict:
    return json.loads(Path(path).read_text())


def _resolve_relative(config: GeneratorConfig, base: Path) -> GeneratorConfig:
    """Anchor relative unit paths at the directory of the config file."""
    units = []
    for unit in config.units:
        update = {}
        for name in ('source', 'records', 'output_dir'):
            value = getattr(unit, name)
            if not value.is_absolute():
                update[name] = base / value
        units.append(unit.model_copy(update=update))
    return GeneratorConfig.model_validate({'units': units})


def _build_config(data: Any, path: Path) -> GeneratorConfig:
    if not isinstance(data, dict):
        raise ConfigurationError('Configuration must be a mapping', config_path=str(path))
    if 'units' in data:
        for unit in data['units'] or []:
            # the model default is the process cwd, config files default to their own directory
            if isinstance(unit, dict):
                unit.setdefault('output_dir', '.')
    try:
        config = GeneratorConfig.model_validate(_expand_env_vars_recursive(data))
    except ValidationError as e:
        raise ConfigurationError(
            f'Invalid configuration: {e.error_count()} validation error(s)\n{e}',
            config_path=str(path),
        ) from e
    return _resolve_relative(config, path.parent.resolve())


def _load_config_file(path: Path) -> GeneratorConfig:
    try:
        if path.suffix == '.json':
            data = load_json(path)
        else:
            data = load_yaml(path)
    except OSError as e:
        raise ConfigurationError(
            f'Cannot read configuration: {e}', config_path=str(path)
        ) from e
    except (ValueError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f'Cannot parse configuration: {e}', config_path=str(path)
        ) from e
    return _build_config(data, path)


def get_config(path: str | Path | None = None) -> GeneratorConfig:
    """Load configuration from a file or from the current working directory.

    Lookup order when no path is given: ``cxxmodgen.yaml``, ``cxxmodgen.yml``,
    then the ``[tool.cxxmodgen]`` table of ``pyproject.toml``.

    Raises:
        ConfigurationError: If no configuration is found or it is invalid.
    """
    if path:
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(
                'Configuration file not found', config_path=str(path)
            )
        return _load_config_file(path)

    cwd = Path(os.getcwd())

    for filename in DEFAULT_FILENAMES:
        path = cwd / filename
        if path.exists():
            return _load_config_file(path)

    path = cwd / 'pyproject.toml'

    if path.exists():
        import tomllib

        pyproject = tomllib.loads(path.read_text())
        tools = pyproject.get('tool', {})

        if 'cxxmodgen' in tools:
            return _build_config(tools['cxxmodgen'], path)

    raise ConfigurationError('No cxxmodgen configuration found')
