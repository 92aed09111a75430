import json
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from callgen.exceptions import ConfigurationError

DEFAULT_FILENAMES = ['callgen.yaml', 'callgen.yml', 'callgen.json']

_ENV_VAR = re.compile(r'\$\{([^}:]+)(?::-([^}]*))?\}')


class DocumentConfig(BaseModel):
    """Represents a single catalog to be turned into a client package."""

    source: str = Field(..., description='Path or URL to the endpoint catalog.')

    output: str = Field(..., description='Output directory for the generated package.')

    services_file: str = Field(
        'services.py', description='File name of the module declaring the services.'
    )

    runtime_file: str = Field(
        '_runtime.py', description='File name the runtime support module is copied to.'
    )

    objects_module: str = Field(
        '.objects',
        description='Import path for bare object type names used in the catalog.',
    )

    base_url: str | None = Field(
        None, description='Default base URL of the generated Client.'
    )

    format_code: bool = Field(True, description='Format generated code with black.')

    package_docstring: str | None = Field(
        None, description='Docstring of the generated package __init__ module.'
    )

    @property
    def services_module(self) -> str:
        return '.' + Path(self.services_file).stem

    @property
    def runtime_module(self) -> str:
        return '.' + Path(self.runtime_file).stem


class CodegenConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='CALLGEN_')

    documents: list[DocumentConfig] = Field(
        ..., description='List of endpoint catalogs to process.'
    )


def _expand_env_vars(value: str) -> str:
    """Expand ``${VAR}`` and ``${VAR:-default}`` references in a string."""

    def replace(match: re.Match) -> str:
        name, default = match.group(1), match.group(2)
        resolved = os.environ.get(name, default)
        if resolved is None:
            raise ConfigurationError(f'Environment variable {name} is not set')
        return resolved

    return _ENV_VAR.sub(replace, value)


def _expand_env_vars_recursive(data: Any) -> Any:
    if isinstance(data, str):
        return _expand_env_vars(data)
    if isinstance(data, dict):
        return {key: _expand_env_vars_recursive(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_expand_env_vars_recursive(item) for item in data]
    return data


def load_yaml(path: str | Path) -> dict:
    return yaml.safe_load(Path(path).read_text())


def load_json(path: str | Path) -> dict:
    return json.loads(Path(path).read_text())


def _validate(data: Any, path: str | Path) -> CodegenConfig:
    try:
        return CodegenConfig.model_validate(_expand_env_vars_recursive(data))
    except ValidationError as e:
        raise ConfigurationError(
            f'Invalid configuration: {e}', config_path=str(path)
        ) from e


def load_config_file(path: str | Path) -> CodegenConfig:
    path = Path(path)
    if not path.exists():
        raise ConfigurationError('Configuration file not found', config_path=str(path))

    try:
        if path.suffix == '.json':
            data = load_json(path)
        else:
            data = load_yaml(path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f'Failed to read configuration: {e}', config_path=str(path)
        ) from e
    return _validate(data, path)


def get_config(path: str | None = None) -> CodegenConfig:
    """Load configuration from a file, the working directory or pyproject.toml.

    Raises:
        ConfigurationError: If no configuration is found or it is invalid.
    """
    if path:
        return load_config_file(path)

    cwd = Path(os.getcwd())

    for filename in DEFAULT_FILENAMES:
        candidate = cwd / filename
        if candidate.exists():
            return load_config_file(candidate)

    pyproject_path = cwd / 'pyproject.toml'

    if pyproject_path.exists():
        import tomllib

        pyproject = tomllib.loads(pyproject_path.read_text())
        tools = pyproject.get('tool', {})

        if 'callgen' in tools:
            return _validate(tools['callgen'], pyproject_path)

    raise ConfigurationError('Configuration not found', config_path=str(cwd))


def create_default_config(source: str, output: str) -> dict:
    """Return a minimal configuration mapping for ``callgen init``-style setups."""
    return {'documents': [{'source': source, 'output': output}]}
