"""Endpoint catalog models and loading.

The catalog is a JSON or YAML list of endpoint records. Each record names
a dotted remote method, its arguments and the shape of its response::

    [
      {
        "name": "chat.postMessage",
        "json": "message",
        "return": "Message",
        "args": [
          {"name": "channel", "type": "string", "required": true},
          {"name": "text", "type": "string"}
        ]
      }
    ]

This module provides pydantic models for those records and a loader that
reads them from local files or URLs.
"""

import json
import logging
from pathlib import Path
from typing import Any

import httpx
import yaml
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from callgen.codegen.utils import is_url
from callgen.exceptions import CatalogLoadError, CatalogValidationError

__all__ = ('Argument', 'CatalogLoader', 'Endpoint', 'load_catalog')

logger = logging.getLogger(__name__)


class Argument(BaseModel):
    """One parameter of an endpoint."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1, description='Field name of the argument.')
    type: str = Field(..., min_length=1, description='Declared argument type.')
    required: bool = Field(False, description='Whether the argument must be set.')
    default: str = Field('', description='Documented default value.')
    query_name: str = Field(
        '',
        validation_alias=AliasChoices('query_name', 'queryName'),
        description='Override for the serialized parameter key.',
    )
    comment: str = Field('', description='Documentation for the argument.')
    singular: str = Field(
        '',
        description='Explicit singular name used for the list append setter.',
    )

    @property
    def key(self) -> str:
        """The form key the argument is serialized under."""
        return self.query_name or self.name


class Endpoint(BaseModel):
    """One remote procedure definition."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., description='Dotted method name, e.g. chat.postMessage.')
    group: str = Field('', description='Service group; derived from the namespace.')
    response_field: str = Field(
        '',
        validation_alias=AliasChoices('json', 'response_field', 'responseField'),
        description='Envelope field holding the result payload.',
    )
    args: tuple[Argument, ...] = Field(
        (),
        validation_alias=AliasChoices('args', 'arguments'),
        description='Arguments of the endpoint.',
    )
    return_type: str = Field(
        '',
        validation_alias=AliasChoices('return', 'return_type', 'returnType'),
        description='Type of the decoded payload.',
    )
    skip_token: bool = Field(
        False,
        validation_alias=AliasChoices('skip_token', 'skipToken', 'skipAuthToken'),
        description='Do not send the auth token.',
    )
    description: str = Field('', description='Documentation for the endpoint.')

    @field_validator('name')
    @classmethod
    def _check_name(cls, value: str) -> str:
        if '.' not in value:
            raise ValueError(
                f"endpoint name '{value}' must contain a '.' separating "
                'namespace and method'
            )
        namespace, _, method = value.rpartition('.')
        if not namespace or not method:
            raise ValueError(
                f"endpoint name '{value}' has an empty namespace or method"
            )
        return value

    @field_validator('args')
    @classmethod
    def _check_unique_args(cls, value: tuple[Argument, ...]) -> tuple[Argument, ...]:
        seen = set()
        for arg in value:
            if arg.name in seen:
                raise ValueError(f"duplicate argument '{arg.name}'")
            seen.add(arg.name)
        return value

    @property
    def namespace(self) -> str:
        return self.name.rpartition('.')[0]

    @property
    def method_name(self) -> str:
        return self.name.rpartition('.')[2]


_catalog_adapter = TypeAdapter(list[Endpoint])


class CatalogLoader:
    """Loads endpoint catalogs from URLs or file paths.

    JSON and YAML documents are accepted. The document is either a list of
    endpoint records or a mapping with an ``endpoints`` list.

    Example:
        >>> loader = CatalogLoader()
        >>> endpoints = loader.load('endpoints.json')
    """

    def __init__(self, http_client: httpx.Client | None = None):
        """Initialize the catalog loader.

        Args:
            http_client: Optional HTTP client to use for URL requests.
        """
        self._http_client = http_client

    def load(self, source: str | Path) -> list[Endpoint]:
        """Load and validate a catalog.

        Args:
            source: URL or file path of the catalog.

        Returns:
            The endpoints in catalog order.

        Raises:
            CatalogLoadError: If the catalog cannot be read or decoded.
            CatalogValidationError: If the records are not valid endpoints.
        """
        source = str(source)
        try:
            if is_url(source):
                text = self._load_from_url(source)
            else:
                text = self._load_from_file(source)
            content = self._decode(source, text)
        except (OSError, httpx.HTTPError, ValueError, yaml.YAMLError) as e:
            raise CatalogLoadError(source, e) from e

        endpoints = self._validate(source, content)
        logger.debug(f'Loaded {len(endpoints)} endpoints from {source}')
        return endpoints

    def _load_from_url(self, url: str) -> str:
        if self._http_client:
            response = self._http_client.get(url)
        else:
            response = httpx.get(url)

        response.raise_for_status()
        return response.text

    def _load_from_file(self, file_path: str) -> str:
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f'Catalog file not found: {file_path}')
        return path.read_text(encoding='utf-8')

    def _decode(self, source: str, text: str) -> Any:
        if source.endswith(('.yaml', '.yml')):
            return yaml.safe_load(text)
        return json.loads(text)

    def _validate(self, source: str, content: Any) -> list[Endpoint]:
        if isinstance(content, dict) and 'endpoints' in content:
            content = content['endpoints']
        if not isinstance(content, list):
            raise CatalogValidationError(
                source, ['catalog must be a list of endpoint records']
            )
        try:
            return _catalog_adapter.validate_python(content)
        except ValidationError as e:
            errors = [
                f'{".".join(str(loc) for loc in error["loc"])}: {error["msg"]}'
                for error in e.errors()
            ]
            raise CatalogValidationError(source, errors) from e


def load_catalog(source: str | Path) -> list[Endpoint]:
    """Load a catalog with a default :class:`CatalogLoader`."""
    return CatalogLoader().load(source)
