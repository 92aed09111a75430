"""callgen - Generate typed request builders from an endpoint catalog.

callgen reads a declarative catalog of remote RPC endpoints and writes a
Python package with one service class per endpoint group and, per endpoint,
a call-state class with fluent setters, a ``values()`` serializer and
``do()``/``ado()`` methods that post the form through httpx and decode the
``{ok, error, ...}`` response envelope with pydantic.

Quick Start:
    >>> from callgen import Codegen, DocumentConfig
    >>>
    >>> config = DocumentConfig(source='./endpoints.json', output='./slack')
    >>> Codegen(config).generate()

    >>> from slack import Client
    >>> client = Client('xoxb-...')
    >>> client.chat.post_message('C1').set_text('hi').do()

CLI Usage:
    $ callgen generate --config callgen.yaml
    $ callgen validate ./endpoints.json
"""

from callgen.catalog import Argument, CatalogLoader, Endpoint, load_catalog
from callgen.codegen.codegen import Codegen
from callgen.codegen.emitter import CodeEmitter, FileEmitter, StringEmitter
from callgen.config import CodegenConfig, DocumentConfig, get_config
from callgen.exceptions import (
    CallgenError,
    CatalogError,
    CatalogLoadError,
    CatalogValidationError,
    CodeGenerationError,
    ConfigurationError,
    EndpointGenerationError,
    OutputError,
)

__all__ = [
    # Main classes
    'Codegen',
    'CatalogLoader',
    'Endpoint',
    'Argument',
    'load_catalog',
    # Emitters
    'CodeEmitter',
    'FileEmitter',
    'StringEmitter',
    # Configuration
    'CodegenConfig',
    'DocumentConfig',
    'get_config',
    # Exceptions
    'CallgenError',
    'CatalogError',
    'CatalogLoadError',
    'CatalogValidationError',
    'CodeGenerationError',
    'EndpointGenerationError',
    'ConfigurationError',
    'OutputError',
]

__version__ = '0.1.0'
