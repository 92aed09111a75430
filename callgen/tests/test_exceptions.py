"""Test suite for the callgen exception hierarchy."""

import pytest

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


class TestExceptionHierarchy:
    @pytest.mark.parametrize(
        'error',
        [
            CatalogLoadError('endpoints.json'),
            CatalogValidationError('endpoints.json'),
            CodeGenerationError('failed'),
            EndpointGenerationError('chat.postMessage'),
            ConfigurationError('bad'),
            OutputError('./out'),
        ],
    )
    def test_all_are_callgen_errors(self, error):
        assert isinstance(error, CallgenError)

    def test_catalog_errors(self):
        assert issubclass(CatalogLoadError, CatalogError)
        assert issubclass(CatalogValidationError, CatalogError)
        assert issubclass(EndpointGenerationError, CodeGenerationError)


class TestExceptionMessages:
    def test_catalog_load_error(self):
        error = CatalogLoadError('endpoints.json', FileNotFoundError('gone'))
        assert str(error) == "Failed to load catalog from 'endpoints.json': gone"
        assert isinstance(error.cause, FileNotFoundError)

    def test_catalog_validation_error(self):
        error = CatalogValidationError('endpoints.json', ['0.name: bad', '1.args: dup'])
        assert str(error) == (
            "Catalog validation failed for 'endpoints.json': 0.name: bad; 1.args: dup"
        )
        assert error.errors == ['0.name: bad', '1.args: dup']

    def test_code_generation_error(self):
        error = CodeGenerationError(
            'Failed to format code', context='chat', cause=ValueError('x')
        )
        assert str(error) == 'Failed to format code (while generating chat): x'

    def test_endpoint_generation_error(self):
        error = EndpointGenerationError('chat.postMessage', ValueError('bad argument'))
        assert error.endpoint == 'chat.postMessage'
        assert str(error) == (
            "Failed to generate endpoint 'chat.postMessage' "
            '(while generating chat.postMessage): bad argument'
        )

    def test_configuration_error(self):
        error = ConfigurationError(
            'Invalid value', config_path='callgen.yaml', field='output'
        )
        assert str(error) == "Invalid value in 'callgen.yaml' (field: output)"
        assert error.message == str(error)

    def test_output_error(self):
        error = OutputError('./out/chat.py', PermissionError('denied'))
        assert str(error) == "Failed to write output to './out/chat.py': denied"
