"""Custom exceptions for callgen.

This module defines the hierarchy of exceptions raised by the generator
to provide clear, actionable error messages for each failure scenario.
Errors raised by *generated* code live in :mod:`callgen.runtime`.
"""


class CallgenError(Exception):
    """Base exception for all callgen errors.

    All exceptions raised by the generator inherit from this class, making
    it easy to catch every callgen-related error with a single except clause.

    Example:
        try:
            codegen.generate()
        except CallgenError as e:
            print(f"callgen error: {e}")
    """

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class CatalogError(CallgenError):
    """Base exception for catalog-related errors."""

    pass


class CatalogLoadError(CatalogError):
    """Failed to read or decode an endpoint catalog.

    Attributes:
        source: The source path or URL that failed to load.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, source: str, cause: Exception | None = None):
        self.source = source
        self.cause = cause
        message = f"Failed to load catalog from '{source}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class CatalogValidationError(CatalogError):
    """The catalog content does not describe valid endpoints.

    Attributes:
        source: The source path or URL of the invalid catalog.
        errors: List of validation error messages.
    """

    def __init__(self, source: str, errors: list[str] | None = None):
        self.source = source
        self.errors = errors or []
        message = f"Catalog validation failed for '{source}'"
        if errors:
            message += f': {"; ".join(errors)}'
        super().__init__(message)


class CodeGenerationError(CallgenError):
    """Error during code generation.

    Raised when generation fails after the catalog was loaded successfully.

    Attributes:
        context: Additional context about what was being generated.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self, message: str, context: str | None = None, cause: Exception | None = None
    ):
        self.context = context
        self.cause = cause
        full_message = message
        if context:
            full_message = f'{message} (while generating {context})'
        if cause:
            full_message += f': {cause}'
        super().__init__(full_message)


class EndpointGenerationError(CodeGenerationError):
    """Error generating the request builder of one endpoint.

    Attributes:
        endpoint: The dotted name of the endpoint.
    """

    def __init__(self, endpoint: str, cause: Exception | None = None):
        self.endpoint = endpoint
        super().__init__(
            f"Failed to generate endpoint '{endpoint}'", context=endpoint, cause=cause
        )


class ConfigurationError(CallgenError):
    """Error in configuration.

    Attributes:
        config_path: The path to the configuration file, if applicable.
        field: The specific configuration field that is invalid.
    """

    def __init__(
        self, message: str, config_path: str | None = None, field: str | None = None
    ):
        self.config_path = config_path
        self.field = field
        full_message = message
        if config_path:
            full_message = f"{message} in '{config_path}'"
        if field:
            full_message += f' (field: {field})'
        super().__init__(full_message)


class OutputError(CallgenError):
    """Error writing generated output.

    Attributes:
        output_path: The path where output was being written.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, output_path: str, cause: Exception | None = None):
        self.output_path = output_path
        self.cause = cause
        message = f"Failed to write output to '{output_path}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)
