"""Code emitter interfaces and implementations for code generation output.

This module provides the CodeEmitter interface and concrete implementations
for emitting generated code to files or to in-memory strings. Emitters
render AST module bodies to source, validate the syntax and optionally
format it with black.

Emitters stage everything they are given and only publish it on
:meth:`CodeEmitter.commit`, so a failure while generating any module
leaves previously generated output untouched.
"""

import ast
import logging
from abc import ABC, abstractmethod
from pathlib import Path

import black
from upath import UPath

from callgen.exceptions import CodeGenerationError, OutputError

__all__ = ('CodeEmitter', 'FileEmitter', 'StringEmitter')

logger = logging.getLogger(__name__)


class CodeEmitter(ABC):
    """Abstract base class for code emitters.

    A CodeEmitter takes generated AST nodes, renders them to Python source
    and publishes the result somewhere (files, strings, ...).
    """

    def __init__(self, format_code: bool = True, validate_syntax: bool = True):
        """Initialize the emitter.

        Args:
            format_code: Whether to format rendered code with black.
            validate_syntax: Whether to compile rendered code before staging it.
        """
        self.format_code = format_code
        self.validate_syntax = validate_syntax
        self._staged: dict[str, str] = {}

    def render(
        self, body: list[ast.stmt], name: str, docstring: str | None = None
    ) -> str:
        """Render a module body to Python source.

        Raises:
            CodeGenerationError: If the AST cannot be unparsed, is not valid
                Python or cannot be formatted.
        """
        if docstring:
            body = [ast.Expr(value=ast.Constant(value=docstring))] + body

        module = ast.Module(body=body, type_ignores=[])
        ast.fix_missing_locations(module)

        try:
            source = ast.unparse(module)
        except Exception as e:
            raise CodeGenerationError('Failed to unparse AST', context=name, cause=e)

        if self.validate_syntax:
            try:
                compile(source, f'{name}.py', 'exec')
            except SyntaxError as e:
                raise CodeGenerationError(
                    'Generated code has invalid syntax', context=name, cause=e
                )

        if self.format_code:
            try:
                source = black.format_str(source, mode=black.Mode())
            except black.InvalidInput as e:
                raise CodeGenerationError(
                    'Failed to format code', context=name, cause=e
                )
        elif not source.endswith('\n'):
            source += '\n'
        return source

    def emit_module(
        self, body: list[ast.stmt], name: str, docstring: str | None = None
    ) -> str:
        """Render and stage ``<name>.py``; returns the rendered source."""
        source = self.render(body, name, docstring)
        self._staged[f'{name}.py'] = source
        return source

    def emit_text(self, filename: str, content: str) -> str:
        """Stage a file whose content is already final (copied sources, markers)."""
        self._staged[filename] = content
        return content

    @property
    def staged_files(self) -> list[str]:
        return sorted(self._staged)

    @abstractmethod
    def commit(self) -> list[str]:
        """Publish every staged file.

        Returns:
            Identifiers (paths or names) of the published files.
        """
        pass


class FileEmitter(CodeEmitter):
    """Emits generated code to Python files in an output directory.

    Example:
        >>> emitter = FileEmitter('./client')
        >>> emitter.emit_module([ast.Pass()], 'example')
        >>> emitter.commit()
        ['client/example.py']
    """

    def __init__(
        self,
        output_dir: str | Path | UPath,
        format_code: bool = True,
        validate_syntax: bool = True,
    ):
        super().__init__(format_code=format_code, validate_syntax=validate_syntax)
        self.output_dir = UPath(output_dir)
        self._written_files: list[str] = []

    def commit(self) -> list[str]:
        """Write all staged files, in sorted order.

        Raises:
            OutputError: If the directory or a file cannot be written.
        """
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputError(str(self.output_dir), e) from e

        written = []
        for filename in self.staged_files:
            file_path = self.output_dir / filename
            try:
                file_path.write_text(self._staged[filename], encoding='utf-8')
            except OSError as e:
                raise OutputError(str(file_path), e) from e
            logger.info(f'Wrote {file_path}')
            written.append(str(file_path))

        self._staged.clear()
        self._written_files.extend(written)
        return written

    def get_written_files(self) -> list[str]:
        return self._written_files.copy()


class StringEmitter(CodeEmitter):
    """Keeps generated code in memory.

    Useful for tests or when the generated code is post-processed before
    being stored.
    """

    def __init__(self, format_code: bool = False, validate_syntax: bool = True):
        super().__init__(format_code=format_code, validate_syntax=validate_syntax)
        self._modules: dict[str, str] = {}

    def commit(self) -> list[str]:
        self._modules.update(self._staged)
        committed = self.staged_files
        self._staged.clear()
        return committed

    def get_module(self, filename: str) -> str | None:
        """Get a committed file by name (e.g. ``'services.py'``)."""
        return self._modules.get(filename)

    def get_all_modules(self) -> dict[str, str]:
        return self._modules.copy()
