"""Code generation module for callgen.

This module provides the main Codegen class that runs the generation
pipeline: load the catalog, plan units and groups, emit the service and
call modules, and publish them through a :class:`CodeEmitter`.
"""

import logging
from importlib import resources
from pathlib import Path

from callgen.catalog import CatalogLoader, Endpoint
from callgen.codegen.calls import emit_unit
from callgen.codegen.emitter import CodeEmitter, FileEmitter
from callgen.codegen.grouping import plan_catalog
from callgen.codegen.services import emit_init, emit_services
from callgen.codegen.types import GenerationPlan
from callgen.config import DocumentConfig
from callgen.exceptions import CallgenError, CodeGenerationError

__all__ = ('Codegen', 'HEADER')

logger = logging.getLogger(__name__)

HEADER = 'Auto-generated by callgen. DO NOT EDIT!'


def runtime_source() -> str:
    """Source of :mod:`callgen.runtime`, copied into every generated package."""
    return resources.files('callgen').joinpath('runtime.py').read_text(encoding='utf-8')


class Codegen:
    """Generates a client package from an endpoint catalog.

    The whole catalog is processed in one synchronous pass. Every module is
    rendered before anything is written, so a generation failure leaves the
    output directory as it was.

    Attributes:
        config: The DocumentConfig with source and output settings.
        endpoints: The loaded catalog (populated by generate()).
        plan: The grouping and ordering plan (populated by generate()).

    Example:
        >>> from callgen.config import DocumentConfig
        >>> from callgen.codegen.codegen import Codegen
        >>>
        >>> config = DocumentConfig(source='endpoints.json', output='./slack')
        >>> Codegen(config).generate()
        # Creates services.py, one module per namespace and _runtime.py in ./slack/
    """

    def __init__(
        self,
        config: DocumentConfig,
        catalog_loader: CatalogLoader | None = None,
        emitter: CodeEmitter | None = None,
    ):
        """Initialize the code generator.

        Args:
            config: Configuration specifying the catalog and output location.
            catalog_loader: Optional custom catalog loader.
            emitter: Optional emitter; defaults to a FileEmitter writing to
                ``config.output``.
        """
        self.config = config
        self._catalog_loader = catalog_loader or CatalogLoader()
        self.emitter = emitter or FileEmitter(
            config.output, format_code=config.format_code
        )
        self.endpoints: list[Endpoint] | None = None
        self.plan: GenerationPlan | None = None

    def _load_catalog(self) -> None:
        self.endpoints = self._catalog_loader.load(self.config.source)

    def _generate_services_file(self) -> None:
        body = emit_services(
            self.plan,
            runtime_module=self.config.runtime_module,
            base_url=self.config.base_url,
        )
        self.emitter.emit_module(
            body, Path(self.config.services_file).stem, docstring=HEADER
        )

    def _generate_unit_file(self, unit: str) -> None:
        plans = self.plan.units[unit]
        body = emit_unit(
            plans,
            runtime_module=self.config.runtime_module,
            services_module=self.config.services_module,
        )
        namespace = plans[0].endpoint.namespace
        docstring = f'Request builders for the {namespace} endpoints.\n\n{HEADER}\n'
        self.emitter.emit_module(body, unit, docstring=docstring)

    def _package_docstring(self) -> str:
        if self.config.package_docstring:
            return f'{self.config.package_docstring}\n\n{HEADER}\n'
        return HEADER

    def generate_from(self, endpoints: list[Endpoint]) -> list[str]:
        """Generate the package for already loaded endpoints.

        Returns:
            The files published by the emitter.

        Raises:
            CallgenError: If planning, rendering or writing fails.
        """
        self.endpoints = endpoints
        self.plan = plan_catalog(endpoints, objects_module=self.config.objects_module)

        reserved = {
            Path(self.config.services_file).stem,
            Path(self.config.runtime_file).stem,
            '__init__',
        }
        for unit in self.plan.units:
            if unit in reserved:
                raise CodeGenerationError(
                    f"Output unit '{unit}' collides with a generated support module",
                    context=unit,
                )

        self._generate_services_file()
        for unit in self.plan.units:
            self._generate_unit_file(unit)

        self.emitter.emit_module(
            emit_init(
                self.plan,
                services_module=self.config.services_module,
                runtime_module=self.config.runtime_module,
            ),
            '__init__',
            docstring=self._package_docstring(),
        )
        self.emitter.emit_text(self.config.runtime_file, runtime_source())

        files = self.emitter.commit()
        logger.info(
            f'Generated {len(self.plan.units)} modules for '
            f'{len(endpoints)} endpoints in {self.config.output}'
        )
        return files

    def generate(self) -> list[str]:
        """Load the configured catalog and generate the package.

        Raises:
            CatalogLoadError: If the catalog cannot be read.
            CatalogValidationError: If the catalog is invalid.
            CodeGenerationError: If a module cannot be rendered.
            OutputError: If a file cannot be written.
        """
        self._load_catalog()

        if not self.endpoints:
            raise CallgenError(f'Catalog {self.config.source} has no endpoints')

        return self.generate_from(self.endpoints)
