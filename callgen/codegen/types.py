"""Type descriptors and the in-memory model of emitted constructs.

Catalog type strings are parsed into :class:`TypeRef` objects that know
their wire encoding kind, their annotation AST and the imports they need.
The grouping engine turns catalog endpoints into :class:`EndpointPlan`
and :class:`ServicePlan` objects; the emitters render those plans to AST.
"""

import ast
import re
from dataclasses import dataclass, field
from enum import StrEnum

from callgen.catalog import Argument, Endpoint
from callgen.codegen.ast_utils import _name, _subscript, _union_expr

__all__ = (
    'ArgumentPlan',
    'EndpointPlan',
    'GenerationPlan',
    'Kind',
    'ServicePlan',
    'Setter',
    'TypeRef',
    'parse_type',
)

TEXT_TYPES = {'str', 'string'}
BOOLEAN_TYPES = {'bool', 'boolean'}
INTEGER_TYPES = {'int', 'integer'}
LIST_SUFFIX = 'List'

_GENERIC_LIST = re.compile(r'^list\[(?P<element>.+)\]$')


class Kind(StrEnum):
    TEXT = 'text'
    BOOLEAN = 'boolean'
    INTEGER = 'integer'
    LIST = 'list'
    OBJECT = 'object'


@dataclass(frozen=True)
class TypeRef:
    """A parsed argument or return type.

    Attributes:
        raw: The type string as written in the catalog.
        kind: How values of this type are tested for emptiness and encoded.
        name: The Python name of the type (``str``, ``list``, ``Channel``).
        module: Module the name is imported from, empty for builtins.
        element: Element type for list kinds.
    """

    raw: str
    kind: Kind
    name: str
    module: str = ''
    element: 'TypeRef | None' = None

    @property
    def is_generic_list(self) -> bool:
        return self.kind == Kind.LIST and self.name == 'list'

    @property
    def annotation_ast(self) -> ast.expr:
        if self.is_generic_list:
            return _subscript('list', self.element.annotation_ast)
        return _name(self.name)

    @property
    def field_annotation_ast(self) -> ast.expr:
        """Annotation of the call-state field; objects may be unset."""
        if self.kind == Kind.OBJECT:
            return _union_expr([self.annotation_ast, ast.Constant(value=None)])
        return self.annotation_ast

    @property
    def imports(self) -> dict[str, set[str]]:
        imports: dict[str, set[str]] = {}
        if self.module:
            imports[self.module] = {self.name}
        if self.element is not None:
            for module, names in self.element.imports.items():
                imports.setdefault(module, set()).update(names)
        return imports


def parse_type(raw: str, objects_module: str = '.objects') -> TypeRef:
    """Parse a catalog type string.

    ``str``/``string``, ``bool``/``boolean`` and ``int``/``integer`` are the
    scalar kinds. ``list[X]`` is a plain list of ``X``; a named type ending in
    ``List`` is a list class whose elements are the name without the suffix.
    Everything else is an opaque object. Dotted names are imported from
    their module, bare names from ``objects_module``.
    """
    raw = raw.strip()
    if raw in TEXT_TYPES:
        return TypeRef(raw, Kind.TEXT, 'str')
    if raw in BOOLEAN_TYPES:
        return TypeRef(raw, Kind.BOOLEAN, 'bool')
    if raw in INTEGER_TYPES:
        return TypeRef(raw, Kind.INTEGER, 'int')

    match = _GENERIC_LIST.match(raw)
    if match:
        element = parse_type(match.group('element'), objects_module)
        return TypeRef(raw, Kind.LIST, 'list', element=element)

    module, _, name = raw.rpartition('.')
    module = module or objects_module
    if name.endswith(LIST_SUFFIX) and len(name) > len(LIST_SUFFIX):
        element = TypeRef(
            raw[: -len(LIST_SUFFIX)], Kind.OBJECT, name[: -len(LIST_SUFFIX)], module
        )
        return TypeRef(raw, Kind.LIST, name, module, element=element)
    return TypeRef(raw, Kind.OBJECT, name, module)


@dataclass(frozen=True)
class Setter:
    """One fluent setter on a call-state class.

    ``kind`` is ``set`` for scalar/object assignment, ``replace`` for the list
    replace setter and ``append`` for the list append setter.
    """

    name: str
    kind: str
    parameter: str
    type: TypeRef


@dataclass
class ArgumentPlan:
    argument: Argument
    attribute: str
    type: TypeRef
    setters: list[Setter] = field(default_factory=list)

    @property
    def required(self) -> bool:
        return self.argument.required


@dataclass
class EndpointPlan:
    """All naming decisions for one endpoint."""

    endpoint: Endpoint
    unit: str
    group: str
    method: str
    constructor: str
    arguments: list[ArgumentPlan]
    return_type: TypeRef | None = None

    @property
    def name(self) -> str:
        return self.endpoint.name

    @property
    def call_class(self) -> str:
        return f'{self.group}{self.method}Call'

    @property
    def response_class(self) -> str:
        return f'{self.group}{self.method}Response'

    @property
    def service_class(self) -> str:
        return f'{self.group}Service'

    @property
    def mixin_class(self) -> str:
        return f'{self.group}Methods'

    @property
    def has_payload_field(self) -> bool:
        return self.return_type is not None and bool(self.endpoint.response_field)

    @property
    def required_arguments(self) -> list[ArgumentPlan]:
        return [arg for arg in self.arguments if arg.required]


@dataclass
class ServicePlan:
    group: str
    attribute: str
    units: list[str]

    @property
    def class_name(self) -> str:
        return f'{self.group}Service'

    @property
    def mixin_class(self) -> str:
        return f'{self.group}Methods'


@dataclass
class GenerationPlan:
    """Deterministic traversal order consumed by the emitters."""

    services: list[ServicePlan]
    units: dict[str, list[EndpointPlan]]

    @property
    def groups(self) -> list[str]:
        return [service.group for service in self.services]

    @property
    def endpoints(self) -> list[EndpointPlan]:
        return [plan for plans in self.units.values() for plan in plans]
