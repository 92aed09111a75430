"""Service emitter: one service-handle class per group.

Each ``<Group>Service`` holds the shared transport and the auth token and
inherits the endpoint constructors from the ``<Group>Methods`` mixins of
every output unit the group has endpoints in. The module also declares
``Client``, which wires one service per group to a single transport.
"""

import ast

from callgen.codegen.ast_utils import (
    ImportCollector,
    _all,
    _argument,
    _assign,
    _attr,
    _call,
    _class,
    _docstring,
    _func,
    _import,
    _name,
)
from callgen.codegen.types import GenerationPlan, ServicePlan

__all__ = ('client_class', 'emit_init', 'emit_services', 'service_class')


def service_class(service: ServicePlan) -> ast.ClassDef:
    """Build ``<Group>Service`` from the unit mixins and ``BaseService``."""
    bases = [_attr(unit, service.mixin_class) for unit in service.units]
    return _class(
        service.class_name,
        [
            _docstring(
                f'{service.class_name} handles {service.group} related endpoints.'
            )
        ],
        bases=bases + [_name('BaseService')],
    )


def client_class(plan: GenerationPlan) -> ast.ClassDef:
    """Build ``Client``, exposing every service as a snake_case attribute."""
    body: list[ast.stmt] = [
        _assign(
            _attr('self', 'http'),
            _call(
                _name('HTTPClient'),
                [_name('base_url')],
                [ast.keyword(arg=None, value=_name('kwargs'))],
            ),
        ),
        _assign(_attr('self', 'token'), _name('token')),
    ]
    for service in plan.services:
        body.append(
            _assign(
                _attr('self', service.attribute),
                _call(
                    _name(service.class_name),
                    [_attr('self', 'http'), _attr('self', 'token')],
                ),
            )
        )

    init = _func(
        '__init__',
        [
            _argument('self'),
            _argument('token', _name('str')),
            _argument('base_url', _name('str')),
        ],
        body,
        returns=ast.Constant(value=None),
        defaults=[_name('BASE_URL')],
        kwargs=_argument('kwargs'),
    )
    doc = (
        'Client exposes one service per endpoint group.\n\n'
        '    Extra keyword arguments are passed to HTTPClient (http_client,\n'
        '    async_http_client, timeout).\n    '
    )
    return _class('Client', [_docstring(doc), init])


def emit_services(
    plan: GenerationPlan,
    runtime_module: str = '._runtime',
    base_url: str | None = None,
) -> list[ast.stmt]:
    """Build the module body declaring every service, in sorted group order.

    ``base_url`` becomes the ``BASE_URL`` default of ``Client``; without it the
    runtime's default is used.
    """
    collector = ImportCollector()
    collector.add_imports({runtime_module: {'BaseService', 'HTTPClient'}})
    if base_url:
        default_url: ast.expr = ast.Constant(value=base_url)
    else:
        collector.add_import(runtime_module, 'DEFAULT_BASE_URL')
        default_url = _name('DEFAULT_BASE_URL')

    units = sorted({unit for service in plan.services for unit in service.units})
    body: list[ast.stmt] = []
    if units:
        body.append(_import('.', units))
    body.extend(collector.to_ast())

    names = ['Client'] + [service.class_name for service in plan.services]
    body.append(_all(sorted(names)))
    body.append(_assign(_name('BASE_URL'), default_url))
    body.extend(service_class(service) for service in plan.services)
    body.append(client_class(plan))
    return body


def emit_init(
    plan: GenerationPlan,
    services_module: str = '.services',
    runtime_module: str = '._runtime',
) -> list[ast.stmt]:
    """Build the package ``__init__`` re-exporting the client and its errors."""
    errors = [
        'APIError',
        'CallError',
        'EncodeError',
        'HTTPClient',
        'MissingParameterError',
        'TransportError',
    ]
    services = ['Client'] + [service.class_name for service in plan.services]
    return [
        _import(runtime_module, errors),
        _import(services_module, sorted(services)),
        _all(sorted(errors + services)),
    ]
