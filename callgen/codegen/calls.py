"""Call emitter: request builder classes for one output unit.

For every endpoint of a unit this module builds a call-state dataclass with
fluent setters, a ``values()`` serializer and ``do()``/``ado()`` execution
methods, plus the optional response envelope model. Constructors are
gathered on one ``<Group>Methods`` mixin per group, which the service
classes inherit from.
"""

import ast

from callgen.codegen.ast_utils import (
    ImportCollector,
    _all,
    _ann_assign,
    _argument,
    _assign,
    _async_func,
    _attr,
    _call,
    _class,
    _docstring,
    _func,
    _import,
    _name,
    _subscript,
    _union_expr,
)
from callgen.codegen.types import ArgumentPlan, EndpointPlan, Kind, Setter, TypeRef

__all__ = (
    'call_class',
    'emit_unit',
    'mixin_class',
    'response_class',
    'values_fn',
)


def _self(attr: str) -> ast.Attribute:
    return _attr('self', attr)


def _str_dict() -> ast.Subscript:
    return _subscript('dict', ast.Tuple(elts=[_name('str'), _name('str')]))


def _field_default(arg_type: TypeRef) -> ast.expr:
    """Zero value a call-state field starts with."""
    match arg_type.kind:
        case Kind.TEXT:
            return ast.Constant(value='')
        case Kind.BOOLEAN:
            return ast.Constant(value=False)
        case Kind.INTEGER:
            return ast.Constant(value=0)
        case Kind.LIST:
            return _call(
                _name('field'),
                keywords=[
                    ast.keyword(arg='default_factory', value=_name(arg_type.name))
                ],
            )
        case _:
            return ast.Constant(value=None)


def _is_unset(arg: ArgumentPlan) -> ast.expr:
    value = _self(arg.attribute)
    match arg.type.kind:
        case Kind.INTEGER:
            return ast.Compare(
                left=value, ops=[ast.Eq()], comparators=[ast.Constant(value=0)]
            )
        case Kind.OBJECT:
            return ast.Compare(
                left=value, ops=[ast.Is()], comparators=[ast.Constant(value=None)]
            )
        case _:
            # text, boolean and list values are unset when falsy
            return ast.UnaryOp(op=ast.Not(), operand=value)


def _is_set(arg: ArgumentPlan) -> ast.expr:
    value = _self(arg.attribute)
    match arg.type.kind:
        case Kind.INTEGER:
            return ast.Compare(
                left=value, ops=[ast.NotEq()], comparators=[ast.Constant(value=0)]
            )
        case Kind.OBJECT:
            return ast.Compare(
                left=value, ops=[ast.IsNot()], comparators=[ast.Constant(value=None)]
            )
        case _:
            return value


def _encoded(arg: ArgumentPlan) -> ast.expr:
    value = _self(arg.attribute)
    match arg.type.kind:
        case Kind.TEXT:
            return value
        case Kind.BOOLEAN:
            # false is never sent; a set boolean is always 'true'
            return ast.Constant(value='true')
        case Kind.INTEGER:
            return _call(_name('str'), [value])
        case _:
            return _call(
                _name('encode_field'), [ast.Constant(value=arg.argument.name), value]
            )


def _set_value(key: str, value: ast.expr) -> ast.Assign:
    return _assign(
        ast.Subscript(value=_name('v'), slice=ast.Constant(value=key), ctx=ast.Store()),
        value,
    )


def values_fn(plan: EndpointPlan) -> ast.FunctionDef:
    """Build ``values()``, which turns the call state into form parameters.

    The token comes first unless the endpoint skips it; arguments follow in
    sorted order. An unset required argument raises MissingParameterError
    and an unset optional argument is left out.
    """
    body: list[ast.stmt] = [
        _docstring(f'values returns the {plan.call_class} object as form values.'),
        _ann_assign('v', _str_dict(), ast.Dict(keys=[], values=[])),
    ]
    if not plan.endpoint.skip_token:
        body.append(_set_value('token', _attr(_self('service'), '_token')))

    for arg in plan.arguments:
        assignment = _set_value(arg.argument.key, _encoded(arg))
        if arg.required:
            body.append(
                ast.If(
                    test=_is_unset(arg),
                    body=[
                        ast.Raise(
                            exc=_call(
                                _name('MissingParameterError'),
                                [ast.Constant(value=arg.argument.name)],
                            ),
                            cause=None,
                        )
                    ],
                    orelse=[],
                )
            )
            body.append(assignment)
        else:
            body.append(ast.If(test=_is_set(arg), body=[assignment], orelse=[]))

    body.append(ast.Return(value=_name('v')))
    return _func('values', [_argument('self')], body, returns=_str_dict())


def _setter_fn(
    plan: EndpointPlan, arg: ArgumentPlan, setter: Setter
) -> ast.FunctionDef:
    if setter.kind == 'append':
        doc = f'{setter.name} appends to the {arg.argument.name} list.'
        statement: ast.stmt = ast.Expr(
            value=_call(
                _attr(_self(arg.attribute), 'append'), [_name(setter.parameter)]
            )
        )
    else:
        if setter.kind == 'replace':
            doc = f'{setter.name} sets the {arg.argument.name} list.'
        else:
            doc = (
                f'{setter.name} sets the value for optional '
                f'{arg.argument.name} parameter.'
            )
        statement = _assign(_self(arg.attribute), _name(setter.parameter))

    return _func(
        setter.name,
        [_argument('self'), _argument(setter.parameter, setter.type.annotation_ast)],
        [_docstring(doc), statement, ast.Return(value=_name('self'))],
        returns=ast.Constant(value=plan.call_class),
    )


def _return_annotation(plan: EndpointPlan) -> ast.expr:
    if plan.return_type is None:
        return ast.Constant(value=None)
    if plan.has_payload_field:
        return _union_expr([plan.return_type.annotation_ast, ast.Constant(value=None)])
    return plan.return_type.annotation_ast


def _do_body(plan: EndpointPlan, is_async: bool) -> list[ast.stmt]:
    client = _attr(_self('service'), '_client')
    post: ast.expr = _call(
        _attr(client, 'apost_form' if is_async else 'post_form'),
        [_name('endpoint'), _name('v')],
        [ast.keyword(arg='timeout', value=_name('timeout'))],
    )
    if is_async:
        post = ast.Await(value=post)

    name = 'ado' if is_async else 'do'
    envelope = _name(plan.response_class if plan.has_payload_field else 'Envelope')
    body: list[ast.stmt] = [
        _docstring(f'{name} executes the call to access {plan.name} endpoint.'),
        _assign(_name('endpoint'), ast.Constant(value=plan.name)),
        _assign(_name('v'), _call(_attr('self', 'values'))),
        _assign(_name('data'), post),
        _assign(
            _name('res'),
            _call(
                _name('decode_response'), [_name('endpoint'), envelope, _name('data')]
            ),
        ),
        ast.If(
            test=ast.UnaryOp(op=ast.Not(), operand=_attr('res', 'ok')),
            body=[
                ast.Raise(
                    exc=_call(
                        _name('APIError'),
                        [_attr('res', 'error')],
                        [ast.keyword(arg='endpoint', value=_name('endpoint'))],
                    ),
                    cause=None,
                )
            ],
            orelse=[],
        ),
    ]

    if plan.has_payload_field:
        body.append(ast.Return(value=_attr('res', 'payload')))
    elif plan.return_type is not None:
        # the payload is embedded in the envelope itself
        body.append(
            ast.Return(
                value=_call(
                    _name('decode_response'),
                    [_name('endpoint'), plan.return_type.annotation_ast, _name('data')],
                )
            )
        )
    return body


def _do_fns(plan: EndpointPlan) -> list[ast.stmt]:
    args = [
        _argument('self'),
        _argument('timeout', _union_expr([_name('float'), ast.Constant(value=None)])),
    ]
    return [
        _func(
            'do',
            args,
            _do_body(plan, is_async=False),
            returns=_return_annotation(plan),
            defaults=[ast.Constant(value=None)],
        ),
        _async_func(
            'ado',
            args,
            _do_body(plan, is_async=True),
            returns=_return_annotation(plan),
            defaults=[ast.Constant(value=None)],
        ),
    ]


def _class_docstring(plan: EndpointPlan) -> str:
    lines = [
        f'{plan.call_class} is created by '
        f'{plan.service_class}.{plan.constructor} method call.'
    ]
    if plan.endpoint.description:
        lines += ['', plan.endpoint.description]
    documented = [arg for arg in plan.arguments if arg.argument.comment]
    if documented:
        lines += ['', 'Attributes:']
        lines += [f'    {arg.attribute}: {arg.argument.comment}' for arg in documented]
    if len(lines) == 1:
        return lines[0]
    return '\n    '.join(lines) + '\n    '


def call_class(plan: EndpointPlan) -> ast.ClassDef:
    """Build the call-state dataclass of one endpoint."""
    body: list[ast.stmt] = [
        _docstring(_class_docstring(plan)),
        _ann_assign('service', ast.Constant(value=plan.service_class)),
    ]
    for arg in plan.arguments:
        body.append(
            _ann_assign(
                arg.attribute, arg.type.field_annotation_ast, _field_default(arg.type)
            )
        )
    for arg in plan.arguments:
        body.extend(_setter_fn(plan, arg, setter) for setter in arg.setters)
    body.append(values_fn(plan))
    body.extend(_do_fns(plan))

    return _class(plan.call_class, body, decorators=[_name('dataclass')])


def response_class(plan: EndpointPlan) -> ast.ClassDef | None:
    """Build the envelope model carrying the payload, if the endpoint has one."""
    if not plan.has_payload_field:
        return None
    payload = _ann_assign(
        'payload',
        _union_expr([plan.return_type.annotation_ast, ast.Constant(value=None)]),
        _call(
            _name('Field'),
            keywords=[
                ast.keyword(arg='default', value=ast.Constant(value=None)),
                ast.keyword(
                    arg='alias', value=ast.Constant(value=plan.endpoint.response_field)
                ),
            ],
        ),
    )
    return _class(
        plan.response_class,
        [_docstring(f'Response envelope of the {plan.name} endpoint.'), payload],
        bases=[_name('Envelope')],
    )


def _constructor_fn(plan: EndpointPlan) -> ast.FunctionDef:
    required = plan.required_arguments
    doc = (
        f'{plan.constructor} creates a {plan.call_class} object in preparation '
        f'for accessing the {plan.name} endpoint.'
    )
    keywords = [ast.keyword(arg='service', value=_name('self'))]
    keywords += [
        ast.keyword(arg=arg.attribute, value=_name(arg.attribute)) for arg in required
    ]
    value = _call(_name(plan.call_class), keywords=keywords)
    return _func(
        plan.constructor,
        [_argument('self')]
        + [_argument(arg.attribute, arg.type.annotation_ast) for arg in required],
        [_docstring(doc), ast.Return(value=value)],
        returns=_name(plan.call_class),
    )


def mixin_class(group: str, plans: list[EndpointPlan]) -> ast.ClassDef:
    """Build the ``<Group>Methods`` mixin holding the constructors of a group."""
    return _class(
        f'{group}Methods',
        [_docstring(f'Constructors of {group}Service defined in this module.')]
        + [_constructor_fn(plan) for plan in plans],
    )


def _collect_imports(
    plans: list[EndpointPlan], runtime_module: str, services_module: str
) -> tuple[ImportCollector, set[str]]:
    collector = ImportCollector()
    collector.add_imports(
        {
            'dataclasses': {'dataclass'},
            'typing': {'TYPE_CHECKING'},
            runtime_module: {'APIError', 'decode_response'},
        }
    )
    services = set()
    for plan in plans:
        services.add(plan.service_class)
        if plan.has_payload_field:
            collector.add_import('pydantic', 'Field')
        collector.add_import(runtime_module, 'Envelope')
        if plan.return_type is not None:
            collector.add_imports(plan.return_type.imports)
        for arg in plan.arguments:
            collector.add_imports(arg.type.imports)
            if arg.required:
                collector.add_import(runtime_module, 'MissingParameterError')
            if arg.type.kind == Kind.LIST:
                collector.add_import('dataclasses', 'field')
            if arg.type.kind in (Kind.LIST, Kind.OBJECT):
                collector.add_import(runtime_module, 'encode_field')
    return collector, services


def emit_unit(
    plans: list[EndpointPlan],
    runtime_module: str = '._runtime',
    services_module: str = '.services',
) -> list[ast.stmt]:
    """Build the module body of one output unit.

    ``plans`` must already be in emission order (sorted by endpoint name).
    """
    collector, services = _collect_imports(plans, runtime_module, services_module)

    classes: list[ast.stmt] = []
    names: list[str] = []
    for plan in plans:
        response = response_class(plan)
        if response is not None:
            classes.append(response)
            names.append(response.name)
        classes.append(call_class(plan))
        names.append(plan.call_class)

    groups: dict[str, list[EndpointPlan]] = {}
    for plan in plans:
        groups.setdefault(plan.group, []).append(plan)
    for group in sorted(groups):
        mixin = mixin_class(group, groups[group])
        classes.append(mixin)
        names.append(mixin.name)

    type_checking = ast.If(
        test=_name('TYPE_CHECKING'),
        body=[_import(services_module, sorted(services))],
        orelse=[],
    )
    return [*collector.to_ast(), type_checking, _all(sorted(names)), *classes]
