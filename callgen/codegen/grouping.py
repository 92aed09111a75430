"""Grouping and ordering of catalog endpoints.

This module derives every name the emitters need (output unit, group,
method identifier, setter names) and produces the sorted traversal order
that makes generation byte-for-byte reproducible.
"""

import logging
from collections.abc import Iterable

from callgen.catalog import Argument, Endpoint
from callgen.codegen.naming import camelize, singularize, to_snake_case
from callgen.codegen.types import (
    ArgumentPlan,
    EndpointPlan,
    GenerationPlan,
    Kind,
    ServicePlan,
    Setter,
    parse_type,
)
from callgen.codegen.utils import sanitize_attribute_name
from callgen.exceptions import EndpointGenerationError

__all__ = (
    'member_name',
    'output_unit',
    'plan_argument',
    'plan_catalog',
    'plan_endpoint',
)

logger = logging.getLogger(__name__)

# Names evaluated in the body of a call-state class, or bound in its methods
RESERVED_MEMBERS = frozenset(
    {
        'ado',
        'bool',
        'dict',
        'do',
        'field',
        'float',
        'int',
        'list',
        'self',
        'service',
        'str',
        'values',
    }
)


def output_unit(endpoint: Endpoint) -> str:
    """Module name co-locating all endpoints of one namespace."""
    return sanitize_attribute_name(endpoint.namespace.replace('.', '_'))


def member_name(name: str) -> str:
    """Identifier of an argument on the call-state class and its setters."""
    attribute = sanitize_attribute_name(name)
    if attribute in RESERVED_MEMBERS:
        return f'{attribute}_'
    return attribute


def plan_argument(argument: Argument, objects_module: str = '.objects') -> ArgumentPlan:
    """Resolve the field type and the optional setters of one argument."""
    arg_type = parse_type(argument.type, objects_module)
    attribute = member_name(argument.name)
    plan = ArgumentPlan(argument=argument, attribute=attribute, type=arg_type)

    if argument.required:
        return plan

    setter_name = f'set_{to_snake_case(camelize(argument.name))}'
    if arg_type.kind == Kind.LIST:
        plan.setters.append(Setter(setter_name, 'replace', attribute, arg_type))

        singular = singularize(argument.name, argument.singular)
        if singular == argument.name:
            logger.warning(
                f"List argument '{argument.name}' has no plural suffix; "
                f"its append setter is named after the argument itself"
            )
        plan.setters.append(
            Setter(
                f'add_{to_snake_case(camelize(singular))}',
                'append',
                member_name(singular),
                arg_type.element,
            )
        )
    else:
        plan.setters.append(Setter(setter_name, 'set', attribute, arg_type))
    return plan


def plan_endpoint(endpoint: Endpoint, objects_module: str = '.objects') -> EndpointPlan:
    """Derive unit, group, method identifier and sorted arguments of an endpoint.

    Raises:
        EndpointGenerationError: If the unit, an argument or a type cannot be
            planned.
    """
    group = endpoint.group
    if not group:
        group = camelize(endpoint.namespace)
        logger.debug(f"Endpoint '{endpoint.name}' defaults to group '{group}'")

    method = camelize(endpoint.method_name)

    try:
        unit = output_unit(endpoint)
        arguments = [
            plan_argument(argument, objects_module)
            for argument in sorted(endpoint.args, key=lambda a: a.name)
        ]
        return_type = (
            parse_type(endpoint.return_type, objects_module)
            if endpoint.return_type
            else None
        )
    except ValueError as e:
        raise EndpointGenerationError(endpoint.name, e) from e

    return EndpointPlan(
        endpoint=endpoint,
        unit=unit,
        group=group,
        method=method,
        constructor=to_snake_case(method),
        arguments=arguments,
        return_type=return_type,
    )


def plan_catalog(
    endpoints: Iterable[Endpoint], objects_module: str = '.objects'
) -> GenerationPlan:
    """Partition endpoints into sorted output units and distinct sorted groups.

    Every endpoint lands in exactly one unit; units are ordered by name and
    the endpoints within a unit by their full dotted name.
    """
    units: dict[str, list[EndpointPlan]] = {}
    group_units: dict[str, set[str]] = {}

    for endpoint in endpoints:
        plan = plan_endpoint(endpoint, objects_module)
        units.setdefault(plan.unit, []).append(plan)
        group_units.setdefault(plan.group, set()).add(plan.unit)

    sorted_units = {
        unit: sorted(units[unit], key=lambda p: p.name) for unit in sorted(units)
    }
    services = [
        ServicePlan(
            group=group,
            attribute=to_snake_case(group),
            units=sorted(group_units[group]),
        )
        for group in sorted(group_units)
    ]

    logger.debug(
        f'Planned {len(services)} services across {len(sorted_units)} output units'
    )
    return GenerationPlan(services=services, units=sorted_units)
