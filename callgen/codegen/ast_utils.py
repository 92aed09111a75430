"""AST utilities and import collection for code generation.

This module provides helper functions for building Python AST nodes
and utilities for collecting and organizing imports during code generation.
"""

import ast
from collections.abc import Iterable

__all__ = [
    # AST helpers
    '_name',
    '_attr',
    '_subscript',
    '_union_expr',
    '_argument',
    '_assign',
    '_ann_assign',
    '_import',
    '_call',
    '_func',
    '_async_func',
    '_class',
    '_docstring',
    '_all',
    # Import collection
    'ImportCollector',
]


def _name(name: str) -> ast.Name:
    return ast.Name(id=name, ctx=ast.Load())


def _attr(value: str | ast.expr, attr: str) -> ast.Attribute:
    return ast.Attribute(
        value=_name(value) if isinstance(value, str) else value,
        attr=attr,
        ctx=ast.Load(),
    )


def _subscript(generic: str, inner: ast.expr) -> ast.Subscript:
    return ast.Subscript(value=_name(generic), slice=inner, ctx=ast.Load())


def _union_expr(types: list[ast.expr]) -> ast.expr:
    # A | B | C
    if not types:
        raise ValueError('_union_expr requires at least one type')
    result = types[0]
    for t in types[1:]:
        result = ast.BinOp(left=result, op=ast.BitOr(), right=t)
    return result


def _argument(name: str, value: ast.expr | None = None) -> ast.arg:
    return ast.arg(
        arg=name,
        annotation=value,
    )


def _assign(target: ast.expr, value: ast.expr) -> ast.Assign:
    # Ensure target has Store context
    if isinstance(target, ast.Name):
        target = ast.Name(id=target.id, ctx=ast.Store())
    elif isinstance(target, (ast.Attribute, ast.Subscript)):
        target.ctx = ast.Store()
    return ast.Assign(
        targets=[target],
        value=value,
    )


def _ann_assign(
    name: str, annotation: ast.expr, value: ast.expr | None = None
) -> ast.AnnAssign:
    return ast.AnnAssign(
        target=ast.Name(id=name, ctx=ast.Store()),
        annotation=annotation,
        value=value,
        simple=1,
    )


def _import(module: str, names: list[str]) -> ast.ImportFrom:
    """Build ``from module import names``; leading dots make it relative."""
    stripped = module.lstrip('.')
    return ast.ImportFrom(
        module=stripped or None,
        names=[ast.alias(name=name) for name in names],
        level=len(module) - len(stripped),
    )


def _call(
    func: ast.expr,
    args: list[ast.expr] | None = None,
    keywords: list[ast.keyword] | None = None,
) -> ast.Call:
    return ast.Call(
        func=func,
        args=args or [],
        keywords=keywords or [],
    )


def _arguments(
    args: list[ast.arg],
    defaults: list[ast.expr] | None,
    kwargs: ast.arg | None,
    kwonlyargs: list[ast.arg] | None,
    kw_defaults: list[ast.expr] | None,
) -> ast.arguments:
    return ast.arguments(
        posonlyargs=[],
        args=args,
        kwarg=kwargs,
        kwonlyargs=kwonlyargs or [],
        kw_defaults=kw_defaults or [],
        defaults=defaults or [],
    )


def _func(
    name: str,
    args: list[ast.arg],
    body: list[ast.stmt],
    returns: ast.expr | None = None,
    defaults: list[ast.expr] | None = None,
    kwargs: ast.arg | None = None,
    kwonlyargs: list[ast.arg] | None = None,
    kw_defaults: list[ast.expr] | None = None,
) -> ast.FunctionDef:
    return ast.FunctionDef(
        name=name,
        args=_arguments(args, defaults, kwargs, kwonlyargs, kw_defaults),
        body=body,
        decorator_list=[],
        returns=returns,
        type_params=[],
    )


def _async_func(
    name: str,
    args: list[ast.arg],
    body: list[ast.stmt],
    returns: ast.expr | None = None,
    defaults: list[ast.expr] | None = None,
    kwargs: ast.arg | None = None,
    kwonlyargs: list[ast.arg] | None = None,
    kw_defaults: list[ast.expr] | None = None,
) -> ast.AsyncFunctionDef:
    return ast.AsyncFunctionDef(
        name=name,
        args=_arguments(args, defaults, kwargs, kwonlyargs, kw_defaults),
        body=body,
        decorator_list=[],
        returns=returns,
        type_params=[],
    )


def _class(
    name: str,
    body: list[ast.stmt],
    bases: list[ast.expr] | None = None,
    decorators: list[ast.expr] | None = None,
) -> ast.ClassDef:
    return ast.ClassDef(
        name=name,
        bases=bases or [],
        keywords=[],
        body=body or [ast.Pass()],
        decorator_list=decorators or [],
        type_params=[],
    )


def _docstring(text: str) -> ast.Expr:
    return ast.Expr(value=ast.Constant(value=text))


def _all(names: Iterable[str]) -> ast.Assign:
    return _assign(
        target=_name('__all__'),
        value=ast.Tuple(
            elts=[ast.Constant(value=name) for name in names], ctx=ast.Load()
        ),
    )


# =============================================================================
# Import Collection
# =============================================================================


class ImportCollector:
    """Collects and manages imports for generated Python code.

    Imports are deduplicated and emitted in a stable order: absolute
    modules sorted by name, then relative modules (leading dots) sorted by
    name. Names within each import are sorted alphabetically.

    Example:
        >>> collector = ImportCollector()
        >>> collector.add_imports({'dataclasses': {'dataclass', 'field'}})
        >>> collector.add_import('._runtime', 'APIError')
        >>> imports = collector.to_ast()
    """

    def __init__(self):
        self._imports: dict[str, set[str]] = {}

    def add_imports(self, imports: dict[str, set[str]]) -> None:
        """Add imports from a dictionary mapping modules to sets of names."""
        for module, names in imports.items():
            self._imports.setdefault(module, set()).update(names)

    def add_import(self, module: str, name: str) -> None:
        self._imports.setdefault(module, set()).add(name)

    def to_ast(self) -> list[ast.ImportFrom]:
        """Convert collected imports to AST ImportFrom statements."""
        ordered = sorted(self._imports, key=lambda m: (m.startswith('.'), m))
        return [_import(module, sorted(self._imports[module])) for module in ordered]
