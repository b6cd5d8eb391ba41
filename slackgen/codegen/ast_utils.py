"""Node builders used to assemble generated binding modules.

The emitters never write source text directly. Every request model, response
model, error family and callable is built from these helpers and printed
with ``ast.unparse``.
"""

import ast
from collections.abc import Iterable

__all__ = [
    '_name',
    '_attr',
    '_subscript',
    '_tuple',
    '_optional_expr',
    '_argument',
    '_assign',
    '_call',
    '_func',
    '_class',
    '_docstring',
    '_all',
    'ImportCollector',
    'ImportDict',
]

# module -> names imported from it
ImportDict = dict[str, set[str]]


def _name(name: str) -> ast.Name:
    return ast.Name(id=name, ctx=ast.Load())


def _attr(value: str | ast.expr, attr: str) -> ast.Attribute:
    base = _name(value) if isinstance(value, str) else value
    return ast.Attribute(value=base, attr=attr, ctx=ast.Load())


def _subscript(generic: str, inner: ast.expr) -> ast.Subscript:
    """``generic[inner]``, e.g. ``list[Channel]`` or ``RootModel[Union[...]]``."""
    return ast.Subscript(value=_name(generic), slice=inner, ctx=ast.Load())


def _tuple(elts: list[ast.expr]) -> ast.Tuple:
    return ast.Tuple(elts=elts, ctx=ast.Load())


def _optional_expr(inner: ast.expr) -> ast.Subscript:
    return _subscript('Optional', inner)


def _argument(name: str, annotation: ast.expr | None = None) -> ast.arg:
    return ast.arg(arg=name, annotation=annotation)


def _assign(target: ast.expr, value: ast.expr) -> ast.Assign:
    """Build ``target = value``.

    ``target`` may be a bare name, an attribute or a subscript such as
    ``params['channel']``; its context is switched to ``Store``.
    """
    if isinstance(target, ast.Name):
        target = ast.Name(id=target.id, ctx=ast.Store())
    elif isinstance(target, (ast.Attribute, ast.Subscript)):
        target.ctx = ast.Store()
    return ast.Assign(targets=[target], value=value)


def _call(
    func: ast.expr,
    args: list[ast.expr] | None = None,
    keywords: list[ast.keyword] | None = None,
) -> ast.Call:
    return ast.Call(func=func, args=list(args or []), keywords=list(keywords or []))


def _docstring(text: str) -> ast.Expr:
    return ast.Expr(value=ast.Constant(value=text))


def _func(
    name: str,
    args: list[ast.arg],
    body: list[ast.stmt],
    returns: ast.expr | None = None,
    decorators: list[ast.expr] | None = None,
) -> ast.FunctionDef:
    """Build a function with positional parameters only.

    Generated callables, classifiers and validators never take defaults,
    so the remaining ``ast.arguments`` slots stay empty.
    """
    signature = ast.arguments(
        posonlyargs=[], args=args, kwonlyargs=[], kw_defaults=[], defaults=[]
    )
    return ast.FunctionDef(
        name=name,
        args=signature,
        body=body,
        decorator_list=decorators or [],
        returns=returns,
        type_params=[],
    )


def _class(
    name: str,
    bases: list[ast.expr],
    body: list[ast.stmt],
    docstring: str | None = None,
) -> ast.ClassDef:
    if docstring:
        body = [_docstring(docstring), *body]
    return ast.ClassDef(
        name=name,
        bases=bases,
        keywords=[],
        body=body or [ast.Pass()],
        decorator_list=[],
        type_params=[],
    )


def _all(names: Iterable[str]) -> ast.Assign:
    exported = [ast.Constant(value=name) for name in names]
    return _assign(_name('__all__'), _tuple(exported))


class ImportCollector:
    """Merges the imports requested by every unit of a generated module.

    Each method unit reports the names it needs per source module. The
    collector unions them so a module is imported from once, and renders
    the result sorted by module and by name.
    """

    def __init__(self):
        self._imports: ImportDict = {}

    def add_imports(self, imports: ImportDict) -> None:
        for module, names in imports.items():
            self._imports.setdefault(module, set()).update(names)

    def add_import(self, module: str, name: str) -> None:
        self._imports.setdefault(module, set()).add(name)

    def to_ast(self) -> list[ast.ImportFrom]:
        statements = []
        for module in sorted(self._imports):
            aliases = [ast.alias(name=name) for name in sorted(self._imports[module])]
            statements.append(ast.ImportFrom(module=module, names=aliases, level=0))
        return statements

    def as_dict(self) -> ImportDict:
        """Copy of the collected imports; mutating it leaves the collector unchanged."""
        return {module: set(names) for module, names in self._imports.items()}
