"""Request types and parameter binding.

Each declared parameter becomes a public field of the method's request
model and one statement that writes it into the outgoing parameter map:

============  ========  ==========================================
type          optional  encoding
============  ========  ==========================================
boolean       no        always inserted, ``'1'`` if true else ``'0'``
boolean       yes       inserted when not ``None``, same encoding
integer       no        always inserted, decimal string
integer       yes       inserted when not ``None``, decimal string
other         no        always inserted as is
other         yes       inserted when not ``None``, as is
============  ========  ==========================================
"""

import ast

from slackgen.codegen.ast_utils import (
    ImportDict,
    _assign,
    _attr,
    _call,
    _class,
    _name,
    _optional_expr,
)
from slackgen.codegen.types import field_names
from slackgen.codegen.utils import sanitize_identifier
from slackgen.schema import Param

PARAMS_VAR = 'params'
REQUEST_VAR = 'request'

_PARAM_TYPE_MAP = {
    'boolean': 'bool',
    'integer': 'int',
}


def param_attribute(param: Param) -> str:
    """The request-model attribute holding a parameter."""
    return sanitize_identifier(param.name)


def param_annotation(param: Param) -> ast.expr:
    type_ = _name(_PARAM_TYPE_MAP.get(param.type, 'str'))
    return _optional_expr(type_) if param.optional else type_


def request_class(name: str, method_name: str, params: list[Param]) -> tuple[ast.ClassDef, ImportDict]:
    """Build the request model of a method: one public field per parameter.

    Raises:
        SchemaShapeError: If parameter names do not map to distinct attributes.
    """
    attributes = field_names(name, [param.name for param in params])
    imports: ImportDict = {'pydantic': {'BaseModel'}}
    body: list[ast.stmt] = []

    for attribute, param in zip(attributes, params):
        keywords = []
        if param.optional:
            keywords.append(ast.keyword(arg='default', value=ast.Constant(None)))
            imports['typing'] = {'Optional'}
        if param.description:
            keywords.append(ast.keyword(arg='description', value=ast.Constant(param.description)))

        value = None
        if keywords:
            imports['pydantic'].add('Field')
            value = _call(_name('Field'), keywords=keywords)

        body.append(
            ast.AnnAssign(
                target=_name(attribute),
                annotation=param_annotation(param),
                value=value,
                simple=1,
            )
        )

    return _class(name, [_name('BaseModel')], body, docstring=f'Parameters of ``{method_name}``.'), imports


def _encode(param: Param, value: ast.expr) -> ast.expr:
    if param.type == 'boolean':
        # '1' if value else '0'
        return ast.IfExp(test=value, body=ast.Constant('1'), orelse=ast.Constant('0'))
    if param.type == 'integer':
        return _call(_name('str'), args=[value])
    return value


def param_insertion(param: Param) -> ast.stmt:
    """Build the statement writing one parameter into the parameter map."""
    value = _attr(REQUEST_VAR, param_attribute(param))
    insert = _assign(
        ast.Subscript(value=_name(PARAMS_VAR), slice=ast.Constant(param.name), ctx=ast.Store()),
        _encode(param, value),
    )
    if not param.optional:
        return insert

    return ast.If(
        test=ast.Compare(
            left=_attr(REQUEST_VAR, param_attribute(param)),
            ops=[ast.IsNot()],
            comparators=[ast.Constant(None)],
        ),
        body=[insert],
        orelse=[],
    )
