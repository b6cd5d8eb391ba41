"""Result facade synthesis.

Responses that carry an ``ok`` flag get a ``to_result`` method which returns
the response when the call succeeded and raises the method's classified
error otherwise. Enums whose every variant carries ``ok`` delegate to the
active variant and re-wrap its result.
"""

import ast

from slackgen.codegen.ast_utils import _argument, _attr, _call, _docstring, _func, _name
from slackgen.codegen.errors import ErrorTaxonomy
from slackgen.codegen.types import JsonEnum, JsonEnumVariant, JsonObject, has_ok
from slackgen.exceptions import SchemaShapeError

TO_RESULT = 'to_result'


def require_facade(enm: JsonEnum, variant: JsonEnumVariant) -> None:
    """Ensure a variant of an enum with a facade can answer whether the call succeeded.

    Raises:
        SchemaShapeError: If the variant's payload is not an object or enum
            with an ``ok`` flag.
    """
    if not isinstance(variant.inner, (JsonObject, JsonEnum)):
        raise SchemaShapeError(
            f"Variant '{variant.name}' of enum '{enm.name}' is not an object or enum "
            'and cannot have an "ok" field',
            type_name=variant.qualified_name,
        )
    if not has_ok(variant.inner):
        raise SchemaShapeError(
            f"Variant '{variant.name}' of enum '{enm.name}' does not have an \"ok\" field",
            type_name=variant.qualified_name,
        )


def object_to_result(obj: JsonObject, taxonomy: ErrorTaxonomy) -> ast.FunctionDef:
    """Build ``to_result`` for an object with an ``ok`` field.

    The generated method reads::

        def to_result(self) -> 'PostMessageResponse':
            if self.ok:
                return self
            if self.error is not None:
                raise PostMessageError.from_code(self.error)
            raise PostMessageMalformedResponseError()
    """
    has_error = any(f.name == 'error' for f in obj.fields)

    body: list[ast.stmt] = [
        _docstring(
            'Return this response if the call succeeded, otherwise raise '
            f'the matching :class:`{taxonomy.base_name}`.'
        ),
        ast.If(
            test=_attr('self', 'ok'),
            body=[ast.Return(value=_name('self'))],
            orelse=[],
        ),
    ]
    if has_error:
        body.append(
            ast.If(
                test=ast.Compare(
                    left=_attr('self', 'error'),
                    ops=[ast.IsNot()],
                    comparators=[ast.Constant(value=None)],
                ),
                body=[
                    ast.Raise(
                        exc=_call(
                            _attr(taxonomy.base_name, taxonomy.CLASSIFIER),
                            args=[_attr('self', 'error')],
                        ),
                        cause=None,
                    )
                ],
                orelse=[],
            )
        )
    body.append(ast.Raise(exc=_call(_name(taxonomy.malformed_name)), cause=None))

    return _func(
        name=TO_RESULT,
        args=[_argument('self')],
        body=body,
        returns=ast.Constant(value=obj.name),
    )


def enum_to_result(enm: JsonEnum) -> ast.FunctionDef:
    """Build ``to_result`` for an enum whose variants all have ``to_result``.

    The active variant decides; a successful result is wrapped back into
    the enum, keeping the variant::

        def to_result(self) -> 'Message':
            return type(self)(self.root.to_result())
    """
    for variant in enm.variants:
        require_facade(enm, variant)

    return _func(
        name=TO_RESULT,
        args=[_argument('self')],
        body=[
            _docstring('Return this value if the active variant succeeded, otherwise raise.'),
            ast.Return(
                value=_call(
                    _call(_name('type'), args=[_name('self')]),
                    args=[_call(_attr(_attr('self', 'root'), TO_RESULT))],
                )
            ),
        ],
        returns=ast.Constant(value=enm.name),
    )
