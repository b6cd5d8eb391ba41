"""Rendering of resolved objects and enums into class definitions.

Objects become pydantic models with one field per property, in name order.
Enums become ``RootModel`` unions of their variant classes with a
validator that dispatches on the discriminator field of the payload.
Nested objects and enums are rendered depth-first ahead of the class that
uses them, once per occurrence.
"""

import ast
import logging

from slackgen.codegen.ast_utils import (
    ImportCollector,
    _argument,
    _assign,
    _attr,
    _call,
    _class,
    _docstring,
    _func,
    _name,
    _subscript,
    _tuple,
)
from slackgen.codegen.errors import ErrorTaxonomy
from slackgen.codegen.facade import enum_to_result, object_to_result, require_facade
from slackgen.codegen.types import (
    ArrayOf,
    JsonEnum,
    JsonEnumVariant,
    JsonObject,
    JsonObjectField,
    MapOf,
    OptionalOf,
    PropType,
    annotation,
    has_ok,
)

logger = logging.getLogger(__name__)

# Fields only reachable through ``to_result``.
INTERNAL_FIELDS = ('ok', 'error')


class TypeRenderer:
    """Renders the declarations of one method's response type.

    The renderer collects the imports its declarations need in
    :attr:`imports`.
    """

    def __init__(self):
        self.imports = ImportCollector()
        self._declared: dict[str, PropType] = {}

    def render(self, prop: PropType) -> list[ast.stmt]:
        """Render every object and enum reachable from a field's shape."""
        if isinstance(prop, JsonObject):
            return self.render_object(prop)
        if isinstance(prop, JsonEnum):
            return self.render_enum(prop)
        if isinstance(prop, (ArrayOf, MapOf, OptionalOf)):
            return self.render(prop.inner)
        return []

    def render_object(
        self, obj: JsonObject, taxonomy: ErrorTaxonomy | None = None
    ) -> list[ast.stmt]:
        """Render an object and its nested types.

        Args:
            obj: The object to render.
            taxonomy: When given, the object gets a ``to_result`` method
                raising errors of this taxonomy.
        """
        stmts: list[ast.stmt] = []
        for field in obj.fields:
            stmts.extend(self.render(field.ty))

        body: list[ast.stmt] = []
        if any(f.rename for f in obj.fields):
            self.imports.add_import('pydantic', 'ConfigDict')
            body.append(
                _assign(
                    _name('model_config'),
                    _call(
                        _name('ConfigDict'),
                        keywords=[ast.keyword(arg='populate_by_name', value=ast.Constant(True))],
                    ),
                )
            )
        body.extend(self._field(f) for f in obj.sorted_fields())

        if taxonomy is not None and has_ok(obj):
            body.append(object_to_result(obj, taxonomy))

        self.imports.add_import('pydantic', 'BaseModel')
        self._declare(obj)
        stmts.append(_class(obj.name, [_name('BaseModel')], body, docstring=obj.description))
        return stmts

    def render_enum(
        self, enm: JsonEnum, taxonomy: ErrorTaxonomy | None = None
    ) -> list[ast.stmt]:
        """Render a discriminated enum, its variant classes and their nested types.

        Args:
            enm: The enum to render.
            taxonomy: When given, the enum and every variant get a
                ``to_result`` method; each variant must have an ``ok`` field.
        """
        stmts: list[ast.stmt] = []
        for variant in enm.variants:
            if taxonomy is not None:
                require_facade(enm, variant)
            stmts.extend(self._render_variant(variant, taxonomy))

        body: list[ast.stmt] = [self._variants_table(enm), self._dispatcher(enm)]
        if taxonomy is not None:
            body.append(enum_to_result(enm))

        docstring = f'Discriminated by the ``{enm.discriminator}`` field of the payload.'
        if enm.description:
            docstring = f'{enm.description}\n\n{docstring}'

        self.imports.add_imports(
            {
                'pydantic': {'BaseModel', 'RootModel', 'ValidationError', 'model_validator'},
                'pydantic_core': {'PydanticCustomError'},
                'typing': {'Any', 'ClassVar', 'Union'},
            }
        )
        self._declare(enm)
        union = _subscript('Union', _tuple([_name(v.qualified_name) for v in enm.variants]))
        stmts.append(
            _class(enm.name, [_subscript('RootModel', union)], body, docstring=docstring)
        )
        return stmts

    def _render_variant(
        self, variant: JsonEnumVariant, taxonomy: ErrorTaxonomy | None
    ) -> list[ast.stmt]:
        if isinstance(variant.inner, JsonObject):
            return self.render_object(variant.inner, taxonomy)
        if isinstance(variant.inner, JsonEnum):
            return self.render_enum(variant.inner, taxonomy)

        # Scalar, array, map or optional payloads are wrapped in a class of their own.
        stmts = self.render(variant.inner)
        inner_ast, inner_imports = annotation(variant.inner)
        self.imports.add_imports(inner_imports)
        self.imports.add_import('pydantic', 'RootModel')
        stmts.append(_class(variant.qualified_name, [_subscript('RootModel', inner_ast)], []))
        return stmts

    def _field(self, field: JsonObjectField) -> ast.AnnAssign:
        ty = field.ty
        if field.name == 'ok' and isinstance(ty, OptionalOf):
            ty = ty.inner

        annotation_ast, imports = annotation(ty)
        self.imports.add_imports(imports)

        keywords = []
        if field.name == 'ok':
            keywords.append(ast.keyword(arg='default', value=ast.Constant(False)))
        elif isinstance(ty, OptionalOf):
            keywords.append(ast.keyword(arg='default', value=ast.Constant(None)))
        if field.rename:
            keywords.append(ast.keyword(arg='alias', value=ast.Constant(field.rename)))
        if field.description:
            keywords.append(ast.keyword(arg='description', value=ast.Constant(field.description)))
        if field.name in INTERNAL_FIELDS:
            keywords.append(ast.keyword(arg='exclude', value=ast.Constant(True)))
            keywords.append(ast.keyword(arg='repr', value=ast.Constant(False)))

        value = None
        if keywords:
            self.imports.add_import('pydantic', 'Field')
            value = _call(_name('Field'), keywords=keywords)

        return ast.AnnAssign(
            target=_name(field.name),
            annotation=annotation_ast,
            value=value,
            simple=1,
        )

    def _variants_table(self, enm: JsonEnum) -> ast.AnnAssign:
        # VARIANTS: ClassVar[dict[str, type[BaseModel]]] = {'bot_message': MessageBotMessage, ...}
        return ast.AnnAssign(
            target=_name('VARIANTS'),
            annotation=_subscript(
                'ClassVar',
                _subscript('dict', _tuple([_name('str'), _subscript('type', _name('BaseModel'))])),
            ),
            value=ast.Dict(
                keys=[ast.Constant(v.wire_tag) for v in enm.variants],
                values=[_name(v.qualified_name) for v in enm.variants],
            ),
            simple=1,
        )

    def _dispatcher(self, enm: JsonEnum) -> ast.FunctionDef:
        field = enm.discriminator
        expected = ', '.join(f"'{v.wire_tag}'" for v in enm.variants)
        variants = _attr('cls', 'VARIANTS')

        def custom_error(error_type: str, message: str, context: ast.expr | None = None) -> ast.Raise:
            args = [ast.Constant(error_type), ast.Constant(message)]
            if context is not None:
                args.append(context)
            return ast.Raise(exc=_call(_name('PydanticCustomError'), args=args), cause=None)

        body: list[ast.stmt] = [
            _docstring(f'Pick the variant named by the ``{field}`` field of the payload.'),
            # Already-built values pass through unchanged.
            ast.If(
                test=_call(
                    _name('isinstance'),
                    args=[
                        _name('value'),
                        _tuple(
                            [
                                _name('cls'),
                                ast.Starred(
                                    value=_call(_attr(variants, 'values')), ctx=ast.Load()
                                ),
                            ]
                        ),
                    ],
                ),
                body=[ast.Return(value=_name('value'))],
                orelse=[],
            ),
            ast.If(
                test=ast.BoolOp(
                    op=ast.Or(),
                    values=[
                        ast.UnaryOp(
                            op=ast.Not(),
                            operand=_call(_name('isinstance'), args=[_name('value'), _name('dict')]),
                        ),
                        ast.Compare(
                            left=ast.Constant(field),
                            ops=[ast.NotIn()],
                            comparators=[_name('value')],
                        ),
                    ],
                ),
                body=[custom_error('missing_discriminator', f"missing field '{field}'")],
                orelse=[],
            ),
            _assign(
                _name('tag'),
                ast.Subscript(value=_name('value'), slice=ast.Constant(field), ctx=ast.Load()),
            ),
            ast.If(
                test=ast.UnaryOp(
                    op=ast.Not(),
                    operand=_call(_name('isinstance'), args=[_name('tag'), _name('str')]),
                ),
                body=[
                    custom_error(
                        'invalid_discriminator_type',
                        f"invalid type for field '{field}', expected a string",
                    )
                ],
                orelse=[],
            ),
            ast.If(
                test=ast.Compare(left=_name('tag'), ops=[ast.NotIn()], comparators=[variants]),
                body=[
                    custom_error(
                        'unknown_variant',
                        f"unknown variant '{{tag}}', expected one of {expected}",
                        ast.Dict(keys=[ast.Constant('tag')], values=[_name('tag')]),
                    )
                ],
                orelse=[],
            ),
            ast.Try(
                body=[
                    ast.Return(
                        value=_call(
                            _attr(
                                ast.Subscript(value=variants, slice=_name('tag'), ctx=ast.Load()),
                                'model_validate',
                            ),
                            args=[_name('value')],
                        )
                    )
                ],
                handlers=[
                    ast.ExceptHandler(
                        type=_name('ValidationError'),
                        name='e',
                        body=[
                            ast.Raise(
                                exc=_call(
                                    _name('PydanticCustomError'),
                                    args=[
                                        ast.Constant('variant_mismatch'),
                                        ast.Constant('{message}'),
                                        ast.Dict(
                                            keys=[ast.Constant('message')],
                                            values=[_call(_name('str'), args=[_name('e')])],
                                        ),
                                    ],
                                ),
                                cause=_name('e'),
                            )
                        ],
                    )
                ],
                orelse=[],
                finalbody=[],
            ),
        ]

        return _func(
            name='_dispatch',
            args=[_argument('cls'), _argument('value', _name('Any'))],
            body=body,
            returns=_name('Any'),
            decorators=[
                _call(
                    _name('model_validator'),
                    keywords=[ast.keyword(arg='mode', value=ast.Constant('before'))],
                ),
                _name('classmethod'),
            ],
        )

    def _declare(self, prop: JsonObject | JsonEnum) -> None:
        previous = self._declared.get(prop.name)
        if previous is not None and previous != prop:
            logger.warning(
                f"Type '{prop.name}' is declared again with a different shape; "
                'the later declaration wins'
            )
        else:
            logger.debug(f'Rendering type {prop.name}')
        self._declared[prop.name] = prop
