"""Method generation.

Composes the type resolver, renderer, result facade, error taxonomy and
parameter binder into the bindings of one API method. For
``chat.postMessage`` the generated unit reads, in order::

    class PostMessageRequest(BaseModel): ...
    class PostMessageResponse(BaseModel): ...      # nested types first
    class PostMessageError(MethodError): ...       # and the rest of the family
    def post_message(client: RequestSender, request: PostMessageRequest) -> PostMessageResponse: ...
"""

import ast
import dataclasses
import logging

from slackgen.codegen.ast_utils import (
    ImportCollector,
    ImportDict,
    _argument,
    _assign,
    _attr,
    _call,
    _docstring,
    _func,
    _name,
    _subscript,
    _tuple,
)
from slackgen.codegen.errors import DEFAULT_RUNTIME_MODULE, ErrorTaxonomy
from slackgen.codegen.parameters import PARAMS_VAR, REQUEST_VAR, param_insertion, request_class
from slackgen.codegen.renderer import TypeRenderer
from slackgen.codegen.types import JsonEnum, JsonObject, has_ok, resolve_prop_type
from slackgen.codegen.utils import to_pascal_case, to_snake_case
from slackgen.exceptions import MethodGenerationError, SchemaError, SchemaShapeError
from slackgen.schema import Method

logger = logging.getLogger(__name__)

CLIENT_VAR = 'client'


@dataclasses.dataclass
class MethodUnit:
    """The generated bindings of one method.

    Attributes:
        name: The dotted wire name of the method.
        fn_name: The name of the generated callable.
        body: The generated statements, in emission order.
        imports: The imports the statements need.
    """

    name: str
    fn_name: str
    body: list[ast.stmt]
    imports: ImportDict = dataclasses.field(default_factory=dict)

    @property
    def exports(self) -> list[str]:
        """Names defined by the unit, first definition first, without repeats."""
        names = []
        for stmt in self.body:
            if isinstance(stmt, (ast.ClassDef, ast.FunctionDef)) and stmt.name not in names:
                names.append(stmt.name)
        return names


class MethodEmitter:
    """Generates the request type, response types, errors and callable of a method.

    Args:
        runtime_module: Import path of the runtime support module the
            generated code depends on.
    """

    def __init__(self, runtime_module: str = DEFAULT_RUNTIME_MODULE):
        self.runtime_module = runtime_module

    def emit(self, method: Method) -> MethodUnit:
        """Generate the bindings of ``method``.

        Raises:
            MethodGenerationError: If the method's schema has a shape that
                cannot produce valid bindings. The error names the method.
        """
        try:
            return self._emit(method)
        except SchemaError as e:
            logger.error(f'Cannot generate {method.name}: {e}')
            raise MethodGenerationError(method.name, cause=e) from e

    def _emit(self, method: Method) -> MethodUnit:
        fn_name = to_snake_case(method.short_name)
        prefix = to_pascal_case(method.short_name)
        request_name = f'{prefix}Request'
        response_name = f'{prefix}Response'

        imports = ImportCollector()

        response_type = resolve_prop_type(method.response.schema_, response_name)
        if not isinstance(response_type, (JsonObject, JsonEnum)):
            raise SchemaShapeError(
                f"Top-level response schema of '{method.name}' is not an object or enum",
                type_name=response_name,
            )

        taxonomy = ErrorTaxonomy(
            prefix=prefix, method_name=method.name, errors=tuple(method.response.errors)
        )

        renderer = TypeRenderer()
        if isinstance(response_type, JsonObject):
            facade = has_ok(response_type)
            response_stmts = renderer.render_object(
                response_type, taxonomy if facade else None
            )
        else:
            if not has_ok(response_type):
                raise SchemaShapeError(
                    f"Top-level response enum of '{method.name}' has a variant without an "
                    '"ok" field',
                    type_name=response_name,
                )
            facade = True
            response_stmts = renderer.render_enum(response_type, taxonomy)
        imports.add_imports(renderer.imports.as_dict())

        error_stmts, error_imports = taxonomy.render(self.runtime_module)
        imports.add_imports(error_imports)

        request_stmt, request_imports = request_class(request_name, method.name, method.params)
        imports.add_imports(request_imports)

        fn = self._callable(method, fn_name, request_name, response_name, taxonomy, facade)
        imports.add_imports(
            {
                'pydantic': {'ValidationError'},
                self.runtime_module: {'ClientError', 'RequestSender'},
            }
        )

        logger.debug(f'Generated {method.name} as {fn_name}()')
        return MethodUnit(
            name=method.name,
            fn_name=fn_name,
            body=[request_stmt, *response_stmts, *error_stmts, fn],
            imports=imports.as_dict(),
        )

    def _callable(
        self,
        method: Method,
        fn_name: str,
        request_name: str,
        response_name: str,
        taxonomy: ErrorTaxonomy,
        facade: bool,
    ) -> ast.FunctionDef:
        parts = [method.description]
        if method.documentation_url:
            parts.append(f'Wraps {method.documentation_url}')
        docs = '\n\n'.join(part for part in parts if part)

        body: list[ast.stmt] = []
        if docs:
            body.append(_docstring(docs))

        # params: dict[str, str] = {}
        body.append(
            ast.AnnAssign(
                target=_name(PARAMS_VAR),
                annotation=_subscript('dict', _tuple([_name('str'), _name('str')])),
                value=ast.Dict(keys=[], values=[]),
                simple=1,
            )
        )
        body.extend(param_insertion(param) for param in method.params)

        # raw = client.send('chat.postMessage', params)
        body.append(
            self._try(
                _assign(
                    _name('raw'),
                    _call(
                        _attr(CLIENT_VAR, 'send'),
                        args=[ast.Constant(method.name), _name(PARAMS_VAR)],
                    ),
                ),
                'ClientError',
                _call(_name(taxonomy.client_name), args=[_name('e')]),
            )
        )
        # response = PostMessageResponse.model_validate_json(raw)
        body.append(
            self._try(
                _assign(
                    _name('response'),
                    _call(_attr(response_name, 'model_validate_json'), args=[_name('raw')]),
                ),
                'ValidationError',
                _call(_name(taxonomy.malformed_name)),
            )
        )

        result: ast.expr = _name('response')
        if facade:
            result = _call(_attr('response', 'to_result'))
        body.append(ast.Return(value=result))

        return _func(
            name=fn_name,
            args=[
                _argument(CLIENT_VAR, _name('RequestSender')),
                _argument(REQUEST_VAR, _name(request_name)),
            ],
            body=body,
            returns=_name(response_name),
        )

    @staticmethod
    def _try(stmt: ast.stmt, error_type: str, raised: ast.expr) -> ast.Try:
        # try: <stmt> except <error_type> as e: raise <raised> from e
        return ast.Try(
            body=[stmt],
            handlers=[
                ast.ExceptHandler(
                    type=_name(error_type),
                    name='e',
                    body=[ast.Raise(exc=raised, cause=_name('e'))],
                )
            ],
            orelse=[],
            finalbody=[],
        )
