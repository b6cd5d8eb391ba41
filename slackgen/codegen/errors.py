"""Per-method error taxonomies.

Every method gets a closed family of exception classes: one per error code
the method declares, plus three fallbacks shared by all methods (malformed
response, unknown code and transport failure). The base class of the family
classifies a raw wire error code into one of its members.
"""

import ast
import dataclasses
import logging

from slackgen.codegen.ast_utils import (
    ImportDict,
    _argument,
    _assign,
    _call,
    _class,
    _docstring,
    _func,
    _name,
)
from slackgen.codegen.utils import to_pascal_case
from slackgen.exceptions import SchemaShapeError
from slackgen.schema import ApiError

logger = logging.getLogger(__name__)

DEFAULT_RUNTIME_MODULE = 'slackgen.runtime'

MALFORMED_RESPONSE_DOC = 'The response was not "ok" but provided no error.'
UNKNOWN_DOC = 'The response returned an error that was unknown to the library.'
CLIENT_DOC = 'The client had an error sending the request to Slack.'


@dataclasses.dataclass(frozen=True)
class ErrorTaxonomy:
    """The error classes generated for one method.

    Attributes:
        prefix: The type-name prefix of the method, e.g. ``PostMessage``.
        method_name: The dotted wire name of the method.
        errors: The errors the method declares, in declaration order.
    """

    CLASSIFIER = 'from_code'

    prefix: str
    method_name: str
    errors: tuple[ApiError, ...] = ()

    def __post_init__(self):
        taken = {
            self.base_name: 'the family base class',
            self.malformed_name: 'the malformed-response fallback',
            self.unknown_name: 'the unknown-error fallback',
            self.client_name: 'the client-error fallback',
        }
        for error in self.errors:
            class_name = self.variant_name(error)
            if class_name in taken:
                raise SchemaShapeError(
                    f"Error '{error.name}' of '{self.method_name}' maps to class "
                    f"'{class_name}', already used by {taken[class_name]}",
                    type_name=class_name,
                )
            taken[class_name] = f"error '{error.name}'"

    @property
    def base_name(self) -> str:
        return f'{self.prefix}Error'

    @property
    def malformed_name(self) -> str:
        return f'{self.prefix}MalformedResponseError'

    @property
    def unknown_name(self) -> str:
        return f'{self.prefix}UnknownError'

    @property
    def client_name(self) -> str:
        return f'{self.prefix}ClientError'

    def variant_name(self, error: ApiError) -> str:
        return f'{self.prefix}{to_pascal_case(error.name)}Error'

    @property
    def class_names(self) -> list[str]:
        return [
            self.base_name,
            *(self.variant_name(e) for e in self.errors),
            self.malformed_name,
            self.unknown_name,
            self.client_name,
        ]

    def render(self, runtime_module: str = DEFAULT_RUNTIME_MODULE) -> tuple[list[ast.stmt], ImportDict]:
        """Build the class definitions of the taxonomy and the imports they need."""
        stmts: list[ast.stmt] = [self._base_class()]
        stmts.extend(self._declared_class(error) for error in self.errors)
        stmts.extend(
            [
                _class(
                    self.malformed_name,
                    bases=[_name(self.base_name), _name('MalformedResponseError')],
                    body=[],
                    docstring=MALFORMED_RESPONSE_DOC,
                ),
                _class(
                    self.unknown_name,
                    bases=[_name(self.base_name), _name('UnknownApiError')],
                    body=[],
                    docstring=UNKNOWN_DOC,
                ),
                _class(
                    self.client_name,
                    bases=[_name(self.base_name), _name('ClientFailure')],
                    body=[],
                    docstring=CLIENT_DOC,
                ),
            ]
        )

        logger.debug(
            f'Built error taxonomy {self.base_name} with {len(self.errors)} declared errors'
        )
        imports: ImportDict = {
            runtime_module: {'ClientFailure', 'MalformedResponseError', 'MethodError', 'UnknownApiError'},
        }
        return stmts, imports

    def _base_class(self) -> ast.ClassDef:
        # known = {'channel_not_found': PostMessageChannelNotFoundError, ...}
        known = ast.Dict(
            keys=[ast.Constant(value=e.name) for e in self.errors],
            values=[_name(self.variant_name(e)) for e in self.errors],
        )
        classifier = _func(
            name=self.CLASSIFIER,
            args=[_argument('cls'), _argument('code', _name('str'))],
            body=[
                _docstring(
                    'Classify a wire error code, falling back to '
                    f':class:`{self.unknown_name}` for undeclared codes.'
                ),
                _assign(_name('known'), known),
                ast.If(
                    test=ast.Compare(
                        left=_name('code'), ops=[ast.In()], comparators=[_name('known')]
                    ),
                    body=[
                        ast.Return(
                            value=_call(
                                ast.Subscript(
                                    value=_name('known'), slice=_name('code'), ctx=ast.Load()
                                )
                            )
                        )
                    ],
                    orelse=[],
                ),
                ast.Return(value=_call(_name(self.unknown_name), args=[_name('code')])),
            ],
            returns=ast.Constant(value=self.base_name),
            decorators=[_name('classmethod')],
        )
        return _class(
            self.base_name,
            bases=[_name('MethodError')],
            body=[classifier],
            docstring=f'Errors raised by ``{self.method_name}``.',
        )

    def _declared_class(self, error: ApiError) -> ast.ClassDef:
        return _class(
            self.variant_name(error),
            bases=[_name(self.base_name)],
            body=[_assign(_name('code'), ast.Constant(value=error.name))],
            docstring=error.description or None,
        )
