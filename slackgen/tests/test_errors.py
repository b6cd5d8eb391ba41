"""Test error taxonomies and result facades."""

import ast

import pytest

from slackgen.codegen.errors import ErrorTaxonomy
from slackgen.codegen.facade import enum_to_result, object_to_result, require_facade
from slackgen.codegen.types import (
    JsonEnum,
    JsonEnumVariant,
    JsonObject,
    JsonObjectField,
    OptionalOf,
    Primitive,
    PrimitiveType,
)
from slackgen.exceptions import SchemaShapeError
from slackgen.schema import ApiError

BOOLEAN = PrimitiveType(Primitive.BOOLEAN)
STRING = PrimitiveType(Primitive.STRING)


@pytest.fixture
def taxonomy():
    return ErrorTaxonomy(
        prefix='PostMessage',
        method_name='chat.postMessage',
        errors=(
            ApiError(name='channel_not_found', description='channel_not_found'),
            ApiError(name='not_in_channel'),
        ),
    )


def source(stmts: list[ast.stmt]) -> str:
    return ast.unparse(ast.fix_missing_locations(ast.Module(body=stmts, type_ignores=[])))


class TestErrorTaxonomy:
    """Test the generated exception family."""

    def test_class_names(self, taxonomy):
        assert taxonomy.class_names == [
            'PostMessageError',
            'PostMessageChannelNotFoundError',
            'PostMessageNotInChannelError',
            'PostMessageMalformedResponseError',
            'PostMessageUnknownError',
            'PostMessageClientError',
        ]

    def test_render_order(self, taxonomy):
        stmts, _ = taxonomy.render()
        assert [s.name for s in stmts] == taxonomy.class_names

    def test_bases(self, taxonomy):
        code = source(taxonomy.render()[0])

        assert 'class PostMessageError(MethodError):' in code
        assert 'class PostMessageChannelNotFoundError(PostMessageError):' in code
        assert (
            'class PostMessageMalformedResponseError(PostMessageError, MalformedResponseError):'
        ) in code
        assert 'class PostMessageUnknownError(PostMessageError, UnknownApiError):' in code
        assert 'class PostMessageClientError(PostMessageError, ClientFailure):' in code

    def test_declared_error(self, taxonomy):
        code = source(taxonomy.render()[0])
        assert (
            'class PostMessageChannelNotFoundError(PostMessageError):\n'
            '    """channel_not_found"""\n'
            "    code = 'channel_not_found'"
        ) in code

    def test_classifier(self, taxonomy):
        code = source(taxonomy.render()[0])

        assert "def from_code(cls, code: str) -> 'PostMessageError':" in code
        assert (
            "known = {'channel_not_found': PostMessageChannelNotFoundError, "
            "'not_in_channel': PostMessageNotInChannelError}"
        ) in code
        assert 'return PostMessageUnknownError(code)' in code

    def test_imports_follow_runtime_module(self, taxonomy):
        _, imports = taxonomy.render('myclient.runtime')
        assert imports == {
            'myclient.runtime': {
                'ClientFailure',
                'MalformedResponseError',
                'MethodError',
                'UnknownApiError',
            }
        }

    def test_no_declared_errors(self):
        taxonomy = ErrorTaxonomy(prefix='Test', method_name='api.test')
        code = source(taxonomy.render()[0])
        assert 'known = {}' in code

    @pytest.mark.parametrize(
        'codes, used_by',
        [
            (['unknown'], 'the unknown-error fallback'),
            (['malformed_response'], 'the malformed-response fallback'),
            (['client'], 'the client-error fallback'),
            (['not_found', 'not-found'], "error 'not_found'"),
        ],
    )
    def test_colliding_class_names(self, codes, used_by):
        with pytest.raises(SchemaShapeError, match=used_by) as exc_info:
            ErrorTaxonomy(
                prefix='Test',
                method_name='api.test',
                errors=tuple(ApiError(name=code) for code in codes),
            )
        assert "of 'api.test'" in exc_info.value.message


class TestObjectFacade:
    """Test to_result for objects."""

    def test_with_error_field(self, taxonomy):
        obj = JsonObject(
            'PostMessageResponse',
            (JsonObjectField('ok', BOOLEAN), JsonObjectField('error', OptionalOf(STRING))),
        )
        code = ast.unparse(ast.fix_missing_locations(object_to_result(obj, taxonomy)))

        assert "def to_result(self) -> 'PostMessageResponse':" in code
        assert 'if self.ok:\n        return self' in code
        assert 'raise PostMessageError.from_code(self.error)' in code
        assert code.rstrip().endswith('raise PostMessageMalformedResponseError()')

    def test_without_error_field(self, taxonomy):
        obj = JsonObject('PostMessageResponse', (JsonObjectField('ok', BOOLEAN),))
        code = ast.unparse(ast.fix_missing_locations(object_to_result(obj, taxonomy)))

        assert 'from_code' not in code
        assert 'raise PostMessageMalformedResponseError()' in code


class TestEnumFacade:
    """Test to_result for enums."""

    def test_delegates_to_variant(self):
        enm = JsonEnum(
            'Lookup',
            (
                JsonEnumVariant(
                    'found', 'LookupFound', JsonObject('LookupFound', (JsonObjectField('ok', BOOLEAN),))
                ),
            ),
        )
        code = ast.unparse(ast.fix_missing_locations(enum_to_result(enm)))
        assert "def to_result(self) -> 'Lookup':" in code
        assert 'return type(self)(self.root.to_result())' in code

    def test_scalar_variant_rejected(self):
        enm = JsonEnum('Lookup', (JsonEnumVariant('plain', 'LookupPlain', STRING),))

        with pytest.raises(SchemaShapeError, match='is not an object or enum') as exc_info:
            require_facade(enm, enm.variants[0])
        assert exc_info.value.type_name == 'LookupPlain'

    def test_variant_without_ok_rejected(self):
        enm = JsonEnum(
            'Lookup', (JsonEnumVariant('empty', 'LookupEmpty', JsonObject('LookupEmpty')),)
        )

        with pytest.raises(SchemaShapeError, match='does not have an "ok" field'):
            enum_to_result(enm)
