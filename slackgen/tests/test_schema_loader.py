"""Test schema models and loading."""

import json

import httpx
import pytest
import yaml
from pydantic import ValidationError

from slackgen.codegen.schema_loader import SchemaLoader
from slackgen.exceptions import SchemaLoadError, SchemaValidationError
from slackgen.schema import JsonSchema, Method, Module

from .fixtures import HISTORY_METHOD, POST_MESSAGE_METHOD, REACTIONS_GET_METHOD, module_document


class TestSchemaModels:
    """Test the method schema models."""

    def test_method(self):
        method = Method.model_validate(POST_MESSAGE_METHOD)

        assert method.short_name == 'postMessage'
        assert method.documentation_url == 'https://api.slack.com/methods/chat.postMessage'
        assert [p.name for p in method.params] == ['channel', 'text', 'as_user', 'thread_ts']
        assert method.params[0].optional is False
        assert [e.name for e in method.response.errors] == ['channel_not_found', 'not_in_channel']
        assert method.response.schema_.required == ['ok']

    def test_empty_final_segment(self):
        with pytest.raises(ValidationError, match='empty final segment'):
            Method.model_validate({**POST_MESSAGE_METHOD, 'name': 'chat.'})

    def test_models_are_frozen(self):
        method = Method.model_validate(POST_MESSAGE_METHOD)
        with pytest.raises(ValidationError):
            method.name = 'chat.update'

    def test_json_schema_types(self):
        schema = JsonSchema.model_validate({'type': ['string', 'null']})
        assert schema.types == ['string']
        assert schema.nullable is True
        assert JsonSchema().types == []
        assert JsonSchema(type='string').nullable is False

    def test_additional_properties_alias(self):
        schema = JsonSchema.model_validate({'additionalProperties': {'type': 'string'}})
        assert schema.additional_properties == JsonSchema(type='string')

    def test_module_safe_name(self):
        assert Module(name='admin.apps').safe_name == 'admin_apps'


class TestSchemaLoader:
    """Test SchemaLoader."""

    def test_load_json_file(self, tmp_path):
        path = tmp_path / 'chat.json'
        path.write_text(json.dumps(module_document('chat', POST_MESSAGE_METHOD)))

        module = SchemaLoader().load(str(path))

        assert module.name == 'chat'
        assert [m.name for m in module.methods] == ['chat.postMessage']

    def test_load_yaml_file(self, tmp_path):
        path = tmp_path / 'chat.yaml'
        path.write_text(yaml.safe_dump(module_document('chat', POST_MESSAGE_METHOD)))

        assert SchemaLoader().load(str(path)).methods[0].short_name == 'postMessage'

    def test_load_url(self):
        document = module_document('chat', POST_MESSAGE_METHOD)
        client = httpx.Client(
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json=document))
        )

        module = SchemaLoader(http_client=client).load('https://example.test/chat.json')
        assert module.name == 'chat'

    def test_load_url_error(self):
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(404)))

        with pytest.raises(SchemaLoadError) as exc_info:
            SchemaLoader(http_client=client).load('https://example.test/chat.json')
        assert exc_info.value.source == 'https://example.test/chat.json'

    def test_missing_file(self, tmp_path):
        with pytest.raises(SchemaLoadError, match='File not found'):
            SchemaLoader().load(str(tmp_path / 'missing.json'))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / 'chat.json'
        path.write_text('{not json')

        with pytest.raises(SchemaLoadError) as exc_info:
            SchemaLoader().load(str(path))
        assert isinstance(exc_info.value.cause, json.JSONDecodeError)

    def test_invalid_document(self, tmp_path):
        path = tmp_path / 'chat.json'
        path.write_text(json.dumps({'name': 'chat', 'methods': [{'name': 'chat.postMessage'}]}))

        with pytest.raises(SchemaValidationError) as exc_info:
            SchemaLoader().load(str(path))
        assert any('methods.0.response' in e for e in exc_info.value.errors)


class TestLoadDirectory:
    """Test loading a directory of per-method documents."""

    def test_groups_by_prefix(self, tmp_path):
        (tmp_path / 'chat.postMessage.json').write_text(json.dumps(POST_MESSAGE_METHOD))
        (tmp_path / 'conversations.history.json').write_text(json.dumps(HISTORY_METHOD))
        (tmp_path / 'reactions.get.yml').write_text(yaml.safe_dump(REACTIONS_GET_METHOD))
        (tmp_path / 'README.md').write_text('# methods')

        modules = SchemaLoader().load_directory(tmp_path)

        assert [m.name for m in modules] == ['chat', 'conversations', 'reactions']
        assert [m.methods[0].name for m in modules] == [
            'chat.postMessage',
            'conversations.history',
            'reactions.get',
        ]

    def test_nested_prefix(self, tmp_path):
        document = {**HISTORY_METHOD, 'name': 'admin.conversations.search'}
        (tmp_path / 'admin.conversations.search.json').write_text(json.dumps(document))

        modules = SchemaLoader().load_directory(tmp_path)
        assert modules[0].name == 'admin.conversations'
        assert modules[0].safe_name == 'admin_conversations'

    def test_not_a_directory(self, tmp_path):
        with pytest.raises(SchemaLoadError, match='Not a directory'):
            SchemaLoader().load_directory(tmp_path / 'missing')

    def test_invalid_method(self, tmp_path):
        (tmp_path / 'chat.update.json').write_text(json.dumps({'name': 'chat.update'}))

        with pytest.raises(SchemaValidationError) as exc_info:
            SchemaLoader().load_directory(tmp_path)
        assert exc_info.value.source.endswith('chat.update.json')
