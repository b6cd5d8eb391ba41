"""Test configuration for slackgen package."""

import json

import pytest
import yaml

from slackgen.config import CodegenConfig, DocumentConfig, get_config
from slackgen.exceptions import ConfigurationError

DOCUMENTS = {'documents': [{'source': './methods', 'output': './client'}]}


class TestDocumentConfig:
    """Test DocumentConfig model."""

    def test_defaults(self):
        config = DocumentConfig(source='./methods', output='./client')
        assert config.runtime_import_path == 'slackgen.runtime'
        assert config.validate_syntax is True

    def test_missing_fields(self):
        with pytest.raises(ValueError):
            DocumentConfig()


class TestCodegenConfig:
    """Test CodegenConfig settings."""

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv('SLACKGEN_DOCUMENTS', json.dumps(DOCUMENTS['documents']))
        config = CodegenConfig()
        assert config.documents[0].output == './client'


class TestGetConfig:
    """Test configuration discovery."""

    def test_explicit_file(self, tmp_path):
        path = tmp_path / 'custom.yaml'
        path.write_text(yaml.safe_dump(DOCUMENTS))

        config = get_config(str(path))
        assert config.documents[0].source == './methods'

    def test_explicit_json_file(self, tmp_path):
        path = tmp_path / 'custom.json'
        path.write_text(json.dumps(DOCUMENTS))

        assert get_config(str(path)).documents[0].output == './client'

    def test_explicit_file_missing(self, tmp_path):
        with pytest.raises(ConfigurationError, match='not found'):
            get_config(str(tmp_path / 'missing.yaml'))

    def test_default_file(self, tmp_path, monkeypatch):
        (tmp_path / 'slackgen.yml').write_text(yaml.safe_dump(DOCUMENTS))
        monkeypatch.chdir(tmp_path)

        assert get_config().documents[0].source == './methods'

    def test_pyproject(self, tmp_path, monkeypatch):
        (tmp_path / 'pyproject.toml').write_text(
            '[[tool.slackgen.documents]]\nsource = "./methods"\noutput = "./client"\n'
        )
        monkeypatch.chdir(tmp_path)

        assert get_config().documents[0].output == './client'

    def test_invalid_config(self, tmp_path):
        path = tmp_path / 'slackgen.yaml'
        path.write_text(yaml.safe_dump({'documents': [{'source': './methods'}]}))

        with pytest.raises(ConfigurationError) as exc_info:
            get_config(str(path))
        assert exc_info.value.config_path == str(path)

    def test_no_config(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ConfigurationError, match='No configuration found'):
            get_config()
