import os
import tomllib
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from slackgen.exceptions import ConfigurationError

DEFAULT_FILENAMES = ['slackgen.yaml', 'slackgen.yml']


class DocumentConfig(BaseModel):
    """Represents a single schema source to be processed."""

    source: str = Field(
        ...,
        description='Path or URL to a module document, or a directory of method documents.',
    )

    output: str = Field(..., description='Output directory for the generated code.')

    runtime_import_path: str = Field(
        'slackgen.runtime',
        description='Import path of the runtime support module used by generated code.',
    )

    validate_syntax: bool = Field(
        True, description='Whether to compile generated modules before writing them.'
    )


class CodegenConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='SLACKGEN_')

    documents: list[DocumentConfig] = Field(
        ..., description='List of schema sources to process.'
    )


def load_yaml(path: str | Path) -> dict:
    # YAML is a superset of JSON, so JSON config files load as well.
    return yaml.safe_load(Path(path).read_text())


def _validate(data: dict, path: str | Path) -> CodegenConfig:
    try:
        return CodegenConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f'Invalid configuration: {e}', config_path=str(path)) from e


def get_config(path: str | None = None) -> CodegenConfig:
    """Load configuration from a file, the working directory or pyproject.toml."""
    if path:
        if not Path(path).exists():
            raise ConfigurationError('Configuration file not found', config_path=path)
        return _validate(load_yaml(path), path)

    cwd = os.getcwd()

    for filename in DEFAULT_FILENAMES:
        path = Path(cwd) / filename
        if path.exists():
            return _validate(load_yaml(path), path)

    path = Path(cwd) / 'pyproject.toml'

    if path.exists():
        pyproject = tomllib.loads(path.read_text())
        tools = pyproject.get('tool', {})

        if 'slackgen' in tools:
            return _validate(tools['slackgen'], path)

    raise ConfigurationError(
        f'No configuration found; create {DEFAULT_FILENAMES[0]} or add [tool.slackgen] '
        'to pyproject.toml'
    )
