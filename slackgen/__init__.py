"""slackgen - Generate typed Python bindings from Slack Web API method schemas.

slackgen reads the JSON descriptions of API methods (their parameters,
declared errors and response JSON Schema) and generates one Python module
per API module. Each method gets a pydantic request model, pydantic response
models, a family of exception classes for its declared errors, and a
callable that sends the request through a :class:`~slackgen.runtime.RequestSender`.

Quick Start:
    >>> from slackgen import Codegen, DocumentConfig
    >>>
    >>> config = DocumentConfig(source='./slack-api-docs/methods', output='./client')
    >>> Codegen(config).generate()

CLI Usage:
    $ slackgen generate --config slackgen.yaml
    $ slackgen check ./slack-api-docs/methods
"""

from slackgen.codegen.codegen import Codegen
from slackgen.codegen.methods import MethodEmitter
from slackgen.codegen.modules import ModuleEmitter
from slackgen.codegen.schema_loader import SchemaLoader
from slackgen.config import CodegenConfig, DocumentConfig, get_config
from slackgen.exceptions import (
    CodeGenerationError,
    ConfigurationError,
    CyclicSchemaError,
    MethodGenerationError,
    ModuleGenerationError,
    OutputError,
    SchemaError,
    SchemaLoadError,
    SchemaShapeError,
    SchemaValidationError,
    SlackgenError,
)

__all__ = [
    # Main classes
    'Codegen',
    'SchemaLoader',
    'ModuleEmitter',
    'MethodEmitter',
    # Configuration
    'CodegenConfig',
    'DocumentConfig',
    'get_config',
    # Exceptions
    'SlackgenError',
    'SchemaError',
    'SchemaLoadError',
    'SchemaValidationError',
    'SchemaShapeError',
    'CyclicSchemaError',
    'CodeGenerationError',
    'MethodGenerationError',
    'ModuleGenerationError',
    'ConfigurationError',
    'OutputError',
]

__version__ = '0.1.0'
