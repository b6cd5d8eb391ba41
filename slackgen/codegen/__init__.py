"""Code generation module for slackgen.

Main Components:
    - Codegen: Loads schema sources and writes one bindings module per API module
    - SchemaLoader: Loads module and method documents from URLs, files or directories
    - ModuleEmitter: Renders all methods of a module into one source text
    - MethodEmitter: Renders the request, response, errors and callable of a method
    - TypeRenderer: Renders resolved objects and enums into pydantic models

Example:
    >>> from slackgen.codegen import Codegen
    >>> from slackgen.config import DocumentConfig
    >>>
    >>> codegen = Codegen(DocumentConfig(source='./methods', output='./client'))
    >>> codegen.generate()
"""

from slackgen.codegen.ast_utils import ImportCollector
from slackgen.codegen.codegen import Codegen
from slackgen.codegen.errors import ErrorTaxonomy
from slackgen.codegen.methods import MethodEmitter, MethodUnit
from slackgen.codegen.modules import ModuleEmitter
from slackgen.codegen.renderer import TypeRenderer
from slackgen.codegen.schema_loader import SchemaLoader
from slackgen.codegen.types import (
    ArrayOf,
    JsonEnum,
    JsonEnumVariant,
    JsonObject,
    JsonObjectField,
    MapOf,
    OptionalOf,
    Primitive,
    PrimitiveType,
    PropType,
    resolve_prop_type,
)

__all__ = [
    # Main codegen class
    'Codegen',
    'SchemaLoader',
    # Emission
    'ModuleEmitter',
    'MethodEmitter',
    'MethodUnit',
    'TypeRenderer',
    'ErrorTaxonomy',
    'ImportCollector',
    # Property types
    'PropType',
    'Primitive',
    'PrimitiveType',
    'ArrayOf',
    'MapOf',
    'OptionalOf',
    'JsonObject',
    'JsonObjectField',
    'JsonEnum',
    'JsonEnumVariant',
    'resolve_prop_type',
]
