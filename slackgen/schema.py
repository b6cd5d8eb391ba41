"""Method schema models.

This module provides the Pydantic models describing a remote API: modules
of methods, their parameters, their declared errors and the JSON Schema of
their responses. Instances are immutable once loaded.
"""

from __future__ import annotations

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class JsonSchema(BaseModel):
    """The subset of JSON Schema used to describe response payloads."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Optional[Union[str, List[str]]] = None
    title: Optional[str] = None
    description: Optional[str] = None
    properties: Optional[dict[str, JsonSchema]] = None
    required: List[str] = Field(default_factory=list)
    items: Optional[JsonSchema] = None
    additional_properties: Optional[Union[JsonSchema, bool]] = Field(
        None, alias='additionalProperties'
    )
    one_of: Optional[List[JsonSchema]] = Field(None, alias='oneOf')

    @property
    def types(self) -> list[str]:
        """Declared type names, without ``null``."""
        if self.type is None:
            return []
        types = [self.type] if isinstance(self.type, str) else list(self.type)
        return [t for t in types if t != 'null']

    @property
    def nullable(self) -> bool:
        return isinstance(self.type, list) and 'null' in self.type


class ApiError(BaseModel):
    """A failure mode declared by a method, keyed by its wire error code."""
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ''


class Param(BaseModel):
    """A request parameter of a method."""
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ''
    type: str = 'string'
    optional: bool = False


class Response(BaseModel):
    """The response of a method: its payload schema and declared errors."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sample: Any = None
    schema_: JsonSchema = Field(..., alias='schema')
    errors: List[ApiError] = Field(default_factory=list)


class Method(BaseModel):
    """One remote operation, e.g. ``chat.postMessage``."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str = ''
    documentation_url: str = Field('', alias='documentationUrl')
    params: List[Param] = Field(default_factory=list)
    response: Response

    @field_validator('name')
    @classmethod
    def _check_final_segment(cls, value: str) -> str:
        if not value.split('.')[-1]:
            raise ValueError(f"method name '{value}' has an empty final segment")
        return value

    @property
    def short_name(self) -> str:
        """The last dotted segment of the name, used to derive identifiers."""
        return self.name.split('.')[-1]


class Module(BaseModel):
    """A named group of related methods."""
    model_config = ConfigDict(frozen=True)

    name: str
    description: Optional[str] = None
    methods: List[Method] = Field(default_factory=list)

    @property
    def safe_name(self) -> str:
        return self.name.replace('.', '_')
