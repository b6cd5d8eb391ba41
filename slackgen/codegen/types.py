"""Property types and their resolution from JSON Schema.

A :data:`PropType` is the recursive description of a value's shape: a
primitive scalar, an object, a discriminated enum, or an array, map or
optional wrapper around another shape. :func:`resolve_prop_type` turns a
:class:`~slackgen.schema.JsonSchema` into such a tree, naming every nested
object and enum deterministically from the field or variant it belongs to.
"""

import ast
import dataclasses
import enum
import logging

from slackgen.codegen.ast_utils import ImportDict, _name, _optional_expr, _subscript, _tuple
from slackgen.codegen.utils import sanitize_identifier, to_pascal_case, to_snake_case
from slackgen.exceptions import CyclicSchemaError, SchemaShapeError
from slackgen.schema import JsonSchema

logger = logging.getLogger(__name__)

# Enums with this name are discriminated on ``subtype`` instead of ``type``.
MESSAGE_ENUM_NAME = 'Message'


class Primitive(enum.Enum):
    """Scalar shapes and the Python types they map to."""

    BOOLEAN = 'bool'
    INTEGER = 'int'
    NUMBER = 'float'
    STRING = 'str'
    VALUE = 'Any'


_PRIMITIVE_TYPE_MAP = {
    'boolean': Primitive.BOOLEAN,
    'integer': Primitive.INTEGER,
    'number': Primitive.NUMBER,
    'string': Primitive.STRING,
}


@dataclasses.dataclass(frozen=True)
class PrimitiveType:
    kind: Primitive


@dataclasses.dataclass(frozen=True)
class ArrayOf:
    inner: 'PropType'


@dataclasses.dataclass(frozen=True)
class MapOf:
    inner: 'PropType'


@dataclasses.dataclass(frozen=True)
class OptionalOf:
    inner: 'PropType'


@dataclasses.dataclass(frozen=True)
class JsonObjectField:
    """A named, typed field of an object.

    Attributes:
        name: The Python identifier of the field.
        ty: The shape of the field's value.
        rename: The wire key, when it differs from ``name``.
        description: Documentation taken from the property schema.
    """

    name: str
    ty: 'PropType'
    rename: str | None = None
    description: str | None = None

    @property
    def wire_name(self) -> str:
        return self.rename or self.name


@dataclasses.dataclass(frozen=True)
class JsonObject:
    name: str
    fields: tuple[JsonObjectField, ...] = ()
    description: str | None = None

    def sorted_fields(self) -> list[JsonObjectField]:
        return sorted(self.fields, key=lambda f: f.name)


@dataclasses.dataclass(frozen=True)
class JsonEnumVariant:
    """One variant of a discriminated enum.

    Attributes:
        name: The declared variant name; its snake_case form is the wire tag.
        qualified_name: The generated class name of the variant.
        inner: The shape of the variant's payload.
    """

    name: str
    qualified_name: str
    inner: 'PropType'

    @property
    def wire_tag(self) -> str:
        return to_snake_case(self.name)


@dataclasses.dataclass(frozen=True)
class JsonEnum:
    name: str
    variants: tuple[JsonEnumVariant, ...] = ()
    description: str | None = None

    @property
    def discriminator(self) -> str:
        return 'subtype' if self.name == MESSAGE_ENUM_NAME else 'type'


PropType = PrimitiveType | JsonObject | JsonEnum | ArrayOf | MapOf | OptionalOf


def has_ok(prop: PropType) -> bool:
    """Whether a shape can tell if the call that produced it succeeded.

    An object has-ok when one of its fields is named ``ok``; an enum has-ok
    when the payload of every one of its variants does.
    """
    if isinstance(prop, JsonObject):
        return any(f.name == 'ok' for f in prop.fields)
    if isinstance(prop, JsonEnum):
        return all(has_ok(v.inner) for v in prop.variants)
    return False


def annotation(prop: PropType) -> tuple[ast.expr, ImportDict]:
    """Build the annotation expression for a shape and the imports it needs."""
    if isinstance(prop, PrimitiveType):
        if prop.kind is Primitive.VALUE:
            return _name('Any'), {'typing': {'Any'}}
        return _name(prop.kind.value), {}

    if isinstance(prop, (JsonObject, JsonEnum)):
        return _name(prop.name), {}

    inner_ast, imports = annotation(prop.inner)
    if isinstance(prop, ArrayOf):
        return _subscript('list', inner_ast), imports
    if isinstance(prop, MapOf):
        return _subscript('dict', _tuple([_name('str'), inner_ast])), imports

    typing_names = imports.get('typing', set()) | {'Optional'}
    return _optional_expr(inner_ast), {**imports, 'typing': typing_names}


def resolve_prop_type(schema: JsonSchema, name: str) -> PropType:
    """Resolve a JSON Schema into a :data:`PropType` tree.

    Args:
        schema: The schema to resolve.
        name: The type name to give the shape if it is an object or enum.

    Raises:
        SchemaShapeError: If an enum is empty or has an untitled variant, or
            an object's keys do not map to distinct field names.
        CyclicSchemaError: If the schema refers back to itself.
    """
    return _TypeResolver().resolve(schema, name)


def field_names(owner: str, keys: list[str]) -> list[str]:
    """Python attribute names for the wire keys of ``owner``, in key order.

    Raises:
        SchemaShapeError: If a key has no usable identifier, or two keys
            map to the same one.
    """
    names: list[str] = []
    for key in keys:
        try:
            field_name = sanitize_identifier(key)
        except ValueError as e:
            raise SchemaShapeError(
                f"Field {key!r} of '{owner}' has no usable Python name", type_name=owner
            ) from e
        if field_name in names:
            raise SchemaShapeError(
                f"Fields of '{owner}' collide on the Python name '{field_name}'",
                type_name=owner,
            )
        names.append(field_name)
    return names


class _TypeResolver:
    def __init__(self):
        self._active: set[int] = set()

    def resolve(self, schema: JsonSchema, name: str) -> PropType:
        if id(schema) in self._active:
            raise CyclicSchemaError(name)

        self._active.add(id(schema))
        try:
            prop = self._resolve(schema, name)
        finally:
            self._active.discard(id(schema))

        if schema.nullable and not isinstance(prop, OptionalOf):
            return OptionalOf(prop)
        return prop

    def _resolve(self, schema: JsonSchema, name: str) -> PropType:
        types = schema.types

        if schema.one_of is not None:
            return self._enum(schema, name)
        if schema.properties is not None:
            return self._object(schema, name)
        if 'object' in types:
            if isinstance(schema.additional_properties, JsonSchema):
                return MapOf(self.resolve(schema.additional_properties, name))
            return MapOf(PrimitiveType(Primitive.VALUE))
        if 'array' in types:
            if schema.items is None:
                return ArrayOf(PrimitiveType(Primitive.VALUE))
            return ArrayOf(self.resolve(schema.items, name))

        for type_name in types:
            if type_name in _PRIMITIVE_TYPE_MAP:
                return PrimitiveType(_PRIMITIVE_TYPE_MAP[type_name])
        return PrimitiveType(Primitive.VALUE)

    def _object(self, schema: JsonSchema, name: str) -> JsonObject:
        fields = []
        names = field_names(name, list(schema.properties))
        for field_name, (key, property_schema) in zip(names, schema.properties.items()):
            ty = self.resolve(property_schema, to_pascal_case(key))
            if key not in schema.required and key != 'ok' and not isinstance(ty, OptionalOf):
                ty = OptionalOf(ty)

            fields.append(
                JsonObjectField(
                    name=field_name,
                    ty=ty,
                    rename=key if key != field_name else None,
                    description=property_schema.description,
                )
            )

        logger.debug(f'Resolved object {name} with {len(fields)} fields')
        return JsonObject(name=name, fields=tuple(fields), description=schema.description)

    def _enum(self, schema: JsonSchema, name: str) -> JsonEnum:
        if not schema.one_of:
            raise SchemaShapeError(f"Enum '{name}' declares no variants", type_name=name)

        variants = []
        for index, variant_schema in enumerate(schema.one_of):
            if not variant_schema.title:
                raise SchemaShapeError(
                    f"Variant {index} of enum '{name}' has no title", type_name=name
                )
            qualified_name = f'{name}{to_pascal_case(variant_schema.title)}'
            variants.append(
                JsonEnumVariant(
                    name=variant_schema.title,
                    qualified_name=qualified_name,
                    inner=self.resolve(variant_schema, qualified_name),
                )
            )

        logger.debug(f'Resolved enum {name} with {len(variants)} variants')
        return JsonEnum(name=name, variants=tuple(variants), description=schema.description)
