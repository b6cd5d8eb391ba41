"""Errors raised while loading method schemas and generating bindings.

Failures of the *generated* code (declared API errors, malformed responses,
transport failures) are a separate family defined in :mod:`slackgen.runtime`.
"""


def _with_cause(message: str, cause: object | None) -> str:
    return f'{message}: {cause}' if cause else message


class SlackgenError(Exception):
    """Root of every generator failure; ``message`` holds the full text.

    Example:
        try:
            Codegen(document).generate()
        except SlackgenError as e:
            console.print(e.message)
    """

    def __init__(self, message: str, *args):
        self.message = message
        super().__init__(message, *args)


class SchemaError(SlackgenError):
    """The method schemas could not be read or describe something unusable."""


class SchemaLoadError(SchemaError):
    """A schema file, directory or URL could not be read.

    Attributes:
        source: Path or URL that was being read.
        cause: The I/O, HTTP or parse error behind the failure.
    """

    def __init__(self, source: str, cause: Exception | None = None):
        self.source = source
        self.cause = cause
        super().__init__(_with_cause(f"Failed to load schema from '{source}'", cause))


class SchemaValidationError(SchemaError):
    """A document was read but is not a valid module or method description."""

    def __init__(self, source: str, errors: list[str] | None = None):
        self.source = source
        self.errors = list(errors or [])
        details = '; '.join(self.errors) or None
        super().__init__(_with_cause(f"Schema validation failed for '{source}'", details))


class SchemaShapeError(SchemaError):
    """A schema cannot be turned into bindings.

    Raised for authoring mistakes such as a top-level response that is neither
    an object nor an enum, or an enum variant missing the ``ok`` flag.
    ``type_name`` is the generated type the shape belongs to, when known.
    """

    def __init__(self, message: str, type_name: str | None = None):
        self.type_name = type_name
        super().__init__(message)


class CyclicSchemaError(SchemaShapeError):
    def __init__(self, type_name: str):
        super().__init__(f"Schema for '{type_name}' is self-referential", type_name=type_name)


class CodeGenerationError(SlackgenError):
    """Generation of some part of a module failed.

    Attributes:
        context: What was being generated, appended to the message.
        cause: The error that stopped generation.
    """

    def __init__(self, message: str, context: str | None = None, cause: Exception | None = None):
        self.context = context
        self.cause = cause
        if context:
            message = f'{message} (while generating {context})'
        super().__init__(_with_cause(message, cause))


class MethodGenerationError(CodeGenerationError):
    """Bindings for one API method, named by its wire name, could not be built."""

    def __init__(self, method_name: str, cause: Exception | None = None):
        self.method_name = method_name
        super().__init__(f"Failed to generate method '{method_name}'", cause=cause)


class ModuleGenerationError(CodeGenerationError):
    """At least one method of a module failed; ``errors`` lists all of them."""

    def __init__(self, module_name: str, errors: list[MethodGenerationError]):
        self.module_name = module_name
        self.errors = errors
        summary = '; '.join(e.message for e in errors) or None
        super().__init__(_with_cause(f"Failed to generate module '{module_name}'", summary))


class ConfigurationError(SlackgenError):
    """The slackgen configuration is missing or invalid.

    ``config_path`` and ``field`` locate the problem when known.
    """

    def __init__(self, message: str, config_path: str | None = None, field: str | None = None):
        self.config_path = config_path
        self.field = field
        if config_path:
            message = f"{message} in '{config_path}'"
        if field:
            message = f'{message} (field: {field})'
        super().__init__(message)


class OutputError(SlackgenError):
    """A generated module could not be written to ``output_path``."""

    def __init__(self, output_path: str, cause: Exception | None = None):
        self.output_path = output_path
        self.cause = cause
        super().__init__(_with_cause(f"Failed to write output to '{output_path}'", cause))
