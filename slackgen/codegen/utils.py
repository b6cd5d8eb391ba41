import ast
import keyword
import py_compile
import re
import tempfile
import unicodedata
from pathlib import Path
from urllib.parse import urlparse

from upath import UPath

__all__ = (
    'is_url',
    'sanitize_identifier',
    'sanitize_parameter_field_name',
    'to_pascal_case',
    'to_snake_case',
    'render_mod',
    'write_mod',
)


def capitalize(input_string):
    if not input_string:
        return ''
    return input_string[0].upper() + input_string[1:]


def is_url(text):
    try:
        result = urlparse(text)
        return all([result.scheme, result.netloc])
    except ValueError:
        return False


def remove_accents(input_str):
    nfkd_form = unicodedata.normalize('NFKD', input_str)
    return ''.join(c for c in nfkd_form if not unicodedata.combining(c))


def sanitize_name_python_keywords(name: str) -> str:
    if keyword.iskeyword(name):
        return f'{name}_'
    return name


def to_snake_case(name: str) -> str:
    """Convert ``postMessage``, ``PostMessage`` or ``post-message`` to ``post_message``."""
    snake = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', remove_accents(name))
    snake = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', snake)
    snake = re.sub(r'[^A-Za-z0-9]+', '_', snake)
    return snake.strip('_').lower()


def to_pascal_case(name: str) -> str:
    """Convert ``postMessage`` or ``channel_not_found`` to ``PostMessage`` / ``ChannelNotFound``."""
    pascal = ''.join(capitalize(part) for part in to_snake_case(name).split('_'))
    if pascal and pascal[0].isdigit():
        pascal = '_' + pascal
    return pascal or 'UnnamedType'


def sanitize_parameter_field_name(name: str) -> str:
    """Sanitize parameter or field names to be valid Python identifiers.

    - Replace spaces and hyphens with underscores
    - Remove other invalid characters
    - Drop leading underscores, which pydantic refuses for fields
    - Prefix a leading digit with ``field_``
    - Suffix Python keywords with an underscore

    Raises:
        ValueError: If no identifier characters are left.
    """
    if not name:
        raise ValueError('Name cannot be empty')

    sanitized = re.sub(r'[-\s]+', '_', remove_accents(name))
    sanitized = re.sub(r'[^A-Za-z0-9_]', '', sanitized).lstrip('_')
    if not sanitized:
        raise ValueError(f'Name {name!r} has no identifier characters')

    if sanitized[0].isdigit():
        sanitized = f'field_{sanitized}'
    return sanitize_name_python_keywords(sanitized)


def sanitize_identifier(name: str) -> str:
    """Convert a wire field key into a snake_case Python identifier."""
    if not name:
        raise ValueError('Name cannot be empty')
    return sanitize_parameter_field_name(to_snake_case(name) or name)


def validate_python_syntax(content: str) -> None:
    """Validate that the content is valid Python code.

    Args:
        content: Python source code as a string.

    Raises:
        py_compile.PyCompileError: If the code is not valid Python.
    """
    with tempfile.NamedTemporaryFile(mode='w', suffix='.py', delete=False) as f:
        f.write(content)
        f.flush()
        temp_path = f.name

    try:
        py_compile.compile(temp_path, doraise=True)
    finally:
        Path(temp_path).unlink(missing_ok=True)


def render_mod(body: list[ast.stmt]) -> str:
    """Unparse a list of AST statements into module source text."""
    mod = ast.Module(body=body, type_ignores=[])
    ast.fix_missing_locations(mod)
    return ast.unparse(mod) + '\n'


def write_mod(content: str, path: UPath | Path | str, validate: bool = True) -> None:
    """Write generated module source to a Python file.

    Args:
        content: The module source text.
        path: Path where the file should be written.
        validate: Compile the code before writing it.

    Raises:
        py_compile.PyCompileError: If the generated code is not valid Python.
        OSError: If the file cannot be written.
    """
    path = UPath(path)

    if validate:
        validate_python_syntax(content)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(str(path), 'w', encoding='utf-8') as f:
        f.write(content)


def write_init_file(directory: UPath | Path | str) -> None:
    """Create an empty __init__.py file in the specified directory."""
    directory = UPath(directory)
    init_file = directory / '__init__.py'

    if not init_file.exists():
        directory.mkdir(parents=True, exist_ok=True)
        init_file.touch()
