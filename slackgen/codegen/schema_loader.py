"""Schema loading utilities for method documents.

Two layouts are supported: a single module document (``name``,
``description`` and a list of ``methods``) and a directory holding one
document per method, as published in the ``slack-api-docs`` repository.
Both may be JSON or YAML.
"""

import json
import logging
from pathlib import Path
from typing import Any

import httpx
import yaml
from pydantic import BaseModel, ValidationError

from slackgen.codegen.utils import is_url
from slackgen.exceptions import SchemaLoadError, SchemaValidationError
from slackgen.schema import Method, Module

logger = logging.getLogger(__name__)

DOCUMENT_SUFFIXES = ('.json', '.yaml', '.yml')


class SchemaLoader:
    """Loads method schemas from URLs, files or directories.

    Example:
        >>> loader = SchemaLoader()
        >>> module = loader.load('https://example.com/chat.json')
        >>> # or
        >>> modules = loader.load_directory('./slack-api-docs/methods')
    """

    def __init__(self, http_client: httpx.Client | None = None):
        """Initialize the schema loader.

        Args:
            http_client: Optional HTTP client to use for URL requests.
                If not provided, ``httpx.get`` is used.
        """
        self._http_client = http_client

    def load(self, source: str) -> Module:
        """Load and validate a module document from a URL or file path.

        Raises:
            SchemaLoadError: If the document cannot be read or parsed.
            SchemaValidationError: If the document does not describe a module.
        """
        try:
            if is_url(source):
                content = self._load_from_url(source)
            else:
                content = self._load_from_file(Path(source))
        except SchemaLoadError:
            raise
        except Exception as e:
            raise SchemaLoadError(source, cause=e) from e

        return self._validate(Module, content, source)

    def load_directory(self, path: str | Path) -> list[Module]:
        """Load a directory of per-method documents grouped into modules.

        Methods are grouped by the dotted prefix of their name, so
        ``chat.postMessage`` lands in module ``chat``. Files are read in name
        order and modules keep the order their first method was seen in.

        Raises:
            SchemaLoadError: If the directory or one of its documents
                cannot be read.
            SchemaValidationError: If a document does not describe a method.
        """
        directory = Path(path)
        if not directory.is_dir():
            raise SchemaLoadError(
                str(path), cause=NotADirectoryError(f'Not a directory: {directory}')
            )

        grouped: dict[str, list[Method]] = {}
        for file in sorted(directory.iterdir()):
            if file.suffix.lower() not in DOCUMENT_SUFFIXES:
                continue
            method = self._validate(Method, self._load_from_file(file), str(file))
            prefix, _, _ = method.name.rpartition('.')
            grouped.setdefault(prefix or method.name, []).append(method)

        logger.debug(f'Loaded {sum(map(len, grouped.values()))} methods from {directory}')
        return [Module(name=name, methods=methods) for name, methods in grouped.items()]

    def _load_from_url(self, url: str) -> Any:
        try:
            if self._http_client:
                response = self._http_client.get(url)
            else:
                response = httpx.get(url, follow_redirects=True, timeout=30.0)

            response.raise_for_status()
            content_type = response.headers.get('content-type', '')
            if 'yaml' in content_type or url.endswith(('.yaml', '.yml')):
                return yaml.safe_load(response.text)
            return json.loads(response.text)

        except httpx.HTTPError as e:
            raise SchemaLoadError(url, cause=e) from e
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SchemaLoadError(url, cause=e) from e

    def _load_from_file(self, path: Path) -> Any:
        if not path.exists():
            raise SchemaLoadError(
                str(path), cause=FileNotFoundError(f'File not found: {path}')
            )

        try:
            content = path.read_text(encoding='utf-8')
            if path.suffix.lower() in ('.yaml', '.yml'):
                return yaml.safe_load(content)
            return json.loads(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SchemaLoadError(str(path), cause=e) from e
        except OSError as e:
            raise SchemaLoadError(str(path), cause=e) from e

    @staticmethod
    def _validate(model: type[BaseModel], content: Any, source: str) -> Any:
        try:
            return model.model_validate(content)
        except ValidationError as e:
            errors = [
                f"{'.'.join(map(str, err['loc'])) or '<root>'}: {err['msg']}"
                for err in e.errors()
            ]
            raise SchemaValidationError(source, errors=errors) from e
