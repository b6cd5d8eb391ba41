"""Code generation module for slackgen.

This module provides the main Codegen class that orchestrates the generation
of Python client bindings from method schemas.
"""

import logging
import py_compile
from pathlib import Path

from upath import UPath

from slackgen.codegen.modules import ModuleEmitter
from slackgen.codegen.schema_loader import SchemaLoader
from slackgen.codegen.utils import is_url, write_init_file, write_mod
from slackgen.config import DocumentConfig
from slackgen.exceptions import OutputError
from slackgen.schema import Module

logger = logging.getLogger(__name__)


class Codegen:
    """Generates one Python module of bindings per API module of a schema source.

    Attributes:
        config: The DocumentConfig containing source and output settings.
        modules: The loaded modules (populated by :meth:`load`).

    Example:
        >>> from slackgen.config import DocumentConfig
        >>> from slackgen.codegen.codegen import Codegen
        >>>
        >>> config = DocumentConfig(source='./methods', output='./client')
        >>> codegen = Codegen(config)
        >>> codegen.generate()
        # Creates chat.py, reactions.py, ... and __init__.py in ./client/
    """

    def __init__(self, config: DocumentConfig, schema_loader: SchemaLoader | None = None):
        self.config = config
        self.modules: list[Module] | None = None
        self._schema_loader = schema_loader or SchemaLoader()
        self.emitter = ModuleEmitter(config.runtime_import_path)

    def load(self) -> list[Module]:
        """Load the modules of the configured source.

        Raises:
            SchemaLoadError: If the source cannot be read.
            SchemaValidationError: If a document is not a valid module or method.
        """
        source = self.config.source
        if not is_url(source) and Path(source).is_dir():
            self.modules = self._schema_loader.load_directory(source)
        else:
            self.modules = [self._schema_loader.load(source)]
        return self.modules

    def render(self) -> dict[str, str]:
        """Generate the source of every module without writing anything.

        Returns:
            Mapping of output file name to module source.

        Raises:
            ModuleGenerationError: For the first module with schema errors.
        """
        if self.modules is None:
            self.load()

        return {f'{module.safe_name}.py': self.emitter.emit(module) for module in self.modules}

    def generate(self) -> list[UPath]:
        """Generate and write the bindings of every module.

        Nothing is written unless every module generates cleanly.

        Returns:
            The paths of the written files.

        Raises:
            ModuleGenerationError: If a module has schema errors.
            OutputError: If a file cannot be written or is not valid Python.
        """
        sources = self.render()
        output = UPath(self.config.output)

        written = []
        for filename, content in sources.items():
            path = output / filename
            try:
                write_mod(content, path, validate=self.config.validate_syntax)
            except (OSError, py_compile.PyCompileError) as e:
                raise OutputError(str(path), cause=e) from e
            logger.info(f'Wrote {path}')
            written.append(path)

        write_init_file(output)
        written.append(output / '__init__.py')
        return written
