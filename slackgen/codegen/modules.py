"""Module generation: one Python source file per API module."""

import ast
import logging

from slackgen.codegen.ast_utils import ImportCollector, _all, _docstring
from slackgen.codegen.errors import DEFAULT_RUNTIME_MODULE
from slackgen.codegen.methods import MethodEmitter, MethodUnit
from slackgen.codegen.utils import render_mod
from slackgen.exceptions import MethodGenerationError, ModuleGenerationError
from slackgen.schema import Module

logger = logging.getLogger(__name__)


class ModuleEmitter:
    """Renders every method of a module into a single source text.

    Every method is attempted, so one run reports all the schema errors of
    the module. If any method fails, no source is produced.

    Example:
        >>> emitter = ModuleEmitter()
        >>> source = emitter.emit(module)
    """

    def __init__(self, runtime_module: str = DEFAULT_RUNTIME_MODULE):
        self.method_emitter = MethodEmitter(runtime_module)

    def emit_units(self, module: Module) -> list[MethodUnit]:
        """Generate the units of every method, in declaration order.

        Raises:
            ModuleGenerationError: If one or more methods failed; it lists
                every failure.
        """
        units: list[MethodUnit] = []
        errors: list[MethodGenerationError] = []
        for method in module.methods:
            try:
                units.append(self.method_emitter.emit(method))
            except MethodGenerationError as e:
                errors.append(e)

        if errors:
            raise ModuleGenerationError(module.name, errors)
        return units

    def emit(self, module: Module) -> str:
        """Generate the source text of ``module``."""
        units = self.emit_units(module)
        self._warn_on_shared_names(units)

        imports = ImportCollector()
        exports: dict[str, None] = {}
        body: list[ast.stmt] = []
        for unit in units:
            imports.add_imports(unit.imports)
            exports.update(dict.fromkeys(unit.exports))
            body.extend(unit.body)

        header: list[ast.stmt] = [_docstring(self._docstring(module))]
        header.extend(imports.to_ast())
        header.append(_all(sorted(exports)))

        logger.info(f'Generated module {module.name} with {len(units)} methods')
        return render_mod(header + body)

    @staticmethod
    def _warn_on_shared_names(units: list[MethodUnit]) -> None:
        # class name -> (declaring method, dumped definition)
        declared: dict[str, tuple[str, str]] = {}
        for unit in units:
            for node in unit.body:
                if not isinstance(node, ast.ClassDef):
                    continue
                definition = ast.dump(node)
                previous = declared.get(node.name)
                if previous is not None and previous[0] != unit.name and previous[1] != definition:
                    logger.warning(
                        f"Type '{node.name}' of '{unit.name}' differs from the one declared by "
                        f"'{previous[0]}'; the module exports the later declaration"
                    )
                declared[node.name] = (unit.name, definition)

    @staticmethod
    def _docstring(module: Module) -> str:
        summary = f'Generated bindings for the ``{module.name}`` API methods.'
        if module.description:
            return f'{module.description}\n\n{summary}'
        return summary
