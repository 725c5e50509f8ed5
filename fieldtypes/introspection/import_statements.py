"""
Import statement parsing.

Reads the import statements of a module from its source so that short names
used in annotations and documentation can be mapped back to what they were
imported as:

    import app.models                  -> ("app", "app")
    import app.models as m             -> ("m", "app.models")
    from app.models import Address     -> ("Address", "app.models.Address")
    from .values import Money as Cash  -> ("Cash", "app.values.Money")

Only module level statements (including those nested in if/try blocks, such as
TYPE_CHECKING guards) are collected. Star imports are ignored.
"""

import ast
import importlib.util
import inspect
import logging
import sys
from types import ModuleType
from typing import Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

ImportPair = Tuple[str, str]


class ImportStatementParser:
    """Parses module level import statements into (alias, fully-qualified name) pairs."""

    def parse_module(self, module_name: str) -> Tuple[ImportPair, ...]:
        """
        Parse the imports of an already imported module.

        Falls back to the module's globals when its source is unavailable
        (frozen or compiled modules, interactive sessions).

        Args:
            module_name: Dotted module name

        Returns:
            Ordered (alias, fully-qualified name) pairs
        """
        module = sys.modules.get(module_name)
        if module is None:
            logger.debug(f"Module {module_name} is not imported, no import statements available")
            return ()

        try:
            source = inspect.getsource(module)
        except (OSError, TypeError):
            logger.debug(f"No source for {module_name}, reading imports from module globals")
            return tuple(self._imports_from_globals(module))

        package = module.__package__ if module.__package__ is not None else module_name.rpartition('.')[0]
        return self.parse_source(source, package)

    def parse_source(self, source: str, package: Optional[str] = None) -> Tuple[ImportPair, ...]:
        """
        Parse import statements from module source.

        Args:
            source: Python source code
            package: Package used to resolve relative imports

        Returns:
            Ordered (alias, fully-qualified name) pairs

        Raises:
            SyntaxError: If the source cannot be parsed
        """
        tree = ast.parse(source)
        pairs: List[ImportPair] = []

        for node in _module_level_statements(tree.body):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    if alias.asname:
                        pairs.append((alias.asname, alias.name))
                    else:
                        # "import a.b" binds the top-level package only
                        top_level = alias.name.split('.')[0]
                        pairs.append((top_level, top_level))

            elif isinstance(node, ast.ImportFrom):
                module_name = self._absolute_module(node, package)
                if module_name is None or module_name == '__future__':
                    continue
                for alias in node.names:
                    if alias.name == '*':
                        continue
                    pairs.append((alias.asname or alias.name, f"{module_name}.{alias.name}"))

        return tuple(pairs)

    @staticmethod
    def _absolute_module(node: ast.ImportFrom, package: Optional[str]) -> Optional[str]:
        if not node.level:
            return node.module

        relative_name = '.' * node.level + (node.module or '')
        try:
            return importlib.util.resolve_name(relative_name, package)
        except (ImportError, ValueError):
            logger.debug(f"Cannot resolve relative import '{relative_name}' from package {package!r}")
            return None

    @staticmethod
    def _imports_from_globals(module: ModuleType) -> Iterator[ImportPair]:
        for alias, value in vars(module).items():
            if alias.startswith('__'):
                continue
            if inspect.ismodule(value):
                yield alias, value.__name__
            elif inspect.isclass(value) and value.__module__ != module.__name__:
                yield alias, f"{value.__module__}.{value.__qualname__}"


def _module_level_statements(body: List[ast.stmt]) -> Iterator[ast.stmt]:
    """Yield statements at module level, descending into if/try blocks but not into defs."""
    for node in body:
        yield node
        if isinstance(node, ast.If):
            yield from _module_level_statements(node.body)
            yield from _module_level_statements(node.orelse)
        elif isinstance(node, ast.Try):
            yield from _module_level_statements(node.body)
            for handler in node.handlers:
                yield from _module_level_statements(handler.body)
            yield from _module_level_statements(node.orelse)
            yield from _module_level_statements(node.finalbody)
