"""Compilation context value object.

Packages the ``(compiler, converter, config)`` data clump shared by
``ExportQueryBuilder`` and all clause-level sub-builders into a single
cohesive object.
"""
from __future__ import annotations

from dataclasses import dataclass

from exportql.compile.base import SQLCompiler
from exportql.compile.converter import ColumnConverter
from exportql.config import CompilerConfig


@dataclass(frozen=True)
class CompilationContext:
    """Immutable context for compilation calls.

    Attributes:
        compiler: Dialect-specific SQL compiler instance.
        converter: Column-type converter for non-STRING comparisons.
        config: Compiler configuration (truncation budget).
    """

    compiler: SQLCompiler
    converter: ColumnConverter
    config: CompilerConfig

    def column_ref(self, table_name: str, column_name: str) -> str:
        """Return the quoted ``table.column`` reference."""
        return self.compiler.quote_qualified(table_name, column_name)
