"""Core ExportSpecification → SQL compilation logic.

``ExportQueryBuilder`` is the top-level orchestrator.  It wires together the
clause-level sub-builders, then drives them against one
:class:`~exportql.compile.assembly.QueryAssembly` per call.  All dialect
behaviour is delegated to the injected ``SQLCompiler``; type casting for
non-STRING filters and sort keys is delegated to the ``ColumnConverter``.

Sub-builder hierarchy
---------------------
ExportQueryBuilder
  ├── ProjectionBuilder    (truncation.py)
  ├── PredicateBuilder     (clause_builders.py)
  ├── ChangeWindowBuilder  (clause_builders.py)
  ├── OrderByBuilder       (clause_builders.py)
  └── LimitBuilder         (clause_builders.py)

A call either returns a complete :class:`~exportql.compile.base.CompiledSQL`
or raises; the partially populated assembly is never handed back.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from exportql.compile.assembly import QueryAssembly
from exportql.compile.base import CompiledSQL, SQLCompiler
from exportql.compile.clause_builders import (
    ChangeWindowBuilder,
    LimitBuilder,
    OrderByBuilder,
    PredicateBuilder,
)
from exportql.compile.context import CompilationContext
from exportql.compile.converter import BigQueryColumnConverter, ColumnConverter
from exportql.compile.truncation import ProjectionBuilder, UniqueNameGenerator
from exportql.config import CompilerConfig
from exportql.schema.export_spec import ExportSpecification
from exportql.schema.table import TableDefinition

logger = logging.getLogger(__name__)


class ExportQueryBuilder:
    """Compiles an ExportSpecification to parameterized SQL.

    Args:
        compiler: Dialect-specific compiler instance.
        converter: Column-type converter; defaults to
            :class:`~exportql.compile.converter.BigQueryColumnConverter`.
        config: Compiler configuration; defaults to ``CompilerConfig()``.
        name_generator_factory: Returns the flag-name generator for one call.
            Defaults to :class:`~exportql.compile.truncation.UniqueNameGenerator`.
    """

    def __init__(
        self,
        compiler: SQLCompiler,
        converter: ColumnConverter | None = None,
        config: CompilerConfig | None = None,
        name_generator_factory: Callable[[], UniqueNameGenerator] | None = None,
    ) -> None:
        self._ctx = CompilationContext(
            compiler=compiler,
            converter=converter or BigQueryColumnConverter(compiler),
            config=config or CompilerConfig(),
        )
        self._name_generator_factory = name_generator_factory or UniqueNameGenerator
        self._projection = ProjectionBuilder(self._ctx)
        self._predicates = PredicateBuilder(self._ctx)
        self._change_window = ChangeWindowBuilder(self._ctx)
        self._order_by = OrderByBuilder(self._ctx)
        self._limit = LimitBuilder()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(
        self,
        spec: ExportSpecification,
        table: TableDefinition | None = None,
    ) -> CompiledSQL:
        """Compile ``spec`` to parameterized SQL.

        Args:
            spec: The export request.
            table: Column metadata of the exported table; required when
                ``spec.truncate_large_columns`` is set and columns are listed.

        Returns:
            :class:`~exportql.compile.base.CompiledSQL` with ``sql``,
            bound ``params`` and their ``types``.

        Raises:
            QueryBuilderError: (or subclass) if the specification cannot be
                compiled.
        """
        query = QueryAssembly(self._ctx.compiler)
        query.from_(self._table_ref(spec))
        self.populate(spec, query, table)
        compiled = query.to_compiled()
        logger.debug(
            "Compiled export query for table %s: %d select items, %d params",
            spec.table_name,
            len(query.select_parts),
            len(compiled.params),
        )
        return compiled

    def populate(
        self,
        spec: ExportSpecification,
        query: QueryAssembly,
        table: TableDefinition | None = None,
    ) -> QueryAssembly:
        """Add every clause of ``spec`` to a caller-supplied assembly.

        The caller owns the FROM reference and the final rendering.  Use
        :meth:`build` for the common case.
        """
        logger.debug(
            "Compiling export of %s: %d columns, %d filters, %d sort keys, truncate=%s",
            spec.table_name,
            len(spec.columns),
            len(spec.filters),
            len(spec.order_by),
            spec.truncate_large_columns,
        )
        self._projection.build(
            spec.columns,
            spec.table_name,
            query,
            truncate_large_columns=spec.truncate_large_columns,
            table=table,
            names=self._name_generator_factory(),
        )
        self._predicates.build(spec.filters, spec.table_name, query)
        self._change_window.build(spec.change_since, spec.change_until, query)
        self._order_by.build(spec.order_by, spec.table_name, query)
        self._limit.build(spec.limit, query)
        return query

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _table_ref(self, spec: ExportSpecification) -> str:
        if spec.dataset:
            return self._ctx.compiler.quote_qualified(spec.dataset, spec.table_name)
        return self._ctx.compiler.quote_identifier(spec.table_name)
