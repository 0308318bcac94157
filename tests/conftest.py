"""Shared pytest fixtures for exportQL unit tests."""
from __future__ import annotations

import itertools

import pytest

from exportql.compile.assembly import QueryAssembly
from exportql.compile.bigquery import BigQueryCompiler
from exportql.compile.builder import ExportQueryBuilder
from exportql.compile.truncation import UniqueNameGenerator
from exportql.config import CompilerConfig
from exportql.schema.table import TableDefinition
from tests.fixtures import load_table_definition


@pytest.fixture(scope="session")
def table() -> TableDefinition:
    """Canonical ``orders`` table definition shared across all tests."""
    return load_table_definition()


@pytest.fixture
def compiler() -> BigQueryCompiler:
    return BigQueryCompiler()


@pytest.fixture
def query(compiler: BigQueryCompiler) -> QueryAssembly:
    """A fresh assembly with FROM already set."""
    return QueryAssembly(compiler).from_("`orders`")


def _counting_names() -> UniqueNameGenerator:
    counter = itertools.count()
    return UniqueNameGenerator(lambda: f"_{next(counter):012d}")


@pytest.fixture
def builder(compiler: BigQueryCompiler) -> ExportQueryBuilder:
    """Builder with deterministic flag-column names (``<col>_000000000000``, …)."""
    return ExportQueryBuilder(compiler, name_generator_factory=_counting_names)


@pytest.fixture
def small_builder(compiler: BigQueryCompiler) -> ExportQueryBuilder:
    """Builder with a 10-character truncation budget."""
    return ExportQueryBuilder(
        compiler,
        config=CompilerConfig(truncate_size=10),
        name_generator_factory=_counting_names,
    )
