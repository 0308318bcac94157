"""BigQuery dialect compiler."""

from __future__ import annotations

from exportql.compile.base import SQLCompiler


class BigQueryCompiler(SQLCompiler):
    """Compiles export specifications to BigQuery Standard SQL.

    Parameter style: ``@name`` – compatible with named query parameters of
    ``google-cloud-bigquery`` (``QueryJobConfig(query_parameters=[...])``).

    Identifiers are quoted with backticks; embedded backslashes and backticks
    are escaped with a backslash.
    """

    @property
    def dialect_name(self) -> str:
        return "bigquery"

    def param_placeholder(self, name: str) -> str:
        return f"@{name}"

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace("\\", "\\\\").replace("`", "\\`")
        return f"`{escaped}`"
