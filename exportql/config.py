"""Compiler configuration.

:class:`CompilerConfig` is passed explicitly to
:class:`~exportql.compile.builder.ExportQueryBuilder`; nothing is read from
module globals at compile time, so each deployment (and each test) can choose
its own truncation budget.

Example::

    config = CompilerConfig(truncate_size=4096)
    compiled = exportql.compile_export(spec, table, config=config)
"""

from __future__ import annotations

from dataclasses import dataclass

from exportql.errors import ConfigError

#: Maximum number of characters kept for a truncated value.
DEFAULT_CAST_SIZE = 16384

#: Target dialects with a compiler in :mod:`exportql.compile`.
SUPPORTED_DIALECTS: tuple[str, ...] = ("bigquery",)


@dataclass(frozen=True)
class CompilerConfig:
    """Immutable configuration shared by every compilation call.

    Attributes:
        truncate_size: Character budget for truncated columns.  Values longer
            than this are cut and flagged in the companion column.
        dialect: Target dialect; one of :data:`SUPPORTED_DIALECTS`.
    """

    truncate_size: int = DEFAULT_CAST_SIZE
    dialect: str = "bigquery"

    def __post_init__(self) -> None:
        if self.truncate_size <= 0:
            raise ConfigError(
                f"truncate_size must be a positive integer, got {self.truncate_size}."
            )
        if self.dialect not in SUPPORTED_DIALECTS:
            raise ConfigError(
                f"Unsupported dialect target: '{self.dialect}'. "
                f"Supported targets: {list(SUPPORTED_DIALECTS)}."
            )
