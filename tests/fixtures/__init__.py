"""Test fixtures: sample TableDefinition JSON."""

from __future__ import annotations

import json
from pathlib import Path

from exportql.schema.table import TableDefinition

_FIXTURES_DIR = Path(__file__).parent


def load_table_definition() -> TableDefinition:
    """Load the canonical sample TableDefinition from table.json."""
    data = json.loads((_FIXTURES_DIR / "table.json").read_text())
    return TableDefinition.model_validate(data)
