"""Run bundled SQL scripts statement by statement.

Scripts separate statements with one or more blank lines, so statements
may themselves contain semicolons (e.g. trigger bodies):

    CREATE TABLE gpkg_contents (...);

    CREATE TRIGGER ... BEGIN SELECT ...; END;

Statements run strictly in textual order; the first failure aborts the run
and nothing already executed is rolled back here.
"""

from __future__ import annotations

import re
from typing import BinaryIO

from gpkg_schema.helpers.store_stub import StoreExecutor

# One or more blank (whitespace-only) lines
_STATEMENT_DELIMITER = re.compile(r"\n[ \t\r\f\v]*(?:\n[ \t\r\f\v]*)*\n")


def split_statements(script: str) -> list[str]:
    """Split script text into trimmed, non-empty statements.

    Example:
        >>> split_statements("CREATE TABLE a (x);\\n\\n\\nCREATE INDEX i ON a (x);\\n")
        ['CREATE TABLE a (x);', 'CREATE INDEX i ON a (x);']
    """
    normalized = script.replace("\r\n", "\n")
    statements: list[str] = []
    for chunk in _STATEMENT_DELIMITER.split(normalized):
        statement = chunk.strip()
        if statement:
            statements.append(statement)
    return statements


def run_script(store: StoreExecutor, stream: BinaryIO) -> int:
    """Execute every statement of a script stream.

    The stream is fully consumed and closed on every exit path.

    Args:
        store: Store to execute against.
        stream: UTF-8 encoded script.

    Returns:
        Number of statements executed.

    Raises:
        StoreExecutionError: On the first statement the store rejects.
        UnicodeDecodeError: If the script is not valid UTF-8; nothing is
            executed in that case.
    """
    with stream:
        script = stream.read().decode("utf-8")

    count = 0
    for statement in split_statements(script):
        store.execute(statement)
        count += 1
    return count
