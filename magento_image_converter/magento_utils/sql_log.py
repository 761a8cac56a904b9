"""
sql_log.py — Builds the replayable SQL script of every row a run changes.
"""

from typing import List

from .utils import sql_quote


BEGIN = "START TRANSACTION;"
COMMIT = "COMMIT;"


class SqlLogBuilder:
    """Append-only list of single-row UPDATE statements inside one transaction."""

    def __init__(self):
        self.statements: List[str] = [BEGIN]
        self._finalized = False

    def __len__(self) -> int:
        return len(self.statements) - (2 if self._finalized else 1)

    def append(self, row_id: int, table: str, new_value: str) -> str:
        if self._finalized:
            raise RuntimeError("SQL log already finalized.")
        statement = f"UPDATE {table} SET value = {sql_quote(new_value)} WHERE value_id = {int(row_id)} LIMIT 1;"
        self.statements.append(statement)
        return statement

    def finalize(self) -> str:
        if not self._finalized:
            self.statements.append(COMMIT)
            self._finalized = True
        return "\n".join(self.statements) + "\n"

    def write(self, path: str) -> str:
        script = self.finalize()
        with open(path, "w", encoding="utf-8") as f:
            f.write(script)
        return path
