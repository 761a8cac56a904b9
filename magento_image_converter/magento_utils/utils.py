"""
utils.py — General helpers for the Magento conversion scripts.
"""

import inspect
import posixpath


BYTE_UNITS = ["B", "kB", "MB", "GB", "TB", "PB"]


def log(message: str) -> None:
    """Print message with the calling line number for easier debugging."""
    frame = inspect.currentframe().f_back
    print(f"[Line {frame.f_lineno}] {message}")


def format_bytes(size: float) -> str:
    """Return a human-readable byte size (base 1000, two decimals)."""
    value = float(size)
    unit = BYTE_UNITS[0]
    for unit in BYTE_UNITS[:-1]:
        if abs(value) < 1000:
            break
        value /= 1000
    else:
        unit = BYTE_UNITS[-1]
    if unit == "B":
        return f"{int(value)} B"
    return f"{value:.2f} {unit}"


def sql_quote(value: str) -> str:
    """Quote a value as a MySQL string literal."""
    escaped = str(value).replace("\\", "\\\\").replace("'", "''")
    return f"'{escaped}'"


def join_stored_path(stored_value: str, filename: str) -> str:
    """Put filename into the directory of a stored Magento media value (e.g. /a/b/x.png)."""
    return posixpath.join(posixpath.dirname(stored_value), filename)
