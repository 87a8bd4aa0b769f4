"""Shared fixtures: audit logs written to a temporary directory."""

import pytest

HEADER = "TIMESTAMP,USER_ID,SESSION_ID,ACTION_TYPE,TARGET_RESOURCE,SEVERITY_LEVEL,BYTES_TRANSFERRED"


def _format_row(row) -> str:
    if isinstance(row, str):
        return row
    return ",".join(str(value) for value in row)


@pytest.fixture
def write_log(tmp_path):
    """Factory writing rows (tuples or raw strings) below a header line."""
    def _write(rows, name="audit.csv", header=True):
        path = tmp_path / name
        lines = [HEADER] if header else []
        lines.extend(_format_row(row) for row in rows)
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return _write


@pytest.fixture
def session_log(write_log):
    """One well-formed session touching /a, /b and /c."""
    return write_log([
        (1, "u", "s1", "LOGIN", "/a", 1, 0),
        (2, "u", "s1", "ACCESS", "/b", 1, 0),
        (3, "u", "s1", "ACCESS", "/c", 1, 0),
        (4, "u", "s1", "LOGOUT", "s1", 1, 0),
    ])


@pytest.fixture
def missing_log(tmp_path):
    return tmp_path / "does-not-exist.csv"
