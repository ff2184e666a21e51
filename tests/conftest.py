"""
Pytest configuration for local imports and shared input fixtures.
"""

# Standard Library
import io
import os
import sys

# PIP3 modules
import openpyxl
import pytest

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()


#============================================
def build_xlsx(rows: list[list], second_sheet_rows: list[list] | None = None) -> bytes:
	"""
	Build an xlsx workbook in memory.

	Args:
		rows: Rows of the first sheet.
		second_sheet_rows: Optional rows of a second sheet.

	Returns:
		Workbook bytes.
	"""
	workbook = openpyxl.Workbook()
	sheet = workbook.active
	sheet.title = "Products"
	for row in rows:
		sheet.append(row)
	if second_sheet_rows is not None:
		other = workbook.create_sheet("Other")
		for row in second_sheet_rows:
			other.append(row)
	buffer = io.BytesIO()
	workbook.save(buffer)
	return buffer.getvalue()


@pytest.fixture
def xlsx_bytes():
	return build_xlsx


@pytest.fixture
def widget_table() -> tuple[tuple[str, ...], ...]:
	return (
		("Text", "EAN", "Times"),
		("Widget", "5901234123457", "2"),
	)
