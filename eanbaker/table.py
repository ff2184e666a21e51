"""
Read CSV and spreadsheet input into a table of string cells.
"""

# Standard Library
import csv
import datetime
import io
import logging
import os
import zipfile

# PIP3 modules
import openpyxl
import openpyxl.utils.exceptions

# local repo modules
import eanbaker as eb
import eanbaker.config
import eanbaker.errors


FormatError = eb.errors.FormatError
ConfigError = eb.errors.ConfigError

DEFAULT_CSV_SEPARATOR = eb.config.DEFAULT_CSV_SEPARATOR
INVALID_SEPARATORS = eb.config.INVALID_SEPARATORS
SPREADSHEET_EXTENSIONS = (".xlsx", ".xlsm")

# row 0 is the header row
Table = tuple[tuple[str, ...], ...]


#============================================
def table_from_csv(content: bytes | str, separator: str = "") -> Table:
	"""
	Parse delimited text into a table.

	Blank lines are skipped. Every row must have as many fields as the
	first row.

	Args:
		content: Raw CSV bytes (UTF-8, optional BOM) or decoded text.
		separator: Single character separator, "" for a comma.

	Returns:
		Table of string cells.

	Raises:
		FormatError: Undecodable bytes, broken quoting or ragged rows.
		ConfigError: A separator that cannot split fields.
	"""
	if content is None:
		raise FormatError("CSV content is missing")
	if isinstance(content, bytes):
		try:
			text = content.decode("utf-8-sig")
		except UnicodeDecodeError as error:
			raise FormatError(f"CSV input is not UTF-8 text: {error}") from error
	else:
		text = content

	delimiter = separator or DEFAULT_CSV_SEPARATOR
	if delimiter in INVALID_SEPARATORS:
		raise ConfigError(f"Invalid CSV separator {delimiter!r}")
	try:
		reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter, strict=True)
	except (csv.Error, TypeError, ValueError) as error:
		raise ConfigError(f"Invalid CSV separator '{delimiter}': {error}") from error

	rows = []
	expected = None
	try:
		for fields in reader:
			if not fields:
				continue
			if expected is None:
				expected = len(fields)
			elif len(fields) != expected:
				raise FormatError(
					f"CSV line {reader.line_num}: wrong number of fields "
					f"({len(fields)}, expected {expected})"
				)
			rows.append(tuple(fields))
	except csv.Error as error:
		raise FormatError(f"CSV line {reader.line_num}: {error}") from error
	return tuple(rows)


#============================================
def cell_to_text(value) -> str:
	"""
	Convert a spreadsheet cell value to its text form.

	Args:
		value: Cell value from openpyxl.

	Returns:
		Cell text.
	"""
	if value is None:
		return ""
	if isinstance(value, bool):
		return "TRUE" if value else "FALSE"
	if isinstance(value, float) and value.is_integer():
		# EANs stored as numbers come back as floats
		return str(int(value))
	if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
		return value.isoformat()
	return str(value)


#============================================
def table_from_spreadsheet(content: bytes, sheet_index: int = 0) -> Table:
	"""
	Read the rows of the first sheet of an xlsx workbook.

	The sheet index is accepted for API symmetry but the first sheet in
	the workbook is always read. Trailing empty cells and trailing empty
	rows are dropped, so rows may be shorter than the header.

	Args:
		content: Raw workbook bytes.
		sheet_index: Requested sheet, currently ignored.

	Returns:
		Table of string cells.

	Raises:
		FormatError: Unreadable workbook or a workbook without sheets.
	"""
	if not content:
		raise FormatError("Spreadsheet content is empty")
	try:
		workbook = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
	except (
		zipfile.BadZipFile,
		openpyxl.utils.exceptions.InvalidFileException,
		KeyError,
		OSError,
		ValueError,
	) as error:
		raise FormatError(f"Cannot open spreadsheet: {error}") from error

	rows: list[tuple[str, ...]] = []
	try:
		sheet_names = workbook.sheetnames
		if not sheet_names:
			raise FormatError("Spreadsheet contains 0 sheets")
		worksheet = workbook[sheet_names[0]]
		for values in worksheet.iter_rows(values_only=True):
			cells = [cell_to_text(value) for value in values]
			while cells and cells[-1] == "":
				cells.pop()
			rows.append(tuple(cells))
	finally:
		workbook.close()

	while rows and not rows[-1]:
		rows.pop()
	return tuple(rows)


#============================================
def read_table(
	filename: str,
	content: bytes,
	separator: str = "",
	logger: logging.Logger | None = None,
) -> Table:
	"""
	Read a table, choosing the parser from the file name.

	Workbook extensions go straight to the spreadsheet reader. Anything
	else is tried as CSV first and as a spreadsheet when that fails; the
	spreadsheet error is the one raised if both fail.

	Args:
		filename: Name of the input, used for its extension only.
		content: Raw input bytes.
		separator: CSV separator, "" for a comma.
		logger: Optional logger.

	Returns:
		Table of string cells.
	"""
	extension = os.path.splitext(filename)[1].lower()
	if extension in SPREADSHEET_EXTENSIONS:
		return table_from_spreadsheet(content, 0)
	try:
		return table_from_csv(content, separator)
	except FormatError as error:
		if logger is not None:
			logger.debug("Input is not CSV, trying spreadsheet", extra={"fields": {"err": str(error)}})
	return table_from_spreadsheet(content, 0)
