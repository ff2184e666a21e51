"""
Turn a table into print records using configurable header names.
"""

# Standard Library
import dataclasses
import logging
import math

# local repo modules
import eanbaker as eb
import eanbaker.errors
import eanbaker.table


Table = eb.table.Table
ValidationError = eb.errors.ValidationError
NumericFormatError = eb.errors.NumericFormatError


@dataclasses.dataclass
class Record:
	text: str
	ean: str
	times: int = 1


#============================================
def parse_times(value: str) -> int:
	"""
	Parse a times cell, truncating decimals toward zero.

	Args:
		value: Cell text, e.g. "3", " 3.0 " or "-1".

	Returns:
		Integer repeat count.

	Raises:
		NumericFormatError: When the cell is not a finite number.
	"""
	cleaned = value.strip()
	# float() and int() accept digit group underscores like "1_000"
	if "_" in cleaned:
		raise NumericFormatError(f"Times column contains non numeric string '{value}'")
	try:
		number = float(cleaned)
	except ValueError:
		number = None
	if number is not None:
		if not math.isfinite(number):
			raise NumericFormatError(f"Times column contains a non finite number '{value}'")
		return int(number)
	try:
		return int(cleaned)
	except ValueError as error:
		raise NumericFormatError(f"Times column contains non numeric string '{value}'") from error


#============================================
def cell_at(row: tuple[str, ...], index: int) -> str:
	"""
	Get a cell, treating columns past the end of a short row as empty.
	"""
	if index < len(row):
		return row[index]
	return ""


#============================================
def find_header_indexes(
	header: tuple[str, ...],
	text_header: str,
	ean_header: str,
	times_header: str,
	strict_headers: bool = False,
) -> tuple[int, int, int]:
	"""
	Resolve column indexes for the configured headers.

	Matching is case-insensitive and the last matching column wins.

	Args:
		header: Header row.
		text_header: Text column name.
		ean_header: EAN column name.
		times_header: Times column name, blank to skip.
		strict_headers: Reject configured headers that appear twice.

	Returns:
		Tuple of (text_index, ean_index, times_index), -1 when not found.
	"""
	targets = {
		"text": text_header.lower(),
		"ean": ean_header.lower(),
	}
	if times_header.strip():
		targets["times"] = times_header.lower()

	indexes = {key: -1 for key in ("text", "ean", "times")}
	counts = {key: 0 for key in targets}
	for index, cell in enumerate(header):
		lowered = cell.lower()
		for key, target in targets.items():
			if lowered == target:
				indexes[key] = index
				counts[key] += 1

	if strict_headers:
		names = {"text": text_header, "ean": ean_header, "times": times_header}
		for key, count in counts.items():
			if count > 1:
				raise ValidationError(f"Header '{names[key]}' appears {count} times")

	if indexes["text"] == -1:
		raise ValidationError(f"Cannot find text header '{text_header}'")
	if indexes["ean"] == -1:
		raise ValidationError(f"Cannot find ean header '{ean_header}'")
	if "times" in targets and indexes["times"] == -1:
		raise ValidationError(f"Cannot find times header '{times_header}'")
	return (indexes["text"], indexes["ean"], indexes["times"])


#============================================
def records_from_table(
	table: Table,
	text_header: str,
	ean_header: str,
	times_header: str = "",
	strict_headers: bool = False,
	logger: logging.Logger | None = None,
) -> list[Record]:
	"""
	Extract print records from a table.

	Rows with an empty EAN cell are skipped. EANs are not validated here.

	Args:
		table: Table with the header in row 0.
		text_header: Text column name.
		ean_header: EAN column name.
		times_header: Times column name, blank for times=1 on every record.
		strict_headers: Reject configured headers that appear twice.
		logger: Optional logger.

	Returns:
		Records in table row order.
	"""
	if not text_header:
		raise ValidationError("Text column header cannot be empty")
	if not ean_header:
		raise ValidationError("Ean column header cannot be empty")
	if len(table) == 0:
		raise ValidationError("Table with data cannot be empty")

	times_header = times_header or ""
	text_index, ean_index, times_index = find_header_indexes(
		table[0],
		text_header,
		ean_header,
		times_header,
		strict_headers,
	)

	records = []
	for row in table[1:]:
		ean = cell_at(row, ean_index)
		if ean == "":
			continue
		times = 1
		if times_index != -1:
			times = parse_times(cell_at(row, times_index))
		records.append(Record(text=cell_at(row, text_index), ean=ean, times=times))

	if logger is not None:
		logger.debug("Records in table", extra={"fields": {"records": len(records)}})
	return records
