"""
Error types raised by the label pipeline.

File system failures are not wrapped; they surface as the built-in OSError.
"""


class EanBakerError(Exception):
	"""
	Base class for pipeline errors shown to the user.
	"""


class ConfigError(EanBakerError):
	"""
	Invalid settings: file extensions, separators, repeat counts.
	"""


class ValidationError(ConfigError):
	"""
	Required headers are empty or missing from the table.
	"""


class FormatError(EanBakerError):
	"""
	Input bytes are not a readable CSV or spreadsheet.
	"""


class NumericFormatError(EanBakerError):
	"""
	A times cell is not a number.
	"""


class EncodingError(EanBakerError):
	"""
	A barcode payload is not a valid EAN-8 or EAN-13 code.
	"""
