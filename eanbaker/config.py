"""
Shared configuration, constants and generator settings.
"""

# Standard Library
import dataclasses
import json
import os
import pathlib

# local repo modules
import eanbaker as eb
import eanbaker.errors


ConfigError = eb.errors.ConfigError

VERSION = "1.0.0"

# page geometry in millimetres, landscape: 30 mm wide, 15 mm tall
PAGE_WIDTH_MM = 30.0
PAGE_HEIGHT_MM = 15.0
TOP_MARGIN_MM = 0.0

DEFAULT_FONT = "Helvetica"
DEFAULT_FONT_SIZE = 4.0
TEXT_LINE_HEIGHT_MM = 1.6
TEXT_X_MM = 1.0
TEXT_Y_MM = 1.0
TEXT_WIDTH_MM = 27.0
CELL_MARGIN_MM = 1.0

BARCODE_X_MM = 1.5
BARCODE_Y_MM = 5.0
BARCODE_WIDTH_MM = 27.0
BARCODE_HEIGHT_MM = 7.0

FOOTER_WIDTH_MM = 30.0
FOOTER_HEIGHT_MM = 14.0

BARCODE_PIXELS = 200
SCRATCH_DIR_PREFIX = "generate-barcodes-"

DEFAULT_CSV_PATH = "data.csv"
DEFAULT_TEXT_HEADER = "Material Number"
DEFAULT_EAN_HEADER = "ean"
DEFAULT_TIMES_HEADER = ""
DEFAULT_TIMES_EACH_EAN = 1
DEFAULT_CSV_SEPARATOR = ","
# quote, line breaks and the replacement character never split fields
INVALID_SEPARATORS = ("\"", "\r", "\n", "\ufffd")

CONFIG_KEYS = (
	"csv_path",
	"pdf_path",
	"csv_comma",
	"text_header",
	"ean_header",
	"times_header",
	"times_each_ean",
)


@dataclasses.dataclass
class GeneratorConfig:
	csv_path: str = ""
	pdf_path: str = ""
	csv_comma: str = ""
	text_header: str = ""
	ean_header: str = ""
	times_header: str = ""
	times_each_ean: int = DEFAULT_TIMES_EACH_EAN

	#============================================
	def validate(self) -> None:
		"""
		Check input and output extensions.

		Raises:
			ConfigError: When the input is not .csv or the output is not .pdf.
		"""
		if os.path.splitext(self.csv_path)[1].lower() != ".csv":
			raise ConfigError(f"Input file must have a .csv extension: '{self.csv_path}'")
		if os.path.splitext(self.pdf_path)[1].lower() != ".pdf":
			raise ConfigError(f"Output file must have a .pdf extension: '{self.pdf_path}'")

	#============================================
	def update_pdf_path(self) -> None:
		"""
		Derive the output path from the input path when it is not set.
		"""
		if self.pdf_path:
			return
		self.pdf_path = derive_pdf_path(self.csv_path)

	#============================================
	def to_dict(self) -> dict:
		return dataclasses.asdict(self)


#============================================
def derive_pdf_path(path: str) -> str:
	"""
	Build a PDF file name from an input path.

	The directory is dropped and only the last extension is replaced,
	so "a.b.c.csv" becomes "a.b.c.pdf".

	Args:
		path: Input file path.

	Returns:
		PDF file name.
	"""
	base = os.path.basename(path)
	stem, _ext = os.path.splitext(base)
	return stem + ".pdf"


#============================================
def comma_from_string(value: str) -> str:
	"""
	Validate a CSV separator string.

	Args:
		value: Empty string for the default separator or a single character.

	Returns:
		The separator, or "" when unset.

	Raises:
		ConfigError: When more than one character or a reserved
			character is given.
	"""
	if not value:
		return ""
	if len(value) != 1:
		raise ConfigError(f"Expected a single character separator, got '{value}'")
	if value in INVALID_SEPARATORS:
		raise ConfigError(f"Separator {value!r} cannot be used to split CSV fields")
	return value


#============================================
def config_from_dict(data: dict) -> GeneratorConfig:
	"""
	Build a GeneratorConfig from decoded JSON.

	Args:
		data: Mapping with config keys; unknown keys are ignored.

	Returns:
		GeneratorConfig.
	"""
	if not isinstance(data, dict):
		raise ConfigError("Generator config must be a JSON object")
	config = GeneratorConfig()
	for key in CONFIG_KEYS:
		if key not in data:
			continue
		value = data[key]
		if key == "times_each_ean":
			# bool is an int subclass, reject it explicitly
			if isinstance(value, bool) or not isinstance(value, int) or value < 0:
				raise ConfigError(f"'{key}' must be a non-negative integer, got {value!r}")
		elif not isinstance(value, str):
			raise ConfigError(f"'{key}' must be a string, got {value!r}")
		if key == "csv_comma":
			value = comma_from_string(value)
		setattr(config, key, value)
	return config


#============================================
def load_config(path: pathlib.Path) -> GeneratorConfig:
	"""
	Read a persisted generator config.

	Args:
		path: JSON file path.

	Returns:
		GeneratorConfig.
	"""
	with open(path, "r", encoding="utf-8") as handle:
		try:
			data = json.load(handle)
		except (json.JSONDecodeError, UnicodeDecodeError) as error:
			raise ConfigError(f"Cannot load generator config '{path}': {error}") from error
	return config_from_dict(data)


#============================================
def save_config(config: GeneratorConfig, path: pathlib.Path) -> None:
	"""
	Write a generator config as indented JSON.

	Args:
		config: Generator config.
		path: Output JSON path.
	"""
	with open(path, "w", encoding="utf-8") as handle:
		json.dump(config.to_dict(), handle, indent=2, ensure_ascii=False)
		handle.write("\n")
