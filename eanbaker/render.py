"""
Label page layout and PDF output.
"""

# Standard Library
import functools
import io
import logging
import pathlib
import tempfile
import unicodedata

# PIP3 modules
import reportlab.lib.pagesizes
import reportlab.lib.units
import reportlab.lib.utils
import reportlab.pdfgen.canvas

# local repo modules
import eanbaker as eb
import eanbaker.config
import eanbaker.ean_lib
import eanbaker.errors
import eanbaker.record


Record = eb.record.Record
ConfigError = eb.errors.ConfigError

MM = reportlab.lib.units.mm
PAGE_WIDTH_MM = eb.config.PAGE_WIDTH_MM
PAGE_HEIGHT_MM = eb.config.PAGE_HEIGHT_MM
TOP_MARGIN_MM = eb.config.TOP_MARGIN_MM
DEFAULT_FONT = eb.config.DEFAULT_FONT
DEFAULT_FONT_SIZE = eb.config.DEFAULT_FONT_SIZE
TEXT_LINE_HEIGHT_MM = eb.config.TEXT_LINE_HEIGHT_MM
TEXT_X_MM = eb.config.TEXT_X_MM
TEXT_Y_MM = eb.config.TEXT_Y_MM
TEXT_WIDTH_MM = eb.config.TEXT_WIDTH_MM
CELL_MARGIN_MM = eb.config.CELL_MARGIN_MM
BARCODE_X_MM = eb.config.BARCODE_X_MM
BARCODE_Y_MM = eb.config.BARCODE_Y_MM
BARCODE_WIDTH_MM = eb.config.BARCODE_WIDTH_MM
BARCODE_HEIGHT_MM = eb.config.BARCODE_HEIGHT_MM
FOOTER_WIDTH_MM = eb.config.FOOTER_WIDTH_MM
FOOTER_HEIGHT_MM = eb.config.FOOTER_HEIGHT_MM
SCRATCH_DIR_PREFIX = eb.config.SCRATCH_DIR_PREFIX

# characters that NFKD leaves without an ASCII base letter
ASCII_FOLDS = str.maketrans({
	"\u00d7": "x",
	"\u00f7": "/",
	"\u00d8": "O",
	"\u00f8": "o",
	"\u00df": "ss",
	"\u0141": "L",
	"\u0142": "l",
	"\u00b0": "deg",
	"\u2122": "TM",
	"\u00ae": "(R)",
	"\u00a9": "(C)",
	"\u20ac": "EUR",
	"\u2013": "-",
	"\u2014": "-",
})

# baseline offset below the middle of a text line, as a share of font size
BASELINE_SHIFT = 0.3


#============================================
def normalize_text(value: str) -> str:
	"""
	Fold label text to ASCII for the built-in Helvetica font.
	"""
	folded = unicodedata.normalize("NFKD", value.translate(ASCII_FOLDS))
	return "".join(char for char in folded if char.isascii())


#============================================
def page_repeat(global_times: int, record_times: int) -> int:
	"""
	Number of pages for one record; negative sums print nothing.

	Args:
		global_times: Run-wide repeat count.
		record_times: Record repeat count.

	Returns:
		Page count, never below zero.
	"""
	return max(0, global_times + record_times)


#============================================
def print_progress(done: int, total: int) -> None:
	"""
	Rewrite one status line with the number of records laid out so far.
	"""
	if total <= 0:
		return
	print(f"\rRecords laid out: {done} of {total}", end="", flush=True)


class LabelDocument:
	"""
	PDF with one 30 x 15 mm landscape page per printed label.

	Pages are drawn into memory; nothing touches the output path until
	save() is called.
	"""

	def __init__(
		self,
		normalize: bool = True,
		logger: logging.Logger | None = None,
	) -> None:
		self.normalize = normalize
		self.logger = logger
		self.page_count = 0
		self.page_width, self.page_height = reportlab.lib.pagesizes.landscape(
			(PAGE_HEIGHT_MM * MM, PAGE_WIDTH_MM * MM)
		)
		self._buffer = io.BytesIO()
		self._pdf = reportlab.pdfgen.canvas.Canvas(
			self._buffer,
			pagesize=(self.page_width, self.page_height),
		)
		self._footer = None
		self._closed = False

	#============================================
	def add_pages(
		self,
		records: list[Record],
		global_times: int,
		verbose: bool = False,
	) -> None:
		"""
		Append global_times + record.times pages for every record.

		Each distinct EAN is encoded once per call into a scratch PNG; the
		scratch directory is removed when the call returns or raises. Pages
		appended before an encoding failure stay in the document.

		Args:
			records: Records in print order.
			global_times: Run-wide repeat count, at least 1.
			verbose: Print a progress bar.

		Raises:
			ConfigError: When global_times is below 1.
			EncodingError: When a record has an invalid EAN.
		"""
		if self._closed:
			raise RuntimeError("Document is already saved")
		if global_times < 1:
			if self.logger is not None:
				self.logger.error("Bar code must be printed at least once")
			raise ConfigError(f"Bar code must be printed at least once, got {global_times}")

		with tempfile.TemporaryDirectory(prefix=SCRATCH_DIR_PREFIX) as scratch_dir:
			image_paths: dict[str, pathlib.Path] = {}
			total = len(records)
			for index, record in enumerate(records, start=1):
				image_path = image_paths.get(record.ean)
				if image_path is None:
					image_path = pathlib.Path(scratch_dir) / f"{record.ean}.png"
					try:
						eb.ean_lib.write_barcode_png(record.ean, image_path)
					except eb.errors.EncodingError as error:
						if self.logger is not None:
							self.logger.error(
								"Failed to generate barcode",
								extra={"fields": {"err": str(error)}},
							)
						raise
					image_paths[record.ean] = image_path
				for _repeat in range(page_repeat(global_times, record.times)):
					self._add_page(record, image_path)
				if verbose:
					print_progress(index, total)
			if verbose and total > 0:
				print()

		if self.logger is not None:
			self.logger.info("Pages added", extra={"fields": {"count": self.page_count}})

	#============================================
	def _add_page(self, record: Record, image_path: pathlib.Path) -> None:
		"""
		Draw one label page: text block, barcode image, EAN footer.
		"""
		pdf = self._pdf
		pdf.setFont(DEFAULT_FONT, DEFAULT_FONT_SIZE)
		text = record.text
		if self.normalize:
			text = normalize_text(text)
		self._draw_text_block(text)

		x = BARCODE_X_MM * MM
		y = self.page_height - (TOP_MARGIN_MM + BARCODE_Y_MM + BARCODE_HEIGHT_MM) * MM
		pdf.drawImage(
			str(image_path),
			x,
			y,
			width=BARCODE_WIDTH_MM * MM,
			height=BARCODE_HEIGHT_MM * MM,
		)

		self._footer = functools.partial(self._draw_footer, record.ean)
		self._close_page()

	#============================================
	def _draw_text_block(self, text: str) -> None:
		"""
		Draw wrapped text lines from the top-left text box.
		"""
		max_width = (TEXT_WIDTH_MM - 2.0 * CELL_MARGIN_MM) * MM
		lines = reportlab.lib.utils.simpleSplit(text, DEFAULT_FONT, DEFAULT_FONT_SIZE, max_width)
		x = (TEXT_X_MM + CELL_MARGIN_MM) * MM
		for index, line in enumerate(lines):
			middle = (TOP_MARGIN_MM + TEXT_Y_MM + (index + 0.5) * TEXT_LINE_HEIGHT_MM) * MM
			baseline = middle + BASELINE_SHIFT * DEFAULT_FONT_SIZE
			self._pdf.drawString(x, self.page_height - baseline, line)

	#============================================
	def _draw_footer(self, ean: str) -> None:
		"""
		Draw the EAN digits centred at the bottom of the footer cell.
		"""
		self._pdf.setFont(DEFAULT_FONT, DEFAULT_FONT_SIZE)
		baseline = FOOTER_HEIGHT_MM * MM - BASELINE_SHIFT * DEFAULT_FONT_SIZE
		self._pdf.drawCentredString(
			FOOTER_WIDTH_MM * MM / 2.0,
			self.page_height - baseline,
			ean,
		)

	#============================================
	def _close_page(self) -> None:
		if self._footer is not None:
			self._footer()
		self._pdf.showPage()
		self.page_count += 1

	#============================================
	def save(self, path: pathlib.Path) -> None:
		"""
		Finalize the document and write it to path.

		Args:
			path: Output PDF path; its directory must exist.
		"""
		if not self._closed:
			self._pdf.save()
			self._closed = True
		with open(path, "wb") as handle:
			handle.write(self._buffer.getvalue())
		if self.logger is not None:
			self.logger.info("PDF saved", extra={"fields": {"path": str(path), "pages": self.page_count}})
