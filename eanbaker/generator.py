"""
Run the full pipeline: input bytes to table, records and a label PDF.
"""

# Standard Library
import dataclasses
import logging

# local repo modules
import eanbaker as eb
import eanbaker.config
import eanbaker.errors
import eanbaker.record
import eanbaker.render
import eanbaker.table


GeneratorConfig = eb.config.GeneratorConfig
Table = eb.table.Table


@dataclasses.dataclass
class GenerationResult:
	message: str
	pdf_path: str
	pages: int
	records: int


#============================================
def generate_from_table(
	config: GeneratorConfig,
	table: Table,
	normalize: bool = True,
	strict_headers: bool = False,
	logger: logging.Logger | None = None,
	verbose: bool = False,
) -> GenerationResult:
	"""
	Build and save the label PDF for an already parsed table.

	The output file is only written after every page was added.

	Args:
		config: Generator settings; pdf_path must be set.
		table: Parsed input table.
		normalize: Fold label text to ASCII.
		strict_headers: Reject duplicated configured headers.
		logger: Optional logger.
		verbose: Print progress.

	Returns:
		GenerationResult.
	"""
	try:
		records = eb.record.records_from_table(
			table,
			config.text_header,
			config.ean_header,
			config.times_header,
			strict_headers=strict_headers,
			logger=logger,
		)
	except eb.errors.EanBakerError as error:
		if logger is not None:
			logger.error("Failed to get records from table", extra={"fields": {"err": str(error)}})
		raise

	document = eb.render.LabelDocument(normalize=normalize, logger=logger)
	document.add_pages(records, config.times_each_ean, verbose=verbose)
	try:
		document.save(config.pdf_path)
	except OSError as error:
		if logger is not None:
			logger.error("Failed to save pdf file", extra={"fields": {"err": str(error)}})
		raise

	return GenerationResult(
		message=f"PDF generated: {config.pdf_path}",
		pdf_path=config.pdf_path,
		pages=document.page_count,
		records=len(records),
	)


#============================================
def generate(
	config: GeneratorConfig,
	filename: str,
	content,
	gui_mode: bool = False,
	normalize: bool = True,
	strict_headers: bool = False,
	logger: logging.Logger | None = None,
	verbose: bool = False,
) -> GenerationResult:
	"""
	Generate the label PDF from raw input content.

	Args:
		config: Generator settings.
		filename: Input name, used to pick the parser.
		content: Raw bytes or a binary file object.
		gui_mode: Skip the .csv/.pdf extension check for in-memory input.
		normalize: Fold label text to ASCII.
		strict_headers: Reject duplicated configured headers.
		logger: Optional logger.
		verbose: Print progress.

	Returns:
		GenerationResult.
	"""
	if logger is not None:
		logger.debug("Try to generate pdf", extra={"fields": {"filename": filename, "generator": config.to_dict()}})
	if not gui_mode:
		try:
			config.validate()
		except eb.errors.ConfigError as error:
			if logger is not None:
				logger.error("Generator is invalid", extra={"fields": {"err": str(error)}})
			raise
		if logger is not None:
			logger.info("Generator is valid")

	if hasattr(content, "read"):
		content = content.read()
	table = eb.table.read_table(filename, content, config.csv_comma, logger=logger)
	if logger is not None:
		logger.debug("Table to generate pdf", extra={"fields": {"rows": len(table)}})
	return generate_from_table(
		config,
		table,
		normalize=normalize,
		strict_headers=strict_headers,
		logger=logger,
		verbose=verbose,
	)
