"""
CLI entry points for CSV/XLSX to EAN label PDF generation.
"""

# Standard Library
import argparse
import pathlib
import sys
import time

# local repo modules
import eanbaker as eb
import eanbaker.config
import eanbaker.errors
import eanbaker.generator
import eanbaker.log


GeneratorConfig = eb.config.GeneratorConfig

DESCRIPTION = (
	"Read a CSV or XLSX file, take the text and EAN columns by their headers "
	"and write a PDF with one 30x15 mm barcode label per page."
)


#============================================
def build_config(args: argparse.Namespace) -> GeneratorConfig:
	"""
	Build the generator config from CLI args.

	Values from --config are the base; flags given on the command line
	override them; built-in defaults fill the rest.

	Args:
		args: Parsed argparse namespace.

	Returns:
		GeneratorConfig with pdf_path filled in.
	"""
	if args.config_path:
		config = eb.config.load_config(pathlib.Path(args.config_path))
	else:
		config = GeneratorConfig(
			csv_path=eb.config.DEFAULT_CSV_PATH,
			csv_comma=eb.config.DEFAULT_CSV_SEPARATOR,
			text_header=eb.config.DEFAULT_TEXT_HEADER,
			ean_header=eb.config.DEFAULT_EAN_HEADER,
			times_header=eb.config.DEFAULT_TIMES_HEADER,
			times_each_ean=eb.config.DEFAULT_TIMES_EACH_EAN,
		)

	if args.csv_path is not None:
		config.csv_path = args.csv_path
	if args.pdf_path is not None:
		config.pdf_path = args.pdf_path
	if args.text_header is not None:
		config.text_header = args.text_header
	if args.ean_header is not None:
		config.ean_header = args.ean_header
	if args.times_header is not None:
		config.times_header = args.times_header
	if args.times_each_ean is not None:
		config.times_each_ean = args.times_each_ean
	if args.csv_separator is not None:
		config.csv_comma = eb.config.comma_from_string(args.csv_separator)

	config.update_pdf_path()
	return config


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Argument list, sys.argv when None.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description=DESCRIPTION)

	io_group = parser.add_argument_group("Input and output")
	io_group.add_argument("-i", "--csv", dest="csv_path", default=None, help="Path to the input data (CSV or XLSX).")
	io_group.add_argument(
		"-o", "--pdf", dest="pdf_path", default=None,
		help="Output PDF path. Defaults to the input file name with a .pdf suffix.",
	)
	io_group.add_argument(
		"-s", "--csv-separator", dest="csv_separator", default=None,
		help="CSV column separator, a single character.",
	)

	column_group = parser.add_argument_group("Columns")
	column_group.add_argument(
		"-t", "--text-header", dest="text_header", default=None,
		help="Case insensitive header of the column printed as label text.",
	)
	column_group.add_argument(
		"-e", "--ean-header", dest="ean_header", default=None,
		help="Case insensitive header of the column with EAN codes.",
	)
	column_group.add_argument(
		"-r", "--times-header", dest="times_header", default=None,
		help="Header of the column with extra copies per row. Empty for one extra copy each.",
	)
	column_group.add_argument(
		"-x", "--times-each-ean", dest="times_each_ean", type=int, default=None,
		help="Copies of every EAN added on top of the per-row count.",
	)
	column_group.add_argument(
		"--strict-headers", dest="strict_headers", action="store_true",
		help="Fail when a configured header appears more than once.",
	)

	behavior_group = parser.add_argument_group("Behavior")
	behavior_group.add_argument("-n", "--normalize-text", dest="normalize_text", action="store_true", help="Fold label text to ASCII.")
	behavior_group.add_argument("-N", "--no-normalize-text", dest="normalize_text", action="store_false", help="Keep label text as is.")
	behavior_group.add_argument("-c", "--config", dest="config_path", default=None, help="Load settings from a JSON file.")
	behavior_group.add_argument("--save-config", dest="save_config_path", default=None, help="Write the used settings to a JSON file.")
	behavior_group.add_argument("--log-file", dest="log_file", default=None, help="Write the run log to a file.")
	behavior_group.add_argument("-q", "--quiet", dest="verbose", action="store_false", help="Only print the result line and errors.")
	behavior_group.add_argument("-v", "--version", dest="print_version", action="store_true", help="Print version information and exit.")

	parser.set_defaults(
		normalize_text=True,
		strict_headers=False,
		verbose=True,
		print_version=False,
	)

	args = parser.parse_args(argv)
	return args


#============================================
def run_pipeline(args: argparse.Namespace, logger: eb.log.MultiLogger) -> eb.generator.GenerationResult:
	"""
	Run the pipeline from input file to label PDF.

	Args:
		args: Parsed argparse namespace.
		logger: Application logger.

	Returns:
		GenerationResult.
	"""
	config = build_config(args)
	config.validate()
	if args.verbose:
		print("EAN label pipeline")
		print(f"Input: {config.csv_path}")
		print(f"Output PDF: {config.pdf_path}")
		print(f"Text header: {config.text_header}")
		print(f"EAN header: {config.ean_header}")
		if config.times_header:
			print(f"Times header: {config.times_header}")
		print(f"Times each EAN: {config.times_each_ean}")

	start_time = time.perf_counter()
	input_path = pathlib.Path(config.csv_path)
	with open(input_path, "rb") as handle:
		result = eb.generator.generate(
			config,
			str(input_path),
			handle,
			normalize=args.normalize_text,
			strict_headers=args.strict_headers,
			logger=logger.logger,
			verbose=args.verbose,
		)
	total_time = time.perf_counter() - start_time

	if args.save_config_path:
		eb.config.save_config(config, pathlib.Path(args.save_config_path))
	if args.verbose:
		print(f"Records: {result.records}")
		print(f"Pages written: {result.pages}")
		print(f"Timing: total={total_time:.2f}s")
	print(result.message)
	return result


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	if args.print_version:
		print(f"Version: {eb.config.VERSION}")
		return

	logger = None
	try:
		logger = eb.log.logger_from_env()
		run_pipeline(args, logger)
	except (eb.errors.EanBakerError, OSError) as error:
		print(f"Error: {error}", file=sys.stderr)
		sys.exit(1)
	finally:
		if logger is not None and args.log_file:
			logger.save_to_file(args.log_file)


if __name__ == "__main__":
	main()
