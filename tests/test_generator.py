import io
import logging
import pathlib

import pypdf
import pytest

import eanbaker.config
import eanbaker.errors
import eanbaker.generator


GeneratorConfig = eanbaker.config.GeneratorConfig


#============================================
def make_config(tmp_path: pathlib.Path, times_header: str = "Times", csv_comma: str = "") -> GeneratorConfig:
	return GeneratorConfig(
		csv_path=str(tmp_path / "data.csv"),
		pdf_path=str(tmp_path / "data.pdf"),
		csv_comma=csv_comma,
		text_header="Text",
		ean_header="EAN",
		times_header=times_header,
		times_each_ean=1,
	)


#============================================
def count_pages(path: str) -> int:
	return len(pypdf.PdfReader(path).pages)


#============================================
def test_widget_with_times(tmp_path: pathlib.Path, widget_table) -> None:
	"""
	Times 2 plus one global copy gives three pages.
	"""
	config = make_config(tmp_path)
	result = eanbaker.generator.generate_from_table(config, widget_table)
	assert result.records == 1
	assert result.pages == 3
	assert result.pdf_path == config.pdf_path
	assert result.message == f"PDF generated: {config.pdf_path}"
	assert count_pages(config.pdf_path) == 3


#============================================
def test_widget_without_times_header(tmp_path: pathlib.Path, widget_table) -> None:
	"""
	The Times column is ignored when no times header is set.
	"""
	config = make_config(tmp_path, times_header="")
	result = eanbaker.generator.generate_from_table(config, widget_table)
	assert result.pages == 2
	assert count_pages(config.pdf_path) == 2


#============================================
def test_generate_from_csv_bytes(tmp_path: pathlib.Path) -> None:
	config = make_config(tmp_path, csv_comma=";")
	content = b"Text;EAN;Times\nWidget;5901234123457;0\nGadget;;5\nSprocket;96385074;1\n"
	result = eanbaker.generator.generate(config, config.csv_path, content)
	assert result.records == 2
	assert result.pages == 3


#============================================
def test_generate_from_file_object(tmp_path: pathlib.Path) -> None:
	config = make_config(tmp_path)
	content = io.BytesIO(b"Text,EAN,Times\nWidget,5901234123457,1\n")
	result = eanbaker.generator.generate(config, config.csv_path, content)
	assert result.pages == 2


#============================================
def test_generate_spreadsheet_probe(tmp_path: pathlib.Path, xlsx_bytes) -> None:
	"""
	A workbook behind a .csv name is still read.
	"""
	config = make_config(tmp_path)
	content = xlsx_bytes([["Text", "EAN", "Times"], ["Widget", 5901234123457, 2]])
	result = eanbaker.generator.generate(config, config.csv_path, content)
	assert result.pages == 3


#============================================
def test_generate_validates_paths(tmp_path: pathlib.Path) -> None:
	config = make_config(tmp_path)
	config.csv_path = str(tmp_path / "data.txt")
	with pytest.raises(eanbaker.errors.ConfigError):
		eanbaker.generator.generate(config, config.csv_path, b"Text,EAN\nA,96385074\n")
	assert not pathlib.Path(config.pdf_path).exists()


#============================================
def test_generate_gui_mode_skips_validation(tmp_path: pathlib.Path, xlsx_bytes) -> None:
	config = make_config(tmp_path, times_header="")
	config.csv_path = str(tmp_path / "data.xlsx")
	content = xlsx_bytes([["Text", "EAN"], ["Widget", "96385074"]])
	result = eanbaker.generator.generate(config, "data.xlsx", content, gui_mode=True)
	assert result.pages == 2


#============================================
def test_no_output_on_invalid_ean(tmp_path: pathlib.Path) -> None:
	"""
	An invalid EAN anywhere means no PDF is written.
	"""
	config = make_config(tmp_path, times_header="")
	table = (
		("Text", "EAN"),
		("Good", "5901234123457"),
		("Bad", "5901234123458"),
	)
	with pytest.raises(eanbaker.errors.EncodingError):
		eanbaker.generator.generate_from_table(config, table)
	assert not pathlib.Path(config.pdf_path).exists()


#============================================
def test_no_output_on_bad_times(tmp_path: pathlib.Path) -> None:
	config = make_config(tmp_path)
	table = (
		("Text", "EAN", "Times"),
		("Widget", "5901234123457", "many"),
	)
	with pytest.raises(eanbaker.errors.NumericFormatError):
		eanbaker.generator.generate_from_table(config, table)
	assert not pathlib.Path(config.pdf_path).exists()


#============================================
def test_zero_global_times(tmp_path: pathlib.Path, widget_table) -> None:
	config = make_config(tmp_path)
	config.times_each_ean = 0
	with pytest.raises(eanbaker.errors.ConfigError):
		eanbaker.generator.generate_from_table(config, widget_table)
	assert not pathlib.Path(config.pdf_path).exists()


#============================================
def test_failures_are_logged(tmp_path: pathlib.Path, caplog) -> None:
	config = make_config(tmp_path)
	logger = logging.getLogger("labels_test")
	table = (("Name", "EAN"),)
	with caplog.at_level(logging.ERROR, logger="labels_test"):
		with pytest.raises(eanbaker.errors.ValidationError):
			eanbaker.generator.generate_from_table(config, table, logger=logger)
	assert "Failed to get records from table" in caplog.text
