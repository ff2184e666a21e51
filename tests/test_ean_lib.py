import pathlib

import PIL.Image
import pytest

import eanbaker.ean_lib
import eanbaker.errors


#============================================
def test_checksum_known_codes() -> None:
	assert eanbaker.ean_lib.ean_checksum("590123412345") == 7
	assert eanbaker.ean_lib.ean_checksum("400638133393") == 1
	assert eanbaker.ean_lib.ean_checksum("9638507") == 4


#============================================
@pytest.mark.parametrize(
	"ean, symbology",
	[
		("5901234123457", "ean13"),
		("4006381333931", "ean13"),
		("96385074", "ean8"),
	],
)
def test_validate_ean(ean: str, symbology: str) -> None:
	assert eanbaker.ean_lib.validate_ean(ean) == symbology


#============================================
@pytest.mark.parametrize(
	"ean",
	[
		"",
		"invalid-ean",
		"590123412345",
		"59012341234577",
		"5901234123458",
		"96385075",
		"59012341234a7",
		" 5901234123457",
		"٥٩٠١٢٣٤١",
	],
)
def test_invalid_ean_writes_nothing(ean: str, tmp_path: pathlib.Path) -> None:
	"""
	Invalid codes raise and leave no raster file behind.
	"""
	path = tmp_path / "barcode.png"
	with pytest.raises(eanbaker.errors.EncodingError):
		eanbaker.ean_lib.write_barcode_png(ean, path)
	assert not path.exists()


#============================================
@pytest.mark.parametrize("ean", ["5901234123457", "96385074"])
def test_encode_fixed_square(ean: str) -> None:
	"""
	Rasters are 200x200 with both bars and spaces.
	"""
	image = eanbaker.ean_lib.encode_ean(ean)
	assert image.size == (200, 200)
	colors = set(image.getdata())
	assert colors == {0, 255}


#============================================
def test_modules_have_guard_bars() -> None:
	modules = eanbaker.ean_lib.build_modules("5901234123457")
	assert len(modules) == 95
	assert modules.startswith("101")
	assert modules.endswith("101")
	modules = eanbaker.ean_lib.build_modules("96385074")
	assert len(modules) == 67


#============================================
def test_encode_is_deterministic() -> None:
	first = eanbaker.ean_lib.encode_ean("4006381333931")
	second = eanbaker.ean_lib.encode_ean("4006381333931")
	assert first.tobytes() == second.tobytes()


#============================================
def test_write_png(tmp_path: pathlib.Path) -> None:
	"""
	PNG files are created and overwritten in place.
	"""
	path = tmp_path / "5901234123457.png"
	path.write_bytes(b"old")
	eanbaker.ean_lib.write_barcode_png("5901234123457", path)
	with PIL.Image.open(path) as image:
		assert image.format == "PNG"
		assert image.size == (200, 200)


#============================================
def test_write_png_missing_directory(tmp_path: pathlib.Path) -> None:
	image = eanbaker.ean_lib.encode_ean("96385074")
	with pytest.raises(OSError):
		eanbaker.ean_lib.write_png(image, tmp_path / "missing" / "barcode.png")
