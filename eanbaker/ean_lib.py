"""
EAN-8 / EAN-13 validation and barcode raster images.
"""

# Standard Library
import pathlib

# PIP3 modules
import barcode
import barcode.errors
import PIL.Image
import PIL.ImageDraw

# local repo modules
import eanbaker as eb
import eanbaker.config
import eanbaker.errors


EncodingError = eb.errors.EncodingError

BARCODE_PIXELS = eb.config.BARCODE_PIXELS
SYMBOLOGY_BY_LENGTH = {
	8: "ean8",
	13: "ean13",
}


#============================================
def ean_checksum(payload: str) -> int:
	"""
	Compute the EAN check digit for the digits before it.

	Args:
		payload: 7 or 12 digits.

	Returns:
		Check digit 0-9.
	"""
	total = 0
	for position, char in enumerate(reversed(payload)):
		weight = 3 if position % 2 == 0 else 1
		total += int(char) * weight
	return (10 - total % 10) % 10


#============================================
def validate_ean(ean: str) -> str:
	"""
	Check digits, length and check digit of an EAN code.

	Args:
		ean: Candidate EAN-8 or EAN-13 string.

	Returns:
		Symbology name, "ean8" or "ean13".

	Raises:
		EncodingError: For any invalid code.
	"""
	if not ean or not ean.isascii() or not ean.isdigit():
		raise EncodingError(f"EAN '{ean}' must contain only digits")
	symbology = SYMBOLOGY_BY_LENGTH.get(len(ean))
	if symbology is None:
		raise EncodingError(f"EAN '{ean}' must have 8 or 13 digits, got {len(ean)}")
	expected = ean_checksum(ean[:-1])
	if int(ean[-1]) != expected:
		raise EncodingError(f"EAN '{ean}' has wrong check digit, expected {expected}")
	return symbology


#============================================
def build_modules(ean: str) -> str:
	"""
	Encode an EAN into its bar pattern.

	Args:
		ean: EAN-8 or EAN-13 string with check digit.

	Returns:
		Module string, one character per module, "0" for a space.
	"""
	symbology = validate_ean(ean)
	barcode_class = barcode.get_barcode_class(symbology)
	try:
		# the library appends the check digit itself
		code = barcode_class(ean[:-1])
		modules = "".join(code.build())
	except barcode.errors.BarcodeError as error:
		raise EncodingError(f"Cannot encode EAN '{ean}': {error}") from error
	if code.get_fullcode() != ean:
		raise EncodingError(f"Cannot encode EAN '{ean}': got '{code.get_fullcode()}'")
	return modules


#============================================
def encode_ean(ean: str, size: int = BARCODE_PIXELS) -> PIL.Image.Image:
	"""
	Render an EAN as a square grayscale raster.

	Every module gets the same whole number of pixels and the pattern is
	centred horizontally, bars run the full image height.

	Args:
		ean: EAN-8 or EAN-13 string with check digit.
		size: Width and height in pixels.

	Returns:
		PIL image of size x size pixels.
	"""
	modules = build_modules(ean)
	module_px = size // len(modules)
	if module_px < 1:
		raise EncodingError(f"Cannot fit EAN '{ean}' into {size} pixels")
	offset = (size - module_px * len(modules)) // 2

	image = PIL.Image.new("L", (size, size), 255)
	draw = PIL.ImageDraw.Draw(image)
	for index, module in enumerate(modules):
		if module == "0":
			continue
		x0 = offset + index * module_px
		draw.rectangle([x0, 0, x0 + module_px - 1, size - 1], fill=0)
	return image


#============================================
def write_png(image: PIL.Image.Image, path: pathlib.Path) -> None:
	"""
	Save a raster as PNG, overwriting an existing file.

	Args:
		image: PIL image.
		path: Output path; its directory must exist.
	"""
	image.save(str(path), format="PNG")


#============================================
def write_barcode_png(ean: str, path: pathlib.Path) -> None:
	"""
	Encode an EAN and save it as a PNG file.

	Nothing is written when the EAN is invalid.

	Args:
		ean: EAN-8 or EAN-13 string.
		path: Output PNG path.
	"""
	image = encode_ean(ean)
	write_png(image, path)
