"""
Text measurement and font-size fitting.
"""

# Standard Library
import dataclasses
import typing

# PIP3 modules
import reportlab.lib.utils
import reportlab.pdfbase.pdfmetrics

# local repo modules
import precedence_cards as pc
import precedence_cards.config


FontSettings = pc.config.FontSettings
ConfigurationError = pc.config.ConfigurationError

MAX_LINES = pc.config.MAX_LINES
LEADING_FACTOR = pc.config.LEADING_FACTOR
SIZE_STEP = pc.config.SIZE_STEP

WEIGHT_BOLD = "bold"
WEIGHT_REGULAR = "regular"
WEIGHTS = (WEIGHT_BOLD, WEIGHT_REGULAR)


@dataclasses.dataclass(frozen=True)
class Measurement:
	line_count: int
	height: float
	lines: tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True)
class FitResult:
	font_size: float
	line_count: int
	rendered_height: float
	lines: tuple[str, ...] = ()
	overflow: bool = False


class TextMeasurer(typing.Protocol):
	def measure(self, text: str, weight: str, font_size: float, wrap_width: float) -> Measurement:
		...


#============================================
def break_long_line(line: str, font_name: str, font_size: float, wrap_width: float) -> list[str]:
	"""
	Break a single line at character boundaries so each piece fits.

	Args:
		line: Line wider than the wrap width.
		font_name: ReportLab font name.
		font_size: Font size in points.
		wrap_width: Maximum line width.

	Returns:
		List of line pieces. A single character wider than the wrap width
		stays on its own line.
	"""
	pieces: list[str] = []
	current = ""
	for char in line:
		candidate = current + char
		width = reportlab.pdfbase.pdfmetrics.stringWidth(candidate, font_name, font_size)
		if current and width > wrap_width:
			pieces.append(current.rstrip())
			current = char.lstrip()
			continue
		current = candidate
	if current:
		pieces.append(current)
	return pieces


#============================================
def wrap_text(text: str, font_name: str, font_size: float, wrap_width: float) -> list[str]:
	"""
	Wrap text into lines no wider than the wrap width.

	Words wrap greedily on whitespace; a word wider than the whole line is
	broken between characters.

	Args:
		text: Text to wrap.
		font_name: ReportLab font name.
		font_size: Font size in points.
		wrap_width: Maximum line width.

	Returns:
		Wrapped lines.
	"""
	if not text.strip():
		return []
	lines: list[str] = []
	for line in reportlab.lib.utils.simpleSplit(text, font_name, font_size, wrap_width):
		width = reportlab.pdfbase.pdfmetrics.stringWidth(line, font_name, font_size)
		if width > wrap_width:
			lines.extend(break_long_line(line, font_name, font_size, wrap_width))
		else:
			lines.append(line)
	return lines


class ReportlabMeasurer:
	"""
	Text measurement backed by ReportLab font metrics.
	"""

	def __init__(self, fonts: FontSettings) -> None:
		self.fonts = fonts

	def font_name(self, weight: str) -> str:
		if weight == WEIGHT_BOLD:
			return self.fonts.bold_font
		if weight == WEIGHT_REGULAR:
			return self.fonts.regular_font
		raise ValueError(f"Unknown font weight '{weight}', expected one of {WEIGHTS}")

	def measure(self, text: str, weight: str, font_size: float, wrap_width: float) -> Measurement:
		"""
		Measure how a string wraps at a size and width.

		Args:
			text: Text to measure.
			weight: "bold" or "regular".
			font_size: Font size in points.
			wrap_width: Maximum line width.

		Returns:
			Measurement with line count, block height and the wrapped lines.
		"""
		font_name = self.font_name(weight)
		lines = wrap_text(text, font_name, font_size, wrap_width)
		height = len(lines) * font_size * self.fonts.leading_factor
		return Measurement(line_count=len(lines), height=height, lines=tuple(lines))


#============================================
def fit_text(
	text: str,
	weight: str,
	wrap_width: float,
	initial_size: float,
	min_size: float,
	oracle: TextMeasurer,
	max_lines: int = MAX_LINES,
	size_step: float = SIZE_STEP,
) -> FitResult:
	"""
	Find the largest font size at which text wraps to at most max_lines.

	The search walks down from initial_size one step at a time. When no size
	down to min_size fits, the text is kept at min_size and flagged as
	overflowing.

	Args:
		text: Field text.
		weight: "bold" or "regular".
		wrap_width: Text box width.
		initial_size: Largest size to try.
		min_size: Smallest size allowed.
		oracle: Object providing measure().
		max_lines: Line limit.
		size_step: Size decrement per step.

	Returns:
		FitResult.
	"""
	if weight not in WEIGHTS:
		raise ValueError(f"Unknown font weight '{weight}', expected one of {WEIGHTS}")
	if min_size > initial_size:
		raise ConfigurationError(f"Minimum font size {min_size} exceeds initial size {initial_size}")
	if size_step <= 0:
		raise ConfigurationError(f"Font size step must be positive, got {size_step}")
	if not text.strip():
		return FitResult(font_size=initial_size, line_count=0, rendered_height=0.0)

	size = initial_size
	measurement = oracle.measure(text, weight, size, wrap_width)
	while measurement.line_count > max_lines and size > min_size:
		size = max(size - size_step, min_size)
		measurement = oracle.measure(text, weight, size, wrap_width)

	return FitResult(
		font_size=size,
		line_count=measurement.line_count,
		rendered_height=measurement.height,
		lines=measurement.lines,
		overflow=measurement.line_count > max_lines,
	)
