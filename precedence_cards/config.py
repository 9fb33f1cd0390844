"""
Shared configuration and constants.
"""

import dataclasses


POINTS_PER_INCH = 72.0
PX_TO_POINTS = 0.75

DEFAULT_PAGE_WIDTH = 612.0
DEFAULT_PAGE_HEIGHT = 792.0

DEFAULT_CARD_WIDTH = 280.0
DEFAULT_CARD_HEIGHT = 95.0
DEFAULT_GAP_X = 20.0
DEFAULT_GAP_Y = 15.0
DEFAULT_MARGIN = 15.0
DEFAULT_LOGO_WIDTH = 80.0
DEFAULT_TEXT_PADDING_LEFT = 8.0
DEFAULT_TEXT_PADDING_RIGHT = 10.0
DEFAULT_INTER_FIELD_SPACING = 4.0

DEFAULT_FONT_REGULAR = "Helvetica"
DEFAULT_FONT_BOLD = "Helvetica-Bold"
DEFAULT_NAME_SIZE = 14.0
DEFAULT_ROLE_SIZE = 10.0
DEFAULT_MIN_SIZE = 6.0
MAX_LINES = 2
LEADING_FACTOR = 1.2
SIZE_STEP = 1.0

CARD_BORDER_COLOR = "#0737AA"
CARD_BORDER_WIDTH = 2.0
CUT_MARK_COLOR = "#999999"
CUT_MARK_WIDTH = 0.5
CUT_MARK_DASH = (3.0, 3.0)
CUT_MARK_OVERSHOOT = 5.0
PROGRESS_BAR_WIDTH = 20
PROGRESS_UPDATE_EVERY = 10


class ConfigurationError(ValueError):
	"""
	Raised when the layout settings cannot produce a single valid card.
	"""


@dataclasses.dataclass(frozen=True)
class CardGeometry:
	width: float
	height: float
	gap_x: float
	gap_y: float
	margin: float
	logo_width: float
	text_padding_left: float
	text_padding_right: float
	inter_field_spacing: float


@dataclasses.dataclass(frozen=True)
class PageGeometry:
	page_width: float
	page_height: float


@dataclasses.dataclass(frozen=True)
class FontSettings:
	regular_font: str
	bold_font: str
	name_initial_size: float
	name_min_size: float
	role_initial_size: float
	role_min_size: float
	max_lines: int = MAX_LINES
	leading_factor: float = LEADING_FACTOR
	size_step: float = SIZE_STEP


@dataclasses.dataclass(frozen=True)
class RunConfig:
	card: CardGeometry
	page: PageGeometry
	fonts: FontSettings
	calibration: bool
	draw_cut_marks: bool
	max_pages: int | None
	max_records: int | None


@dataclasses.dataclass
class RenderResult:
	total_records: int
	printed_records: int
	leftover_records: int
	pages: int
	slots_per_page: int
	columns: int
	rows: int
	overflow_cards: int
	logo_loaded: bool


#============================================
def inches_to_points(value: float) -> float:
	"""
	Convert inches to points.

	Args:
		value: Inches value.

	Returns:
		Points value.
	"""
	return value * POINTS_PER_INCH


#============================================
def px_to_points(value: float) -> float:
	"""
	Convert CSS pixels (96 per inch) to points.

	Args:
		value: Pixel value.

	Returns:
		Points value.
	"""
	return value * PX_TO_POINTS


def _standard_preset() -> tuple[CardGeometry, FontSettings]:
	card = CardGeometry(
		width=DEFAULT_CARD_WIDTH,
		height=DEFAULT_CARD_HEIGHT,
		gap_x=DEFAULT_GAP_X,
		gap_y=DEFAULT_GAP_Y,
		margin=DEFAULT_MARGIN,
		logo_width=DEFAULT_LOGO_WIDTH,
		text_padding_left=DEFAULT_TEXT_PADDING_LEFT,
		text_padding_right=DEFAULT_TEXT_PADDING_RIGHT,
		inter_field_spacing=DEFAULT_INTER_FIELD_SPACING,
	)
	fonts = FontSettings(
		regular_font=DEFAULT_FONT_REGULAR,
		bold_font=DEFAULT_FONT_BOLD,
		name_initial_size=DEFAULT_NAME_SIZE,
		name_min_size=DEFAULT_MIN_SIZE,
		role_initial_size=DEFAULT_ROLE_SIZE,
		role_min_size=DEFAULT_MIN_SIZE,
	)
	return (card, fonts)


def _large_preset() -> tuple[CardGeometry, FontSettings]:
	# 370x120 px cards with 30 px gaps and a 110 px logo
	card = CardGeometry(
		width=px_to_points(370.0),
		height=px_to_points(120.0),
		gap_x=px_to_points(30.0),
		gap_y=px_to_points(30.0),
		margin=px_to_points(20.0),
		logo_width=px_to_points(100.0),
		text_padding_left=px_to_points(8.0),
		text_padding_right=px_to_points(12.0),
		inter_field_spacing=px_to_points(4.0),
	)
	fonts = FontSettings(
		regular_font=DEFAULT_FONT_REGULAR,
		bold_font=DEFAULT_FONT_BOLD,
		name_initial_size=px_to_points(18.0),
		name_min_size=px_to_points(6.0),
		role_initial_size=px_to_points(14.0),
		role_min_size=px_to_points(6.0),
	)
	return (card, fonts)


PRESETS = {
	"standard": _standard_preset,
	"large": _large_preset,
}


#============================================
def get_preset(name: str) -> tuple[CardGeometry, FontSettings]:
	"""
	Look up a named card preset.

	Args:
		name: Preset name.

	Returns:
		Tuple of (CardGeometry, FontSettings).
	"""
	builder = PRESETS.get(name.strip().lower())
	if builder is None:
		known = ", ".join(sorted(PRESETS))
		raise ConfigurationError(f"Unknown preset '{name}' (known: {known})")
	return builder()


#============================================
def validate_font_settings(fonts: FontSettings) -> None:
	"""
	Check that both text fields have a usable size range.

	Args:
		fonts: Font settings.
	"""
	fields = (
		("name", fonts.name_initial_size, fonts.name_min_size),
		("role", fonts.role_initial_size, fonts.role_min_size),
	)
	for label, initial_size, min_size in fields:
		if min_size <= 0:
			raise ConfigurationError(f"{label} minimum font size must be positive, got {min_size}")
		if min_size > initial_size:
			raise ConfigurationError(
				f"{label} minimum font size {min_size} exceeds initial size {initial_size}"
			)
	if fonts.max_lines < 1:
		raise ConfigurationError(f"max_lines must be at least 1, got {fonts.max_lines}")
	if fonts.size_step <= 0:
		raise ConfigurationError(f"size_step must be positive, got {fonts.size_step}")
