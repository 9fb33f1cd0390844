"""
Card composition: turns one record into a draw plan.
"""

# Standard Library
import dataclasses
import pathlib

# PIP3 modules
import PIL.Image
import reportlab.lib.utils

# local repo modules
import precedence_cards as pc
import precedence_cards.config
import precedence_cards.ingest
import precedence_cards.layout
import precedence_cards.text_fit


Record = pc.ingest.Record
CardGeometry = pc.config.CardGeometry
FontSettings = pc.config.FontSettings
ConfigurationError = pc.config.ConfigurationError
SlotOrigin = pc.layout.SlotOrigin
FitResult = pc.text_fit.FitResult
TextMeasurer = pc.text_fit.TextMeasurer

WEIGHT_BOLD = pc.text_fit.WEIGHT_BOLD
WEIGHT_REGULAR = pc.text_fit.WEIGHT_REGULAR


@dataclasses.dataclass(frozen=True)
class LogoAsset:
	path: str
	pixel_width: int
	pixel_height: int
	reader: reportlab.lib.utils.ImageReader = dataclasses.field(compare=False, repr=False)

	@property
	def aspect_ratio(self) -> float:
		"""Height over width."""
		return self.pixel_height / self.pixel_width


@dataclasses.dataclass(frozen=True)
class AssetError:
	path: str
	reason: str


@dataclasses.dataclass(frozen=True)
class Rect:
	x: float
	y: float
	width: float
	height: float


@dataclasses.dataclass(frozen=True)
class TextRun:
	text: str
	lines: tuple[str, ...]
	font_name: str
	font_size: float
	leading: float
	x: float
	y: float
	width: float
	height: float


@dataclasses.dataclass(frozen=True)
class DrawPlan:
	border_rect: Rect
	logo_rect: Rect | None
	name_run: TextRun
	role_run: TextRun
	name_fit: FitResult
	role_fit: FitResult

	@property
	def overflow(self) -> bool:
		return self.name_fit.overflow or self.role_fit.overflow


#============================================
def load_logo(path: pathlib.Path | str) -> LogoAsset | AssetError:
	"""
	Load a logo image.

	Args:
		path: Image path.

	Returns:
		LogoAsset, or AssetError when the file is missing or unreadable.
	"""
	path_text = str(path)
	try:
		image = PIL.Image.open(path_text)
		image.load()
	except OSError as error:
		return AssetError(path=path_text, reason=str(error))
	width, height = image.size
	if width <= 0 or height <= 0:
		return AssetError(path=path_text, reason=f"empty image {width}x{height}")
	reader = reportlab.lib.utils.ImageReader(image)
	return LogoAsset(path=path_text, pixel_width=width, pixel_height=height, reader=reader)


#============================================
def compute_text_box(origin: SlotOrigin, card: CardGeometry, has_logo: bool) -> tuple[float, float]:
	"""
	Compute the text box left edge and width.

	Args:
		origin: Slot origin.
		card: Card geometry.
		has_logo: Whether a logo takes the left part of the card.

	Returns:
		Tuple of (x, width).
	"""
	padding = card.text_padding_left + card.text_padding_right
	if has_logo:
		x = origin.x + card.text_padding_left + card.logo_width + card.text_padding_right
		width = card.width - (card.logo_width + padding)
	else:
		x = origin.x + card.text_padding_left
		width = card.width - padding
	if width <= 0:
		raise ConfigurationError(f"Text box width must be positive, got {width}")
	return (x, width)


#============================================
def compute_logo_rect(origin: SlotOrigin, card: CardGeometry, logo: LogoAsset) -> Rect:
	"""
	Place the logo at the left inset, vertically centered.

	Args:
		origin: Slot origin.
		card: Card geometry.
		logo: Loaded logo.

	Returns:
		Logo rectangle in page coordinates.
	"""
	width = card.logo_width
	height = width * logo.aspect_ratio
	max_height = card.height - 2.0 * card.text_padding_left
	if max_height > 0 and height > max_height:
		width = width * max_height / height
		height = max_height
	x = origin.x + card.text_padding_left
	y = origin.y + (card.height - height) / 2.0
	return Rect(x=x, y=y, width=width, height=height)


def _build_run(
	text: str,
	fit: FitResult,
	font_name: str,
	leading_factor: float,
	x: float,
	y: float,
	width: float,
) -> TextRun:
	return TextRun(
		text=text,
		lines=fit.lines,
		font_name=font_name,
		font_size=fit.font_size,
		leading=fit.font_size * leading_factor,
		x=x,
		y=y,
		width=width,
		height=fit.rendered_height,
	)


#============================================
def compose_card(
	record: Record,
	origin: SlotOrigin,
	card: CardGeometry,
	fonts: FontSettings,
	oracle: TextMeasurer,
	logo: LogoAsset | AssetError | None = None,
) -> DrawPlan:
	"""
	Compose the draw plan for one card.

	The name and role are fitted independently, then the two blocks are
	stacked and centered vertically as one unit. An empty field takes no
	space and drops the spacing between fields.

	Args:
		record: Record to draw.
		origin: Slot origin.
		card: Card geometry.
		fonts: Font settings.
		oracle: Text measurer.
		logo: Loaded logo, an AssetError from a failed load, or None.

	Returns:
		DrawPlan.
	"""
	has_logo = isinstance(logo, LogoAsset)
	text_x, text_width = compute_text_box(origin, card, has_logo)

	name_fit = pc.text_fit.fit_text(
		record.name,
		WEIGHT_BOLD,
		text_width,
		fonts.name_initial_size,
		fonts.name_min_size,
		oracle,
		max_lines=fonts.max_lines,
		size_step=fonts.size_step,
	)
	role_fit = pc.text_fit.fit_text(
		record.role,
		WEIGHT_REGULAR,
		text_width,
		fonts.role_initial_size,
		fonts.role_min_size,
		oracle,
		max_lines=fonts.max_lines,
		size_step=fonts.size_step,
	)

	spacing = card.inter_field_spacing
	if name_fit.line_count == 0 or role_fit.line_count == 0:
		spacing = 0.0
	total_height = name_fit.rendered_height + spacing + role_fit.rendered_height
	text_y = origin.y + (card.height - total_height) / 2.0
	role_y = text_y + name_fit.rendered_height + spacing

	name_run = _build_run(
		record.name, name_fit, fonts.bold_font, fonts.leading_factor, text_x, text_y, text_width,
	)
	role_run = _build_run(
		record.role, role_fit, fonts.regular_font, fonts.leading_factor, text_x, role_y, text_width,
	)

	logo_rect = None
	if has_logo:
		logo_rect = compute_logo_rect(origin, card, logo)

	return DrawPlan(
		border_rect=Rect(x=origin.x, y=origin.y, width=card.width, height=card.height),
		logo_rect=logo_rect,
		name_run=name_run,
		role_run=role_run,
		name_fit=name_fit,
		role_fit=role_fit,
	)
