"""
Grid layout, pagination and cut-mark planning.

Coordinates here are page coordinates with the origin at the top-left corner
and y growing downwards. The PDF sink flips them when drawing.
"""

# Standard Library
import dataclasses
import math
import typing

# local repo modules
import precedence_cards as pc
import precedence_cards.config


CardGeometry = pc.config.CardGeometry
PageGeometry = pc.config.PageGeometry
ConfigurationError = pc.config.ConfigurationError

CUT_MARK_OVERSHOOT = pc.config.CUT_MARK_OVERSHOOT

T = typing.TypeVar("T")


@dataclasses.dataclass(frozen=True)
class GridPlan:
	columns: int
	rows: int

	@property
	def slots_per_page(self) -> int:
		return self.columns * self.rows


@dataclasses.dataclass(frozen=True)
class SlotOrigin:
	x: float
	y: float


@dataclasses.dataclass(frozen=True)
class CutSegment:
	x0: float
	y0: float
	x1: float
	y1: float


@dataclasses.dataclass(frozen=True)
class CutMarkSet:
	vertical_segments: tuple[CutSegment, ...]
	horizontal_segments: tuple[CutSegment, ...]


#============================================
def count_fitting(span: float, size: float, gap: float, margin: float) -> int:
	"""
	Count how many items of a size, separated by a gap, fit in a span.

	Args:
		span: Full page dimension.
		size: Item dimension.
		gap: Gap between adjacent items.
		margin: Margin on each side of the span.

	Returns:
		Number of items that fit.
	"""
	# one fewer gap than items
	return math.floor((span - 2.0 * margin + gap) / (size + gap))


#============================================
def compute_grid(page: PageGeometry, card: CardGeometry) -> GridPlan:
	"""
	Compute the card grid for one page.

	Args:
		page: Page geometry.
		card: Card geometry.

	Returns:
		GridPlan with at least one column and one row.
	"""
	if card.width <= 0 or card.height <= 0:
		raise ConfigurationError(
			f"Card size must be positive, got {card.width} x {card.height}"
		)
	columns = count_fitting(page.page_width, card.width, card.gap_x, card.margin)
	rows = count_fitting(page.page_height, card.height, card.gap_y, card.margin)
	if columns < 1 or rows < 1:
		raise ConfigurationError(
			f"Card {card.width} x {card.height} does not fit on page "
			f"{page.page_width} x {page.page_height} with margin {card.margin} "
			f"(columns={columns}, rows={rows})"
		)
	return GridPlan(columns=columns, rows=rows)


#============================================
def compute_slot_origin(index: int, grid: GridPlan, card: CardGeometry) -> SlotOrigin:
	"""
	Compute the top-left corner of a slot on the page.

	Args:
		index: Zero-based slot index within the page.
		grid: Grid plan.
		card: Card geometry.

	Returns:
		SlotOrigin.
	"""
	if index < 0 or index >= grid.slots_per_page:
		raise ValueError(f"Slot index {index} outside 0..{grid.slots_per_page - 1}")
	col = index % grid.columns
	row = index // grid.columns
	x = card.margin + col * (card.width + card.gap_x)
	y = card.margin + row * (card.height + card.gap_y)
	return SlotOrigin(x=x, y=y)


#============================================
def paginate(records: typing.Sequence[T], slots_per_page: int) -> list[list[T]]:
	"""
	Split records into page-sized batches, preserving order.

	Args:
		records: Records in input order.
		slots_per_page: Cards per page.

	Returns:
		List of batches; empty when there are no records.
	"""
	if slots_per_page < 1:
		raise ValueError(f"slots_per_page must be at least 1, got {slots_per_page}")
	pages: list[list[T]] = []
	for start in range(0, len(records), slots_per_page):
		pages.append(list(records[start:start + slots_per_page]))
	return pages


#============================================
def plan_cut_marks(
	grid: GridPlan,
	card: CardGeometry,
	page: PageGeometry,
	overshoot: float = CUT_MARK_OVERSHOOT,
) -> CutMarkSet:
	"""
	Plan dashed separators between adjacent columns and rows.

	Separators sit in the middle of each internal gap and run the full
	printable span plus a small overshoot past the outer cards. Outer page
	edges get no separator.

	Args:
		grid: Grid plan.
		card: Card geometry.
		page: Page geometry.
		overshoot: Extension past the margin at both ends.

	Returns:
		CutMarkSet for one page.
	"""
	vertical: list[CutSegment] = []
	for boundary in range(1, grid.columns):
		x = card.margin + boundary * (card.width + card.gap_x) - card.gap_x / 2.0
		vertical.append(
			CutSegment(
				x0=x,
				y0=card.margin - overshoot,
				x1=x,
				y1=page.page_height - card.margin + overshoot,
			)
		)
	horizontal: list[CutSegment] = []
	for boundary in range(1, grid.rows):
		y = card.margin + boundary * (card.height + card.gap_y) - card.gap_y / 2.0
		horizontal.append(
			CutSegment(
				x0=card.margin - overshoot,
				y0=y,
				x1=page.page_width - card.margin + overshoot,
				y1=y,
			)
		)
	return CutMarkSet(vertical_segments=tuple(vertical), horizontal_segments=tuple(horizontal))
