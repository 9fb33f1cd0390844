"""
PDF rendering of composed cards and cut marks.
"""

# Standard Library
import io
import json
import pathlib

# PIP3 modules
import pypdf
import reportlab.lib.colors
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfbase.ttfonts
import reportlab.pdfgen.canvas

# local repo modules
import precedence_cards as pc
import precedence_cards.compose
import precedence_cards.config
import precedence_cards.ingest
import precedence_cards.layout
import precedence_cards.text_fit


Record = pc.ingest.Record
RunConfig = pc.config.RunConfig
RenderResult = pc.config.RenderResult
CardGeometry = pc.config.CardGeometry
PageGeometry = pc.config.PageGeometry
GridPlan = pc.layout.GridPlan
CutMarkSet = pc.layout.CutMarkSet
DrawPlan = pc.compose.DrawPlan
TextRun = pc.compose.TextRun
LogoAsset = pc.compose.LogoAsset
AssetError = pc.compose.AssetError
ConfigurationError = pc.config.ConfigurationError

POINTS_PER_INCH = pc.config.POINTS_PER_INCH
CARD_BORDER_COLOR = pc.config.CARD_BORDER_COLOR
CARD_BORDER_WIDTH = pc.config.CARD_BORDER_WIDTH
CUT_MARK_COLOR = pc.config.CUT_MARK_COLOR
CUT_MARK_WIDTH = pc.config.CUT_MARK_WIDTH
CUT_MARK_DASH = pc.config.CUT_MARK_DASH
PROGRESS_BAR_WIDTH = pc.config.PROGRESS_BAR_WIDTH
PROGRESS_UPDATE_EVERY = pc.config.PROGRESS_UPDATE_EVERY


#============================================
def print_progress(prefix: str, current: int, total: int) -> None:
	"""
	Print a simple progress bar.

	Args:
		prefix: Label text.
		current: Current count.
		total: Total count.
	"""
	if total <= 0:
		return
	percent = int(round((current / total) * 100.0))
	filled = int(round(PROGRESS_BAR_WIDTH * percent / 100.0))
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] {current}/{total} ({percent}%)", end="\r")


#============================================
def register_ttf_font(font_name: str, font_path: pathlib.Path) -> str:
	"""
	Register a TrueType font with ReportLab.

	Args:
		font_name: Name to register the font under.
		font_path: Path to the .ttf file.

	Returns:
		The registered font name.
	"""
	try:
		font = reportlab.pdfbase.ttfonts.TTFont(font_name, str(font_path))
	except (reportlab.pdfbase.ttfonts.TTFError, OSError) as error:
		raise ConfigurationError(f"Cannot load font {font_path}: {error}") from error
	reportlab.pdfbase.pdfmetrics.registerFont(font)
	return font_name


#============================================
def flip_y(page_height: float, top: float, height: float = 0.0) -> float:
	"""
	Convert a top-down y coordinate to PDF bottom-up space.

	Args:
		page_height: Page height.
		top: Top edge measured from the top of the page.
		height: Box height, so the result is the bottom edge.

	Returns:
		PDF y coordinate.
	"""
	return page_height - top - height


#============================================
def draw_text_run(pdf: reportlab.pdfgen.canvas.Canvas, run: TextRun, page_height: float) -> None:
	"""
	Draw each wrapped line centered in the text box.

	Args:
		pdf: ReportLab canvas.
		run: Text run to draw.
		page_height: Page height.
	"""
	if not run.lines:
		return
	ascent = reportlab.pdfbase.pdfmetrics.getAscent(run.font_name) * run.font_size / 1000.0
	center_x = run.x + run.width / 2.0
	pdf.setFont(run.font_name, run.font_size)
	pdf.setFillColorRGB(0.0, 0.0, 0.0)
	for index, line in enumerate(run.lines):
		line_top = run.y + index * run.leading + (run.leading - run.font_size) / 2.0
		baseline = flip_y(page_height, line_top + ascent)
		pdf.drawCentredString(center_x, baseline, line)


#============================================
def draw_card(
	pdf: reportlab.pdfgen.canvas.Canvas,
	plan: DrawPlan,
	page_height: float,
	logo: LogoAsset | AssetError | None,
) -> None:
	"""
	Draw one card: border, logo and both text runs.

	Args:
		pdf: ReportLab canvas.
		plan: Draw plan for the card.
		page_height: Page height.
		logo: Logo used when the plan has a logo rectangle.
	"""
	border = plan.border_rect
	color = reportlab.lib.colors.HexColor(CARD_BORDER_COLOR)
	pdf.saveState()
	pdf.setLineWidth(CARD_BORDER_WIDTH)
	pdf.setStrokeColor(color)
	pdf.rect(
		border.x,
		flip_y(page_height, border.y, border.height),
		border.width,
		border.height,
		stroke=1,
		fill=0,
	)
	pdf.restoreState()

	if plan.logo_rect is not None and isinstance(logo, LogoAsset):
		rect = plan.logo_rect
		pdf.drawImage(
			logo.reader,
			rect.x,
			flip_y(page_height, rect.y, rect.height),
			width=rect.width,
			height=rect.height,
			mask="auto",
			preserveAspectRatio=False,
			anchor="sw",
		)

	draw_text_run(pdf, plan.name_run, page_height)
	draw_text_run(pdf, plan.role_run, page_height)


#============================================
def draw_cut_marks(pdf: reportlab.pdfgen.canvas.Canvas, cut_marks: CutMarkSet, page_height: float) -> None:
	"""
	Draw dashed cut marks on the current page.

	Args:
		pdf: ReportLab canvas.
		cut_marks: Planned separators.
		page_height: Page height.
	"""
	color = reportlab.lib.colors.HexColor(CUT_MARK_COLOR)
	pdf.saveState()
	pdf.setLineWidth(CUT_MARK_WIDTH)
	pdf.setStrokeColor(color)
	pdf.setDash(CUT_MARK_DASH[0], CUT_MARK_DASH[1])
	for segment in cut_marks.vertical_segments + cut_marks.horizontal_segments:
		pdf.line(
			segment.x0,
			flip_y(page_height, segment.y0),
			segment.x1,
			flip_y(page_height, segment.y1),
		)
	pdf.restoreState()


#============================================
def build_cut_mark_overlay(cut_marks: CutMarkSet, page: PageGeometry) -> pypdf.PageObject:
	"""
	Build a PDF overlay page holding the cut marks.

	Args:
		cut_marks: Planned separators.
		page: Page geometry.

	Returns:
		PDF page object.
	"""
	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=(page.page_width, page.page_height))
	draw_cut_marks(pdf, cut_marks, page.page_height)
	pdf.save()
	buffer.seek(0)
	reader = pypdf.PdfReader(buffer)
	return reader.pages[0]


#============================================
def draw_calibration_page(
	pdf: reportlab.pdfgen.canvas.Canvas,
	grid: GridPlan,
	card: CardGeometry,
	page: PageGeometry,
	font_name: str,
) -> None:
	"""
	Draw slot outlines, slot center crosses and a 1 inch ruler mark.

	Args:
		pdf: ReportLab canvas.
		grid: Grid plan.
		card: Card geometry.
		page: Page geometry.
		font_name: Font for the ruler caption.
	"""
	pdf.setLineWidth(0.3)
	pdf.setStrokeColorRGB(0.6, 0.6, 0.6)
	for index in range(grid.slots_per_page):
		origin = pc.layout.compute_slot_origin(index, grid, card)
		cell_y = flip_y(page.page_height, origin.y, card.height)
		pdf.rect(origin.x, cell_y, card.width, card.height, stroke=1, fill=0)
		center_x = origin.x + card.width / 2.0
		center_y = cell_y + card.height / 2.0
		size = 6.0
		pdf.line(center_x - size, center_y, center_x + size, center_y)
		pdf.line(center_x, center_y - size, center_x, center_y + size)

	ruler_x = card.margin
	ruler_y = page.page_height - card.margin + 4.0
	pdf.setStrokeColorRGB(0.0, 0.0, 0.0)
	pdf.setLineWidth(0.6)
	pdf.line(ruler_x, ruler_y, ruler_x + POINTS_PER_INCH, ruler_y)
	pdf.setFont(font_name, 6)
	pdf.drawString(ruler_x + POINTS_PER_INCH + 4.0, ruler_y - 2.0, "1 in")


#============================================
def select_records(records: list[Record], slots_per_page: int, config: RunConfig) -> list[Record]:
	"""
	Apply the record and page limits.

	Args:
		records: All records.
		slots_per_page: Cards per page.
		config: Run configuration.

	Returns:
		Records that will be printed.
	"""
	selected = list(records)
	if config.max_records is not None:
		selected = selected[:max(0, config.max_records)]
	if config.max_pages is not None:
		selected = selected[:max(0, config.max_pages) * slots_per_page]
	return selected


#============================================
def render_cards_to_pdf(
	records: list[Record],
	output_path: pathlib.Path,
	config: RunConfig,
	logo: LogoAsset | AssetError | None = None,
	verbose: bool = True,
) -> RenderResult:
	"""
	Render records as cards onto PDF pages.

	The grid and font settings are validated before anything is drawn, so a
	configuration error leaves no output file behind.

	Args:
		records: Normalized records in print order.
		output_path: Output PDF path.
		config: Run configuration.
		logo: Loaded logo, AssetError or None.
		verbose: Print progress and summaries.

	Returns:
		RenderResult.
	"""
	pc.config.validate_font_settings(config.fonts)
	grid = pc.layout.compute_grid(config.page, config.card)
	# fails fast on a text box with no room
	pc.compose.compute_text_box(pc.layout.SlotOrigin(0.0, 0.0), config.card, isinstance(logo, LogoAsset))
	cut_marks = pc.layout.plan_cut_marks(grid, config.card, config.page)
	oracle = pc.text_fit.ReportlabMeasurer(config.fonts)

	if isinstance(logo, AssetError) and verbose:
		print(f"Warning: logo not loaded ({logo.path}: {logo.reason}), drawing cards without logo")

	selected = select_records(records, grid.slots_per_page, config)
	batches = pc.layout.paginate(selected, grid.slots_per_page)

	buffer = io.BytesIO()
	page_size = (config.page.page_width, config.page.page_height)
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=page_size)
	if config.calibration:
		draw_calibration_page(pdf, grid, config.card, config.page, config.fonts.regular_font)
		pdf.showPage()

	overflow_messages: list[str] = []
	total = len(selected)
	done = 0
	if verbose and total > 0:
		print_progress("Cards", 0, total)
	for batch in batches:
		for slot, record in enumerate(batch):
			origin = pc.layout.compute_slot_origin(slot, grid, config.card)
			plan = pc.compose.compose_card(record, origin, config.card, config.fonts, oracle, logo)
			draw_card(pdf, plan, config.page.page_height, logo)
			if plan.overflow:
				overflow_messages.append(
					f"Text overflow at minimum size: '{record.name}' / '{record.role}'"
				)
			done += 1
			if verbose and (done % PROGRESS_UPDATE_EVERY == 0 or done == total):
				print_progress("Cards", done, total)
		pdf.showPage()
	if verbose and total > 0:
		print()
	pdf.save()
	buffer.seek(0)

	writer = pypdf.PdfWriter()
	overlay = None
	if config.draw_cut_marks:
		overlay = build_cut_mark_overlay(cut_marks, config.page)
	if config.calibration or batches:
		reader = pypdf.PdfReader(buffer)
		for index, page in enumerate(reader.pages):
			is_calibration = config.calibration and index == 0
			if overlay is not None and not is_calibration:
				page.merge_page(overlay)
			writer.add_page(page)
	with output_path.open("wb") as handle:
		writer.write(handle)

	if verbose:
		for message in overflow_messages:
			print(message)
		if overflow_messages:
			print(f"Overflow summary: {len(overflow_messages)} cards")

	pages = len(batches)
	if config.calibration:
		pages += 1
	return RenderResult(
		total_records=len(records),
		printed_records=len(selected),
		leftover_records=len(records) - len(selected),
		pages=pages,
		slots_per_page=grid.slots_per_page,
		columns=grid.columns,
		rows=grid.rows,
		overflow_cards=len(overflow_messages),
		logo_loaded=isinstance(logo, LogoAsset),
	)


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	input_path: pathlib.Path,
	logo_path: pathlib.Path | None,
	result: RenderResult,
	config: RunConfig,
) -> None:
	"""
	Write a manifest JSON file.

	Args:
		manifest_path: Output path.
		input_path: Input spreadsheet.
		logo_path: Logo image path, if any.
		result: Render result.
		config: Run configuration.
	"""
	card = config.card
	fonts = config.fonts
	data = {
		"input": str(input_path),
		"logo": str(logo_path) if logo_path is not None else None,
		"logo_loaded": result.logo_loaded,
		"total_records": result.total_records,
		"printed_records": result.printed_records,
		"leftover_records": result.leftover_records,
		"pages": result.pages,
		"slots_per_page": result.slots_per_page,
		"overflow_cards": result.overflow_cards,
		"layout": {
			"page_width": config.page.page_width,
			"page_height": config.page.page_height,
			"card_width": card.width,
			"card_height": card.height,
			"gap_x": card.gap_x,
			"gap_y": card.gap_y,
			"margin": card.margin,
			"logo_width": card.logo_width,
			"text_padding_left": card.text_padding_left,
			"text_padding_right": card.text_padding_right,
			"inter_field_spacing": card.inter_field_spacing,
			"columns": result.columns,
			"rows": result.rows,
			"calibration": config.calibration,
			"draw_cut_marks": config.draw_cut_marks,
			"max_pages": config.max_pages,
			"max_records": config.max_records,
		},
		"fonts": {
			"regular": fonts.regular_font,
			"bold": fonts.bold_font,
			"name_initial_size": fonts.name_initial_size,
			"name_min_size": fonts.name_min_size,
			"role_initial_size": fonts.role_initial_size,
			"role_min_size": fonts.role_min_size,
			"max_lines": fonts.max_lines,
		},
	}
	with manifest_path.open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True)
