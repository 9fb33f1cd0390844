"""
CLI entry points for precedence card generation.
"""

# Standard Library
import argparse
import dataclasses
import pathlib
import sys
import time

# local repo modules
import precedence_cards as pc
import precedence_cards.compose
import precedence_cards.config
import precedence_cards.ingest
import precedence_cards.render


RunConfig = pc.config.RunConfig
PageGeometry = pc.config.PageGeometry

DEFAULT_PAGE_WIDTH = pc.config.DEFAULT_PAGE_WIDTH
DEFAULT_PAGE_HEIGHT = pc.config.DEFAULT_PAGE_HEIGHT

CARD_OVERRIDES = {
	"card_width": "width",
	"card_height": "height",
	"gap_x": "gap_x",
	"gap_y": "gap_y",
	"margin": "margin",
	"logo_width": "logo_width",
	"inter_field_spacing": "inter_field_spacing",
}
FONT_OVERRIDES = {
	"name_size": "name_initial_size",
	"name_min_size": "name_min_size",
	"role_size": "role_initial_size",
	"role_min_size": "role_min_size",
}


#============================================
def build_config(args: argparse.Namespace) -> RunConfig:
	"""
	Build the run config from a preset and CLI overrides.

	Args:
		args: Parsed argparse namespace.

	Returns:
		RunConfig.
	"""
	card, fonts = pc.config.get_preset(args.preset)

	card_changes = {}
	for arg_name, field_name in CARD_OVERRIDES.items():
		value = getattr(args, arg_name)
		if value is not None:
			card_changes[field_name] = value
	card = dataclasses.replace(card, **card_changes)

	font_changes = {}
	for arg_name, field_name in FONT_OVERRIDES.items():
		value = getattr(args, arg_name)
		if value is not None:
			font_changes[field_name] = value
	if args.font_regular:
		font_changes["regular_font"] = pc.render.register_ttf_font(
			"CardRegular", pathlib.Path(args.font_regular)
		)
	if args.font_bold:
		font_changes["bold_font"] = pc.render.register_ttf_font(
			"CardBold", pathlib.Path(args.font_bold)
		)
	fonts = dataclasses.replace(fonts, **font_changes)

	page = PageGeometry(
		page_width=args.page_width,
		page_height=args.page_height,
	)
	return RunConfig(
		card=card,
		page=page,
		fonts=fonts,
		calibration=args.calibration,
		draw_cut_marks=args.draw_cut_marks,
		max_pages=args.max_pages,
		max_records=args.max_records,
	)


#============================================
def build_parser() -> argparse.ArgumentParser:
	"""
	Build the argument parser.

	Returns:
		ArgumentParser.
	"""
	parser = argparse.ArgumentParser(description="Generate printable precedence cards from a spreadsheet.")
	parser.add_argument("input", help="Spreadsheet with name and role columns (.xlsx, .xls, .csv).")
	parser.add_argument("logo", nargs="?", default=None, help="Logo image shown on the left of each card.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", required=True, help="Output PDF path.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")
	output_group.add_argument("-s", "--sheet", dest="sheet", default=0, help="Sheet name for Excel input.")

	layout_group = parser.add_argument_group("Layout")
	layout_group.add_argument(
		"--preset",
		dest="preset",
		default="standard",
		choices=sorted(pc.config.PRESETS),
		help="Card size preset.",
	)
	layout_group.add_argument("--page-width", dest="page_width", type=float, default=DEFAULT_PAGE_WIDTH, help="Page width in points.")
	layout_group.add_argument("--page-height", dest="page_height", type=float, default=DEFAULT_PAGE_HEIGHT, help="Page height in points.")
	layout_group.add_argument("--card-width", dest="card_width", type=float, default=None, help="Card width in points.")
	layout_group.add_argument("--card-height", dest="card_height", type=float, default=None, help="Card height in points.")
	layout_group.add_argument("--gap-x", dest="gap_x", type=float, default=None, help="Horizontal gap between cards.")
	layout_group.add_argument("--gap-y", dest="gap_y", type=float, default=None, help="Vertical gap between cards.")
	layout_group.add_argument("--margin", dest="margin", type=float, default=None, help="Page margin.")
	layout_group.add_argument("--logo-width", dest="logo_width", type=float, default=None, help="Logo width.")
	layout_group.add_argument("--spacing", dest="inter_field_spacing", type=float, default=None, help="Space between name and role.")

	font_group = parser.add_argument_group("Fonts")
	font_group.add_argument("--name-size", dest="name_size", type=float, default=None, help="Initial name font size.")
	font_group.add_argument("--name-min-size", dest="name_min_size", type=float, default=None, help="Minimum name font size.")
	font_group.add_argument("--role-size", dest="role_size", type=float, default=None, help="Initial role font size.")
	font_group.add_argument("--role-min-size", dest="role_min_size", type=float, default=None, help="Minimum role font size.")
	font_group.add_argument("--font-regular", dest="font_regular", default=None, help="TrueType file for the role text.")
	font_group.add_argument("--font-bold", dest="font_bold", default=None, help="TrueType file for the name text.")

	behavior_group = parser.add_argument_group("Behavior")
	behavior_group.add_argument("-k", "--cut-marks", dest="draw_cut_marks", action="store_true", help="Draw dashed cut marks.")
	behavior_group.add_argument("-K", "--no-cut-marks", dest="draw_cut_marks", action="store_false", help="Disable cut marks.")
	behavior_group.add_argument("-c", "--calibration", dest="calibration", action="store_true", help="Add a calibration page.")
	behavior_group.add_argument("-C", "--no-calibration", dest="calibration", action="store_false", help="Disable calibration page.")

	limit_group = parser.add_argument_group("Limits")
	limit_group.add_argument("-g", "--max-pages", dest="max_pages", type=int, default=None, help="Limit number of card pages.")
	limit_group.add_argument("-l", "--max-records", dest="max_records", type=int, default=None, help="Limit number of cards.")

	parser.set_defaults(
		draw_cut_marks=True,
		calibration=False,
	)
	return parser


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Returns:
		Parsed argparse namespace.
	"""
	parser = build_parser()
	args = parser.parse_args(argv)
	return args


#============================================
def run_pipeline(args: argparse.Namespace) -> pc.config.RenderResult:
	"""
	Run the full pipeline from spreadsheet input to PDF output.

	Args:
		args: Parsed argparse namespace.

	Returns:
		RenderResult.
	"""
	print("Precedence card pipeline")
	print(f"Input: {args.input}")
	print(f"Output PDF: {args.output_path}")
	print(f"Preset: {args.preset}")
	print(f"Cut marks: {args.draw_cut_marks}")
	print(f"Calibration: {args.calibration}")
	if args.max_records is not None:
		print(f"Max records: {args.max_records}")
	if args.max_pages is not None:
		print(f"Max pages: {args.max_pages}")

	config = build_config(args)

	start_time = time.perf_counter()
	input_path = pathlib.Path(args.input)
	records = pc.ingest.load_records(input_path, args.sheet)
	load_end = time.perf_counter()
	print(f"Records loaded: {len(records)}")

	logo = None
	logo_path = None
	if args.logo:
		logo_path = pathlib.Path(args.logo)
		logo = pc.compose.load_logo(logo_path)

	output_path = pathlib.Path(args.output_path)
	render_start = time.perf_counter()
	result = pc.render.render_cards_to_pdf(records, output_path, config, logo)
	render_end = time.perf_counter()
	print(f"Grid: {result.columns} columns x {result.rows} rows")
	print(f"Pages written: {result.pages}")
	print(f"Cards printed: {result.printed_records}")
	if result.leftover_records > 0:
		print(f"Cards skipped by limits: {result.leftover_records}")

	manifest_path = args.manifest_path
	if manifest_path is None:
		manifest_path = f"{output_path}.json"
	pc.render.write_manifest(
		pathlib.Path(manifest_path),
		input_path,
		logo_path,
		result,
		config,
	)

	total_time = time.perf_counter() - start_time
	print(
		"Timing: load={:.2f}s render={:.2f}s total={:.2f}s".format(
			load_end - start_time,
			render_end - render_start,
			total_time,
		)
	)
	print(f"Manifest written: {manifest_path}")
	return result


#============================================
def main() -> None:
	"""
	Main entry point.
	"""
	args = parse_args()
	try:
		run_pipeline(args)
	except ValueError as error:
		print(f"Error: {error}", file=sys.stderr)
		sys.exit(1)
