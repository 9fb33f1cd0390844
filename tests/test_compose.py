import dataclasses
import pathlib

import PIL.Image
import pytest

import conftest
import precedence_cards.compose
import precedence_cards.config
import precedence_cards.ingest
import precedence_cards.layout


ORIGIN = precedence_cards.layout.SlotOrigin(x=15.0, y=125.0)


#============================================
def _write_logo(path: pathlib.Path, size: tuple[int, int] = (200, 100)) -> pathlib.Path:
	image = PIL.Image.new("RGB", size, (7, 55, 170))
	image.save(path)
	return path


#============================================
def _compose(record, logo=None, oracle=None):
	config = conftest.build_default_config()
	if oracle is None:
		oracle = conftest.CharWidthMeasurer()
	return precedence_cards.compose.compose_card(
		record, ORIGIN, config.card, config.fonts, oracle, logo,
	)


#============================================
def test_name_and_role_block_is_vertically_centered() -> None:
	config = conftest.build_default_config()
	record = precedence_cards.ingest.Record(name="ANA PEREZ", role="DIRECTORA")
	plan = _compose(record)
	name_height = plan.name_fit.rendered_height
	role_height = plan.role_fit.rendered_height
	total = name_height + config.card.inter_field_spacing + role_height
	top_gap = plan.name_run.y - ORIGIN.y
	bottom_gap = (ORIGIN.y + config.card.height) - (plan.role_run.y + role_height)
	assert top_gap == pytest.approx((config.card.height - total) / 2.0)
	assert top_gap == pytest.approx(bottom_gap)
	assert plan.role_run.y == pytest.approx(plan.name_run.y + name_height + config.card.inter_field_spacing)
	assert plan.name_run.font_name == config.fonts.bold_font
	assert plan.role_run.font_name == config.fonts.regular_font


#============================================
def test_empty_role_takes_no_space() -> None:
	config = conftest.build_default_config()
	record = precedence_cards.ingest.Record(name="ANA PEREZ", role="")
	plan = _compose(record)
	assert plan.role_fit.rendered_height == 0
	assert plan.role_fit.line_count == 0
	assert plan.role_run.lines == ()
	name_height = plan.name_fit.rendered_height
	assert plan.name_run.y == pytest.approx(ORIGIN.y + (config.card.height - name_height) / 2.0)


#============================================
def test_text_box_without_logo_spans_card() -> None:
	config = conftest.build_default_config()
	card = config.card
	plan = _compose(precedence_cards.ingest.Record(name="A", role="B"))
	assert plan.logo_rect is None
	assert plan.name_run.x == pytest.approx(ORIGIN.x + card.text_padding_left)
	assert plan.name_run.width == pytest.approx(
		card.width - card.text_padding_left - card.text_padding_right
	)
	assert plan.border_rect == precedence_cards.compose.Rect(
		x=ORIGIN.x, y=ORIGIN.y, width=card.width, height=card.height,
	)


#============================================
def test_logo_is_centered_and_narrows_text_box(tmp_path: pathlib.Path) -> None:
	config = conftest.build_default_config()
	card = config.card
	logo = precedence_cards.compose.load_logo(_write_logo(tmp_path / "logo.png"))
	assert isinstance(logo, precedence_cards.compose.LogoAsset)
	assert logo.aspect_ratio == pytest.approx(0.5)

	plan = _compose(precedence_cards.ingest.Record(name="A", role="B"), logo=logo)
	rect = plan.logo_rect
	assert rect is not None
	assert rect.x == pytest.approx(ORIGIN.x + card.text_padding_left)
	assert rect.width == pytest.approx(card.logo_width)
	assert rect.height == pytest.approx(card.logo_width * 0.5)
	assert rect.y == pytest.approx(ORIGIN.y + (card.height - rect.height) / 2.0)
	assert plan.name_run.width == pytest.approx(
		card.width - (card.logo_width + card.text_padding_left + card.text_padding_right)
	)
	assert plan.name_run.x + plan.name_run.width == pytest.approx(ORIGIN.x + card.width)


#============================================
def test_tall_logo_is_scaled_to_card_height(tmp_path: pathlib.Path) -> None:
	config = conftest.build_default_config()
	card = config.card
	logo = precedence_cards.compose.load_logo(_write_logo(tmp_path / "tall.png", (50, 400)))
	plan = _compose(precedence_cards.ingest.Record(name="A", role="B"), logo=logo)
	rect = plan.logo_rect
	assert rect.height == pytest.approx(card.height - 2.0 * card.text_padding_left)
	assert rect.width / rect.height == pytest.approx(50 / 400)


#============================================
def test_missing_logo_falls_back_to_wide_text_box(tmp_path: pathlib.Path) -> None:
	config = conftest.build_default_config()
	card = config.card
	logo = precedence_cards.compose.load_logo(tmp_path / "missing.png")
	assert isinstance(logo, precedence_cards.compose.AssetError)
	assert logo.path.endswith("missing.png")

	plan = _compose(precedence_cards.ingest.Record(name="A", role="B"), logo=logo)
	assert plan.logo_rect is None
	assert plan.name_run.width == pytest.approx(
		card.width - card.text_padding_left - card.text_padding_right
	)


#============================================
def test_unreadable_logo_is_asset_error(tmp_path: pathlib.Path) -> None:
	path = tmp_path / "broken.png"
	path.write_bytes(b"not an image")
	logo = precedence_cards.compose.load_logo(path)
	assert isinstance(logo, precedence_cards.compose.AssetError)


#============================================
def test_overflow_is_reported_on_plan() -> None:
	record = precedence_cards.ingest.Record(name="X" * 400, role="DIRECTOR")
	plan = _compose(record)
	assert plan.name_fit.overflow is True
	assert plan.name_fit.font_size == 6.0
	assert plan.role_fit.overflow is False
	assert plan.overflow is True


#============================================
def test_text_box_without_room_is_configuration_error() -> None:
	card = dataclasses.replace(conftest.build_default_config().card, width=50.0)
	with pytest.raises(precedence_cards.config.ConfigurationError):
		precedence_cards.compose.compute_text_box(ORIGIN, card, True)
