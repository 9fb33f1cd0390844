import dataclasses

import pytest

import conftest
import precedence_cards.config
import precedence_cards.layout


#============================================
def _default_geometry() -> tuple[
	precedence_cards.config.PageGeometry,
	precedence_cards.config.CardGeometry,
]:
	config = conftest.build_default_config()
	return (config.page, config.card)


#============================================
def test_standard_preset_grid_on_letter() -> None:
	"""
	The standard card preset fits 2 columns and 7 rows on a letter page.
	"""
	page, card = _default_geometry()
	grid = precedence_cards.layout.compute_grid(page, card)
	assert grid.columns == 2
	assert grid.rows == 7
	assert grid.slots_per_page == 14


#============================================
def test_grid_is_deterministic() -> None:
	page, card = _default_geometry()
	first = precedence_cards.layout.compute_grid(page, card)
	for _ in range(5):
		assert precedence_cards.layout.compute_grid(page, card) == first


#============================================
def test_exact_fit_counts_one_fewer_gap() -> None:
	"""
	Three 100pt cards with 10pt gaps fit exactly in 320pt plus margins.
	"""
	page = precedence_cards.config.PageGeometry(page_width=340.0, page_height=140.0)
	card = dataclasses.replace(
		_default_geometry()[1],
		width=100.0,
		height=50.0,
		gap_x=10.0,
		gap_y=10.0,
		margin=10.0,
	)
	grid = precedence_cards.layout.compute_grid(page, card)
	assert grid.columns == 3
	assert grid.rows == 2


#============================================
def test_card_larger_than_page_is_configuration_error() -> None:
	page, card = _default_geometry()
	too_wide = dataclasses.replace(card, width=page.page_width)
	with pytest.raises(precedence_cards.config.ConfigurationError):
		precedence_cards.layout.compute_grid(page, too_wide)
	too_tall = dataclasses.replace(card, height=page.page_height)
	with pytest.raises(precedence_cards.config.ConfigurationError):
		precedence_cards.layout.compute_grid(page, too_tall)


#============================================
def test_zero_card_size_is_configuration_error() -> None:
	page, card = _default_geometry()
	with pytest.raises(precedence_cards.config.ConfigurationError):
		precedence_cards.layout.compute_grid(page, dataclasses.replace(card, height=0.0))


#============================================
def test_slot_origins_follow_row_major_order() -> None:
	page, card = _default_geometry()
	grid = precedence_cards.layout.compute_grid(page, card)
	first = precedence_cards.layout.compute_slot_origin(0, grid, card)
	second = precedence_cards.layout.compute_slot_origin(1, grid, card)
	third = precedence_cards.layout.compute_slot_origin(2, grid, card)
	assert (first.x, first.y) == (card.margin, card.margin)
	assert second.x == pytest.approx(card.margin + card.width + card.gap_x)
	assert second.y == pytest.approx(card.margin)
	assert third.x == pytest.approx(card.margin)
	assert third.y == pytest.approx(card.margin + card.height + card.gap_y)


#============================================
def test_slot_boxes_distinct_non_overlapping_and_on_page() -> None:
	page, card = _default_geometry()
	grid = precedence_cards.layout.compute_grid(page, card)
	boxes = []
	for index in range(grid.slots_per_page):
		origin = precedence_cards.layout.compute_slot_origin(index, grid, card)
		box = (origin.x, origin.y, origin.x + card.width, origin.y + card.height)
		assert 0.0 <= box[0] < box[2] <= page.page_width
		assert 0.0 <= box[1] < box[3] <= page.page_height
		boxes.append(box)
	assert len(set(boxes)) == grid.slots_per_page
	for index, box_a in enumerate(boxes):
		for box_b in boxes[index + 1:]:
			overlap_x = min(box_a[2], box_b[2]) - max(box_a[0], box_b[0])
			overlap_y = min(box_a[3], box_b[3]) - max(box_a[1], box_b[1])
			assert overlap_x <= 0.0 or overlap_y <= 0.0


#============================================
def test_slot_origin_is_pure() -> None:
	page, card = _default_geometry()
	grid = precedence_cards.layout.compute_grid(page, card)
	assert precedence_cards.layout.compute_slot_origin(9, grid, card) == (
		precedence_cards.layout.compute_slot_origin(9, grid, card)
	)


#============================================
def test_slot_index_out_of_range() -> None:
	page, card = _default_geometry()
	grid = precedence_cards.layout.compute_grid(page, card)
	with pytest.raises(ValueError):
		precedence_cards.layout.compute_slot_origin(grid.slots_per_page, grid, card)
	with pytest.raises(ValueError):
		precedence_cards.layout.compute_slot_origin(-1, grid, card)
