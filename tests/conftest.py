"""
Pytest configuration for local imports.
"""

# Standard Library
import math
import os
import sys

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()
import precedence_cards.config
import precedence_cards.text_fit


#============================================
def build_default_config(**changes) -> precedence_cards.config.RunConfig:
	"""
	Build a default RunConfig for tests from the standard preset.
	"""
	card, fonts = precedence_cards.config.get_preset("standard")
	page = precedence_cards.config.PageGeometry(
		page_width=precedence_cards.config.DEFAULT_PAGE_WIDTH,
		page_height=precedence_cards.config.DEFAULT_PAGE_HEIGHT,
	)
	values = {
		"card": card,
		"page": page,
		"fonts": fonts,
		"calibration": False,
		"draw_cut_marks": True,
		"max_pages": None,
		"max_records": None,
	}
	values.update(changes)
	return precedence_cards.config.RunConfig(**values)


class CharWidthMeasurer:
	"""
	Deterministic measurer where every character is half an em wide.
	"""

	def __init__(self, leading_factor: float = 1.2) -> None:
		self.leading_factor = leading_factor
		self.calls: list[float] = []

	def measure(self, text, weight, font_size, wrap_width):
		self.calls.append(font_size)
		if not text:
			return precedence_cards.text_fit.Measurement(line_count=0, height=0.0)
		per_line = max(1, int(wrap_width // (font_size * 0.5)))
		line_count = math.ceil(len(text) / per_line)
		lines = tuple(text[start:start + per_line] for start in range(0, len(text), per_line))
		height = line_count * font_size * self.leading_factor
		return precedence_cards.text_fit.Measurement(line_count=line_count, height=height, lines=lines)
