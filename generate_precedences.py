#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Generate printable precedence cards (name and role with a logo) from a spreadsheet.
"""

# local repo modules
import precedence_cards.cli


if __name__ == "__main__":
	precedence_cards.cli.main()
