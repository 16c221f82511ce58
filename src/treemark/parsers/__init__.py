#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Parsers producing treemark node trees."""

from treemark.parsers.html import parse_html, sanitize_null_bytes, soup_to_node

__all__ = ["parse_html", "sanitize_null_bytes", "soup_to_node"]
