"""
Excel 转 Markdown 核心模块
"""

from .converter import HIDDEN_SHEET_REASON, MarkdownConverter, combine_markdown, convert_workbook
from .extractor import (
    FORMULAS_WARNING,
    MERGED_CELLS_WARNING,
    VISIBILITY_WARNING,
    extract_sheet,
)
from .normalizer import normalize_rows, trim_trailing_empty
from .renderer import EMPTY_SHEET_MESSAGE, escape_cell, render_markdown_table, sheet_to_markdown

__all__ = [
    "MarkdownConverter",
    "convert_workbook",
    "combine_markdown",
    "extract_sheet",
    "normalize_rows",
    "trim_trailing_empty",
    "render_markdown_table",
    "sheet_to_markdown",
    "escape_cell",
    "EMPTY_SHEET_MESSAGE",
    "HIDDEN_SHEET_REASON",
    "FORMULAS_WARNING",
    "MERGED_CELLS_WARNING",
    "VISIBILITY_WARNING",
]
