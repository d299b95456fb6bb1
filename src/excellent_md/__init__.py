"""
excellent-md: Excel 工作簿转 Markdown 表格
"""

from .core import (
    CancellationToken,
    ConversionOptions,
    ConversionResult,
    ConversionService,
    MarkdownConverter,
    convert_workbook,
)

__version__ = "0.1.0"

__all__ = [
    "CancellationToken",
    "ConversionOptions",
    "ConversionResult",
    "ConversionService",
    "MarkdownConverter",
    "convert_workbook",
]
