"""
Markdown 表格渲染
"""

from ..models import RenderedTable
from .normalizer import Row, normalize_rows

# 空 sheet 的固定输出
EMPTY_SHEET_MESSAGE = "_No data in this sheet._"


def escape_cell(text: str) -> str:
    """转义单元格：换行转 <br>，竖线转 \\|"""
    if not text:
        return ""
    text = text.replace("\r\n", "\n")
    text = text.replace("\n", "<br>")
    return text.replace("|", "\\|")


def format_row(row: Row) -> str:
    """生成表格行"""
    return "| " + " | ".join(escape_cell(cell) for cell in row) + " |"


def format_separator(width: int) -> str:
    """生成分隔行"""
    return "| " + " | ".join(["---"] * width) + " |"


def render_markdown_table(rows: list[Row]) -> RenderedTable:
    """渲染已规整的矩形表格，第一行作为表头"""
    if not rows:
        return RenderedTable(markdown=EMPTY_SHEET_MESSAGE, row_count=0, col_count=0)

    width = len(rows[0])
    lines = [format_row(rows[0]), format_separator(width)]
    lines.extend(format_row(row) for row in rows[1:])
    return RenderedTable(markdown="\n".join(lines), row_count=len(rows), col_count=width)


def sheet_to_markdown(rows: list[Row]) -> RenderedTable:
    """规整并渲染原始行"""
    return render_markdown_table(normalize_rows(rows))
