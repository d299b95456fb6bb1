"""
单元格值格式化
按单元格的数字格式把存储值转换为显示文本
"""

import re
from datetime import date, datetime, time


def format_cell_value(value: object, number_format: str | None = None) -> str:
    """格式化单元格值"""
    if value is None:
        return ""

    number_format = number_format or "General"

    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"

    if isinstance(value, datetime):
        return _format_datetime(value, number_format)

    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")

    if isinstance(value, time):
        return value.strftime("%H:%M:%S")

    if not isinstance(value, (int, float)):
        return str(value)

    return _format_number(value, number_format)


def _format_datetime(value: datetime, number_format: str) -> str:
    """格式化日期时间"""
    if "H" in number_format or "h" in number_format:
        return value.strftime("%Y-%m-%d %H:%M:%S")
    return value.strftime("%Y-%m-%d")


def _format_number(value: int | float, number_format: str) -> str:
    """格式化数字"""
    if "%" in number_format:
        return _format_percentage(value, number_format)

    if "E" in number_format.upper() and number_format != "General":
        return _format_scientific(value, number_format)

    if "#,##" in number_format or ",0" in number_format:
        return _format_currency(value, number_format)

    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _format_percentage(value: float, number_format: str) -> str:
    """格式化百分比"""
    decimal_match = re.search(r"0\.(0+)%", number_format)
    decimals = len(decimal_match.group(1)) if decimal_match else 0
    return f"{value * 100:.{decimals}f}%"


def _format_scientific(value: float, number_format: str) -> str:
    """格式化科学计数法"""
    decimal_match = re.search(r"0\.(0+)E", number_format, re.IGNORECASE)
    decimals = len(decimal_match.group(1)) if decimal_match else 2
    return f"{value:.{decimals}E}"


def _format_currency(value: float, number_format: str) -> str:
    """格式化货币 / 千分位"""
    decimal_match = re.search(r"0\.(0+)", number_format)
    decimals = len(decimal_match.group(1)) if decimal_match else 0
    formatted = f"{value:,.{decimals}f}"
    if "¥" in number_format or "￥" in number_format:
        return f"¥{formatted}"
    if "$" in number_format:
        return f"${formatted}"
    return formatted
