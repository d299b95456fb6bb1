"""
行规整
去掉行尾空单元格和表尾空行，并补齐为矩形表格
"""

type Row = list[str]


def trim_trailing_empty(row: Row) -> Row:
    """去掉行尾空白单元格，全空行返回空列表"""
    end = len(row)
    while end > 0 and not row[end - 1].strip():
        end -= 1
    return list(row[:end])


def trim_trailing_empty_rows(rows: list[Row]) -> list[Row]:
    """去掉表尾的空行"""
    end = len(rows)
    while end > 0 and not rows[end - 1]:
        end -= 1
    return rows[:end]


def normalize_rows(rows: list[Row]) -> list[Row]:
    """规整为矩形表格，没有数据时返回空列表"""
    trimmed = trim_trailing_empty_rows([trim_trailing_empty(row) for row in rows])
    max_cols = max((len(row) for row in trimmed), default=0)
    if max_cols == 0:
        return []
    return [row + [""] * (max_cols - len(row)) for row in trimmed]
