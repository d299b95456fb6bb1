"""
工作簿访问接口
转换流水线只依赖 Workbook 抽象，openpyxl 实现在 OpenpyxlWorkbook 中
"""

import io
from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Iterator
from dataclasses import dataclass, field

import openpyxl
from openpyxl.cell.cell import Cell
from openpyxl.worksheet.worksheet import Worksheet

from .cell_format import format_cell_value
from .errors import InvalidWorkbook, WorkbookReadError
from .models import SheetVisibility


class Workbook(ABC):
    """工作簿能力接口"""

    @abstractmethod
    def sheet_names(self) -> list[str]:
        """按文件顺序返回 sheet 名称"""
        ...

    @abstractmethod
    def iter_rows(self, sheet_name: str) -> Iterator[list[str]]:
        """按顺序逐行返回单元格显示值，读取失败抛出 WorkbookReadError"""
        ...

    @abstractmethod
    def merged_ranges(self, sheet_name: str) -> list[str]:
        """返回合并区域（如 A1:B2）"""
        ...

    @abstractmethod
    def visibility(self, sheet_name: str) -> SheetVisibility:
        """返回 sheet 可见性，无法判断时返回 INDETERMINATE"""
        ...

    @abstractmethod
    def row_has_formula(self, sheet_name: str, row: int) -> bool:
        """检查某一行（从 1 开始）是否存在公式单元格"""
        ...

    def close(self) -> None:
        """释放资源"""

    def __enter__(self) -> "Workbook":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


@dataclass
class OpenpyxlWorkbook(Workbook):
    """基于 openpyxl 的工作簿实现

    values 以 data_only=True 加载（单元格存储值），
    公式视图在首次查询公式时以 data_only=False 加载。
    只访问文件中实际存储的单元格，不按 max_row x max_column 展开整个区域。
    """

    data: bytes = field(repr=False)
    values: openpyxl.Workbook = field(repr=False)
    _formulas: openpyxl.Workbook | None = field(default=None, init=False, repr=False)
    # sheet 名 -> 含公式的行号
    _formula_rows: dict[str, set[int]] = field(default_factory=dict, init=False, repr=False)

    @classmethod
    def from_bytes(cls, data: bytes) -> "OpenpyxlWorkbook":
        """解析工作簿字节，格式错误抛出 InvalidWorkbook"""
        try:
            values = openpyxl.load_workbook(io.BytesIO(data), data_only=True)
        except Exception as e:
            raise InvalidWorkbook(e) from e
        return cls(data=data, values=values)

    def sheet_names(self) -> list[str]:
        return list(self.values.sheetnames)

    def iter_rows(self, sheet_name: str) -> Iterator[list[str]]:
        sheet = self._worksheet(self.values, sheet_name)
        if sheet is None:
            return
        try:
            stored = _stored_rows(sheet)
            last_row = max(stored, default=0)
            for row_idx in range(1, last_row + 1):
                yield _row_values(stored.get(row_idx, {}))
        except Exception as e:
            raise WorkbookReadError(f"failed to iterate rows: {e}") from e

    def merged_ranges(self, sheet_name: str) -> list[str]:
        sheet = self._worksheet(self.values, sheet_name)
        if sheet is None:
            return []
        return [str(merged_range) for merged_range in sheet.merged_cells.ranges]

    def visibility(self, sheet_name: str) -> SheetVisibility:
        if sheet_name not in self.values.sheetnames:
            return SheetVisibility.INDETERMINATE
        state = self.values[sheet_name].sheet_state
        if state == "visible":
            return SheetVisibility.VISIBLE
        if state in ("hidden", "veryHidden"):
            return SheetVisibility.HIDDEN
        return SheetVisibility.INDETERMINATE

    def row_has_formula(self, sheet_name: str, row: int) -> bool:
        if sheet_name not in self._formula_rows:
            sheet = self._worksheet(self._formula_view(), sheet_name)
            try:
                self._formula_rows[sheet_name] = (
                    {
                        cell.row
                        for cell in _stored_cells(sheet)
                        if cell.data_type == "f"
                    }
                    if sheet is not None
                    else set()
                )
            except Exception as e:
                raise WorkbookReadError(f"failed to read formulas: {e}") from e
        return row in self._formula_rows[sheet_name]

    def close(self) -> None:
        self.values.close()
        if self._formulas is not None:
            self._formulas.close()
            self._formulas = None
        self._formula_rows.clear()

    def _formula_view(self) -> openpyxl.Workbook:
        """懒加载公式视图"""
        if self._formulas is None:
            try:
                self._formulas = openpyxl.load_workbook(io.BytesIO(self.data), data_only=False)
            except Exception as e:
                raise WorkbookReadError(f"failed to load formulas: {e}") from e
        return self._formulas

    def _worksheet(self, workbook: openpyxl.Workbook, sheet_name: str) -> Worksheet | None:
        """获取工作表；图表页等非数据 sheet 返回 None"""
        try:
            sheet = workbook[sheet_name]
        except KeyError as e:
            raise WorkbookReadError(f"sheet '{sheet_name}' not found") from e
        if not isinstance(sheet, Worksheet):
            return None
        return sheet


def _stored_cells(sheet: Worksheet) -> list[Cell]:
    """文件中实际存储的单元格

    Worksheet.iter_rows / cell() 会为访问到的每个坐标创建 Cell，
    这里直接读取已解析的单元格表，不会新建单元格。
    """
    return list(sheet._cells.values())


def _stored_rows(sheet: Worksheet) -> dict[int, dict[int, Cell]]:
    """按行号分组存储的单元格：{行号: {列号: Cell}}"""
    rows: dict[int, dict[int, Cell]] = defaultdict(dict)
    for cell in _stored_cells(sheet):
        rows[cell.row][cell.column] = cell
    return rows


def _row_values(cells: dict[int, Cell]) -> list[str]:
    """一行的显示值，截止到最后一个有值的单元格（中间空缺补空字符串）"""
    width = max((column for column, cell in cells.items() if cell.value is not None), default=0)
    values = [""] * width
    for column, cell in cells.items():
        if column <= width:
            values[column - 1] = format_cell_value(cell.value, cell.number_format)
    return values


def open_workbook(data: bytes) -> Workbook:
    """打开工作簿（默认使用 openpyxl 实现）"""
    return OpenpyxlWorkbook.from_bytes(data)
