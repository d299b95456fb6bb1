"""
pytest 共享 fixtures
"""

import io
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

import openpyxl
import pytest

from excellent_md.core.config import Settings
from excellent_md.core.errors import WorkbookReadError
from excellent_md.core.models import SheetVisibility
from excellent_md.core.workbook import Workbook


def build_xlsx(
    sheets: dict[str, list[list]],
    hidden: tuple[str, ...] = (),
    merges: dict[str, list[str]] | None = None,
) -> bytes:
    """用 openpyxl 在内存中生成 xlsx"""
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(name)
        for row in rows:
            ws.append(row)
        if name in hidden:
            ws.sheet_state = "hidden"
        for cell_range in (merges or {}).get(name, []):
            ws.merge_cells(cell_range)

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


@dataclass
class FakeWorkbook(Workbook):
    """内存中的工作簿，用于模拟损坏结构、无法判断可见性等情况"""

    sheets: dict[str, list[list[str]]]
    hidden: set[str] = field(default_factory=set)
    indeterminate: set[str] = field(default_factory=set)
    merges: dict[str, list[str]] = field(default_factory=dict)
    formulas: dict[tuple[str, int, int], str] = field(default_factory=dict)
    # 查询公式时抛出 WorkbookReadError 的 sheet
    formula_errors: set[str] = field(default_factory=set)
    # sheet 名 -> 读取多少行后抛出 WorkbookReadError
    broken: dict[str, int] = field(default_factory=dict)
    # 每读取一行后调用 (sheet 名, 行号)
    row_hook: Callable[[str, int], None] | None = None
    closed: bool = False
    formula_lookups: int = 0

    def sheet_names(self) -> list[str]:
        return list(self.sheets)

    def iter_rows(self, sheet_name: str) -> Iterator[list[str]]:
        for idx, row in enumerate(self.sheets[sheet_name], start=1):
            if self.broken.get(sheet_name) == idx - 1:
                raise WorkbookReadError("corrupt row data")
            yield list(row)
            if self.row_hook is not None:
                self.row_hook(sheet_name, idx)
        if sheet_name in self.broken and self.broken[sheet_name] >= len(self.sheets[sheet_name]):
            raise WorkbookReadError("corrupt row data")

    def merged_ranges(self, sheet_name: str) -> list[str]:
        return list(self.merges.get(sheet_name, []))

    def visibility(self, sheet_name: str) -> SheetVisibility:
        if sheet_name in self.indeterminate:
            return SheetVisibility.INDETERMINATE
        if sheet_name in self.hidden:
            return SheetVisibility.HIDDEN
        return SheetVisibility.VISIBLE

    def row_has_formula(self, sheet_name: str, row: int) -> bool:
        self.formula_lookups += 1
        if sheet_name in self.formula_errors:
            raise WorkbookReadError("formula part is corrupt")
        return any(key[:2] == (sheet_name, row) for key in self.formulas)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_xlsx() -> Callable[..., bytes]:
    """生成 xlsx 字节的工厂函数"""
    return build_xlsx


@pytest.fixture
def fake_workbook() -> type[FakeWorkbook]:
    """内存工作簿类"""
    return FakeWorkbook


@pytest.fixture
def settings(tmp_path) -> Settings:
    """测试用配置（不读取 .env）"""
    return Settings(
        _env_file=None,
        max_sheets=10,
        max_cells_per_sheet=1000,
        conversion_timeout_seconds=30,
        audit_log_path=tmp_path / "audit.jsonl",
    )
