"""
数据模型定义模块
包含枚举、dataclass 和 Pydantic 模型
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

# ============ 枚举定义 ============


class SheetVisibility(StrEnum):
    """sheet 可见性"""

    VISIBLE = "visible"
    HIDDEN = "hidden"
    INDETERMINATE = "indeterminate"


# ============ 内部数据模型 (dataclass) ============


@dataclass(frozen=True)
class ConversionOptions:
    """转换选项（单次调用内不可变），0 表示不限制"""

    include_hidden_sheets: bool = False
    max_sheets: int = 0
    max_cells_per_sheet: int = 0


@dataclass
class SheetExtraction:
    """单个 sheet 的抽取结果"""

    rows: list[list[str]]
    warnings: list[str]
    row_count: int
    col_count: int


@dataclass
class RenderedTable:
    """渲染后的 Markdown 表格"""

    markdown: str
    row_count: int
    col_count: int


@dataclass
class SheetOutcome:
    """单个 sheet 的处理结果"""

    name: str
    markdown: str = ""
    warnings: list[str] = field(default_factory=list)
    error: str | None = None
    row_count: int = 0
    col_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name}
        if self.markdown:
            data["markdown"] = self.markdown
        if self.warnings:
            data["warnings"] = list(self.warnings)
        if self.error:
            data["error"] = self.error
        data["row_count"] = self.row_count
        data["col_count"] = self.col_count
        return data


@dataclass
class SkippedSheet:
    """未进入抽取阶段的 sheet"""

    name: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "reason": self.reason}


@dataclass
class ConversionMeta:
    """转换元数据"""

    sheet_count: int = 0
    processed: int = 0
    skipped_count: int = 0
    generated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        return {
            "sheet_count": self.sheet_count,
            "processed": self.processed,
            "skipped_count": self.skipped_count,
            "generated_at": self.generated_at.isoformat().replace("+00:00", "Z"),
        }


@dataclass
class ConversionResult:
    """整个工作簿的转换结果"""

    sheets: list[SheetOutcome] = field(default_factory=list)
    skipped: list[SkippedSheet] = field(default_factory=list)
    combined_markdown: str = ""
    meta: ConversionMeta = field(default_factory=ConversionMeta)

    def to_dict(self) -> dict[str, Any]:
        """序列化为 JSON 兼容的字典（空的可选字段省略）"""
        data: dict[str, Any] = {"sheets": [sheet.to_dict() for sheet in self.sheets]}
        if self.skipped:
            data["skipped"] = [skipped.to_dict() for skipped in self.skipped]
        data["combined_markdown"] = self.combined_markdown
        data["meta"] = self.meta.to_dict()
        return data

    @property
    def sheet_errors(self) -> int:
        return sum(1 for sheet in self.sheets if sheet.error)


# ============ 外部输入验证模型 (Pydantic) ============


class OptionsRequest(BaseModel):
    """转换选项（外部输入验证）"""

    include_hidden_sheets: bool = Field(default=False)
    max_sheets: int = Field(default=0, ge=0)
    max_cells_per_sheet: int = Field(default=0, ge=0)
    timeout_seconds: float | None = Field(default=None, gt=0)

    def to_options(self) -> ConversionOptions:
        """转换为 ConversionOptions"""
        return ConversionOptions(
            include_hidden_sheets=self.include_hidden_sheets,
            max_sheets=self.max_sheets,
            max_cells_per_sheet=self.max_cells_per_sheet,
        )
