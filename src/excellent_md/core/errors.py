"""
异常定义模块

异常层级:
    ExcellentMdError
    ├── ConversionError        整个转换失败（致命）
    │   ├── InvalidWorkbook
    │   ├── TooManySheets
    │   ├── ConversionTimeout
    │   └── ConversionCancelled
    ├── SheetError             单个 sheet 失败（记录到 SheetOutcome.error）
    │   ├── SheetTooLarge
    │   └── SheetExtractionError
    ├── WorkbookReadError      工作簿适配层读取失败
    └── UploadRejected         上传校验失败
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ConversionResult


class ExcellentMdError(Exception):
    """项目异常基类"""


# ============ 致命错误 ============


class ConversionError(ExcellentMdError):
    """整个转换调用失败

    result 为出错时的空壳结果（只保证 meta.sheet_count 有意义），
    仅供审计记录使用，不能当作转换数据。
    """

    def __init__(self, message: str, result: ConversionResult | None = None) -> None:
        super().__init__(message)
        self.result = result


class InvalidWorkbook(ConversionError):
    """无法解析的工作簿"""

    def __init__(self, cause: object, result: ConversionResult | None = None) -> None:
        super().__init__(f"invalid xlsx file: {cause}", result)


class TooManySheets(ConversionError):
    """sheet 数量超过上限"""

    def __init__(self, result: ConversionResult | None = None) -> None:
        super().__init__("workbook has too many sheets", result)


class ConversionTimeout(ConversionError):
    """转换超时"""

    def __init__(self, result: ConversionResult | None = None) -> None:
        super().__init__("conversion timed out", result)


class ConversionCancelled(ConversionError):
    """调用方主动取消"""

    def __init__(self, reason: str, result: ConversionResult | None = None) -> None:
        super().__init__(f"conversion cancelled: {reason}", result)
        self.reason = reason


# ============ sheet 级错误 ============


class SheetError(ExcellentMdError):
    """单个 sheet 的可恢复错误，携带出错时已扫描的行列数"""

    def __init__(self, message: str, row_count: int = 0, col_count: int = 0) -> None:
        super().__init__(message)
        self.row_count = row_count
        self.col_count = col_count


class SheetTooLarge(SheetError):
    """单元格数量超过单 sheet 上限"""

    def __init__(self, row_count: int = 0, col_count: int = 0) -> None:
        super().__init__("sheet exceeds cell limit", row_count, col_count)


class SheetExtractionError(SheetError):
    """sheet 读取失败（结构损坏等）"""

    def __init__(
        self, sheet_name: str, cause: object, row_count: int = 0, col_count: int = 0
    ) -> None:
        super().__init__(
            f"unable to read sheet '{sheet_name}': {cause}", row_count, col_count
        )
        self.sheet_name = sheet_name


# ============ 其他 ============


class WorkbookReadError(ExcellentMdError):
    """工作簿适配层无法读取行或公式"""


class UploadRejected(ExcellentMdError):
    """上传文件不符合要求"""
