"""
Core 模块
"""

from .audit import (
    AuditSink,
    ConversionRecord,
    JsonlAuditSink,
    LoggingAuditSink,
    SheetRecord,
    build_record,
)
from .cancellation import CancellationToken
from .config import Settings, get_settings
from .errors import (
    ConversionCancelled,
    ConversionError,
    ConversionTimeout,
    ExcellentMdError,
    InvalidWorkbook,
    SheetError,
    SheetExtractionError,
    SheetTooLarge,
    TooManySheets,
    UploadRejected,
    WorkbookReadError,
)
from .excel2md import (
    EMPTY_SHEET_MESSAGE,
    MarkdownConverter,
    combine_markdown,
    convert_workbook,
    extract_sheet,
    normalize_rows,
    sheet_to_markdown,
)
from .metrics import ConversionMetrics, InMemoryMetrics, NullMetrics
from .models import (
    ConversionMeta,
    ConversionOptions,
    ConversionResult,
    OptionsRequest,
    SheetOutcome,
    SheetVisibility,
    SkippedSheet,
)
from .service import ConversionService
from .workbook import OpenpyxlWorkbook, Workbook, open_workbook

__all__ = [
    # 配置
    "Settings",
    "get_settings",
    # 转换器
    "MarkdownConverter",
    "ConversionService",
    "CancellationToken",
    # 工作簿
    "Workbook",
    "OpenpyxlWorkbook",
    "open_workbook",
    # 数据模型
    "ConversionMeta",
    "ConversionOptions",
    "ConversionResult",
    "OptionsRequest",
    "SheetOutcome",
    "SheetVisibility",
    "SkippedSheet",
    # 统计与审计
    "ConversionMetrics",
    "InMemoryMetrics",
    "NullMetrics",
    "AuditSink",
    "ConversionRecord",
    "JsonlAuditSink",
    "LoggingAuditSink",
    "SheetRecord",
    "build_record",
    # 异常
    "ExcellentMdError",
    "ConversionError",
    "InvalidWorkbook",
    "TooManySheets",
    "ConversionTimeout",
    "ConversionCancelled",
    "SheetError",
    "SheetTooLarge",
    "SheetExtractionError",
    "WorkbookReadError",
    "UploadRejected",
    # 函数接口
    "EMPTY_SHEET_MESSAGE",
    "combine_markdown",
    "convert_workbook",
    "extract_sheet",
    "normalize_rows",
    "sheet_to_markdown",
]
