"""
Excel 转 Markdown 转换器
遍历工作簿中的所有 sheet，生成每个 sheet 的 Markdown 表格和合并文档

功能：
1. sheet 数量上限（整个工作簿拒绝）
2. 隐藏 sheet 过滤
3. 单个 sheet 失败不影响其他 sheet
4. 超时 / 取消时中止整个转换
5. 合并所有 sheet 为一个 Markdown 文档
"""

from collections.abc import Callable
from dataclasses import dataclass, field

from loguru import logger

from ..cancellation import CancellationToken
from ..errors import ConversionError, SheetError, TooManySheets
from ..metrics import ConversionMetrics, NullMetrics
from ..models import (
    ConversionOptions,
    ConversionResult,
    SheetOutcome,
    SheetVisibility,
    SkippedSheet,
)
from ..workbook import Workbook, open_workbook
from .extractor import extract_sheet
from .renderer import sheet_to_markdown

HIDDEN_SHEET_REASON = "hidden sheet"


@dataclass
class MarkdownConverter:
    """工作簿 Markdown 转换器"""

    options: ConversionOptions = field(default_factory=ConversionOptions)
    metrics: ConversionMetrics = field(default_factory=NullMetrics)
    workbook_opener: Callable[[bytes], Workbook] = open_workbook

    # ===== 模板方法 =====
    def convert(self, data: bytes, token: CancellationToken | None = None) -> ConversionResult:
        """执行转换，致命错误以 ConversionError 抛出（附带空壳结果）"""
        token = token or CancellationToken()
        result = ConversionResult()

        try:
            token.check()
            with self.workbook_opener(data) as workbook:
                self._convert_workbook(workbook, token, result)
        except ConversionError as err:
            err.result = result
            logger.error(f"转换中止: {err}")
            raise

        # 只统计成功完成的转换中的 sheet
        for outcome in result.sheets:
            self.metrics.sheet_processed(outcome)

        logger.info(
            f"转换完成: {result.meta.processed} 个 sheet 已处理, "
            f"{result.meta.skipped_count} 个跳过, {result.sheet_errors} 个失败"
        )
        return result

    def _convert_workbook(
        self, workbook: Workbook, token: CancellationToken, result: ConversionResult
    ) -> None:
        """转换整个工作簿"""
        sheet_names = workbook.sheet_names()
        result.meta.sheet_count = len(sheet_names)

        if 0 < self.options.max_sheets < len(sheet_names):
            raise TooManySheets()

        for name in sheet_names:
            token.check()

            if self._should_skip(workbook, name):
                logger.info(f"跳过隐藏 sheet: {name}")
                result.skipped.append(SkippedSheet(name=name, reason=HIDDEN_SHEET_REASON))
                continue

            outcome = self._convert_sheet(workbook, name, token)
            result.sheets.append(outcome)

        result.meta.processed = len(result.sheets)
        result.meta.skipped_count = len(result.skipped)
        result.combined_markdown = combine_markdown(result.sheets)

    def _should_skip(self, workbook: Workbook, name: str) -> bool:
        """隐藏且未要求包含隐藏 sheet 时跳过"""
        if self.options.include_hidden_sheets:
            return False
        return workbook.visibility(name) is SheetVisibility.HIDDEN

    def _convert_sheet(
        self, workbook: Workbook, name: str, token: CancellationToken
    ) -> SheetOutcome:
        """转换单个 sheet，sheet 级错误记录在结果中"""
        try:
            extraction = extract_sheet(workbook, name, self.options, token)
        except SheetError as err:
            logger.warning(f"sheet '{name}' 处理失败: {err}")
            return SheetOutcome(
                name=name,
                error=str(err),
                row_count=err.row_count,
                col_count=err.col_count,
            )

        table = sheet_to_markdown(extraction.rows)
        logger.debug(f"sheet '{name}': {table.row_count} 行 x {table.col_count} 列")
        return SheetOutcome(
            name=name,
            markdown=table.markdown,
            warnings=extraction.warnings,
            row_count=table.row_count,
            col_count=table.col_count,
        )


def combine_markdown(sheets: list[SheetOutcome]) -> str:
    """合并多个 sheet 的内容"""
    blocks: list[str] = []
    for sheet in sheets:
        if not sheet.name:
            continue
        blocks.append(f"## {sheet.name}")
        if sheet.error:
            blocks.append(f"> Error: {sheet.error}")
            blocks.append("")
            continue
        blocks.extend(f"> Warning: {warning}" for warning in sheet.warnings)
        blocks.append(sheet.markdown)
        blocks.append("")
    return "\n".join(blocks)


def convert_workbook(
    data: bytes,
    options: ConversionOptions | None = None,
    token: CancellationToken | None = None,
    metrics: ConversionMetrics | None = None,
) -> ConversionResult:
    """将工作簿字节转换为 Markdown（兼容函数接口）"""
    converter = MarkdownConverter(
        options=options or ConversionOptions(),
        metrics=metrics or NullMetrics(),
    )
    return converter.convert(data, token)
