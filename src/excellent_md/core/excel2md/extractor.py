"""
Sheet 抽取器
逐行读取单个 sheet，执行单元格数量限制和取消检查，
同时记录合并单元格、公式、可见性等提示信息
"""

from loguru import logger

from ..cancellation import CancellationToken
from ..errors import SheetExtractionError, SheetTooLarge, WorkbookReadError
from ..models import ConversionOptions, SheetExtraction, SheetVisibility
from ..workbook import Workbook
from .normalizer import Row, trim_trailing_empty

MERGED_CELLS_WARNING = "Merged cells were flattened to their top-left value."
FORMULAS_WARNING = "Formulas were detected; output uses stored values."
VISIBILITY_WARNING = "Sheet visibility could not be determined; processed as visible."


def extract_sheet(
    workbook: Workbook,
    sheet_name: str,
    options: ConversionOptions,
    token: CancellationToken,
) -> SheetExtraction:
    """抽取单个 sheet 的行数据

    超时或取消时抛出 ConversionError 子类（整个转换中止），
    超过单元格上限抛出 SheetTooLarge，读取失败抛出 SheetExtractionError。
    """
    token.check()

    warnings: list[str] = []
    rows: list[Row] = []
    row_count = 0
    col_count = 0
    cell_count = 0
    formula_found = False

    try:
        if workbook.merged_ranges(sheet_name):
            warnings.append(MERGED_CELLS_WARNING)

        for row in workbook.iter_rows(sheet_name):
            token.check()
            row_count += 1

            trimmed = trim_trailing_empty(row)
            cell_count += len(trimmed)
            if 0 < options.max_cells_per_sheet < cell_count:
                raise SheetTooLarge(row_count, col_count)

            col_count = max(col_count, len(trimmed))
            rows.append(trimmed)

            if not formula_found:
                formula_found = workbook.row_has_formula(sheet_name, row_count)
    except WorkbookReadError as e:
        raise SheetExtractionError(sheet_name, e, row_count, col_count) from e

    if formula_found:
        warnings.append(FORMULAS_WARNING)

    if workbook.visibility(sheet_name) is SheetVisibility.INDETERMINATE:
        logger.debug(f"无法判断 sheet 可见性: {sheet_name}")
        warnings.append(VISIBILITY_WARNING)

    return SheetExtraction(rows=rows, warnings=warnings, row_count=row_count, col_count=col_count)
