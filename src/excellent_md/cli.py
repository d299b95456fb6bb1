"""
命令行入口
"""

import argparse
import json
import sys
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from .core.cancellation import CancellationToken
from .core.config import get_settings
from .core.errors import ConversionError, UploadRejected
from .core.logging_config import configure_logging
from .core.models import OptionsRequest
from .core.service import ConversionService


def build_parser() -> argparse.ArgumentParser:
    """构建命令行参数解析器"""
    parser = argparse.ArgumentParser(
        prog="excellent-md",
        description="Excel (.xlsx) 转 Markdown 表格",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例:
  excellent-md input.xlsx                    # 输出到标准输出
  excellent-md input.xlsx -o output.md
  excellent-md input.xlsx --json             # 输出完整 JSON 结果
  excellent-md input.xlsx --include-hidden --max-sheets 0
        """,
    )
    parser.add_argument("excel_file", type=Path, help="要转换的 Excel 文件路径")
    parser.add_argument("-o", "--output", type=Path, default=None, help="输出文件路径")
    parser.add_argument("--json", action="store_true", help="输出 JSON 结果而不是 Markdown")
    parser.add_argument(
        "--include-hidden", action="store_true", default=None, help="包含隐藏的 sheet"
    )
    parser.add_argument("--max-sheets", type=int, default=None, help="最大 sheet 数（0 不限制）")
    parser.add_argument(
        "--max-cells", type=int, default=None, help="每个 sheet 最大单元格数（0 不限制）"
    )
    parser.add_argument("--timeout", type=float, default=None, help="超时秒数")
    parser.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")
    return parser


def main(argv: list[str] | None = None) -> int:
    """命令行入口"""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings, level="DEBUG" if args.verbose else "WARNING")

    try:
        request = OptionsRequest(
            include_hidden_sheets=(
                settings.include_hidden_sheets
                if args.include_hidden is None
                else args.include_hidden
            ),
            max_sheets=settings.max_sheets if args.max_sheets is None else args.max_sheets,
            max_cells_per_sheet=(
                settings.max_cells_per_sheet if args.max_cells is None else args.max_cells
            ),
            timeout_seconds=(
                settings.conversion_timeout_seconds if args.timeout is None else args.timeout
            ),
        )
    except ValidationError as e:
        print(f"参数错误: {e}", file=sys.stderr)
        return 2

    service = ConversionService.from_settings(settings)

    try:
        data = args.excel_file.read_bytes()
        result = service.convert(
            args.excel_file.name,
            data,
            token=CancellationToken.with_timeout(request.timeout_seconds),
            options=request.to_options(),
        )
    except (OSError, UploadRejected, ConversionError) as e:
        logger.debug(f"转换失败: {e!r}")
        print(f"错误: {e}", file=sys.stderr)
        return 1

    if args.json:
        content = json.dumps(result.to_dict(), ensure_ascii=False, indent=2)
    else:
        content = result.combined_markdown

    if args.output:
        args.output.write_text(content, encoding="utf-8")
    else:
        sys.stdout.write(content)
        if not content.endswith("\n"):
            sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
