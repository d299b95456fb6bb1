"""
业务处理器 - Excel 转 Markdown
使用类封装状态，消除全局变量
"""

import json
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from excellent_md.core.config import get_settings
from excellent_md.core.errors import ConversionError, ConversionTimeout, UploadRejected
from excellent_md.core.metrics import InMemoryMetrics
from excellent_md.core.models import ConversionResult
from excellent_md.core.service import ConversionService

type HandlerOutput = tuple[str, str, str, str | None, str]


@dataclass
class ExcelConvertHandler:
    """Excel 转换处理器"""

    service: ConversionService
    metrics: InMemoryMetrics | None = None
    output_dir: Path = field(default_factory=lambda: Path(tempfile.mkdtemp()))

    @classmethod
    def from_settings(cls) -> "ExcelConvertHandler":
        """按全局配置创建处理器"""
        settings = get_settings()
        metrics = InMemoryMetrics() if settings.enable_metrics else None
        service = ConversionService.from_settings(settings, metrics=metrics)
        return cls(service=service, metrics=metrics)

    def process(self, excel_file: str | Path | None) -> HandlerOutput:
        """处理上传的 Excel 文件

        返回 (Markdown 预览, Markdown 原文, JSON 结果, 下载文件路径, 状态)
        """
        if excel_file is None:
            return "", "", "", None, "⚠️ 请先上传 Excel 文件"

        source_path = Path(getattr(excel_file, "name", excel_file))
        try:
            data = source_path.read_bytes()
        except OSError as e:
            logger.error(f"读取上传文件失败: {e}")
            return "", "", "", None, "❌ 无法读取上传文件"

        try:
            result = self.service.convert(source_path.name, data)
        except UploadRejected as e:
            return "", "", "", None, f"❌ {e}"
        except ConversionTimeout:
            return "", "", "", None, "⏱️ 转换超时，请尝试更小的文件"
        except ConversionError as e:
            return "", "", "", None, f"❌ 转换失败: {e}"

        md_path = self._save_markdown(source_path, result)
        result_json = json.dumps({"ok": True, **result.to_dict()}, ensure_ascii=False, indent=2)
        return (
            result.combined_markdown,
            result.combined_markdown,
            result_json,
            str(md_path) if md_path else None,
            self._build_status_message(source_path, result),
        )

    def stats(self) -> dict[str, int]:
        """返回统计计数"""
        if self.metrics is None:
            return {}
        return self.metrics.snapshot()

    def _save_markdown(self, source_path: Path, result: ConversionResult) -> Path | None:
        """保存 Markdown 文件供下载"""
        md_path = self.output_dir / f"{source_path.stem}.md"
        try:
            md_path.write_text(result.combined_markdown, encoding="utf-8")
        except OSError as e:
            logger.error(f"写入文件失败: {e}")
            return None
        return md_path

    def _build_status_message(self, source_path: Path, result: ConversionResult) -> str:
        """构建状态消息"""
        meta = result.meta
        lines = [
            f"✅ 处理完成: {source_path.name}",
            f"📄 Sheet 总数: {meta.sheet_count}",
            f"🔢 已处理: {meta.processed} | 跳过: {meta.skipped_count}",
        ]
        for skipped in result.skipped:
            lines.append(f"   ⏭️ {skipped.name}: {skipped.reason}")
        for sheet in result.sheets:
            if sheet.error:
                lines.append(f"   ❌ {sheet.name}: {sheet.error}")
            else:
                lines.append(f"   📊 {sheet.name}: {sheet.row_count} 行 x {sheet.col_count} 列")
            for warning in sheet.warnings:
                lines.append(f"      ⚠️ {warning}")
        return "\n".join(lines)


# 全局处理器实例（用于 Gradio 回调）
_handler: ExcelConvertHandler | None = None


def _get_handler() -> ExcelConvertHandler:
    """获取处理器实例"""
    global _handler
    if _handler is None:
        _handler = ExcelConvertHandler.from_settings()
    return _handler


def process_excel(excel_file) -> HandlerOutput:
    """处理 Excel 文件（Gradio 回调）"""
    return _get_handler().process(excel_file)


def get_stats() -> dict[str, int]:
    """获取统计计数（Gradio 回调）"""
    return _get_handler().stats()
