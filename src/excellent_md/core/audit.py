"""
转换审计记录
每次转换调用结束后写入一条记录，写入失败只记录日志，不影响转换结果
"""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field

from .models import ConversionResult


class SheetRecord(BaseModel):
    """单个 sheet 的审计信息"""

    name: str
    row_count: int
    col_count: int
    warnings: list[str] = Field(default_factory=list)
    error: str | None = None


class ConversionRecord(BaseModel):
    """一次转换调用的审计信息"""

    filename: str
    sheet_count: int
    processed: int
    skipped: int
    duration_ms: int
    error: str | None = None
    sheets: list[SheetRecord] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


def build_record(
    filename: str,
    result: ConversionResult | None,
    duration_ms: int,
    error: Exception | None = None,
) -> ConversionRecord:
    """由转换结果（或致命错误附带的空壳结果）构建审计记录"""
    result = result or ConversionResult()
    return ConversionRecord(
        filename=filename,
        sheet_count=result.meta.sheet_count,
        processed=result.meta.processed,
        skipped=result.meta.skipped_count,
        duration_ms=duration_ms,
        error=str(error) if error else None,
        sheets=[
            SheetRecord(
                name=sheet.name,
                row_count=sheet.row_count,
                col_count=sheet.col_count,
                warnings=list(sheet.warnings),
                error=sheet.error,
            )
            for sheet in result.sheets
        ],
    )


class AuditSink(ABC):
    """审计记录写入接口"""

    @abstractmethod
    def record(self, record: ConversionRecord) -> None:
        """写入一条记录"""
        ...

    def close(self) -> None:
        """释放资源"""


class LoggingAuditSink(AuditSink):
    """只写日志"""

    def record(self, record: ConversionRecord) -> None:
        logger.info(
            f"审计: {record.filename} | sheets={record.sheet_count} "
            f"processed={record.processed} skipped={record.skipped} "
            f"耗时={record.duration_ms}ms"
            + (f" | error={record.error}" if record.error else "")
        )


@dataclass
class JsonlAuditSink(AuditSink):
    """追加写入 JSON Lines 文件"""

    path: Path
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def record(self, record: ConversionRecord) -> None:
        line = record.model_dump_json()
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")


def create_audit_sink(path: Path | None) -> AuditSink:
    """根据配置创建审计写入器"""
    if path is None:
        return LoggingAuditSink()
    return JsonlAuditSink(path=Path(path))


def record_safely(sink: AuditSink, record: ConversionRecord) -> bool:
    """写入审计记录，失败时记录日志并返回 False"""
    try:
        sink.record(record)
    except Exception:
        logger.exception(f"审计记录写入失败: {record.filename}")
        return False
    return True
