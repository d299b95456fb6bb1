"""
转换服务
组合配置、超时、统计和审计，供 UI 和命令行调用
"""

import time
from dataclasses import dataclass, field
from pathlib import PurePath

from loguru import logger

from .audit import AuditSink, LoggingAuditSink, build_record, create_audit_sink, record_safely
from .cancellation import CancellationToken
from .config import Settings, get_settings
from .errors import ConversionError, UploadRejected
from .excel2md.converter import MarkdownConverter
from .metrics import ConversionMetrics, NullMetrics
from .models import ConversionOptions, ConversionResult

SUPPORTED_EXTENSION = ".xlsx"


@dataclass
class ConversionService:
    """转换服务"""

    settings: Settings = field(default_factory=get_settings)
    metrics: ConversionMetrics = field(default_factory=NullMetrics)
    audit_sink: AuditSink = field(default_factory=LoggingAuditSink)

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, metrics: ConversionMetrics | None = None
    ) -> "ConversionService":
        """按配置创建服务（审计写入器由 audit_log_path 决定）"""
        settings = settings or get_settings()
        return cls(
            settings=settings,
            metrics=metrics or NullMetrics(),
            audit_sink=create_audit_sink(settings.audit_log_path),
        )

    def validate_upload(self, filename: str, size: int) -> None:
        """校验上传文件的扩展名和大小"""
        if PurePath(filename).suffix.lower() != SUPPORTED_EXTENSION:
            raise UploadRejected("Only .xlsx files are supported.")
        if size > self.settings.max_upload_bytes:
            raise UploadRejected("file exceeds maximum size")

    def convert(
        self,
        filename: str,
        data: bytes,
        token: CancellationToken | None = None,
        options: ConversionOptions | None = None,
    ) -> ConversionResult:
        """执行一次转换，致命错误会在写入审计记录后重新抛出"""
        self.metrics.request_received()
        start = time.perf_counter()

        try:
            self.validate_upload(filename, len(data))
        except UploadRejected:
            self.metrics.conversion_failed()
            raise

        token = token or CancellationToken.with_timeout(self.settings.conversion_timeout_seconds)
        converter = MarkdownConverter(
            options=options or self.settings.to_options(),
            metrics=self.metrics,
        )

        logger.info(f"正在处理: {filename} ({len(data)} bytes)")
        try:
            result = converter.convert(data, token)
        except ConversionError as err:
            self.metrics.conversion_failed()
            self._audit(filename, err.result, start, err)
            raise

        self.metrics.conversion_succeeded()
        self._audit(filename, result, start, None)
        return result

    def _audit(
        self,
        filename: str,
        result: ConversionResult | None,
        start: float,
        error: Exception | None,
    ) -> None:
        """写入审计记录（失败不影响转换结果）"""
        duration_ms = int((time.perf_counter() - start) * 1000)
        record_safely(self.audit_sink, build_record(filename, result, duration_ms, error))
