"""
应用配置管理模块
使用 pydantic-settings 统一管理环境变量和配置
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import ConversionOptions


class Settings(BaseSettings):
    """应用配置"""

    model_config = SettingsConfigDict(
        env_prefix="EXCELLENT_MD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # 上传限制
    max_upload_mb: int = Field(default=10, ge=1, le=1024)

    # 转换限制（0 表示不限制）
    max_sheets: int = Field(default=50, ge=0)
    max_cells_per_sheet: int = Field(default=200_000, ge=0)
    conversion_timeout_seconds: float = Field(default=10.0, gt=0)
    include_hidden_sheets: bool = Field(default=False)

    # 审计日志（JSON Lines），为空时只写日志
    audit_log_path: Path | None = Field(default=None)

    # 统计面板
    enable_metrics: bool = Field(default=False)

    # 日志配置
    log_level: str = Field(default="INFO")
    log_format: str = Field(
        default="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>"
    )

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb << 20

    def to_options(self) -> ConversionOptions:
        """构建单次转换使用的选项"""
        return ConversionOptions(
            include_hidden_sheets=self.include_hidden_sheets,
            max_sheets=self.max_sheets,
            max_cells_per_sheet=self.max_cells_per_sheet,
        )


# 全局配置实例（懒加载）
_settings: Settings | None = None


def get_settings() -> Settings:
    """获取配置实例（单例模式）"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
