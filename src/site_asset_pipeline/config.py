"""统一配置管理模块。

提供素材流水线的全局配置管理，包括默认值、环境变量支持等。
"""

import os
from dataclasses import dataclass, field
from typing import Any

from .models.constants import (
    EXCLUDED_ROOT_DIRS,
    INDUSTRIES,
    TEMPLATE_VARIANTS,
)


@dataclass(frozen=True)
class PipelineDefaults:
    """目录结构与发现规则相关的默认配置"""

    # 投放区目录名（相对项目根目录）
    DROP_ZONE_NAME: str = "_raw_assets"

    # 行业列表，顺序即前缀匹配优先级
    INDUSTRIES: tuple[str, ...] = INDUSTRIES

    # 模板变体目录
    TEMPLATE_VARIANTS: tuple[str, ...] = TEMPLATE_VARIANTS
    EXCLUDED_DIRS: frozenset[str] = field(default_factory=lambda: EXCLUDED_ROOT_DIRS)

    # 行业内的素材目录
    ASSET_DIR: str = "assets/images"
    MANIFEST_NAME: str = "manifest.json"

    # 报告输出（项目根目录）
    REPORT_JSON: str = "asset-inventory.json"
    REPORT_MARKDOWN: str = "asset-report.md"


@dataclass(frozen=True)
class EncodingDefaults:
    """编码相关的默认配置"""

    JPEG_QUALITY: int = 80
    WEBP_QUALITY: int = 75
    AVIF_QUALITY: int = 75
    PNG_COMPRESS_LEVEL: int = 9

    def get_quality(self, format_name: str) -> int | None:
        """获取格式的默认质量，PNG 无质量概念返回 None"""
        match format_name.upper():
            case "JPEG":
                return self.JPEG_QUALITY
            case "WEBP":
                return self.WEBP_QUALITY
            case "AVIF":
                return self.AVIF_QUALITY
            case _:
                return None

    def get_format_defaults(self, format_name: str) -> dict[str, Any]:
        """获取格式特定的默认参数"""
        defaults = {
            "JPEG": {
                "quality": self.JPEG_QUALITY,
                "optimize": True,
                "progressive": True,
            },
            "WEBP": {
                "quality": self.WEBP_QUALITY,
                "method": 6,
            },
            "AVIF": {
                "quality": self.AVIF_QUALITY,
            },
            "PNG": {
                "compress_level": self.PNG_COMPRESS_LEVEL,
                "optimize": True,
            },
        }
        return defaults.get(format_name.upper(), {})


@dataclass(frozen=True)
class LoggingDefaults:
    """日志相关的默认配置"""

    # 日志级别
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # 文件日志
    ENABLE_FILE_LOGGING: bool = False
    LOG_FILE_PATH: str = "site_asset_pipeline.log"
    LOG_FILE_MAX_SIZE: int = 10 * 1024 * 1024  # 10MB
    LOG_FILE_BACKUP_COUNT: int = 5


class AppConfig:
    """应用程序配置管理器

    支持环境变量覆盖默认配置
    """

    def __init__(self):
        self.pipeline = PipelineDefaults()
        self.encoding = EncodingDefaults()
        self.logging = LoggingDefaults()

        # 从环境变量加载配置
        self._load_from_env()

    def _load_from_env(self):
        """从环境变量加载配置"""
        # 目录配置
        if drop_zone := os.getenv("SAP_DROP_ZONE"):
            object.__setattr__(self.pipeline, "DROP_ZONE_NAME", drop_zone)

        if industries := os.getenv("SAP_INDUSTRIES"):
            ordered = tuple(s.strip() for s in industries.split(",") if s.strip())
            if ordered:
                object.__setattr__(self.pipeline, "INDUSTRIES", ordered)

        # 编码配置
        if jpeg_quality := os.getenv("SAP_JPEG_QUALITY"):
            object.__setattr__(self.encoding, "JPEG_QUALITY", int(jpeg_quality))

        if webp_quality := os.getenv("SAP_WEBP_QUALITY"):
            object.__setattr__(self.encoding, "WEBP_QUALITY", int(webp_quality))

        if avif_quality := os.getenv("SAP_AVIF_QUALITY"):
            object.__setattr__(self.encoding, "AVIF_QUALITY", int(avif_quality))

        # 日志配置
        if log_level := os.getenv("SAP_LOG_LEVEL"):
            object.__setattr__(self.logging, "LOG_LEVEL", log_level.upper())

        if enable_file_log := os.getenv("SAP_ENABLE_FILE_LOGGING"):
            object.__setattr__(
                self.logging,
                "ENABLE_FILE_LOGGING",
                enable_file_log.lower() in ("true", "1", "yes"),
            )


# 全局配置实例
config = AppConfig()


def get_config() -> AppConfig:
    """获取全局配置实例"""
    return config


def reset_config():
    """重置配置（主要用于测试）"""
    global config
    config = AppConfig()
