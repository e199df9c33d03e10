"""多行业站点模板的离线图片素材流水线。

基于 Pillow 的素材分发、分类、标准化与模板引用改写。
"""

__version__ = "0.1.0"
__description__ = "多行业站点模板的离线图片素材流水线"

# 核心功能导出
from .engine.pipeline import AssetPipeline
from .models.results import PipelineSummary, ProcessedAsset, StageReport


__all__ = [
    "AssetPipeline",
    "PipelineSummary",
    "ProcessedAsset",
    "StageReport",
    "get_version",
]


def get_version() -> str:
    """获取版本号。"""
    return __version__
