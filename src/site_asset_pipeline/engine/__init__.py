"""流水线阶段与编排模块。

分发、标准化、模板改写各为一个阶段，由 AssetPipeline 顺序编排。
"""

from .distributor import DistributionStage
from .pipeline import AssetPipeline
from .publisher import PublicationStage, build_reference_mappings
from .standardizer import StandardizationStage


__all__ = [
    "AssetPipeline",
    "DistributionStage",
    "PublicationStage",
    "StandardizationStage",
    "build_reference_mappings",
]
