"""数据模型包。

定义素材流水线各阶段使用的数据结构和常量表。
"""

from .assets import FilenameParts, RawAsset, SkipReason, SkipRecord
from .classification import (
    CategoryMatch,
    CategoryRule,
    ClassificationResult,
    ContentType,
    ContentTypeResult,
    FormatRecommendation,
    ImageCategory,
)
from .constants import (
    ASSET_PATH_PREFIX,
    INDUSTRIES,
    SUPPORTED_EXTENSIONS,
    TEMPLATE_VARIANTS,
    ImageFormats,
    get_asset_type,
    get_extension,
    get_format_alias,
)
from .image_metrics import ImageMetrics
from .manifest import (
    AssetInventory,
    AssetManifest,
    AssetReference,
    IndustryAudit,
    ManifestImage,
    TemplateAudit,
)
from .results import (
    AssetStatus,
    PipelineSummary,
    ProcessedAsset,
    ReferenceMapping,
    RewriteReport,
    RewriteResult,
    StageReport,
)
from .transform_spec import (
    TRANSFORM_SPECS,
    VARIANT_SUFFIXES,
    TransformSpec,
    get_transform_spec,
)


__all__ = [
    "ASSET_PATH_PREFIX",
    "INDUSTRIES",
    "SUPPORTED_EXTENSIONS",
    "TEMPLATE_VARIANTS",
    "TRANSFORM_SPECS",
    "VARIANT_SUFFIXES",
    "AssetInventory",
    "AssetManifest",
    "AssetReference",
    "AssetStatus",
    "CategoryMatch",
    "CategoryRule",
    "ClassificationResult",
    "ContentType",
    "ContentTypeResult",
    "FilenameParts",
    "FormatRecommendation",
    "ImageCategory",
    "ImageFormats",
    "ImageMetrics",
    "IndustryAudit",
    "ManifestImage",
    "PipelineSummary",
    "ProcessedAsset",
    "RawAsset",
    "ReferenceMapping",
    "RewriteReport",
    "RewriteResult",
    "SkipReason",
    "SkipRecord",
    "StageReport",
    "TemplateAudit",
    "TransformSpec",
    "get_asset_type",
    "get_extension",
    "get_format_alias",
    "get_transform_spec",
]
