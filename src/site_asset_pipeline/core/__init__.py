"""核心模块包。

文件名解析、内容分类、图像转换、模板改写、清单与审计。
"""

from .audit import audit_templates, write_reports
from .classifier import (
    ContentClassifier,
    IconScoreWeights,
    classify_content,
    detect_category,
    recommend_formats,
)
from .filename_parser import parse_filename, to_raw_asset
from .formats import FormatProcessor, get_save_parameters
from .manifest import build_manifest, generate_manifest
from .metrics import ImageMetricsExtractor
from .rewriter import TemplateRewriter, rewrite_references, rewrite_template_file
from .transformer import AssetTransformer


__all__ = [
    "AssetTransformer",
    "ContentClassifier",
    "FormatProcessor",
    "IconScoreWeights",
    "ImageMetricsExtractor",
    "TemplateRewriter",
    "audit_templates",
    "build_manifest",
    "classify_content",
    "detect_category",
    "generate_manifest",
    "get_save_parameters",
    "parse_filename",
    "recommend_formats",
    "rewrite_references",
    "rewrite_template_file",
    "to_raw_asset",
    "write_reports",
]
