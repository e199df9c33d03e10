"""发布阶段：把模板中的原图引用替换为标准化变体。"""

from pathlib import Path

from ..config import AppConfig, get_config
from ..core.classifier import detect_category
from ..core.rewriter import TemplateRewriter
from ..models.results import AssetStatus, ReferenceMapping, RewriteReport, StageReport
from ..models.transform_spec import get_transform_spec
from ..utils.file_helpers import discover_industry_dirs, find_image_files
from ..utils.logging_helpers import get_logger
from ..utils.naming_helpers import FileNamingStrategy


logger = get_logger()

_PUBLISHABLE = frozenset({AssetStatus.OPTIMIZED, AssetStatus.ALREADY_OPTIMIZED})


def build_reference_mappings(
    report: StageReport, asset_dir: str = "assets/images"
) -> dict[Path, ReferenceMapping]:
    """按行业目录汇总 源文件名 -> 变体文件名 的映射

    行业目录由源文件所在的素材目录反推得到。
    """
    depth = len(Path(asset_dir).parts)
    mappings: dict[Path, ReferenceMapping] = {}

    for result in report.results:
        if result.status not in _PUBLISHABLE:
            continue
        industry_dir = result.source_path.parents[depth]
        mapping = mappings.setdefault(industry_dir, ReferenceMapping())
        mapping.add(result.source_path.name, result.output_path.name)

    return mappings


def scan_reference_mappings(
    industry_dirs: list[Path], asset_dir: str = "assets/images"
) -> dict[Path, ReferenceMapping]:
    """不重新编码，直接按磁盘上已存在的变体构建映射"""
    mappings: dict[Path, ReferenceMapping] = {}

    for industry_dir in industry_dirs:
        mapping = ReferenceMapping()
        for file_path in find_image_files(industry_dir / asset_dir, recursive=False):
            if FileNamingStrategy.is_variant(file_path.stem):
                continue
            category = detect_category(file_path.name, industry_dir.name).category
            if (spec := get_transform_spec(category)) is None:
                continue
            variant = file_path.with_name(
                FileNamingStrategy.variant_name(file_path, spec)
            )
            if variant.is_file():
                mapping.add(file_path.name, variant.name)
        mappings[industry_dir] = mapping

    return mappings


class PublicationStage:
    """模板引用改写阶段"""

    def __init__(self, root: str | Path, settings: AppConfig | None = None) -> None:
        self.root = Path(root)
        self.settings = settings or get_config()
        self.rewriter = TemplateRewriter(self.settings.pipeline.TEMPLATE_VARIANTS)

    def run(self, standardization: StageReport | None = None) -> RewriteReport:
        """改写模板引用

        Args:
            standardization: 标准化阶段的结果；为 None 时按磁盘上的变体构建映射
        """
        pipeline = self.settings.pipeline
        if standardization is not None:
            mappings = build_reference_mappings(standardization, pipeline.ASSET_DIR)
        else:
            industry_dirs = discover_industry_dirs(
                self.root,
                pipeline.ASSET_DIR,
                {*pipeline.EXCLUDED_DIRS, pipeline.DROP_ZONE_NAME},
            )
            mappings = scan_reference_mappings(industry_dirs, pipeline.ASSET_DIR)

        logger.debug(f"待改写行业: {', '.join(d.name for d in mappings) or '无'}")
        return self.rewriter.rewrite_all(mappings)
