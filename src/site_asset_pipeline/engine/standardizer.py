"""标准化阶段。

为行业素材目录中的每张原图按类别生成固定尺寸的变体，变体与原图放在同一目录。
"""

from pathlib import Path

from ..config import AppConfig, get_config
from ..core.classifier import detect_category
from ..core.transformer import AssetTransformer
from ..models.assets import SkipReason
from ..models.results import StageReport
from ..models.transform_spec import get_transform_spec
from ..utils.file_helpers import discover_industry_dirs, find_image_files
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter
from ..utils.naming_helpers import FileNamingStrategy


logger = get_logger()

STAGE_NAME = "optimize"


class StandardizationStage:
    """按类别规格生成标准化变体"""

    def __init__(
        self,
        root: str | Path,
        settings: AppConfig | None = None,
        transformer: AssetTransformer | None = None,
    ) -> None:
        self.root = Path(root)
        self.settings = settings or get_config()
        self.transformer = transformer or AssetTransformer(
            encoding=self.settings.encoding
        )

    def industry_dirs(self) -> list[Path]:
        pipeline = self.settings.pipeline
        return discover_industry_dirs(
            self.root,
            pipeline.ASSET_DIR,
            {*pipeline.EXCLUDED_DIRS, pipeline.DROP_ZONE_NAME},
        )

    def run(self) -> StageReport:
        report = StageReport(stage=STAGE_NAME, success=True)
        for industry_dir in self.industry_dirs():
            report.extend(self.standardize_industry(industry_dir))
        return report

    def standardize_industry(self, industry_dir: Path) -> StageReport:
        """处理单个行业的素材目录（不递归）"""
        report = StageReport(stage=STAGE_NAME, success=True)
        images_dir = industry_dir / self.settings.pipeline.ASSET_DIR

        for file_path in find_image_files(images_dir, recursive=False):
            if FileNamingStrategy.is_variant(file_path.stem):
                logger.debug(
                    MessageFormatter.skipped(
                        file_path.name, SkipReason.ALREADY_VARIANT.value
                    )
                )
                report.skip(file_path.name, SkipReason.ALREADY_VARIANT)
                continue

            category = detect_category(file_path.name, industry_dir.name).category
            spec = get_transform_spec(category)
            if spec is None:
                logger.warning(
                    MessageFormatter.skipped(
                        file_path.name, SkipReason.UNDETECTED_CATEGORY.value
                    )
                )
                report.skip(file_path.name, SkipReason.UNDETECTED_CATEGORY)
                continue

            report.add(self.transformer.transform(file_path, spec))

        return report
