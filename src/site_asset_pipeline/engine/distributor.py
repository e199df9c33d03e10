"""分发阶段。

扫描投放区，按文件名前缀把原始图片分发到 <industry>/assets/images，
并按内容类型推荐的格式重新编码。
"""

from collections.abc import Sequence
from pathlib import Path

from ..config import AppConfig, get_config
from ..core.classifier import ContentClassifier
from ..core.filename_parser import parse_filename, to_raw_asset
from ..core.transformer import AssetTransformer
from ..exceptions import ErrorHandler, ProcessingError, ValidationError
from ..models.assets import RawAsset, SkipReason, SkipRecord
from ..models.constants import (
    ICON_DIR_NAME,
    ICON_EXTENSIONS,
    ICON_FOLDER_INDUSTRIES,
    get_format_alias,
)
from ..models.results import StageReport
from ..utils.file_helpers import find_image_files
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter
from ..utils.naming_helpers import FileNamingStrategy


logger = get_logger()

STAGE_NAME = "distribute"

# 分发阶段总会生成的格式
_ALWAYS_FORMATS = ("WEBP",)


class DistributionStage:
    """投放区分发阶段"""

    def __init__(
        self,
        root: str | Path,
        settings: AppConfig | None = None,
        classifier: ContentClassifier | None = None,
        transformer: AssetTransformer | None = None,
    ) -> None:
        self.root = Path(root)
        self.settings = settings or get_config()
        self.classifier = classifier or ContentClassifier()
        self.transformer = transformer or AssetTransformer(
            encoding=self.settings.encoding
        )

    @property
    def drop_zone(self) -> Path:
        return self.root / self.settings.pipeline.DROP_ZONE_NAME

    def run(self, industry: str | None = None) -> StageReport:
        """分发投放区中的所有素材

        Args:
            industry: 只处理指定行业，None 表示全部

        Returns:
            StageReport: 分发结果
        """
        industries = self.settings.pipeline.INDUSTRIES
        if industry and industry not in industries:
            raise ValidationError(
                MessageFormatter.validation_error("industry", industry, "未知行业")
            )

        report = StageReport(stage=STAGE_NAME, success=True)

        if not self.drop_zone.is_dir():
            return self._create_drop_zone(report)

        for file_path in find_image_files(self.drop_zone, recursive=True):
            parsed = parse_filename(file_path.name, industries)
            if isinstance(parsed, SkipRecord):
                logger.warning(
                    MessageFormatter.skipped(file_path.name, parsed.reason.value)
                )
                report.skipped.append(parsed)
                continue

            asset = to_raw_asset(file_path, parsed)
            if industry and asset.industry != industry:
                logger.info(
                    MessageFormatter.skipped(
                        file_path.name, SkipReason.INDUSTRY_NOT_SELECTED.value
                    )
                )
                report.skip(file_path.name, SkipReason.INDUSTRY_NOT_SELECTED, industry)
                continue

            industry_dir = self.root / asset.industry
            if not industry_dir.is_dir():
                logger.warning(
                    MessageFormatter.skipped(
                        file_path.name, SkipReason.INDUSTRY_DIRECTORY_MISSING.value
                    )
                )
                report.skip(
                    file_path.name,
                    SkipReason.INDUSTRY_DIRECTORY_MISSING,
                    str(industry_dir),
                )
                continue

            self.distribute_asset(asset, industry_dir, report)

        return report

    def distribute_asset(
        self, asset: RawAsset, industry_dir: Path, report: StageReport
    ) -> None:
        """解码一次，分类后按推荐格式逐个编码"""
        try:
            img = self.transformer.load_image(asset.path)
        except (ProcessingError, OSError) as e:
            report.add(ErrorHandler.handle_asset_error(e, asset.path, "素材分发"))
            return

        with img:
            metrics = self.classifier.extractor.from_image(
                img, get_format_alias(asset.extension)
            )
            classification = self.classifier.classify_metrics(
                metrics, asset.path.name, asset.industry
            )
            output_dir = industry_dir / self.settings.pipeline.ASSET_DIR
            category = classification.category.category

            recommended = classification.recommendations.formats
            if "svg" in recommended:
                if self.can_vectorize(asset, classification.is_icon):
                    report.add(
                        self.transformer.vectorize(
                            asset.path,
                            output_dir
                            / FileNamingStrategy.distributed_name(asset, "SVG"),
                            category,
                        )
                    )
                else:
                    logger.debug(
                        f"只有 PNG 图标可以矢量化，跳过 SVG: {asset.path.name}"
                    )

            formats = self.output_formats(recommended)
            for format_name in formats:
                output_path = output_dir / FileNamingStrategy.distributed_name(
                    asset, format_name
                )
                report.add(
                    self.transformer.convert(
                        img,
                        asset.path,
                        output_path,
                        format_name,
                        category=category,
                    )
                )

    @staticmethod
    def can_vectorize(asset: RawAsset, is_icon: bool) -> bool:
        """只有被判定为图标的 PNG 源文件才描摹为 SVG"""
        return is_icon and get_format_alias(asset.extension) == "PNG"

    def output_formats(self, recommended: Sequence[str]) -> list[str]:
        """推荐格式中可写的光栅格式，WEBP 总是包含在内"""
        formats: list[str] = []
        can_encode = self.transformer.format_processor.can_encode
        for name in (*recommended, *_ALWAYS_FORMATS):
            format_name = get_format_alias(name)
            if format_name not in formats and can_encode(format_name):
                formats.append(format_name)
        return formats

    def _create_drop_zone(self, report: StageReport) -> StageReport:
        self.drop_zone.mkdir(parents=True, exist_ok=True)
        instructions = MessageFormatter.drop_zone_instructions(
            self.drop_zone, self.settings.pipeline.INDUSTRIES
        )
        logger.warning(instructions)
        print(instructions)
        report.drop_zone_created = True
        report.skip(str(self.drop_zone), SkipReason.DROP_ZONE_MISSING)
        return report

    def rename_icons(self) -> list[Path]:
        """把投放区 icons/<目录> 下的文件重命名为 <industry>-icon-<base><ext>

        目录名通过 ICON_FOLDER_INDUSTRIES 映射到行业，未知目录记录后跳过。

        Returns:
            list[Path]: 重命名后的路径
        """
        icons_dir = self.drop_zone / ICON_DIR_NAME
        if not icons_dir.is_dir():
            logger.warning(MessageFormatter.directory_not_found(icons_dir))
            return []

        renamed: list[Path] = []
        for folder_path in sorted(icons_dir.iterdir()):
            if not folder_path.is_dir():
                continue
            industry = ICON_FOLDER_INDUSTRIES.get(folder_path.name)
            if industry is None:
                logger.warning(
                    MessageFormatter.skipped(folder_path.name, "未知图标目录")
                )
                continue

            logger.info(f"处理图标目录 {folder_path.name} -> {industry}")
            for file_path in sorted(folder_path.rglob("*")):
                if (
                    not file_path.is_file()
                    or file_path.suffix.lower() not in ICON_EXTENSIONS
                ):
                    continue
                if file_path.name.startswith(f"{industry}-"):
                    logger.debug(f"已符合命名规则: {file_path.name}")
                    continue

                target = file_path.with_name(
                    FileNamingStrategy.icon_name(industry, file_path)
                )
                if target.exists():
                    logger.warning(
                        MessageFormatter.skipped(
                            file_path.name, f"目标已存在 {target.name}"
                        )
                    )
                    continue

                file_path.rename(target)
                logger.info(f"已重命名图标 {file_path.name} -> {target.name}")
                renamed.append(target)

        return renamed
