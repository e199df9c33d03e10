"""素材流水线编排。

distribute -> optimize -> update-templates -> manifest -> audit 严格按顺序执行，
每个素材处理完毕后才开始下一个。
"""

from pathlib import Path

from ..config import AppConfig, get_config
from ..core.audit import audit_templates, write_reports
from ..core.manifest import generate_manifest
from ..models.results import PipelineSummary, RewriteReport, StageReport
from ..utils.file_helpers import discover_industry_dirs
from ..utils.logging_helpers import get_logger
from .distributor import DistributionStage
from .publisher import PublicationStage
from .standardizer import StandardizationStage


logger = get_logger()


class AssetPipeline:
    """素材流水线

    各阶段也可以单独调用，对应独立的命令行入口。
    """

    def __init__(self, root: str | Path, settings: AppConfig | None = None) -> None:
        self.root = Path(root)
        self.settings = settings or get_config()
        self.distributor = DistributionStage(self.root, self.settings)
        self.standardizer = StandardizationStage(
            self.root, self.settings, transformer=self.distributor.transformer
        )
        self.publisher = PublicationStage(self.root, self.settings)

    def distribute(
        self, industry: str | None = None, rename_icons: bool = False
    ) -> StageReport:
        if rename_icons and self.distributor.drop_zone.is_dir():
            renamed = self.distributor.rename_icons()
            logger.info(f"重命名图标 {len(renamed)} 个")
        return self.distributor.run(industry)

    def standardize(self) -> StageReport:
        return self.standardizer.run()

    def publish(self, standardization: StageReport | None = None) -> RewriteReport:
        return self.publisher.run(standardization)

    def generate_manifests(self) -> list[Path]:
        """为每个行业写入 assets/manifest.json"""
        pipeline = self.settings.pipeline
        industry_dirs = discover_industry_dirs(
            self.root,
            pipeline.ASSET_DIR,
            {*pipeline.EXCLUDED_DIRS, pipeline.DROP_ZONE_NAME},
        )
        manifests = []
        for industry_dir in industry_dirs:
            path = generate_manifest(
                industry_dir, pipeline.ASSET_DIR, pipeline.MANIFEST_NAME
            )
            if path is not None:
                manifests.append(path)
        return manifests

    def audit(self) -> list[Path]:
        """清点模板素材并写入报告"""
        pipeline = self.settings.pipeline
        inventory = audit_templates(
            self.root,
            pipeline.TEMPLATE_VARIANTS,
            {*pipeline.EXCLUDED_DIRS, pipeline.DROP_ZONE_NAME},
        )
        return write_reports(
            inventory, self.root, pipeline.REPORT_JSON, pipeline.REPORT_MARKDOWN
        )

    def run(self, industry: str | None = None) -> PipelineSummary:
        """运行完整流水线

        投放区首次创建时只返回分发结果，其余阶段不执行。
        """
        summary = PipelineSummary(success=True)

        summary.distribution = self.distribute(industry)
        if summary.distribution.drop_zone_created:
            return summary

        summary.standardization = self.standardize()
        summary.rewrite = self.publish(summary.standardization)
        summary.manifests = self.generate_manifests()
        summary.reports = self.audit()

        logger.info(f"流水线完成，失败 {summary.get_failed_count()} 个素材")
        return summary
