"""素材清单与审计报告模型。"""

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field, computed_field


# ============================================================================
# 行业素材清单 <industry>/assets/manifest.json
# ============================================================================


class ManifestImage(BaseModel):
    """同一基础名称下的所有格式"""

    original: str = Field(description="首选原始文件名")
    formats: list[str] = Field(default_factory=list)
    sizes: dict[str, int] = Field(default_factory=dict)
    dimensions: tuple[int, int] | None = None


class FormatStats(BaseModel):
    count: int = 0
    total_size: int = 0


class ManifestStats(BaseModel):
    total_images: int = 0
    total_size: int = 0
    formats: dict[str, FormatStats] = Field(default_factory=dict)


class AssetManifest(BaseModel):
    """单个行业的素材清单"""

    version: str = "1.0.0"
    industry: str
    generated: datetime
    images: dict[str, ManifestImage] = Field(default_factory=dict)
    stats: ManifestStats = Field(default_factory=ManifestStats)


# ============================================================================
# 模板素材审计 asset-inventory.json / asset-report.md
# ============================================================================


class AssetReference(BaseModel):
    """模板中的一处素材引用"""

    src: str = Field(description="模板中出现的原始引用")
    resolved_path: Path | None = Field(None, description="解析后的文件路径")
    exists: bool = False
    type: str = Field("unknown", description="raster / vector / unknown")
    category: str = Field("other", description="语义类别")
    kind: str = Field("image", description="image / icon")


class TemplateAudit(BaseModel):
    """单个模板变体的审计结果"""

    template: str
    path: Path
    assets: list[AssetReference] = Field(default_factory=list)

    @property
    def images(self) -> list[AssetReference]:
        return [a for a in self.assets if a.kind == "image"]

    @property
    def icons(self) -> list[AssetReference]:
        return [a for a in self.assets if a.kind == "icon"]

    @computed_field
    def existing_count(self) -> int:
        return sum(1 for a in self.images if a.exists)

    @computed_field
    def missing_count(self) -> int:
        return sum(1 for a in self.images if not a.exists)


class IndustryAudit(BaseModel):
    industry: str
    templates: list[TemplateAudit] = Field(default_factory=list)


class AssetInventory(BaseModel):
    """所有行业、模板的素材清点结果"""

    generated: datetime
    industries: list[IndustryAudit] = Field(default_factory=list)

    def iter_assets(self):
        for industry in self.industries:
            for template in industry.templates:
                for asset in template.assets:
                    yield industry, template, asset

    def _images(self) -> list[AssetReference]:
        return [asset for _, _, asset in self.iter_assets() if asset.kind == "image"]

    @computed_field
    def total_images(self) -> int:
        return len(self._images())

    @computed_field
    def total_icons(self) -> int:
        return sum(1 for _, _, asset in self.iter_assets() if asset.kind == "icon")

    @computed_field
    def existing_assets(self) -> int:
        return sum(1 for asset in self._images() if asset.exists)

    @computed_field
    def missing_assets(self) -> int:
        return self.total_images - self.existing_assets

    @computed_field
    def coverage(self) -> float:
        """已存在图片的百分比（图标不计入）"""
        if self.total_images == 0:
            return 100.0
        return round(self.existing_assets / self.total_images * 100, 1)
