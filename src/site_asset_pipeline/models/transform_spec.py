"""转换规格表。

每个语义类别对应固定的目标尺寸、质量、格式与文件名后缀。
"""

from types import MappingProxyType
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from .classification import ImageCategory


class TransformSpec(BaseModel):
    """单个类别的转换规格"""

    model_config = ConfigDict(frozen=True)

    category: ImageCategory
    width: int = Field(gt=0, description="目标宽度")
    height: int = Field(gt=0, description="目标高度")
    quality: int = Field(ge=1, le=100, description="编码质量")
    format: str = Field("WEBP", description="输出格式")
    suffix: str = Field(description="文件名后缀，如 _hero")
    without_enlargement: bool = Field(
        True, description="源图小于目标时不放大，输出不超过原始尺寸"
    )

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    def expected_size(self, source_size: tuple[int, int]) -> tuple[int, int]:
        """给定源尺寸时输出应有的尺寸

        cover 缩放后居中裁剪；启用 without_enlargement 时缩放比例不超过 1。
        """
        src_w, src_h = source_size
        if not self.without_enlargement or src_w <= 0 or src_h <= 0:
            return self.size

        scale = min(1.0, max(self.width / src_w, self.height / src_h))
        scaled_w = max(1, round(src_w * scale))
        scaled_h = max(1, round(src_h * scale))
        return (min(self.width, scaled_w), min(self.height, scaled_h))


def _spec(
    category: ImageCategory,
    width: int,
    height: int,
    quality: int,
    without_enlargement: bool = True,
) -> TransformSpec:
    return TransformSpec(
        category=category,
        width=width,
        height=height,
        quality=quality,
        suffix=f"_{category.value}",
        without_enlargement=without_enlargement,
    )


TRANSFORM_SPECS: Final = MappingProxyType(
    {
        ImageCategory.HERO: _spec(ImageCategory.HERO, 1920, 1080, 80),
        ImageCategory.TEAM: _spec(ImageCategory.TEAM, 800, 600, 85),
        ImageCategory.AVATAR: _spec(ImageCategory.AVATAR, 200, 200, 90),
        ImageCategory.PROPERTY: _spec(ImageCategory.PROPERTY, 600, 400, 85),
        ImageCategory.WORK: _spec(ImageCategory.WORK, 600, 450, 85),
        # 画廊图始终输出精确尺寸
        ImageCategory.GALLERY: _spec(
            ImageCategory.GALLERY, 600, 450, 85, without_enlargement=False
        ),
    }
)

VARIANT_SUFFIXES: Final[tuple[str, ...]] = tuple(
    spec.suffix for spec in TRANSFORM_SPECS.values()
)


def get_transform_spec(category: ImageCategory) -> TransformSpec | None:
    """获取类别的转换规格，未归类返回 None"""
    return TRANSFORM_SPECS.get(category)
