"""分类结果模型。

语义类别（hero / team / ...）与内容类型（icon / photo）的分类结果。
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .image_metrics import ImageMetrics


class ImageCategory(str, Enum):
    """图像语义类别"""

    HERO = "hero"
    TEAM = "team"
    AVATAR = "avatar"
    PROPERTY = "property"
    WORK = "work"
    GALLERY = "gallery"
    # 未归类：不做标准化
    OTHER = "other"
    # 解码失败时的默认值
    UNKNOWN = "unknown"


class ContentType(str, Enum):
    """内容类型"""

    ICON = "icon"
    PHOTO = "photo"


class CategoryRule(str, Enum):
    """类别判定来源"""

    PATTERN = "pattern"
    HERO_ALLOWLIST = "hero_allowlist"
    KEYWORD_FALLBACK = "keyword_fallback"
    NONE = "none"


class CategoryMatch(BaseModel):
    """类别检测结果"""

    model_config = ConfigDict(frozen=True)

    category: ImageCategory
    confidence: float = Field(ge=0.0, le=1.0)
    rule: CategoryRule = CategoryRule.NONE
    matched: str | None = Field(None, description="命中的模式或白名单文件名")

    @property
    def is_categorized(self) -> bool:
        return self.category not in (ImageCategory.OTHER, ImageCategory.UNKNOWN)


class ContentTypeResult(BaseModel):
    """图标/照片判定结果"""

    model_config = ConfigDict(frozen=True)

    content_type: ContentType
    score: int = Field(ge=0, description="图标加权得分")
    confidence: float = Field(ge=0.0, le=1.0)
    reasons: tuple[str, ...] = Field(default=(), description="得分来源")


class FormatRecommendation(BaseModel):
    """输出格式建议"""

    model_config = ConfigDict(frozen=True)

    formats: tuple[str, ...]
    primary_format: str
    reason: str


class ClassificationResult(BaseModel):
    """完整分类结果，由分类器产生、供转换阶段使用"""

    model_config = ConfigDict(frozen=True)

    category: CategoryMatch
    content: ContentTypeResult
    recommendations: FormatRecommendation
    metrics: ImageMetrics | None = None
    error: str | None = None

    @property
    def content_type(self) -> ContentType:
        return self.content.content_type

    @property
    def is_icon(self) -> bool:
        return self.content.content_type is ContentType.ICON
