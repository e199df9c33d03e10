"""内容分类器。

两部分独立判定：
- 语义类别：文件名关键字模式表 + 行业 hero 白名单，先匹配者胜出
- 内容类型：基于 ImageMetrics 的加权打分判断图标或照片

打分是尽力而为的启发式规则，权重集中在 IconScoreWeights 中便于调整。
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from ..exceptions import ProcessingError
from ..models.classification import (
    CategoryMatch,
    CategoryRule,
    ClassificationResult,
    ContentType,
    ContentTypeResult,
    FormatRecommendation,
    ImageCategory,
)
from ..models.image_metrics import ImageMetrics
from ..utils.logging_helpers import get_logger
from .metrics import ImageMetricsExtractor


logger = get_logger()


def _patterns(*sources: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(source, re.IGNORECASE) for source in sources)


CategoryPatterns = tuple[tuple[ImageCategory, tuple[re.Pattern[str], ...]], ...]

# 有序的 (类别, 模式集合) 表，按顺序匹配，先匹配者胜出
CATEGORY_PATTERNS: Final[CategoryPatterns] = (
    (
        ImageCategory.HERO,
        _patterns("hero", "banner", "background", "header", "jumbotron"),
    ),
    (
        ImageCategory.TEAM,
        _patterns(
            "team",
            "about",
            "staff",
            "professional",
            "doctor",
            "attorney",
            "agent",
            "crew",
        ),
    ),
    (
        ImageCategory.AVATAR,
        _patterns("avatar", "profile", "testimonial", "client", "person", "user"),
    ),
    (
        ImageCategory.PROPERTY,
        _patterns(
            "property",
            "house",
            "building",
            r"real.?estate",
            "apartment",
            "commercial",
            "residential",
            "luxury",
            "estate",
        ),
    ),
    (
        ImageCategory.WORK,
        _patterns(
            "work",
            "project",
            "portfolio",
            "service",
            "result",
            r"before.?after",
            "renovation",
            "construction",
        ),
    ),
    (
        ImageCategory.GALLERY,
        _patterns(
            "gallery", "classes", "equipment", "trainers", "facilities", "services"
        ),
    ),
)

# 各行业指定的 hero 图（按文件名主干精确匹配）
INDUSTRY_HERO_IMAGES: Final[dict[str, str]] = {
    "fitness": "fitness-hero-strength-training.jpg",
    "healthcare": "healthcare-hero-medical-team.jpg",
    "contractors-trades": "contractors-trades--projects-swinginghammer.jpg",
    "restaurants": "restaurants-plate-2.svg",
    "photography": "photography-hero-road.jpg",
    "roofing": "roofing-hero-professional-crew.jpg",
    "retail-ecommerce": "ecommerce-cart-1.svg",
    "legal": "legal-team-professional.jpg",
    "real-estate": "real-estate-luxury-home.jpg",
}

_FALLBACK_KEYWORDS: Final[tuple[str, ...]] = ("gallery", "work")


@dataclass(frozen=True)
class IconScoreWeights:
    """图标打分权重表"""

    small_pixels: int = 100_000
    small_points: int = 3

    square_min: float = 0.8
    square_max: float = 1.25
    square_points: int = 1

    png_max_side: int = 256
    png_points: int = 2

    low_entropy: float = 0.7
    low_entropy_points: int = 2

    high_variance: float = 1000.0
    high_variance_points: int = 1

    grayscale_points: int = 1

    # 以下两项彼此叠加，也与 small 叠加
    tiny_side: int = 64
    tiny_points: int = 2
    very_small_side: int = 128
    very_small_points: int = 1

    threshold: int = 4

    @property
    def max_score(self) -> int:
        return (
            self.small_points
            + self.square_points
            + self.png_points
            + self.low_entropy_points
            + self.high_variance_points
            + self.grayscale_points
            + self.tiny_points
            + self.very_small_points
        )


DEFAULT_WEIGHTS: Final = IconScoreWeights()


def detect_category(filename: str, industry: str | None = None) -> CategoryMatch:
    """根据文件名检测语义类别

    Args:
        filename: 文件名
        industry: 行业，用于查 hero 白名单

    Returns:
        CategoryMatch: 未命中任何规则时为 other（未归类）
    """
    for category, patterns in CATEGORY_PATTERNS:
        for pattern in patterns:
            if pattern.search(filename):
                return CategoryMatch(
                    category=category,
                    confidence=1.0,
                    rule=CategoryRule.PATTERN,
                    matched=pattern.pattern,
                )

    hero_image = INDUSTRY_HERO_IMAGES.get(industry) if industry else None
    if hero_image and Path(filename).stem.lower() == Path(hero_image).stem.lower():
        return CategoryMatch(
            category=ImageCategory.HERO,
            confidence=1.0,
            rule=CategoryRule.HERO_ALLOWLIST,
            matched=hero_image,
        )

    lower = filename.lower()
    for keyword in _FALLBACK_KEYWORDS:
        if keyword in lower:
            return CategoryMatch(
                category=ImageCategory.WORK,
                confidence=0.5,
                rule=CategoryRule.KEYWORD_FALLBACK,
                matched=keyword,
            )

    return CategoryMatch(category=ImageCategory.OTHER, confidence=0.0)


def score_icon(
    metrics: ImageMetrics, weights: IconScoreWeights = DEFAULT_WEIGHTS
) -> tuple[int, tuple[str, ...]]:
    """计算图标得分，返回 (得分, 命中的规则名)"""
    score = 0
    reasons: list[str] = []

    def hit(name: str, points: int) -> None:
        nonlocal score
        score += points
        reasons.append(name)

    is_small = metrics.pixel_count < weights.small_pixels
    if is_small:
        hit("small", weights.small_points)

    if weights.square_min <= metrics.aspect_ratio <= weights.square_max:
        hit("square", weights.square_points)

    fits_png_box = (
        metrics.width <= weights.png_max_side and metrics.height <= weights.png_max_side
    )
    if metrics.format == "png" and (is_small or fits_png_box):
        hit("png", weights.png_points)

    if metrics.entropy < weights.low_entropy:
        hit("low_entropy", weights.low_entropy_points)

    if metrics.color_variance > weights.high_variance:
        hit("high_variance", weights.high_variance_points)

    if metrics.is_grayscale:
        hit("grayscale", weights.grayscale_points)

    if metrics.width <= weights.tiny_side and metrics.height <= weights.tiny_side:
        hit("tiny", weights.tiny_points)
    if (
        metrics.width <= weights.very_small_side
        and metrics.height <= weights.very_small_side
    ):
        hit("very_small", weights.very_small_points)

    return score, tuple(reasons)


def classify_content(
    metrics: ImageMetrics, weights: IconScoreWeights = DEFAULT_WEIGHTS
) -> ContentTypeResult:
    """判断图标或照片；SVG 始终为图标"""
    score, reasons = score_icon(metrics, weights)
    ratio = min(1.0, score / weights.max_score) if weights.max_score else 0.0

    if metrics.format == "svg":
        return ContentTypeResult(
            content_type=ContentType.ICON,
            score=score,
            confidence=1.0,
            reasons=(*reasons, "svg"),
        )

    if score >= weights.threshold:
        return ContentTypeResult(
            content_type=ContentType.ICON,
            score=score,
            confidence=ratio,
            reasons=reasons,
        )
    return ContentTypeResult(
        content_type=ContentType.PHOTO,
        score=score,
        confidence=1.0 - ratio,
        reasons=reasons,
    )


def recommend_formats(
    content_type: ContentType, source_format: str
) -> FormatRecommendation:
    """按内容类型给出输出格式建议"""
    match content_type:
        case ContentType.ICON if source_format == "svg":
            return FormatRecommendation(
                formats=("svg",),
                primary_format="svg",
                reason="Icons benefit from vector format for scalability",
            )
        case ContentType.ICON:
            return FormatRecommendation(
                formats=("svg", "webp", "avif"),
                primary_format="svg",
                reason="Icons benefit from vector format for scalability",
            )
        case _:
            return FormatRecommendation(
                formats=("jpeg", "webp", "avif"),
                primary_format="jpeg",
                reason="Photos benefit from lossy compression for smaller file sizes",
            )


class ContentClassifier:
    """内容分类器

    解码失败不会向外抛出，而是返回 unknown/photo 的默认结果，
    保证单个损坏文件不影响整批处理。
    """

    def __init__(
        self,
        extractor: ImageMetricsExtractor | None = None,
        weights: IconScoreWeights = DEFAULT_WEIGHTS,
    ) -> None:
        self.extractor = extractor or ImageMetricsExtractor()
        self.weights = weights

    def classify(
        self, file_path: str | Path, industry: str | None = None
    ) -> ClassificationResult:
        """解码并分类单个文件"""
        path = Path(file_path)
        try:
            metrics = self.extractor.extract(path)
        except ProcessingError as e:
            logger.warning(f"图像分析失败，按照片处理 [{path}]: {e.message}")
            return self.fallback(e.message)

        return self.classify_metrics(metrics, path.name, industry)

    def classify_metrics(
        self, metrics: ImageMetrics, filename: str, industry: str | None = None
    ) -> ClassificationResult:
        """由度量和文件名得到分类结果，相同输入总是得到相同结果"""
        content = classify_content(metrics, self.weights)
        result = ClassificationResult(
            category=detect_category(filename, industry),
            content=content,
            recommendations=recommend_formats(content.content_type, metrics.format),
            metrics=metrics,
        )
        logger.debug(
            f"分类 {filename}: {result.category.category.value}/"
            f"{content.content_type.value} (score={content.score})"
        )
        return result

    @staticmethod
    def fallback(error: str | None = None) -> ClassificationResult:
        """解码失败时的默认分类"""
        return ClassificationResult(
            category=CategoryMatch(category=ImageCategory.UNKNOWN, confidence=0.0),
            content=ContentTypeResult(
                content_type=ContentType.PHOTO, score=0, confidence=0.0
            ),
            recommendations=FormatRecommendation(
                formats=("jpeg", "webp", "avif"),
                primary_format="jpeg",
                reason="Fallback to photo format due to analysis error",
            ),
            error=error,
        )
