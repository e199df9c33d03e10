"""内容分类测试。"""

from pathlib import Path

import numpy as np
import pytest

from site_asset_pipeline.core.classifier import (
    DEFAULT_WEIGHTS,
    ContentClassifier,
    IconScoreWeights,
    classify_content,
    detect_category,
    recommend_formats,
    score_icon,
)
from site_asset_pipeline.core.metrics import ImageMetricsExtractor
from site_asset_pipeline.exceptions import DecodeError
from site_asset_pipeline.models.classification import (
    CategoryRule,
    ContentType,
    ImageCategory,
)
from site_asset_pipeline.models.image_metrics import ImageMetrics


PHOTO_METRICS = ImageMetrics(
    width=1920,
    height=1080,
    format="jpeg",
    channel_variances=(4000.0, 3800.0, 4200.0),
    entropy=0.95,
)

ICON_METRICS = ImageMetrics(width=48, height=48, format="png", entropy=0.2)


class TestCategoryDetection:
    """语义类别检测测试"""

    @pytest.mark.parametrize(
        ("filename", "expected"),
        [
            ("roofing-hero-professional-crew.jpg", ImageCategory.HERO),
            ("fitness-banner.png", ImageCategory.HERO),
            ("legal-attorney-smith.jpg", ImageCategory.TEAM),
            ("healthcare-testimonial-1.jpg", ImageCategory.AVATAR),
            ("real-estate-luxury-home.jpg", ImageCategory.PROPERTY),
            ("roofing-before-after-1.jpg", ImageCategory.WORK),
            ("fitness-equipment-row.jpg", ImageCategory.GALLERY),
        ],
    )
    def test_pattern_table(self, filename: str, expected: ImageCategory):
        match = detect_category(filename)

        assert match.category is expected
        assert match.rule is CategoryRule.PATTERN
        assert match.confidence == 1.0

    def test_table_order_decides(self):
        # hero 在 team 之前
        assert detect_category("team-hero.jpg").category is ImageCategory.HERO

    def test_patterns_are_case_insensitive(self):
        assert detect_category("ROOFING-HERO.JPG").category is ImageCategory.HERO

    def test_hero_allowlist_matches_stem(self):
        match = detect_category("Restaurants-Plate-2.JPG", "restaurants")

        assert match.category is ImageCategory.HERO
        assert match.rule is CategoryRule.HERO_ALLOWLIST

    def test_hero_allowlist_is_per_industry(self):
        match = detect_category("restaurants-plate-2.jpg", "roofing")
        assert match.category is ImageCategory.OTHER

    def test_uncategorized(self):
        match = detect_category("roofing-misc-1.jpg", "roofing")

        assert match.category is ImageCategory.OTHER
        assert match.confidence == 0.0
        assert not match.is_categorized


class TestIconScoring:
    """图标/照片打分测试"""

    def test_photo(self):
        result = classify_content(PHOTO_METRICS)

        assert result.content_type is ContentType.PHOTO
        assert result.score == DEFAULT_WEIGHTS.high_variance_points
        assert result.confidence == pytest.approx(
            1 - result.score / DEFAULT_WEIGHTS.max_score
        )

    def test_small_png_is_icon(self):
        result = classify_content(ICON_METRICS)

        assert result.content_type is ContentType.ICON
        assert {"small", "png", "low_entropy", "tiny", "very_small"} <= set(
            result.reasons
        )
        assert result.confidence == pytest.approx(
            result.score / DEFAULT_WEIGHTS.max_score
        )

    def test_size_rules_stack(self):
        score, reasons = score_icon(ICON_METRICS)

        assert "tiny" in reasons
        assert "very_small" in reasons
        assert score == 3 + 1 + 2 + 2 + 2 + 1

    def test_threshold_is_inclusive(self):
        metrics = ImageMetrics(width=200, height=200, format="jpeg", entropy=0.9)
        result = classify_content(metrics)

        assert result.score == DEFAULT_WEIGHTS.threshold
        assert result.content_type is ContentType.ICON

    def test_svg_is_always_icon(self):
        metrics = ImageMetrics(width=4000, height=1000, format="svg", entropy=1.0)
        result = classify_content(metrics)

        assert result.content_type is ContentType.ICON
        assert result.confidence == 1.0

    def test_custom_weights(self):
        weights = IconScoreWeights(threshold=100)
        result = classify_content(ICON_METRICS, weights)

        assert result.content_type is ContentType.PHOTO


class TestRecommendations:
    """格式建议测试"""

    def test_photo_formats(self):
        rec = recommend_formats(ContentType.PHOTO, "jpeg")

        assert rec.formats == ("jpeg", "webp", "avif")
        assert rec.primary_format == "jpeg"
        assert rec.reason == (
            "Photos benefit from lossy compression for smaller file sizes"
        )

    def test_icon_formats(self):
        rec = recommend_formats(ContentType.ICON, "png")

        assert rec.formats == ("svg", "webp", "avif")
        assert rec.reason == "Icons benefit from vector format for scalability"

    def test_svg_icon_keeps_svg(self):
        assert recommend_formats(ContentType.ICON, "svg").formats == ("svg",)


class TestMetricsExtraction:
    """度量提取测试"""

    def test_entropy_of_flat_image_is_zero(self):
        pixels = np.full((10, 10, 3), 128, dtype=np.uint8)
        assert ImageMetricsExtractor.luminance_entropy(pixels) == 0.0

    def test_entropy_of_uniform_histogram_is_one(self):
        pixels = np.arange(256, dtype=np.uint8).reshape(16, 16, 1)
        assert ImageMetricsExtractor.luminance_entropy(pixels) == pytest.approx(1.0)

    def test_svg_dimensions(self, temp_dir: Path):
        svg = temp_dir / "logo.svg"
        svg.write_text(
            '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 120 80"></svg>',
            encoding="utf-8",
        )
        metrics = ImageMetricsExtractor().extract(svg)

        assert (metrics.width, metrics.height) == (120, 80)
        assert metrics.format == "svg"

    def test_grayscale_detection(self, temp_dir: Path):
        from PIL import Image

        path = temp_dir / "grey.png"
        Image.new("L", (50, 50), 90).save(path)

        assert ImageMetricsExtractor().extract(path).is_grayscale

    def test_grey_with_alpha_is_not_grayscale(self, temp_dir: Path):
        from PIL import Image

        path = temp_dir / "grey-alpha.png"
        Image.new("LA", (50, 50), (90, 255)).save(path)

        assert not ImageMetricsExtractor().extract(path).is_grayscale

    def test_corrupt_file_raises_decode_error(self, temp_dir: Path, corrupt_factory):
        path = corrupt_factory(temp_dir / "broken.jpg")

        with pytest.raises(DecodeError):
            ImageMetricsExtractor().extract(path)


class TestContentClassifier:
    """分类器编排测试"""

    def test_photo_file(self, temp_dir: Path, photo_factory):
        path = photo_factory(temp_dir / "roofing-hero-main.jpg")
        result = ContentClassifier().classify(path, "roofing")

        assert result.content_type is ContentType.PHOTO
        assert result.category.category is ImageCategory.HERO
        assert result.error is None

    def test_icon_file(self, temp_dir: Path, icon_factory):
        path = icon_factory(temp_dir / "fitness-icon-dumbbell.png")
        result = ContentClassifier().classify(path, "fitness")

        assert result.is_icon
        assert "svg" in result.recommendations.formats

    def test_classification_is_deterministic(self):
        classifier = ContentClassifier()
        first = classifier.classify_metrics(PHOTO_METRICS, "roofing-hero.jpg")
        second = classifier.classify_metrics(PHOTO_METRICS, "roofing-hero.jpg")

        assert first == second

    def test_decode_failure_falls_back_to_photo(self, temp_dir: Path, corrupt_factory):
        path = corrupt_factory(temp_dir / "roofing-hero-broken.jpg")
        result = ContentClassifier().classify(path, "roofing")

        assert result.category.category is ImageCategory.UNKNOWN
        assert result.content_type is ContentType.PHOTO
        assert set(result.recommendations.formats) == {"jpeg", "webp", "avif"}
        assert result.error
