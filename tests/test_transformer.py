"""转换器与格式处理测试。"""

import os
from pathlib import Path

import pytest
from PIL import Image

from site_asset_pipeline.core.formats import FormatProcessor, get_save_parameters
from site_asset_pipeline.core.transformer import AssetTransformer
from site_asset_pipeline.models.classification import ImageCategory
from site_asset_pipeline.models.results import AssetStatus
from site_asset_pipeline.models.transform_spec import TRANSFORM_SPECS, TransformSpec


HERO = TRANSFORM_SPECS[ImageCategory.HERO]
GALLERY = TRANSFORM_SPECS[ImageCategory.GALLERY]


@pytest.fixture
def transformer() -> AssetTransformer:
    return AssetTransformer()


class TestTransformSpec:
    """转换规格测试"""

    def test_expected_size_for_large_source(self):
        assert HERO.expected_size((2400, 1600)) == (1920, 1080)

    def test_expected_size_never_enlarges(self):
        assert HERO.expected_size((800, 600)) == (800, 600)

    def test_expected_size_without_cap(self):
        assert GALLERY.expected_size((300, 200)) == (600, 450)

    def test_suffixes(self):
        assert HERO.suffix == "_hero"
        assert HERO.format == "WEBP"
        assert not GALLERY.without_enlargement


class TestResize:
    """缩放与裁剪测试"""

    def test_exact_target_without_enlargement_flag(self, transformer):
        img = Image.new("RGB", (300, 200), "white")
        assert transformer.resize_cover(img, GALLERY).size == (600, 450)

    def test_large_source_is_cropped_to_target(self, transformer):
        img = Image.new("RGB", (2400, 1600), "white")
        assert transformer.resize_cover(img, HERO).size == (1920, 1080)

    def test_small_source_is_not_enlarged(self, transformer):
        img = Image.new("RGB", (800, 600), "white")
        resized = transformer.resize_cover(img, HERO)

        assert resized.width <= 800
        assert resized.height <= 600

    def test_partial_overflow_is_cropped(self, transformer):
        spec = TransformSpec(
            category=ImageCategory.AVATAR,
            width=200,
            height=200,
            quality=90,
            suffix="_x",
        )
        img = Image.new("RGB", (150, 400), "white")

        assert transformer.resize_cover(img, spec).size == (150, 200)


class TestTransform:
    """单个素材转换测试"""

    def test_writes_variant_beside_source(self, transformer, temp_dir, photo_factory):
        source = photo_factory(temp_dir / "roofing-hero-main.jpg", (2400, 1600))
        result = transformer.transform(source, HERO)

        assert result.status is AssetStatus.OPTIMIZED
        assert result.output_path == temp_dir / "roofing-hero-main_hero.webp"
        assert result.output_dimensions == (1920, 1080)
        assert source.exists()
        with Image.open(result.output_path) as img:
            assert img.format == "WEBP"
            assert img.size == (1920, 1080)

    def test_second_run_is_idempotent(self, transformer, temp_dir, photo_factory):
        source = photo_factory(temp_dir / "roofing-hero-main.jpg")
        first = transformer.transform(source, HERO)
        mtime = first.output_path.stat().st_mtime_ns

        second = transformer.transform(source, HERO)

        assert second.status is AssetStatus.ALREADY_OPTIMIZED
        assert second.output_path.stat().st_mtime_ns == mtime
        assert second.get_size_saved() == 0

    def test_output_older_than_source_is_rewritten(
        self, transformer, temp_dir, photo_factory
    ):
        source = photo_factory(temp_dir / "roofing-hero-main.jpg", (2400, 1600))
        output = transformer.transform(source, HERO).output_path
        # 尺寸正确但早于源文件的输出
        stale = source.stat().st_mtime - 10
        os.utime(output, (stale, stale))
        stale_ns = output.stat().st_mtime_ns

        result = transformer.transform(source, HERO)

        assert result.status is AssetStatus.OPTIMIZED
        assert output.stat().st_mtime_ns > stale_ns

    def test_stale_output_is_rewritten(self, transformer, temp_dir, photo_factory):
        source = photo_factory(temp_dir / "fitness-gallery-1.jpg", (300, 200))
        output = temp_dir / "fitness-gallery-1_gallery.webp"
        # 尺寸不符的旧输出
        Image.new("RGB", (10, 10)).save(output, "WEBP")

        result = transformer.transform(source, GALLERY)

        assert result.status is AssetStatus.OPTIMIZED
        assert result.output_dimensions == (600, 450)

    def test_corrupt_source_is_failed_result(
        self, transformer, temp_dir, corrupt_factory
    ):
        source = corrupt_factory(temp_dir / "roofing-hero-broken.jpg")
        result = transformer.transform(source, HERO)

        assert result.status is AssetStatus.FAILED
        assert not result.success
        assert result.error
        assert not (temp_dir / "roofing-hero-broken_hero.webp").exists()

    def test_no_temp_files_left(self, transformer, temp_dir, photo_factory):
        source = photo_factory(temp_dir / "roofing-hero-main.jpg")
        transformer.transform(source, HERO)

        assert not list(temp_dir.glob(".*.tmp"))


class TestVectorize:
    """图标矢量化测试"""

    def test_png_icon_is_traced(self, transformer, temp_dir, icon_factory):
        source = icon_factory(temp_dir / "fitness-icon-heart.png")
        output = temp_dir / "out" / "fitness-icon-heart.svg"

        result = transformer.vectorize(source, output, ImageCategory.OTHER)

        assert result.status is AssetStatus.OPTIMIZED
        assert result.format_used == "SVG"
        assert result.output_size == output.stat().st_size
        assert "<svg" in output.read_text(encoding="utf-8")
        assert not list(output.parent.glob(".*.tmp"))

    def test_second_run_is_idempotent(self, transformer, temp_dir, icon_factory):
        source = icon_factory(temp_dir / "fitness-icon-heart.png")
        output = temp_dir / "fitness-icon-heart.svg"
        transformer.vectorize(source, output)
        mtime = output.stat().st_mtime_ns

        result = transformer.vectorize(source, output)

        assert result.status is AssetStatus.ALREADY_OPTIMIZED
        assert output.stat().st_mtime_ns == mtime

    def test_trace_failure_is_failed_result(
        self, transformer, temp_dir, icon_factory, monkeypatch
    ):
        def fail(*args, **kwargs):
            raise RuntimeError("trace failed")

        monkeypatch.setattr(
            "site_asset_pipeline.core.transformer.vtracer.convert_image_to_svg_py",
            fail,
        )
        source = icon_factory(temp_dir / "fitness-icon-heart.png")
        output = temp_dir / "fitness-icon-heart.svg"

        result = transformer.vectorize(source, output)

        assert result.status is AssetStatus.FAILED
        assert "trace failed" in result.error
        assert not output.exists()
        assert not list(temp_dir.glob(".*.tmp"))


class TestFormatProcessor:
    """格式处理测试"""

    def test_jpeg_flattens_alpha(self):
        img = Image.new("RGBA", (10, 10), (0, 0, 0, 0))
        prepared = FormatProcessor().prepare_for_format(img, "JPEG")

        assert prepared.mode == "RGB"
        assert prepared.getpixel((0, 0)) == (255, 255, 255)

    def test_webp_keeps_alpha(self):
        img = Image.new("RGBA", (10, 10), (0, 0, 0, 0))
        assert FormatProcessor().prepare_for_format(img, "WEBP").mode == "RGBA"

    def test_svg_cannot_be_encoded(self):
        assert not FormatProcessor().can_encode("svg")
        assert FormatProcessor().can_encode("jpg")

    def test_save_parameters(self):
        jpeg = get_save_parameters("JPEG")
        assert jpeg["quality"] == 80
        assert jpeg["optimize"] and jpeg["progressive"]

        webp = get_save_parameters("WEBP", quality=90)
        assert webp["quality"] == 90
        assert webp["method"] == 6

        png = get_save_parameters("PNG")
        assert png["compress_level"] == 9
        assert "quality" not in png
