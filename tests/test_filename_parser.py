"""文件名解析测试。"""

from pathlib import Path

from site_asset_pipeline.core.filename_parser import (
    match_industry,
    parse_filename,
    to_raw_asset,
)
from site_asset_pipeline.models.assets import FilenameParts, SkipReason, SkipRecord


class TestParseFilename:
    """文件名分解测试"""

    def test_standard_filename(self):
        parts = parse_filename("roofing-hero-professional-crew.jpg")

        assert isinstance(parts, FilenameParts)
        assert parts.industry == "roofing"
        assert parts.remainder == "hero-professional-crew"
        assert parts.extension == "jpg"

    def test_unknown_industry_is_skipped(self):
        result = parse_filename("invalid-filename.jpg")

        assert isinstance(result, SkipRecord)
        assert result.reason is SkipReason.UNKNOWN_INDUSTRY

    def test_multi_word_industry(self):
        parts = parse_filename("real-estate-luxury-home.webp")

        assert isinstance(parts, FilenameParts)
        assert parts.industry == "real-estate"
        assert parts.remainder == "luxury-home"

    def test_extension_is_lowercased(self):
        parts = parse_filename("fitness-gallery-1.JPG")

        assert isinstance(parts, FilenameParts)
        assert parts.extension == "jpg"

    def test_missing_extension(self):
        result = parse_filename("roofing-hero")

        assert isinstance(result, SkipRecord)
        assert result.reason is SkipReason.MISSING_EXTENSION

    def test_unsupported_extension(self):
        result = parse_filename("roofing-hero.gif")

        assert isinstance(result, SkipRecord)
        assert result.reason is SkipReason.UNSUPPORTED_EXTENSION
        assert result.detail == "gif"

    def test_empty_name(self):
        result = parse_filename("roofing-.png")

        assert isinstance(result, SkipRecord)
        assert result.reason is SkipReason.EMPTY_NAME

    def test_last_dot_separates_extension(self):
        parts = parse_filename("legal-team.v2.png")

        assert isinstance(parts, FilenameParts)
        assert parts.remainder == "team.v2"
        assert parts.extension == "png"


class TestIndustryPrecedence:
    """行业前缀按声明顺序匹配"""

    def test_first_match_wins(self):
        industries = ("real", "real-estate")
        assert match_industry("real-estate-hero.jpg", industries) == "real"

    def test_declaration_order_decides(self):
        industries = ("real-estate", "real")
        parts = parse_filename("real-estate-hero.jpg", industries)

        assert isinstance(parts, FilenameParts)
        assert parts.industry == "real-estate"
        assert parts.remainder == "hero"

    def test_prefix_requires_separator(self):
        assert match_industry("roofinghero.jpg") is None


class TestRawAsset:
    """原始素材构建测试"""

    def test_section_and_description(self):
        path = Path("/drop/roofing-hero-professional-crew.jpg")
        parts = parse_filename(path.name)
        asset = to_raw_asset(path, parts)

        assert asset.section == "hero"
        assert asset.description == "professional-crew"
        assert asset.remainder == "hero-professional-crew"
        assert asset.target_stem == "roofing-hero-professional-crew"

    def test_single_segment_remainder(self):
        path = Path("fitness-gallery.png")
        asset = to_raw_asset(path, parse_filename(path.name))

        assert asset.section == "gallery"
        assert asset.description == ""
        assert asset.target_stem == "fitness-gallery"
