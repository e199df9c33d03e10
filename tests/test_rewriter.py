"""模板引用改写测试。"""

from pathlib import Path

from site_asset_pipeline.core.rewriter import (
    TemplateRewriter,
    rewrite_references,
    rewrite_template_file,
)
from site_asset_pipeline.models.results import ReferenceMapping


class TestRewriteReferences:
    """字面引用替换测试"""

    def test_counts_every_occurrence(self):
        html = (
            '<img src="../assets/images/a.jpg">'
            "<div style=\"background: url('../assets/images/a.jpg')\"></div>"
        )
        mapping = ReferenceMapping(entries={"a.jpg": "a_hero.webp"})

        updated, count = rewrite_references(html, mapping)

        assert count == 2
        assert "a.jpg" not in updated
        assert updated.count("../assets/images/a_hero.webp") == 2

    def test_regex_characters_are_literal(self):
        html = (
            '<img src="../assets/images/a+b(1).jpg">'
            '<img src="../assets/images/aab1.jpg">'
        )
        mapping = ReferenceMapping(entries={"a+b(1).jpg": "ab_work.webp"})

        updated, count = rewrite_references(html, mapping)

        assert count == 1
        assert "aab1.jpg" in updated

    def test_different_prefix_is_not_matched(self):
        html = '<img src="assets/images/a.jpg">'
        mapping = ReferenceMapping(entries={"a.jpg": "a_hero.webp"})

        assert rewrite_references(html, mapping) == (html, 0)

    def test_identical_names_are_not_mapped(self):
        mapping = ReferenceMapping()
        mapping.add("same.webp", "same.webp")

        assert len(mapping) == 0


class TestRewriteTemplateFile:
    """模板文件写回测试"""

    def test_writes_when_matched(self, temp_dir: Path):
        template = temp_dir / "index.html"
        template.write_text('<img src="../assets/images/a.jpg">', encoding="utf-8")
        mapping = ReferenceMapping(entries={"a.jpg": "a_hero.webp"})

        result = rewrite_template_file(template, mapping)

        assert result.success
        assert result.written
        assert result.replacements == 1
        assert "a_hero.webp" in template.read_text(encoding="utf-8")

    def test_zero_matches_leaves_file_untouched(self, temp_dir: Path):
        template = temp_dir / "index.html"
        template.write_text('<img src="../assets/images/b.jpg">', encoding="utf-8")
        before = template.stat().st_mtime_ns
        mapping = ReferenceMapping(entries={"a.jpg": "a_hero.webp"})

        result = rewrite_template_file(template, mapping)

        assert result.success
        assert not result.written
        assert result.replacements == 0
        assert template.stat().st_mtime_ns == before

    def test_unreadable_template_is_failed_result(self, temp_dir: Path):
        result = rewrite_template_file(
            temp_dir / "missing.html", ReferenceMapping(entries={"a.jpg": "b.webp"})
        )

        assert not result.success
        assert result.error


class TestTemplateRewriter:
    """按行业改写测试"""

    def test_rewrites_only_variant_directories(self, temp_dir: Path):
        industry = temp_dir / "roofing"
        html = '<img src="../assets/images/a.jpg">'
        for variant in ("minimal-creative", "business-professional", "drafts"):
            (industry / variant).mkdir(parents=True)
            (industry / variant / "index.html").write_text(html, encoding="utf-8")

        report = TemplateRewriter().rewrite_all(
            {industry: ReferenceMapping(entries={"a.jpg": "a_hero.webp"})}
        )

        assert report.get_total_replacements() == 2
        assert len(report.get_written_files()) == 2
        drafts = (industry / "drafts" / "index.html").read_text(encoding="utf-8")
        assert drafts == html
