"""HTML 引用改写器。

按 旧路径 -> 新路径 映射替换模板中的字面引用。匹配是精确子串（正则转义后的字面量），
不做路径归一化：`../assets/images/foo.jpg` 必须原样出现，前缀不同的相对路径不会被匹配。
"""

import re
from collections.abc import Collection
from pathlib import Path

from ..models.constants import TEMPLATE_VARIANTS
from ..models.results import ReferenceMapping, RewriteReport, RewriteResult
from ..utils.file_helpers import find_template_files
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter


logger = get_logger()


def rewrite_references(html: str, mapping: ReferenceMapping) -> tuple[str, int]:
    """替换所有映射的字面引用

    Args:
        html: 模板文本
        mapping: 引用映射

    Returns:
        tuple: (改写后的文本, 替换总次数)
    """
    total = 0
    for old_path, new_path in mapping.pairs():
        html, count = re.subn(re.escape(old_path), lambda _: new_path, html)
        total += count
    return html, total


def rewrite_template_file(path: Path, mapping: ReferenceMapping) -> RewriteResult:
    """改写单个模板文件，只有替换次数大于 0 时才写回"""
    try:
        original = path.read_text(encoding="utf-8")
        updated, count = rewrite_references(original, mapping)
        if count > 0:
            path.write_text(updated, encoding="utf-8")
            logger.info(f"已更新 {path}: 替换 {count} 处引用")
        else:
            logger.debug(f"无需更新 {path}")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(MessageFormatter.format_error("模板改写", path, e))
        return RewriteResult(
            path=path,
            success=False,
            error=MessageFormatter.operation_failed("模板改写", path, e),
        )

    return RewriteResult(path=path, replacements=count, written=count > 0, success=True)


class TemplateRewriter:
    """按行业批量改写模板引用"""

    def __init__(self, variants: Collection[str] = TEMPLATE_VARIANTS) -> None:
        self.variants = tuple(variants)

    def rewrite_industry(
        self, industry_dir: Path, mapping: ReferenceMapping
    ) -> list[RewriteResult]:
        """改写一个行业目录下所有变体模板"""
        templates = find_template_files(industry_dir, self.variants)
        if not templates:
            logger.debug(f"{industry_dir.name} 下没有模板文件")
            return []

        if not mapping:
            return [RewriteResult(path=t, success=True) for t in templates]

        return [rewrite_template_file(template, mapping) for template in templates]

    def rewrite_all(self, mappings: dict[Path, ReferenceMapping]) -> RewriteReport:
        """改写多个行业，mappings 以行业目录为键"""
        report = RewriteReport(success=True)
        for industry_dir, mapping in mappings.items():
            report.results.extend(self.rewrite_industry(industry_dir, mapping))
        return report
