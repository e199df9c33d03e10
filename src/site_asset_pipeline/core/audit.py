"""模板素材审计。

清点每个行业、每个模板变体 index.html 中引用的图片和图标，检查文件是否存在，
并在项目根目录输出 asset-inventory.json 与 asset-report.md。
"""

from collections.abc import Collection
from datetime import datetime, timezone
from pathlib import Path

from bs4 import BeautifulSoup

from ..models.constants import EXCLUDED_ROOT_DIRS, TEMPLATE_VARIANTS, get_asset_type
from ..models.manifest import (
    AssetInventory,
    AssetReference,
    IndustryAudit,
    TemplateAudit,
)
from ..utils.logging_helpers import get_logger
from .classifier import detect_category


logger = get_logger()

# 带有这些 class 的 <img> 记为图标而不是图片
_ICON_CLASSES = {
    "service-icon-img": "service-icon",
    "contact-icon-img": "contact-icon",
}
_EXTERNAL_PREFIXES = ("http", "data:", "//")


def _resolve(src: str, template_path: Path, root: Path) -> Path:
    """相对路径以模板目录为基准，/ 开头的路径以项目根目录为基准"""
    if src.startswith("/"):
        return (root / src.lstrip("/")).resolve()
    return (template_path.parent / src).resolve()


def _icon_type(classes: list[str]) -> str | None:
    return next((_ICON_CLASSES[c] for c in classes if c in _ICON_CLASSES), None)


def audit_template(
    template_path: Path, industry: str, root: Path
) -> list[AssetReference]:
    """提取单个模板中的素材引用"""
    soup = BeautifulSoup(template_path.read_text(encoding="utf-8"), "html.parser")
    assets: list[AssetReference] = []

    for img in soup.find_all("img"):
        src = (img.get("src") or "").strip()
        if not src or src.startswith(_EXTERNAL_PREFIXES):
            continue
        resolved = _resolve(src, template_path, root)

        if icon_type := _icon_type(img.get("class", [])):
            assets.append(
                AssetReference(
                    src=src,
                    resolved_path=resolved,
                    exists=resolved.exists(),
                    type=icon_type,
                    kind="icon",
                )
            )
            continue

        assets.append(
            AssetReference(
                src=src,
                resolved_path=resolved,
                exists=resolved.exists(),
                type=get_asset_type(Path(src).suffix),
                category=detect_category(Path(src).name, industry).category.value,
            )
        )

    # 图标元素由组件渲染，不对应文件
    for element in soup.find_all("icon-element"):
        if name := (element.get("name") or "").strip():
            assets.append(
                AssetReference(src=name, exists=True, type="icon-element", kind="icon")
            )

    return assets


def discover_template_industries(
    root: Path,
    variants: Collection[str] = TEMPLATE_VARIANTS,
    excluded: Collection[str] = EXCLUDED_ROOT_DIRS,
) -> list[Path]:
    """至少包含一个变体 index.html 的一级目录"""
    return [
        entry
        for entry in sorted(root.iterdir())
        if entry.is_dir()
        and not entry.name.startswith(".")
        and entry.name not in excluded
        and any((entry / variant / "index.html").is_file() for variant in variants)
    ]


def audit_templates(
    root: Path,
    variants: Collection[str] = TEMPLATE_VARIANTS,
    excluded: Collection[str] = EXCLUDED_ROOT_DIRS,
) -> AssetInventory:
    """清点所有行业模板的素材"""
    root = Path(root)
    inventory = AssetInventory(generated=datetime.now(timezone.utc))

    for industry_dir in discover_template_industries(root, variants, excluded):
        industry_audit = IndustryAudit(industry=industry_dir.name)
        for variant in variants:
            template_path = industry_dir / variant / "index.html"
            if not template_path.is_file():
                continue
            try:
                assets = audit_template(template_path, industry_dir.name, root)
            except (OSError, UnicodeDecodeError) as e:
                logger.error(f"读取模板失败 [{template_path}]: {e}")
                continue
            industry_audit.templates.append(
                TemplateAudit(template=variant, path=template_path, assets=assets)
            )
        inventory.industries.append(industry_audit)

    return inventory


def render_markdown(inventory: AssetInventory) -> str:
    """生成 Markdown 报告"""
    lines = [
        "# 模板素材清单",
        "",
        f"生成时间: {inventory.generated.isoformat()}",
        "",
    ]

    for industry in inventory.industries:
        lines += [f"## {industry.industry}", ""]
        for template in industry.templates:
            lines += [f"### {template.template}", ""]

            if images := template.images:
                lines += [
                    f"#### 图片 ({len(images)})",
                    "",
                    "| 状态 | 路径 | 类型 | 类别 |",
                    "|------|------|------|------|",
                ]
                for image in images:
                    status = "✅" if image.exists else "❌"
                    lines.append(
                        f"| {status} | `{image.src}` "
                        f"| {image.type} | {image.category} |"
                    )
                lines.append("")

            if icons := template.icons:
                lines += [
                    f"#### 图标 ({len(icons)})",
                    "",
                    "| 类型 | 名称/路径 | 状态 |",
                    "|------|-----------|------|",
                ]
                for icon in icons:
                    status = "✅" if icon.exists else "❌"
                    lines.append(f"| {icon.type} | `{icon.src}` | {status} |")
                lines.append("")

            if missing := [image for image in images if not image.exists]:
                lines += [f"#### 缺失素材 ({len(missing)})", ""]
                lines += [f"- `{image.src}` ({image.category})" for image in missing]
                lines.append("")

    lines += [
        "## 汇总",
        "",
        "| 指标 | 数量 |",
        "|------|------|",
        f"| 图片总数 | {inventory.total_images} |",
        f"| 图标总数 | {inventory.total_icons} |",
        f"| 已存在 | {inventory.existing_assets} |",
        f"| 缺失 | {inventory.missing_assets} |",
        f"| 覆盖率 | {inventory.coverage:.1f}% |",
        "",
    ]
    return "\n".join(lines)


def write_reports(
    inventory: AssetInventory,
    root: Path,
    json_name: str = "asset-inventory.json",
    markdown_name: str = "asset-report.md",
) -> list[Path]:
    """把清单写入项目根目录

    Returns:
        list[Path]: [JSON 路径, Markdown 路径]
    """
    json_path = root / json_name
    markdown_path = root / markdown_name
    json_path.write_text(inventory.model_dump_json(indent=2), encoding="utf-8")
    markdown_path.write_text(render_markdown(inventory), encoding="utf-8")

    logger.info(
        f"审计完成: 图片 {inventory.total_images}, 图标 {inventory.total_icons}, "
        f"缺失 {inventory.missing_assets}, 覆盖率 {inventory.coverage:.1f}%"
    )
    return [json_path, markdown_path]
