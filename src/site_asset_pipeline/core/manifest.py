"""行业素材清单生成。

按文件名主干汇总 <industry>/assets/images 下的所有格式，写入
<industry>/assets/manifest.json。
"""

from datetime import datetime, timezone
from pathlib import Path

from ..models.manifest import AssetManifest, FormatStats, ManifestImage
from ..utils.file_helpers import find_image_files, read_image_size
from ..utils.logging_helpers import get_logger


logger = get_logger()

MANIFEST_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "webp", "avif", "svg", "gif"})
_ORIGINAL_PREFERENCE = ("jpeg", "jpg", "png")


def build_manifest(industry: str, images_dir: Path) -> AssetManifest:
    """扫描素材目录构建清单（不写文件）"""
    grouped: dict[str, list[Path]] = {}
    for file_path in find_image_files(
        images_dir, recursive=False, extensions=MANIFEST_EXTENSIONS
    ):
        grouped.setdefault(file_path.stem, []).append(file_path)

    manifest = AssetManifest(industry=industry, generated=datetime.now(timezone.utc))

    for base_name, files in grouped.items():
        by_format = {f.suffix.lower().lstrip("."): f for f in files}
        original = next(
            (by_format[ext] for ext in _ORIGINAL_PREFERENCE if ext in by_format),
            files[0],
        )
        sizes = {ext: path.stat().st_size for ext, path in by_format.items()}
        is_vector = original.suffix.lower() == ".svg"

        manifest.images[base_name] = ManifestImage(
            original=original.name,
            formats=sorted(by_format),
            sizes=sizes,
            dimensions=None if is_vector else read_image_size(original),
        )

        for ext, size in sizes.items():
            stats = manifest.stats.formats.setdefault(ext, FormatStats())
            stats.count += 1
            stats.total_size += size
            manifest.stats.total_size += size

    manifest.stats.total_images = len(manifest.images)
    return manifest


def generate_manifest(
    industry_dir: Path,
    asset_dir: str = "assets/images",
    manifest_name: str = "manifest.json",
) -> Path | None:
    """生成并写入行业清单

    Returns:
        Path | None: 清单路径，素材目录不存在时返回 None
    """
    images_dir = industry_dir / asset_dir
    if not images_dir.is_dir():
        logger.warning(f"跳过 {industry_dir.name}: 素材目录不存在")
        return None

    manifest = build_manifest(industry_dir.name, images_dir)
    manifest_path = images_dir.parent / manifest_name
    manifest_path.write_text(manifest.model_dump_json(indent=2), encoding="utf-8")

    logger.info(f"已生成清单 {manifest_path}: {manifest.stats.total_images} 个素材")
    return manifest_path
