"""文件发现工具模块。

查找投放区图片、行业目录和模板文件，并提供轻量的尺寸读取。
"""

from collections.abc import Collection, Iterator
from pathlib import Path

from PIL import Image

from ..models.constants import SUPPORTED_EXTENSIONS
from .logging_helpers import get_logger
from .message_formatter import MessageFormatter


logger = get_logger()


def find_image_files(
    directory: str | Path,
    recursive: bool = True,
    extensions: Collection[str] = SUPPORTED_EXTENSIONS,
    exclude_dirs: list[str] | None = None,
) -> Iterator[Path]:
    """查找目录中的图像文件，按路径排序保证处理顺序稳定。

    Args:
        directory: 搜索目录
        recursive: 是否递归搜索子目录
        extensions: 接受的扩展名（小写，不含点）
        exclude_dirs: 要排除的目录名列表

    Yields:
        Path: 图像文件路径
    """
    directory = Path(directory)
    exclude_dirs = exclude_dirs or []

    if not directory.exists():
        logger.warning(MessageFormatter.directory_not_found(directory))
        return

    if not directory.is_dir():
        logger.warning(MessageFormatter.path_not_directory(directory))
        return

    pattern = "**/*" if recursive else "*"

    try:
        candidates = sorted(directory.glob(pattern))
    except PermissionError:
        logger.error(MessageFormatter.permission_error(directory, "访问目录"))
        return

    for file_path in candidates:
        if (
            file_path.is_file()
            and file_path.suffix.lower().lstrip(".") in extensions
            and not any(exclude_dir in file_path.parts for exclude_dir in exclude_dirs)
        ):
            yield file_path


def discover_industry_dirs(
    root: str | Path,
    asset_dir: str = "assets/images",
    excluded: Collection[str] = (),
) -> list[Path]:
    """列出包含素材目录的一级行业目录

    Args:
        root: 项目根目录
        asset_dir: 行业目录下的素材子目录
        excluded: 排除的顶层目录名

    Returns:
        list[Path]: 按名称排序的行业目录
    """
    root = Path(root)
    if not root.is_dir():
        logger.warning(MessageFormatter.directory_not_found(root))
        return []

    return [
        entry
        for entry in sorted(root.iterdir())
        if entry.is_dir()
        and not entry.name.startswith(".")
        and entry.name not in excluded
        and (entry / asset_dir).is_dir()
    ]


def find_template_files(industry_dir: Path, variants: Collection[str]) -> list[Path]:
    """查找行业目录下固定变体子目录中的 HTML 模板（不递归）"""
    templates: list[Path] = []
    for variant in variants:
        variant_dir = industry_dir / variant
        if variant_dir.is_dir():
            templates.extend(sorted(variant_dir.glob("*.html")))
    return templates


def read_image_size(file_path: Path) -> tuple[int, int] | None:
    """读取图片尺寸，无法解码时返回 None"""
    try:
        with Image.open(file_path) as img:
            img.load()
            return img.size
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        logger.debug(MessageFormatter.operation_failed("读取图片尺寸", file_path, e))
        return None
