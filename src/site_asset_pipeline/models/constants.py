"""素材流水线相关常量定义。

行业、模板变体、格式等固定表，集中维护避免硬编码重复。
"""

from typing import Final

from PIL import Image


# 行业列表：前缀匹配按声明顺序进行，先匹配者胜出（非最长匹配）
INDUSTRIES: Final[tuple[str, ...]] = (
    "contractors-trades",
    "real-estate",
    "retail-ecommerce",
    "fitness",
    "healthcare",
    "legal",
    "photography",
    "restaurants",
    "roofing",
)

TEMPLATE_VARIANTS: Final[tuple[str, ...]] = (
    "minimal-creative",
    "business-professional",
    "professional-enterprise",
)

# 扫描行业目录时排除的顶层目录
EXCLUDED_ROOT_DIRS: Final[frozenset[str]] = frozenset(
    {
        "node_modules",
        "dist",
        "build",
        "scripts",
        "src",
        "public",
        "tests",
        "_raw_assets",
    }
)

# 投放区与标准化阶段接受的输入扩展名（不含点，小写）
SUPPORTED_EXTENSIONS: Final[frozenset[str]] = frozenset({"jpg", "jpeg", "png", "webp"})

# 模板中引用素材使用的相对路径前缀
ASSET_PATH_PREFIX: Final[str] = "../assets/images/"

# 图标重命名：投放区 icons/ 下的子目录 -> 行业
ICON_DIR_NAME: Final[str] = "icons"

ICON_FOLDER_INDUSTRIES: Final[dict[str, str]] = {
    "Fitness": "fitness",
    "Medical": "healthcare",
    "contractor-icon-hvac": "contractors-trades",
    "e-commerce": "retail-ecommerce",
    "photography": "photography",
    "restaurant": "restaurants",
    "roofing": "roofing",
}

ICON_EXTENSIONS: Final[frozenset[str]] = frozenset(
    {".jpg", ".jpeg", ".png", ".webp", ".svg", ".avif"}
)


class ImageFormats:
    """基于 Pillow 的图像格式管理"""

    # 用户友好的别名
    ALIASES: Final[dict[str, str]] = {
        "JPG": "JPEG",
    }

    # 首选扩展名（当 Pillow 有多个选择时）
    PREFERRED_EXTENSIONS: Final[dict[str, str]] = {
        "JPEG": ".jpg",
    }

    RASTER_EXTENSIONS: Final[frozenset[str]] = frozenset(
        {"jpg", "jpeg", "png", "gif", "bmp"}
    )
    VECTOR_EXTENSIONS: Final[frozenset[str]] = frozenset({"svg", "webp"})

    @classmethod
    def get_extension(cls, format_name: str) -> str:
        """获取扩展名，优先使用首选扩展名"""
        format_upper = format_name.upper()

        if format_upper in cls.PREFERRED_EXTENSIONS:
            return cls.PREFERRED_EXTENSIONS[format_upper]

        for ext, fmt in Image.registered_extensions().items():
            if fmt and fmt.upper() == format_upper:
                return ext.lower()

        return f".{format_upper.lower()}"


def get_format_alias(format_str: str) -> str:
    """获取格式的标准名称"""
    format_upper = format_str.upper()
    return ImageFormats.ALIASES.get(format_upper, format_upper)


def get_extension(format_str: str) -> str:
    """获取格式的首选扩展名"""
    return ImageFormats.get_extension(get_format_alias(format_str))


def get_asset_type(extension: str) -> str:
    """按扩展名区分素材类型：raster / vector / unknown"""
    ext = extension.lower().lstrip(".")
    if ext in ImageFormats.RASTER_EXTENSIONS:
        return "raster"
    if ext in ImageFormats.VECTOR_EXTENSIONS:
        return "vector"
    return "unknown"
