"""格式处理器模块。

为目标格式准备色彩模式并生成 Pillow 保存参数。
"""

from io import BytesIO
from typing import Any

from PIL import Image

from ..config import EncodingDefaults, get_config
from ..models.constants import get_format_alias
from ..utils.logging_helpers import get_logger


logger = get_logger()


class FormatProcessor:
    """格式处理器，检测可写格式并准备图片模式"""

    def __init__(self) -> None:
        self.supported_formats = {
            fmt.upper() for fmt in Image.registered_extensions().values() if fmt
        }
        self.avif_supported = self._check_format_support("AVIF")

        logger.debug(f"支持的格式: {sorted(self.supported_formats)}")
        if self.avif_supported:
            logger.debug("AVIF 格式支持已启用")

    def _check_format_support(self, format_name: str) -> bool:
        """检查格式能否实际编码并重新打开"""
        if format_name.upper() not in self.supported_formats:
            return False

        try:
            buffer = BytesIO()
            Image.new("RGB", (1, 1), color="red").save(buffer, format=format_name)
            buffer.seek(0)
            with Image.open(buffer) as probe:
                probe.load()
            return True
        except Exception as e:
            logger.debug(f"格式 {format_name} 不支持: {e}")
            return False

    def can_encode(self, format_name: str) -> bool:
        """格式是否可用于光栅输出（SVG 不能由光栅图生成）"""
        target = get_format_alias(format_name)
        match target:
            case "AVIF":
                return self.avif_supported
            case "JPEG" | "PNG" | "WEBP":
                return target in self.supported_formats
            case _:
                return False

    def prepare_for_format(self, img: Image.Image, target_format: str) -> Image.Image:
        """为目标格式准备图片

        Args:
            img: PIL图片对象
            target_format: 目标格式

        Returns:
            Image.Image: 处理后的图片对象
        """
        match get_format_alias(target_format):
            case "JPEG":
                return self._prepare_for_jpeg(img)
            case "PNG":
                return self._prepare_for_png(img)
            case "WEBP" | "AVIF":
                return self._prepare_for_modern(img)
            case _:
                return img

    def _prepare_for_jpeg(self, img: Image.Image) -> Image.Image:
        """JPEG 不支持透明度，透明区域合成到白色背景上"""
        if img.mode == "P":
            if "transparency" not in img.info:
                return img.convert("RGB")
            img = img.convert("RGBA")

        if img.mode in ("RGBA", "LA", "PA"):
            img = img.convert("RGBA")
            background = Image.new("RGB", img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            return background

        if img.mode != "RGB":
            return img.convert("RGB")

        return img

    def _prepare_for_png(self, img: Image.Image) -> Image.Image:
        """PNG 支持多种模式，只处理调色板和 CMYK"""
        if img.mode == "P":
            if "transparency" in img.info:
                return img.convert("RGBA")
            return img.convert("RGB")

        if img.mode == "CMYK":
            return img.convert("RGB")

        return img

    def _prepare_for_modern(self, img: Image.Image) -> Image.Image:
        """WebP/AVIF 只接受 RGB 和 RGBA"""
        if img.mode in ("RGB", "RGBA"):
            return img
        if img.mode in ("LA", "PA") or (img.mode == "P" and "transparency" in img.info):
            return img.convert("RGBA")
        return img.convert("RGB")


def get_save_parameters(
    format_name: str,
    quality: int | None = None,
    defaults: EncodingDefaults | None = None,
) -> dict[str, Any]:
    """获取保存参数

    Args:
        format_name: 目标格式
        quality: 质量，None 时使用格式默认值
        defaults: 编码默认配置，默认读取全局配置

    Returns:
        dict: 传给 Image.save 的参数（不含 format）
    """
    defaults = defaults or get_config().encoding
    target = get_format_alias(format_name)
    params = dict(defaults.get_format_defaults(target))

    if quality is not None and "quality" in params:
        params["quality"] = max(1, min(100, quality))

    match target:
        case "JPEG":
            params["subsampling"] = 2 if params["quality"] < 85 else 1
        case "WEBP":
            params["alpha_quality"] = min(100, params["quality"] + 10)
        case "AVIF":
            params["speed"] = 2 if params["quality"] >= 90 else 6

    return params
