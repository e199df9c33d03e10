"""图像度量提取器。

解码图片并计算内容分类所需的统计量：尺寸、灰度判定、通道方差和亮度直方图熵。
"""

import re
from pathlib import Path

import numpy as np
from defusedxml import ElementTree
from PIL import Image

from ..exceptions import DecodeError, handle_image_errors
from ..models.image_metrics import ImageMetrics
from ..utils.logging_helpers import get_logger


logger = get_logger()

# 可直接转为数组的模式，其余模式先转换
_NATIVE_MODES = frozenset({"L", "LA", "RGB", "RGBA"})

# ITU-R BT.601 亮度权重
_LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])

_SVG_LENGTH = re.compile(r"^\s*([0-9]*\.?[0-9]+)")


class ImageMetricsExtractor:
    """图像度量提取器

    每个素材只解码一次；已解码的图片可直接交给 from_image。
    """

    @handle_image_errors("图像度量", DecodeError)
    def extract(self, file_path: str | Path) -> ImageMetrics:
        """从文件提取度量

        Args:
            file_path: 图片路径，SVG 只读取尺寸不做光栅化

        Returns:
            ImageMetrics: 度量快照

        Raises:
            DecodeError: 解码失败
            UnsupportedFormatError: 无法识别的格式
        """
        path = Path(file_path)
        if path.suffix.lower() == ".svg":
            return self._extract_svg(path)

        with Image.open(path) as img:
            img.load()
            source_format = (img.format or path.suffix.lstrip(".")).lower()
            return self.from_image(img, source_format)

    def from_image(self, img: Image.Image, source_format: str) -> ImageMetrics:
        """从已解码的 PIL 图片计算度量"""
        pixels = self._to_array(img)
        return ImageMetrics(
            width=img.width,
            height=img.height,
            format=source_format.lower(),
            is_grayscale=self._is_grayscale(pixels),
            channel_variances=self._channel_variances(pixels),
            entropy=self.luminance_entropy(pixels),
        )

    @staticmethod
    def _to_array(img: Image.Image) -> np.ndarray:
        """把图片转换为 (H, W, C) 的 uint8 数组"""
        if img.mode not in _NATIVE_MODES:
            if img.mode in ("1", "I", "F") or img.mode.startswith("I;"):
                img = img.convert("L")
            elif img.mode == "PA" or (img.mode == "P" and "transparency" in img.info):
                img = img.convert("RGBA")
            else:
                img = img.convert("RGB")

        pixels = np.asarray(img, dtype=np.uint8)
        if pixels.ndim == 2:
            pixels = pixels[:, :, np.newaxis]
        return pixels

    @staticmethod
    def _color_channels(pixels: np.ndarray) -> np.ndarray:
        """去掉 alpha 通道后的颜色通道"""
        channels = pixels.shape[2]
        if channels >= 3:
            return pixels[:, :, :3]
        return pixels[:, :, :1]

    def _is_grayscale(self, pixels: np.ndarray) -> bool:
        """单通道灰度，或 R/G/B 三通道均值相等；灰度+alpha 不算灰度"""
        match pixels.shape[2]:
            case 1:
                return True
            case 2:
                return False
        means = self._color_channels(pixels).reshape(-1, 3).mean(axis=0)
        return bool(np.isclose(means[0], means[1]) and np.isclose(means[1], means[2]))

    def _channel_variances(self, pixels: np.ndarray) -> tuple[float, ...]:
        color = self._color_channels(pixels)
        flat = color.reshape(-1, color.shape[2]).astype(np.float64)
        if flat.size == 0:
            return ()
        return tuple(float(v) for v in flat.var(axis=0))

    @staticmethod
    def luminance_entropy(pixels: np.ndarray) -> float:
        """256 档亮度直方图的香农熵，除以 8 归一化

        三通道及以上按 0.299R + 0.587G + 0.114B 取整计算亮度，
        单通道和灰度+alpha 直接使用第一个通道。
        """
        if pixels.ndim == 2:
            pixels = pixels[:, :, np.newaxis]

        if pixels.shape[2] >= 3:
            luma = pixels[:, :, :3].astype(np.float64) @ _LUMA_WEIGHTS
            intensity = np.clip(np.floor(luma + 0.5), 0, 255).astype(np.intp)
        else:
            intensity = pixels[:, :, 0].astype(np.intp)

        histogram = np.bincount(intensity.ravel(), minlength=256)
        total = histogram.sum()
        if total == 0:
            return 0.0

        probabilities = histogram[histogram > 0] / total
        entropy = float(-(probabilities * np.log2(probabilities)).sum()) / 8
        return min(1.0, max(0.0, entropy))

    def _extract_svg(self, path: Path) -> ImageMetrics:
        """读取 SVG 根元素的 width/height，缺失时使用 viewBox"""
        root = ElementTree.parse(path).getroot()
        width = self._parse_svg_length(root.get("width"))
        height = self._parse_svg_length(root.get("height"))

        if not (width and height) and (view_box := root.get("viewBox")):
            parts = view_box.replace(",", " ").split()
            if len(parts) == 4:
                width = width or self._parse_svg_length(parts[2])
                height = height or self._parse_svg_length(parts[3])

        logger.debug(f"SVG 尺寸 {path.name}: {width}x{height}")
        return ImageMetrics(width=width, height=height, format="svg")

    @staticmethod
    def _parse_svg_length(value: str | None) -> int:
        if not value or value.strip().endswith("%"):
            return 0
        if match := _SVG_LENGTH.match(value):
            return round(float(match.group(1)))
        return 0
