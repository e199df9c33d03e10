"""素材转换器。

按转换规格把源图 cover 缩放、居中裁剪并重新编码。每次调用最多写入一个文件，
从不删除源文件；单个素材的失败被转换为失败结果，不会中断批处理。
"""

from pathlib import Path

import vtracer
from PIL import Image, ImageOps

from ..config import EncodingDefaults, get_config
from ..exceptions import (
    DecodeError,
    EncodeError,
    ErrorHandler,
    ProcessingError,
    handle_image_errors,
)
from ..models.classification import ImageCategory
from ..models.constants import get_format_alias
from ..models.results import AssetStatus, ProcessedAsset
from ..models.transform_spec import TransformSpec
from ..utils.cleanup_helpers import TempFileManager
from ..utils.file_helpers import read_image_size
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter
from ..utils.naming_helpers import FileNamingStrategy
from .formats import FormatProcessor, get_save_parameters


logger = get_logger()

# EXIF 方向值中需要交换宽高的取值
_ROTATED_ORIENTATIONS = frozenset({5, 6, 7, 8})
_EXIF_ORIENTATION = 0x0112

# vtracer 彩色描摹参数
_TRACE_OPTIONS = {
    "colormode": "color",
    "hierarchical": "stacked",
    "mode": "spline",
    "filter_speckle": 2,
    "color_precision": 6,
    "layer_difference": 16,
    "corner_threshold": 60,
    "length_threshold": 4.0,
    "max_iterations": 10,
    "splice_threshold": 45,
    "path_precision": 3,
}


class AssetTransformer:
    """素材转换器"""

    def __init__(
        self,
        format_processor: FormatProcessor | None = None,
        encoding: EncodingDefaults | None = None,
    ) -> None:
        self.format_processor = format_processor or FormatProcessor()
        self.encoding = encoding or get_config().encoding

    # ------------------------------------------------------------------
    # 解码 / 编码
    # ------------------------------------------------------------------

    @handle_image_errors("图像解码", DecodeError)
    def load_image(self, file_path: Path) -> Image.Image:
        """完整解码图片并按 EXIF 方向校正，返回与文件无关的副本"""
        with Image.open(file_path) as img:
            img.load()
            return ImageOps.exif_transpose(img)

    @handle_image_errors("读取图片尺寸", DecodeError)
    def read_oriented_size(self, file_path: Path) -> tuple[int, int]:
        """只读文件头，返回按 EXIF 方向校正后的尺寸"""
        with Image.open(file_path) as img:
            width, height = img.size
            if img.getexif().get(_EXIF_ORIENTATION) in _ROTATED_ORIENTATIONS:
                return (height, width)
            return (width, height)

    @handle_image_errors("图像编码", EncodeError)
    def encode(
        self,
        img: Image.Image,
        output_path: Path,
        format_name: str,
        quality: int | None = None,
    ) -> int:
        """编码到临时文件后原子替换到目标路径

        Returns:
            int: 输出文件大小（字节）
        """
        target_format = get_format_alias(format_name)
        prepared = self.format_processor.prepare_for_format(img, target_format)
        params = get_save_parameters(target_format, quality, self.encoding)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        with TempFileManager() as temp_files:
            temp_path = temp_files.temp_path_for(output_path)
            prepared.save(temp_path, format=target_format, **params)
            temp_path.replace(output_path)

        return output_path.stat().st_size

    @handle_image_errors("图标矢量化", EncodeError)
    def trace_svg(self, source: Path, output_path: Path) -> int:
        """用 vtracer 把光栅图标描摹为 SVG，写入方式与 encode 相同"""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with TempFileManager() as temp_files:
            temp_path = temp_files.temp_path_for(output_path)
            vtracer.convert_image_to_svg_py(
                str(source), str(temp_path), **_TRACE_OPTIONS
            )
            if not temp_path.is_file() or temp_path.stat().st_size == 0:
                raise EncodeError("矢量化未生成 SVG 内容", source)
            temp_path.replace(output_path)

        return output_path.stat().st_size

    # ------------------------------------------------------------------
    # 缩放
    # ------------------------------------------------------------------

    def resize_cover(self, img: Image.Image, spec: TransformSpec) -> Image.Image:
        """cover 缩放并居中裁剪

        未启用 without_enlargement 时输出精确为目标尺寸；
        启用时缩放比例不超过 1，输出不会超过原始尺寸。
        """
        if not spec.without_enlargement:
            return ImageOps.fit(
                img, spec.size, method=Image.Resampling.LANCZOS, centering=(0.5, 0.5)
            )

        target = spec.expected_size(img.size)
        scale = min(1.0, max(spec.width / img.width, spec.height / img.height))
        if scale < 1.0:
            scaled = (
                max(1, round(img.width * scale)),
                max(1, round(img.height * scale)),
            )
            img = img.resize(scaled, Image.Resampling.LANCZOS)

        return self._center_crop(img, target)

    @staticmethod
    def _center_crop(img: Image.Image, size: tuple[int, int]) -> Image.Image:
        width, height = size
        if img.size == size:
            return img
        left = (img.width - width) // 2
        top = (img.height - height) // 2
        return img.crop((left, top, left + width, top + height))

    # ------------------------------------------------------------------
    # 跳过规则
    # ------------------------------------------------------------------

    @staticmethod
    def is_up_to_date(
        source: Path, output: Path, expected_size: tuple[int, int]
    ) -> bool:
        """输出已存在、比源文件新、且实际尺寸符合预期时视为已优化"""
        if not AssetTransformer.is_newer(source, output):
            return False
        return read_image_size(output) == expected_size

    @staticmethod
    def is_newer(source: Path, output: Path) -> bool:
        """输出存在且修改时间严格晚于源文件"""
        if not output.is_file():
            return False
        return output.stat().st_mtime_ns > source.stat().st_mtime_ns

    def _already_optimized(
        self,
        source: Path,
        output: Path,
        size: tuple[int, int],
        format_name: str,
        category: ImageCategory | None,
    ) -> ProcessedAsset:
        logger.debug(f"已是最新，跳过编码: {output}")
        return ProcessedAsset(
            source_path=source,
            output_path=output,
            status=AssetStatus.ALREADY_OPTIMIZED,
            category=category,
            format_used=get_format_alias(format_name),
            original_size=source.stat().st_size,
            output_size=output.stat().st_size,
            output_dimensions=size,
            success=True,
        )

    # ------------------------------------------------------------------
    # 对外接口
    # ------------------------------------------------------------------

    def transform(
        self, source: Path, spec: TransformSpec, output_path: Path | None = None
    ) -> ProcessedAsset:
        """按类别规格生成标准化变体

        Args:
            source: 源图片
            spec: 转换规格
            output_path: 输出路径，默认为源文件同目录下的 <stem><suffix>.<ext>

        Returns:
            ProcessedAsset: optimized / already_optimized / failed
        """
        source = Path(source)
        output_path = output_path or source.with_name(
            FileNamingStrategy.variant_name(source, spec)
        )

        try:
            expected = spec.expected_size(self.read_oriented_size(source))
            if self.is_up_to_date(source, output_path, expected):
                return self._already_optimized(
                    source, output_path, expected, spec.format, spec.category
                )

            img = self.load_image(source)
            img = self.format_processor.prepare_for_format(img, spec.format)
            resized = self.resize_cover(img, spec)
            output_size = self.encode(resized, output_path, spec.format, spec.quality)

            logger.info(MessageFormatter.written(source.name, output_path))
            return ProcessedAsset(
                source_path=source,
                output_path=output_path,
                status=AssetStatus.OPTIMIZED,
                category=spec.category,
                format_used=get_format_alias(spec.format),
                original_size=source.stat().st_size,
                output_size=output_size,
                output_dimensions=resized.size,
                success=True,
            )
        except (ProcessingError, OSError) as e:
            return ErrorHandler.handle_asset_error(
                e, source, "图像标准化", output_path, spec.category
            )

    def convert(
        self,
        img: Image.Image,
        source: Path,
        output_path: Path,
        format_name: str,
        quality: int | None = None,
        category: ImageCategory | None = None,
    ) -> ProcessedAsset:
        """把已解码的图片按原尺寸编码为另一种格式（分发阶段使用）"""
        try:
            if self.is_up_to_date(source, output_path, img.size):
                return self._already_optimized(
                    source, output_path, img.size, format_name, category
                )

            output_size = self.encode(img, output_path, format_name, quality)

            logger.info(MessageFormatter.written(source.name, output_path))
            return ProcessedAsset(
                source_path=source,
                output_path=output_path,
                status=AssetStatus.OPTIMIZED,
                category=category,
                format_used=get_format_alias(format_name),
                original_size=source.stat().st_size,
                output_size=output_size,
                output_dimensions=img.size,
                success=True,
            )
        except (ProcessingError, OSError) as e:
            return ErrorHandler.handle_asset_error(
                e, source, "格式转换", output_path, category
            )

    def vectorize(
        self,
        source: Path,
        output_path: Path,
        category: ImageCategory | None = None,
    ) -> ProcessedAsset:
        """把 PNG 图标描摹为 SVG（分发阶段使用）

        SVG 没有可比较的像素尺寸，只按修改时间判断是否已是最新。
        """
        try:
            if self.is_newer(source, output_path):
                logger.debug(f"已是最新，跳过矢量化: {output_path}")
                return ProcessedAsset(
                    source_path=source,
                    output_path=output_path,
                    status=AssetStatus.ALREADY_OPTIMIZED,
                    category=category,
                    format_used="SVG",
                    original_size=source.stat().st_size,
                    output_size=output_path.stat().st_size,
                    success=True,
                )

            output_size = self.trace_svg(source, output_path)

            logger.info(MessageFormatter.written(source.name, output_path))
            return ProcessedAsset(
                source_path=source,
                output_path=output_path,
                status=AssetStatus.OPTIMIZED,
                category=category,
                format_used="SVG",
                original_size=source.stat().st_size,
                output_size=output_size,
                success=True,
            )
        except (ProcessingError, OSError) as e:
            return ErrorHandler.handle_asset_error(
                e, source, "图标矢量化", output_path, category
            )
