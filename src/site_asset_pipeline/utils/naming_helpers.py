"""文件命名工具模块。

提供统一的输出命名策略：分发文件、类别变体与图标重命名。
"""

import re
from pathlib import Path

from ..models.assets import RawAsset
from ..models.constants import get_extension
from ..models.transform_spec import VARIANT_SUFFIXES, TransformSpec


_ICON_SEPARATORS = re.compile(r"[\s_]+")


class FileNamingStrategy:
    """文件命名策略类"""

    @staticmethod
    def distributed_name(asset: RawAsset, format_name: str) -> str:
        """分发后的文件名：<industry>-<remainder><ext>"""
        return f"{asset.target_stem}{get_extension(format_name)}"

    @staticmethod
    def variant_name(source: Path, spec: TransformSpec) -> str:
        """类别变体文件名：<stem><suffix><ext>"""
        return f"{source.stem}{spec.suffix}{get_extension(spec.format)}"

    @staticmethod
    def is_variant(stem: str) -> bool:
        """文件名主干是否已带有类别后缀"""
        return stem.endswith(VARIANT_SUFFIXES)

    @staticmethod
    def icon_name(industry: str, file_path: Path) -> str:
        """图标规范名：<industry>-icon-<base><ext>"""
        base = _ICON_SEPARATORS.sub("-", file_path.stem.strip()).lower()
        return f"{industry}-icon-{base}{file_path.suffix.lower()}"
