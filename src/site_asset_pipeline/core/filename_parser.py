"""文件名解析器。

把 <industry>-<section>-<description>.<ext> 形式的文件名分解为
(行业, 剩余部分, 扩展名)。纯函数，无副作用。
"""

from collections.abc import Sequence
from pathlib import Path

from ..models.assets import FilenameParts, RawAsset, SkipReason, SkipRecord
from ..models.constants import INDUSTRIES, SUPPORTED_EXTENSIONS


def match_industry(filename: str, industries: Sequence[str] = INDUSTRIES) -> str | None:
    """按声明顺序匹配行业前缀，先匹配者胜出

    例如列表中 "real-estate" 排在 "real-estate-extra" 之前时，
    "real-estate-extra-hero.jpg" 会被解析为 real-estate。
    """
    for industry in industries:
        if filename.startswith(f"{industry}-"):
            return industry
    return None


def parse_filename(
    filename: str, industries: Sequence[str] = INDUSTRIES
) -> FilenameParts | SkipRecord:
    """分解文件名

    Args:
        filename: 文件名（不含目录）
        industries: 有序的行业列表

    Returns:
        FilenameParts | SkipRecord: 解析结果，无法解析时返回跳过记录
    """
    industry = match_industry(filename, industries)
    if industry is None:
        return SkipRecord(name=filename, reason=SkipReason.UNKNOWN_INDUSTRY)

    rest = filename[len(industry) + 1 :]
    dot = rest.rfind(".")
    if dot == -1:
        return SkipRecord(name=filename, reason=SkipReason.MISSING_EXTENSION)

    name, extension = rest[:dot], rest[dot + 1 :].lower()
    if extension not in SUPPORTED_EXTENSIONS:
        return SkipRecord(
            name=filename,
            reason=SkipReason.UNSUPPORTED_EXTENSION,
            detail=extension or None,
        )

    if not name:
        return SkipRecord(name=filename, reason=SkipReason.EMPTY_NAME)

    return FilenameParts(industry=industry, remainder=name, extension=extension)


def to_raw_asset(path: Path, parts: FilenameParts) -> RawAsset:
    """由解析结果构建原始素材，剩余部分的第一段视为区块"""
    section, _, description = parts.remainder.partition("-")
    return RawAsset(
        path=path,
        industry=parts.industry,
        section=section,
        description=description,
        extension=parts.extension,
    )
