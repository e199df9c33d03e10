"""原始素材模型。

文件名分解结果、原始素材以及跳过记录。
"""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, computed_field


class SkipReason(str, Enum):
    """跳过原因（预期内、非致命）"""

    UNKNOWN_INDUSTRY = "unknown_industry"
    MISSING_EXTENSION = "missing_extension"
    UNSUPPORTED_EXTENSION = "unsupported_extension"
    EMPTY_NAME = "empty_name"
    INDUSTRY_NOT_SELECTED = "industry_not_selected"
    INDUSTRY_DIRECTORY_MISSING = "industry_directory_missing"
    UNDETECTED_CATEGORY = "undetected_category"
    ALREADY_VARIANT = "already_variant"
    DROP_ZONE_MISSING = "drop_zone_missing"


class SkipRecord(BaseModel):
    """被跳过的文件"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="文件名或路径")
    reason: SkipReason = Field(description="跳过原因")
    detail: str | None = Field(None, description="补充说明")

    def describe(self) -> str:
        text = f"{self.name}: {self.reason.value}"
        return f"{text} ({self.detail})" if self.detail else text


class FilenameParts(BaseModel):
    """文件名分解结果：行业、剩余部分、扩展名"""

    model_config = ConfigDict(frozen=True)

    industry: str = Field(description="匹配到的行业前缀")
    remainder: str = Field(description="行业前缀之后、扩展名之前的部分")
    extension: str = Field(description="小写扩展名，不含点")


class RawAsset(BaseModel):
    """从文件名推断出元信息的原始素材"""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(description="素材文件路径")
    industry: str = Field(description="行业")
    section: str = Field(description="页面区块，如 hero、team")
    description: str = Field("", description="区块之后的描述部分")
    extension: str = Field(description="小写扩展名，不含点")

    @computed_field
    def remainder(self) -> str:
        """行业前缀之后的完整名称"""
        if self.description:
            return f"{self.section}-{self.description}"
        return self.section

    @computed_field
    def target_stem(self) -> str:
        """分发后的文件名主干：<industry>-<remainder>"""
        return f"{self.industry}-{self.remainder}"
