"""处理结果模型。

定义单个素材、阶段、模板改写以及整条流水线的结果数据结构。
"""

from collections.abc import Iterator
from enum import Enum
from pathlib import Path
from typing import Any

from humanize import naturalsize
from pydantic import BaseModel, ConfigDict, Field

from .assets import SkipReason, SkipRecord
from .classification import ImageCategory
from .constants import ASSET_PATH_PREFIX


class BaseResult(BaseModel):
    """结果基类，包含通用字段和方法"""

    success: bool = Field(description="是否成功")
    error: str | None = Field(None, description="错误信息")

    @staticmethod
    def format_size(size_bytes: int) -> str:
        """格式化文件大小为人类可读格式"""
        return naturalsize(size_bytes, binary=True)


class ResultCollection(BaseResult):
    """结果集合基类，提供通用的统计方法"""

    results: list[Any] = Field(default_factory=list, description="结果列表")

    def get_successful_items(self) -> list[Any]:
        """获取成功的结果项"""
        return [r for r in self.results if getattr(r, "success", False)]

    def get_failed_items(self) -> list[Any]:
        """获取失败的结果项"""
        return [r for r in self.results if not getattr(r, "success", False)]

    def get_total_count(self) -> int:
        """获取总数量"""
        return len(self.results)

    def get_success_count(self) -> int:
        """获取成功数量"""
        return len(self.get_successful_items())

    def get_failure_count(self) -> int:
        """获取失败数量"""
        return len(self.get_failed_items())

    def get_success_rate(self) -> float:
        """获取成功率（百分比）"""
        total = self.get_total_count()
        if total == 0:
            return 0.0
        return (self.get_success_count() / total) * 100


class AssetStatus(str, Enum):
    """单个素材的处理状态"""

    OPTIMIZED = "optimized"
    ALREADY_OPTIMIZED = "already_optimized"
    FAILED = "failed"


class ProcessedAsset(BaseResult):
    """单个输出文件的处理结果，创建后不可变"""

    model_config = ConfigDict(frozen=True)

    source_path: Path = Field(description="源文件路径")
    output_path: Path = Field(description="输出文件路径")
    status: AssetStatus = Field(description="处理状态")
    category: ImageCategory | None = Field(None, description="语义类别")
    format_used: str | None = Field(None, description="输出格式")
    original_size: int = Field(0, description="源文件大小（字节）")
    output_size: int = Field(0, description="输出文件大小（字节）")
    output_dimensions: tuple[int, int] | None = Field(None, description="输出尺寸")

    @property
    def size_delta(self) -> int:
        """源文件与输出文件的大小差（可能为负）"""
        return self.original_size - self.output_size

    def get_size_saved(self) -> int:
        """节省的字节数"""
        if self.status is not AssetStatus.OPTIMIZED:
            return 0
        return max(0, self.size_delta)

    def get_summary(self) -> str:
        """结果摘要"""
        match self.status:
            case AssetStatus.FAILED:
                return f"失败: {self.error}"
            case AssetStatus.ALREADY_OPTIMIZED:
                return f"已是最新: {self.output_path.name}"
            case _:
                return (
                    f"{self.format_size(self.original_size)} → "
                    f"{self.format_size(self.output_size)} "
                    f"({self.output_path.name})"
                )


class StageReport(ResultCollection):
    """单个阶段的汇总结果"""

    stage: str = Field(description="阶段名称")
    results: list[ProcessedAsset] = Field(default_factory=list)
    skipped: list[SkipRecord] = Field(default_factory=list)
    drop_zone_created: bool = Field(False, description="投放区是否为本次新建")

    def add(self, result: ProcessedAsset) -> None:
        self.results.append(result)

    def skip(self, name: str, reason: SkipReason, detail: str | None = None) -> None:
        self.skipped.append(SkipRecord(name=name, reason=reason, detail=detail))

    def extend(self, other: "StageReport") -> None:
        self.results.extend(other.results)
        self.skipped.extend(other.skipped)

    def _count(self, status: AssetStatus) -> int:
        return sum(1 for r in self.results if r.status is status)

    @property
    def optimized_count(self) -> int:
        return self._count(AssetStatus.OPTIMIZED)

    @property
    def already_optimized_count(self) -> int:
        return self._count(AssetStatus.ALREADY_OPTIMIZED)

    @property
    def failed_count(self) -> int:
        return self._count(AssetStatus.FAILED)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def processed_count(self) -> int:
        """成功处理的不同源文件数"""
        return len({r.source_path for r in self.get_successful_items()})

    def get_total_size_saved(self) -> int:
        """总节省大小"""
        return sum(r.get_size_saved() for r in self.results)

    def get_summary(self) -> str:
        """阶段摘要"""
        if not self.success:
            return f"{self.stage} 失败: {self.error}"

        return (
            f"[{self.stage}] 处理 {self.processed_count} 个素材, "
            f"新生成 {self.optimized_count}, "
            f"已是最新 {self.already_optimized_count}, "
            f"跳过 {self.skipped_count}, "
            f"失败 {self.failed_count}, "
            f"总节省 {self.format_size(self.get_total_size_saved())}"
        )


class ReferenceMapping(BaseModel):
    """模板引用映射：旧文件名 -> 新文件名（同一路径前缀下）"""

    prefix: str = Field(ASSET_PATH_PREFIX, description="模板中使用的路径前缀")
    entries: dict[str, str] = Field(default_factory=dict)

    def add(self, old_name: str, new_name: str) -> None:
        if old_name != new_name:
            self.entries[old_name] = new_name

    def pairs(self) -> Iterator[tuple[str, str]]:
        """按插入顺序产出完整的旧路径、新路径"""
        for old_name, new_name in self.entries.items():
            yield f"{self.prefix}{old_name}", f"{self.prefix}{new_name}"

    def __len__(self) -> int:
        return len(self.entries)


class RewriteResult(BaseResult):
    """单个模板文件的改写结果"""

    path: Path
    replacements: int = 0
    written: bool = False


class RewriteReport(ResultCollection):
    """模板改写汇总"""

    results: list[RewriteResult] = Field(default_factory=list)

    def get_total_replacements(self) -> int:
        return sum(r.replacements for r in self.results)

    def get_written_files(self) -> list[Path]:
        return [r.path for r in self.results if r.written]

    def get_summary(self) -> str:
        if not self.success:
            return f"模板改写失败: {self.error}"
        return (
            f"[update-templates] 检查 {self.get_total_count()} 个模板, "
            f"改写 {len(self.get_written_files())} 个, "
            f"替换 {self.get_total_replacements()} 处引用, "
            f"失败 {self.get_failure_count()}"
        )


class PipelineSummary(BaseResult):
    """整条流水线的结果"""

    distribution: StageReport | None = None
    standardization: StageReport | None = None
    rewrite: RewriteReport | None = None
    manifests: list[Path] = Field(default_factory=list)
    reports: list[Path] = Field(default_factory=list)

    def get_failed_count(self) -> int:
        return sum(
            stage.failed_count
            for stage in (self.distribution, self.standardization)
            if stage is not None
        )

    def get_summary_lines(self) -> list[str]:
        lines = []
        for stage in (self.distribution, self.standardization, self.rewrite):
            if stage is not None:
                lines.append(stage.get_summary())
        if self.manifests:
            lines.append(f"[manifest] 生成 {len(self.manifests)} 个清单")
        if self.reports:
            lines.append(f"[audit] 报告: {', '.join(p.name for p in self.reports)}")
        return lines
