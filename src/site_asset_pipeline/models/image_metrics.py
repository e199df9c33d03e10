"""图像度量模型。

解码后图像的只读快照，每个素材只计算一次，内容分类依赖于此。
"""

from pydantic import BaseModel, ConfigDict, Field, computed_field


class ImageMetrics(BaseModel):
    """图像度量快照"""

    model_config = ConfigDict(frozen=True)

    width: int = Field(ge=0, description="图片宽度")
    height: int = Field(ge=0, description="图片高度")
    format: str = Field(description="源格式（小写），如 png、jpeg、svg")
    is_grayscale: bool = Field(False, description="是否为灰度图")
    channel_variances: tuple[float, ...] = Field(
        default=(), description="各颜色通道的方差"
    )
    entropy: float = Field(
        0.0, ge=0.0, le=1.0, description="亮度直方图熵，已归一化到 0..1"
    )

    @computed_field
    def aspect_ratio(self) -> float:
        """宽高比"""
        return self.width / self.height if self.height > 0 else 0.0

    @computed_field
    def pixel_count(self) -> int:
        """总像素数"""
        return self.width * self.height

    @computed_field
    def color_variance(self) -> float:
        """R/G/B 通道方差的平均值，少于三个通道时为 0"""
        if len(self.channel_variances) < 3:
            return 0.0
        return sum(self.channel_variances[:3]) / 3
