"""测试配置文件。

提供测试所需的fixtures和图片生成工具。
"""

import os
import tempfile
import time
from collections.abc import Callable
from pathlib import Path

import numpy as np
import pytest
from PIL import Image, ImageDraw

from site_asset_pipeline.config import reset_config


# 源文件时间回拨，保证输出文件的 mtime 严格更新
SOURCE_AGE_SECONDS = 60

TEMPLATE_HTML = """<!DOCTYPE html>
<html>
<body>
  <img src="../assets/images/roofing-hero-professional-crew.jpg" alt="hero">
  <section style="background-image: url('../assets/images/roofing-hero-professional-crew.jpg')">
  </section>
  <img src="../assets/images/roofing-missing-photo.jpg" alt="missing">
  <img src="https://example.com/remote.jpg" alt="remote">
  <icon-element name="phone"></icon-element>
</body>
</html>
"""


def _age(path: Path) -> Path:
    past = time.time() - SOURCE_AGE_SECONDS
    os.utime(path, (past, past))
    return path


def save_photo(path: Path, size: tuple[int, int] = (800, 600), seed: int = 0) -> Path:
    """生成高熵彩色噪声图（判定为照片）"""
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, size=(size[1], size[0], 3), dtype=np.uint8)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(pixels, "RGB").save(path)
    return _age(path)


def save_icon(path: Path, size: int = 48) -> Path:
    """生成小尺寸、低熵的透明 PNG（判定为图标）"""
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    draw.ellipse([4, 4, size - 4, size - 4], fill=(30, 120, 220, 255))
    path.parent.mkdir(parents=True, exist_ok=True)
    img.save(path, "PNG")
    return _age(path)


def save_corrupt(path: Path) -> Path:
    """写入无法解码的伪图片"""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"this is not an image")
    return _age(path)


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """隔离环境变量对全局配置的影响"""
    for name in list(os.environ):
        if name.startswith("SAP_"):
            monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def temp_dir():
    """临时目录fixture"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def project_root(temp_dir: Path) -> Path:
    """最小的多行业项目结构：roofing 与 fitness 两个行业，各带一个模板"""
    for industry in ("roofing", "fitness"):
        (temp_dir / industry / "assets" / "images").mkdir(parents=True)
        template_dir = temp_dir / industry / "minimal-creative"
        template_dir.mkdir(parents=True)
        (template_dir / "index.html").write_text(
            TEMPLATE_HTML.replace("roofing", industry), encoding="utf-8"
        )
    (temp_dir / "_raw_assets").mkdir()
    return temp_dir


@pytest.fixture
def photo_factory() -> Callable[..., Path]:
    return save_photo


@pytest.fixture
def icon_factory() -> Callable[..., Path]:
    return save_icon


@pytest.fixture
def corrupt_factory() -> Callable[[Path], Path]:
    return save_corrupt
