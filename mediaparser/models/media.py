"""
媒体数据模型

包含：
- VideoFile: 视频文件（由外部扫描组件提供）
- ImageAsset: 图片资源（由外部扫描组件提供）
- Episode: 单集元数据
- Show: 剧集元数据

VideoFile / ImageAsset 在进入系统时分配不透明的 id，
所有"是否已映射""是否同一张图片"的判断都基于 id，而不是路径字符串。
"""

import os
import uuid
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .enums import ImageRole


def _new_id() -> str:
    return uuid.uuid4().hex


def clamp_rating(value: float) -> float:
    """评分限制在 [0, 10]"""
    return max(0.0, min(10.0, value))


class VideoFile(BaseModel):
    """视频文件"""
    id: str = Field(default_factory=_new_id, description="不透明标识")
    full_path: str = Field(default="", description="完整路径")
    file_name: str = Field(default="", description="文件名")
    file_size: int = Field(default=0, description="文件大小(字节)")
    extension: str = Field(default="", description="扩展名（小写，含点）")
    mapped_episode_number: Optional[int] = Field(default=None, description="推断/指定的集数")
    duration_seconds: int = Field(default=0, description="时长(秒)")
    resolution: str = Field(default="", description="分辨率")
    codec: str = Field(default="", description="编码")

    @property
    def is_mapped(self) -> bool:
        return self.mapped_episode_number is not None

    @property
    def base_name(self) -> str:
        return os.path.splitext(self.file_name)[0]

    @property
    def display_name(self) -> str:
        """显示用文件名，缺省时取路径最后一段"""
        if self.file_name:
            return self.file_name
        return self.full_path.replace("\\", "/").rsplit("/", 1)[-1]


class ImageAsset(BaseModel):
    """图片资源"""
    id: str = Field(default_factory=_new_id, description="不透明标识")
    full_path: str = Field(default="", description="完整路径")
    file_name: str = Field(default="", description="文件名")
    width: int = Field(default=0, description="宽度")
    height: int = Field(default=0, description="高度")
    file_size: int = Field(default=0, description="文件大小(字节)")
    format: str = Field(default="", description="格式，如 JPG/PNG")
    role: ImageRole = Field(default=ImageRole.UNKNOWN, description="图片角色")

    @property
    def is_role_assigned(self) -> bool:
        return self.role != ImageRole.UNKNOWN

    @property
    def dimensions(self) -> str:
        return f"{self.width}x{self.height}"


class Episode(BaseModel):
    """单集元数据"""
    season: int = Field(default=0, description="季号，0表示未设置")
    number: int = Field(default=0, description="集号")
    title: str = Field(default="", description="集标题")
    summary: str = Field(default="", description="集简介")
    release_year: int = Field(default=0, description="发行年份")
    release_date: str = Field(default="", description="播出日期（原始字符串）")
    tags: List[str] = Field(default_factory=list, description="标签")
    # 引用调用方持有的视频对象，不拥有它
    mapped_video: Optional[VideoFile] = Field(default=None, description="映射的视频文件")
    raw_metadata: str = Field(default="", description="原始元数据文本")

    @property
    def is_video_mapped(self) -> bool:
        return self.mapped_video is not None

    @property
    def episode_key(self) -> str:
        return f"S{self.season:02d}E{self.number:02d}"

    @property
    def display_title(self) -> str:
        return f"{self.episode_key} - {self.title}"


class Show(BaseModel):
    """剧集元数据"""
    title: str = ""
    original_title: str = ""
    sort_title: str = ""
    premiered: str = Field(default="", description="首播日期（原始字符串）")
    year: int = Field(default=0, description="年份，0表示未设置")
    studio: str = ""
    director: str = ""
    actors: List[str] = Field(default_factory=list, description="演员显示字符串")
    tags: List[str] = Field(default_factory=list, description="标签（去重，保持插入顺序）")
    plot: str = ""
    summary: str = ""
    rating: float = Field(default=0.0, description="评分 0-10")
    show_type: str = "TV"
    status: str = "Completed"
    season: int = Field(default=1, description="季号")
    episodes: List[Episode] = Field(default_factory=list)
    raw_metadata: str = Field(default="", description="原始元数据文本")

    @field_validator("rating")
    @classmethod
    def _clamp_rating(cls, v: float) -> float:
        return clamp_rating(v)
