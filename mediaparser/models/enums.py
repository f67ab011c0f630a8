"""
枚举类型

包含：
- WorkflowState: 工作流状态（草稿/就绪/已归档）
- ValidationCategory: 校验类别
- ImageRole: 图片角色
- FieldTarget: 模板捕获组对应的语义字段
"""

from typing import Dict
from enum import Enum


# ============================================================
# 工作流
# ============================================================

class WorkflowState(str, Enum):
    """工作流状态"""
    DRAFT = "Draft"          # 初始状态，也是所有回退的落点
    READY = "Ready"          # 校验通过，可以归档
    ARCHIVED = "Archived"    # 终态，只能通过重置离开


class ValidationCategory(str, Enum):
    """校验类别"""
    METADATA = "Metadata"
    VIDEO_MAPPING = "VideoMapping"
    IMAGE_ASSETS = "ImageAssets"


# 失败摘要中使用的类别前缀
VALIDATION_CATEGORY_ZH: Dict[ValidationCategory, str] = {
    ValidationCategory.METADATA: "元数据",
    ValidationCategory.VIDEO_MAPPING: "视频映射",
    ValidationCategory.IMAGE_ASSETS: "图片",
}


# ============================================================
# 媒体资源
# ============================================================

class ImageRole(str, Enum):
    """图片角色"""
    UNKNOWN = "Unknown"
    POSTER = "Poster"        # 海报（竖向）
    FANART = "Fanart"        # 背景图
    THUMB = "Thumb"
    STILL = "Still"          # 剧照
    BANNER = "Banner"
    CHARACTER = "Character"
    LOGO = "Logo"


# ============================================================
# 模板解析
# ============================================================

class FieldTarget(str, Enum):
    """模板字段目标"""
    SHOW_TITLE = "ShowTitle"
    ORIGINAL_TITLE = "OriginalTitle"
    YEAR = "Year"
    STUDIO = "Studio"
    DIRECTOR = "Director"
    ACTORS = "Actors"
    TAGS = "Tags"
    SUMMARY = "Summary"
    EPISODE_LIST = "EpisodeList"
    RATING = "Rating"
