"""
命名工具

统一的集标题占位、集键和归档目录命名规则。

命名格式：
- 集键：SxxExx（见 Episode.episode_key）
- 剧集目录：剧名 (年份)
- 季目录：Season xx
"""

import re
from typing import Optional


# 文件夹名中不允许的字符（Windows 禁止字符 + 控制字符）
INVALID_FOLDER_CHARS = r'[<>:"/\\|?*\x00-\x1f]'

MAX_FOLDER_NAME_LENGTH = 100


def placeholder_episode_title(number: int) -> str:
    """
    集标题占位

    Examples:
        >>> placeholder_episode_title(3)
        '第3话'
    """
    return f"第{number}话"


def sanitize_folder_name(name: str) -> str:
    """
    清理目录名中的非法字符

    非法字符替换为下划线，长度限制为 100 个字符。

    Args:
        name: 原始名称

    Returns:
        清理后的名称，空名称返回 "Unknown"
    """
    if not name:
        return "Unknown"

    cleaned = re.sub(INVALID_FOLDER_CHARS, '_', name)

    if len(cleaned) > MAX_FOLDER_NAME_LENGTH:
        cleaned = cleaned[:MAX_FOLDER_NAME_LENGTH]

    cleaned = cleaned.strip()
    return cleaned or "Unknown"


def format_show_folder(title: str, year: Optional[int] = None) -> str:
    """
    格式化剧集根目录名

    格式：剧名 (年份) 或 剧名（无年份时）

    Examples:
        >>> format_show_folder("轻音少女", 2009)
        '轻音少女 (2009)'
    """
    folder = sanitize_folder_name(title)
    if year and year > 0:
        folder = f"{folder} ({year})"
    return folder


def format_season_folder(season: int) -> str:
    """季目录名"""
    return f"Season {season:02d}"
