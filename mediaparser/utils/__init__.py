"""
工具函数包
"""

from .naming import (
    placeholder_episode_title,
    sanitize_folder_name,
    format_show_folder,
    format_season_folder,
)
from .file_filter import FileFilter
from .nfo_formatter import NfoFormatter, escape_xml, generate_tvshow_nfo, generate_episode_nfo

__all__ = [
    "placeholder_episode_title",
    "sanitize_folder_name",
    "format_show_folder",
    "format_season_folder",
    "FileFilter",
    "NfoFormatter",
    "escape_xml",
    "generate_tvshow_nfo",
    "generate_episode_nfo",
]
