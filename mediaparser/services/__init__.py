"""
外部协作服务：视频扫描、图片管理、归档
"""

from .video_scanner import VideoScanner, infer_episode_number
from .image_manager import ImageManager, read_image_size
from .archive_service import ArchiveService

__all__ = [
    "VideoScanner",
    "infer_episode_number",
    "ImageManager",
    "read_image_size",
    "ArchiveService",
]
