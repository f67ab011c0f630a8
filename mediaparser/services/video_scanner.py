"""
视频扫描服务

扫描目录中的视频文件，从文件名推断集数，并把视频关联到剧集。
"""

import logging
import os
import re
from typing import Dict, List, Optional

from mediaparser.config import ScanConfig, get_config
from mediaparser.models import VideoFile, Episode, ScanResult
from mediaparser.utils.file_filter import FileFilter

logger = logging.getLogger(__name__)

# 文件名中的集数，按顺序尝试，第一个匹配的生效
EPISODE_NUMBER_PATTERNS = [
    re.compile(r'S\d+E(\d+)', re.IGNORECASE),  # S01E05
    re.compile(r'\[(\d{1,3})\]'),              # [05]
    re.compile(r'[-_]\s*(\d{1,3})(?!\d)'),     # -05 / _05
    re.compile(r'第(\d+)话'),                   # 第05话
    re.compile(r'第(\d+)集'),                   # 第05集
    re.compile(r'\((\d{1,3})\)'),              # (05)
]


def infer_episode_number(file_name: str) -> Optional[int]:
    """
    从文件名推断集数

    Examples:
        >>> infer_episode_number("Show.S01E05.mkv")
        5
        >>> infer_episode_number("[Group] Show [03].mp4")
        3
    """
    base_name = os.path.splitext(file_name)[0]
    for pattern in EPISODE_NUMBER_PATTERNS:
        match = pattern.search(base_name)
        if match:
            number = int(match.group(1))
            if number > 0:
                return number
    return None


class VideoScanner:
    """视频扫描器"""

    def __init__(
        self,
        config: Optional[ScanConfig] = None,
        file_filter: Optional[FileFilter] = None
    ):
        self.config = config or get_config().scan
        self.filter = file_filter or FileFilter(
            video_extensions=self.config.video_extensions,
            image_extensions=self.config.image_extensions,
            exclude_patterns=self.config.exclude_patterns,
        )

    def scan_directory(self, directory: str) -> ScanResult:
        """
        扫描目录中的视频文件

        目录不存在时返回错误；单个文件读取失败记为警告并继续。
        """
        result = ScanResult(directory=directory)

        if not directory or not os.path.isdir(directory):
            result.errors.append(f"目录不存在: {directory}")
            return result

        for path in self.filter.list_files(directory, self.config.recursive):
            if not self.filter.is_video_file(path):
                continue
            try:
                size = os.path.getsize(path)
            except OSError as e:
                result.warnings.append(f"无法读取文件: {os.path.basename(path)} ({e})")
                continue

            if size < self.config.min_video_size:
                logger.debug(f"跳过过小的视频: {path} ({size} bytes)")
                continue

            result.videos.append(self.create_video_file(path, size))

        result.videos.sort(key=lambda v: v.file_name)
        result.success = True
        logger.info(f"📁 扫描到 {len(result.videos)} 个视频: {directory}")
        return result

    def create_video_file(self, path: str, size: int = 0) -> VideoFile:
        file_name = os.path.basename(path)
        video = VideoFile(
            full_path=os.path.abspath(path),
            file_name=file_name,
            file_size=size,
            extension=os.path.splitext(file_name)[1].lower(),
        )
        if self.config.auto_infer_episode:
            video.mapped_episode_number = infer_episode_number(file_name)
        return video

    # ============ 映射 ============

    def map_videos_to_episodes(
        self,
        videos: List[VideoFile],
        episodes: List[Episode]
    ) -> int:
        """
        按推断出的集数把视频关联到剧集

        每集只关联一个视频，已关联的剧集不覆盖。

        Returns:
            int: 新建立的关联数
        """
        by_number: Dict[int, Episode] = {}
        for episode in episodes:
            by_number.setdefault(episode.number, episode)

        mapped_count = 0
        for video in videos:
            if video.mapped_episode_number is None:
                continue
            episode = by_number.get(video.mapped_episode_number)
            if episode is None or episode.mapped_video is not None:
                continue
            episode.mapped_video = video
            mapped_count += 1

        logger.debug(f"🔗 自动映射 {mapped_count} 个视频")
        return mapped_count

    def unmap(self, episode: Episode) -> Optional[VideoFile]:
        """取消剧集的视频关联，返回原来的视频"""
        video = episode.mapped_video
        episode.mapped_video = None
        return video

    def get_unmapped_videos(
        self,
        videos: List[VideoFile],
        episodes: List[Episode]
    ) -> List[VideoFile]:
        """没有被任何剧集引用的视频"""
        mapped_ids = {e.mapped_video.id for e in episodes if e.mapped_video is not None}
        return [v for v in videos if v.id not in mapped_ids]

    def get_mapping_stats(
        self,
        videos: List[VideoFile],
        episodes: List[Episode]
    ) -> Dict[str, int]:
        unmapped = self.get_unmapped_videos(videos, episodes)
        mapped_episodes = sum(1 for e in episodes if e.mapped_video is not None)
        return {
            "total_videos": len(videos),
            "mapped_videos": len(videos) - len(unmapped),
            "unmapped_videos": len(unmapped),
            "total_episodes": len(episodes),
            "mapped_episodes": mapped_episodes,
        }
