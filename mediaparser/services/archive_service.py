"""
归档服务

把剧集元数据、视频和图片整理成媒体库目录结构：

    <输出目录>/
    └── 剧名 (年份)/
        ├── tvshow.nfo
        ├── poster.jpg
        ├── fanart.jpg
        └── Season 01/
            ├── S01E01.nfo
            └── S01E01.mkv

单个文件失败不中断整个归档，success 等价于 errors 为空。
"""

import logging
import os
import shutil
from typing import List, Optional

from mediaparser.config import ArchiveConfig, get_config
from mediaparser.models import Show, VideoFile, ImageAsset, ImageRole, ArchiveResult
from mediaparser.utils.naming import format_show_folder, format_season_folder
from mediaparser.utils.nfo_formatter import NfoFormatter


logger = logging.getLogger(__name__)


TVSHOW_NFO = "tvshow.nfo"

# 固定文件名的图片角色，其他角色保留原文件名
ROLE_FILE_NAMES = {
    ImageRole.POSTER: "poster.jpg",
    ImageRole.FANART: "fanart.jpg",
}


class ArchiveService:
    """归档服务"""

    def __init__(
        self,
        config: Optional[ArchiveConfig] = None,
        formatter: Optional[NfoFormatter] = None
    ):
        self.config = config or get_config().archive
        self.formatter = formatter or NfoFormatter()

    @property
    def encoding(self) -> str:
        return "utf-8-sig" if self.config.use_utf8_bom else "utf-8"

    def get_show_directory(self, show: Show, output_directory: str) -> str:
        return os.path.join(output_directory, format_show_folder(show.title, show.year))

    def get_season_directory(self, show_dir: str, show: Show) -> str:
        if self.config.use_season_folder:
            return os.path.join(show_dir, format_season_folder(show.season))
        return show_dir

    def archive(
        self,
        show: Optional[Show],
        videos: List[VideoFile],
        images: List[ImageAsset],
        output_directory: Optional[str] = None
    ) -> ArchiveResult:
        """
        执行归档

        Args:
            show: 剧集元数据
            videos: 已选择的视频（只复制被剧集引用的视频）
            images: 已选择的图片（只复制已分配角色的图片）
            output_directory: 输出目录，None则使用配置中的目录

        Returns:
            ArchiveResult: 创建的文件、写入字节数、错误和警告
        """
        result = ArchiveResult()

        if show is None:
            result.errors.append("剧集元数据为空")
            return result
        if not show.title or not show.title.strip():
            result.errors.append("剧集标题为空")
            return result

        output_directory = output_directory or self.config.output_directory
        if not output_directory:
            result.errors.append("未指定输出目录")
            return result

        show_dir = self.get_show_directory(show, output_directory)
        season_dir = self.get_season_directory(show_dir, show)
        result.output_directory = show_dir

        try:
            os.makedirs(season_dir, exist_ok=True)
        except OSError as e:
            result.errors.append(f"创建目录失败 {season_dir}: {e}")
            return result

        logger.info(f"📦 开始归档: {show.title} -> {show_dir}")

        self._write_text(result, os.path.join(show_dir, TVSHOW_NFO), self.formatter.format_tvshow(show))

        for episode in show.episodes:
            episode_nfo = os.path.join(season_dir, f"{episode.episode_key}.nfo")
            self._write_text(result, episode_nfo, self.formatter.format_episode(show, episode))

        self._copy_videos(result, show, videos, season_dir)
        self._copy_images(result, images, show_dir)

        result.success = not result.errors
        if result.success:
            logger.info(f"✅ 归档完成: {len(result.created_files)} 个文件, {result.total_bytes_written} bytes")
        else:
            logger.warning(f"⚠️ 归档完成但有 {len(result.errors)} 个错误")
        return result

    def _copy_videos(
        self,
        result: ArchiveResult,
        show: Show,
        videos: List[VideoFile],
        season_dir: str
    ) -> None:
        mapped_ids = set()
        for episode in show.episodes:
            video = episode.mapped_video
            if video is None or video.id in mapped_ids:
                continue
            mapped_ids.add(video.id)

            if not os.path.isfile(video.full_path):
                result.errors.append(f"视频文件不存在: {video.full_path}")
                continue

            extension = video.extension or os.path.splitext(video.file_name)[1]
            dest = os.path.join(season_dir, f"{episode.episode_key}{extension}")
            self._copy_file(result, video.full_path, dest, "视频")

        for video in videos:
            if video.id not in mapped_ids:
                result.warnings.append(f"视频未映射到剧集，已跳过: {video.display_name}")

    def _copy_images(self, result: ArchiveResult, images: List[ImageAsset], show_dir: str) -> None:
        for image in images:
            if not image.is_role_assigned:
                result.warnings.append(f"图片未分配角色，已跳过: {image.file_name}")
                continue
            if not os.path.isfile(image.full_path):
                result.errors.append(f"图片文件不存在: {image.full_path}")
                continue

            dest_name = ROLE_FILE_NAMES.get(image.role, image.file_name)
            self._copy_file(result, image.full_path, os.path.join(show_dir, dest_name), "图片")

    def _copy_file(self, result: ArchiveResult, src: str, dest: str, kind: str) -> None:
        try:
            shutil.copy2(src, dest)
        except OSError as e:
            result.errors.append(f"复制{kind}文件失败 {src}: {e}")
            logger.warning(f"⚠️ 复制失败 {src}: {e}")
            return
        result.created_files.append(dest)
        result.total_bytes_written += os.path.getsize(dest)

    def _write_text(self, result: ArchiveResult, path: str, content: str) -> None:
        try:
            with open(path, "w", encoding=self.encoding) as f:
                f.write(content)
        except OSError as e:
            result.errors.append(f"写入文件失败 {path}: {e}")
            return
        result.created_files.append(path)
        result.total_bytes_written += os.path.getsize(path)
