"""
扫描用的文件过滤

按扩展名区分视频和图片，按 fnmatch 模式跳过系统目录和隐藏文件
"""

import os
import fnmatch
from typing import Iterable, List, Optional, Set

from mediaparser.config import get_config


def _normalize_extensions(extensions: Iterable[str]) -> Set[str]:
    # ".MKV" / "mkv" -> ".mkv"
    return {
        ext.lower() if ext.startswith('.') else f'.{ext.lower()}'
        for ext in extensions
    }


class FileFilter:
    """扫描目录时使用的扩展名和排除规则"""

    def __init__(
        self,
        video_extensions: Optional[List[str]] = None,
        image_extensions: Optional[List[str]] = None,
        exclude_patterns: Optional[List[str]] = None
    ):
        """
        Args:
            video_extensions: 视频扩展名，省略时取 scan 配置
            image_extensions: 图片扩展名，省略时取 scan 配置
            exclude_patterns: 排除模式，省略时取 scan 配置
        """
        scan = get_config().scan

        if video_extensions is None:
            video_extensions = scan.video_extensions
        if image_extensions is None:
            image_extensions = scan.image_extensions
        if exclude_patterns is None:
            exclude_patterns = scan.exclude_patterns

        self.video_extensions = _normalize_extensions(video_extensions)
        self.image_extensions = _normalize_extensions(image_extensions)
        self.exclude_patterns = list(exclude_patterns)

    def _extension(self, filename: str) -> str:
        return os.path.splitext(filename)[1].lower()

    def is_video_file(self, filename: str) -> bool:
        return self._extension(filename) in self.video_extensions

    def is_image_file(self, filename: str) -> bool:
        return self._extension(filename) in self.image_extensions

    def should_exclude(self, path: str) -> bool:
        """只看最后一段名称，匹配任一排除模式即排除"""
        name = os.path.basename(path.rstrip('/\\'))
        return any(fnmatch.fnmatch(name, pattern) for pattern in self.exclude_patterns)

    def list_files(self, directory: str, recursive: bool = False) -> List[str]:
        """
        列出目录中未被排除的文件

        Args:
            directory: 扫描目录
            recursive: 是否进入子目录，被排除的子目录整体跳过

        Returns:
            List[str]: 文件完整路径，未排序
        """
        files: List[str] = []

        if not recursive:
            for name in os.listdir(directory):
                path = os.path.join(directory, name)
                if os.path.isfile(path) and not self.should_exclude(name):
                    files.append(path)
            return files

        for root, dirs, names in os.walk(directory):
            # 原地修改 dirs，os.walk 不再进入被排除的目录
            dirs[:] = [d for d in dirs if not self.should_exclude(d)]
            files.extend(
                os.path.join(root, name)
                for name in names
                if not self.should_exclude(name)
            )
        return files
