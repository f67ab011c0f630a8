"""
图片管理服务

扫描目录中的图片、读取尺寸、管理图片角色（海报、背景图等）。
竖向图片（宽高比 < 0.7）扫描时自动标记为海报。
"""

import logging
import os
from typing import Callable, Dict, List, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from mediaparser.config import ScanConfig, get_config
from mediaparser.models import ImageAsset, ImageRole, ScanResult
from mediaparser.utils.file_filter import FileFilter

logger = logging.getLogger(__name__)

RoleListener = Callable[[ImageAsset, ImageRole], None]


def read_image_size(path: str) -> Tuple[int, int]:
    """读取图片尺寸，无法识别时返回 (0, 0)"""
    try:
        with Image.open(path) as img:
            return img.size
    except (UnidentifiedImageError, OSError) as e:
        logger.debug(f"无法读取图片尺寸: {path} ({e})")
        return 0, 0


class ImageManager:
    """图片管理器"""

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
        self.images: List[ImageAsset] = []
        self._role_listeners: List[RoleListener] = []

    def add_role_listener(self, listener: RoleListener) -> None:
        """注册角色变化回调，角色未变化时不调用"""
        self._role_listeners.append(listener)

    # ============ 扫描 ============

    def scan_directory(self, directory: str) -> ScanResult:
        """
        扫描目录中的图片，结果同时替换 self.images
        """
        result = ScanResult(directory=directory)

        if not directory or not os.path.isdir(directory):
            result.errors.append(f"目录不存在: {directory}")
            return result

        images: List[ImageAsset] = []
        for path in self.filter.list_files(directory, self.config.recursive):
            if not self.filter.is_image_file(path):
                continue
            image = self.scan_file(path)
            if image is not None:
                images.append(image)

        images.sort(key=lambda i: i.file_name)
        self.images = images
        result.images = images
        result.success = True

        if not images:
            result.warnings.append("未找到任何图片文件")

        logger.info(f"🖼️ 扫描到 {len(images)} 张图片: {directory}")
        return result

    def scan_file(self, path: str) -> Optional[ImageAsset]:
        """扫描单个图片文件，不存在、不是图片或过小时返回 None"""
        if not os.path.isfile(path) or not self.filter.is_image_file(path):
            return None

        size = os.path.getsize(path)
        if size < self.config.min_image_size:
            logger.debug(f"跳过过小的图片: {path} ({size} bytes)")
            return None

        file_name = os.path.basename(path)
        width, height = read_image_size(path)
        image = ImageAsset(
            full_path=os.path.abspath(path),
            file_name=file_name,
            file_size=size,
            format=os.path.splitext(file_name)[1].lstrip(".").upper(),
            width=width,
            height=height,
        )
        self.auto_detect_poster(image)
        return image

    def auto_detect_poster(self, image: ImageAsset) -> None:
        if image.width > 0 and image.height > 0:
            if image.width / image.height < self.config.poster_max_ratio:
                image.role = ImageRole.POSTER

    # ============ 角色 ============

    def _contains(self, image: ImageAsset) -> bool:
        return any(i.id == image.id for i in self.images)

    def set_role(self, image: ImageAsset, role: ImageRole) -> bool:
        """
        设置图片角色

        Returns:
            bool: 图片不在管理列表中时为 False
        """
        if not self._contains(image):
            return False
        if image.role != role:
            image.role = role
            self._notify(image, role)
        return True

    def set_role_for_all(self, from_role: ImageRole, to_role: ImageRole) -> int:
        """把所有 from_role 的图片改为 to_role，返回修改数量"""
        count = 0
        for image in self.images:
            if image.role == from_role and from_role != to_role:
                image.role = to_role
                self._notify(image, to_role)
                count += 1
        return count

    def clear_all_roles(self) -> None:
        for image in self.images:
            if image.role != ImageRole.UNKNOWN:
                image.role = ImageRole.UNKNOWN
                self._notify(image, ImageRole.UNKNOWN)

    def _notify(self, image: ImageAsset, role: ImageRole) -> None:
        for listener in self._role_listeners:
            listener(image, role)

    # ============ 查询 ============

    def get_images_by_role(self, role: ImageRole) -> List[ImageAsset]:
        return [i for i in self.images if i.role == role]

    def get_poster(self) -> Optional[ImageAsset]:
        return next((i for i in self.images if i.role == ImageRole.POSTER), None)

    def get_fanart(self) -> Optional[ImageAsset]:
        return next((i for i in self.images if i.role == ImageRole.FANART), None)

    def get_unassigned_images(self) -> List[ImageAsset]:
        return [i for i in self.images if not i.is_role_assigned]

    def get_image_stats(self) -> Dict[ImageRole, int]:
        stats: Dict[ImageRole, int] = {}
        for image in self.images:
            stats[image.role] = stats.get(image.role, 0) + 1
        return stats

    # ============ 增删 ============

    def add_image(self, image: ImageAsset) -> bool:
        if self._contains(image):
            return False
        self.images.append(image)
        return True

    def remove_image(self, image: ImageAsset) -> bool:
        if not self._contains(image):
            return False
        self.images = [i for i in self.images if i.id != image.id]
        return True
