"""
工作流校验

三项相互独立的校验，每项返回一个 ValidationResult：
1. 元数据有效性：标题、季数、剧集列表、集号
2. 视频映射完整性：每个已选视频都必须被某一集引用（不要求每集都有视频）
3. 图片角色完整性：每张已选图片都必须分配角色

只有 1 和 2 决定能否进入 Ready，3 只做提示。
"""

from typing import List, Optional, Sequence

from mediaparser.models import (
    Show,
    VideoFile,
    ImageAsset,
    ImageRole,
    ValidationCategory,
    ValidationResult,
    ValidationSummary,
)


PREVIEW_LIMIT = 3


def _preview(names: List[str], unit: str) -> str:
    """最多列出 3 个名称，超出时追加 "... (共N个)" """
    if len(names) <= PREVIEW_LIMIT:
        return ", ".join(names)
    return ", ".join(names[:PREVIEW_LIMIT]) + f"... (共{len(names)}{unit})"


def validate_metadata(show: Optional[Show]) -> ValidationResult:
    """按顺序检查，第一个不满足的规则即返回失败"""
    category = ValidationCategory.METADATA

    if show is None:
        return ValidationResult.fail(category, "元数据为空")

    if not show.title or not show.title.strip():
        return ValidationResult.fail(category, "标题不能为空")

    if show.season <= 0:
        return ValidationResult.fail(category, "季数必须大于 0")

    if not show.episodes:
        return ValidationResult.fail(category, "剧集列表不能为空")

    for episode in show.episodes:
        if episode.number <= 0:
            return ValidationResult.fail(category, f"集数 {episode.number} 无效，必须大于 0")

    return ValidationResult.success(category)


def validate_video_mapping(
    show: Optional[Show],
    videos: Sequence[VideoFile]
) -> ValidationResult:
    """
    每个视频都必须被某一集的 mapped_video 引用

    按 id 比较；没有视频的剧集不影响结果。
    """
    category = ValidationCategory.VIDEO_MAPPING

    if not videos:
        return ValidationResult.success(category)

    mapped_ids = set()
    if show is not None:
        mapped_ids = {
            episode.mapped_video.id
            for episode in show.episodes
            if episode.mapped_video is not None
        }

    unmapped = [video.display_name for video in videos if video.id not in mapped_ids]
    if unmapped:
        return ValidationResult.fail(category, f"以下视频未分配剧集: {_preview(unmapped, '个')}")

    return ValidationResult.success(category)


def validate_image_assets(images: Sequence[ImageAsset]) -> ValidationResult:
    """每张图片的角色都不能是 Unknown"""
    category = ValidationCategory.IMAGE_ASSETS

    if not images:
        return ValidationResult.success(category)

    unassigned = [image.file_name for image in images if image.role == ImageRole.UNKNOWN]
    if unassigned:
        return ValidationResult.fail(category, f"以下图片未分配角色: {_preview(unassigned, '张')}")

    return ValidationResult.success(category)


def run_full_validation(
    show: Optional[Show],
    videos: Sequence[VideoFile],
    images: Sequence[ImageAsset]
) -> ValidationSummary:
    """执行三项校验并汇总"""
    return ValidationSummary(
        metadata_result=validate_metadata(show),
        video_mapping_result=validate_video_mapping(show, videos),
        image_assets_result=validate_image_assets(images),
    )
