"""
工作流控制器

状态机：Draft -> Ready -> Archived

- Draft: 初始状态，也是所有数据变化后的回退状态
- Ready: 校验通过，可以归档
- Archived: 终态，只有 reset() 能离开

规则：
- 未归档时，替换 Show / 视频列表 / 图片列表一律回退到 Draft，
  是否合法要等下一次显式校验
- 已归档时忽略这些变化通知
- 进入 Ready 只要求元数据和视频映射通过，图片校验失败只提示不阻断
"""

import logging
from typing import Callable, List, Optional

from mediaparser.models import (
    Show,
    VideoFile,
    ImageAsset,
    WorkflowState,
    ValidationResult,
    ValidationSummary,
)
from . import validation


logger = logging.getLogger(__name__)


NOT_READY_MESSAGE = "当前状态不允许归档操作"
ARCHIVED_MESSAGE = "已归档，请先重置"
ARCHIVE_GUARD_PREFIX = "归档前校验失败: "

StateListener = Callable[[WorkflowState], None]


class WorkflowController:
    """
    工作流控制器（唯一的状态决策者）

    Usage:
        controller = WorkflowController()
        controller.show = parse_result.show
        controller.videos = scan_result.videos
        if controller.try_transition_to_ready():
            ...  # 执行归档
            controller.try_archive()
    """

    def __init__(self):
        self._state = WorkflowState.DRAFT
        self._show: Optional[Show] = None
        self._videos: List[VideoFile] = []
        self._images: List[ImageAsset] = []
        self._last_error = ""
        self._validation_summary: Optional[ValidationSummary] = None
        self._state_listeners: List[StateListener] = []

    # ============ 数据 ============

    @property
    def show(self) -> Optional[Show]:
        return self._show

    @show.setter
    def show(self, value: Optional[Show]) -> None:
        if value is not self._show:
            self._show = value
            self.notify_metadata_changed()

    @property
    def videos(self) -> List[VideoFile]:
        return self._videos

    @videos.setter
    def videos(self, value: List[VideoFile]) -> None:
        if value is not self._videos:
            self._videos = value
            self.notify_videos_changed()

    @property
    def images(self) -> List[ImageAsset]:
        return self._images

    @images.setter
    def images(self, value: List[ImageAsset]) -> None:
        if value is not self._images:
            self._images = value
            self.notify_images_changed()

    # ============ 状态 ============

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def last_error(self) -> str:
        return self._last_error

    @property
    def validation_summary(self) -> Optional[ValidationSummary]:
        return self._validation_summary

    @property
    def can_archive(self) -> bool:
        return self._state == WorkflowState.READY

    @property
    def is_archived(self) -> bool:
        return self._state == WorkflowState.ARCHIVED

    def add_state_listener(self, listener: StateListener) -> None:
        """注册状态变化回调，只在状态真正改变时调用"""
        self._state_listeners.append(listener)

    # ============ 变化通知 ============

    def notify_metadata_changed(self) -> None:
        self._transition_to(WorkflowState.DRAFT)

    def notify_videos_changed(self) -> None:
        self._transition_to(WorkflowState.DRAFT)

    def notify_images_changed(self) -> None:
        self._transition_to(WorkflowState.DRAFT)

    # ============ 校验 ============

    def run_full_validation(self) -> ValidationSummary:
        return validation.run_full_validation(self._show, self._videos, self._images)

    def validate_metadata(self) -> ValidationResult:
        return validation.validate_metadata(self._show)

    def validate_video_mapping(self) -> ValidationResult:
        return validation.validate_video_mapping(self._show, self._videos)

    def validate_image_assets(self) -> ValidationResult:
        return validation.validate_image_assets(self._images)

    # ============ 状态转换 ============

    def try_transition_to_ready(self) -> bool:
        """
        执行完整校验并尝试进入 Ready

        Returns:
            bool: 元数据和视频映射都通过时为 True；
                  失败时回退到 Draft，last_error 为所有失败项的汇总
        """
        summary = self.run_full_validation()
        self._validation_summary = summary

        if self.is_archived:
            self._last_error = ARCHIVED_MESSAGE
            return False

        if summary.fully_valid:
            self._set_state(WorkflowState.READY)
            self._last_error = ""
            if not summary.image_assets_result.valid:
                logger.info(f"⚠️ {summary.image_assets_result.message}")
            return True

        self._set_state(WorkflowState.DRAFT)
        self._last_error = summary.failure_summary()
        logger.info(f"校验未通过: {self._last_error}")
        return False

    def try_archive(self) -> bool:
        """
        标记归档完成

        只有 Ready 状态可以归档；归档前再次校验，
        失败时保持 Ready 不回退。
        """
        if self._state != WorkflowState.READY:
            self._last_error = NOT_READY_MESSAGE
            return False

        summary = self.run_full_validation()
        if not summary.fully_valid:
            self._last_error = ARCHIVE_GUARD_PREFIX + summary.failure_summary()
            logger.warning(f"⚠️ {self._last_error}")
            return False

        self._set_state(WorkflowState.ARCHIVED)
        self._last_error = ""
        return True

    def reset(self) -> None:
        """清空数据和校验结果，强制回到 Draft（包括已归档状态）"""
        self._show = None
        self._videos = []
        self._images = []
        self._validation_summary = None
        self._last_error = ""
        self._set_state(WorkflowState.DRAFT)

    # ============ 内部 ============

    def _transition_to(self, new_state: WorkflowState) -> None:
        if self._state == WorkflowState.ARCHIVED:
            logger.debug("已归档，忽略数据变化通知")
            return
        self._set_state(new_state)

    def _set_state(self, new_state: WorkflowState) -> None:
        if self._state == new_state:
            return
        old_state = self._state
        self._state = new_state
        logger.debug(f"工作流状态: {old_state.value} -> {new_state.value}")
        for listener in self._state_listeners:
            listener(new_state)
