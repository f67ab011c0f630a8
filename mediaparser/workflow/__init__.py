"""
工作流：校验 + 状态机
"""

from .validation import (
    validate_metadata,
    validate_video_mapping,
    validate_image_assets,
    run_full_validation,
)
from .controller import WorkflowController, NOT_READY_MESSAGE, ARCHIVE_GUARD_PREFIX

__all__ = [
    "validate_metadata",
    "validate_video_mapping",
    "validate_image_assets",
    "run_full_validation",
    "WorkflowController",
    "NOT_READY_MESSAGE",
    "ARCHIVE_GUARD_PREFIX",
]
