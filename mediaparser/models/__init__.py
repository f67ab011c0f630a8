"""
数据模型定义

- 所有数据结构使用 Pydantic 模型
- 输入验证：Model.model_validate(dict_data)
- 输出序列化：model_instance.model_dump() / model_dump_json()

模型分类：
- enums.py: 枚举类型
- media.py: Show / Episode / VideoFile / ImageAsset
- results.py: 解析、校验、扫描、归档、CLI 结果
"""

# 枚举类型
from .enums import (
    WorkflowState,
    ValidationCategory,
    VALIDATION_CATEGORY_ZH,
    ImageRole,
    FieldTarget,
)

# 媒体模型
from .media import (
    VideoFile,
    ImageAsset,
    Episode,
    Show,
    clamp_rating,
)

# 结果模型
from .results import (
    ParseResult,
    ValidationResult,
    ValidationSummary,
    VALIDATION_PASSED_MESSAGE,
    ScanResult,
    ArchiveResult,
    ArchiveSummary,
    CliResult,
)

__all__ = [
    # 枚举
    "WorkflowState",
    "ValidationCategory",
    "VALIDATION_CATEGORY_ZH",
    "ImageRole",
    "FieldTarget",
    # 媒体
    "VideoFile",
    "ImageAsset",
    "Episode",
    "Show",
    "clamp_rating",
    # 结果
    "ParseResult",
    "ValidationResult",
    "ValidationSummary",
    "VALIDATION_PASSED_MESSAGE",
    "ScanResult",
    "ArchiveResult",
    "ArchiveSummary",
    "CliResult",
]
