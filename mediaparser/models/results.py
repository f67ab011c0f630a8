"""
结果模型

所有可恢复的失败都以结果值表示（errors / warnings 列表），不向外抛异常。

包含：
- ParseResult: 元数据解析结果
- ValidationResult / ValidationSummary: 工作流校验结果
- ScanResult: 视频/图片扫描结果
- ArchiveResult: 归档执行结果
- CliResult: CLI 输出的 JSON 文档
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from .enums import ValidationCategory, VALIDATION_CATEGORY_ZH
from .media import Show, Episode, VideoFile, ImageAsset


class ParseResult(BaseModel):
    """元数据解析结果"""
    success: bool = False
    show: Optional[Show] = None
    strategy: str = Field(default="", description="成功的解析策略名称")
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @property
    def episodes(self) -> List[Episode]:
        if self.show is None:
            return []
        return self.show.episodes


# ============ 工作流校验 ============

VALIDATION_PASSED_MESSAGE = "校验通过"


class ValidationResult(BaseModel):
    """单项校验结果"""
    category: ValidationCategory
    valid: bool = True
    message: str = VALIDATION_PASSED_MESSAGE

    @classmethod
    def success(cls, category: ValidationCategory) -> "ValidationResult":
        return cls(category=category, valid=True, message=VALIDATION_PASSED_MESSAGE)

    @classmethod
    def fail(cls, category: ValidationCategory, message: str) -> "ValidationResult":
        return cls(category=category, valid=False, message=message)


class ValidationSummary(BaseModel):
    """
    三项校验的汇总

    fully_valid 只看元数据和视频映射，图片角色只做提示不阻断。
    """
    metadata_result: ValidationResult = Field(
        default_factory=lambda: ValidationResult.success(ValidationCategory.METADATA)
    )
    video_mapping_result: ValidationResult = Field(
        default_factory=lambda: ValidationResult.success(ValidationCategory.VIDEO_MAPPING)
    )
    image_assets_result: ValidationResult = Field(
        default_factory=lambda: ValidationResult.success(ValidationCategory.IMAGE_ASSETS)
    )

    @property
    def fully_valid(self) -> bool:
        return self.metadata_result.valid and self.video_mapping_result.valid

    @property
    def has_critical_failures(self) -> bool:
        return not self.fully_valid

    @property
    def results(self) -> List[ValidationResult]:
        return [self.metadata_result, self.video_mapping_result, self.image_assets_result]

    def failure_summary(self) -> str:
        """所有失败项的消息，包括不阻断的图片项"""
        failures = [
            f"{VALIDATION_CATEGORY_ZH[r.category]}: {r.message}"
            for r in self.results
            if not r.valid
        ]
        return "; ".join(failures)

    def detailed_status(self) -> str:
        lines = []
        for r in self.results:
            if r.valid:
                mark = "✓"
            elif r.category == ValidationCategory.IMAGE_ASSETS:
                mark = "⚠"
            else:
                mark = "✗"
            lines.append(f"{VALIDATION_CATEGORY_ZH[r.category]}: {mark} {r.message}")
        return "\n".join(lines)


# ============ 外部协作组件 ============

class ScanResult(BaseModel):
    """目录扫描结果"""
    success: bool = False
    directory: str = ""
    videos: List[VideoFile] = Field(default_factory=list)
    images: List[ImageAsset] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class ArchiveResult(BaseModel):
    """归档结果，success 等价于 errors 为空"""
    success: bool = False
    output_directory: Optional[str] = None
    created_files: List[str] = Field(default_factory=list)
    total_bytes_written: int = 0
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class ArchiveSummary(BaseModel):
    """CLI 输出中的归档摘要"""
    success: bool
    output_directory: Optional[str] = None
    created_files_count: int = 0
    total_bytes_written: int = 0


class CliResult(BaseModel):
    """CLI 单次调用输出的 JSON 文档"""
    success: bool = False
    message: Optional[str] = None
    state: Optional[str] = None
    can_archive: bool = False
    show: Optional[Show] = None
    videos: List[VideoFile] = Field(default_factory=list)
    images: List[ImageAsset] = Field(default_factory=list)
    validation_summary: Optional[ValidationSummary] = None
    archive_result: Optional[ArchiveSummary] = None
    warnings: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
