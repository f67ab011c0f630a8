"""
配置

config.yaml 提供各节的值，MEDIAPARSER_ 前缀的环境变量覆盖其中少数几项
"""

import logging
import os
from pathlib import Path
from typing import Optional, List

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)


class ParserConfig(BaseModel):
    """元数据解析配置"""
    auto_detect_season: bool = True  # 从全文识别季数
    default_season: int = 1          # 无法识别时使用的季数
    auto_detect_year: bool = True


class ScanConfig(BaseModel):
    """扫描配置"""
    video_extensions: List[str] = Field(default_factory=lambda: [
        ".mp4", ".mkv", ".avi", ".mov", ".wmv", ".flv", ".webm", ".m4v"
    ])
    image_extensions: List[str] = Field(default_factory=lambda: [
        ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp", ".tbn"
    ])
    exclude_patterns: List[str] = Field(default_factory=lambda: [
        ".*", "@eaDir", "#recycle", ".@__thumb",
        "$RECYCLE.BIN", "Thumbs.db", ".DS_Store"
    ])
    recursive: bool = False
    min_video_size: int = 1024 * 1024  # 1MB
    min_image_size: int = 1024         # 1KB
    auto_infer_episode: bool = True
    poster_max_ratio: float = 0.7      # 宽高比小于该值视为海报


class ArchiveConfig(BaseModel):
    """归档配置"""
    output_directory: str = ""
    use_season_folder: bool = True
    use_utf8_bom: bool = False


class LoggingConfig(BaseModel):
    """日志配置"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig(BaseModel):
    """应用总配置"""
    parser: ParserConfig = Field(default_factory=ParserConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    archive: ArchiveConfig = Field(default_factory=ArchiveConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class EnvOverrides(BaseSettings):
    """环境变量覆盖项（MEDIAPARSER_ 前缀）"""
    model_config = SettingsConfigDict(env_prefix="MEDIAPARSER_")

    log_level: Optional[str] = None
    default_season: Optional[int] = None
    output_directory: Optional[str] = None


CONFIG_FILE_NAMES = ["config.yaml", "config.yml", "config/config.yaml", "config/config.yml"]


def find_config_file() -> Optional[Path]:
    """
    按 CONFIG_PATH → 工作目录 → 项目根目录的顺序查找配置文件

    Returns:
        Optional[Path]: 第一个存在的配置文件，都不存在时为 None
    """
    explicit = os.getenv("CONFIG_PATH")
    if explicit and Path(explicit).exists():
        return Path(explicit)

    # 项目根目录即 mediaparser 包的上一级
    search_dirs = [Path.cwd(), Path(__file__).parent.parent]
    for directory in search_dirs:
        for name in CONFIG_FILE_NAMES:
            candidate = directory / name
            if candidate.exists():
                return candidate

    return None


def apply_env_overrides(raw_config: dict) -> dict:
    """把环境变量覆盖写入原始配置字典"""
    env = EnvOverrides()

    if env.log_level:
        raw_config.setdefault("logging", {})["level"] = env.log_level.upper()

    if env.default_season is not None:
        raw_config.setdefault("parser", {})["default_season"] = env.default_season

    if env.output_directory:
        raw_config.setdefault("archive", {})["output_directory"] = env.output_directory

    return raw_config


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    读取 YAML 并叠加环境变量

    配置优先级: 环境变量 > 配置文件 > 默认值

    Args:
        config_path: 显式指定的配置文件路径，None则自动查找

    Returns:
        AppConfig: 应用配置对象
    """
    if config_path is None:
        config_path = find_config_file()
        if config_path is None:
            logger.debug("未找到配置文件，使用默认配置")
    elif not Path(config_path).exists():
        logger.warning(f"⚠️  配置文件不存在，使用默认配置: {config_path}")
        config_path = None

    raw_config: dict = {}
    if config_path is not None:
        logger.debug(f"📄 加载配置文件: {config_path}")
        with open(config_path, "r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f) or {}

    raw_config = apply_env_overrides(raw_config)

    return AppConfig(**raw_config)


# 进程内共享配置，get_config() 惰性创建
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    进程内共享的配置，首次调用时加载
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    重新加载并替换共享配置（CLI 的 --config 使用）
    """
    global _config
    _config = load_config(config_path)
    return _config
