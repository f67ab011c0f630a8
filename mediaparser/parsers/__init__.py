"""
元数据解析器

解析顺序：NFO XML -> 正则模板 -> 通用解析
"""

from .sniffer import FormatSniffer, is_likely_nfo
from .nfo_parser import NfoBlock, NfoExtractor, NfoParser
from .templates import (
    TemplateField,
    RegexTemplate,
    TemplateLibrary,
    BUILTIN_TEMPLATES,
    default_library,
)
from .cascade import TemplateCascade, parse_episode_list
from .generic_parser import GenericFallbackParser
from .metadata_parser import MetadataParser, ParseStrategy, parse_metadata

__all__ = [
    "FormatSniffer",
    "is_likely_nfo",
    "NfoBlock",
    "NfoExtractor",
    "NfoParser",
    "TemplateField",
    "RegexTemplate",
    "TemplateLibrary",
    "BUILTIN_TEMPLATES",
    "default_library",
    "TemplateCascade",
    "parse_episode_list",
    "GenericFallbackParser",
    "MetadataParser",
    "ParseStrategy",
    "parse_metadata",
]
