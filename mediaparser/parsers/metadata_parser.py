"""
元数据解析入口

解析策略按顺序尝试，第一个成功的生效：
1. NFO XML（仅当文本看起来像 NFO 时）
2. 正则模板级联
3. 通用逐行解析（兜底）

失败策略的错误信息作为诊断信息附加到最终结果的 warnings 中。
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from mediaparser.config import ParserConfig, get_config
from mediaparser.models import ParseResult
from .sniffer import FormatSniffer
from .nfo_parser import NfoParser
from .templates import TemplateLibrary
from .cascade import TemplateCascade
from .generic_parser import GenericFallbackParser


logger = logging.getLogger(__name__)


NFO_STRATEGY_NOTICE = "使用 NFO XML 解析器"


@dataclass
class ParseStrategy:
    """一个解析策略：名称 + 适用判断 + 解析函数"""
    name: str
    parse: Callable[[str], ParseResult]
    applies: Callable[[str], bool] = lambda text: True
    notice: str = ""


class MetadataParser:
    """
    元数据解析器

    Usage:
        parser = MetadataParser()
        result = parser.parse(text)
        if result.success:
            print(result.show.title, len(result.episodes))
    """

    def __init__(
        self,
        options: Optional[ParserConfig] = None,
        templates: Optional[TemplateLibrary] = None
    ):
        """
        Args:
            options: 解析配置，None则从全局配置读取
            templates: 模板库，None则使用内置模板
        """
        self.options = options or get_config().parser
        self.sniffer = FormatSniffer()
        self.nfo_parser = NfoParser()
        self.cascade = TemplateCascade(templates, self.options)
        self.generic = GenericFallbackParser(self.options)

        self.strategies: List[ParseStrategy] = [
            ParseStrategy(
                name=self.nfo_parser.name,
                parse=self.nfo_parser.parse,
                applies=self.sniffer.is_likely_nfo,
                notice=NFO_STRATEGY_NOTICE,
            ),
            ParseStrategy(name=self.cascade.name, parse=self.cascade.parse),
            ParseStrategy(name=self.generic.name, parse=self.generic.parse),
        ]

    def parse(self, text: str) -> ParseResult:
        """
        解析元数据文本

        Args:
            text: 原始文本（支持多行粘贴、NFO、混合文本）

        Returns:
            ParseResult: 第一个成功策略的结果；全部失败时 success=False
        """
        if not text or not text.strip():
            return ParseResult(success=False, errors=["输入文本为空"])

        diagnostics: List[str] = []

        for strategy in self.strategies:
            if not strategy.applies(text):
                logger.debug(f"跳过解析策略: {strategy.name}")
                continue

            logger.debug(f"🔍 尝试解析策略: {strategy.name}")
            try:
                result = strategy.parse(text)
            except Exception as e:
                message = f"{strategy.name}: 解析异常: {e}"
                logger.warning(f"⚠️ {message}")
                diagnostics.append(message)
                continue

            if not result.success or result.show is None:
                diagnostics.extend(f"{strategy.name}: {err}" for err in result.errors)
                continue

            if strategy.notice:
                result.warnings.append(strategy.notice)
            result.warnings.extend(diagnostics)
            if not result.show.raw_metadata:
                result.show.raw_metadata = text

            logger.info(
                f"✅ 元数据解析成功 [{result.strategy or strategy.name}]: "
                f"{result.show.title or '(无标题)'}, {len(result.episodes)} 集"
            )
            return result

        logger.warning("⚠️ 所有解析策略均失败")
        return ParseResult(success=False, errors=diagnostics or ["无法解析元数据"])


def parse_metadata(text: str, options: Optional[ParserConfig] = None) -> ParseResult:
    """解析元数据文本的便捷函数"""
    return MetadataParser(options).parse(text)
