"""
模板级联解析

按优先级依次尝试模板库中的模板，第一个匹配成功的模板生效。
捕获组经字段表映射到 Show 的语义字段，并做后处理：
- 演员/标签：按分隔符切分、去空白、去空项
- 年份：整数，非数字忽略
- 评分：浮点，限制在 [0, 10]
- 集数列表：范围 A-B / [NN] / 逗号分隔单集
"""

import logging
import re
from typing import Callable, Dict, List, Optional

from mediaparser.config import ParserConfig, get_config
from mediaparser.models import FieldTarget, ParseResult, Show, Episode, clamp_rating
from mediaparser.utils.naming import placeholder_episode_title
from .templates import RegexTemplate, TemplateLibrary, default_library
from .text_utils import split_list, detect_season, detect_year, parse_int


logger = logging.getLogger(__name__)


# 集数列表子模式，按顺序尝试，第一个有匹配的生效
EPISODE_RANGE_PATTERN = re.compile(r'(\d{1,3})\s*[-~至]\s*(\d{1,3})')
EPISODE_BRACKET_PATTERN = re.compile(r'\[(\d{1,3})\]')
EPISODE_SINGLE_PATTERN = re.compile(r'(?<!\d)(\d{1,3})(?=\s*(?:[,，、;；]|$))')


def parse_episode_list(text: str, season: int = 0, year: int = 0) -> List[Episode]:
    """
    解析集数列表

    常见格式：01-12, [01][02][03], 01,02,03

    Examples:
        >>> [e.number for e in parse_episode_list("1-3")]
        [1, 2, 3]
    """
    episodes: List[Episode] = []

    def _make(number: int) -> Episode:
        return Episode(
            season=season,
            number=number,
            title=placeholder_episode_title(number),
            release_year=year,
        )

    ranges = list(EPISODE_RANGE_PATTERN.finditer(text))
    if ranges:
        for match in ranges:
            start, end = int(match.group(1)), int(match.group(2))
            episodes.extend(_make(i) for i in range(start, end + 1))
        return episodes

    for pattern in (EPISODE_BRACKET_PATTERN, EPISODE_SINGLE_PATTERN):
        matches = list(pattern.finditer(text))
        if matches:
            return [_make(int(m.group(1))) for m in matches]

    return episodes


# ============================================================
# 字段表：目标字段 -> 后处理并写入 Show
# ============================================================

def _apply_year(show: Show, value: str) -> None:
    year = parse_int(value)
    if year > 0:
        show.year = year


def _apply_rating(show: Show, value: str) -> None:
    try:
        show.rating = clamp_rating(float(value))
    except ValueError:
        logger.debug(f"忽略无法识别的评分: {value}")


def _apply_episodes(show: Show, value: str) -> None:
    show.episodes = parse_episode_list(value, show.season, show.year)


FIELD_APPLIERS: Dict[FieldTarget, Callable[[Show, str], None]] = {
    FieldTarget.SHOW_TITLE: lambda show, v: setattr(show, "title", v),
    FieldTarget.ORIGINAL_TITLE: lambda show, v: setattr(show, "original_title", v),
    FieldTarget.YEAR: _apply_year,
    FieldTarget.STUDIO: lambda show, v: setattr(show, "studio", v),
    FieldTarget.DIRECTOR: lambda show, v: setattr(show, "director", v),
    FieldTarget.ACTORS: lambda show, v: setattr(show, "actors", split_list(v)),
    FieldTarget.TAGS: lambda show, v: setattr(show, "tags", split_list(v)),
    FieldTarget.SUMMARY: lambda show, v: setattr(show, "summary", v),
    FieldTarget.EPISODE_LIST: _apply_episodes,
    FieldTarget.RATING: _apply_rating,
}


class TemplateCascade:
    """模板级联解析器"""

    name = "模板"

    def __init__(
        self,
        library: Optional[TemplateLibrary] = None,
        options: Optional[ParserConfig] = None
    ):
        """
        Args:
            library: 模板库，None则使用内置模板
            options: 解析配置，None则从全局配置读取
        """
        self.library = library or default_library()
        self.options = options or get_config().parser

    def parse(self, text: str) -> ParseResult:
        """
        依次尝试模板，返回第一个成功的结果

        不匹配或解析异常都转到下一个模板，异常记录为诊断信息。
        """
        result = ParseResult(success=False)
        if not text or not text.strip():
            result.errors.append("输入文本为空")
            return result

        normalized = text.replace("\r\n", "\n").replace("\r", "\n").strip()

        for template in self.library:
            try:
                show = self.try_template(normalized, text, template)
            except Exception as e:
                message = f"模板解析异常 [{template.name}]: {e}"
                logger.warning(f"⚠️ {message}")
                result.errors.append(message)
                continue

            if show is None:
                continue

            logger.debug(f"✅ 模板匹配成功: {template.name}")
            return ParseResult(
                success=True,
                show=show,
                strategy=f"{self.name}:{template.name}",
                warnings=[f"使用模板: {template.name}"],
            )

        result.errors.append("没有匹配的模板")
        return result

    def try_template(
        self,
        text: str,
        original_text: str,
        template: RegexTemplate
    ) -> Optional[Show]:
        """
        用单个模板解析

        Args:
            text: 规范化后的文本（用于匹配）
            original_text: 原始文本（用于季数、年份识别）
            template: 模板

        Returns:
            Optional[Show]: 匹配成功返回 Show（episodes 已填充），否则 None
        """
        match = template.pattern.search(text)
        if match is None:
            return None

        groups = match.groupdict()
        for group in template.required_groups:
            if not (groups.get(group) or "").strip():
                return None

        show = Show(season=0)
        for field in template.fields:
            value = (groups.get(field.group) or "").strip()
            if not value:
                continue
            FIELD_APPLIERS[field.target](show, value)

        self._resolve_season(show, template, original_text)

        if self.options.auto_detect_year and show.year <= 0:
            show.year = detect_year(original_text)

        for episode in show.episodes:
            if episode.season <= 0:
                episode.season = show.season
            if episode.release_year <= 0:
                episode.release_year = show.year
            if not episode.title:
                episode.title = placeholder_episode_title(episode.number)

        show.raw_metadata = original_text
        return show

    def _resolve_season(self, show: Show, template: RegexTemplate, text: str) -> None:
        if template.season is not None:
            show.season = template.season
            return
        if show.season > 0:
            return

        detected = detect_season(text) if self.options.auto_detect_season else 0
        show.season = detected if detected > 0 else self.options.default_season
