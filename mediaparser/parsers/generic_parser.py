"""
通用解析（兜底）

NFO 和所有模板都失败时使用，逐行启发式解析：
1. 跳过噪声行（URL、以日期开头的行、以非字母数字开头的短行）
2. 识别"标签: 值"形式的字段，已设置的字段不覆盖
3. 识别集数行（第N话、[N]、第N集、EpN、两位数字）
4. 第一条超过 20 个字符的普通行作为简介
"""

import logging
import re
from datetime import datetime
from typing import List, Optional, Tuple

from mediaparser.config import ParserConfig, get_config
from mediaparser.models import FieldTarget, ParseResult, Show, Episode, clamp_rating
from mediaparser.utils.naming import placeholder_episode_title
from .text_utils import split_list, detect_season, parse_int, parse_float


logger = logging.getLogger(__name__)


SUMMARY_MIN_LENGTH = 20

_NOISE_PATTERNS = [
    re.compile(r'^https?://', re.IGNORECASE),
    re.compile(r'^\d{4}-\d{2}-\d{2}'),
]

# 标签字段，按顺序匹配，第一个命中的生效
LABEL_PATTERNS: List[Tuple[FieldTarget, re.Pattern]] = [
    (FieldTarget.SHOW_TITLE, re.compile(r'^(?:标题|Name)\s*[:：]\s*(.+)', re.IGNORECASE)),
    (FieldTarget.ORIGINAL_TITLE, re.compile(r'^(?:原名|Original)\s*[:：]\s*(.+)', re.IGNORECASE)),
    (FieldTarget.YEAR, re.compile(r'^(?:年份|Year|发行年份)\s*[:：]?\s*(\d{4})', re.IGNORECASE)),
    (FieldTarget.STUDIO, re.compile(r'^(?:制作商|厂商|制作公司|Studio)\s*[:：]\s*(.+)', re.IGNORECASE)),
    (FieldTarget.DIRECTOR, re.compile(r'^(?:导演|Director)\s*[:：]\s*(.+)', re.IGNORECASE)),
    (FieldTarget.ACTORS, re.compile(r'^(?:演员|Cast|主演|声优)\s*[:：]\s*(.+)', re.IGNORECASE)),
    (FieldTarget.TAGS, re.compile(r'^(?:标签|Tags|类型|Genre)\s*[:：]\s*(.+)', re.IGNORECASE)),
    (FieldTarget.RATING, re.compile(r'^(?:评分|Rating)\s*[:：]?\s*(\d+\.?\d*)', re.IGNORECASE)),
]

# 集数行，集号之后的文字作为集标题
EPISODE_LINE_PATTERNS: List[re.Pattern] = [
    re.compile(r'^第(\d+)话'),
    re.compile(r'^\[(\d+)\]'),
    re.compile(r'^(\d+)话'),
    re.compile(r'^第(\d+)集'),
    re.compile(r'^Ep?\s*(\d+)', re.IGNORECASE),
    re.compile(r'^(\d{2})$'),
]


class GenericFallbackParser:
    """逐行启发式解析器"""

    name = "通用解析"

    def __init__(self, options: Optional[ParserConfig] = None):
        self.options = options or get_config().parser

    def parse(self, text: str) -> ParseResult:
        """
        逐行解析，总是返回成功的结果（空输入除外）

        没有识别出任何集数时创建一个默认集。
        """
        result = ParseResult(success=False)
        if not text or not text.strip():
            result.errors.append("输入文本为空")
            return result

        show = Show(season=0)
        episodes: List[Episode] = []

        for line in re.split(r'[\r\n]+', text):
            line = line.strip()
            if not line or self.is_noise_line(line):
                continue

            extracted = self.extract_field(line)
            if extracted is not None:
                self.apply_field(show, *extracted)
                continue

            episode = self.parse_episode_line(line)
            if episode is not None:
                episodes.append(episode)
            elif not show.summary and len(line) > SUMMARY_MIN_LENGTH:
                show.summary = line

        detected = detect_season(text) if self.options.auto_detect_season else 0
        show.season = detected if detected > 0 else self.options.default_season
        release_year = show.year if show.year > 0 else datetime.now().year

        if not episodes:
            episodes.append(Episode(
                season=show.season,
                number=1,
                title=placeholder_episode_title(1),
            ))
            result.warnings.append("未能解析出具体集数，已创建默认集数")

        for episode in episodes:
            if episode.season <= 0:
                episode.season = show.season
            if episode.release_year <= 0:
                episode.release_year = release_year

        show.episodes = episodes
        show.raw_metadata = text
        logger.debug(f"🔍 通用解析得到 {len(episodes)} 集, 季数 {show.season}")

        result.success = True
        result.show = show
        result.strategy = self.name
        result.warnings.append("使用通用解析")
        return result

    def is_noise_line(self, line: str) -> bool:
        """URL、日期开头、非字母数字开头的短行"""
        if any(p.match(line) for p in _NOISE_PATTERNS):
            return True
        if len(line) < 3 and not line[0].isalnum():
            return True
        return False

    def extract_field(self, line: str) -> Optional[Tuple[FieldTarget, str]]:
        for target, pattern in LABEL_PATTERNS:
            match = pattern.match(line)
            if match:
                return target, match.group(1).strip()
        return None

    def apply_field(self, show: Show, target: FieldTarget, value: str) -> None:
        """写入字段，已设置的字段不覆盖"""
        if target == FieldTarget.SHOW_TITLE and not show.title:
            show.title = value
        elif target == FieldTarget.ORIGINAL_TITLE and not show.original_title:
            show.original_title = value
        elif target == FieldTarget.YEAR and show.year <= 0:
            show.year = parse_int(value)
        elif target == FieldTarget.STUDIO and not show.studio:
            show.studio = value
        elif target == FieldTarget.DIRECTOR and not show.director:
            show.director = value
        elif target == FieldTarget.ACTORS and not show.actors:
            show.actors = split_list(value)
        elif target == FieldTarget.TAGS and not show.tags:
            show.tags = split_list(value)
        elif target == FieldTarget.RATING and show.rating <= 0:
            show.rating = clamp_rating(parse_float(value))

    def parse_episode_line(self, line: str) -> Optional[Episode]:
        """
        解析集数行

        集号之后的文字作为集标题，没有时使用"第N话"。
        """
        for pattern in EPISODE_LINE_PATTERNS:
            match = pattern.match(line)
            if match is None:
                continue
            number = int(match.group(1))
            title = line[match.end():].strip(" \t-:：.、")
            return Episode(
                number=number,
                title=title or placeholder_episode_title(number),
                raw_metadata=line,
            )
        return None
