"""
NFO XML 解析器

支持解析 Kodi/媒体中心标准的 NFO 文本，文本中可以混有描述性文字，
例如 "tvshow.nfo：<tvshow>...</tvshow> 第1集：<episodedetails>...</episodedetails>"。

块边界用文本扫描确定（第一个开始标签 + 其后第一个结束标签），
不处理同名标签嵌套，按"尽力而为、取第一个匹配"处理。
"""

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from mediaparser.models import ParseResult, Show, Episode, clamp_rating
from mediaparser.utils.naming import placeholder_episode_title
from .text_utils import merge_unique, parse_int, parse_float


logger = logging.getLogger(__name__)


TVSHOW = "tvshow"
EPISODEDETAILS = "episodedetails"

BLOCK_KINDS = (TVSHOW, EPISODEDETAILS)

_OPEN_TAGS = {
    kind: re.compile(rf'<{kind}\b[^>]*>', re.IGNORECASE) for kind in BLOCK_KINDS
}
_CLOSE_TAGS = {
    kind: re.compile(rf'</{kind}\s*>', re.IGNORECASE) for kind in BLOCK_KINDS
}

# 不提供信息的通用分类，不计入标签
IGNORED_GENRE = "成人动画"

# 集简介中的首播前缀
AIRED_PREFIX = "首播: "

# 从文件名合成集数时使用的发行年份（固定字面量，待产品确认）
PLACEHOLDER_RELEASE_YEAR = 2024

_FALLBACK_EPISODE_PATTERN = re.compile(
    r'S(\d+)E(\d+)|[- ](\d{2,3})(?=[.\s)\]]|$)',
    re.IGNORECASE,
)

_FIRST_TITLE_PATTERN = re.compile(r'<title[^>]*>([^<]+)</title>', re.IGNORECASE)

_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m", "%Y")


@dataclass
class NfoBlock:
    """文本中的一个 NFO 块"""
    kind: str   # tvshow / episodedetails
    start: int
    end: int
    text: str


class NfoExtractor:
    """在混合文本中定位 NFO 块"""

    def extract_first_block(self, text: str) -> Optional[NfoBlock]:
        """
        提取第一个完整的 NFO 块

        优先 <tvshow>，其次 <episodedetails>；都没有时返回 None。
        """
        for kind in BLOCK_KINDS:
            block = self._block_from(text, kind, 0)
            if block is not None:
                return block
        return None

    def find_blocks(self, text: str) -> List[NfoBlock]:
        """
        找出文本中所有 tvshow / episodedetails 块，按开始位置排序
        """
        blocks: List[NfoBlock] = []
        for kind in BLOCK_KINDS:
            for open_match in _OPEN_TAGS[kind].finditer(text):
                close_match = _CLOSE_TAGS[kind].search(text, open_match.end())
                if close_match is None:
                    continue
                start, end = open_match.start(), close_match.end()
                blocks.append(NfoBlock(kind=kind, start=start, end=end, text=text[start:end]))

        blocks.sort(key=lambda b: b.start)
        return blocks

    def _block_from(self, text: str, kind: str, pos: int) -> Optional[NfoBlock]:
        open_match = _OPEN_TAGS[kind].search(text, pos)
        if open_match is None:
            return None
        close_match = _CLOSE_TAGS[kind].search(text, open_match.end())
        if close_match is None:
            return None
        start, end = open_match.start(), close_match.end()
        return NfoBlock(kind=kind, start=start, end=end, text=text[start:end])


class NfoParser:
    """
    NFO XML 解析器

    - 文本中只有一个块：单块解析
    - 没有块或有多个块：混合解析，逐块解析后合并；
      一个块都没解析成功时，从文本中的文件名提取集数
    """

    name = "NFO"

    def __init__(self, extractor: Optional[NfoExtractor] = None):
        self.extractor = extractor or NfoExtractor()

    def parse(self, text: str) -> ParseResult:
        """
        解析 NFO 文本

        Args:
            text: NFO 文件内容，可混有其他文字

        Returns:
            ParseResult: 解析结果，失败时 errors 中包含原因
        """
        if not text or not text.strip():
            return ParseResult(success=False, errors=["NFO 文本为空"])

        blocks = self.extractor.find_blocks(text)
        logger.debug(f"🔍 找到 {len(blocks)} 个 NFO 块")

        if len(blocks) == 1:
            result = self._parse_single(text, self.extractor.extract_first_block(text))
        else:
            result = self._parse_mixed(text, blocks)

        if result.success and result.show is not None:
            result.strategy = self.name
            for episode in result.show.episodes:
                if episode.season <= 0:
                    episode.season = result.show.season

        return result

    # ============ 单块 / 混合 ============

    def _parse_single(self, text: str, block: NfoBlock) -> ParseResult:
        try:
            root = ET.fromstring(block.text)
        except ET.ParseError as e:
            return ParseResult(success=False, errors=[f"XML 解析失败: {e}"])

        kind = _local_name(root.tag)
        if kind == TVSHOW:
            show = self.parse_tvshow(root)
        elif kind == EPISODEDETAILS:
            show = Show()
            episode = self.parse_episode(root)
            episode.raw_metadata = block.text
            show.episodes.append(episode)
            # 只有单集信息时，用文本中的第一个标题补上剧集标题
            title_match = _FIRST_TITLE_PATTERN.search(text)
            if title_match:
                show.title = title_match.group(1).strip()
        else:
            return ParseResult(success=False, errors=[f"未知的 NFO 根标签: {root.tag}"])

        return ParseResult(success=True, show=show)

    def _parse_mixed(self, text: str, blocks: List[NfoBlock]) -> ParseResult:
        result = ParseResult(success=False)
        show = Show()
        episodes: List[Episode] = []

        for block in blocks:
            try:
                root = ET.fromstring(block.text)
            except ET.ParseError as e:
                result.warnings.append(f"解析 NFO 块失败: {e}")
                logger.warning(f"⚠️ 解析 {block.kind} 块失败 (offset={block.start}): {e}")
                continue

            kind = _local_name(root.tag)
            if kind == TVSHOW:
                self.merge_show(show, self.parse_tvshow(root))
            elif kind == EPISODEDETAILS:
                episode = self.parse_episode(root)
                episode.raw_metadata = block.text
                episodes.append(episode)
            else:
                continue
            result.success = True

        if not result.success and not episodes:
            episodes = self.synthesize_episodes(text)
            if episodes:
                result.success = True
                result.warnings.append("从文件名中提取了集数信息")

        if not result.success:
            result.errors.append("未找到可解析的 NFO 块")
            return result

        show.episodes = episodes
        result.show = show
        return result

    # ============ 元素解析 ============

    def parse_tvshow(self, root: ET.Element) -> Show:
        """解析 <tvshow> 元素"""
        show = Show()

        show.title = _element_text(root, "title")
        show.original_title = _element_text(root, "originaltitle")
        show.sort_title = _element_text(root, "sorttitle")

        # 首播日期（完整日期和年份）
        premiered = _element_text(root, "premiered")
        if premiered:
            show.premiered = premiered
            show.year = _year_from_date(premiered)
        if show.year <= 0:
            show.year = parse_int(_element_text(root, "year"))

        rating = _element_text(root, "rating")
        if rating:
            show.rating = clamp_rating(parse_float(rating))

        plot = _element_text(root, "plot")
        show.plot = plot
        show.summary = plot

        show.studio = _element_text(root, "studio")
        show.director = _element_text(root, "director")

        show.tags = _collect_tags(root)
        show.actors = _collect_actors(root)
        return show

    def parse_episode(self, root: ET.Element) -> Episode:
        """解析 <episodedetails> 元素"""
        episode = Episode()

        episode.season = parse_int(_element_text(root, "season"))
        episode.number = parse_int(_element_text(root, "episode"))
        episode.title = _element_text(root, "title") or placeholder_episode_title(episode.number)

        aired = _element_text(root, "aired")
        if aired:
            episode.release_date = aired
            if len(aired) >= 4:
                episode.release_year = parse_int(aired[:4])
            else:
                episode.release_year = datetime.now().year

        plot = _element_text(root, "plot")
        if plot:
            episode.summary = plot.replace(AIRED_PREFIX, "").strip()

        episode.tags = _collect_tags(root)
        return episode

    def merge_show(self, target: Show, source: Show) -> Show:
        """合并剧集信息：目标已有的值保留，演员和标签追加去重"""
        for field_name in ("title", "original_title", "sort_title", "premiered",
                           "plot", "studio", "director", "summary"):
            if not getattr(target, field_name) and getattr(source, field_name):
                setattr(target, field_name, getattr(source, field_name))

        if target.year <= 0 < source.year:
            target.year = source.year
        if target.rating <= 0 < source.rating:
            target.rating = source.rating

        merge_unique(target.actors, source.actors)
        merge_unique(target.tags, source.tags)
        return target

    def synthesize_episodes(self, text: str) -> List[Episode]:
        """
        从文本中的文件名提取集数（S01E02 或 -02 / 空格02）

        按集号去重，每集使用占位标题和固定发行年份。
        """
        episodes: List[Episode] = []
        seen = set()

        for match in _FALLBACK_EPISODE_PATTERN.finditer(text):
            if match.group(1) and match.group(2):
                season = int(match.group(1))
                number = int(match.group(2))
            else:
                season = 1
                number = int(match.group(3))

            if number <= 0 or number in seen:
                continue
            seen.add(number)
            episodes.append(Episode(
                season=season,
                number=number,
                title=placeholder_episode_title(number),
                release_year=PLACEHOLDER_RELEASE_YEAR,
            ))

        return episodes


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1].lower()


def _element_text(parent: ET.Element, name: str) -> str:
    """子元素的全部文本（去首尾空白），不存在时返回空串"""
    element = parent.find(name)
    if element is None:
        return ""
    return "".join(element.itertext()).strip()


def _year_from_date(value: str) -> int:
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt).year
        except ValueError:
            continue
    return 0


def _collect_tags(root: ET.Element) -> List[str]:
    """genre + tag 合并去重，跳过通用分类"""
    tags: List[str] = []
    genres = ["".join(g.itertext()).strip() for g in root.findall("genre")]
    merge_unique(tags, [g for g in genres if g != IGNORED_GENRE])
    merge_unique(tags, ["".join(t.itertext()).strip() for t in root.findall("tag")])
    return tags


def _collect_actors(root: ET.Element) -> List[str]:
    """
    演员显示字符串：
    - 有 voice: "名字 (CV: 声优)"
    - 有 role: "名字 (角色)"
    - 否则只有名字
    """
    actors: List[str] = []
    for actor in root.findall("actor"):
        name = _element_text(actor, "name")
        if not name:
            continue
        voice = _element_text(actor, "voice")
        role = _element_text(actor, "role")
        if voice:
            actors.append(f"{name} (CV: {voice})")
        elif role:
            actors.append(f"{name} ({role})")
        else:
            actors.append(name)
    return actors
