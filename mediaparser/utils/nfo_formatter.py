"""
NFO 生成器

生成 Kodi/媒体中心规范的 tvshow.nfo 与 episodedetails NFO

标签词汇与 NfoParser 读取的保持一致，生成结果可以被重新解析：
    <tvshow>
      <title/> <originaltitle/> <sorttitle/> <premiered/> <year/> <rating/>
      <studio/> <director/> <actor><name/></actor>... <tag/>... <plot/>
    </tvshow>
"""

from typing import List
from xml.sax.saxutils import escape

from mediaparser.models import Show, Episode
from mediaparser.utils.naming import placeholder_episode_title


XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'

# 集简介中需要去掉的首播前缀
AIRED_PREFIX = "首播: "

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_xml(text: str) -> str:
    """转义 & < > " '"""
    if not text:
        return ""
    return escape(text, _XML_ENTITIES)


class NfoFormatter:
    """NFO 文本生成器"""

    def __init__(self, indent: str = "  "):
        self.indent = indent

    def format_tvshow(self, show: Show) -> str:
        """
        生成 tvshow.nfo 内容

        Args:
            show: 剧集元数据

        Returns:
            str: NFO XML 文本
        """
        lines = [XML_DECLARATION, "<tvshow>"]

        self._add(lines, "title", show.title)
        self._add(lines, "originaltitle", show.original_title)
        self._add(lines, "sorttitle", show.sort_title)
        self._add(lines, "premiered", show.premiered)
        if show.year > 0:
            self._add(lines, "year", str(show.year))
        if show.rating > 0:
            self._add(lines, "rating", f"{show.rating:g}")
        self._add(lines, "studio", show.studio)
        self._add(lines, "director", show.director)
        self._add_actors(lines, show.actors)
        for tag in show.tags:
            self._add(lines, "tag", tag)
        self._add(lines, "plot", show.summary or show.plot)

        lines.append("</tvshow>")
        return "\n".join(lines) + "\n"

    def format_episode(self, show: Show, episode: Episode) -> str:
        """
        生成单集 NFO 内容

        没有集标题时使用"第N话"；没有播出日期时用发行年份的 1 月 1 日；
        集标签为空时沿用剧集标签。
        """
        lines = [XML_DECLARATION, "<episodedetails>"]

        self._add(lines, "title", episode.title or placeholder_episode_title(episode.number))
        self._add(lines, "season", str(episode.season))
        self._add(lines, "episode", str(episode.number))
        self._add(lines, "showtitle", show.title)
        self._add(lines, "originaltitle", show.original_title)

        if episode.release_date:
            self._add(lines, "aired", episode.release_date)
        elif episode.release_year > 0:
            self._add(lines, "aired", f"{episode.release_year}-01-01")

        if episode.summary:
            self._add(lines, "plot", episode.summary.replace(AIRED_PREFIX, "").strip())

        self._add(lines, "director", show.director)
        self._add_actors(lines, show.actors)

        for tag in episode.tags or show.tags:
            self._add(lines, "tag", tag)

        lines.append("</episodedetails>")
        return "\n".join(lines) + "\n"

    def _add(self, lines: List[str], tag: str, value: str) -> None:
        if value:
            lines.append(f"{self.indent}<{tag}>{escape_xml(value)}</{tag}>")

    def _add_actors(self, lines: List[str], actors: List[str]) -> None:
        for actor in actors:
            lines.append(f"{self.indent}<actor>")
            lines.append(f"{self.indent * 2}<name>{escape_xml(actor)}</name>")
            lines.append(f"{self.indent}</actor>")


# 便捷函数
def generate_tvshow_nfo(show: Show) -> str:
    """生成 tvshow.nfo 的便捷函数"""
    return NfoFormatter().format_tvshow(show)


def generate_episode_nfo(show: Show, episode: Episode) -> str:
    """生成单集 NFO 的便捷函数"""
    return NfoFormatter().format_episode(show, episode)
