"""Tests for NFO block extraction and parsing."""

import pytest

from mediaparser.parsers import NfoExtractor, NfoParser
from mediaparser.parsers.nfo_parser import PLACEHOLDER_RELEASE_YEAR


TVSHOW_NFO = """<?xml version="1.0" encoding="utf-8"?>
<tvshow>
  <title>轻音少女</title>
  <originaltitle>けいおん!</originaltitle>
  <sorttitle>Keion</sorttitle>
  <premiered>2009-04-02</premiered>
  <plot>五名女高中生组成乐队的故事</plot>
  <studio>京都动画</studio>
  <director>山田尚子</director>
  <genre>成人动画</genre>
  <genre>音乐</genre>
  <tag>校园</tag>
  <tag>音乐</tag>
  <actor><name>平泽唯</name><voice>丰崎爱生</voice></actor>
  <actor><name>秋山澪</name><role>贝斯</role></actor>
  <actor><name>路人</name></actor>
</tvshow>
"""

MIXED_DOCUMENT = """tvshow.nfo：
<tvshow>
  <title>Alpha</title>
  <studio>StudioX</studio>
  <genre>Action</genre>
</tvshow>
第1集：<episodedetails><title>Start</title><season>1</season><episode>1</episode></episodedetails>
第2集：<episodedetails><title>Middle</title><season>1</season><episode>2</episode>
<aired>2020-01-08</aired><plot>首播: 精彩内容</plot><genre>Drama</genre></episodedetails>
第3集：<episodedetails><season>1</season><episode>3</episode></episodedetails>
"""


@pytest.fixture
def parser() -> NfoParser:
    return NfoParser()


class TestNfoExtractor:
    """Test textual block boundary detection."""

    def test_extract_first_block_prefers_tvshow(self) -> None:
        block = NfoExtractor().extract_first_block(MIXED_DOCUMENT)

        assert block is not None
        assert block.kind == "tvshow"
        assert block.text.startswith("<tvshow>")
        assert block.text.endswith("</tvshow>")

    def test_find_blocks_in_document_order(self) -> None:
        blocks = NfoExtractor().find_blocks(MIXED_DOCUMENT)

        assert [b.kind for b in blocks] == ["tvshow"] + ["episodedetails"] * 3
        assert [b.start for b in blocks] == sorted(b.start for b in blocks)

    def test_unclosed_block_is_ignored(self) -> None:
        assert NfoExtractor().find_blocks("<tvshow><title>A</title>") == []
        assert NfoExtractor().extract_first_block("<tvshow><title>A</title>") is None


class TestSingleBlock:
    """Test parsing a document with exactly one block."""

    def test_tvshow_fields(self, parser) -> None:
        result = parser.parse(TVSHOW_NFO)

        assert result.success
        assert result.strategy == "NFO"
        show = result.show
        assert show.title == "轻音少女"
        assert show.original_title == "けいおん!"
        assert show.sort_title == "Keion"
        assert show.premiered == "2009-04-02"
        assert show.year == 2009
        assert show.plot == show.summary == "五名女高中生组成乐队的故事"
        assert show.studio == "京都动画"
        assert show.director == "山田尚子"

    def test_genres_and_tags_merged_without_generic_genre(self, parser) -> None:
        show = parser.parse(TVSHOW_NFO).show

        assert show.tags == ["音乐", "校园"]

    def test_actor_display_strings(self, parser) -> None:
        show = parser.parse(TVSHOW_NFO).show

        assert show.actors == ["平泽唯 (CV: 丰崎爱生)", "秋山澪 (贝斯)", "路人"]

    def test_year_and_rating_elements(self, parser) -> None:
        text = "<tvshow><title>A</title><year>2015</year><rating>12.5</rating></tvshow>"
        show = parser.parse(text).show

        assert show.year == 2015
        assert show.rating == 10.0

    def test_episode_only_block(self, parser) -> None:
        text = "<episodedetails><season>2</season><episode>5</episode></episodedetails>"
        result = parser.parse(text)

        assert result.success
        assert len(result.episodes) == 1
        episode = result.episodes[0]
        assert episode.season == 2
        assert episode.number == 5
        assert episode.title == "第5话"

    def test_malformed_single_block(self, parser) -> None:
        result = parser.parse("<tvshow><title>A</tvshow>")

        assert not result.success
        assert result.errors[0].startswith("XML 解析失败")

    def test_empty_text(self, parser) -> None:
        result = parser.parse("   ")

        assert not result.success
        assert result.errors == ["NFO 文本为空"]


class TestMixedDocument:
    """Test merging several blocks embedded in prose."""

    def test_episodes_keep_document_order(self, parser) -> None:
        result = parser.parse(MIXED_DOCUMENT)

        assert result.success
        assert result.show.title == "Alpha"
        assert [e.number for e in result.episodes] == [1, 2, 3]
        assert [e.title for e in result.episodes] == ["Start", "Middle", "第3话"]

    def test_episode_details(self, parser) -> None:
        episode = parser.parse(MIXED_DOCUMENT).episodes[1]

        assert episode.release_date == "2020-01-08"
        assert episode.release_year == 2020
        assert episode.summary == "精彩内容"
        assert episode.tags == ["Drama"]

    def test_show_merge_first_non_empty_wins(self, parser) -> None:
        text = (
            "<tvshow><title>First</title><tag>A</tag></tvshow>"
            "<tvshow><title>Second</title><studio>S</studio><tag>A</tag><tag>B</tag></tvshow>"
        )
        show = parser.parse(text).show

        assert show.title == "First"
        assert show.studio == "S"
        assert show.tags == ["A", "B"]

    def test_broken_block_is_skipped_with_warning(self, parser) -> None:
        text = (
            "<tvshow><title>A</title></tvshow>"
            "<episodedetails><title>B</episodedetails>"
        )
        result = parser.parse(text)

        assert result.success
        assert result.show.title == "A"
        assert any(w.startswith("解析 NFO 块失败") for w in result.warnings)

    def test_episode_without_season_gets_show_season(self, parser) -> None:
        text = (
            "<tvshow><title>A</title></tvshow>"
            "<episodedetails><episode>1</episode></episodedetails>"
        )
        result = parser.parse(text)

        assert result.episodes[0].season == result.show.season == 1


class TestEpisodeSynthesis:
    """Test the file-name fallback when no block can be parsed."""

    def test_synthesize_from_file_names(self, parser) -> None:
        text = (
            "<tvshow> 未闭合\n"
            "[Group] Show - 01.mkv\n"
            "[Group] Show - 02.mkv\n"
            "[Group] Show - 02.mkv\n"
            "Show.S01E03.mkv\n"
        )
        result = parser.parse(text)

        assert result.success
        assert [e.number for e in result.episodes] == [1, 2, 3]
        assert all(e.title == f"第{e.number}话" for e in result.episodes)
        assert all(e.release_year == PLACEHOLDER_RELEASE_YEAR for e in result.episodes)
        assert "从文件名中提取了集数信息" in result.warnings

    def test_nothing_to_parse(self, parser) -> None:
        result = parser.parse("<tvshow> 没有任何集数")

        assert not result.success
        assert result.errors == ["未找到可解析的 NFO 块"]
