"""Tests for the regex template library and cascade."""

import re

import pytest

from mediaparser.config import ParserConfig
from mediaparser.models import FieldTarget
from mediaparser.parsers import (
    TemplateCascade,
    TemplateField,
    RegexTemplate,
    TemplateLibrary,
    default_library,
    parse_episode_list,
)


@pytest.fixture
def cascade() -> TemplateCascade:
    return TemplateCascade(options=ParserConfig())


class TestParseEpisodeList:
    """Test the three episode list sub-patterns."""

    def test_range(self) -> None:
        episodes = parse_episode_list("1-3", season=1, year=2024)

        assert [e.number for e in episodes] == [1, 2, 3]
        assert [e.title for e in episodes] == ["第1话", "第2话", "第3话"]
        assert all(e.release_year == 2024 for e in episodes)

    def test_brackets(self) -> None:
        assert [e.number for e in parse_episode_list("[01][02][05]")] == [1, 2, 5]

    def test_comma_separated(self) -> None:
        assert [e.number for e in parse_episode_list("01, 02，04")] == [1, 2, 4]

    def test_nothing(self) -> None:
        assert parse_episode_list("全集") == []


class TestTemplateLibrary:
    """Test registration and priority ordering."""

    def test_builtin_templates_in_priority_order(self) -> None:
        library = default_library()

        assert len(library) == 7
        assert [t.priority for t in library] == list(range(1, 8))

    def test_add_remove_get(self) -> None:
        library = TemplateLibrary()
        template = RegexTemplate(name="custom", priority=0, pattern=re.compile(r'(?P<Title>.+)'))
        library.add(template)

        assert library.get("custom") is template
        assert library.remove("custom")
        assert not library.remove("custom")
        assert library.get("custom") is None


class TestBuiltinTemplates:
    """Test each built-in template through the cascade."""

    def test_pipe_delimited(self, cascade) -> None:
        result = cascade.parse(
            "Alpha|Original Alpha|2024|StudioX|DirectorY|Actor1,Actor2|Tag1,Tag2|1-3"
        )

        assert result.success
        assert result.strategy == "模板:标准格式（竖线分隔）"
        show = result.show
        assert show.title == "Alpha"
        assert show.original_title == "Original Alpha"
        assert show.year == 2024
        assert show.studio == "StudioX"
        assert show.director == "DirectorY"
        assert show.actors == ["Actor1", "Actor2"]
        assert show.tags == ["Tag1", "Tag2"]
        assert show.season == 1
        assert [e.number for e in show.episodes] == [1, 2, 3]
        assert [e.title for e in show.episodes] == ["第1话", "第2话", "第3话"]
        assert all(e.season == 1 and e.release_year == 2024 for e in show.episodes)

    def test_atx(self, cascade) -> None:
        result = cascade.parse("轻音少女 (けいおん!) (2009) [京都动画] - 1-12")

        assert result.strategy == "模板:AT-X格式"
        assert result.show.title == "轻音少女"
        assert result.show.original_title == "けいおん!"
        assert result.show.year == 2009
        assert result.show.studio == "京都动画"
        assert len(result.episodes) == 12

    def test_episode_title(self, cascade) -> None:
        result = cascade.parse("[某剧 第3话] (2020)")

        assert result.strategy == "模板:带集数标题格式"
        assert result.show.title == "某剧"
        assert result.show.year == 2020
        assert [e.number for e in result.episodes] == [3]

    def test_simple(self, cascade) -> None:
        result = cascade.parse("孤独摇滚 2022 【音乐,喜剧】 - CloverWorks")

        assert result.strategy == "模板:简单格式"
        assert result.show.title == "孤独摇滚"
        assert result.show.year == 2022
        assert result.show.tags == ["音乐", "喜剧"]
        assert result.show.studio == "CloverWorks"

    def test_japanese(self, cascade) -> None:
        result = cascade.parse("進撃の巨人 (Shingeki no Kyojin) [WIT STUDIO] 2013 - 1-25")

        assert result.strategy == "模板:日文格式"
        assert result.show.original_title == "Shingeki no Kyojin"
        assert result.show.studio == "WIT STUDIO"
        assert result.show.year == 2013
        assert len(result.episodes) == 25

    def test_rated(self, cascade) -> None:
        result = cascade.parse("葬送的芙莉莲 (Sousou no Frieren) 2023 评分: 9.3 制作: MADHOUSE")

        assert result.strategy == "模板:豆瓣/bangumi格式"
        assert result.show.title == "葬送的芙莉莲"
        assert result.show.rating == pytest.approx(9.3)
        assert result.show.studio == "MADHOUSE"

    def test_multiline(self, cascade) -> None:
        text = (
            "标题: 测试动画\n"
            "原名: Test Anime\n"
            "年份: 2021\n"
            "制作商: 某工作室\n"
            "导演: 张三\n"
            "演员: 甲, 乙\n"
            "标签: 日常, 校园\n"
            "简介: 这是一个测试简介\n"
            "集数: 1-4"
        )
        result = cascade.parse(text)

        assert result.strategy == "模板:多行格式"
        show = result.show
        assert show.title == "测试动画"
        assert show.original_title == "Test Anime"
        assert show.year == 2021
        assert show.actors == ["甲", "乙"]
        assert show.tags == ["日常", "校园"]
        assert show.summary == "这是一个测试简介"
        assert len(show.episodes) == 4

    def test_windows_newlines(self, cascade) -> None:
        result = cascade.parse("标题: 测试动画\r\n年份: 2021\r\n集数: 1-2")

        assert result.show.title == "测试动画"
        assert result.show.year == 2021
        assert len(result.episodes) == 2


class TestSeasonAndYearDetection:
    """Test season and year auto-detection over the whole text."""

    def test_season_detected_from_title(self, cascade) -> None:
        result = cascade.parse("Alpha 第2季|Alpha|2024|StudioX|D|A|T|1-2")

        assert result.show.season == 2
        assert all(e.season == 2 for e in result.episodes)

    def test_default_season_when_disabled(self) -> None:
        cascade = TemplateCascade(options=ParserConfig(auto_detect_season=False, default_season=3))
        result = cascade.parse("Alpha 第2季|Alpha|2024|StudioX|D|A|T|1-2")

        assert result.show.season == 3

    def test_explicit_template_season_wins(self) -> None:
        library = TemplateLibrary([
            RegexTemplate(
                name="fixed",
                priority=1,
                pattern=re.compile(r'^(?P<Title>\w+) ep (?P<Episodes>\d+)$'),
                fields=[
                    TemplateField("Title", FieldTarget.SHOW_TITLE, required=True),
                    TemplateField("Episodes", FieldTarget.EPISODE_LIST),
                ],
                season=4,
            )
        ])
        result = TemplateCascade(library, ParserConfig()).parse("Beta ep 7")

        assert result.show.season == 4
        assert result.episodes[0].season == 4

    def test_year_detected_when_template_has_none(self) -> None:
        library = TemplateLibrary([
            RegexTemplate(
                name="title-only",
                priority=1,
                pattern=re.compile(r'^(?P<Title>[^\d]+?)\s*$', re.MULTILINE),
                fields=[TemplateField("Title", FieldTarget.SHOW_TITLE, required=True)],
            )
        ])
        result = TemplateCascade(library, ParserConfig()).parse("Gamma\n发行于 1998 年")

        assert result.show.title == "Gamma"
        assert result.show.year == 1998


class TestCascadeFailures:
    """Test non-matching input and per-template exceptions."""

    def test_no_template_matches(self, cascade) -> None:
        result = cascade.parse("完全无法匹配的一段文字")

        assert not result.success
        assert result.errors == ["没有匹配的模板"]

    def test_empty_text(self, cascade) -> None:
        assert cascade.parse("").errors == ["输入文本为空"]

    def test_required_group_must_be_non_empty(self) -> None:
        library = TemplateLibrary([
            RegexTemplate(
                name="optional-title",
                priority=1,
                pattern=re.compile(r'^(?P<Title>[a-z]*)#(?P<Year>\d{4})$'),
                fields=[
                    TemplateField("Title", FieldTarget.SHOW_TITLE, required=True),
                    TemplateField("Year", FieldTarget.YEAR),
                ],
            )
        ])
        result = TemplateCascade(library, ParserConfig()).parse("#2020")

        assert not result.success

    def test_exception_moves_to_next_template(self) -> None:
        broken = RegexTemplate(
            name="broken",
            priority=1,
            pattern=re.compile(r'^(?P<Title>.+)$'),
            # 引用不存在的目标，应用字段时抛出 KeyError
            fields=[TemplateField("Title", "NotAField", required=True)],
        )
        working = RegexTemplate(
            name="working",
            priority=2,
            pattern=re.compile(r'^(?P<Title>.+)$'),
            fields=[TemplateField("Title", FieldTarget.SHOW_TITLE, required=True)],
        )
        result = TemplateCascade(TemplateLibrary([working, broken]), ParserConfig()).parse("Delta")

        assert result.success
        assert result.strategy == "模板:working"
        assert result.show.title == "Delta"
