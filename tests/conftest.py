"""Shared fixtures for mediaparser tests."""

from typing import List

import pytest

import mediaparser.config as config_module
from mediaparser.config import AppConfig, ParserConfig, ScanConfig
from mediaparser.models import Show, Episode, VideoFile, ImageAsset, ImageRole


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    """Isolate every test from config files and MEDIAPARSER_* environment variables."""
    for name in ("CONFIG_PATH", "MEDIAPARSER_LOG_LEVEL", "MEDIAPARSER_DEFAULT_SEASON",
                 "MEDIAPARSER_OUTPUT_DIRECTORY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "_config", AppConfig())
    yield
    config_module._config = None


@pytest.fixture
def parser_options() -> ParserConfig:
    return ParserConfig()


@pytest.fixture
def scan_config() -> ScanConfig:
    """Scan config without size thresholds so tiny test files are picked up."""
    return ScanConfig(min_video_size=0, min_image_size=0)


def make_show(episode_count: int = 2, **kwargs) -> Show:
    fields = dict(title="Alpha", year=2024, season=1)
    fields.update(kwargs)
    show = Show(**fields)
    show.episodes = [
        Episode(season=show.season, number=n, title=f"第{n}话", release_year=show.year)
        for n in range(1, episode_count + 1)
    ]
    return show


@pytest.fixture
def valid_show() -> Show:
    return make_show()


@pytest.fixture
def videos() -> List[VideoFile]:
    return [
        VideoFile(full_path="/media/A.mkv", file_name="A.mkv", extension=".mkv"),
        VideoFile(full_path="/media/B.mkv", file_name="B.mkv", extension=".mkv"),
    ]


@pytest.fixture
def unknown_images() -> List[ImageAsset]:
    return [
        ImageAsset(full_path="/media/cover.jpg", file_name="cover.jpg", width=600, height=900),
        ImageAsset(full_path="/media/bg.jpg", file_name="bg.jpg", width=1920, height=1080),
    ]


@pytest.fixture
def poster_image() -> ImageAsset:
    return ImageAsset(
        full_path="/media/poster.png",
        file_name="poster.png",
        width=600,
        height=900,
        role=ImageRole.POSTER,
    )


@pytest.fixture
def show_factory():
    return make_show
