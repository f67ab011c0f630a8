"""Tests for the archive service."""

import pytest

from mediaparser.config import ArchiveConfig
from mediaparser.models import ImageAsset, ImageRole, VideoFile
from mediaparser.services import ArchiveService


@pytest.fixture
def source(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    for name in ("ep1.mkv", "ep2.mp4", "extra.mkv", "cover.jpg", "bg.jpg", "misc.jpg"):
        (src / name).write_bytes(b"x" * 100)
    return src


@pytest.fixture
def output(tmp_path):
    return tmp_path / "out"


def _video(path) -> VideoFile:
    return VideoFile(full_path=str(path), file_name=path.name, extension=path.suffix)


def _image(path, role=ImageRole.UNKNOWN) -> ImageAsset:
    return ImageAsset(full_path=str(path), file_name=path.name, role=role)


class TestArchive:
    def test_library_layout(self, source, output, valid_show) -> None:
        videos = [_video(source / "ep1.mkv"), _video(source / "ep2.mp4")]
        valid_show.episodes[0].mapped_video = videos[0]
        valid_show.episodes[1].mapped_video = videos[1]
        images = [
            _image(source / "cover.jpg", ImageRole.POSTER),
            _image(source / "bg.jpg", ImageRole.FANART),
            _image(source / "misc.jpg", ImageRole.STILL),
        ]

        result = ArchiveService(ArchiveConfig()).archive(valid_show, videos, images, str(output))

        show_dir = output / "Alpha (2024)"
        season_dir = show_dir / "Season 01"
        assert result.success
        assert result.errors == []
        assert result.output_directory == str(show_dir)
        for path in (
            show_dir / "tvshow.nfo",
            show_dir / "poster.jpg",
            show_dir / "fanart.jpg",
            show_dir / "misc.jpg",
            season_dir / "S01E01.nfo",
            season_dir / "S01E02.nfo",
            season_dir / "S01E01.mkv",
            season_dir / "S01E02.mp4",
        ):
            assert path.exists(), path
        assert len(result.created_files) == 8
        assert result.total_bytes_written > 500

    def test_nfo_is_utf8_without_bom(self, output, valid_show) -> None:
        ArchiveService(ArchiveConfig()).archive(valid_show, [], [], str(output))

        data = (output / "Alpha (2024)" / "tvshow.nfo").read_bytes()
        assert data.startswith(b"<?xml")

    def test_utf8_bom_option(self, output, valid_show) -> None:
        ArchiveService(ArchiveConfig(use_utf8_bom=True)).archive(valid_show, [], [], str(output))

        data = (output / "Alpha (2024)" / "tvshow.nfo").read_bytes()
        assert data.startswith(b"\xef\xbb\xbf")

    def test_without_season_folder(self, output, valid_show) -> None:
        ArchiveService(ArchiveConfig(use_season_folder=False)).archive(valid_show, [], [], str(output))

        assert (output / "Alpha (2024)" / "S01E01.nfo").exists()

    def test_skips_are_warnings(self, source, output, valid_show) -> None:
        extra = _video(source / "extra.mkv")
        unknown = _image(source / "misc.jpg")

        result = ArchiveService(ArchiveConfig()).archive(valid_show, [extra], [unknown], str(output))

        assert result.success
        assert "视频未映射到剧集，已跳过: extra.mkv" in result.warnings
        assert "图片未分配角色，已跳过: misc.jpg" in result.warnings

    def test_missing_source_is_error_but_batch_continues(self, source, output, valid_show) -> None:
        missing = VideoFile(full_path=str(source / "gone.mkv"), file_name="gone.mkv", extension=".mkv")
        present = _video(source / "ep2.mp4")
        valid_show.episodes[0].mapped_video = missing
        valid_show.episodes[1].mapped_video = present

        result = ArchiveService(ArchiveConfig()).archive(valid_show, [missing, present], [], str(output))

        assert not result.success
        assert result.errors == [f"视频文件不存在: {missing.full_path}"]
        assert (output / "Alpha (2024)" / "Season 01" / "S01E02.mp4").exists()

    def test_requires_show_and_output(self, valid_show) -> None:
        service = ArchiveService(ArchiveConfig())

        assert service.archive(None, [], []).errors == ["剧集元数据为空"]
        assert service.archive(valid_show, [], []).errors == ["未指定输出目录"]
