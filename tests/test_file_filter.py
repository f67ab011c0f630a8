"""Tests for scan file filtering."""

import pytest

from mediaparser.utils import FileFilter


@pytest.fixture
def file_filter() -> FileFilter:
    return FileFilter(
        video_extensions=["MKV", ".mp4"],
        image_extensions=[".jpg"],
        exclude_patterns=[".*", "@eaDir"],
    )


@pytest.fixture
def tree(tmp_path):
    (tmp_path / "a.mkv").write_bytes(b"0")
    (tmp_path / ".hidden.mkv").write_bytes(b"0")
    for sub in ("season", "@eaDir"):
        (tmp_path / sub).mkdir()
        (tmp_path / sub / "b.mp4").write_bytes(b"0")
    return tmp_path


class TestFileFilter:
    def test_extensions_are_normalized(self, file_filter) -> None:
        assert file_filter.is_video_file("show.Mkv")
        assert file_filter.is_video_file("/x/show.MP4")
        assert file_filter.is_image_file("cover.JPG")
        assert not file_filter.is_image_file("cover.png")

    def test_should_exclude_uses_last_name(self, file_filter) -> None:
        assert file_filter.should_exclude("/media/@eaDir/")
        assert file_filter.should_exclude(".DS_Store")
        assert not file_filter.should_exclude("/media/.show/a.mkv")

    def test_defaults_come_from_config(self) -> None:
        default = FileFilter()

        assert ".mkv" in default.video_extensions
        assert "Thumbs.db" in default.exclude_patterns

    def test_list_files_flat(self, file_filter, tree) -> None:
        files = file_filter.list_files(str(tree))

        assert [p.rsplit("/", 1)[-1] for p in files] == ["a.mkv"]

    def test_list_files_recursive_skips_excluded_dirs(self, file_filter, tree) -> None:
        files = sorted(file_filter.list_files(str(tree), recursive=True))

        assert files == sorted([str(tree / "a.mkv"), str(tree / "season" / "b.mp4")])
