"""
命令行入口

流程：
1. 解析元数据（文本或文件）
2. 扫描目录中的视频和图片
3. 按文件名推断的集数关联视频（--auto-map）
4. 校验并尝试进入 Ready
5. 指定 --output 时执行归档

每次调用在 stdout 输出一个 JSON 对象，日志输出到 stderr。
退出码始终为 0，成功与否以 JSON 中的 success 为准。
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

import typer

from mediaparser.config import get_config, reload_config
from mediaparser.models import CliResult, ArchiveSummary
from mediaparser.parsers import MetadataParser
from mediaparser.services import VideoScanner, ImageManager, ArchiveService
from mediaparser.workflow import WorkflowController


logger = logging.getLogger(__name__)

app = typer.Typer(
    name="mediaparser",
    help="MediaParser Pro - 媒体元数据解析与归档工具",
    add_completion=False,
)


def setup_logging(verbose: bool = False) -> None:
    config = get_config()
    level = logging.DEBUG if verbose else getattr(logging, config.logging.level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=config.logging.format)
    logging.getLogger().setLevel(level)


def read_metadata(value: str) -> str:
    """参数是已存在的文件路径时读取文件内容，否则当作元数据文本"""
    if value and os.path.isfile(value):
        with open(value, "r", encoding="utf-8-sig") as f:
            return f.read()
    return value


def run(
    metadata: str = "",
    directory: str = "",
    output: str = "",
    auto_map: bool = False
) -> CliResult:
    """
    执行一次完整流程

    Returns:
        CliResult: 输出到 stdout 的结果文档
    """
    result = CliResult()

    # 1. 解析元数据
    if metadata:
        parse_result = MetadataParser().parse(read_metadata(metadata))
        result.warnings.extend(parse_result.warnings)
        if not parse_result.success:
            result.errors.extend(parse_result.errors)
            return result
        result.show = parse_result.show

    # 2. 扫描视频和图片
    if directory:
        scanner = VideoScanner()
        video_result = scanner.scan_directory(directory)
        result.errors.extend(video_result.errors)
        result.warnings.extend(video_result.warnings)
        result.videos = video_result.videos

        image_result = ImageManager().scan_directory(directory)
        # 目录不存在时两次扫描报同一条错误
        result.errors.extend(e for e in image_result.errors if e not in result.errors)
        result.warnings.extend(image_result.warnings)
        result.images = image_result.images

        # 3. 自动映射
        if auto_map and result.show is not None:
            scanner.map_videos_to_episodes(result.videos, result.show.episodes)

    # 4. 校验
    controller = WorkflowController()
    controller.show = result.show
    controller.videos = result.videos
    controller.images = result.images

    can_archive = controller.try_transition_to_ready()
    result.validation_summary = controller.validation_summary
    result.can_archive = can_archive
    result.state = controller.state.value

    if not can_archive:
        result.errors.append(controller.last_error)
        return result

    if not output:
        result.success = not result.errors
        result.message = "数据校验通过，可以使用 --output 参数执行归档"
        return result

    if result.errors:
        result.message = "扫描存在错误，未执行归档"
        return result

    # 5. 归档
    archive_result = ArchiveService().archive(
        controller.show, controller.videos, controller.images, output
    )
    result.archive_result = ArchiveSummary(
        success=archive_result.success,
        output_directory=archive_result.output_directory,
        created_files_count=len(archive_result.created_files),
        total_bytes_written=archive_result.total_bytes_written,
    )
    result.warnings.extend(archive_result.warnings)

    if not archive_result.success:
        result.errors.extend(archive_result.errors)
        return result

    controller.try_archive()
    result.state = controller.state.value
    result.can_archive = controller.can_archive
    result.success = controller.is_archived and not result.errors
    if result.success:
        result.message = f"归档成功！输出目录: {archive_result.output_directory}"
    else:
        result.errors.append(controller.last_error)
    return result


def to_json(result: CliResult) -> str:
    return json.dumps(result.model_dump(mode="json", exclude_none=True), ensure_ascii=False, indent=2)


@app.command()
def main(
    metadata: str = typer.Option("", "--metadata", "-m", help="元数据文本或文件路径"),
    directory: str = typer.Option("", "--directory", "-d", help="包含媒体文件的目录"),
    output: str = typer.Option("", "--output", "-o", help="归档输出目录"),
    auto_map: bool = typer.Option(False, "--auto-map", "-a", help="按文件名自动映射视频到剧集"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出调试日志"),
    config: Optional[Path] = typer.Option(None, "--config", help="配置文件路径 (YAML)"),
) -> None:
    """解析元数据、校验并归档，输出 JSON 结果"""
    if config is not None:
        reload_config(config)
    setup_logging(verbose)

    try:
        result = run(metadata, directory, output, auto_map)
    except Exception as e:
        logger.exception("执行时出错")
        result = CliResult(errors=[f"执行时出错: {e}"])

    typer.echo(to_json(result))


if __name__ == "__main__":
    app()
