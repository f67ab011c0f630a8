"""
MediaParser Pro

把粘贴的剧集元数据文本（NFO、模板格式、自由文本）解析为结构化的
Show + Episode，并通过 Draft -> Ready -> Archived 工作流决定能否归档。
"""

__version__ = "0.1.0"
