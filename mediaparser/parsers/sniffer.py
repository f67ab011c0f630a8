"""
NFO 格式嗅探

判断原始文本是否像 NFO/XML：
1. 出现 <tvshow 或 <episodedetails 根标签（不区分大小写）
2. 或者 8 个常见标签中至少出现 4 个
"""

from typing import List


ROOT_TAGS = ("<tvshow", "<episodedetails")

CANONICAL_TAGS: List[str] = [
    "<title>", "</title>",
    "<plot>", "</plot>",
    "<actor>", "</actor>",
    "<genre>", "</genre>",
]

MIN_CANONICAL_TAG_MATCHES = 4


class FormatSniffer:
    """NFO 格式嗅探器"""

    def is_likely_nfo(self, text: str) -> bool:
        if not text:
            return False

        lowered = text.lower()

        # 根标签最可靠
        if any(tag in lowered for tag in ROOT_TAGS):
            return True

        # 降级：常见标签计数
        match_count = sum(1 for tag in CANONICAL_TAGS if tag in lowered)
        return match_count >= MIN_CANONICAL_TAG_MATCHES


def is_likely_nfo(text: str) -> bool:
    """判断文本是否为 NFO 格式的便捷函数"""
    return FormatSniffer().is_likely_nfo(text)
