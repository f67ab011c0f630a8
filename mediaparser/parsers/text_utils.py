"""
解析器共用的文本工具

- 列表字段切分（演员、标签）
- 从全文识别季数、年份
- 有序去重合并
"""

import re
from typing import Iterable, List


# 列表分隔符：半角逗号、全角逗号、顿号、半/全角分号
LIST_SEPARATORS = re.compile(r'[,，、;；]')

SEASON_PATTERNS = [
    re.compile(r'第(\d+)季', re.IGNORECASE),
    re.compile(r'Season\s*(\d+)', re.IGNORECASE),
    re.compile(r'S(\d+)', re.IGNORECASE),
    re.compile(r'\((\d+)季\)', re.IGNORECASE),
    re.compile(r'第\s*(\d+)\s*季度', re.IGNORECASE),
]

# 1900-2099 之间的独立四位数字
YEAR_PATTERN = re.compile(r'(?<!\d)(?:19|20)\d{2}(?!\d)')


def split_list(value: str) -> List[str]:
    """
    切分演员/标签列表

    Examples:
        >>> split_list("甲, 乙，丙;;")
        ['甲', '乙', '丙']
    """
    return [item.strip() for item in LIST_SEPARATORS.split(value) if item.strip()]


def merge_unique(target: List[str], items: Iterable[str]) -> List[str]:
    """把 items 中尚未出现的项按顺序追加到 target（原地修改并返回）"""
    for item in items:
        if item and item not in target:
            target.append(item)
    return target


def detect_season(text: str) -> int:
    """
    从文本中识别季数

    依次尝试：第N季、SeasonN、SN、(N季)、第N季度

    Returns:
        int: 季数，未识别返回 0
    """
    for pattern in SEASON_PATTERNS:
        match = pattern.search(text)
        if match:
            return int(match.group(1))
    return 0


def detect_year(text: str) -> int:
    """
    从文本中识别年份

    Returns:
        int: 年份，未识别返回 0
    """
    match = YEAR_PATTERN.search(text)
    if match:
        return int(match.group(0))
    return 0


def parse_int(value: str, default: int = 0) -> int:
    try:
        return int(value.strip())
    except (ValueError, AttributeError):
        return default


def parse_float(value: str, default: float = 0.0) -> float:
    try:
        return float(value.strip())
    except (ValueError, AttributeError):
        return default
