"""
正则模板库

每个模板由一条带命名捕获组的正则和一张字段表组成，
字段表把捕获组映射到语义字段（FieldTarget）。优先级数字越小越先尝试。

单行模板（1-6）用 ^...$ 锚定整段文本且不跨行；
多行模板（7）按"标签: 值"逐行匹配。
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Pattern

from mediaparser.models import FieldTarget


@dataclass(frozen=True)
class TemplateField:
    """模板字段：捕获组名称 -> 目标字段"""
    group: str
    target: FieldTarget
    required: bool = False
    description: str = ""


@dataclass
class RegexTemplate:
    """正则表达式模板"""
    name: str
    priority: int
    pattern: Pattern
    fields: List[TemplateField] = field(default_factory=list)
    # 模板显式声明的季数，None 表示交给季数识别
    season: Optional[int] = None

    @property
    def required_groups(self) -> List[str]:
        return [f.group for f in self.fields if f.required]


class TemplateLibrary:
    """正则模板注册表"""

    def __init__(self, templates: Optional[List[RegexTemplate]] = None):
        self._templates: List[RegexTemplate] = list(templates or [])

    def add(self, template: RegexTemplate) -> None:
        self._templates.append(template)

    def remove(self, name: str) -> bool:
        before = len(self._templates)
        self._templates = [t for t in self._templates if t.name != name]
        return len(self._templates) != before

    def get(self, name: str) -> Optional[RegexTemplate]:
        for template in self._templates:
            if template.name == name:
                return template
        return None

    @property
    def templates(self) -> List[RegexTemplate]:
        """按优先级排序的模板列表（同优先级保持注册顺序）"""
        return sorted(self._templates, key=lambda t: t.priority)

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self):
        return iter(self.templates)


def _fields(*specs) -> List[TemplateField]:
    """(组名, 目标) 元组转字段列表，Title 组为必填"""
    return [
        TemplateField(group=group, target=target, required=(group == "Title"))
        for group, target in specs
    ]


# ============================================================
# 内置模板
# ============================================================

# 模板1：标准格式 - 标题|原名|年份|制作商|导演|演员|标签|集数
STANDARD_PIPE = RegexTemplate(
    name="标准格式（竖线分隔）",
    priority=1,
    pattern=re.compile(
        r'^(?P<Title>[^|\n]+)\|(?P<OriginalTitle>[^|\n]*)\|\s*(?P<Year>\d{4})\s*\|'
        r'(?P<Studio>[^|\n]*)\|(?P<Director>[^|\n]*)\|(?P<Actors>[^|\n]*)\|'
        r'(?P<Tags>[^|\n]*)\|(?P<Episodes>[^|\n]+)$',
        re.IGNORECASE,
    ),
    fields=_fields(
        ("Title", FieldTarget.SHOW_TITLE),
        ("OriginalTitle", FieldTarget.ORIGINAL_TITLE),
        ("Year", FieldTarget.YEAR),
        ("Studio", FieldTarget.STUDIO),
        ("Director", FieldTarget.DIRECTOR),
        ("Actors", FieldTarget.ACTORS),
        ("Tags", FieldTarget.TAGS),
        ("Episodes", FieldTarget.EPISODE_LIST),
    ),
)

# 模板2：AT-X 格式 - 标题 (原名) (年份) [制作商] 导演:X 演员:A,B 【标签】 - 1-12
ATX = RegexTemplate(
    name="AT-X格式",
    priority=2,
    pattern=re.compile(
        r'^(?P<Title>[^(（\[【\n]+?)\s*'
        r'(?:\((?P<OriginalTitle>[^)\n]+)\)\s*)?'
        r'\((?P<Year>\d{4})\)\s*'
        r'(?:\[(?P<Studio>[^\]\n]+)\]\s*)?'
        r'(?:导演[:：]?\s*(?P<Director>[^，,【\n]+?)\s*[，,]?\s*)?'
        r'(?:演员[:：]?\s*(?P<Actors>[^【\n]+?)\s*)?'
        r'(?:【(?P<Tags>[^【】\n]+)】\s*)?'
        r'(?:-\s*(?P<Episodes>\d+(?:\s*[-~]\s*\d+)?)\s*)?$',
        re.IGNORECASE,
    ),
    fields=_fields(
        ("Title", FieldTarget.SHOW_TITLE),
        ("OriginalTitle", FieldTarget.ORIGINAL_TITLE),
        ("Year", FieldTarget.YEAR),
        ("Studio", FieldTarget.STUDIO),
        ("Director", FieldTarget.DIRECTOR),
        ("Actors", FieldTarget.ACTORS),
        ("Tags", FieldTarget.TAGS),
        ("Episodes", FieldTarget.EPISODE_LIST),
    ),
)

# 模板3：带集数标题格式 - [标题 第3话] (年份) - 制作商 导演: X 演员: A,B
EPISODE_TITLE = RegexTemplate(
    name="带集数标题格式",
    priority=3,
    pattern=re.compile(
        r'^\[?(?P<Title>[^\[\]第话\d\n]+?)\s*第(?:\d+季\s*第?)?(?P<Episodes>\d+)[话集]\]?\s*'
        r'(?:\((?P<Year>\d{4})\)\s*)?'
        r'(?:-\s*(?P<Studio>[^\-\n]+?)\s*)?'
        r'(?:导演[:：]\s*(?P<Director>[^,，\n]+?)\s*[,，]?\s*)?'
        r'(?:演员[:：]\s*(?P<Actors>[^\n]+?)\s*)?$',
        re.IGNORECASE,
    ),
    fields=_fields(
        ("Title", FieldTarget.SHOW_TITLE),
        ("Episodes", FieldTarget.EPISODE_LIST),
        ("Year", FieldTarget.YEAR),
        ("Studio", FieldTarget.STUDIO),
        ("Director", FieldTarget.DIRECTOR),
        ("Actors", FieldTarget.ACTORS),
    ),
)

# 模板4：简单格式（标题 + 年份）- 标题 2009 【标签】 - 制作商
SIMPLE = RegexTemplate(
    name="简单格式",
    priority=4,
    pattern=re.compile(
        r'^(?P<Title>[^\d(（【】\[\]\n]+?)\s*[(（]?(?P<Year>\d{4})[)）]?\s*'
        r'(?:【(?P<Tags>[^【】\n]+)】\s*)?'
        r'(?:-\s*(?P<Studio>[^\-\n]+?)\s*)?$',
        re.IGNORECASE,
    ),
    fields=_fields(
        ("Title", FieldTarget.SHOW_TITLE),
        ("Year", FieldTarget.YEAR),
        ("Tags", FieldTarget.TAGS),
        ("Studio", FieldTarget.STUDIO),
    ),
)

# 模板5：日文格式 - 标题 (原名) [制作商] 2009 - 1-13
JAPANESE = RegexTemplate(
    name="日文格式",
    priority=5,
    pattern=re.compile(
        r'^(?P<Title>[^(（【】\[\]\n]+?)\s*\((?P<OriginalTitle>[^)\n]+)\)\s*'
        r'(?:\[(?P<Studio>[^\]\n]+)\]\s*)?'
        r'(?:(?P<Year>\d{4})\s*)?'
        r'(?:-\s*(?P<Episodes>\d+(?:\s*[-~]\s*\d+)?)\s*)?$',
        re.IGNORECASE,
    ),
    fields=_fields(
        ("Title", FieldTarget.SHOW_TITLE),
        ("OriginalTitle", FieldTarget.ORIGINAL_TITLE),
        ("Studio", FieldTarget.STUDIO),
        ("Year", FieldTarget.YEAR),
        ("Episodes", FieldTarget.EPISODE_LIST),
    ),
)

# 模板6：豆瓣/bangumi 格式（带评分）- 标题 (原名) 2022 评分: 9.1 制作: X
RATED = RegexTemplate(
    name="豆瓣/bangumi格式",
    priority=6,
    pattern=re.compile(
        r'^(?P<Title>[^(（【】\[\]\n]+?)\s*'
        r'(?:\((?P<OriginalTitle>[^)\n]+)\)\s*)?'
        r'(?:[(（]?(?P<Year>\d{4})[)）]?\s*)?'
        r'评分[:：]?\s*(?P<Rating>\d+(?:\.\d+)?)\s*'
        r'(?:制作[:：]?\s*(?P<Studio>[^,，\n]+?)\s*)?$',
        re.IGNORECASE,
    ),
    fields=_fields(
        ("Title", FieldTarget.SHOW_TITLE),
        ("OriginalTitle", FieldTarget.ORIGINAL_TITLE),
        ("Year", FieldTarget.YEAR),
        ("Rating", FieldTarget.RATING),
        ("Studio", FieldTarget.STUDIO),
    ),
)

# 模板7：多行格式（带标签），各行顺序固定，均可缺省
MULTILINE = RegexTemplate(
    name="多行格式",
    priority=7,
    pattern=re.compile(
        r'标题[:：][ \t]*(?P<Title>[^\n]+)'
        r'(?:\n[ \t]*原名[:：][ \t]*(?P<OriginalTitle>[^\n]+))?'
        r'(?:\n[ \t]*年份[:：]?[ \t]*(?P<Year>\d{4})[^\n]*)?'
        r'(?:\n[ \t]*制作商[:：][ \t]*(?P<Studio>[^\n]+))?'
        r'(?:\n[ \t]*导演[:：][ \t]*(?P<Director>[^\n]+))?'
        r'(?:\n[ \t]*演员[:：][ \t]*(?P<Actors>[^\n]+))?'
        r'(?:\n[ \t]*标签[:：][ \t]*(?P<Tags>[^\n]+))?'
        r'(?:\n[ \t]*简介[:：][ \t]*(?P<Summary>[^\n]+))?'
        r'(?:\n[ \t]*集数[:：][ \t]*(?P<Episodes>[^\n]+))?',
        re.IGNORECASE,
    ),
    fields=_fields(
        ("Title", FieldTarget.SHOW_TITLE),
        ("OriginalTitle", FieldTarget.ORIGINAL_TITLE),
        ("Year", FieldTarget.YEAR),
        ("Studio", FieldTarget.STUDIO),
        ("Director", FieldTarget.DIRECTOR),
        ("Actors", FieldTarget.ACTORS),
        ("Tags", FieldTarget.TAGS),
        ("Summary", FieldTarget.SUMMARY),
        ("Episodes", FieldTarget.EPISODE_LIST),
    ),
)

BUILTIN_TEMPLATES: List[RegexTemplate] = [
    STANDARD_PIPE,
    ATX,
    EPISODE_TITLE,
    SIMPLE,
    JAPANESE,
    RATED,
    MULTILINE,
]


def default_library() -> TemplateLibrary:
    """内置 7 个模板组成的模板库"""
    return TemplateLibrary(BUILTIN_TEMPLATES)
