"""
部件拆分模块

基于 hanzipy 的 HanziDecomposer：
    1 = 一级拆分（直接部件）
    2 = 部首级拆分
    3 = 笔画级图形部件
"""

from typing import Any, List, Optional

from .annotator import WordAnnotator
from .config import RadicalComponent, RadicalDecomposition
from .logging import get_engine_logger

logger = get_engine_logger()

NO_GLYPH = 'No glyph available'
VALID_LEVELS = (1, 2, 3)


def _create_source():
    from hanzipy.decomposer import HanziDecomposer
    return HanziDecomposer()


class RadicalDecomposer:
    """
    单字部件拆分，并为每个部件补充拼音与含义

    Args:
        annotator: 用于部件注音的 WordAnnotator
        source: 拆分数据源，需提供 decompose(char, level) 与 get_radical_meaning(radical)；
                默认首次使用时创建 hanzipy 的 HanziDecomposer
    """

    def __init__(self, annotator: WordAnnotator, source: Any = None):
        self.annotator = annotator
        self._source = source

    @property
    def source(self):
        if self._source is None:
            logger.info("正在加载 hanzipy 部件数据...")
            self._source = _create_source()
        return self._source

    def decompose(self, character: str, level: int = 1) -> Optional[RadicalDecomposition]:
        """拆分单个汉字；无可用结果或出错时返回 None"""
        if not isinstance(character, str) or len(character) != 1 or level not in VALID_LEVELS:
            return None
        try:
            raw = self.source.decompose(character, level)
            components = self._extract_components(raw)
            if not components:
                return None
            return RadicalDecomposition(
                character=character,
                components=[self._enrich(c) for c in components],
                level=level,
            )
        except Exception as e:
            logger.warning(f"部件拆分失败: '{character}' (level={level}), 错误: {e}")
            return None

    @staticmethod
    def _extract_components(raw: Any) -> List[str]:
        if not isinstance(raw, dict):
            return []
        components = raw.get('components') or []
        return [c for c in components if isinstance(c, str) and c and c != NO_GLYPH]

    def _enrich(self, radical: str) -> RadicalComponent:
        data = self.annotator.annotate(radical)
        meaning = self.source.get_radical_meaning(radical)
        if not isinstance(meaning, str) or not meaning:
            meaning = data.english
        return RadicalComponent(
            radical=radical,
            pinyin=data.pinyin or None,
            meaning=meaning or None,
        )
