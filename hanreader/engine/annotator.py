from typing import Callable, List, Optional

from .cache import MemoCache
from .config import DictEntry, ResultStatus, WordData
from .pinyin import render_tone
from .logging import get_engine_logger

logger = get_engine_logger()


def merge_entries(entries: List[DictEntry]) -> WordData:
    """
    合并同形词条

    拼音取第一个条目；释义合并所有条目：条目内以 "; " 连接，条目间以空格连接。
    """
    if not entries:
        return WordData('', None, ResultStatus.MISS)
    english = ' '.join('; '.join(entry.english) for entry in entries)
    return WordData(render_tone(entries[0].pinyin), english, ResultStatus.OK)


class WordAnnotator:
    """单词注音器"""

    def __init__(self, lookup: Callable[[str], List[DictEntry]], cache: Optional[MemoCache] = None):
        self.lookup = lookup
        self.cache = cache if cache is not None else MemoCache('words')

    def annotate(self, word: str) -> WordData:
        """查询单词的注音与释义，未命中时拼音为空、释义为 None"""
        if not isinstance(word, str) or not word:
            return WordData()
        return self.cache.get_or_compute(word, lambda: self._annotate(word))

    def _annotate(self, word: str) -> WordData:
        try:
            return merge_entries(self.lookup(word))
        except Exception as e:
            logger.error(f"注音失败: '{word}', 错误: {e}", exc_info=True)
            return WordData('', None, ResultStatus.FALLBACK)

    def get_pinyin(self, word: str) -> str:
        return self.annotate(word).pinyin
