"""
中文分词模块

功能：
1. 提取连续的汉字片段（U+4E00–U+9FFF）
2. 片段内按词典做正向最大匹配（4 → 3 → 2 字，否则单字）
3. 提供保序（含重复）与去重两种输出

正向最大匹配是单遍贪心：不回溯，也不求全局最优切分，
长词在局部总是优先。需要更好的切分时，实现新的 SegmentationStrategy 即可。
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from .config import ResultStatus
from .logging import get_engine_logger

logger = get_engine_logger()

# 标点、引号、括号统一替换为分隔符，防止连接两侧的汉字片段
PUNCTUATION = '"“”\'‘’《》「」【】『』()（）[]{}、，。；：！？'
PUNCTUATION_RE = re.compile('[' + re.escape(PUNCTUATION) + ']+')
CJK_RUN_RE = re.compile(r'[\u4e00-\u9fff]+')
CJK_CHAR_RE = re.compile(r'[\u4e00-\u9fff]')


@dataclass
class SegmentResult:
    """切分结果"""
    tokens: List[str] = field(default_factory=list)
    status: ResultStatus = ResultStatus.OK
    error: Optional[str] = None

    @property
    def fallback(self) -> bool:
        return self.status == ResultStatus.FALLBACK

    def __str__(self):
        return " ".join(self.tokens)


def unique(tokens: Sequence[str]) -> List[str]:
    """去重并保留首次出现的顺序"""
    return list(dict.fromkeys(tokens))


def extract_chinese_characters(text: str) -> str:
    """提取文本中的全部汉字"""
    if not isinstance(text, str):
        return ''
    return ''.join(CJK_CHAR_RE.findall(text))


def has_chinese(text: str) -> bool:
    return isinstance(text, str) and CJK_CHAR_RE.search(text) is not None


class SegmentationStrategy(ABC):
    """分词策略抽象基类"""

    @abstractmethod
    def split_run(self, run: str) -> List[str]:
        """切分单个连续汉字片段"""

    def segment_sequence_result(self, text: str) -> SegmentResult:
        """保序切分（保留重复），出错时降级为逐字切分"""
        if not isinstance(text, str) or not text:
            return SegmentResult()
        try:
            separated = PUNCTUATION_RE.sub(' ', text)
            tokens: List[str] = []
            for run in CJK_RUN_RE.findall(separated):
                tokens.extend(self.split_run(run))
            return SegmentResult(tokens)
        except Exception as e:
            logger.error(f"分词失败，降级为逐字切分: {e}", exc_info=True)
            return SegmentResult(CJK_CHAR_RE.findall(text), ResultStatus.FALLBACK, str(e))

    def segment_sequence(self, text: str) -> List[str]:
        return self.segment_sequence_result(text).tokens

    def segment(self, text: str) -> List[str]:
        """去重切分（用于词汇表）"""
        return unique(self.segment_sequence(text))


class GreedyMaxMatchSegmenter(SegmentationStrategy):
    """正向最大匹配分词器"""

    def __init__(
        self,
        lookup: Callable[[str], list],
        max_word_len: int = 4,
        min_word_len: int = 2,
    ):
        """
        Args:
            lookup: 词典查询函数，返回非空列表即视为命中
            max_word_len: 最长尝试词长
            min_word_len: 最短尝试词长（更短则直接单字）
        """
        self.lookup = lookup
        self.max_word_len = max_word_len
        self.min_word_len = min_word_len

    def split_run(self, run: str) -> List[str]:
        tokens = []
        i = 0
        n = len(run)
        while i < n:
            step = 1
            for length in range(min(self.max_word_len, n - i), self.min_word_len - 1, -1):
                if self.lookup(run[i:i + length]):
                    step = length
                    break
            tokens.append(run[i:i + step])
            i += step
        return tokens
