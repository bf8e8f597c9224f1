import threading
import time
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional

from .annotator import WordAnnotator
from .cache import EngineCache
from .config import (
    AnnotatedWord,
    DictEntry,
    EngineConfig,
    PositionedText,
    RadicalDecomposition,
    ResultStatus,
    TextSpan,
    WordData,
)
from .dictionary import DictionaryIndex, DictionaryLoadError, load_entries
from .logging import get_engine_logger, setup_logging
from .positions import PositionMapper
from .radicals import RadicalDecomposer
from .segmenter import (
    GreedyMaxMatchSegmenter,
    SegmentationStrategy,
    SegmentResult,
    unique,
)

logger = get_engine_logger()


class ReaderEngine:
    """
    中文阅读引擎

    词典索引 → 分词 → 位置对齐 → 注音，各阶段结果按需缓存。
    所有公开方法都不向调用方抛出异常，出错时返回降级结果并记录日志。
    """

    def __init__(
        self,
        config: EngineConfig = None,
        entries: Optional[Iterable] = None,
        radical_source: Any = None,
        segmenter: Optional[SegmentationStrategy] = None,
    ):
        """
        Args:
            config: 引擎配置
            entries: 词典条目；为 None 时从 config.dict_path 加载
            radical_source: 部件拆分数据源（默认 hanzipy）
            segmenter: 分词策略（默认正向最大匹配）
        """
        self.config = config or EngineConfig()
        self.config.validate()
        if self.config.log_to_file or self.config.log_level.upper() != 'INFO':
            setup_logging('hanreader.engine', level=self.config.log_level, log_to_file=self.config.log_to_file)

        self.cache = EngineCache()
        self.index = DictionaryIndex(self._load(entries))
        self.annotator = WordAnnotator(self.index.lookup, self.cache.words)
        self.segmenter = segmenter or GreedyMaxMatchSegmenter(
            self.index.lookup,
            max_word_len=self.config.max_word_len,
            min_word_len=self.config.min_word_len,
        )
        self.mapper = PositionMapper(self.segment_sequence, self.annotate)
        self.decomposer = RadicalDecomposer(self.annotator, radical_source)

        # 统计
        self.stats = {'total': 0, 'fallbacks': 0, 'total_ms': 0.0}
        self._stats_lock = threading.Lock()

    def _load(self, entries: Optional[Iterable]) -> List:
        if entries is not None:
            return list(entries)
        if not self.config.dict_path:
            logger.warning("未配置词典路径，使用空词典")
            return []
        try:
            return load_entries(self.config.dict_path)
        except DictionaryLoadError as e:
            logger.error(f"✗ {e}，使用空词典")
            return []

    # ===== 词典 =====

    def lookup(self, word: str) -> List[DictEntry]:
        return self.index.lookup(word)

    # ===== 分词 =====

    def segment_sequence_result(self, text: str) -> SegmentResult:
        """保序切分，附带状态（OK / FALLBACK）"""
        if not isinstance(text, str) or not text:
            return SegmentResult()
        return self.cache.segments.get_or_compute(text, lambda: self._segment(text))

    def _segment(self, text: str) -> SegmentResult:
        start = time.perf_counter()
        result = self.segmenter.segment_sequence_result(text)
        elapsed_ms = (time.perf_counter() - start) * 1000
        with self._stats_lock:
            self.stats['total'] += 1
            if result.fallback:
                self.stats['fallbacks'] += 1
            self.stats['total_ms'] += elapsed_ms
        return result

    def segment_sequence(self, text: str) -> List[str]:
        """保序切分（保留重复）"""
        return list(self.segment_sequence_result(text).tokens)

    def segment(self, text: str) -> List[str]:
        """去重切分"""
        return unique(self.segment_sequence_result(text).tokens)

    # ===== 注音 =====

    def annotate(self, word: str) -> WordData:
        return self.annotator.annotate(word)

    def get_pinyin(self, word: str) -> str:
        return self.annotator.get_pinyin(word)

    def annotate_sequence(self, text: str) -> List[AnnotatedWord]:
        """按切分顺序注音（保留重复，不含位置）"""
        if not isinstance(text, str) or not text:
            return []
        words = self.cache.sequences.get_or_compute(text, lambda: self._annotate_sequence(text))
        return [replace(w) for w in words]

    def _annotate_sequence(self, text: str) -> List[AnnotatedWord]:
        words = []
        for token in self.segment_sequence(text):
            data = self.annotate(token)
            words.append(AnnotatedWord(token, data.pinyin, data.english))
        return words

    def annotate_with_positions(self, text: str) -> PositionedText:
        """注音并返回每个词在原文中的位置，以及词之间的非中文片段"""
        if not isinstance(text, str) or not text:
            return PositionedText()
        return self.cache.positions.get_or_compute(text, lambda: self._map_positions(text)).copy()

    def _map_positions(self, text: str) -> PositionedText:
        try:
            return self.mapper.map(text)
        except Exception as e:
            logger.error(f"位置对齐失败: {e}", exc_info=True)
            # 整段原文作为一个间隙，保证片段仍能拼回原文
            return PositionedText([], [TextSpan(text, 0, len(text))], ResultStatus.FALLBACK)

    def vocabulary(
        self,
        text: str,
        include_radicals: bool = False,
        radical_level: Optional[int] = None,
    ) -> List[AnnotatedWord]:
        """
        生成词汇表：去重后只保留有拼音或释义的词

        Args:
            include_radicals: 是否为词中每个字附加部件拆分
            radical_level: 拆分层级，默认取配置值
        """
        level = self.config.default_radical_level if radical_level is None else radical_level
        words = []
        for token in self.segment(text):
            data = self.annotate(token)
            if not (data.pinyin or data.english):
                continue
            word = AnnotatedWord(token, data.pinyin, data.english)
            if include_radicals:
                radicals = [self.decompose_radicals(ch, level) for ch in token]
                word.radicals = [r for r in radicals if r is not None]
            words.append(word)
        return words

    # ===== 部件拆分 =====

    def decompose_radicals(self, character: str, level: int = 1) -> Optional[RadicalDecomposition]:
        if not isinstance(character, str) or len(character) != 1:
            return None
        key = (character, level)
        cached = self.cache.radicals.get(key)
        if cached is not None:
            return cached
        result = self.decomposer.decompose(character, level)
        # 失败结果不缓存，下次仍会重试
        if result is not None:
            result = self.cache.radicals.put(key, result)
        return result

    # ===== 缓存 =====

    def clear_all_caches(self) -> None:
        self.cache.clear_all()
        logger.debug("已清空全部缓存")

    def clear_content_caches(self) -> None:
        """切换文本时调用，保留单词缓存"""
        self.cache.clear_content()
        logger.debug("已清空文本缓存")

    def get_stats(self) -> Dict:
        """获取统计"""
        with self._stats_lock:
            stats = dict(self.stats)
        total = stats['total'] or 1
        return {
            'total_segmentations': stats['total'],
            'fallbacks': stats['fallbacks'],
            'avg_segment_ms': round(stats['total_ms'] / total, 3),
            'dictionary': self.index.stats(),
            'caches': self.cache.stats(),
        }


def find_word(word: str, words: List[AnnotatedWord]) -> Optional[AnnotatedWord]:
    """在词汇表中查找词"""
    return next((w for w in words if w.word == word), None)
