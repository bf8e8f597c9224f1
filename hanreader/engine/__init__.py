from .config import (
    EngineConfig,
    DictEntry,
    AnnotatedWord,
    TextSpan,
    PositionedText,
    WordData,
    RadicalComponent,
    RadicalDecomposition,
    ResultStatus,
)
from .core import ReaderEngine, find_word
from .cache import MemoCache, EngineCache
from .dictionary import (
    DictionaryIndex,
    DictionaryLoadError,
    get_dict_index,
    load_entries,
    parse_cedict_line,
)
from .pinyin import PinyinUtils, render_tone
from .segmenter import (
    SegmentationStrategy,
    GreedyMaxMatchSegmenter,
    SegmentResult,
    extract_chinese_characters,
)
from .annotator import WordAnnotator
from .positions import PositionMapper
from .radicals import RadicalDecomposer
from .logging import setup_logging, get_logger, get_api_logger, get_engine_logger


def create_engine(config: EngineConfig = None, entries=None) -> ReaderEngine:
    """
    创建阅读引擎

    Args:
        config: 引擎配置（默认从环境变量读取）
        entries: 词典条目（可选，默认从 config.dict_path 加载）

    Returns:
        ReaderEngine 实例
    """
    return ReaderEngine(config or EngineConfig.from_env(), entries)


__all__ = [
    # 引擎
    'ReaderEngine',
    'create_engine',
    'EngineConfig',
    'find_word',
    # 数据
    'DictEntry',
    'AnnotatedWord',
    'TextSpan',
    'PositionedText',
    'WordData',
    'RadicalComponent',
    'RadicalDecomposition',
    'ResultStatus',
    # 缓存
    'MemoCache',
    'EngineCache',
    # 词典
    'DictionaryIndex',
    'DictionaryLoadError',
    'get_dict_index',
    'load_entries',
    'parse_cedict_line',
    # 拼音
    'PinyinUtils',
    'render_tone',
    # 分词
    'SegmentationStrategy',
    'GreedyMaxMatchSegmenter',
    'SegmentResult',
    'extract_chinese_characters',
    # 注音 / 位置 / 部件
    'WordAnnotator',
    'PositionMapper',
    'RadicalDecomposer',
    # 日志
    'setup_logging',
    'get_logger',
    'get_api_logger',
    'get_engine_logger',
]
