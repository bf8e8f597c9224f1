"""
HanReader - 中文文本分词与注音引擎

基于 CC-CEDICT 词典的正向最大匹配分词、拼音声调标注与释义合并
"""

__version__ = "0.1.0"

from hanreader.engine import (
    ReaderEngine,
    create_engine,
    EngineConfig,
    find_word,
    DictEntry,
    AnnotatedWord,
    TextSpan,
    PositionedText,
    WordData,
    RadicalComponent,
    RadicalDecomposition,
    ResultStatus,
    DictionaryIndex,
    DictionaryLoadError,
    load_entries,
    render_tone,
    extract_chinese_characters,
)

__all__ = [
    "__version__",
    # 引擎
    "ReaderEngine",
    "create_engine",
    "EngineConfig",
    "find_word",
    # 数据
    "DictEntry",
    "AnnotatedWord",
    "TextSpan",
    "PositionedText",
    "WordData",
    "RadicalComponent",
    "RadicalDecomposition",
    "ResultStatus",
    # 词典
    "DictionaryIndex",
    "DictionaryLoadError",
    "load_entries",
    # 工具
    "render_tone",
    "extract_chinese_characters",
]
