import os
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union


class ResultStatus(str, Enum):
    """结果状态：区分正常命中、未命中与降级兜底"""
    OK = "ok"
    MISS = "miss"
    FALLBACK = "fallback"


@dataclass
class EngineConfig:
    """引擎配置"""
    dict_path: Optional[str] = None
    max_word_len: int = 4       # 最长匹配词长
    min_word_len: int = 2       # 小于该长度直接按单字切分
    default_radical_level: int = 1
    log_level: str = "INFO"
    log_to_file: bool = False

    @classmethod
    def from_env(cls) -> 'EngineConfig':
        """从环境变量创建配置实例"""
        return cls(
            dict_path=os.getenv('HANREADER_DICT_PATH') or None,
            log_level=os.getenv('HANREADER_LOG_LEVEL', 'INFO').upper(),
            log_to_file=os.getenv('HANREADER_LOG_TO_FILE', 'false').lower() == 'true',
        )

    def validate(self) -> None:
        """验证配置的有效性"""
        if self.min_word_len < 2:
            raise ValueError(f"最短词长必须不小于2: {self.min_word_len}")
        if self.max_word_len < self.min_word_len:
            raise ValueError(f"最长词长不能小于最短词长: {self.max_word_len} < {self.min_word_len}")
        if self.default_radical_level not in (1, 2, 3):
            raise ValueError(f"无效的部件拆分层级: {self.default_radical_level}")


@dataclass(frozen=True)
class DictEntry:
    """词典条目（CC-CEDICT 结构）"""
    simplified: str
    traditional: str
    pinyin: str                 # 数字声调，音节以空格分隔
    english: Tuple[str, ...] = ()


@dataclass
class RadicalComponent:
    """单个部件"""
    radical: str
    pinyin: Optional[str] = None
    meaning: Optional[str] = None


@dataclass
class RadicalDecomposition:
    """单字的部件拆分"""
    character: str
    components: List[RadicalComponent] = field(default_factory=list)
    level: int = 1


@dataclass
class WordData:
    """单词注音与释义"""
    pinyin: str = ""
    english: Optional[str] = None
    status: ResultStatus = ResultStatus.MISS


@dataclass
class AnnotatedWord:
    """带注音的词（位置信息仅在按位置处理时存在）"""
    word: str
    pinyin: str = ""
    english: Optional[str] = None
    start_index: Optional[int] = None
    end_index: Optional[int] = None
    radicals: Optional[List[RadicalDecomposition]] = None


@dataclass
class TextSpan:
    """两个词之间的非中文片段"""
    text: str
    start_index: int
    end_index: int


@dataclass
class PositionedText:
    """按位置处理的输出：词与间隙"""
    words: List[AnnotatedWord] = field(default_factory=list)
    gaps: List[TextSpan] = field(default_factory=list)
    status: ResultStatus = ResultStatus.OK

    def copy(self) -> 'PositionedText':
        """复制列表与其中的词、间隙，缓存中的对象不对外暴露"""
        return PositionedText(
            [replace(w) for w in self.words],
            [replace(g) for g in self.gaps],
            self.status,
        )

    def spans(self) -> Iterator[Union[AnnotatedWord, TextSpan]]:
        """按起始位置依次产出词与间隙"""
        merged = [*self.words, *self.gaps]
        merged.sort(key=lambda s: s.start_index)
        return iter(merged)

    def reconstruct(self) -> str:
        """拼接所有片段，应与原文完全一致"""
        return ''.join(s.word if isinstance(s, AnnotatedWord) else s.text for s in self.spans())


DEFAULT_CONFIG = EngineConfig()
