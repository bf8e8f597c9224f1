"""
词典模块

- 从 CC-CEDICT（JSON 数组或原始文本）加载条目
- 按简体/繁体建立查询索引
"""

import gzip
import re
import threading
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

import orjson

from .config import DictEntry
from .logging import get_engine_logger, log_execution_time

logger = get_engine_logger()

# 繁体 简体 [pin1 yin1] /释义1/释义2/
CEDICT_RE = re.compile(r'^(\S+)\s+(\S+)\s+\[([^\]]*)\]\s*/(.*)/\s*$')


class DictionaryLoadError(Exception):
    """词典文件无法读取或格式不支持"""


def parse_cedict_line(line: str) -> Optional[DictEntry]:
    """解析一行 CC-CEDICT 文本，注释或格式不符时返回 None"""
    line = line.strip()
    if not line or line.startswith('#'):
        return None
    match = CEDICT_RE.match(line)
    if not match:
        return None
    traditional, simplified, pinyin, senses = match.groups()
    english = tuple(s for s in senses.split('/') if s)
    return DictEntry(simplified, traditional, pinyin.strip(), english)


def entry_from_dict(item: dict) -> Optional[DictEntry]:
    """JSON 对象 → DictEntry，兼容 english / definitions 两种字段名"""
    if not isinstance(item, dict):
        return None
    simplified = item.get('simplified')
    if not isinstance(simplified, str) or not simplified:
        return None
    traditional = item.get('traditional')
    if not isinstance(traditional, str) or not traditional:
        traditional = simplified
    pinyin = item.get('pinyin')
    glosses = item.get('english', item.get('definitions', []))
    if isinstance(glosses, str):
        glosses = [glosses]
    if not isinstance(glosses, list):
        glosses = []
    return DictEntry(
        simplified=simplified,
        traditional=traditional,
        pinyin=pinyin if isinstance(pinyin, str) else '',
        english=tuple(g for g in glosses if isinstance(g, str)),
    )


def _open_text(path: Path):
    if path.suffix == '.gz':
        return gzip.open(path, 'rt', encoding='utf-8')
    return open(path, 'r', encoding='utf-8')


@log_execution_time(logger)
def load_entries(path: Union[str, Path]) -> List[DictEntry]:
    """
    加载词典文件

    支持：
        *.json          cedict-json 风格的条目数组
        *.u8 / *.txt    CC-CEDICT 原始文本（可 .gz 压缩）

    Raises:
        DictionaryLoadError: 文件不存在、无法解析或格式不支持
    """
    path = Path(path)
    if not path.exists():
        raise DictionaryLoadError(f"词典文件不存在: {path}")

    suffixes = [s.lower() for s in path.suffixes]
    try:
        if '.json' in suffixes:
            if suffixes[-1] == '.gz':
                with gzip.open(path, 'rb') as f:
                    raw = orjson.loads(f.read())
            else:
                raw = orjson.loads(path.read_bytes())
            if not isinstance(raw, list):
                raise DictionaryLoadError(f"JSON 词典应为条目数组: {path}")
            entries = [e for e in (entry_from_dict(item) for item in raw) if e is not None]
        elif any(s in suffixes for s in ('.u8', '.txt', '.cedict')):
            with _open_text(path) as f:
                entries = [e for e in (parse_cedict_line(line) for line in f) if e is not None]
        else:
            raise DictionaryLoadError(f"不支持的词典格式: {path}")
    except (OSError, UnicodeDecodeError, orjson.JSONDecodeError) as e:
        raise DictionaryLoadError(f"词典读取失败: {path}: {e}") from e

    logger.info(f"✓ 词典加载成功: {path.name}, {len(entries):,} 条")
    return entries


class DictionaryIndex:
    """
    词典索引

    首次查询时建立 简体→条目 / 繁体→条目 两张表（同形词全部保留），之后只读。
    """

    def __init__(self, entries: Optional[Iterable] = None):
        self._entries = list(entries or [])
        self._simplified: Dict[str, List[DictEntry]] = {}
        self._traditional: Dict[str, List[DictEntry]] = {}
        self._built = False
        self._skipped = 0
        self._lock = threading.Lock()

    def _ensure_built(self) -> None:
        if self._built:
            return
        with self._lock:
            if self._built:
                return
            simplified = defaultdict(list)
            traditional = defaultdict(list)
            skipped = 0
            for entry in self._entries:
                if isinstance(entry, dict):
                    entry = entry_from_dict(entry)
                if not isinstance(entry, DictEntry) or not isinstance(entry.simplified, str) \
                        or not isinstance(entry.traditional, str) or not entry.simplified:
                    skipped += 1
                    continue
                simplified[entry.simplified].append(entry)
                if entry.traditional != entry.simplified:
                    traditional[entry.traditional].append(entry)
            self._simplified = dict(simplified)
            self._traditional = dict(traditional)
            self._skipped = skipped
            self._built = True
        if skipped:
            logger.warning(f"跳过 {skipped} 条格式错误的词典条目")
        logger.debug(f"词典索引建立完成: 简体 {len(self._simplified):,}, 繁体 {len(self._traditional):,}")

    def lookup(self, word: str) -> List[DictEntry]:
        """查询词条：简体匹配在前，繁体匹配在后；未命中返回空列表"""
        if not isinstance(word, str) or not word:
            return []
        try:
            self._ensure_built()
            return [*self._simplified.get(word, ()), *self._traditional.get(word, ())]
        except Exception as e:
            logger.error(f"词典查询失败: '{word}', 错误: {e}", exc_info=True)
            return []

    def contains(self, word: str) -> bool:
        return bool(self.lookup(word))

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> Dict[str, int]:
        self._ensure_built()
        return {
            'entries': len(self._entries),
            'simplified_keys': len(self._simplified),
            'traditional_keys': len(self._traditional),
            'skipped': self._skipped,
        }


# 全局单例
_dict_index: Optional[DictionaryIndex] = None


def get_dict_index(dict_path: Optional[str] = None) -> DictionaryIndex:
    """获取词典索引单例（加载失败时返回空索引）"""
    global _dict_index
    if _dict_index is None:
        entries: List[DictEntry] = []
        if dict_path:
            try:
                entries = load_entries(dict_path)
            except DictionaryLoadError as e:
                logger.warning(f"⚠ {e}，使用空词典")
        _dict_index = DictionaryIndex(entries)
    return _dict_index
