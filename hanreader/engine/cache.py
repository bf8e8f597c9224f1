import threading
from typing import Any, Callable, Dict, Hashable, Optional


class MemoCache:
    """线程安全的记忆化缓存（不限容量）"""

    def __init__(self, name: str = ""):
        self.name = name
        self._data: Dict[Hashable, Any] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable) -> Optional[Any]:
        with self._lock:
            if key in self._data:
                self.hits += 1
                return self._data[key]
            self.misses += 1
            return None

    def put(self, key: Hashable, value: Any) -> Any:
        """写入缓存；已有值时保留先写入者并返回它"""
        with self._lock:
            return self._data.setdefault(key, value)

    def get_or_compute(self, key: Hashable, factory: Callable[[], Any]) -> Any:
        # 计算在锁外进行：并发时可能重复计算，但结果以先写入者为准
        with self._lock:
            if key in self._data:
                self.hits += 1
                return self._data[key]
            self.misses += 1
        return self.put(key, factory())

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0


class EngineCache:
    """
    引擎缓存集合

    - words: 单词注音（内容切换时保留）
    - radicals: 部件拆分（内容切换时保留）
    - segments: 文本 → 切分序列
    - sequences: 文本 → 注音序列
    - positions: 文本 → 带位置的注音结果
    """

    def __init__(self):
        self.words = MemoCache('words')
        self.radicals = MemoCache('radicals')
        self.segments = MemoCache('segments')
        self.sequences = MemoCache('sequences')
        self.positions = MemoCache('positions')

    def clear_all(self) -> None:
        """清空全部缓存"""
        for cache in self._all():
            cache.clear()

    def clear_content(self) -> None:
        """加载新文本时调用：只清空与文本相关的缓存，保留单词缓存"""
        self.segments.clear()
        self.sequences.clear()
        self.positions.clear()

    def stats(self) -> Dict[str, Dict[str, float]]:
        return {
            cache.name: {
                'size': len(cache),
                'hits': cache.hits,
                'misses': cache.misses,
                'hit_rate': round(cache.hit_rate, 3),
            }
            for cache in self._all()
        }

    def _all(self):
        return (self.words, self.radicals, self.segments, self.sequences, self.positions)
