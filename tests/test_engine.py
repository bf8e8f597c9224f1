"""
引擎主入口测试
"""
import threading

import orjson
import pytest

from hanreader import create_engine, find_word
from hanreader.engine import EngineConfig, ReaderEngine, ResultStatus, SegmentationStrategy, TextSpan


class TestReaderEngine:
    """引擎基础测试"""

    def test_create_engine(self, entries):
        engine = create_engine(EngineConfig(), entries)
        assert isinstance(engine, ReaderEngine)
        assert len(engine.index) == len(entries)

    def test_lookup(self, engine):
        assert engine.lookup('中國')[0].simplified == '中国'
        assert engine.lookup('火') == []

    def test_segment_modes(self, engine):
        text = '北京人，北京！'
        assert engine.segment_sequence(text) == ['北京', '人', '北京']
        assert engine.segment(text) == ['北京', '人']

    def test_greedy_example(self, engine):
        assert engine.segment_sequence('北京') == ['北京']

    def test_segment_result_status(self, engine):
        assert engine.segment_sequence_result('北京').status == ResultStatus.OK

    def test_segment_sequence_returns_copy(self, engine):
        engine.segment_sequence('北京').append('x')
        assert engine.segment_sequence('北京') == ['北京']

    def test_annotate_sequence_returns_copy(self, engine):
        engine.annotate_sequence('你好').pop()
        words = engine.annotate_sequence('你好')
        assert [w.word for w in words] == ['你好']

        words[0].pinyin = 'x'
        assert engine.annotate_sequence('你好')[0].pinyin == 'nǐ hǎo'

    def test_annotate_with_positions_returns_copy(self, engine):
        text = 'Hi 你好北京'
        first = engine.annotate_with_positions(text)
        first.words.clear()
        first.gaps.append(None)

        second = engine.annotate_with_positions(text)
        assert [w.word for w in second.words] == ['你好', '北京']
        assert second.gaps == [TextSpan('Hi ', 0, 3)]

        second.words[0].start_index = 99
        assert engine.annotate_with_positions(text).words[0].start_index == 3
        assert engine.cache.positions.hits == 2

    def test_annotate(self, engine):
        data = engine.annotate('中国人')
        assert data.pinyin == 'Zhōng guó rén'
        assert data.english == 'Chinese person'
        assert engine.get_pinyin('人') == 'rén'

    def test_annotate_sequence(self, engine):
        words = engine.annotate_sequence('你好你好')
        assert [w.word for w in words] == ['你好', '你好']
        assert all(w.start_index is None for w in words)
        assert words[0].english == 'hello'

    def test_annotate_sequence_malformed(self, engine):
        assert engine.annotate_sequence('') == []
        assert engine.annotate_sequence(None) == []

    def test_vocabulary(self, engine):
        words = engine.vocabulary('我爱北京，北京有中国人。')
        assert [w.word for w in words] == ['北京', '中国人']
        assert words[0].radicals is None

    def test_vocabulary_explicit_level_zero(self, engine, radical_source):
        words = engine.vocabulary('你好', include_radicals=True, radical_level=0)
        assert words[0].radicals == []
        assert radical_source.calls == 0

    def test_vocabulary_default_level(self, engine):
        words = engine.vocabulary('你好', include_radicals=True)
        assert words[0].radicals[0].level == 1

    def test_vocabulary_with_radicals(self, engine):
        words = engine.vocabulary('你好', include_radicals=True)
        radicals = words[0].radicals
        # 你 无拆分数据，被跳过
        assert [r.character for r in radicals] == ['好']
        assert radicals[0].components[0].radical == '女'

    def test_find_word(self, engine):
        words = engine.vocabulary('北京人')
        assert find_word('人', words).english == 'person; people'
        assert find_word('火', words) is None

    def test_decompose_radicals_cached(self, engine, radical_source):
        first = engine.decompose_radicals('好', 2)
        second = engine.decompose_radicals('好', 2)
        assert first is second
        assert first.level == 2
        assert radical_source.calls == 1

    def test_decompose_radicals_failure_not_cached(self, engine, radical_source):
        assert engine.decompose_radicals('一') is None
        assert engine.decompose_radicals('一') is None
        assert radical_source.calls == 2
        assert engine.decompose_radicals('好好') is None

    def test_custom_strategy(self, entries):
        class CharStrategy(SegmentationStrategy):
            def split_run(self, run):
                return list(run)

        engine = ReaderEngine(entries=entries, segmenter=CharStrategy())
        assert engine.segment_sequence('北京') == ['北', '京']
        assert engine.annotate_with_positions('北京').words[1].english == 'capital'

    def test_positions_failure_keeps_text(self, entries):
        class BrokenStrategy(SegmentationStrategy):
            def split_run(self, run):
                return list(run)

            def segment_sequence_result(self, text):
                raise RuntimeError('boom')

        engine = ReaderEngine(entries=entries, segmenter=BrokenStrategy())
        text = '你好，北京'
        result = engine.annotate_with_positions(text)
        assert result.status == ResultStatus.FALLBACK
        assert result.words == []
        assert result.gaps == [TextSpan(text, 0, len(text))]
        assert result.reconstruct() == text

    def test_positions_status_ok(self, engine):
        assert engine.annotate_with_positions('你好').status == ResultStatus.OK

    def test_stats(self, engine):
        engine.segment_sequence('北京')
        engine.segment_sequence('北京')
        stats = engine.get_stats()
        assert stats['total_segmentations'] == 1
        assert stats['caches']['segments']['hits'] == 1
        assert stats['dictionary']['entries'] > 0

    def test_stats_concurrent(self, engine):
        texts = [f'北京{i}' for i in range(200)]

        def worker(chunk):
            for text in chunk:
                engine.segment_sequence(text)

        threads = [threading.Thread(target=worker, args=(texts[i::4],)) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert engine.get_stats()['total_segmentations'] == 200


class TestCacheScoping:
    """缓存清理范围"""

    def test_clear_content_keeps_word_cache(self, engine):
        engine.annotate('北京')
        hits = engine.cache.words.hits
        misses = engine.cache.words.misses

        engine.clear_content_caches()
        engine.annotate('北京')

        assert engine.cache.words.hits == hits + 1
        assert engine.cache.words.misses == misses

    def test_clear_content_recomputes_positions(self, engine):
        text = '你好，北京'
        first = engine.annotate_with_positions(text)
        assert engine.annotate_with_positions(text) == first
        assert engine.cache.positions.hits == 1

        engine.clear_content_caches()
        again = engine.annotate_with_positions(text)
        assert engine.cache.positions.misses == 2
        assert again == first

    def test_clear_all(self, engine):
        engine.annotate_with_positions('你好')
        engine.decompose_radicals('好')
        engine.clear_all_caches()
        assert all(v['size'] == 0 for v in engine.get_stats()['caches'].values())


class TestEngineConfig:
    """配置测试"""

    def test_default_config(self):
        config = EngineConfig()
        assert config.max_word_len == 4
        assert config.min_word_len == 2
        assert config.dict_path is None

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv('HANREADER_DICT_PATH', '/tmp/cedict.json')
        monkeypatch.setenv('HANREADER_LOG_LEVEL', 'debug')
        config = EngineConfig.from_env()
        assert config.dict_path == '/tmp/cedict.json'
        assert config.log_level == 'DEBUG'

    def test_validate(self):
        with pytest.raises(ValueError):
            EngineConfig(max_word_len=1).validate()
        with pytest.raises(ValueError):
            EngineConfig(default_radical_level=5).validate()

    def test_load_from_path(self, tmp_path):
        path = tmp_path / 'cedict.json'
        path.write_bytes(orjson.dumps([
            {'simplified': '北京', 'traditional': '北京', 'pinyin': 'Bei3 jing1', 'english': ['Beijing']},
        ]))
        engine = ReaderEngine(EngineConfig(dict_path=str(path)))
        assert engine.segment_sequence('北京') == ['北京']

    def test_bad_dict_path_degrades(self, tmp_path):
        engine = ReaderEngine(EngineConfig(dict_path=str(tmp_path / 'missing.json')))
        assert len(engine.index) == 0
        assert engine.segment_sequence('北京') == ['北', '京']
        assert engine.annotate('北').english is None
