"""
正向最大匹配分词测试
"""
from hanreader.engine import DictionaryIndex, GreedyMaxMatchSegmenter, ResultStatus
from hanreader.engine.segmenter import extract_chinese_characters, unique


def make_segmenter(entries):
    return GreedyMaxMatchSegmenter(DictionaryIndex(entries).lookup)


class TestGreedyMaxMatch:
    """切分规则"""

    def test_longest_match_wins(self, entries):
        seg = make_segmenter(entries)
        assert seg.segment_sequence('北京') == ['北京']
        assert seg.segment_sequence('中国人') == ['中国人']

    def test_single_char_fallback(self, entries):
        seg = make_segmenter(entries)
        assert seg.segment_sequence('我爱北京') == ['我', '爱', '北京']

    def test_greedy_does_not_backtrack(self, entries):
        """研究生|命 而非 研究|生命"""
        seg = make_segmenter(entries)
        assert seg.segment_sequence('研究生命') == ['研究生', '命']

    def test_traditional_match(self, entries):
        seg = make_segmenter(entries)
        assert seg.segment_sequence('中國人') == ['中國人']

    def test_punctuation_separates_runs(self, entries):
        seg = make_segmenter(entries)
        assert seg.segment_sequence('北，京') == ['北', '京']
        assert seg.segment_sequence('“北”京') == ['北', '京']
        assert seg.segment_sequence('北 京') == ['北', '京']

    def test_non_chinese_ignored(self, entries):
        seg = make_segmenter(entries)
        assert seg.segment_sequence('I love 北京 2024!') == ['北京']
        assert seg.segment_sequence('Hello') == []

    def test_tokens_at_most_four_chars(self):
        entries = [{'simplified': '一二三四五', 'traditional': '一二三四五', 'pinyin': '', 'english': []}]
        seg = make_segmenter(entries)
        assert seg.segment_sequence('一二三四五') == ['一', '二', '三', '四', '五']

    def test_sequence_keeps_duplicates(self, entries):
        seg = make_segmenter(entries)
        assert seg.segment_sequence('北京北京') == ['北京', '北京']

    def test_unique_mode(self, entries):
        seg = make_segmenter(entries)
        assert seg.segment('北京人北京') == ['北京', '人']

    def test_deterministic(self, entries):
        seg = make_segmenter(entries)
        text = '你好，中国人！研究生命。'
        assert seg.segment_sequence(text) == seg.segment_sequence(text)

    def test_malformed_input(self, entries):
        seg = make_segmenter(entries)
        assert seg.segment_sequence('') == []
        assert seg.segment_sequence(None) == []
        assert seg.segment(123) == []

    def test_custom_max_len(self, entries):
        seg = GreedyMaxMatchSegmenter(DictionaryIndex(entries).lookup, max_word_len=2)
        assert seg.segment_sequence('中国人') == ['中国', '人']


class TestFallback:
    """内部错误降级为逐字切分"""

    @staticmethod
    def broken_lookup(word):
        raise RuntimeError('boom')

    def test_sequence_fallback(self):
        seg = GreedyMaxMatchSegmenter(self.broken_lookup)
        result = seg.segment_sequence_result('好好学习')
        assert result.status == ResultStatus.FALLBACK
        assert result.fallback
        assert result.tokens == ['好', '好', '学', '习']
        assert 'boom' in result.error

    def test_unique_fallback_deduplicated(self):
        seg = GreedyMaxMatchSegmenter(self.broken_lookup)
        assert seg.segment('好好学习') == ['好', '学', '习']

    def test_ok_status(self, entries):
        result = make_segmenter(entries).segment_sequence_result('北京')
        assert result.status == ResultStatus.OK
        assert str(result) == '北京'


class TestHelpers:

    def test_unique_preserves_order(self):
        assert unique(['b', 'a', 'b', 'c', 'a']) == ['b', 'a', 'c']

    def test_extract_chinese_characters(self):
        assert extract_chinese_characters('Hi 你好, 北京!') == '你好北京'
        assert extract_chinese_characters('abc') == ''
        assert extract_chinese_characters(None) == ''
