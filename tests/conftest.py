"""
测试公共夹具：小型内存词典与假的部件拆分数据源
"""
import sys
import os

import pytest

# 添加项目根目录到路径
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from hanreader.engine import DictEntry, EngineConfig, ReaderEngine


ENTRIES = [
    DictEntry('北京', '北京', 'Bei3 jing1', ('Beijing',)),
    DictEntry('北', '北', 'bei3', ('north',)),
    DictEntry('京', '京', 'jing1', ('capital',)),
    DictEntry('中国', '中國', 'Zhong1 guo2', ('China',)),
    DictEntry('中国人', '中國人', 'Zhong1 guo2 ren2', ('Chinese person',)),
    DictEntry('中', '中', 'zhong1', ('middle', 'center')),
    DictEntry('国', '國', 'guo2', ('country',)),
    DictEntry('人', '人', 'ren2', ('person', 'people')),
    DictEntry('你好', '你好', 'ni3 hao3', ('hello',)),
    DictEntry('你', '你', 'ni3', ('you',)),
    DictEntry('好', '好', 'hao3', ('good', 'well')),
    DictEntry('好', '好', 'hao4', ('to be fond of',)),
    DictEntry('学生', '學生', 'xue2 sheng5', ('student',)),
    DictEntry('研究', '研究', 'yan2 jiu1', ('research',)),
    DictEntry('研究生', '研究生', 'yan2 jiu1 sheng1', ('graduate student',)),
    DictEntry('生命', '生命', 'sheng1 ming4', ('life',)),
    DictEntry('命', '命', 'ming4', ('life', 'fate')),
    DictEntry('绿', '綠', 'lu:4', ('green',)),
    DictEntry('女', '女', 'nv3', ('woman', 'female')),
    DictEntry('子', '子', 'zi3', ('son', 'child')),
    DictEntry('日', '日', 'ri4', ('sun', 'day')),
    DictEntry('月', '月', 'yue4', ('moon', 'month')),
]


class FakeRadicalSource:
    """模拟 hanzipy HanziDecomposer 的接口"""

    DATA = {
        ('好', 1): ['女', '子'],
        ('好', 2): ['女', '子'],
        ('明', 1): ['日', '月'],
        ('一', 1): ['No glyph available'],
    }
    MEANINGS = {'女': 'woman radical', '子': 'child radical'}

    def __init__(self):
        self.calls = 0

    def decompose(self, character, level):
        self.calls += 1
        return {
            'character': character,
            'components': self.DATA.get((character, level), ['No glyph available']),
        }

    def get_radical_meaning(self, radical):
        return self.MEANINGS.get(radical)


@pytest.fixture
def entries():
    return list(ENTRIES)


@pytest.fixture
def radical_source():
    return FakeRadicalSource()


@pytest.fixture
def engine(entries, radical_source):
    return ReaderEngine(EngineConfig(), entries=entries, radical_source=radical_source)
