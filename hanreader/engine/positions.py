"""
位置映射模块

将切分序列对齐回原文，输出带起止下标的词和它们之间的非中文片段。
"""

from typing import Callable, List

from .config import AnnotatedWord, PositionedText, TextSpan, WordData
from .segmenter import has_chinese


class PositionMapper:
    """切分结果与原文的位置对齐"""

    def __init__(
        self,
        segment_sequence: Callable[[str], List[str]],
        annotate: Callable[[str], WordData],
    ):
        self.segment_sequence = segment_sequence
        self.annotate = annotate

    def map(self, text: str) -> PositionedText:
        """
        游标向前查找每个词在原文中的下一次出现，保证下标单调且不重叠。

        分词器本身就是对同一文本的单遍左到右扫描，所以词序与原文顺序一致。
        """
        if not isinstance(text, str) or not text:
            return PositionedText()
        if not has_chinese(text):
            return PositionedText([], [TextSpan(text, 0, len(text))])

        result = PositionedText()
        cursor = 0
        for token in self.segment_sequence(text):
            index = text.find(token, cursor)
            if index == -1:
                continue
            if index > cursor:
                result.gaps.append(TextSpan(text[cursor:index], cursor, index))

            data = self.annotate(token)
            end = index + len(token)
            result.words.append(AnnotatedWord(
                word=token,
                pinyin=data.pinyin,
                english=data.english,
                start_index=index,
                end_index=end,
            ))
            cursor = end

        if cursor < len(text):
            result.gaps.append(TextSpan(text[cursor:], cursor, len(text)))
        return result
