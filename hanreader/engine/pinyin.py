"""
拼音工具模块

数字声调 (ni3) → 声调符号 (nǐ)
"""

import re
from typing import Optional, Tuple


# 声调表：1-4 声为长音符/锐音符/抑扬符/钝音符，5 为轻声（不标调）
TONE_TABLE = {
    'a': ('ā', 'á', 'ǎ', 'à', 'a'),
    'o': ('ō', 'ó', 'ǒ', 'ò', 'o'),
    'e': ('ē', 'é', 'ě', 'è', 'e'),
    'i': ('ī', 'í', 'ǐ', 'ì', 'i'),
    'u': ('ū', 'ú', 'ǔ', 'ù', 'u'),
    'ü': ('ǖ', 'ǘ', 'ǚ', 'ǜ', 'ü'),
    'v': ('ǖ', 'ǘ', 'ǚ', 'ǜ', 'ü'),
}

SYLLABLE_RE = re.compile(r'([a-zü]*)([1-5])', re.IGNORECASE)


class PinyinUtils:
    """拼音工具类"""

    @staticmethod
    def find_tone_vowel(syllable: str) -> Optional[Tuple[int, str]]:
        """
        找出需要标调的元音

        优先级：a > o > e > iu(标 u) > ui(标 i) > i > u > ü/v

        Returns:
            (下标, 元音) 或 None
        """
        lower = syllable.lower()
        for vowel in ('a', 'o', 'e'):
            if vowel in lower:
                return lower.index(vowel), vowel
        if 'iu' in lower:
            return lower.index('u'), 'u'
        if 'ui' in lower:
            return lower.index('i'), 'i'
        for vowel in ('i', 'u', 'ü', 'v'):
            if vowel in lower:
                return lower.index(vowel), vowel
        return None

    @staticmethod
    def mark_syllable(syllable: str, tone: int) -> Optional[str]:
        """给单个无调音节加声调符号，无可标元音时返回 None"""
        found = PinyinUtils.find_tone_vowel(syllable)
        if found is None:
            return None
        index, vowel = found
        marked = TONE_TABLE[vowel][tone - 1]
        if syllable[index].isupper():
            marked = marked.upper()
        return syllable[:index] + marked + syllable[index + 1:]

    @staticmethod
    def render_tone(pinyin: str) -> str:
        """
        数字声调转声调符号

        >>> PinyinUtils.render_tone('zhong1guo2')
        'zhōngguó'

        无法识别的音节原样返回（保留数字）。
        """
        if not pinyin:
            return ''
        # CC-CEDICT 用 u: 表示 ü
        pinyin = pinyin.replace('u:', 'ü').replace('U:', 'Ü')

        def replace(match: re.Match) -> str:
            marked = PinyinUtils.mark_syllable(match.group(1), int(match.group(2)))
            return match.group(0) if marked is None else marked

        return SYLLABLE_RE.sub(replace, pinyin)


def render_tone(pinyin: str) -> str:
    return PinyinUtils.render_tone(pinyin)
