"""
Tokenizer / stopword filter

小寫、去除非文字字元、以空白切分，丟棄長度 <= 2 的字與 stopwords。
"""

import re
from typing import List

# 冠詞、介系詞、連接詞
STOPWORDS = frozenset([
    'the', 'a', 'an', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for', 'of',
    'with', 'by', 'from', 'up', 'about', 'into', 'through', 'during', 'before',
    'after', 'above', 'below', 'between', 'among',
])

MIN_TOKEN_LENGTH = 3

_NON_WORD = re.compile(r'[^\w\s]')


def normalize_words(text: str) -> List[str]:
    """
    正規化成字詞序列 (不過濾 stopwords)

    Args:
        text: 原始文字

    Returns:
        長度 >= 3 的小寫字詞
    """
    if not text:
        return []

    cleaned = _NON_WORD.sub(' ', text.lower())
    return [word for word in cleaned.split() if len(word) >= MIN_TOKEN_LENGTH]


def is_stopword(word: str) -> bool:
    return word in STOPWORDS


def tokenize(text: str) -> List[str]:
    """
    Content tokens (過濾 stopwords)

    空字串或只有空白時回傳空 list。
    """
    return [word for word in normalize_words(text) if not is_stopword(word)]
