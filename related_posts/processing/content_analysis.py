"""
Content Analysis

為每份文件建立 FeatureBundle：TF-IDF、key phrases、可讀性、情緒分數。
所有函式對空輸入回傳中性預設值，不拋出例外。
"""

from typing import Dict, Iterable, List, Optional, Set
from collections import Counter
import math
import re
import logging

from related_posts.config import AnalysisConfig
from related_posts.models import Document, FeatureBundle
from related_posts.processing.tokenize import tokenize, normalize_words, is_stopword

logger = logging.getLogger(__name__)


POSITIVE_WORDS = frozenset([
    'good', 'great', 'excellent', 'amazing', 'wonderful', 'fantastic', 'positive',
    'beneficial', 'effective', 'successful', 'profitable', 'valuable', 'important',
    'useful', 'helpful',
])

NEGATIVE_WORDS = frozenset([
    'bad', 'terrible', 'awful', 'horrible', 'negative', 'harmful', 'ineffective',
    'unsuccessful', 'loss', 'risk', 'difficult', 'challenging', 'problematic',
])

READING_LEVEL_MIN = 1.0
READING_LEVEL_MAX = 12.0

_SENTENCE_SPLIT = re.compile(r'[.!?]+')
_VOWELS = 'aeiouy'


def compute_tfidf(doc_tokens: List[str], corpus_token_sets: List[Set[str]]) -> Dict[str, float]:
    """
    計算 TF-IDF

    tf = 出現次數 / 文件 token 總數
    idf = ln(corpus 大小 / (含此 term 的文件數 + 1))

    Args:
        doc_tokens: 文件的 tokens
        corpus_token_sets: corpus 中每份文件的 token 集合

    Returns:
        {term: weight}，僅含文件本身出現過的 term
    """
    if not doc_tokens:
        return {}

    total = len(doc_tokens)
    corpus_size = len(corpus_token_sets)
    counts = Counter(doc_tokens)

    tfidf = {}
    for term, count in counts.items():
        tf = count / total
        docs_with_term = sum(1 for token_set in corpus_token_sets if term in token_set)
        # corpus 為空時 idf 無意義，weight 以 0 處理
        idf = math.log(corpus_size / (docs_with_term + 1)) if corpus_size > 0 else 0.0
        tfidf[term] = tf * idf

    return tfidf


def extract_key_phrases(text: str, top_n: int = 10) -> List[str]:
    """
    擷取 key phrases (bigram + trigram)

    n-gram 內任何一個字是 stopword 就不計入；
    依出現次數降序，同次數依第一次出現順序。

    Args:
        text: 原始文字
        top_n: 回傳數量

    Returns:
        Key phrases
    """
    if top_n <= 0:
        return []

    words = normalize_words(text)
    phrases: Dict[str, int] = {}

    for i in range(len(words) - 1):
        for size in (2, 3):
            gram = words[i:i + size]
            if len(gram) < size or any(is_stopword(w) for w in gram):
                continue
            phrase = ' '.join(gram)
            phrases[phrase] = phrases.get(phrase, 0) + 1

    # dict 保留插入順序 → 依 first-occurrence 做 tie-break
    order = {phrase: idx for idx, phrase in enumerate(phrases)}
    ranked = sorted(phrases, key=lambda p: (-phrases[p], order[p]))
    return ranked[:top_n]


def count_syllables(word: str) -> int:
    """母音群組 heuristic 計算音節數 (至少 1)"""
    word = word.lower()
    if len(word) <= 3:
        return 1

    count = 0
    previous_was_vowel = False
    for char in word:
        is_vowel = char in _VOWELS
        if is_vowel and not previous_was_vowel:
            count += 1
        previous_was_vowel = is_vowel

    # silent e
    if word.endswith('e'):
        count -= 1

    return max(1, count)


def reading_level(text: str) -> float:
    """
    Flesch-Kincaid grade level，限制在 1-12

    Args:
        text: 原始文字

    Returns:
        年級 (float)；沒有句子或字詞時回傳 1
    """
    if not text:
        return READING_LEVEL_MIN

    words = normalize_words(text)
    sentences = [s for s in _SENTENCE_SPLIT.split(text) if s.strip()]

    if not sentences or not words:
        return READING_LEVEL_MIN

    syllables = sum(count_syllables(w) for w in words)
    avg_words_per_sentence = len(words) / len(sentences)
    avg_syllables_per_word = syllables / len(words)

    grade = 0.39 * avg_words_per_sentence + 11.8 * avg_syllables_per_word - 15.59
    return max(READING_LEVEL_MIN, min(READING_LEVEL_MAX, grade))


def sentiment(text: str) -> float:
    """
    Lexicon sentiment，正規化到 -1 ~ 1

    每個正面字 +1、負面字 -1，再除以 max(1, tokens / 100)。
    """
    tokens = tokenize(text)
    if not tokens:
        return 0.0

    score = 0
    for token in tokens:
        if token in POSITIVE_WORDS:
            score += 1
        elif token in NEGATIVE_WORDS:
            score -= 1

    normalized = score / max(1.0, len(tokens) / 100)
    return max(-1.0, min(1.0, normalized))


class ContentAnalyzer:
    """批次分析 corpus，產生每份文件的 FeatureBundle"""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()

    def compute_tfidf(self, doc: Document, corpus_docs: Iterable[Document]) -> Dict[str, float]:
        corpus_token_sets = [set(tokenize(d.content_text())) for d in corpus_docs]
        return compute_tfidf(tokenize(doc.content_text()), corpus_token_sets)

    def analyze_document(
        self,
        doc: Document,
        corpus_token_sets: List[Set[str]]
    ) -> FeatureBundle:
        """
        建立單份文件的 FeatureBundle

        Args:
            doc: 文件
            corpus_token_sets: 預先計算好的 corpus token 集合

        Returns:
            FeatureBundle
        """
        text = doc.content_text()
        phrases = extract_key_phrases(text, self.config.key_phrases_top_n)

        return FeatureBundle(
            id=doc.id,
            tfidf=compute_tfidf(tokenize(text), corpus_token_sets),
            key_phrases=phrases,
            reading_level=reading_level(text),
            sentiment=sentiment(text),
            key_phrases_top=extract_key_phrases(text, self.config.key_phrases_short_n),
        )

    def analyze_corpus(self, documents: List[Document]) -> Dict[str, FeatureBundle]:
        """
        分析整個 corpus

        Args:
            documents: 所有文件

        Returns:
            {document_id: FeatureBundle}
        """
        # tokenize 一次，避免 O(N^2) 重複切字
        corpus_token_sets = [set(tokenize(d.content_text())) for d in documents]

        bundles = {}
        for doc in documents:
            bundles[doc.id] = self.analyze_document(doc, corpus_token_sets)

        logger.info(f"Analyzed {len(bundles)} documents")
        return bundles
