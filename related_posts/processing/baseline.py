"""
Baseline related-document provider

以 tag / 分類 / 標題字詞 / 發布時間計算簡單相似度，作為推薦引擎的初始候選池。
引擎透過 BaselineProvider 介面呼叫，可替換成其他實作。
"""

from typing import Callable, Dict, List, Optional, Set
from collections import Counter
import math
import re
import logging

from related_posts.config import BaselineOptions
from related_posts.models import BaselineCandidate, Document
from related_posts.utils.time import age_days, to_utc

logger = logging.getLogger(__name__)


BaselineProvider = Callable[[Document, List[Document], BaselineOptions], List[BaselineCandidate]]

DATE_DECAY_DAYS = 180.0

_PUNCTUATION = re.compile(r'[^\w\s]')


def jaccard(set_a: Set[str], set_b: Set[str]) -> float:
    if not set_a or not set_b:
        return 0.0
    return len(set_a & set_b) / len(set_a | set_b)


def title_words(title: str) -> Set[str]:
    """標題字詞 (忽略長度 <= 3 的短字)"""
    cleaned = _PUNCTUATION.sub('', title.lower())
    return {word for word in cleaned.split() if len(word) > 3}


def calculate_tag_similarity(doc_a: Document, doc_b: Document) -> float:
    return jaccard(set(doc_a.tags), set(doc_b.tags))


def calculate_category_similarity(doc_a: Document, doc_b: Document) -> float:
    if not doc_a.category or not doc_b.category:
        return 0.0
    return 1.0 if doc_a.category.lower() == doc_b.category.lower() else 0.0


def calculate_title_similarity(doc_a: Document, doc_b: Document) -> float:
    return jaccard(title_words(doc_a.title), title_words(doc_b.title))


def calculate_date_similarity(doc_a: Document, doc_b: Document) -> float:
    """發布時間越接近分數越高：exp(-days / 180)"""
    if not doc_a.published_at or not doc_b.published_at:
        return 0.0

    days_difference = abs(age_days(doc_a.published_at, doc_b.published_at))
    return math.exp(-days_difference / DATE_DECAY_DAYS)


def get_match_reasons(focal: Document, candidate: Document, scores: Dict[str, float]) -> List[str]:
    """產生可讀的推薦理由"""
    reasons = []

    if scores['category'] > 0:
        reasons.append(f"Same category: {candidate.category}")

    if scores['tags'] > 0.3:
        candidate_tags = set(candidate.tags)
        shared_tags = [tag for tag in focal.tags if tag in candidate_tags]
        if shared_tags:
            suffix = '...' if len(shared_tags) > 2 else ''
            reasons.append(f"Shared tags: {', '.join(shared_tags[:2])}{suffix}")

    if scores['title'] > 0.2:
        reasons.append("Similar topics")

    if scores['date'] > 0.5:
        reasons.append("Published around the same time")

    return reasons


def find_related_documents(
    focal: Document,
    corpus: List[Document],
    options: Optional[BaselineOptions] = None
) -> List[BaselineCandidate]:
    """
    找出與 focal 文件相關的候選

    Args:
        focal: 目前文件
        corpus: 所有文件
        options: Baseline 選項

    Returns:
        依 similarity 降序 (同分依 id) 的 BaselineCandidate，最多 max_results 筆
    """
    options = options or BaselineOptions()

    candidates = [d for d in corpus if d.id != focal.id] if options.exclude_current else list(corpus)

    scored = []
    for doc in candidates:
        scores = {
            'tags': calculate_tag_similarity(focal, doc),
            'category': calculate_category_similarity(focal, doc),
            'title': calculate_title_similarity(focal, doc),
            'date': calculate_date_similarity(focal, doc),
        }

        similarity = (
            scores['tags'] * options.tag_weight +
            scores['category'] * options.category_weight +
            scores['title'] * options.title_weight +
            scores['date'] * options.date_weight
        )
        similarity = max(0.0, min(1.0, similarity))

        if similarity < options.min_score:
            continue

        scored.append(BaselineCandidate(
            id=doc.id,
            similarity=similarity,
            reasons=get_match_reasons(focal, doc, scores)
        ))

    scored.sort(key=lambda c: (-c.similarity, c.id))
    logger.debug(f"Baseline for {focal.id}: {len(scored)} candidates above {options.min_score}")

    return scored[:options.max_results]


def similarity_explanation(similarity: float) -> str:
    if similarity >= 0.7:
        return 'Highly related'
    if similarity >= 0.5:
        return 'Related'
    if similarity >= 0.3:
        return 'Somewhat related'
    if similarity >= 0.1:
        return 'Loosely related'
    return 'Not related'


def get_popular_tags(documents: List[Document], min_count: int = 2) -> List[Dict[str, object]]:
    """
    統計 tag 出現次數 (不分大小寫)

    Returns:
        [{'tag': str, 'count': int}]，依 count 降序、tag 升序
    """
    tag_counts = Counter(tag.lower() for doc in documents for tag in doc.tags)

    popular = [
        {'tag': tag, 'count': count}
        for tag, count in tag_counts.items()
        if count >= min_count
    ]
    popular.sort(key=lambda t: (-t['count'], t['tag']))
    return popular


def get_recent_documents(
    documents: List[Document],
    exclude_id: Optional[str] = None,
    max_results: int = 5
) -> List[Document]:
    """最新發布的文件 (沒有發布時間的不列入)"""
    dated = [d for d in documents if d.id != exclude_id and d.published_at]
    dated.sort(key=lambda d: (-to_utc(d.published_at).timestamp(), d.id))
    return dated[:max_results]
