"""
Diversity penalty

避免推薦結果同質化 (echo chamber)：與已選文件同分類或共享 tags 時降低分數。
"""

from typing import Sequence

from related_posts.models import Document

CATEGORY_PENALTY = 0.8
TAG_OVERLAP_PENALTY = 0.3


def diversity_penalty(candidate: Document, already_selected: Sequence[Document]) -> float:
    """
    計算候選文件相對於已選集合的 diversity 分數

    起始 1.0，對每份已選文件：
    - 分類相同 → * 0.8
    - tags 有交集 → * (1 - 0.3 * overlap / max(|candidate tags|, |selected tags|))

    Args:
        candidate: 候選文件
        already_selected: 目前已選入結果的文件

    Returns:
        Score (0, 1]；已選集合為空時為 1.0
    """
    score = 1.0
    candidate_tags = set(candidate.tags)

    for selected in already_selected:
        if candidate.category == selected.category:
            score *= CATEGORY_PENALTY

        selected_tags = set(selected.tags)
        overlap = candidate_tags & selected_tags
        if overlap:
            ratio = len(overlap) / max(len(candidate_tags), len(selected_tags))
            score *= 1 - ratio * TAG_OVERLAP_PENALTY

    return score
