"""
Behavioral Scoring

Affinity (個人互動 + 時間衰減) 與 Trending (近期互動佔比)。
沒有互動紀錄時兩者皆為 0。
"""

from typing import Dict, List, Optional
from datetime import datetime
import math
import logging

from related_posts.config import ScoringConfig
from related_posts.models import Document, Interaction, InteractionKind
from related_posts.utils.time import age_days

logger = logging.getLogger(__name__)


# 互動種類基礎權重 (view < like < share < comment < bookmark)
KIND_WEIGHTS: Dict[InteractionKind, float] = {
    InteractionKind.VIEW: 1.0,
    InteractionKind.LIKE: 3.0,
    InteractionKind.SHARE: 4.0,
    InteractionKind.COMMENT: 5.0,
    InteractionKind.BOOKMARK: 6.0,
}


def calculate_affinity(
    document: Document,
    interactions: Optional[List[Interaction]],
    now: datetime,
    config: Optional[ScoringConfig] = None
) -> float:
    """
    使用者對單一文件的 affinity score

    1. 過濾出此文件的互動
    2. 累加種類權重，長時間閱讀 / 深度捲動時對累計分數乘上加成
    3. 以「平均」年齡做指數衰減
    4. 除以正規化常數並限制在 0-1

    Args:
        document: 目標文件
        interactions: 互動紀錄 (可為 None)
        now: 當前時間
        config: 評分參數

    Returns:
        Score 0-1
    """
    config = config or ScoringConfig()

    if not interactions:
        return 0.0

    matching = [i for i in interactions if i.document_id == document.id]
    if not matching:
        return 0.0

    score = 0.0
    for interaction in matching:
        score += KIND_WEIGHTS.get(interaction.kind, 0.0)

        if interaction.duration_ms and interaction.duration_ms > config.long_engagement_ms:
            score *= config.long_engagement_boost

        if interaction.scroll_depth and interaction.scroll_depth > config.deep_scroll_depth:
            score *= config.deep_scroll_boost

    # 未來時間視為 age 0
    ages = [max(0.0, age_days(i.timestamp, now)) for i in matching]
    avg_age = sum(ages) / len(ages)

    decay_days = config.affinity_decay_days
    decay_factor = math.exp(-avg_age / decay_days) if decay_days > 0 else 0.0

    affinity = score * decay_factor / config.affinity_normalizer if config.affinity_normalizer > 0 else 0.0

    return max(0.0, min(1.0, affinity))


def calculate_trending(
    document: Document,
    interactions: Optional[List[Interaction]],
    now: datetime,
    window_days: Optional[float] = None
) -> float:
    """
    Trending score：now 之前 window_days 天內，此文件互動數 / 全部互動數 (晚於 now 的互動不計)

    Args:
        document: 目標文件
        interactions: 互動紀錄 (可為 None)
        now: 當前時間
        window_days: 視窗天數 (預設 7)

    Returns:
        Score 0-1；視窗內沒有任何互動時為 0
    """
    if window_days is None:
        window_days = ScoringConfig().trending_window_days

    if not interactions:
        return 0.0

    recent = [i for i in interactions if 0 <= age_days(i.timestamp, now) < window_days]
    if not recent:
        return 0.0

    matching = sum(1 for i in recent if i.document_id == document.id)
    return matching / len(recent)
