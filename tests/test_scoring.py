"""
Tests for affinity and trending scores
"""

import math
import pytest
from datetime import datetime, timedelta, timezone

from related_posts.config import ScoringConfig
from related_posts.models import Document, Interaction, InteractionKind
from related_posts.processing.scoring import calculate_affinity, calculate_trending


NOW = datetime(2026, 2, 1, 12, 0, tzinfo=timezone.utc)


def create_test_document(doc_id: str) -> Document:
    """Helper to create test document"""
    return Document(id=doc_id, title=f"Document {doc_id}", category="Tech")


def create_interaction(
    document_id: str,
    kind: InteractionKind = InteractionKind.VIEW,
    days_ago: float = 0.0,
    duration_ms: int = None,
    scroll_depth: float = None
) -> Interaction:
    """Helper to create test interaction"""
    return Interaction(
        document_id=document_id,
        kind=kind,
        timestamp=NOW - timedelta(days=days_ago),
        duration_ms=duration_ms,
        scroll_depth=scroll_depth
    )


def test_affinity_no_interactions_is_zero():
    """測試沒有互動紀錄時為 0"""
    doc = create_test_document("a")

    assert calculate_affinity(doc, [], NOW) == 0.0
    assert calculate_affinity(doc, None, NOW) == 0.0
    # 只有其他文件的互動
    assert calculate_affinity(doc, [create_interaction("b", InteractionKind.BOOKMARK)], NOW) == 0.0


def test_affinity_kind_weights_are_ascending():
    """測試 view < like < share < comment < bookmark"""
    doc = create_test_document("a")
    kinds = [
        InteractionKind.VIEW,
        InteractionKind.LIKE,
        InteractionKind.SHARE,
        InteractionKind.COMMENT,
        InteractionKind.BOOKMARK,
    ]

    scores = [calculate_affinity(doc, [create_interaction("a", kind)], NOW) for kind in kinds]

    assert scores == sorted(scores)
    assert len(set(scores)) == len(scores)
    assert scores[0] == pytest.approx(0.1)  # view: 1 / 10
    assert scores[-1] == pytest.approx(0.6)  # bookmark: 6 / 10


def test_affinity_engagement_boosts():
    """測試長時間閱讀 (x1.2) 與深度捲動 (x1.1) 加成"""
    doc = create_test_document("a")

    boosted = calculate_affinity(
        doc,
        [create_interaction("a", InteractionKind.COMMENT, duration_ms=90_000, scroll_depth=0.9)],
        NOW
    )
    below_threshold = calculate_affinity(
        doc,
        [create_interaction("a", InteractionKind.COMMENT, duration_ms=60_000, scroll_depth=0.7)],
        NOW
    )

    assert boosted == pytest.approx(5 * 1.2 * 1.1 / 10)
    assert below_threshold == pytest.approx(0.5)


def test_affinity_decays_with_average_age():
    """測試以平均年齡做 30 天時間衰減"""
    doc = create_test_document("a")
    interactions = [
        create_interaction("a", InteractionKind.LIKE, days_ago=10),
        create_interaction("a", InteractionKind.LIKE, days_ago=50),
    ]

    score = calculate_affinity(doc, interactions, NOW)

    # 平均年齡 30 天 → exp(-1)
    assert score == pytest.approx(6 * math.exp(-1) / 10)


def test_affinity_is_clamped():
    """測試 affinity 上限為 1"""
    doc = create_test_document("a")
    interactions = [create_interaction("a", InteractionKind.BOOKMARK) for _ in range(10)]

    assert calculate_affinity(doc, interactions, NOW) == 1.0


def test_affinity_future_timestamp_stays_bounded():
    """測試未來時間不會讓分數超出範圍"""
    doc = create_test_document("a")
    interactions = [create_interaction("a", InteractionKind.VIEW, days_ago=-5)]

    score = calculate_affinity(doc, interactions, NOW)

    assert 0.0 <= score <= 1.0
    assert score == pytest.approx(0.1)


def test_affinity_custom_config():
    """測試自訂正規化常數"""
    doc = create_test_document("a")
    config = ScoringConfig(affinity_normalizer=20.0)

    score = calculate_affinity(doc, [create_interaction("a", InteractionKind.BOOKMARK)], NOW, config)

    assert score == pytest.approx(0.3)


def test_trending_share_of_window():
    """測試 trending = 視窗內此文件互動數 / 全部互動數"""
    doc = create_test_document("a")
    interactions = [
        create_interaction("a", days_ago=1),
        create_interaction("a", days_ago=2),
        create_interaction("b", days_ago=3),
        create_interaction("c", days_ago=6),
        create_interaction("a", days_ago=20),  # 視窗外
    ]

    assert calculate_trending(doc, interactions, NOW) == pytest.approx(0.5)
    assert calculate_trending(doc, interactions, NOW, window_days=30) == pytest.approx(0.6)


def test_trending_empty_window_is_zero():
    """測試視窗內沒有互動時為 0"""
    doc = create_test_document("a")
    old = [create_interaction("a", days_ago=30), create_interaction("b", days_ago=40)]

    assert calculate_trending(doc, old, NOW) == 0.0
    assert calculate_trending(doc, [], NOW) == 0.0
    assert calculate_trending(doc, None, NOW) == 0.0


def test_trending_ignores_interactions_after_now():
    """測試晚於 now 的互動不算入視窗 (重播歷史時間點)"""
    doc_a = create_test_document("a")
    doc_b = create_test_document("b")
    interactions = [
        create_interaction("a", days_ago=-30),  # now 之後
        create_interaction("b", days_ago=1),
    ]

    assert calculate_trending(doc_a, interactions, NOW) == 0.0
    assert calculate_trending(doc_b, interactions, NOW) == pytest.approx(1.0)


def test_trending_only_future_interactions_is_zero():
    """測試只有未來互動時視窗為空"""
    doc = create_test_document("a")
    future = [create_interaction("a", days_ago=-1), create_interaction("a", days_ago=-0.5)]

    assert calculate_trending(doc, future, NOW) == 0.0
