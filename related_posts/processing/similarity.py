"""
Cosine similarity between TF-IDF vectors
"""

from typing import Dict
import numpy as np

from related_posts.models import FeatureBundle


def cosine_from_weights(weights_a: Dict[str, float], weights_b: Dict[str, float]) -> float:
    """
    兩個 term -> weight 向量的 cosine similarity

    在兩者 term 聯集上計算；任一 norm 為 0 時回傳 0.0。

    Returns:
        Similarity 0-1
    """
    if not weights_a or not weights_b:
        return 0.0

    # 排序確保加總順序固定 → a/b 互換結果一致
    terms = sorted(set(weights_a) | set(weights_b))
    vec_a = np.array([weights_a.get(t, 0.0) for t in terms], dtype=float)
    vec_b = np.array([weights_b.get(t, 0.0) for t in terms], dtype=float)

    norm_a = float(np.linalg.norm(vec_a))
    norm_b = float(np.linalg.norm(vec_b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    similarity = float(np.dot(vec_a, vec_b)) / (norm_a * norm_b)
    if not np.isfinite(similarity):
        return 0.0
    return max(0.0, min(1.0, similarity))


def cosine_similarity(bundle_a: FeatureBundle, bundle_b: FeatureBundle) -> float:
    """FeatureBundle 版本的 cosine similarity"""
    return cosine_from_weights(bundle_a.tfidf, bundle_b.tfidf)
