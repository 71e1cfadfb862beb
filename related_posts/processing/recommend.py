"""
Recommendation Orchestrator

流程：
1. Baseline provider 產生候選池 (K * pool factor)
2. 計算每個候選的 content / affinity / trending signal 與 confidence (固定權重)
3. 依 confidence 排序
4. Greedy selection：每一輪重新計算 diversity 與 final score (可調權重)，選最高者
5. 同分時：baseline 高者優先，再依 document id 字典序

confidence 的固定權重只用來排序初始候選池；最終選擇使用 Weights profile。
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Union
import logging

from pydantic import BaseModel, Field

from related_posts.config import EngineConfig, HYBRID_WEIGHTS, Weights
from related_posts.models import (
    CandidateScore,
    Document,
    Interaction,
    RecommendationResult,
    RecommendedItem,
)
from related_posts.processing.baseline import BaselineProvider, find_related_documents
from related_posts.processing.diversity import diversity_penalty
from related_posts.processing.scoring import calculate_affinity, calculate_trending
from related_posts.processing.similarity import cosine_similarity
from related_posts.storage.feature_cache import FeatureCache
from related_posts.utils.ids import IdGenerator, UuidIdGenerator
from related_posts.utils.time import utcnow

logger = logging.getLogger(__name__)


class RecommendationMode(str, Enum):
    BASIC = "basic"
    CONTENT = "content"
    ML = "ml"
    HYBRID = "hybrid"


class Signal(str, Enum):
    BASELINE = "baseline"
    CONTENT = "content"
    AFFINITY = "affinity"
    TRENDING = "trending"
    DIVERSITY = "diversity"


ALL_SIGNALS: FrozenSet[Signal] = frozenset(Signal)

MODE_SIGNALS: Dict[RecommendationMode, FrozenSet[Signal]] = {
    RecommendationMode.BASIC: frozenset([Signal.BASELINE]),
    RecommendationMode.CONTENT: frozenset([Signal.BASELINE, Signal.CONTENT, Signal.DIVERSITY]),
    RecommendationMode.ML: ALL_SIGNALS,
    RecommendationMode.HYBRID: ALL_SIGNALS,
}

# 初始排序用的固定權重 (與可調 Weights 分開)
CONFIDENCE_BLEND = {
    'baseline': 0.4,
    'content': 0.3,
    'affinity': 0.2,
    'trending': 0.1,
}


class RecommendationQuery(BaseModel):
    """一次推薦查詢的所有輸入"""
    focal: Document
    corpus: List[Document] = Field(default_factory=list)
    interactions: List[Interaction] = Field(default_factory=list)
    max_results: int = Field(default=5, ge=0)
    mode: RecommendationMode = Field(default=RecommendationMode.HYBRID)
    now: datetime = Field(default_factory=utcnow)


@dataclass
class ScoredCandidate:
    document: Document
    score: CandidateScore
    reasons: List[str] = field(default_factory=list)


def resolve_mode(mode: Union[str, RecommendationMode]) -> RecommendationMode:
    """字串 → RecommendationMode；未知模式拋出 ValueError"""
    if isinstance(mode, RecommendationMode):
        return mode
    try:
        return RecommendationMode(str(mode).lower())
    except ValueError:
        valid = ', '.join(m.value for m in RecommendationMode)
        raise ValueError(f"Unsupported recommendation mode: {mode} (expected one of: {valid})")


def resolve_weights(mode: RecommendationMode, weights: Optional[Weights]) -> Weights:
    """hybrid 固定使用公開 profile 的副本；其他模式使用呼叫端權重 (未提供時同 hybrid)"""
    if mode == RecommendationMode.HYBRID or weights is None:
        return HYBRID_WEIGHTS.model_copy()
    return weights


def compute_confidence(score: CandidateScore) -> float:
    confidence = (
        score.baseline_similarity * CONFIDENCE_BLEND['baseline'] +
        score.content_similarity * CONFIDENCE_BLEND['content'] +
        score.user_affinity * CONFIDENCE_BLEND['affinity'] +
        score.trending_score * CONFIDENCE_BLEND['trending']
    )
    return max(0.0, min(1.0, confidence))


def compute_final_score(score: CandidateScore, weights: Weights, signals: FrozenSet[Signal]) -> float:
    """
    Final score (可調權重)

    baseline 與 content similarity 共用 content_similarity 權重；
    未啟用的 signal 不計分。
    """
    final = score.baseline_similarity * weights.content_similarity
    if Signal.CONTENT in signals:
        final += score.content_similarity * weights.content_similarity
    if Signal.AFFINITY in signals:
        final += score.user_affinity * weights.user_affinity
    if Signal.TRENDING in signals:
        final += score.trending_score * weights.trending
    if Signal.DIVERSITY in signals:
        final += score.diversity_score * weights.diversity
    return final


def selection_key(candidate: ScoredCandidate, primary: float):
    """排序 key：primary 降序 → baseline 降序 → id 升序"""
    return (-primary, -candidate.score.baseline_similarity, candidate.document.id)


def build_candidate_pool(
    query: RecommendationQuery,
    provider: BaselineProvider,
    config: EngineConfig,
    pool_size: int
) -> List[ScoredCandidate]:
    """
    由 baseline provider 取得候選池

    focal 本身、重複 id、以及不在 corpus 中的 id 都會被排除。
    """
    options = config.baseline.model_copy(update={'max_results': pool_size})
    baseline = provider(query.focal, query.corpus, options)

    docs_by_id = {doc.id: doc for doc in query.corpus}
    seen = set()
    pool = []

    for candidate in baseline:
        if candidate.id == query.focal.id or candidate.id in seen:
            continue

        doc = docs_by_id.get(candidate.id)
        if doc is None:
            logger.warning(f"Baseline candidate {candidate.id} not found in corpus, skipping")
            continue

        seen.add(candidate.id)
        pool.append(ScoredCandidate(
            document=doc,
            score=CandidateScore(
                document_id=doc.id,
                baseline_similarity=max(0.0, min(1.0, candidate.similarity))
            ),
            reasons=list(candidate.reasons)
        ))

    return pool


def score_signals(
    candidate: ScoredCandidate,
    query: RecommendationQuery,
    cache: FeatureCache,
    signals: FrozenSet[Signal],
    config: EngineConfig
) -> None:
    """計算候選的 content / affinity / trending 與 confidence"""
    score = candidate.score

    if Signal.CONTENT in signals:
        focal_bundle = cache.get(query.focal.id)
        candidate_bundle = cache.get(candidate.document.id)
        if focal_bundle is not None and candidate_bundle is not None:
            score.content_similarity = cosine_similarity(focal_bundle, candidate_bundle)

    if Signal.AFFINITY in signals:
        score.user_affinity = calculate_affinity(
            candidate.document, query.interactions, query.now, config.scoring
        )

    if Signal.TRENDING in signals:
        score.trending_score = calculate_trending(
            candidate.document, query.interactions, query.now, config.scoring.trending_window_days
        )

    score.confidence = compute_confidence(score)


def select_with_diversity(
    candidates: List[ScoredCandidate],
    weights: Weights,
    signals: FrozenSet[Signal],
    k: int
) -> List[ScoredCandidate]:
    """
    Diversity-aware greedy selection

    每選入一筆，剩餘候選的 diversity 都會針對新的已選集合重新計算。

    Args:
        candidates: 依 confidence 排序好的候選
        weights: 可調權重
        signals: 啟用的 signals
        k: 最多選取數

    Returns:
        選取順序即排名
    """
    remaining = list(candidates)
    selected: List[ScoredCandidate] = []

    while len(selected) < k and remaining:
        selected_docs = [c.document for c in selected]

        for candidate in remaining:
            if Signal.DIVERSITY in signals:
                candidate.score.diversity_score = diversity_penalty(candidate.document, selected_docs)
            candidate.score.final_score = compute_final_score(candidate.score, weights, signals)

        best = min(remaining, key=lambda c: selection_key(c, c.score.final_score))
        remaining.remove(best)
        selected.append(best)

        logger.debug(f"Selected #{len(selected)} {best.document.id}: final={best.score.final_score:.4f} " +
                     f"(base={best.score.baseline_similarity:.3f}, content={best.score.content_similarity:.3f}, " +
                     f"aff={best.score.user_affinity:.3f}, trend={best.score.trending_score:.3f}, " +
                     f"div={best.score.diversity_score:.3f})")

    return selected


def recommend(
    query: RecommendationQuery,
    cache: FeatureCache,
    weights: Optional[Weights] = None,
    baseline_provider: BaselineProvider = find_related_documents,
    config: Optional[EngineConfig] = None,
    id_generator: Optional[IdGenerator] = None
) -> RecommendationResult:
    """
    產生 focal 文件的相關推薦

    純函式：不建立、不修改 cache；相同輸入得到相同排序。

    Args:
        query: 查詢 (focal、corpus、互動紀錄、K、模式、now)
        cache: 已建立的 FeatureCache
        weights: ml / content 模式的權重 (hybrid 固定使用預設 profile)
        baseline_provider: 初始候選來源
        config: 引擎設定 (評分參數、baseline 選項、pool factor)
        id_generator: request id 產生器

    Returns:
        RecommendationResult (長度 <= min(K, 候選數))
    """
    config = config or EngineConfig()
    id_generator = id_generator or UuidIdGenerator("req")

    mode = resolve_mode(query.mode)
    signals = MODE_SIGNALS[mode]
    active_weights = resolve_weights(mode, weights)
    k = query.max_results

    if k <= 0:
        selected = []
    elif mode == RecommendationMode.BASIC:
        pool = build_candidate_pool(query, baseline_provider, config, k)
        for candidate in pool:
            candidate.score.confidence = candidate.score.baseline_similarity
            candidate.score.final_score = candidate.score.baseline_similarity
        pool.sort(key=lambda c: selection_key(c, c.score.final_score))
        selected = pool[:k]
    else:
        pool = build_candidate_pool(query, baseline_provider, config, k * config.candidate_pool_factor)
        for candidate in pool:
            score_signals(candidate, query, cache, signals, config)

        pool.sort(key=lambda c: selection_key(c, c.score.confidence))
        selected = select_with_diversity(pool, active_weights, signals, k)

    result = RecommendationResult(
        request_id=id_generator.new_id(),
        focal_id=query.focal.id,
        mode=mode.value,
        generated_at=query.now,
        items=[
            RecommendedItem(document=c.document, scores=c.score, reasons=c.reasons)
            for c in selected
        ]
    )

    logger.info(f"Recommended {len(result.items)} documents for {query.focal.id} (mode={mode.value})")
    return result
