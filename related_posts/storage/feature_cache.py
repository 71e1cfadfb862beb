"""
Feature cache keyed by corpus content hash

內容分析是唯一昂貴的步驟：corpus 不變時沿用既有 FeatureBundle，
hash 改變時整批重建 (不做部分更新)。
"""

from typing import Dict, List, Optional
import logging

from pydantic import BaseModel, Field

from related_posts.config import AnalysisConfig
from related_posts.models import Document, FeatureBundle
from related_posts.processing.content_analysis import ContentAnalyzer
from related_posts.utils import hashing

logger = logging.getLogger(__name__)


def compute_corpus_hash(documents: List[Document]) -> str:
    return hashing.corpus_hash([doc.model_dump(mode='json') for doc in documents])


class FeatureCache(BaseModel):
    """document id -> FeatureBundle，附帶建立時的 corpus hash"""
    corpus_hash: str = Field(..., description="建立此 cache 時的 corpus hash")
    bundles: Dict[str, FeatureBundle] = Field(default_factory=dict)

    @classmethod
    def build(
        cls,
        documents: List[Document],
        config: Optional[AnalysisConfig] = None
    ) -> "FeatureCache":
        """批次分析 corpus 並建立 cache"""
        analyzer = ContentAnalyzer(config)
        bundles = analyzer.analyze_corpus(documents)
        corpus_hash = compute_corpus_hash(documents)

        logger.info(f"Built feature cache for {len(bundles)} documents (hash={corpus_hash[:12]})")
        return cls(corpus_hash=corpus_hash, bundles=bundles)

    @classmethod
    def empty(cls) -> "FeatureCache":
        return cls(corpus_hash=compute_corpus_hash([]), bundles={})

    def is_current(self, documents: List[Document]) -> bool:
        return self.corpus_hash == compute_corpus_hash(documents)

    def refresh(
        self,
        documents: List[Document],
        config: Optional[AnalysisConfig] = None
    ) -> "FeatureCache":
        """
        hash 相同時回傳自己，否則回傳重建後的新 cache

        Args:
            documents: 目前的 corpus
            config: 內容分析參數

        Returns:
            FeatureCache
        """
        if self.is_current(documents):
            logger.debug("Feature cache is current, reusing")
            return self

        logger.info("Corpus changed, rebuilding feature cache")
        return FeatureCache.build(documents, config)

    def get(self, document_id: str) -> Optional[FeatureBundle]:
        return self.bundles.get(document_id)
