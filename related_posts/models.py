"""
Core data models for the related-document engine

Document / Interaction 為輸入契約，FeatureBundle 為批次分析結果，
CandidateScore / RecommendationResult 為每次查詢的輸出。
"""

from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict
from pydantic import BaseModel, Field


class Document(BaseModel):
    """
    單篇文件 (id 為所有結構間唯一的 join key)
    """
    id: str = Field(..., description="穩定且唯一的 ID")
    title: str = Field(..., description="標題")
    body: str = Field(default="", description="內文")
    excerpt: Optional[str] = Field(None, description="摘要")
    category: str = Field(default="", description="分類")
    tags: List[str] = Field(default_factory=list, description="標籤")
    published_at: Optional[datetime] = Field(None, description="發布時間")

    def content_text(self) -> str:
        """分析用文字：title + (body 或 excerpt)"""
        return f"{self.title} {self.body or self.excerpt or ''}"

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "id": "ai-driven-development-workflow",
                "title": "AI-Driven Development Workflow",
                "body": "Exploring how AI is transforming software development workflows.",
                "category": "Tech",
                "tags": ["AI", "Development", "Workflow"],
                "published_at": "2024-12-15T00:00:00Z"
            }
        }


class FeatureBundle(BaseModel):
    """每份文件的內容特徵 (由 ContentAnalyzer 批次產生)"""
    id: str
    tfidf: Dict[str, float] = Field(default_factory=dict, description="term -> TF-IDF weight")
    key_phrases: List[str] = Field(default_factory=list, description="Top key phrases (n-grams)")
    reading_level: float = Field(default=1.0, description="Flesch-Kincaid grade (1-12)")
    sentiment: float = Field(default=0.0, description="Lexicon sentiment (-1 ~ 1)")
    key_phrases_top: List[str] = Field(default_factory=list, description="精簡 key phrases")


class InteractionKind(str, Enum):
    VIEW = "view"
    LIKE = "like"
    SHARE = "share"
    COMMENT = "comment"
    BOOKMARK = "bookmark"


class Interaction(BaseModel):
    """使用者互動紀錄 (append-only，引擎不修改)"""
    document_id: str
    kind: InteractionKind
    timestamp: datetime
    duration_ms: Optional[int] = Field(None, description="停留時間 (ms)")
    scroll_depth: Optional[float] = Field(None, ge=0.0, le=1.0, description="捲動深度 (0-1)")
    interaction_id: Optional[str] = Field(None, description="由 IdGenerator 指派")


class BaselineCandidate(BaseModel):
    """Baseline provider 產生的候選"""
    id: str
    similarity: float = Field(..., description="Baseline 相似度 (0-1)")
    reasons: List[str] = Field(default_factory=list, description="可讀的推薦理由")


class CandidateScore(BaseModel):
    """每個候選的各 signal 分數 (每次查詢重新計算)"""
    document_id: str
    baseline_similarity: float = 0.0
    content_similarity: float = 0.0
    user_affinity: float = 0.0
    trending_score: float = 0.0
    diversity_score: float = 1.0
    confidence: float = 0.0
    final_score: float = 0.0


class RecommendedItem(BaseModel):
    document: Document
    scores: CandidateScore
    reasons: List[str] = Field(default_factory=list)


class RecommendationResult(BaseModel):
    """排序後的推薦結果"""
    request_id: str
    focal_id: str
    mode: str
    generated_at: datetime
    items: List[RecommendedItem] = Field(default_factory=list)

    def document_ids(self) -> List[str]:
        return [item.document.id for item in self.items]

    class Config:
        json_schema_extra = {
            "example": {
                "request_id": "req_1a2b3c4d",
                "focal_id": "ai-driven-development-workflow",
                "mode": "hybrid",
                "generated_at": "2024-12-20T00:00:00Z",
                "items": [
                    {
                        "document": {"id": "building-my-digital-home", "title": "Building My Digital Home"},
                        "scores": {
                            "document_id": "building-my-digital-home",
                            "baseline_similarity": 0.42,
                            "content_similarity": 0.18,
                            "user_affinity": 0.0,
                            "trending_score": 0.0,
                            "diversity_score": 1.0,
                            "confidence": 0.22,
                            "final_score": 0.28
                        },
                        "reasons": ["Same category: Tech"]
                    }
                ]
            }
        }
