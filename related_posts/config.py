"""
Configuration schemas using Pydantic

定義推薦引擎的完整設定：權重 profile、評分參數、baseline 選項等。
"""

from typing import Literal
from pydantic import BaseModel, Field


class Weights(BaseModel):
    """
    最終排序 (greedy selection) 使用的可調權重

    各權重為獨立乘數，不要求總和為 1，也不檢查正負 (由呼叫端負責)。
    recency / engagement 保留在 profile 中，目前不對應任何 signal。
    """
    content_similarity: float = Field(default=0.3, description="baseline 與 TF-IDF 相似度權重")
    user_affinity: float = Field(default=0.25, description="使用者親和度權重")
    trending: float = Field(default=0.15, description="趨勢權重")
    diversity: float = Field(default=0.1, description="多樣性權重")
    recency: float = Field(default=0.1, description="新鮮度權重 (保留)")
    engagement: float = Field(default=0.1, description="互動度權重 (保留)")


# 公開的預設 hybrid profile
HYBRID_WEIGHTS = Weights()


class ScoringConfig(BaseModel):
    """Affinity / Trending 評分參數"""
    affinity_decay_days: float = Field(default=30.0, description="時間衰減常數 (天)")
    affinity_normalizer: float = Field(default=10.0, description="affinity 正規化常數")
    long_engagement_ms: int = Field(default=60_000, description="長時間閱讀門檻 (ms)")
    long_engagement_boost: float = Field(default=1.2, description="長時間閱讀加成")
    deep_scroll_depth: float = Field(default=0.7, description="深度捲動門檻 (0-1)")
    deep_scroll_boost: float = Field(default=1.1, description="深度捲動加成")
    trending_window_days: float = Field(default=7.0, description="趨勢視窗 (天)")


class AnalysisConfig(BaseModel):
    """內容分析參數"""
    key_phrases_top_n: int = Field(default=10, description="key phrases 數量")
    key_phrases_short_n: int = Field(default=5, description="精簡 key phrases 數量")


class BaselineOptions(BaseModel):
    """Baseline (tag / category / title / date) 相似度選項"""
    max_results: int = Field(default=3, description="最多回傳數")
    tag_weight: float = Field(default=0.4, description="Tag Jaccard 權重")
    category_weight: float = Field(default=0.3, description="分類相同權重")
    title_weight: float = Field(default=0.2, description="標題字詞 Jaccard 權重")
    date_weight: float = Field(default=0.1, description="發布時間接近度權重")
    exclude_current: bool = Field(default=True, description="排除 focal 文件本身")
    min_score: float = Field(default=0.1, description="最低相似度門檻")


class EngineConfig(BaseModel):
    """完整設定 schema"""
    mode: Literal["basic", "content", "ml", "hybrid"] = Field(default="hybrid", description="推薦模式")
    max_results: int = Field(default=5, ge=0, description="輸出 Top K")
    candidate_pool_factor: int = Field(default=2, ge=1, description="候選池大小 = K * factor")
    output_dir: str = Field(default="out", description="輸出目錄")

    weights: Weights = Field(default_factory=Weights, description="ml 模式使用的權重")
    scoring: ScoringConfig = Field(default_factory=ScoringConfig, description="評分參數")
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig, description="內容分析參數")
    baseline: BaselineOptions = Field(default_factory=BaselineOptions, description="Baseline 選項")

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "EngineConfig":
        """從 YAML 檔案載入設定"""
        import yaml
        with open(yaml_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls(**(data or {}))
