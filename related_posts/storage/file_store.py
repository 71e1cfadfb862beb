"""
File-based storage

讀取文件 / 互動紀錄，寫入 feature cache 與推薦結果。
"""

import json
from typing import List, Optional
from pathlib import Path
import logging

from related_posts.models import Document, Interaction, RecommendationResult
from related_posts.storage.feature_cache import FeatureCache
from related_posts.utils.ids import IdGenerator, UuidIdGenerator

logger = logging.getLogger(__name__)


def _read_records(file_path: Path) -> List[dict]:
    """讀取 JSON array 或 JSONL"""
    if not file_path.exists():
        raise FileNotFoundError(f"Input file not found: {file_path}")

    with open(file_path, 'r', encoding='utf-8') as f:
        content = f.read()

    stripped = content.lstrip()
    if stripped.startswith('['):
        return json.loads(content)

    return [json.loads(line) for line in content.splitlines() if line.strip()]


class FileStore:
    """檔案儲存後端"""

    def __init__(self, base_dir: str = "out"):
        """
        初始化 FileStore

        Args:
            base_dir: 基礎目錄
        """
        self.base_dir = Path(base_dir)
        self.features_dir = self.base_dir / "features"
        self.results_dir = self.base_dir / "results"

        for dir_path in [self.features_dir, self.results_dir]:
            dir_path.mkdir(parents=True, exist_ok=True)

        logger.info(f"FileStore initialized at {self.base_dir}")

    @staticmethod
    def read_documents(path: str) -> List[Document]:
        """讀取文件 (JSON array 或 JSONL)"""
        documents = [Document(**record) for record in _read_records(Path(path))]
        logger.info(f"Loaded {len(documents)} documents from {path}")
        return documents

    @staticmethod
    def read_interactions(path: str, id_generator: Optional[IdGenerator] = None) -> List[Interaction]:
        """
        讀取互動紀錄 (JSONL)

        沒有 interaction_id 的紀錄會由 id_generator 指派。

        Args:
            path: 檔案路徑
            id_generator: id 產生器

        Returns:
            List of Interaction
        """
        id_generator = id_generator or UuidIdGenerator("evt")

        interactions = []
        for record in _read_records(Path(path)):
            interaction = Interaction(**record)
            if interaction.interaction_id is None:
                interaction = interaction.model_copy(update={'interaction_id': id_generator.new_id()})
            interactions.append(interaction)

        logger.info(f"Loaded {len(interactions)} interactions from {path}")
        return interactions

    def save_features(self, cache: FeatureCache) -> Path:
        """寫入 feature cache (以 corpus hash 命名)"""
        file_path = self.features_dir / f"{cache.corpus_hash[:16]}.json"

        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(cache.model_dump(mode='json'), f, indent=2, ensure_ascii=False)

        logger.info(f"Written feature cache ({len(cache.bundles)} bundles): {file_path}")
        return file_path

    @staticmethod
    def read_features(path: str) -> FeatureCache:
        """讀取 feature cache"""
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return FeatureCache(**data)

    def save_result(self, result: RecommendationResult) -> Path:
        """寫入推薦結果至 results 目錄 (以 request id 命名)"""
        return self.write_result(result, self.results_dir / f"{result.request_id}.json")

    @staticmethod
    def write_result(result: RecommendationResult, file_path: Path) -> Path:
        """寫入推薦結果 (JSON)"""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(result.model_dump(mode='json'), f, indent=2, ensure_ascii=False)

        logger.info(f"Written recommendation result: {file_path}")
        return file_path
