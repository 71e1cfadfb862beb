"""Hashing utilities for corpus and config signatures."""

import hashlib
import json
from typing import Dict, List, Any


def document_hash(doc_payload: Dict[str, Any]) -> str:
    """
    產生單一文件的 content hash

    Args:
        doc_payload: Document.model_dump() 結果

    Returns:
        SHA256 hash (hex)
    """
    json_str = json.dumps(doc_payload, sort_keys=True, ensure_ascii=False, default=str)
    return hashlib.sha256(json_str.encode('utf-8')).hexdigest()


def corpus_hash(doc_payloads: List[Dict[str, Any]]) -> str:
    """
    產生整個 corpus 的穩定 hash (FeatureCache 的 key)

    文件順序不影響結果：先以 id 排序再計算。

    Args:
        doc_payloads: 每份文件的 model_dump()

    Returns:
        SHA256 hash (hex)
    """
    ordered = sorted(doc_payloads, key=lambda d: str(d.get('id', '')))
    digests = [document_hash(d) for d in ordered]

    json_str = json.dumps(digests, ensure_ascii=False)
    return hashlib.sha256(json_str.encode('utf-8')).hexdigest()


def config_hash(config_dict: Dict[str, Any]) -> str:
    """
    產生 config hash

    Args:
        config_dict: 設定字典

    Returns:
        SHA256 hash (hex, 前 16 字元)
    """
    # 排除會變動的欄位 (例如 output_dir)
    stable_keys = ['mode', 'max_results', 'candidate_pool_factor', 'weights', 'scoring', 'analysis', 'baseline']
    stable_config = {k: config_dict.get(k) for k in stable_keys if k in config_dict}

    json_str = json.dumps(stable_config, sort_keys=True, ensure_ascii=False, default=str)
    return hashlib.sha256(json_str.encode('utf-8')).hexdigest()[:16]
