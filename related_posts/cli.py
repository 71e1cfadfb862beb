"""
CLI: Command Line Interface for the related-document engine

支援 init-config、analyze 和 recommend 命令。
"""

import click
import logging
from pathlib import Path
from typing import Optional

from related_posts.config import EngineConfig
from related_posts.processing.baseline import similarity_explanation
from related_posts.processing.recommend import RecommendationQuery, resolve_mode, recommend
from related_posts.storage.feature_cache import FeatureCache
from related_posts.storage.file_store import FileStore
from related_posts.utils import hashing
from related_posts.utils.ids import UuidIdGenerator
from related_posts.utils.time import utcnow, parse_iso8601

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@click.group()
def cli():
    """Related Posts Recommendation Engine CLI"""
    pass


@cli.command()
@click.option('--out', default='config.example.yaml', help='Output config file path')
def init_config(out: str):
    """產生範本設定檔"""

    example_path = Path(__file__).parent.parent / 'config.example.yaml'

    if example_path.exists():
        with open(example_path, 'r', encoding='utf-8') as f:
            content = f.read()
    else:
        # Minimal fallback
        content = """# Related Posts Engine Configuration
mode: hybrid
max_results: 5
"""

    with open(out, 'w', encoding='utf-8') as f:
        f.write(content)

    click.echo(f"✓ Config file created: {out}")
    click.echo(f"  Edit this file and run: related-posts recommend --config {out} ...")


@cli.command()
@click.option('--documents', required=True, help='Documents file (JSON array or JSONL)')
@click.option('--config', 'config_path', default=None, help='Config YAML file path')
@click.option('--out-dir', default=None, help='Output directory (default: config output_dir)')
def analyze(documents: str, config_path: Optional[str], out_dir: Optional[str]):
    """批次分析 corpus 並寫入 feature cache"""

    cfg = EngineConfig.from_yaml(config_path) if config_path else EngineConfig()

    docs = FileStore.read_documents(documents)
    cache = FeatureCache.build(docs, cfg.analysis)

    store = FileStore(out_dir or cfg.output_dir)
    path = store.save_features(cache)

    click.echo(f"✓ Analyzed {len(cache.bundles)} documents")
    click.echo(f"✓ Feature cache written to {path}")


@cli.command(name='recommend')
@click.option('--documents', required=True, help='Documents file (JSON array or JSONL)')
@click.option('--doc-id', required=True, help='Focal document id')
@click.option('--config', 'config_path', default=None, help='Config YAML file path')
@click.option('--interactions', default=None, help='Interaction log (JSONL)')
@click.option('--features', default=None, help='Feature cache JSON (rebuilt if stale)')
@click.option('--mode', default=None, help='basic | content | ml | hybrid')
@click.option('--max-results', type=int, default=None, help='Top K')
@click.option('--now', 'now_str', default=None, help='Reference time (ISO8601, default: now)')
@click.option('--out', default=None, help='Result JSON path (default: <output_dir>/results/<request_id>.json)')
def recommend_command(
    documents: str,
    doc_id: str,
    config_path: Optional[str],
    interactions: Optional[str],
    features: Optional[str],
    mode: Optional[str],
    max_results: Optional[int],
    now_str: Optional[str],
    out: Optional[str]
):
    """產生單一文件的相關推薦"""

    cfg = EngineConfig.from_yaml(config_path) if config_path else EngineConfig()
    logger.info(f"Config hash: {hashing.config_hash(cfg.model_dump())}")

    try:
        active_mode = resolve_mode(mode or cfg.mode)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='--mode')

    docs = FileStore.read_documents(documents)
    focal = next((d for d in docs if d.id == doc_id), None)
    if focal is None:
        raise click.BadParameter(f"Document not found in corpus: {doc_id}", param_hint='--doc-id')

    interaction_log = FileStore.read_interactions(interactions) if interactions else []

    # Feature cache: 檔案存在且 hash 相符時沿用
    if features and Path(features).exists():
        cache = FileStore.read_features(features).refresh(docs, cfg.analysis)
    else:
        cache = FeatureCache.build(docs, cfg.analysis)

    query = RecommendationQuery(
        focal=focal,
        corpus=docs,
        interactions=interaction_log,
        max_results=max_results if max_results is not None else cfg.max_results,
        mode=active_mode,
        now=parse_iso8601(now_str) if now_str else utcnow(),
    )

    try:
        result = recommend(
            query,
            cache,
            weights=cfg.weights,
            config=cfg,
            id_generator=UuidIdGenerator("req"),
        )
    except Exception as e:
        logger.error(f"Recommendation failed: {e}", exc_info=True)
        raise

    click.echo("=" * 60)
    click.echo(f"Related to: {focal.title} ({focal.id})")
    click.echo(f"Mode: {result.mode}  Request: {result.request_id}")
    click.echo("=" * 60)

    if not result.items:
        click.echo("No related documents found")

    for i, item in enumerate(result.items, 1):
        s = item.scores
        click.echo(f"  {i}. {item.document.title} [{item.document.id}] " +
                   f"final={s.final_score:.3f} ({similarity_explanation(s.baseline_similarity)})")
        click.echo(f"     content={s.content_similarity:.3f}, affinity={s.user_affinity:.3f}, " +
                   f"trending={s.trending_score:.3f}, diversity={s.diversity_score:.3f}, " +
                   f"confidence={s.confidence:.3f}")
        if item.reasons:
            click.echo(f"     reasons: {'; '.join(item.reasons)}")

    if out:
        path = FileStore.write_result(result, Path(out))
    else:
        path = FileStore(cfg.output_dir).save_result(result)
    click.echo(f"✓ Written result to {path}")


if __name__ == "__main__":
    cli()
