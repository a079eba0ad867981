"""One-shot ingestion job: ``python -m f1_gpt.ingestion``.

Takes no arguments; the store endpoint, credentials and model key come
from the environment (see :mod:`f1_gpt.config`).  Exits with status 1
when the run cannot complete.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from f1_gpt.config import Settings, settings
from f1_gpt.ingestion.embedder import build_embedding_client
from f1_gpt.ingestion.pipeline import IngestionPipeline, IngestionReport
from f1_gpt.retrieval.chroma_store import ChromaVectorStore

logger = logging.getLogger("f1_gpt.ingestion")


async def run_ingestion(config: Settings = settings) -> IngestionReport:
    """Build the clients from *config* and run the full pipeline."""
    store = ChromaVectorStore(
        config.chroma_collection,
        host=config.chroma_host,
        port=config.chroma_port,
    )
    embedder = build_embedding_client(config)
    pipeline = IngestionPipeline.from_settings(store, embedder, config)

    logger.info("F1 GPT: loading data into collection %r...", config.chroma_collection)
    report = await pipeline.run(config.ingest_sources)
    logger.info("All done! Your F1 data is loaded.")
    return report


def main() -> int:
    logging.basicConfig(level=settings.log_level, stream=sys.stdout, format="%(message)s")
    try:
        asyncio.run(run_ingestion())
    except Exception:
        logger.exception("Ingestion failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
