"""
Ingestion — page loading, chunking, and embedding into the vector store.

This module is responsible for the offline job that turns the reference
pages listed in :mod:`f1_gpt.config` into embedded chunks stored in the
vector database.  Run it with ``python -m f1_gpt.ingestion``.
"""
