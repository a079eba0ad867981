"""Run the API with uvicorn: ``python -m f1_gpt.serving``."""

from __future__ import annotations

import logging

import uvicorn

from f1_gpt.config import settings


def main() -> None:
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run("f1_gpt.serving.app:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
