"""Page loader — renders a URL in headless Chromium and keeps the visible text."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from langchain_core.document_loaders import BaseLoader
from langchain_core.documents import Document
from playwright.async_api import async_playwright

logger = logging.getLogger(__name__)

BROWSER_ARGS: list[str] = ["--no-sandbox", "--disable-setuid-sandbox"]


class RenderedPageLoader(BaseLoader):
    """Load the rendered ``<body>`` text of one or more web pages.

    Each URL becomes a single :class:`Document` whose ``source`` metadata
    is the URL.  A fresh browser is launched per page and closed as soon
    as the text has been read.

    Parameters
    ----------
    urls:
        Pages to load, in order.
    headless:
        Run Chromium without a window.
    timeout:
        Navigation timeout in seconds.
    """

    def __init__(self, urls: list[str], *, headless: bool = True, timeout: float = 30.0) -> None:
        self.urls = urls
        self.headless = headless
        self.timeout = timeout

    async def alazy_load(self) -> AsyncIterator[Document]:
        async with async_playwright() as playwright:
            for url in self.urls:
                browser = await playwright.chromium.launch(headless=self.headless, args=BROWSER_ARGS)
                try:
                    page = await browser.new_page()
                    await page.goto(url, wait_until="domcontentloaded", timeout=self.timeout * 1000)
                    text = await page.inner_text("body")
                finally:
                    await browser.close()
                yield Document(page_content=text, metadata={"source": url})


async def load_page_text(url: str, *, headless: bool = True, timeout: float = 30.0) -> str:
    """Return the visible text of *url*, or ``""`` when the page is empty."""
    docs = await RenderedPageLoader([url], headless=headless, timeout=timeout).aload()
    return docs[0].page_content if docs else ""
