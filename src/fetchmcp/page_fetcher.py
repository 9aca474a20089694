"""HTTP client for retrieving documents."""

from typing import NamedTuple

import httpx

from fetchmcp.exceptions import FetchError
from fetchmcp.logger import logger

TEXT_CONTENT_TYPES = (
    "text/",
    "application/xhtml+xml",
    "application/xml",
    "application/json",
    "application/ld+json",
    "application/rss+xml",
    "application/atom+xml",
    "application/javascript",
)


class FetchedPage(NamedTuple):
    """A retrieved document body with its response details."""

    url: str
    status_code: int
    content_type: str
    text: str


class PageFetcher:
    """Fetches documents with a single GET per call.

    Uses a persistent httpx client to reuse connections across requests.
    """

    def __init__(
        self,
        timeout: float,
        user_agent: str,
        follow_redirects: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the page fetcher.

        Args:
            timeout: Request timeout in seconds.
            user_agent: User-Agent header sent with every request.
            follow_redirects: Whether redirects are followed.
            transport: Optional httpx transport (tests pass a MockTransport).

        """
        self._client = httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=follow_redirects,
            transport=transport,
            headers={
                "User-Agent": user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            },
        )

    async def fetch_text(self, url: str) -> FetchedPage:
        """Retrieve a URL and return its body decoded as text.

        Args:
            url: Absolute URL to fetch.

        Returns:
            FetchedPage with the final URL, status, content type and body.

        Raises:
            FetchError: On transport errors, non-success status or a body
                that is not text.

        """
        try:
            logger.debug("[FETCH STARTED] URL: %s", url)
            resp = await self._client.get(url)
            resp.raise_for_status()

        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"HTTP {e.response.status_code} {e.response.reason_phrase} for {url}"
            ) from e

        except httpx.RequestError as e:
            raise FetchError(f"Request failed for {url}: {e}") from e

        content_type = resp.headers.get("content-type", "")
        if not is_text_content_type(content_type):
            raise FetchError(f"Unsupported content type '{content_type}' for {url}")

        logger.debug("Fetched %d characters (%s) from %s", len(resp.text), content_type, url)
        return FetchedPage(
            url=str(resp.url),
            status_code=resp.status_code,
            content_type=content_type,
            text=resp.text,
        )

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        logger.debug("Closing page fetcher")
        await self._client.aclose()


def is_text_content_type(content_type: str) -> bool:
    """Check whether a Content-Type header denotes a textual body.

    A missing header is treated as text, which is how browsers sniff most pages.
    """
    media_type = content_type.split(";", 1)[0].strip().lower()
    if not media_type:
        return True
    return media_type.startswith(TEXT_CONTENT_TYPES) or media_type.endswith(("+xml", "+json"))
