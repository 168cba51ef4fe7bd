import html
import logging
import re
import time
from types import TracebackType
from typing import Self

import httpx

logger = logging.getLogger(__name__)

BASE_URL = "https://steamcommunity.com"
ITEM_PATH = "/sharedfiles/filedetails/"
MAX_REDIRECTS = 5

_TITLE_RE = re.compile(r"<title>Steam Workshop::(.*?)</title>", re.IGNORECASE)
_TITLE_END = "</title>"


def parse_item_title(page: str) -> str | None:
    """Extract the mod name from a Workshop item page's ``<title>``."""
    m = _TITLE_RE.search(page)
    if not m:
        return None
    return html.unescape(m.group(1)).strip() or None


class WorkshopClient:
    """Blocking Steam Workshop page client.

    *timeout* bounds each lookup as a whole, redirects and body included.
    Used from the scan worker thread; must be entered as a context manager.
    """

    def __init__(self, timeout: float = 10.0, base_url: str = BASE_URL) -> None:
        self._timeout = timeout
        self._base_url = base_url
        self._client: httpx.Client | None = None

    def __enter__(self) -> Self:
        self._client = httpx.Client(
            base_url=self._base_url,
            headers={"Accept": "text/html"},
            timeout=self._timeout,
            follow_redirects=True,
            max_redirects=MAX_REDIRECTS,
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._client:
            self._client.close()
            self._client = None

    @property
    def client(self) -> httpx.Client:
        if not self._client:
            raise RuntimeError("WorkshopClient not entered as context manager")
        return self._client

    def fetch_item_title(self, item_id: str) -> str | None:
        """Return the display name of workshop item *item_id*, or ``None``.

        Raises ``httpx.HTTPError`` on transport errors, timeouts and
        non-2xx responses.
        """
        deadline = time.monotonic() + self._timeout
        page = ""
        with self.client.stream("GET", ITEM_PATH, params={"id": item_id}) as resp:
            resp.raise_for_status()
            for chunk in resp.iter_text():
                page += chunk
                if _TITLE_END in page.lower():
                    break
                if time.monotonic() > deadline:
                    raise httpx.ReadTimeout(
                        f"Workshop item {item_id} took longer than {self._timeout}s",
                        request=resp.request,
                    )
        title = parse_item_title(page)
        if title is None:
            logger.debug("No workshop title found for item %s", item_id)
        return title
