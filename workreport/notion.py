"""
Notion REST client - the workspace store the report job reads from and writes to.
"""

import logging
from typing import Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from workreport import config
from workreport.constants import BLOCK_LIMIT, QUERY_PAGE_SIZE

logger = logging.getLogger("notion")


class NotionAPIError(RuntimeError):
    def __init__(self, status_code: int, body: str):
        super().__init__(f"Notion error {status_code}: {body}")
        self.status_code = status_code
        self.body = body


def _build_session(api_key: str, notion_version: str) -> requests.Session:
    session = requests.Session()
    session.headers.update(
        {
            "Authorization": f"Bearer {api_key}",
            "Notion-Version": notion_version,
            "Content-Type": "application/json",
        }
    )

    retry_strategy = Retry(
        total=5,
        connect=5,
        read=3,
        backoff_factor=1.0,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["GET", "POST", "PATCH"],
        raise_on_status=False,
        raise_on_redirect=False,
    )
    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class NotionClient:
    """
    Source database queries and report database writes.

    - `query_all` follows `next_cursor` until `has_more` is false
    - `append_blocks` slices children into BLOCK_LIMIT sized calls
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        database_id: Optional[str] = None,
        report_database_id: Optional[str] = None,
        base_url: str = config.NOTION_BASE_URL,
        notion_version: str = config.NOTION_VERSION,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
    ):
        self.database_id = database_id or config.NOTION_DATABASE_ID
        self.report_database_id = report_database_id or config.NOTION_REPORT_DATABASE_ID
        if not self.database_id or not self.report_database_id:
            raise config.ConfigurationError(
                "Database IDs are not defined in environment variables"
            )
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or _build_session(
            api_key or config.NOTION_API_KEY or "", notion_version
        )

    # ------------------------------------------------------------------
    # Core HTTP
    # ------------------------------------------------------------------
    def _request(self, method: str, path: str, payload: Optional[dict] = None) -> dict:
        resp = self.session.request(
            method, f"{self.base_url}{path}", json=payload, timeout=self.timeout
        )
        if resp.status_code != 200:
            raise NotionAPIError(resp.status_code, resp.text)
        return resp.json()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def query(
        self,
        filter: Optional[dict] = None,
        sorts: Optional[List[dict]] = None,
        start_cursor: Optional[str] = None,
    ) -> dict:
        payload: Dict = {"page_size": QUERY_PAGE_SIZE}
        if filter:
            payload["filter"] = filter
        if sorts:
            payload["sorts"] = sorts
        if start_cursor:
            payload["start_cursor"] = start_cursor
        return self._request("POST", f"/databases/{self.database_id}/query", payload)

    def query_all(
        self, filter: Optional[dict] = None, sorts: Optional[List[dict]] = None
    ) -> List[dict]:
        results: List[dict] = []
        cursor = None
        pages = 0

        while True:
            data = self.query(filter, sorts, cursor)
            results.extend(data.get("results", []))
            pages += 1
            cursor = data.get("next_cursor")
            if not data.get("has_more") or not cursor:
                break

        logger.debug(f"Fetched {len(results)} pages in {pages} request(s)")
        return results

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def create_page(
        self, properties: dict, children: List[dict], icon: Optional[dict] = None
    ) -> dict:
        payload = {
            "parent": {"database_id": self.report_database_id},
            "properties": properties,
            "children": children[:BLOCK_LIMIT],
        }
        if icon:
            payload["icon"] = icon
        page = self._request("POST", "/pages", payload)

        if len(children) > BLOCK_LIMIT:
            self.append_blocks(page["id"], children[BLOCK_LIMIT:])
        return page

    def append_blocks(self, page_id: str, blocks: List[dict]) -> None:
        for i in range(0, len(blocks), BLOCK_LIMIT):
            chunk = blocks[i : i + BLOCK_LIMIT]
            self._request("PATCH", f"/blocks/{page_id}/children", {"children": chunk})
