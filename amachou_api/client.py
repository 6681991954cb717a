"""Amachou API client.

A thin wrapper around the disease REST resource using the ``requests``
library.  Every method returns a tuple ``(result, error)``: on success
``error`` is ``None``; on failure ``result`` is empty and ``error`` is a
dictionary with keys ``status_code`` and ``message``.

Listing and search return ``(items, pagination)`` as the result, where
``pagination`` holds ``total_count`` (from ``X-Total-Count``) and
``links`` (``rel`` → URL, parsed from the ``Link`` header).

The client supports optional authentication via an API key which will
be sent in the ``Authorization`` header.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests


logger = logging.getLogger(__name__)

Error = Dict[str, Any]


class AmachouAPI:
    """Client for the disease endpoints of the Amachou API."""

    DISEASES_PATH = "/diseases"
    SEARCH_PATH = "/_search/diseases"

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: API root, e.g. ``http://localhost:8080/api``.
            api_key: Optional bearer token added to every request.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per‑request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[requests.Response], Optional[Error]]:
        """Perform an HTTP request and return ``(response, error)``."""
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = (
                        err_json.get("message")
                        or err_json.get("title")
                        or err_json.get("detail")
                        or str(err_json)
                    )
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    @staticmethod
    def _page_params(page: int, size: Optional[int], sort: Sequence[str]) -> Dict[str, Any]:
        params: Dict[str, Any] = {"page": page}
        if size is not None:
            params["size"] = size
        if sort:
            params["sort"] = list(sort)
        return params

    @staticmethod
    def _pagination(response: requests.Response) -> Dict[str, Any]:
        total = response.headers.get("X-Total-Count")
        return {
            "total_count": int(total) if total is not None else None,
            "links": {rel: link["url"] for rel, link in response.links.items()},
        }

    def _list(self, path: str, params: Dict[str, Any]) -> Tuple[Tuple[List[Dict[str, Any]], Dict[str, Any]], Optional[Error]]:
        response, error = self._request("GET", path, params=params)
        if error:
            return ([], {"total_count": None, "links": {}}), error
        return (response.json(), self._pagination(response)), None

    # ------------------------------------------------------------------
    # Disease operations
    # ------------------------------------------------------------------
    def create_disease(self, disease: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Create a disease.  ``disease`` must not contain ``id``."""
        response, error = self._request("POST", self.DISEASES_PATH, json_body=disease)
        if error:
            return None, error
        return response.json(), None

    def update_disease(self, disease: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Update a disease.  ``disease`` must contain ``id``."""
        response, error = self._request("PUT", self.DISEASES_PATH, json_body=disease)
        if error:
            return None, error
        return response.json(), None

    def list_diseases(
        self, *, page: int = 0, size: Optional[int] = None, sort: Sequence[str] = ()
    ) -> Tuple[Tuple[List[Dict[str, Any]], Dict[str, Any]], Optional[Error]]:
        """Retrieve one page of diseases."""
        return self._list(self.DISEASES_PATH, self._page_params(page, size, sort))

    def get_disease(self, disease_id: int) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        response, error = self._request("GET", f"{self.DISEASES_PATH}/{disease_id}")
        if error:
            return None, error
        return response.json(), None

    def delete_disease(self, disease_id: int) -> Tuple[bool, Optional[Error]]:
        _, error = self._request("DELETE", f"{self.DISEASES_PATH}/{disease_id}")
        if error:
            return False, error
        return True, None

    def search_diseases(
        self, query: str, *, page: int = 0, size: Optional[int] = None, sort: Sequence[str] = ()
    ) -> Tuple[Tuple[List[Dict[str, Any]], Dict[str, Any]], Optional[Error]]:
        """Search diseases; the result page is ranked by relevance."""
        params = self._page_params(page, size, sort)
        params["query"] = query
        return self._list(self.SEARCH_PATH, params)
