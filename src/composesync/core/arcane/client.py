"""
HTTP client for the Arcane projects API.

Maps each operation the reconciler needs onto a single Arcane endpoint.
There is no business logic and no retry here: a failed call raises once
and the caller decides whether the failure is fatal.

Endpoints (all scoped to one environment):
- List:     GET  /api/environments/{env}/projects?start=&limit=&search=
- Create:   POST /api/environments/{env}/projects
- Update:   PUT  /api/environments/{env}/projects/{id}
- Start:    POST /api/environments/{env}/projects/{id}/up
- Redeploy: POST /api/environments/{env}/projects/{id}/redeploy
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from composesync.core.arcane.exceptions import (
    ArcaneAPIError,
    ArcaneNetworkError,
    ArcaneParseError,
)
from composesync.core.arcane.models import CreateResponse, ProjectPage, RemoteProject

logger = logging.getLogger(__name__)


class ArcaneClient:
    """
    Client for one Arcane environment.

    The API key is sent both as ``X-Api-Key`` and as a bearer token since
    Arcane versions disagree on which one they read.

    Example:
        >>> with ArcaneClient("http://localhost:3552", "key", "0") as client:
        ...     projects = client.list_projects()
        ...     print(len(projects))
    """

    PAGE_SIZE = 50
    DEFAULT_TIMEOUT = 60.0

    def __init__(
        self,
        base_url: str,
        api_key: str,
        env_id: str = "0",
        *,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.Client | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Arcane base URL, e.g. ``http://localhost:3552``
            api_key: Arcane API key
            env_id: Arcane environment ID
            timeout: Per-request timeout in seconds
            http_client: Pre-built httpx client (tests inject a mock transport)
        """
        self.base_url = base_url.rstrip("/")
        self.env_id = env_id
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(timeout=timeout)
        self._headers = {
            "X-Api-Key": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def __enter__(self) -> ArcaneClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            self._http.close()

    @property
    def projects_path(self) -> str:
        return f"/api/environments/{self.env_id}/projects"

    def _request(
        self,
        method: str,
        path: str,
        *,
        json_body: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        """
        Send a request and return the response if it is 2xx.

        Raises:
            ArcaneNetworkError: If no response was received
            ArcaneAPIError: If the status is not 2xx
        """
        url = f"{self.base_url}{path}"
        logger.debug("%s %s params=%s", method, url, params)

        try:
            response = self._http.request(
                method,
                url,
                headers=self._headers,
                json=json_body,
                params=params,
            )
        except httpx.HTTPError as e:
            raise ArcaneNetworkError(
                f"Request failed: {method} {path}: {e}", url=url, method=method
            ) from e

        if not response.is_success:
            raise ArcaneAPIError(response.status_code, response.text, url=url, method=method)

        return response

    def _parse(self, response: httpx.Response, model: type[BaseModel]) -> Any:
        try:
            return model.model_validate_json(response.content)
        except ValidationError as e:
            raise ArcaneParseError(
                f"Failed to parse {model.__name__} response: {e}\nBody: {response.text}",
                url=str(response.request.url),
            ) from e

    def _list_all(self, search: str = "") -> list[RemoteProject]:
        """
        Walk every page of the project list.

        Stops on a short page, once the collected count reaches the total
        reported by the pagination block, or when a page repeats the previous
        one (a server that ignores ``start``).
        """
        start = 0
        collected: list[RemoteProject] = []
        previous_ids: list[str] | None = None

        while True:
            params = {"start": str(start), "limit": str(self.PAGE_SIZE)}
            if search:
                params["search"] = search

            response = self._request("GET", self.projects_path, params=params)
            page: ProjectPage = self._parse(response, ProjectPage)

            page_ids = [p.id for p in page.data]
            if page_ids and page_ids == previous_ids:
                logger.warning(
                    "Project list page at start=%d repeats the previous page, stopping", start
                )
                break
            previous_ids = page_ids
            collected.extend(page.data)

            if len(page.data) < self.PAGE_SIZE:
                break

            total = page.pagination.total
            if total > 0 and len(collected) >= total:
                break

            start += self.PAGE_SIZE

        return collected

    def list_projects(self) -> list[RemoteProject]:
        """
        List every project in the environment, in Arcane's order.

        Returns:
            All projects, duplicates included

        Raises:
            ArcaneError: On any request or parse failure
        """
        return self._list_all()

    def find_projects_by_name(self, name: str) -> list[RemoteProject]:
        """
        Server-side search narrowed to exact name matches.

        Arcane's ``search`` is a substring match, so results are filtered
        client-side.

        Args:
            name: Exact project name

        Returns:
            Matching projects in listing order (possibly several)
        """
        return [p for p in self._list_all(search=name) if p.name == name]

    def create_project(self, name: str, compose_content: str, env_content: str = "") -> str:
        """
        Create a project.

        Args:
            name: Project name
            compose_content: Compose manifest content
            env_content: Optional .env content (omitted when empty)

        Returns:
            The new project's ID, or ``name`` when Arcane does not return one
        """
        body: dict[str, Any] = {"name": name, "composeContent": compose_content}
        if env_content:
            body["envContent"] = env_content

        response = self._request("POST", self.projects_path, json_body=body)
        created: CreateResponse = self._parse(response, CreateResponse)
        return created.data.id or name

    def update_project(
        self, project_id: str, compose_content: str = "", env_content: str = ""
    ) -> None:
        """
        Update a project's manifest and/or env content.

        Empty values are left out of the body so they never clear the
        remote copy.
        """
        body: dict[str, Any] = {}
        if compose_content:
            body["composeContent"] = compose_content
        if env_content:
            body["envContent"] = env_content

        self._request("PUT", f"{self.projects_path}/{project_id}", json_body=body)

    def start_project(self, project_id: str) -> None:
        """Bring a project up."""
        self._request("POST", f"{self.projects_path}/{project_id}/up")

    def redeploy_project(self, project_id: str) -> None:
        """Pull and recreate a project's containers."""
        self._request("POST", f"{self.projects_path}/{project_id}/redeploy")


__all__ = ["ArcaneClient"]
