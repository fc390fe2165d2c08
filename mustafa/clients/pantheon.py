"""Client for the Pantheon hosting-platform API.

Authenticates lazily with a machine token, then talks to the same REST
endpoints the platform's own CLI uses: site lookup, environments, domains,
payment instruments and workflows.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx
import structlog
from typing_extensions import TypedDict

from mustafa.exceptions import ConfigurationError, PlatformAPIError, SiteNotFoundError
from mustafa.models.platform import (
    Domain,
    Environment,
    PaymentMethod,
    ServiceLevel,
    Site,
    User,
    Workflow,
)

if TYPE_CHECKING:
    from types import TracebackType

    from mustafa.config import Settings

logger = structlog.get_logger()


class Session(TypedDict):
    session: str
    user_id: str
    expires_at: int


class PantheonClient:
    """Synchronous Pantheon API client backed by a shared httpx.Client."""

    def __init__(
        self,
        machine_token: str = "",
        base_url: str = "https://terminus.pantheon.io/api",
        platform_host: str = "pantheonsite.io",
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.machine_token = machine_token
        self.base_url = base_url.rstrip("/")
        self.platform_host = platform_host
        self._http = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json", "User-Agent": "mustafa"},
        )
        self._session: Session | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> PantheonClient:
        return cls(
            machine_token=settings.pantheon_machine_token,
            base_url=settings.pantheon_api_url,
            platform_host=settings.pantheon_platform_host,
            timeout=settings.http_timeout,
        )

    @property
    def is_available(self) -> bool:
        return bool(self.machine_token)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> PantheonClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def login(self) -> Session:
        """Exchange the machine token for a session."""
        if not self.is_available:
            raise ConfigurationError(
                "No machine token configured. Set PANTHEON_MACHINE_TOKEN."
            )
        data = self._send(
            "POST",
            "/authorize/machine-token",
            json={"machine_token": self.machine_token, "client": "terminus"},
            authenticated=False,
        )
        self._session = {
            "session": str(data["session"]),
            "user_id": str(data["user_id"]),
            "expires_at": int(data.get("expires_at", 0)),
        }
        logger.debug("Logged in", user_id=self._session["user_id"])
        return self._session

    def _auth_headers(self) -> dict[str, str]:
        session = self._session or self.login()
        return {"Authorization": f"Bearer {session['session']}"}

    def _send(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        authenticated: bool = True,
    ) -> Any:
        headers = self._auth_headers() if authenticated else {}
        try:
            resp = self._http.request(method, path, json=json, params=params, headers=headers)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.debug("Platform API error", method=method, path=path, status=status)
            raise PlatformAPIError(
                f"{method} {path} failed with HTTP {status}: {exc.response.text.strip()}",
                status_code=status,
            ) from exc
        except httpx.RequestError as exc:
            raise PlatformAPIError(f"{method} {path} failed: {exc}") from exc
        if not resp.content:
            return None
        return resp.json()

    # ------------------------------------------------------------------
    # Sites & environments
    # ------------------------------------------------------------------

    def get_site(self, name: str) -> Site:
        try:
            found = self._send("GET", f"/site-names/{quote(name, safe='')}")
        except PlatformAPIError as exc:
            if exc.status_code == 404:
                raise SiteNotFoundError(f"Could not find a site named {name!r}.") from exc
            raise
        data = self._send("GET", f"/sites/{found['id']}", params={"site_state": "true"})
        return Site(
            id=str(data["id"]),
            name=str(data.get("name", name)),
            owner=str(data.get("owner", "")),
            service_level=self._service_level(data.get("service_level")),
        )

    @staticmethod
    def _service_level(value: str | None) -> ServiceLevel:
        try:
            return ServiceLevel(value or "free")
        except ValueError:
            raise PlatformAPIError(f"Unrecognised service level {value!r}") from None

    def get_environment(self, site: Site, env_id: str) -> Environment:
        envs = self._send("GET", f"/sites/{site.id}/environments") or {}
        if env_id not in envs:
            raise SiteNotFoundError(
                f"{site.name} has no environment {env_id!r} (found: {', '.join(sorted(envs))})."
            )
        return Environment(
            id=env_id,
            site_id=site.id,
            site_name=site.name,
            platform_host=self.platform_host,
        )

    # ------------------------------------------------------------------
    # Users & payment methods
    # ------------------------------------------------------------------

    def get_current_user(self) -> User:
        session = self._session or self.login()
        data = self._send("GET", f"/users/{session['user_id']}")
        profile = data.get("profile") or {}
        return User(
            id=str(data["id"]),
            email=str(data.get("email", "")),
            first_name=str(profile.get("firstname", "")),
            last_name=str(profile.get("lastname", "")),
        )

    def get_payment_methods(self, user: User) -> list[PaymentMethod]:
        data = self._send("GET", f"/users/{user.id}/instruments") or []
        return [PaymentMethod(id=str(item["id"]), label=str(item["label"])) for item in data]

    # ------------------------------------------------------------------
    # Domains
    # ------------------------------------------------------------------

    def _domains_path(self, env: Environment) -> str:
        return f"/sites/{env.site_id}/environments/{env.id}/domains"

    def get_domains(self, env: Environment) -> list[Domain]:
        data = self._send("GET", self._domains_path(env), params={"hydrate": "as_list"}) or []
        return [
            Domain(
                domain=str(item.get("domain") or item["id"]),
                dns_zone_name=item.get("dns_zone_name"),
                type=str(item.get("type", "")),
            )
            for item in data
        ]

    def create_domain(self, env: Environment, domain: str) -> None:
        self._send("PUT", f"{self._domains_path(env)}/{quote(domain, safe='')}")
        logger.info("Domain added", domain=domain)

    # ------------------------------------------------------------------
    # Workflows
    # ------------------------------------------------------------------

    @staticmethod
    def _workflow(data: dict[str, Any]) -> Workflow:
        final_task = data.get("final_task") or {}
        return Workflow(
            id=str(data["id"]),
            type=str(data.get("type", "")),
            result=data.get("result"),
            reason=str(final_task.get("reason") or data.get("reason") or ""),
        )

    def create_workflow(self, site: Site, workflow_type: str, params: dict[str, Any]) -> Workflow:
        data = self._send(
            "POST",
            f"/sites/{site.id}/workflows",
            json={"type": workflow_type, "params": params},
        )
        workflow = self._workflow(data)
        logger.info("Workflow submitted", workflow=workflow_type, workflow_id=workflow.id)
        return workflow

    def get_workflow(self, site: Site, workflow_id: str) -> Workflow:
        return self._workflow(self._send("GET", f"/sites/{site.id}/workflows/{workflow_id}"))
