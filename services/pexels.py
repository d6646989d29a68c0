import requests

from errors import UpstreamError


class PexelsClient:
    """Stock video search. Responses are returned as the provider sends them."""

    def __init__(self, api_key=None, base_url="https://api.pexels.com", timeout=10, session=None):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config):
        return cls(
            api_key=config.get("PEXELS_API_KEY"),
            base_url=config.get("PEXELS_BASE_URL", "https://api.pexels.com"),
            timeout=config.get("HTTP_TIMEOUT_SECONDS", 10),
        )

    def _get(self, endpoint: str, **params) -> dict:
        if not self.api_key:
            raise UpstreamError("Pexels API key missing (PEXELS_API_KEY)")
        try:
            resp = self.session.get(
                f"{self.base_url}{endpoint}",
                params={k: v for k, v in params.items() if v is not None},
                headers={"Authorization": self.api_key},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise UpstreamError(f"Pexels request failed: {e}")

        if not resp.ok:
            raise UpstreamError(
                f"Pexels request failed: {resp.status_code} {resp.reason}",
                upstream_status=resp.status_code,
            )
        return resp.json()

    def search(self, query: str, per_page: int = 15, page: int = 1) -> dict:
        return self._get("/videos/search", query=query, per_page=per_page, page=page)

    def popular(self, per_page: int = 20, page: int = 1) -> dict:
        return self._get("/videos/popular", per_page=per_page, page=page)
