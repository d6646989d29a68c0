import logging

import requests

from errors import UpstreamError

logger = logging.getLogger(__name__)

IMAGE_BASE_URL = "https://image.tmdb.org/t/p"


def image_url(path, size: str = "w500"):
    if not path:
        return None
    return f"{IMAGE_BASE_URL}/{size}{path}"


def map_movie(movie: dict) -> dict:
    """Normalizes a TMDB movie (list item or details) to the catalog shape."""
    release_date = movie.get("release_date") or movie.get("first_air_date") or None
    if isinstance(movie.get("genre_ids"), list):
        genre_ids = movie["genre_ids"]
    elif isinstance(movie.get("genres"), list):
        genre_ids = [int(g["id"]) for g in movie["genres"] if "id" in g]
    else:
        genre_ids = []

    vote = movie.get("vote_average")
    return {
        "id": int(movie["id"]),
        "title": str(movie.get("title") or movie.get("name") or ""),
        "overview": str(movie.get("overview") or ""),
        "releaseDate": release_date,
        "year": release_date.split("-")[0] if release_date else None,
        "posterUrl": image_url(movie.get("poster_path"), "w500"),
        "backdropUrl": image_url(movie.get("backdrop_path"), "w780"),
        "genreIds": genre_ids,
        "voteAverage": vote if isinstance(vote, (int, float)) and not isinstance(vote, bool) else None,
    }


class TMDBClient:
    """Catalog lookups against The Movie Database (v3 API key or v4 read token)."""

    def __init__(self, api_key=None, read_token=None, language="en-US",
                 base_url="https://api.themoviedb.org/3", timeout=10, session=None):
        self.api_key = api_key
        self.read_token = read_token
        self.language = language
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config):
        return cls(
            api_key=config.get("TMDB_API_KEY"),
            read_token=config.get("TMDB_READ_TOKEN"),
            language=config.get("TMDB_LANGUAGE", "en-US"),
            base_url=config.get("TMDB_BASE_URL", "https://api.themoviedb.org/3"),
            timeout=config.get("HTTP_TIMEOUT_SECONDS", 10),
        )

    def _get(self, endpoint: str, **params) -> dict:
        language = params.pop("language", None) or self.language
        query = {k: v for k, v in params.items() if v is not None}
        query["language"] = language

        headers = {"Accept": "application/json"}
        if self.api_key:
            query["api_key"] = self.api_key
        elif self.read_token:
            headers["Authorization"] = f"Bearer {self.read_token}"

        try:
            resp = self.session.get(f"{self.base_url}{endpoint}", params=query,
                                    headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("TMDB request %s failed: %s", endpoint, e)
            raise UpstreamError(f"TMDB request failed: {e}")

        if not resp.ok:
            raise UpstreamError(
                f"TMDB request failed: {resp.status_code} {resp.reason}",
                upstream_status=resp.status_code,
            )
        return resp.json()

    def _page(self, data: dict, page: int) -> dict:
        return {
            "page": int(data.get("page") or page),
            "totalPages": int(data.get("total_pages") or 1),
            "movies": [map_movie(m) for m in data.get("results") or []],
        }

    def popular(self, page: int = 1, language=None) -> dict:
        data = self._get("/movie/popular", page=page, language=language, include_adult="false")
        return self._page(data, page)

    def search(self, query: str, page: int = 1, language=None) -> dict:
        data = self._get("/search/movie", query=query, page=page, language=language, include_adult="false")
        return self._page(data, page)

    def discover_by_genre(self, genre_id, page: int = 1, language=None) -> dict:
        data = self._get(
            "/discover/movie",
            with_genres=genre_id,
            page=page,
            language=language,
            include_adult="false",
            sort_by="popularity.desc",
        )
        return self._page(data, page)

    def details(self, movie_id, language=None) -> dict:
        return map_movie(self._get(f"/movie/{movie_id}", language=language))

    def genres(self, language=None) -> list:
        data = self._get("/genre/movie/list", language=language)
        return [{"id": int(g["id"]), "name": str(g["name"])} for g in data.get("genres") or []]
