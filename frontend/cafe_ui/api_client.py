import os
import requests

BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:8000")


class BackendError(Exception):
    """Raised when the cafe map backend cannot serve a request."""


class CafeMapClient:
    def __init__(self, base_url: str = BACKEND_URL, timeout: float = 45, session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        # Overpass can be slow for a whole city
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> dict:
        try:
            response = self.session.request(
                method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.ConnectionError as e:
            raise BackendError("Cannot connect to backend. Make sure the backend is running on port 8000.") from e
        except requests.exceptions.Timeout as e:
            raise BackendError("Request timed out. Please try again.") from e
        except requests.exceptions.HTTPError as e:
            detail = _error_detail(e.response)
            raise BackendError(f"Backend returned {e.response.status_code}: {detail}") from e
        except (requests.exceptions.RequestException, ValueError) as e:
            raise BackendError(f"An error occurred: {str(e)}") from e

    def fetch_cafes(self) -> dict:
        return self._request("GET", "/cafes")

    def set_status(self, cafe_id: str, status: str) -> dict:
        return self._request("PUT", f"/cafes/{cafe_id}/status", json={"status": status})

    def check_health(self) -> bool:
        """Check if backend is running."""
        try:
            response = self.session.get(f"{self.base_url}/health", timeout=2)
            return response.status_code == 200
        except requests.exceptions.RequestException:
            return False


def _error_detail(response) -> str:
    try:
        return response.json().get("detail", response.text)
    except ValueError:
        return response.text
