"""
Base API client for cardmate.
"""

import json
import time
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from cardmate.exceptions import APIError
from cardmate.exceptions import APIResponseError
from cardmate.exceptions import APITimeoutError
from cardmate.exceptions import APIValidationError
from cardmate.utils.logging_utils import LoggerMixin

JsonBody = dict[str, Any] | list[dict[str, Any]]


class BaseAPI(LoggerMixin):
    """Base class for API clients."""

    # Default timeouts (connection timeout, read timeout)
    DEFAULT_TIMEOUT = (7, 20)

    # Default retry settings
    DEFAULT_RETRY_TOTAL = 3
    DEFAULT_RETRY_BACKOFF_FACTOR = 0.5
    DEFAULT_RETRY_STATUS_FORCELIST = [408, 429, 500, 502, 503, 504]
    DEFAULT_RETRY_METHODS = ["GET"]

    USER_AGENT = "cardmate/0.1.0"

    def __init__(self, base_url: str, headers: dict[str, str] | None = None):
        """Initialize API client.

        Args:
            base_url: Base URL for API
            headers: Headers sent with every request
        """
        super().__init__()
        self.base_url = base_url.rstrip("/")
        self.session = self._create_session()
        self.session.headers.update({'User-Agent': self.USER_AGENT, 'Accept': 'application/json'})
        if headers:
            self.session.headers.update(headers)
        self.debug(f"{self.__class__.__name__}: initialized", base_url=self.base_url)

    def _create_session(self) -> requests.Session:
        """
        Create a requests session with retry strategy.

        Returns:
            Session with configured retry strategy
        """
        session = requests.Session()

        retry_strategy = Retry(
            total=self.DEFAULT_RETRY_TOTAL,
            backoff_factor=self.DEFAULT_RETRY_BACKOFF_FACTOR,
            status_forcelist=self.DEFAULT_RETRY_STATUS_FORCELIST,
            allowed_methods=self.DEFAULT_RETRY_METHODS
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def _build_url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _validate_response(self, response: requests.Response) -> None:
        """
        Validate response and raise appropriate errors.

        Raises:
            APIResponseError: If response status code indicates an error
        """
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            error_msg = f"HTTP {response.status_code}"
            try:
                error_data = response.json()
                if isinstance(error_data, dict):
                    detail = error_data.get('message', error_data.get('error'))
                    if detail:
                        error_msg = f"{error_msg}: {detail}"
            except (ValueError, AttributeError, TypeError):
                pass

            raise APIResponseError(f"Request failed: {error_msg}", response=response) from e

    def _parse_response(self, response: requests.Response) -> JsonBody | None:
        """Parse response content.

        Returns:
            Parsed response data or None if empty

        Raises:
            APIValidationError: If response cannot be parsed
        """
        try:
            result: JsonBody = response.json()
            return result
        except ValueError:
            content = (response.text or "").strip()

            if not content or content == "null":
                return None

            if content.startswith("[") and content.endswith("]"):
                try:
                    array_result: list[dict[str, Any]] = json.loads(content)
                    return array_result
                except json.JSONDecodeError:
                    pass

            raise APIValidationError(f"Failed to parse response: {content[:100]}...")

    def _make_request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, str] | None = None,
        data: JsonBody | None = None,
        headers: dict[str, str] | None = None,
        timeout: tuple[int, int] | int | None = None,
        validate_response: bool = True
    ) -> JsonBody | None:
        """
        Make an API request.

        Args:
            method: HTTP method
            endpoint: API endpoint
            params: Query parameters
            data: JSON request body
            headers: Extra headers for this request
            timeout: Request timeout (connection timeout, read timeout)
            validate_response: Whether to validate the response

        Raises:
            APITimeoutError: If request times out
            APIResponseError: If request fails
            APIValidationError: If response validation fails
            APIError: For other errors
        """
        start_time = time.time()
        url = self._build_url(endpoint)

        if timeout is None:
            timeout = self.DEFAULT_TIMEOUT

        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=data,
                headers=headers,
                timeout=timeout
            )

            if validate_response:
                self._validate_response(response)

            return self._parse_response(response)

        except requests.exceptions.Timeout as e:
            elapsed = time.time() - start_time
            self.logger.error(f"{self.__class__.__name__}: {method} {endpoint} timed out after {elapsed:.2f} seconds")
            raise APITimeoutError(f"Request timed out after {elapsed:.2f} seconds: {e!s}") from e

        except requests.exceptions.RequestException as e:
            elapsed = time.time() - start_time
            self.logger.error(f"{self.__class__.__name__}: {method} {endpoint} failed after {elapsed:.2f} seconds: {e}")
            raise APIResponseError(f"Request failed after {elapsed:.2f} seconds: {e!s}") from e

        except (APIResponseError, APIValidationError) as e:
            elapsed = time.time() - start_time
            self.logger.error(f"{self.__class__.__name__}: API error after {elapsed:.2f} seconds: {e}")
            raise

        except Exception as e:
            elapsed = time.time() - start_time
            self.logger.error(f"{self.__class__.__name__}: Unexpected error after {elapsed:.2f} seconds: {e}")
            raise APIError(f"Unexpected error after {elapsed:.2f} seconds: {e!s}") from e
