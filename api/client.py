"""
Authenticated HTTP gateway for the admin API.

Every network call made by the console goes through ApiClient: it attaches
the bearer token, serializes bodies, parses and validates responses and turns
failures into ApiError. No other module talks to the network directly.

Usage:
    from api.auth import static_token_provider
    from api.client import ApiClient
    from api.models.company_schemas import CompaniesResponse

    with ApiClient(settings.API_URL, static_token_provider(token)) as api:
        data = api.get("/api/companies", schema=CompaniesResponse)
        for company in data["companies"]:
            ...
"""

import logging
import mimetypes
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

import httpx
from pydantic import BaseModel

from api.auth import TokenProvider
from api.models.common_schemas import ApiErrorBody, validate_payload
from config.settings import settings
from utils.url_builder import normalize_base_url

logger = logging.getLogger(__name__)

PARSE_FAILURE_PAYLOAD = {"error": "Failed to parse response"}
TRANSPORT_FAILURE_MESSAGE = "Unable to reach the API"
DEFAULT_FILE_CONTENT_TYPE = "application/octet-stream"


class ApiError(Exception):
    """
    Error raised for every rejected API call.

    Attributes:
        message: Server-provided message, or "API Error: {status}" when the
            body did not follow the error shape
        code: Optional machine-readable error code
        details: Optional list of {"field", "message"} validation details
        status_code: HTTP status, None for transport failures
        payload: Parsed response body, kept for endpoints whose error bodies
            carry more than the error shape
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[List[Dict[str, str]]] = None,
        status_code: Optional[int] = None,
        payload: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.status_code = status_code
        self.payload = payload

    def field_errors(self) -> Dict[str, str]:
        """Map of field name -> message, for annotating form inputs."""
        return {detail["field"]: detail["message"] for detail in self.details or []}

    def __repr__(self) -> str:
        return f"ApiError(message={self.message!r}, code={self.code!r}, status_code={self.status_code!r})"


class ApiTransportError(ApiError):
    """The request never produced an HTTP response (network unreachable, connection reset)."""


class FileUpload(BaseModel):
    """Raw file body for upload/replace endpoints."""
    filename: str
    content: bytes
    content_type: Optional[str] = None

    @classmethod
    def from_path(cls, path: str) -> "FileUpload":
        file_path = Path(path)
        content_type, _ = mimetypes.guess_type(file_path.name)
        return cls(filename=file_path.name, content=file_path.read_bytes(), content_type=content_type)

    @classmethod
    def from_uploaded_file(cls, uploaded_file) -> "FileUpload":
        """Build from a Streamlit UploadedFile."""
        return cls(
            filename=uploaded_file.name,
            content=uploaded_file.getvalue(),
            content_type=uploaded_file.type or None,
        )


class ApiClient:
    """
    Single choke point for admin API calls.

    Args:
        base_url: API origin, e.g. "http://localhost:3001"
        token_provider: Called before every request; its token (if any) is sent
            as "Authorization: Bearer <token>". Tokens are never refreshed here.
        timeout: Seconds, or None for no client-enforced timeout
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        base_url: str,
        token_provider: TokenProvider,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = normalize_base_url(base_url)
        self._get_token = token_provider
        self._http = httpx.Client(timeout=timeout, transport=transport)

    @classmethod
    def from_settings(cls, token_provider: TokenProvider) -> "ApiClient":
        return cls(settings.API_URL, token_provider, timeout=settings.API_TIMEOUT_SECONDS)

    # ============ JSON VERBS ============

    def get(self, endpoint: str, options: Optional[Dict[str, Any]] = None,
            schema: Optional[Type[BaseModel]] = None) -> Any:
        return self.request("GET", endpoint, options=options, schema=schema)

    def post(self, endpoint: str, body: Any = None, options: Optional[Dict[str, Any]] = None,
             schema: Optional[Type[BaseModel]] = None) -> Any:
        return self.request("POST", endpoint, body=body, options=options, schema=schema)

    def put(self, endpoint: str, body: Any = None, options: Optional[Dict[str, Any]] = None,
            schema: Optional[Type[BaseModel]] = None) -> Any:
        return self.request("PUT", endpoint, body=body, options=options, schema=schema)

    def patch(self, endpoint: str, body: Any = None, options: Optional[Dict[str, Any]] = None,
              schema: Optional[Type[BaseModel]] = None) -> Any:
        return self.request("PATCH", endpoint, body=body, options=options, schema=schema)

    def delete(self, endpoint: str, options: Optional[Dict[str, Any]] = None,
               schema: Optional[Type[BaseModel]] = None) -> Any:
        return self.request("DELETE", endpoint, options=options, schema=schema)

    # ============ FILE VERBS ============

    def upload_file(self, endpoint: str, file: FileUpload,
                    schema: Optional[Type[BaseModel]] = None) -> Any:
        """POST the file as the raw request body (no multipart wrapping)."""
        return self._send_file("POST", endpoint, file, schema)

    def put_file(self, endpoint: str, file: FileUpload,
                 schema: Optional[Type[BaseModel]] = None) -> Any:
        """PUT the file as the raw request body, for replacements."""
        return self._send_file("PUT", endpoint, file, schema)

    # ============ PIPELINE ============

    def request(
        self,
        method: str,
        endpoint: str,
        body: Any = None,
        options: Optional[Dict[str, Any]] = None,
        schema: Optional[Type[BaseModel]] = None,
    ) -> Any:
        """
        Send a JSON request and return the parsed (and, with a schema, validated) body.

        Args:
            method: HTTP verb
            endpoint: Path starting with "/", may include a query string
            body: JSON-serializable body, omitted when None
            options: Extra httpx request keywords; "headers" are merged over
                the defaults
            schema: Optional response model for best-effort validation

        Raises:
            ApiError: Non-2xx response
            ApiTransportError: No response was received
        """
        extra = dict(options or {})
        headers = self._build_headers("application/json", extra.pop("headers", None))
        if body is not None:
            extra["json"] = body
        return self._send(method, endpoint, headers, schema, **extra)

    def _send_file(self, method: str, endpoint: str, file: FileUpload,
                   schema: Optional[Type[BaseModel]]) -> Any:
        headers = self._build_headers(file.content_type or DEFAULT_FILE_CONTENT_TYPE)
        return self._send(method, endpoint, headers, schema, content=file.content)

    def _build_headers(self, content_type: str, custom_headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {"Content-Type": content_type}
        headers.update(custom_headers or {})

        token = self._get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _send(self, method: str, endpoint: str, headers: Dict[str, str],
              schema: Optional[Type[BaseModel]], **kwargs) -> Any:
        url = f"{self.base_url}{endpoint}"
        try:
            response = self._http.request(method, url, headers=headers, **kwargs)
        except httpx.TransportError as exc:
            logger.warning(f"{method} {endpoint} failed before a response was received: {exc}")
            raise ApiTransportError(TRANSPORT_FAILURE_MESSAGE) from exc

        return self._handle_response(method, endpoint, response, schema)

    def _handle_response(self, method: str, endpoint: str, response: httpx.Response,
                         schema: Optional[Type[BaseModel]]) -> Any:
        try:
            data = response.json()
        except ValueError:
            data = dict(PARSE_FAILURE_PAYLOAD)

        if not response.is_success:
            raise self._to_api_error(data, response.status_code)

        if schema is None:
            return data

        result = validate_payload(schema, data)
        if not result.success:
            # Log and hand back the raw payload
            logger.error(f"API response validation failed for {method} {endpoint}: {result.errors}")
            if settings.DEBUG:
                logger.warning(f"Response data: {data}")
            return data

        return result.data

    @staticmethod
    def _to_api_error(data: Any, status_code: int) -> ApiError:
        parsed = validate_payload(ApiErrorBody, data)
        if parsed.success:
            body = parsed.data
            return ApiError(body["error"], code=body.get("code"), details=body.get("details"),
                            status_code=status_code, payload=data)

        raw_error = data.get("error") if isinstance(data, dict) else None
        return ApiError(str(raw_error) if raw_error else f"API Error: {status_code}",
                        status_code=status_code, payload=data)

    # ============ LIFECYCLE ============

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
