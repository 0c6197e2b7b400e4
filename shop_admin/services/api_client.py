# shop_admin/services/api_client.py
import aiohttp
import logging
from enum import Enum
from typing import Any, Dict, Optional
from ..config import Config

class ApiError(Exception):
    """Backend call failed or the backend refused the request"""

    def __init__(self, message: str, status: Optional[int] = None,
                 payload: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.payload = payload or {}

def clean_params(options: Dict[str, Any]) -> Dict[str, str]:
    """Drop empty filter values and stringify the rest for the query string"""
    params = {}
    for key, value in options.items():
        if value is None or value == '':
            continue
        if isinstance(value, bool):
            value = str(value).lower()
        elif isinstance(value, Enum):
            value = value.value
        params[key] = str(value)
    return params

class ApiClient:
    """HTTP session against the shop backend"""

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = (base_url or Config.BACKEND_URL).rstrip('/')
        self.session: Optional[aiohttp.ClientSession] = None
        self.logger = logging.getLogger(__name__)

    async def connect(self):
        """Open the shared HTTP session"""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession()
            self.logger.info(f"Backend session opened for {self.base_url}")

    async def close(self):
        """Close the shared HTTP session"""
        if self.session and not self.session.closed:
            await self.session.close()
            self.logger.info("Backend session closed")

    async def request(self, method: str, path: str, token: Optional[str] = None,
                      params: Optional[Dict[str, Any]] = None,
                      json: Optional[Dict[str, Any]] = None,
                      raw: bool = False) -> Any:
        """Send a request and return the decoded body.

        Raises ApiError on transport errors, non-2xx responses and bodies
        carrying ``"success": false``. With ``raw`` the body bytes are
        returned as-is.
        """
        await self.connect()
        headers = {'token': token} if token else {}
        url = f"{self.base_url}{path}"

        try:
            async with self.session.request(
                method,
                url,
                params=clean_params(params or {}),
                json=json,
                headers=headers
            ) as response:
                if raw and response.status < 400:
                    return await response.read()
                body = await self._read_body(response)
                status = response.status
        except aiohttp.ClientError as e:
            self.logger.error(f"{method} {path} failed: {e}")
            raise ApiError(f"Backend unreachable: {e}") from e

        if status >= 400:
            message = body.get('message') or f"Backend returned HTTP {status}"
            self.logger.warning(f"{method} {path} -> {status}: {message}")
            raise ApiError(message, status=status, payload=body)

        if body.get('success') is False:
            message = body.get('message') or "Request was rejected by the backend"
            self.logger.warning(f"{method} {path} rejected: {message}")
            raise ApiError(message, status=status, payload=body)

        return body

    @staticmethod
    async def _read_body(response: aiohttp.ClientResponse) -> Dict[str, Any]:
        try:
            body = await response.json(content_type=None)
        except ValueError:
            text = await response.text()
            return {'message': text.strip()} if text.strip() else {}
        if isinstance(body, dict):
            return body
        return {'data': body}

    async def get(self, path: str, token: Optional[str] = None, **kwargs) -> Any:
        return await self.request('GET', path, token=token, **kwargs)

    async def post(self, path: str, token: Optional[str] = None, **kwargs) -> Any:
        return await self.request('POST', path, token=token, **kwargs)

    async def put(self, path: str, token: Optional[str] = None, **kwargs) -> Any:
        return await self.request('PUT', path, token=token, **kwargs)

    async def patch(self, path: str, token: Optional[str] = None, **kwargs) -> Any:
        return await self.request('PATCH', path, token=token, **kwargs)

    async def delete(self, path: str, token: Optional[str] = None, **kwargs) -> Any:
        return await self.request('DELETE', path, token=token, **kwargs)
