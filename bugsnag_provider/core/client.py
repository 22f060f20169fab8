"""
BugsnagClient - Bugsnag Data Access API 异步客户端

特性:
- 自动注入认证头 (Authorization: token <API_TOKEN>)
- 固定超时，不做重试
- 响应在 async with 作用域内读取并释放，任何分支都只消费一次
- 统一的状态码分类: 429 -> RateLimited, 其他非 2xx -> UnexpectedStatus
"""

import json
import logging
from typing import Any, Dict, Optional

import httpx

from bugsnag_provider.core.config import DEFAULT_API_BASE_URL
from bugsnag_provider.core.errors import (
    API_DOCS_URL,
    DecodeError,
    RateLimited,
    TransportError,
    UnexpectedStatus,
)

logger = logging.getLogger(__name__)

# HTTP 请求超时配置（秒）
HTTP_TIMEOUT = 10.0

HTTP_TOO_MANY_REQUESTS = 429


def _mask_token(token: str, visible_chars: int = 4) -> str:
    """对 token 进行脱敏处理，仅显示前几个字符"""
    if not token or len(token) <= visible_chars:
        return "***"
    return f"{token[:visible_chars]}***"


class BugsnagAuth(httpx.Auth):
    """为每个请求注入 Authorization 头，没有豁免的请求"""

    def __init__(self, api_token: str):
        self.api_token = api_token

    def auth_flow(self, request: httpx.Request):
        request.headers["Authorization"] = f"token {self.api_token}"
        yield request


class BugsnagClient:
    def __init__(
        self,
        api_token: str,
        organization_id: str,
        base_url: Optional[str] = None,
        timeout: float = HTTP_TIMEOUT,
    ):
        self.organization_id = organization_id
        self.host_url = f"{(base_url or DEFAULT_API_BASE_URL).rstrip('/')}/{organization_id}"
        logger.info(
            "Initializing BugsnagClient with host_url=%s, token=%s",
            self.host_url,
            _mask_token(api_token),
        )
        self.client = httpx.AsyncClient(
            base_url=self.host_url,
            headers={"Accept": "application/json"},
            auth=BugsnagAuth(api_token),
            timeout=httpx.Timeout(timeout),
            trust_env=False,
        )

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """
        发送请求并完整读取响应体

        Args:
            method: HTTP 方法
            path: 相对 host_url 的路径，或完整 URL（分页 next 链接）
            params: 查询参数

        Returns:
            已读取 body 的 httpx.Response（底层连接已释放）

        Raises:
            TransportError: 请求构造失败或网络错误
        """
        logger.debug("Making %s request to %s params=%s", method, path, params)
        try:
            async with self.client.stream(method, path, params=params) as response:
                await response.aread()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise TransportError(f"Unexpected error: {e}") from e

        logger.debug("Response status: %d from %s", response.status_code, path)
        return response

    def check_status(
        self, response: httpx.Response, doc_url: str = API_DOCS_URL
    ) -> None:
        """
        响应状态分类

        Raises:
            RateLimited: 429
            UnexpectedStatus: 其他非 2xx 状态，携带原始响应体
        """
        if response.is_success:
            logger.info(
                "Request successful: %s %s -> %d",
                response.request.method,
                response.request.url.path,
                response.status_code,
            )
            return

        if response.status_code == HTTP_TOO_MANY_REQUESTS:
            logger.warning("Rate limited on %s", response.request.url.path)
            raise RateLimited()

        logger.error(
            "HTTP error %d from %s: %s",
            response.status_code,
            response.request.url.path,
            response.text[:200],
        )
        raise UnexpectedStatus(response.status_code, response.text, doc_url)

    def decode(self, response: httpx.Response) -> Any:
        """解析 JSON 响应体，失败时视为本次操作的致命错误"""
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error("Failed to decode response from %s: %s", response.request.url.path, e)
            raise DecodeError(e, response.text) from e

    async def test_auth(self) -> int:
        """
        校验凭证：GET 组织根路径

        Returns:
            原始状态码，由调用方分类（200 正常，429 限流，其他为凭证/地址无效）
        """
        response = await self.request("GET", self.host_url)
        return response.status_code

    async def close(self):
        """关闭客户端连接"""
        logger.info("Closing BugsnagClient connection")
        await self.client.aclose()
