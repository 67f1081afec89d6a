"""HTTP 远程服务传输实现"""

import logging
from typing import Any, Dict, Optional

import httpx

from domain.common.exceptions import ServiceTransportException
from domain.service.services.service_transport import ServiceTransport


class HttpServiceTransport(ServiceTransport):
    """HTTP 远程服务传输实现

    使用 httpx 与远程后端通信，约定三个端点：
    - GET  {address}/health            存活探测
    - POST {address}/start             启动信号
    - POST {address}/rpc/{operation}   操作转发，响应体为 {"result": ...}

    Attributes:
        TIMEOUT: 默认请求超时时间（秒）
    """

    TIMEOUT: float = 10.0

    def __init__(
        self,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """初始化传输

        Args:
            timeout: 请求超时时间（秒），默认 TIMEOUT
            client: httpx 客户端（可选，测试时注入 MockTransport）
            logger: 日志记录器（可选）
        """
        self._timeout = timeout if timeout is not None else self.TIMEOUT
        self._client = client or httpx.Client(timeout=self._timeout)
        self._logger = logger or logging.getLogger(__name__)

    def probe(self, address: str) -> bool:
        """探测远程服务，2xx 视为可达；任何请求错误视为不可达"""
        url = f"{address.rstrip('/')}/health"
        try:
            response = self._client.get(url, timeout=self._timeout)
        except httpx.HTTPError as e:
            self._logger.debug(f"Probe failed: {url} - {e}")
            return False

        return 200 <= response.status_code < 300

    def start(self, address: str) -> None:
        """发送启动信号"""
        url = f"{address.rstrip('/')}/start"
        response = self._post(url, {}, address)
        self._logger.info(f"Start signal sent: {url} (status {response.status_code})")

    def call(self, address: str, operation: str, params: Dict[str, Any]) -> Any:
        """转发操作并返回 result 字段"""
        url = f"{address.rstrip('/')}/rpc/{operation}"
        response = self._post(url, params, address)

        try:
            body = response.json()
        except ValueError as e:
            raise ServiceTransportException(
                f"Invalid response from {url}: {e}", address=address
            ) from e

        if not isinstance(body, dict) or "result" not in body:
            raise ServiceTransportException(
                f"Malformed response from {url}: missing 'result'", address=address
            )
        return body["result"]

    def close(self) -> None:
        """关闭底层客户端"""
        self._client.close()

    def _post(self, url: str, payload: Dict[str, Any], address: str) -> httpx.Response:
        try:
            response = self._client.post(
                url,
                json=payload,
                timeout=self._timeout,
                headers={"Content-Type": "application/json"},
            )
        except httpx.TimeoutException as e:
            self._logger.warning(f"Remote service timeout: {url}")
            raise ServiceTransportException(f"Request timeout: {url}", address=address) from e
        except httpx.RequestError as e:
            self._logger.warning(f"Remote service error: {url} - {e}")
            raise ServiceTransportException(f"Request error: {e}", address=address) from e

        if not 200 <= response.status_code < 300:
            self._logger.warning(f"Remote service failed: {url} - HTTP {response.status_code}")
            raise ServiceTransportException(
                f"HTTP {response.status_code} from {url}", address=address
            )
        return response
