"""远程服务传输接口"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class ServiceTransport(ABC):
    """
    远程服务传输接口

    负责远程服务的存活探测、启动信号与操作转发。
    """

    @abstractmethod
    def probe(self, address: str) -> bool:
        """
        探测远程服务是否可达

        Args:
            address: 远程服务地址

        Returns:
            True 如果服务可达
        """
        raise NotImplementedError

    @abstractmethod
    def start(self, address: str) -> None:
        """
        通知远程服务启动

        Raises:
            ServiceTransportException: 如果启动信号发送失败
        """
        raise NotImplementedError

    @abstractmethod
    def call(self, address: str, operation: str, params: Dict[str, Any]) -> Any:
        """
        调用远程服务操作

        Args:
            address: 远程服务地址
            operation: 操作名（EmailService 的方法名）
            params: 操作参数

        Returns:
            远程操作返回值

        Raises:
            ServiceTransportException: 如果调用失败
        """
        raise NotImplementedError
