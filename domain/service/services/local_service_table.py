"""本地服务实现表"""

from typing import Callable, Dict, Tuple, Type, TypeVar

from domain.common.exceptions import ServiceConfigurationException
from domain.service.services.email_service import EmailService


T = TypeVar("T")


class LocalServiceTable:
    """
    本地服务实现表

    以引用名登记进程内服务实现，服务描述中的 local_handler_ref
    指向这里的引用名。
    """

    def __init__(self) -> None:
        self._factories: Dict[str, Callable[[], EmailService]] = {}

    def register(self, ref: str) -> Callable[[Type[T]], Type[T]]:
        """
        类装饰器：以 ref 登记本地服务实现

        用法：
            @local_services.register("imap")
            class ImapService:
                ...
        """
        key = (ref or "").strip()
        if not key:
            raise ValueError("ref is required")

        def decorator(klass: Type[T]) -> Type[T]:
            # 同名后登记覆盖先登记
            self._factories[key] = klass  # type: ignore[assignment]
            return klass

        return decorator

    def add(self, ref: str, factory: Callable[[], EmailService]) -> None:
        """以工厂函数登记本地服务实现"""
        self.register(ref)(factory)  # type: ignore[arg-type]

    def contains(self, ref: str) -> bool:
        return ref in self._factories

    def create(self, ref: str) -> EmailService:
        """
        创建本地服务实例

        Raises:
            ServiceConfigurationException: 如果 ref 未登记
        """
        factory = self._factories.get(ref)
        if factory is None:
            raise ServiceConfigurationException(
                reason=f"Local handler not registered: {ref}"
            )
        return factory()

    def refs(self) -> Tuple[str, ...]:
        return tuple(self._factories)

    def clear(self) -> None:
        self._factories.clear()


local_services = LocalServiceTable()
