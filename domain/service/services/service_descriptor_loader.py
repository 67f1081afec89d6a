"""服务描述加载器接口"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List


RawServiceDescriptor = Dict[str, Any]


class ServiceDescriptorLoader(ABC):
    """
    服务描述加载器接口

    从配置资源读取原始描述记录，具体格式由基础设施层实现决定。
    """

    @abstractmethod
    def load(self) -> List[RawServiceDescriptor]:
        """
        加载全部原始描述记录

        记录字段名与 ServiceDescriptor 的属性名一致。

        Returns:
            原始描述记录列表（保持资源中的声明顺序）

        Raises:
            ServiceConfigurationException: 如果资源无法读取或解析
        """
        raise NotImplementedError
