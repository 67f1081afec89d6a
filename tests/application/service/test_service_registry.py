"""ServiceRegistry 测试"""

import threading
from typing import Any, Dict, List
from unittest.mock import Mock

import pytest

from application.service.services.service_registry import (
    ServiceRegistry,
    get_registry,
    init_registry,
    reset_registry,
)
from domain.common.exceptions import ServiceConfigurationException
from domain.service.services.local_service_table import LocalServiceTable
from domain.service.services.service_descriptor_loader import ServiceDescriptorLoader
from domain.service.value_objects.service_enums import ServiceLocality


def make_loader(records: List[Dict[str, Any]]) -> Mock:
    """创建返回固定记录的 Mock 加载器"""
    loader = Mock(spec=ServiceDescriptorLoader)
    loader.load.return_value = records
    return loader


IMAP_LOCAL = {"protocol": "imap", "identity_type": "mail.imap", "local_handler_ref": "X"}
EAS_REMOTE = {"protocol": "eas", "identity_type": "mail.exchange", "remote_address": "http://127.0.0.1:8703"}


class TestRegistryLookup:
    """查询测试"""

    def test_lookup_local_descriptor(self):
        """测试只声明本地引用的描述被接受为 Local"""
        registry = ServiceRegistry(loader=make_loader([IMAP_LOCAL]))

        descriptor = registry.lookup("imap")

        assert descriptor is not None
        assert descriptor.locality == ServiceLocality.LOCAL

    def test_lookup_minimal_local_descriptor(self):
        """测试只有协议与本地引用的最小描述被接受"""
        registry = ServiceRegistry(loader=make_loader([{"protocol": "imap", "local_handler_ref": "X"}]))

        descriptor = registry.lookup("imap")

        assert descriptor is not None
        assert descriptor.locality == ServiceLocality.LOCAL
        assert descriptor.local_handler_ref == "X"
        assert descriptor.identity_type is None

    def test_lookup_unknown_returns_none(self):
        """测试未知协议返回 None"""
        registry = ServiceRegistry(loader=make_loader([IMAP_LOCAL]))

        assert registry.lookup("pop3") is None

    def test_lookup_none_returns_none(self):
        """测试 None 协议返回 None 且不触发填充"""
        loader = make_loader([IMAP_LOCAL])
        registry = ServiceRegistry(loader=loader)

        assert registry.lookup(None) is None
        loader.load.assert_not_called()

    def test_list_preserves_declaration_order(self):
        """测试 list 按声明顺序返回"""
        registry = ServiceRegistry(loader=make_loader([EAS_REMOTE, IMAP_LOCAL]))

        assert [d.protocol for d in registry.list()] == ["eas", "imap"]

    def test_population_happens_once(self):
        """测试多次查询只加载一次"""
        loader = make_loader([IMAP_LOCAL, EAS_REMOTE])
        registry = ServiceRegistry(loader=loader)

        first = registry.list()
        registry.lookup("imap")
        registry.lookup("eas")
        second = registry.list()

        assert first == second
        assert loader.load.call_count == 1
        assert registry.is_populated is True

    def test_duplicate_protocol_last_wins(self):
        """测试重复协议以最后一条为准"""
        duplicate = {"protocol": "imap", "identity_type": "mail.imap2", "local_handler_ref": "Y"}
        registry = ServiceRegistry(loader=make_loader([IMAP_LOCAL, EAS_REMOTE, duplicate]))

        assert registry.lookup("imap").identity_type == "mail.imap2"
        assert [d.protocol for d in registry.list()] == ["eas", "imap"]


class TestRegistryConfigurationErrors:
    """配置错误测试"""

    def test_both_local_and_remote_fails_population(self):
        """测试同时声明本地与远程时填充失败且不发布快照"""
        bad = {
            "protocol": "imap",
            "identity_type": "mail.imap",
            "local_handler_ref": "X",
            "remote_address": "http://127.0.0.1:8702",
        }
        loader = make_loader([bad])
        registry = ServiceRegistry(loader=loader)

        with pytest.raises(ServiceConfigurationException):
            registry.lookup("imap")
        with pytest.raises(ServiceConfigurationException):
            registry.lookup("imap")

        assert registry.is_populated is False
        assert loader.load.call_count == 2

    def test_loader_error_propagates(self):
        """测试加载器异常直接抛出"""
        loader = Mock(spec=ServiceDescriptorLoader)
        loader.load.side_effect = ServiceConfigurationException(reason="Services file not found: x")
        registry = ServiceRegistry(loader=loader)

        with pytest.raises(ServiceConfigurationException):
            registry.list()

    def test_unregistered_local_ref_rejected(self):
        """测试本地引用未登记时填充失败"""
        registry = ServiceRegistry(loader=make_loader([IMAP_LOCAL]), local_services=LocalServiceTable())

        with pytest.raises(ServiceConfigurationException) as exc_info:
            registry.lookup("imap")

        assert exc_info.value.protocol == "imap"

    def test_registered_local_ref_accepted(self):
        """测试本地引用已登记时正常填充"""
        table = LocalServiceTable()
        table.add("X", object)
        registry = ServiceRegistry(loader=make_loader([IMAP_LOCAL]), local_services=table)

        assert registry.lookup("imap") is not None


class TestRegistryConcurrency:
    """并发首次访问测试"""

    def test_concurrent_first_access_populates_once(self):
        """测试并发首次访问只填充一次且结果一致"""
        gate = threading.Event()
        calls = []

        class SlowLoader(ServiceDescriptorLoader):
            def load(self):
                calls.append(1)
                gate.wait(timeout=1)
                return [IMAP_LOCAL, EAS_REMOTE]

        registry = ServiceRegistry(loader=SlowLoader())
        results = []
        results_lock = threading.Lock()

        def worker():
            protocols = {d.protocol for d in registry.list()}
            with results_lock:
                results.append(protocols)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        gate.set()
        for t in threads:
            t.join()

        assert len(calls) == 1
        assert results == [{"imap", "eas"}] * 8


class TestRegistryLifecycle:
    """进程级注册表测试"""

    @pytest.fixture(autouse=True)
    def clean_registry(self):
        reset_registry()
        yield
        reset_registry()

    def test_get_before_init_raises(self):
        """测试未初始化时获取抛出异常"""
        with pytest.raises(RuntimeError):
            get_registry()

    def test_init_is_idempotent(self):
        """测试重复初始化返回同一实例"""
        first = init_registry(make_loader([IMAP_LOCAL]))
        second = init_registry(make_loader([EAS_REMOTE]))

        assert first is second
        assert get_registry() is first
        assert get_registry().lookup("imap") is not None

    def test_reset_clears_snapshot(self):
        """测试 reset 后重新加载"""
        loader = make_loader([IMAP_LOCAL])
        registry = ServiceRegistry(loader=loader)
        registry.list()

        registry.reset()
        registry.list()

        assert loader.load.call_count == 2
