"""账号类型迁移处理器"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Dict, Iterator, Mapping, Optional, Union

from application.account.services.identity_provisioning_service import IdentityProvisioningService
from application.commands.account.migrate_account_type import (
    MigrateAccountTypeCommand,
    MigrateAccountTypeResult,
)
from application.service.services.service_registry import ServiceRegistry
from domain.account.entities.account import Account
from domain.account.entities.host_auth import HostAuth
from domain.account.repositories.account_repository import AccountRepository
from domain.common.exceptions import (
    DomainException,
    EntityNotFoundException,
    SagaStepFailureException,
    SyncStateAccessException,
)
from domain.identity.services.identity_store import IdentityStore
from domain.identity.value_objects.identity import Identity
from domain.identity.value_objects.sync_authority import SyncAuthority
from domain.sync_state.services.sync_cursor_store import SyncCursorStore


@dataclass
class MigrationContext:
    """
    单次迁移的上下文，仅在 handle() 调用期间存在

    Attributes:
        account: 账号快照
        host_auth: 收件 HostAuth 快照
        old_protocol: 原协议
        old_identity: 旧身份
        new_protocol: 新协议
        new_identity_type: 新身份类型
        cursor_identity_type: 写回游标使用的身份类型（来自映射，可能为空）
        email / contacts / calendar: 旧身份的同步开关
        calendar_cursor / contacts_cursor: 读取到的同步游标
    """

    account: Account
    host_auth: HostAuth
    old_protocol: str
    old_identity: Identity
    new_protocol: str
    new_identity_type: str
    cursor_identity_type: Optional[str] = None
    email: bool = False
    contacts: bool = False
    calendar: bool = False
    calendar_cursor: Optional[bytes] = None
    contacts_cursor: Optional[bytes] = None


@contextmanager
def incomplete_flag(
    repository: AccountRepository,
    account: Account,
    logger: logging.Logger,
) -> Iterator[int]:
    """
    在迁移期间为账号设置 incomplete 标志

    退出时（无论成功、失败或异常）恢复为进入前的标志位，
    防止迁移中途的账号被与身份存储的自动对账删除。
    恢复失败时：若迁移本身已失败，只记录日志并保留原异常；否则抛出。

    Yields:
        进入前的标志位
    """
    prior_flags = account.mark_incomplete()
    repository.set_flags(account.id, account.flags)
    failed = False
    try:
        yield prior_flags
    except BaseException:
        failed = True
        raise
    finally:
        account.restore_flags(prior_flags)
        try:
            repository.set_flags(account.id, prior_flags)
        except Exception as e:
            logger.error(f"[Incomplete flag restore FAILED] account {account.id}: {e}")
            if not failed:
                raise
        else:
            logger.info(f"[Incomplete flag cleared] account {account.id}")


class MigrateAccountTypeHandler:
    """
    账号类型迁移处理器

    将账号从旧的 (协议, 身份类型) 迁移到映射给出的新组合，并保留
    日历/联系人的增量同步游标。

    业务流程：
    1. 查找账号、HostAuth、新旧服务描述与旧身份（任一缺失则不做任何修改）
    2. 设置 incomplete 标志（退出时无条件恢复）
    3. HostAuth 指向新协议
    4. 读取旧身份的同步开关与同步游标（读取失败视为无游标）
    5. 以新身份类型创建身份
    6. 删除旧身份
    7. 将同步游标写回新身份（写入失败仅记录日志）

    第 3 至 6 步的任何异常都会触发补偿，保证账号始终只保留一个身份，
    随后抛出 SagaStepFailureException。
    """

    def __init__(
        self,
        registry: ServiceRegistry,
        account_repository: AccountRepository,
        identity_store: IdentityStore,
        calendar_cursor_store: SyncCursorStore,
        contacts_cursor_store: SyncCursorStore,
        provisioning_service: IdentityProvisioningService,
        protocol_mapping: Optional[Mapping[str, str]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        初始化处理器

        Args:
            registry: 服务注册表
            account_repository: 账号仓储
            identity_store: 身份存储
            calendar_cursor_store: 日历同步游标存储
            contacts_cursor_store: 联系人同步游标存储
            provisioning_service: 身份创建服务
            protocol_mapping: 命令未携带映射时使用的默认协议映射
            logger: 日志记录器（可选）
        """
        self._registry = registry
        self._account_repository = account_repository
        self._identity_store = identity_store
        self._calendar_cursor_store = calendar_cursor_store
        self._contacts_cursor_store = contacts_cursor_store
        self._provisioning_service = provisioning_service
        self._protocol_mapping = dict(protocol_mapping or {})
        self._logger = logger or logging.getLogger(__name__)

    async def handle(self, command: MigrateAccountTypeCommand) -> MigrateAccountTypeResult:
        """
        处理账号类型迁移命令

        Args:
            command: 迁移命令

        Returns:
            MigrateAccountTypeResult 迁移结果

        Raises:
            SagaStepFailureException: 迁移步骤失败（已补偿，incomplete 标志已恢复）
        """
        if command.protocol_mapping is None:
            command = replace(command, protocol_mapping=self._protocol_mapping)

        looked_up = self._lookup(command)
        if isinstance(looked_up, MigrateAccountTypeResult):
            return looked_up
        context = looked_up

        self._logger.warning(
            f"Converting {context.account.email_address} from {context.old_protocol} "
            f"to {context.new_protocol}"
        )

        with incomplete_flag(self._account_repository, context.account, self._logger):
            step = "repoint_protocol"
            try:
                self._repoint_protocol(context, context.new_protocol)
                self._logger.info("Updated HostAuths")

                step = "capture_sync_state"
                self._capture_sync_state(context)

                step = "create_new_identity"
                new_identity = await self._create_new_identity(context)
            except Exception as e:
                self._point_back(context)
                raise SagaStepFailureException(
                    step=step,
                    account_id=context.account.id,
                    reason=self._describe(e),
                ) from e

            await self._delete_old_identity(context, new_identity)
            restored = self._restore_sync_state(context)
            self._logger.info(f"Account {context.account.id} update completed")

        return MigrateAccountTypeResult(
            success=True,
            account_id=command.account_id,
            migrated=True,
            old_protocol=context.old_protocol,
            new_protocol=context.new_protocol,
            identity_type=new_identity.type,
            restored_cursors=restored,
            message=f"Account converted to {context.new_protocol}",
        )

    def _lookup(
        self, command: MigrateAccountTypeCommand
    ) -> Union[MigrationContext, MigrateAccountTypeResult]:
        """收集迁移所需的全部信息；任一缺失返回未迁移结果"""
        account_id = command.account_id

        account = self._account_repository.get_by_id(account_id)
        if account is None:
            return self._not_migrated(account_id, "ACCOUNT_NOT_FOUND", f"Account {account_id} not found")

        host_auth = None
        if account.host_auth_recv_id is not None:
            host_auth = self._account_repository.get_host_auth(account.host_auth_recv_id)
        if host_auth is None:
            return self._not_migrated(
                account_id, "HOST_AUTH_NOT_FOUND", f"Account {account_id} has no receive HostAuth"
            )

        new_protocol = command.new_protocol_for(host_auth.protocol)
        if new_protocol is None:
            return MigrateAccountTypeResult(
                success=True,
                account_id=account_id,
                old_protocol=host_auth.protocol,
                message=f"Protocol '{host_auth.protocol}' does not need updating",
                error_code="NOT_MAPPED",
            )

        old_descriptor = self._registry.lookup(host_auth.protocol)
        new_descriptor = self._registry.lookup(new_protocol)
        if old_descriptor is None or new_descriptor is None:
            missing = host_auth.protocol if old_descriptor is None else new_protocol
            return self._not_migrated(
                account_id, "UNKNOWN_PROTOCOL", f"No service descriptor for protocol '{missing}'"
            )

        for descriptor in (old_descriptor, new_descriptor):
            if descriptor.identity_type is None:
                return self._not_migrated(
                    account_id,
                    "IDENTITY_TYPE_NOT_FOUND",
                    f"Service descriptor for protocol '{descriptor.protocol}' declares no identity type",
                )

        old_identity = self._identity_store.find_identity(
            account.email_address, old_descriptor.identity_type
        )
        if old_identity is None:
            return self._not_migrated(
                account_id,
                "IDENTITY_NOT_FOUND",
                f"No {old_descriptor.identity_type} identity for {account.email_address}",
            )

        return MigrationContext(
            account=account,
            host_auth=host_auth,
            old_protocol=host_auth.protocol,
            old_identity=old_identity,
            new_protocol=new_protocol,
            new_identity_type=new_descriptor.identity_type,
            cursor_identity_type=command.cursor_identity_type_for(host_auth.protocol),
        )

    def _repoint_protocol(self, context: MigrationContext, protocol: str) -> None:
        self._account_repository.update_host_auth_protocol(context.host_auth.id, protocol)

    def _point_back(self, context: MigrationContext) -> None:
        """将 HostAuth 指回旧协议；失败只记录日志，由调用方抛出步骤失败"""
        try:
            self._repoint_protocol(context, context.old_protocol)
        except Exception as e:
            self._logger.error(
                f"Failed to point HostAuth {context.host_auth.id} back to {context.old_protocol}: {e}"
            )

    def _capture_sync_state(self, context: MigrationContext) -> None:
        """读取旧身份的同步开关与同步游标"""
        old = context.old_identity
        store = self._identity_store

        context.email = (
            store.is_sync_enabled(old, SyncAuthority.EMAIL)
            or store.is_sync_enabled(old, SyncAuthority.LEGACY_EMAIL)
        )
        context.contacts = store.is_sync_enabled(old, SyncAuthority.CONTACTS)
        context.calendar = store.is_sync_enabled(old, SyncAuthority.CALENDAR)
        self._logger.info(
            f"Email: {context.email}, Contacts: {context.contacts}, Calendar: {context.calendar}"
        )

        context.calendar_cursor = self._read_cursor(self._calendar_cursor_store, old)
        context.contacts_cursor = self._read_cursor(self._contacts_cursor_store, old)

    def _read_cursor(self, store: SyncCursorStore, identity: Identity) -> Optional[bytes]:
        try:
            cursor = store.get_cursor(identity)
        except SyncStateAccessException as e:
            self._logger.warning(f"Get {store.authority} key FAILED: {e.message}")
            return None

        if cursor is not None:
            self._logger.info(f"Got {store.authority} key ({len(cursor)} bytes)")
        return cursor

    async def _create_new_identity(self, context: MigrationContext) -> Identity:
        """以新身份类型创建身份"""
        identity = await self._provisioning_service.provision(
            context.account,
            email=context.email,
            calendar=context.calendar,
            contacts=context.contacts,
        )
        if identity is None:
            raise EntityNotFoundException(entity="HostAuth", entity_id=context.account.host_auth_recv_id)

        self._logger.info(f"Created new identity {identity}")
        return identity

    async def _delete_old_identity(self, context: MigrationContext, new_identity: Identity) -> None:
        """删除旧身份；失败时撤销新身份并将 HostAuth 指回旧协议"""
        try:
            await self._identity_store.remove_identity(context.old_identity)
        except Exception as e:
            try:
                await self._identity_store.remove_identity(new_identity)
            except Exception as rollback_error:
                self._logger.error(
                    f"Failed to roll back new identity {new_identity}: {self._describe(rollback_error)}"
                )
            else:
                self._point_back(context)
            raise SagaStepFailureException(
                step="delete_old_identity",
                account_id=context.account.id,
                reason=self._describe(e),
            ) from e

        self._logger.info(f"Deleted old identity {context.old_identity}")

    def _restore_sync_state(self, context: MigrationContext) -> Dict[str, bool]:
        """将同步游标写回新身份命名空间"""
        restored = {
            self._calendar_cursor_store.authority: False,
            self._contacts_cursor_store.authority: False,
        }
        if context.cursor_identity_type is None:
            self._logger.info(
                f"No cursor identity type mapped for {context.old_protocol}, sync keys not restored"
            )
            return restored

        target = Identity(name=context.account.email_address, type=context.cursor_identity_type)
        for store, cursor in (
            (self._calendar_cursor_store, context.calendar_cursor),
            (self._contacts_cursor_store, context.contacts_cursor),
        ):
            if not cursor:
                continue
            try:
                store.set_cursor(target, cursor)
            except SyncStateAccessException as e:
                self._logger.warning(f"Set {store.authority} key FAILED: {e.message}")
                continue
            restored[store.authority] = True
            self._logger.info(f"Set {store.authority} key")
        return restored

    @staticmethod
    def _describe(error: Exception) -> str:
        if isinstance(error, DomainException):
            return error.message
        return f"{type(error).__name__}: {error}"

    @staticmethod
    def _not_migrated(account_id: int, error_code: str, message: str) -> MigrateAccountTypeResult:
        return MigrateAccountTypeResult(
            success=False,
            account_id=account_id,
            message=message,
            error_code=error_code,
        )
