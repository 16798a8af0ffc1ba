"""连接管理：通道生命周期、指数退避重连、入站消息分发

所有通道错误都在这里被吸收并转换为重连流程，不会抛给宿主页面。
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from . import protocol
from .config import BridgeConfig
from .models import ConnectionState
from .transport import Transport, WebSocketTransport

logger = logging.getLogger(__name__)

MessageHandler = Callable[[Dict[str, Any]], Union[None, Awaitable[None]]]
TransportFactory = Callable[[BridgeConfig], Transport]
# (延迟秒数, 回调) -> 可取消的句柄
Scheduler = Callable[[float, Callable[[], None]], Any]


def websocket_factory(config: BridgeConfig) -> Transport:
    return WebSocketTransport(config.url, open_timeout=config.open_timeout)


def loop_scheduler(delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
    return asyncio.get_running_loop().call_later(delay, callback)


class ConnectionManager:
    """
    状态机：Disconnected -> Connecting -> Open -> (close) -> Reconnecting -> Connecting ...

    - 每次成功连接后 attempts 归零
    - 非主动关闭时 attempts + 1，延迟 base * factor^(attempts-1) 后重连
    - attempts 达到 max_attempts 后不再重连，直到 restart()
    """

    def __init__(
        self,
        config: BridgeConfig,
        transport_factory: TransportFactory = websocket_factory,
        scheduler: Scheduler = loop_scheduler,
    ):
        self.config = config
        self.transport_factory = transport_factory
        self.scheduler = scheduler
        self.state = ConnectionState.DISCONNECTED
        self.attempts = 0
        self.handlers: Dict[str, MessageHandler] = {}
        self._transport: Optional[Transport] = None
        self._timer: Any = None
        self._closing = False

    @property
    def is_open(self) -> bool:
        return self.state == ConnectionState.OPEN

    @property
    def channel_state(self) -> Optional[str]:
        return self._transport.ready_state if self._transport is not None else None

    def register(self, message_type: str, handler: MessageHandler) -> None:
        self.handlers[message_type] = handler

    # ── 生命周期 ──────────────────────────────

    def connect(self) -> None:
        if self.state in (ConnectionState.OPEN, ConnectionState.CONNECTING):
            return
        self._cancel_timer()
        self._closing = False

        self.state = ConnectionState.CONNECTING
        try:
            transport = self.transport_factory(self.config)
            transport.on_open(lambda: self._handle_open(transport))
            transport.on_message(lambda raw: self._handle_message(transport, raw))
            transport.on_error(lambda exc=None: self._handle_error(transport, exc))
            transport.on_close(lambda: self._handle_close(transport))
            self._transport = transport
            transport.open()
        except Exception as e:
            logger.warning("⚠ 无法打开通道 %s: %s", self.config.url, e)
            self._transport = None
            self.state = ConnectionState.DISCONNECTED
            self.schedule_reconnect()

    def close(self) -> None:
        """主动关闭，不触发重连"""
        self._closing = True
        self._cancel_timer()
        transport, self._transport = self._transport, None
        self.state = ConnectionState.DISCONNECTED
        if transport is not None:
            try:
                transport.close()
            except Exception as e:
                logger.warning("⚠ 关闭通道出错: %s", e)

    def restart(self) -> None:
        """外部重启：清空重连计数后重新连接"""
        self.close()
        self.attempts = 0
        self.connect()

    def schedule_reconnect(self) -> bool:
        if self._timer is not None:
            return True
        if self.attempts >= self.config.max_attempts:
            logger.error("❌ 已重试 %d 次，停止重连", self.attempts)
            self.state = ConnectionState.DISCONNECTED
            return False

        self.attempts += 1
        delay_ms = self.config.reconnect_delay_ms(self.attempts)
        try:
            self._timer = self.scheduler(delay_ms / 1000, self._on_timer)
        except RuntimeError as e:
            logger.warning("⚠ 无法安排重连: %s", e)
            self.state = ConnectionState.DISCONNECTED
            return False

        self.state = ConnectionState.RECONNECTING
        logger.info("⏳ %.0fms 后第 %d 次重连", delay_ms, self.attempts)
        return True

    def _on_timer(self) -> None:
        self._timer = None
        self.connect()

    def _cancel_timer(self) -> None:
        timer, self._timer = self._timer, None
        if timer is not None and hasattr(timer, "cancel"):
            timer.cancel()

    # ── 发送 ──────────────────────────────────

    def send(self, message: Dict[str, Any]) -> bool:
        """仅在 Open 状态写出；否则丢弃并返回 False"""
        if self.state != ConnectionState.OPEN or self._transport is None:
            logger.debug("通道未打开，丢弃 %s", message.get("type"))
            return False
        try:
            return self._transport.send(protocol.encode(message))
        except Exception as e:
            logger.warning("⚠ 发送 %s 失败: %s", message.get("type"), e)
            return False

    # ── 通道事件 ──────────────────────────────

    def _handle_open(self, transport: Transport) -> None:
        if transport is not self._transport:
            return
        self.attempts = 0
        self.state = ConnectionState.OPEN
        logger.info("✓ 已连接 %s", self.config.url)
        self.send(protocol.hello(self.config.source, legacy=self.config.legacy_greeting))

    async def _handle_message(self, transport: Transport, raw: Any) -> None:
        if transport is not self._transport:
            return
        try:
            message = protocol.decode(raw)
        except protocol.ProtocolError as e:
            logger.warning("⚠ 丢弃无法解析的消息: %s", e)
            return

        message_type = message["type"]
        handler = self.handlers.get(message_type)
        if handler is None:
            logger.info("忽略未知消息类型 %s", message_type)
            return

        try:
            result = handler(message)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("❌ 处理 %s 消息失败", message_type)

    def _handle_error(self, transport: Transport, exc: Optional[BaseException]) -> None:
        if transport is not self._transport:
            return
        logger.warning("⚠ 通道不可用: %s", exc)
        if self.state == ConnectionState.CONNECTING:
            self._transport = None
            self.state = ConnectionState.DISCONNECTED
            self.schedule_reconnect()

    def _handle_close(self, transport: Transport) -> None:
        if transport is not self._transport:
            return
        self._transport = None
        self.state = ConnectionState.DISCONNECTED
        if self._closing:
            return
        logger.info("通道已关闭")
        self.schedule_reconnect()
