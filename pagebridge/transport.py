"""传输层：通道事件接口（open / message / error / close）与 websockets 实现"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Dict, Optional

import websockets
from websockets.exceptions import ConnectionClosed, ConnectionClosedOK

logger = logging.getLogger(__name__)

CONNECTING = "connecting"
OPEN = "open"
CLOSING = "closing"
CLOSED = "closed"

Handler = Callable[..., Any]


class Transport:
    """
    通道接口。每个实例只代表一次连接，ConnectionManager 每次重连都新建一个。

    通过 on_open / on_message / on_error / on_close 注册处理函数；
    处理函数可以是普通函数，也可以是协程函数。
    """

    def __init__(self):
        self._handlers: Dict[str, Optional[Handler]] = {
            "open": None,
            "message": None,
            "error": None,
            "close": None,
        }
        self.ready_state = CLOSED

    def on_open(self, handler: Handler) -> None:
        self._handlers["open"] = handler

    def on_message(self, handler: Handler) -> None:
        self._handlers["message"] = handler

    def on_error(self, handler: Handler) -> None:
        self._handlers["error"] = handler

    def on_close(self, handler: Handler) -> None:
        self._handlers["close"] = handler

    async def emit(self, event: str, *args: Any) -> None:
        handler = self._handlers.get(event)
        if handler is None:
            return
        result = handler(*args)
        if inspect.isawaitable(result):
            await result

    def open(self) -> None:
        raise NotImplementedError

    def send(self, data: str) -> bool:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError


class WebSocketTransport(Transport):
    """基于 websockets 的异步客户端；发送走队列，由写协程依次写出"""

    def __init__(self, url: str, open_timeout: float = 10.0):
        super().__init__()
        self.url = url
        self.open_timeout = open_timeout
        self._ws = None
        self._outbox: "asyncio.Queue[str]" = asyncio.Queue()
        self._task: Optional[asyncio.Task] = None
        self._closer: Optional[asyncio.Task] = None

    def open(self) -> None:
        # 没有运行中的事件循环时直接抛出 RuntimeError，由调用方处理
        loop = asyncio.get_running_loop()
        self.ready_state = CONNECTING
        self._task = loop.create_task(self._run())

    def send(self, data: str) -> bool:
        if self.ready_state != OPEN:
            return False
        self._outbox.put_nowait(data)
        return True

    def close(self) -> None:
        if self.ready_state in (CLOSING, CLOSED):
            return
        self.ready_state = CLOSING
        if self._ws is not None:
            self._closer = asyncio.get_running_loop().create_task(self._ws.close())
        elif self._task is not None:
            self._task.cancel()

    async def _run(self) -> None:
        try:
            self._ws = await websockets.connect(self.url, open_timeout=self.open_timeout)
        except asyncio.CancelledError:
            self.ready_state = CLOSED
            await self.emit("close")
            return
        except Exception as e:
            # 非法地址等也会在这里抛出（如端口越界时的 ValueError）
            self.ready_state = CLOSED
            await self.emit("error", e)
            await self.emit("close")
            return

        if self.ready_state == CLOSING:
            await self._ws.close()
            self.ready_state = CLOSED
            await self.emit("close")
            return

        self.ready_state = OPEN
        writer = asyncio.get_running_loop().create_task(self._write_loop())
        try:
            await self.emit("open")
            async for raw in self._ws:
                try:
                    await self.emit("message", raw)
                except Exception as e:
                    # 单条消息出错只丢弃该消息，不影响通道
                    logger.warning("⚠ 丢弃出错的入站消息: %s", e)
        except ConnectionClosedOK:
            pass
        except ConnectionClosed as e:
            await self.emit("error", e)
        finally:
            writer.cancel()
            await self._ws.close()
            self.ready_state = CLOSED
            await self.emit("close")

    async def _write_loop(self) -> None:
        while True:
            data = await self._outbox.get()
            try:
                await self._ws.send(data)
            except ConnectionClosed:
                return
