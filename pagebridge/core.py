"""页面桥接核心类：把扫描、截图、主题应用挂到控制通道上"""

import logging
from typing import Any, Dict, List, Optional

from playwright.async_api import Page

from . import protocol
from .config import BridgeConfig, load_config
from .connection import ConnectionManager, Scheduler, TransportFactory, loop_scheduler, websocket_factory
from .dom import Document, PlaywrightDocument
from .models import ApplyResult, ElementRecord
from .scanner import Scanner
from .screenshot import PlaywrightRenderer, Renderer, capture
from .theme import ThemeApplicator

logger = logging.getLogger(__name__)


class PageBridge:
    """
    页面桥接。

    由 create_bridge() 构造并返回，同时作为调试句柄：
    ping() / scan() / status() / close() / restart()
    """

    def __init__(
        self,
        document: Document,
        config: BridgeConfig,
        renderer: Optional[Renderer] = None,
        transport_factory: TransportFactory = websocket_factory,
        scheduler: Scheduler = loop_scheduler,
    ):
        self.config = config
        self.document = document
        self.scanner = Scanner(document)
        self.theme = ThemeApplicator(document)
        self.renderer = renderer
        self.connection = ConnectionManager(config, transport_factory, scheduler)

        self.connection.register(protocol.PING, self._on_ping)
        self.connection.register(protocol.GET_UI_MAP, self._on_get_ui_map)
        self.connection.register(protocol.GET_SCREENSHOT, self._on_get_screenshot)
        self.connection.register(protocol.APPLY_THEME, self._on_apply_theme)

    def start(self) -> None:
        self.connection.connect()

    # ── 调试句柄 ──────────────────────────────

    def ping(self) -> bool:
        return self.connection.send(protocol.ping())

    async def scan(self) -> List[ElementRecord]:
        return await self.scanner.scan()

    def status(self) -> Dict[str, Any]:
        return {
            "connected": self.connection.is_open,
            "state": self.connection.state.value,
            "attempts": self.connection.attempts,
            "channel": self.connection.channel_state,
        }

    def close(self) -> None:
        self.connection.close()

    def restart(self) -> None:
        self.connection.restart()

    # ── 入站消息处理 ──────────────────────────

    def _on_ping(self, message: Dict[str, Any]) -> None:
        self.connection.send(protocol.pong())

    async def _on_get_ui_map(self, message: Dict[str, Any]) -> None:
        try:
            records = await self.scanner.scan()
            meta = await self.document.page_meta()
        except Exception as e:
            logger.warning("❌ 扫描失败: %s", e)
            return
        self.connection.send(protocol.ui_map(records, meta))
        logger.info("✓ 已发送 UI 地图（%d 个元素）", len(records))

    async def _on_get_screenshot(self, message: Dict[str, Any]) -> None:
        screen = message.get("screen") or protocol.DEFAULT_SCREEN
        data = await capture(self.renderer)
        self.connection.send(protocol.screenshot(screen, data))

    async def _on_apply_theme(self, message: Dict[str, Any]) -> None:
        # 补丁通常放在 data 字段里，也接受直接放在消息顶层
        if "data" in message:
            payload = message["data"]
        else:
            payload = {key: message[key] for key in ("cssVars", "elements") if key in message}
        result: ApplyResult = await self.theme.apply(payload)
        self.connection.send(protocol.apply_ack(result))


def should_attach(url: str, config: BridgeConfig) -> bool:
    return not config.attach_pattern or config.attach_pattern in url


def create_bridge(
    page: Page,
    config: Optional[BridgeConfig] = None,
    renderer: Optional[Renderer] = None,
    document: Optional[Document] = None,
    transport_factory: TransportFactory = websocket_factory,
    scheduler: Scheduler = loop_scheduler,
    start: bool = True,
) -> Optional[PageBridge]:
    """
    构造并启动页面桥接，返回调试句柄。

    任何初始化异常都只记录日志并返回 None，不影响宿主页面。
    需要在运行中的事件循环内调用。
    """
    try:
        config = config or load_config()
        if not should_attach(page.url, config):
            logger.info("页面 %s 不匹配 %r，跳过", page.url, config.attach_pattern)
            return None
        if renderer is None and config.screenshots:
            renderer = PlaywrightRenderer(page)
        bridge = PageBridge(
            document or PlaywrightDocument(page),
            config,
            renderer=renderer,
            transport_factory=transport_factory,
            scheduler=scheduler,
        )
        if start:
            bridge.start()
        return bridge
    except Exception:
        logger.exception("⚠ 页面桥接初始化失败（非关键）")
        return None
