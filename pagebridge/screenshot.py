"""截图：可选的整页渲染能力，在构造时注入"""

import base64
import logging
from typing import Awaitable, Callable, Optional

from playwright.async_api import Page

logger = logging.getLogger(__name__)

PLACEHOLDER = "screenshot-unavailable"

# 整页图像 -> 编码后的图像数据
Renderer = Callable[[], Awaitable[str]]


class PlaywrightRenderer:
    def __init__(self, page: Page):
        self.page = page

    async def __call__(self) -> str:
        png = await self.page.screenshot(full_page=True, type="png")
        return "data:image/png;base64," + base64.b64encode(png).decode("ascii")


async def capture(renderer: Optional[Renderer]) -> str:
    """没有渲染器或渲染失败时返回占位符"""
    if renderer is None:
        return PLACEHOLDER
    try:
        return await renderer()
    except Exception as e:
        logger.warning("⚠ 截图失败: %s", e)
        return PLACEHOLDER
