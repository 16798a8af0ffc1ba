"""
Page Bridge - 在 Playwright 打开的页面上挂载控制通道

启动后连接 ws://PAGE_BRIDGE_HOST:PAGE_BRIDGE_PORT，响应控制端的
getUIMap / getScreenshot / applyTheme / ping 消息，直到页面被关闭。

依赖安装：
    pip install -e .
    playwright install chromium

运行示例：
    PAGE_BRIDGE_TARGET_URL=https://example.com python web_bridge.py
"""

import asyncio
import logging
import os

from dotenv import load_dotenv
from playwright.async_api import async_playwright

from pagebridge import create_bridge, load_config

# 加载 .env 文件中的环境变量
load_dotenv()

TARGET_URL = os.getenv("PAGE_BRIDGE_TARGET_URL", "about:blank")
HEADLESS = os.getenv("PAGE_BRIDGE_HEADLESS", "0") == "1"


async def main():
    config = load_config(dotenv=False)
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s [%(name)s] %(message)s",
    )

    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=HEADLESS)
        page = await browser.new_page()
        await page.goto(TARGET_URL)

        bridge = create_bridge(page, config)
        if bridge is not None:
            logging.getLogger(__name__).info("调试状态: %s", bridge.status())

        # 页面关闭前一直保持通道
        await page.wait_for_event("close", timeout=0)
        if bridge is not None:
            bridge.close()
        await browser.close()


if __name__ == "__main__":
    asyncio.run(main())
