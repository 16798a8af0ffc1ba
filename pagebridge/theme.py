"""主题模块：应用远端下发的 CSS 变量和元素内联样式"""

import logging
from typing import Any

from .dom import Document
from .models import ApplyResult, ThemePatch

logger = logging.getLogger(__name__)


class ThemeApplicator:
    def __init__(self, document: Document):
        self.document = document

    async def apply(self, patch: Any) -> ApplyResult:
        """
        应用主题补丁，永不抛出异常。

        1. cssVars 逐个设置到 document.documentElement
        2. elements 中每个 selector 只作用于第一个匹配元素，
           样式为合并而非替换；找不到元素时跳过，不算失败
        """
        try:
            if not isinstance(patch, ThemePatch):
                patch = ThemePatch.from_payload(patch)

            for name, value in patch.css_vars.items():
                await self.document.set_root_property(name, value)

            for entry in patch.elements:
                matched = await self.document.merge_inline_style(entry.selector, entry.style)
                if not matched:
                    logger.debug("跳过未匹配的选择器 %s", entry.selector)
        except Exception as e:
            logger.warning("❌ 主题应用失败: %s", e)
            return ApplyResult(success=False, error=str(e))

        logger.info("✓ 主题已应用（%d 个变量, %d 个元素）", len(patch.css_vars), len(patch.elements))
        return ApplyResult(success=True)
