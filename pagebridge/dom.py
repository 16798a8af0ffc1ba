"""页面访问层：候选元素查询、根节点 CSS 变量、内联样式合并"""

from typing import Dict, List, Sequence

from playwright.async_api import Page

from .models import ElementInfo, PageMeta
from .selector import TEST_ID_ATTRIBUTE

CANDIDATE_SELECTOR = ", ".join([
    "button",
    '[role="button"]',
    "a[href]",
    "input",
    '[class*="button"]',
    '[class*="btn"]',
    f"[{TEST_ID_ATTRIBUTE}]",
])

STYLE_PROPERTIES = (
    "backgroundColor",
    "color",
    "borderRadius",
    "fontSize",
    "fontWeight",
    "padding",
    "margin",
)

ATTRIBUTE_NAMES = ("class", "id", "type", TEST_ID_ATTRIBUTE)


class Document:
    """页面 DOM 的抽象，扫描器与主题应用只通过它访问页面"""

    async def query_candidates(self) -> List[ElementInfo]:
        raise NotImplementedError

    async def page_meta(self) -> PageMeta:
        raise NotImplementedError

    async def set_root_property(self, name: str, value: str) -> None:
        raise NotImplementedError

    async def merge_inline_style(self, selector: str, style: Dict[str, str]) -> bool:
        """把 style 合并到第一个匹配元素的内联样式上；无匹配返回 False"""
        raise NotImplementedError


_QUERY_JS = """
({ selector, styleProps, attrNames, testIdAttr }) => {
    const nodes = document.querySelectorAll(selector);
    return Array.from(nodes).map((el) => {
        const rect = el.getBoundingClientRect();
        const computed = window.getComputedStyle(el);
        const styles = {};
        for (const prop of styleProps) styles[prop] = computed[prop] || '';
        const attributes = {};
        for (const name of attrNames) attributes[name] = el.getAttribute(name);
        const parent = el.parentElement;
        return {
            tag: el.tagName.toLowerCase(),
            text: (el.textContent || '').trim(),
            className: el.getAttribute('class') || '',
            id: el.id || '',
            testId: el.getAttribute(testIdAttr) || '',
            role: el.getAttribute('role') || '',
            type: el.getAttribute('type') || '',
            rect: { x: rect.x, y: rect.y, width: rect.width, height: rect.height },
            styles,
            attributes,
            hasParent: !!parent,
            index: parent ? Array.prototype.indexOf.call(parent.children, el) + 1 : 0,
        };
    });
}
"""

_META_JS = """
() => ({
    url: window.location.href,
    width: window.innerWidth,
    height: window.innerHeight,
})
"""

_ROOT_PROPERTY_JS = """
([name, value]) => document.documentElement.style.setProperty(name, value)
"""

# 连字符属性名走 setProperty，驼峰属性名直接赋值（与 Object.assign(el.style, ...) 一致）
_MERGE_STYLE_JS = """
([selector, style]) => {
    const el = document.querySelector(selector);
    if (!el) return false;
    for (const [key, value] of Object.entries(style)) {
        if (key.includes('-')) el.style.setProperty(key, value);
        else el.style[key] = value;
    }
    return true;
}
"""


class PlaywrightDocument(Document):
    """基于 Playwright Page.evaluate 的页面访问实现"""

    def __init__(self, page: Page, style_properties: Sequence[str] = STYLE_PROPERTIES):
        self.page = page
        self.style_properties = list(style_properties)

    async def query_candidates(self) -> List[ElementInfo]:
        items = await self.page.evaluate(_QUERY_JS, {
            "selector": CANDIDATE_SELECTOR,
            "styleProps": self.style_properties,
            "attrNames": list(ATTRIBUTE_NAMES),
            "testIdAttr": TEST_ID_ATTRIBUTE,
        })
        return [ElementInfo.from_payload(item) for item in items]

    async def page_meta(self) -> PageMeta:
        meta = await self.page.evaluate(_META_JS)
        return PageMeta(url=meta["url"], width=int(meta["width"]), height=int(meta["height"]))

    async def set_root_property(self, name: str, value: str) -> None:
        await self.page.evaluate(_ROOT_PROPERTY_JS, [name, value])

    async def merge_inline_style(self, selector: str, style: Dict[str, str]) -> bool:
        return bool(await self.page.evaluate(_MERGE_STYLE_JS, [selector, style]))
