"""扫描模块：枚举页面上的可交互元素，生成带角色和样式的 UI 地图"""

import logging
from typing import List

from .classifier import classify
from .dom import ATTRIBUTE_NAMES, STYLE_PROPERTIES, Document
from .models import ElementInfo, ElementRecord
from .selector import synthesize

logger = logging.getLogger(__name__)

MAX_TEXT_LENGTH = 50


class Scanner:
    """
    扫描模块：每次调用都完整重新扫描，不缓存、不做增量比较。

    - 宽或高为 0 的元素（隐藏 / 折叠）直接跳过
    - 输出顺序与文档查询顺序一致
    """

    def __init__(self, document: Document):
        self.document = document

    async def scan(self) -> List[ElementRecord]:
        candidates = await self.document.query_candidates()
        records = [self.build_record(el) for el in candidates if not el.rect.is_empty]
        logger.debug("✓ 扫描到 %d 个元素（候选 %d）", len(records), len(candidates))
        return records

    @staticmethod
    def build_record(element: ElementInfo) -> ElementRecord:
        role = classify(element)
        return ElementRecord(
            role=role.name,
            confidence=role.confidence,
            selector=synthesize(element),
            text=element.text.strip()[:MAX_TEXT_LENGTH],
            rect=element.rect,
            styles={name: element.styles.get(name, "") for name in STYLE_PROPERTIES},
            attributes={name: element.attributes.get(name) for name in ATTRIBUTE_NAMES},
        )
