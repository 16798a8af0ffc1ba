"""数据模型定义"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ConnectionState(str, Enum):
    """通道生命周期状态，仅由 ConnectionManager 修改"""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    OPEN = "open"
    RECONNECTING = "reconnecting"


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class ElementInfo:
    """从页面读取到的单个候选元素（原始信号，尚未分类）"""
    tag: str
    text: str = ""
    class_name: str = ""
    element_id: str = ""
    test_id: str = ""
    aria_role: str = ""
    input_type: str = ""
    rect: Rect = field(default_factory=lambda: Rect(0, 0, 0, 0))
    styles: Dict[str, str] = field(default_factory=dict)
    attributes: Dict[str, Optional[str]] = field(default_factory=dict)
    has_parent: bool = False
    index: int = 0  # 在父元素 children 中的位置（从 1 开始）

    @classmethod
    def from_payload(cls, item: Dict[str, Any]) -> "ElementInfo":
        rect = item.get("rect") or {}
        return cls(
            tag=(item.get("tag") or "").lower(),
            text=item.get("text") or "",
            class_name=item.get("className") or "",
            element_id=item.get("id") or "",
            test_id=item.get("testId") or "",
            aria_role=item.get("role") or "",
            input_type=item.get("type") or "",
            rect=Rect(
                x=float(rect.get("x", 0)),
                y=float(rect.get("y", 0)),
                width=float(rect.get("width", 0)),
                height=float(rect.get("height", 0)),
            ),
            styles=dict(item.get("styles") or {}),
            attributes=dict(item.get("attributes") or {}),
            has_parent=bool(item.get("hasParent")),
            index=int(item.get("index") or 0),
        )


@dataclass(frozen=True)
class RoleResult:
    """角色分类结果：name 为 category.kind 或 unknown"""
    name: str
    confidence: float


@dataclass(frozen=True)
class ElementRecord:
    """UI 地图中的单个元素，每次扫描重新生成"""
    role: str
    confidence: float
    selector: str
    text: str
    rect: Rect
    styles: Dict[str, str]
    attributes: Dict[str, Optional[str]]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "role": self.role,
            "confidence": self.confidence,
            "selector": self.selector,
            "text": self.text,
            "rect": {
                "x": self.rect.x,
                "y": self.rect.y,
                "width": self.rect.width,
                "height": self.rect.height,
            },
            "styles": dict(self.styles),
            "attributes": dict(self.attributes),
        }


@dataclass(frozen=True)
class PageMeta:
    url: str
    width: int
    height: int


@dataclass(frozen=True)
class ElementStyle:
    selector: str
    style: Dict[str, str]


@dataclass(frozen=True)
class ThemePatch:
    """远端下发的样式补丁，应用一次后即丢弃"""
    css_vars: Dict[str, str] = field(default_factory=dict)
    elements: List[ElementStyle] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "ThemePatch":
        if payload is None:
            return cls()
        if not isinstance(payload, dict):
            raise ValueError(f"theme patch must be an object, got {type(payload).__name__}")

        css_vars = payload.get("cssVars") or {}
        if not isinstance(css_vars, dict):
            raise ValueError("cssVars must be an object")

        raw_elements = payload.get("elements") or []
        if not isinstance(raw_elements, list):
            raise ValueError("elements must be a list")

        elements = []
        for entry in raw_elements:
            if not isinstance(entry, dict):
                raise ValueError("element entry must be an object")
            selector = entry.get("selector")
            style = entry.get("style") or {}
            if not isinstance(selector, str) or not selector:
                raise ValueError("element entry needs a selector")
            if not isinstance(style, dict):
                raise ValueError(f"style for {selector} must be an object")
            elements.append(ElementStyle(
                selector=selector,
                style={str(k): str(v) for k, v in style.items()},
            ))

        return cls(
            css_vars={str(k): str(v) for k, v in css_vars.items()},
            elements=elements,
        )


@dataclass(frozen=True)
class ApplyResult:
    success: bool
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"success": self.success}
        if self.error is not None:
            data["error"] = self.error
        return data
