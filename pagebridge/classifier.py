"""角色分类：根据文本 / class / data-testid / 标签推断元素语义角色

纯词法规则，按优先级顺序匹配，第一条命中的规则即为结果。
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Union

from .models import ElementInfo, RoleResult

CURRENCY_RE = re.compile(r"\$?\d+\.\d{2}")
ADDRESS_RE = re.compile(r"0x[0-9a-f]{40}")

UNKNOWN = RoleResult(name="unknown", confidence=0.30)


@dataclass(frozen=True)
class RoleSignals:
    """分类所用的归一化信号（全部小写）"""
    text: str
    classes: str
    test_id: str
    tag: str
    aria_role: str
    input_type: str

    @classmethod
    def from_element(cls, element: ElementInfo) -> "RoleSignals":
        return cls(
            text=" ".join(element.text.split()).lower(),
            classes=element.class_name.lower(),
            test_id=element.test_id.lower(),
            tag=element.tag.lower(),
            aria_role=element.aria_role.lower(),
            input_type=element.input_type.lower(),
        )

    def mentions(self, word: str) -> bool:
        """text / class / testid 任一包含 word"""
        return word in self.text or word in self.classes or word in self.test_id

    def tagged(self, word: str) -> bool:
        """class / testid 任一包含 word"""
        return word in self.classes or word in self.test_id


@dataclass(frozen=True)
class RoleRule:
    label: Union[str, Callable[[RoleSignals], str]]
    confidence: float
    matches: Callable[[RoleSignals], bool]

    def result(self, signals: RoleSignals) -> RoleResult:
        name = self.label(signals) if callable(self.label) else self.label
        return RoleResult(name=name, confidence=self.confidence)


RULES: List[RoleRule] = [
    # 文本中出现 balance 也算余额，保证 "send balance" 不会落到 button.send
    RoleRule(
        "display.balance", 0.90,
        lambda s: bool(CURRENCY_RE.search(s.text)) or s.mentions("balance"),
    ),
    RoleRule(
        "display.address", 0.95,
        lambda s: bool(ADDRESS_RE.search(s.text)) or s.tagged("address"),
    ),
    RoleRule("button.send", 0.85, lambda s: s.mentions("send")),
    RoleRule(
        "button.receive", 0.85,
        lambda s: "receive" in s.text or "deposit" in s.text or "receive" in s.classes,
    ),
    RoleRule("button.buy", 0.85, lambda s: s.mentions("buy")),
    RoleRule("button.swap", 0.85, lambda s: s.mentions("swap")),
    RoleRule(
        "button.account", 0.80,
        lambda s: s.tagged("account") or (s.tag == "button" and "account" in s.text),
    ),
    RoleRule(
        "button.generic", 0.60,
        lambda s: s.tag == "button" or s.aria_role == "button",
    ),
    RoleRule(
        lambda s: f"input.{s.input_type or 'text'}", 0.75,
        lambda s: s.tag == "input",
    ),
]


def classify(element: ElementInfo, rules: List[RoleRule] = RULES) -> RoleResult:
    signals = RoleSignals.from_element(element)
    for rule in rules:
        if rule.matches(signals):
            return rule.result(signals)
    return UNKNOWN
