"""消息协议：类型常量、消息构造与 JSON 编解码"""

import json
import time
from typing import Any, Dict, List, Optional

from .models import ApplyResult, ElementRecord, PageMeta

# 出站
HELLO = "hello"
PONG = "pong"
UI_MAP = "uiMap"
SCREENSHOT = "screenshot"
APPLY_ACK = "applyAck"

# 入站
PING = "ping"
GET_UI_MAP = "getUIMap"
GET_SCREENSHOT = "getScreenshot"
APPLY_THEME = "applyTheme"

DEFAULT_SCREEN = "current"


class ProtocolError(ValueError):
    """入站消息无法解析或缺少 type 字段"""


def now_ms() -> int:
    return int(time.time() * 1000)


def encode(message: Dict[str, Any]) -> str:
    # 单帧单消息，不含换行
    return json.dumps(message, ensure_ascii=False, separators=(",", ":"))


def decode(raw: Any) -> Dict[str, Any]:
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ProtocolError(f"payload is not utf-8: {e}") from e
    try:
        message = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        # 嵌套过深的数组 / 对象会触发 RecursionError
        raise ProtocolError(f"payload is not JSON: {e}") from e
    if not isinstance(message, dict):
        raise ProtocolError(f"payload must be an object, got {type(message).__name__}")
    if not isinstance(message.get("type"), str):
        raise ProtocolError("payload has no type field")
    return message


def hello(source: str, legacy: bool = False) -> Dict[str, Any]:
    message: Dict[str, Any] = {"type": HELLO, "source": source, "timestamp": now_ms()}
    if legacy:
        message["walletType"] = source
    return message


def ping() -> Dict[str, Any]:
    return {"type": PING, "timestamp": now_ms()}


def pong() -> Dict[str, Any]:
    return {"type": PONG, "timestamp": now_ms()}


def ui_map(records: List[ElementRecord], meta: PageMeta) -> Dict[str, Any]:
    return {
        "type": UI_MAP,
        "data": {
            "elements": [record.to_dict() for record in records],
            "meta": {
                "url": meta.url,
                "timestamp": now_ms(),
                "viewport": {"width": meta.width, "height": meta.height},
            },
        },
    }


def screenshot(screen: str, data: Optional[str]) -> Dict[str, Any]:
    return {"type": SCREENSHOT, "screen": screen, "data": data}


def apply_ack(result: ApplyResult) -> Dict[str, Any]:
    message: Dict[str, Any] = {"type": APPLY_ACK}
    message.update(result.to_dict())
    return message
