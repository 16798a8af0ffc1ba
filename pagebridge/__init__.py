"""Page Bridge 包

包含各个模块：
- models: 数据模型
- config: 配置
- protocol: 消息协议
- selector: 选择器生成
- classifier: 角色分类
- dom: 页面访问层
- scanner: 扫描模块
- theme: 主题模块
- screenshot: 截图
- transport: 传输层
- connection: 连接管理
- core: 核心桥接类
"""

from .models import ApplyResult, ConnectionState, ElementInfo, ElementRecord, RoleResult, ThemePatch
from .config import BridgeConfig, load_config
from .classifier import classify
from .selector import synthesize
from .scanner import Scanner
from .theme import ThemeApplicator
from .connection import ConnectionManager
from .core import PageBridge, create_bridge

__all__ = [
    "ApplyResult",
    "ConnectionState",
    "ElementInfo",
    "ElementRecord",
    "RoleResult",
    "ThemePatch",
    "BridgeConfig",
    "load_config",
    "classify",
    "synthesize",
    "Scanner",
    "ThemeApplicator",
    "ConnectionManager",
    "PageBridge",
    "create_bridge",
]
