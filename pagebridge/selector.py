"""选择器生成：为元素生成可供远端再次定位的 CSS 选择器"""

from .models import ElementInfo

TEST_ID_ATTRIBUTE = "data-testid"
MAX_CLASS_TOKENS = 3


def css_escape(ident: str) -> str:
    """与浏览器 CSS.escape() 相同的标识符转义（如 :r1: / 1abc / md:w-1/2）"""
    out = []
    for i, ch in enumerate(ident):
        code = ord(ch)
        leading_digit = ch in "0123456789" and (i == 0 or (i == 1 and ident[0] == "-"))
        if code == 0:
            out.append("\ufffd")
        elif 0x01 <= code <= 0x1F or code == 0x7F or leading_digit:
            out.append(f"\\{code:x} ")
        elif ch == "-" and ident == "-":
            out.append("\\-")
        elif code >= 0x80 or ch in "-_" or (ch.isascii() and ch.isalnum()):
            out.append(ch)
        else:
            out.append("\\" + ch)
    return "".join(out)


def synthesize(element: ElementInfo) -> str:
    """
    按优先级生成选择器，命中即返回：

    1. data-testid 属性  -> [data-testid="..."]
    2. id               -> #id
    3. 最多 3 个 class   -> .a.b.c
    4. 父元素下的位置     -> tag:nth-child(n)
    5. 没有父元素         -> tag

    不校验在当前文档中是否唯一。
    """
    if element.test_id:
        value = element.test_id.replace("\\", "\\\\").replace('"', '\\"')
        return f'[{TEST_ID_ATTRIBUTE}="{value}"]'

    if element.element_id:
        return "#" + css_escape(element.element_id)

    classes = [c for c in element.class_name.split() if c][:MAX_CLASS_TOKENS]
    if classes:
        return "." + ".".join(css_escape(c) for c in classes)

    tag = element.tag or "*"
    if element.has_parent and element.index > 0:
        return f"{tag}:nth-child({element.index})"
    return tag
