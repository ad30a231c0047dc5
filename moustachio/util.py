import structlog

log = structlog.get_logger(__name__)
utf8_bom = b"\xef\xbb\xbf"

# '&' must come first so the entities produced below are not escaped again.
_HTML_ESCAPES = (("&", "&amp;"), ('"', "&quot;"), ("<", "&lt;"), (">", "&gt;"))

def strip_utf8_bom(data: bytes) -> bytes:
    # removes the utf-8 byte order mark from byte data if present.
    if data.startswith(utf8_bom):
        return data[len(utf8_bom):]
    return data

def escape_html(text: str) -> str:
    # escapes the characters an escaped variable tag must not emit verbatim.
    for char, entity in _HTML_ESCAPES:
        text = text.replace(char, entity)
    return text

def indent_lines(text: str, indent: str) -> str:
    # prefixes every line with indent, except an empty segment after the last newline.
    if not indent or not text:
        return text
    lines = text.split("\n")
    last = lines.pop()
    indented = [indent + line for line in lines]
    indented.append(indent + last if last else "")
    return "\n".join(indented)
