"""Rich-text collaborator: TipTap/ProseMirror JSON <-> HTML fragments

The block core treats a text block's payload as opaque and only ever calls
``to_html`` and ``from_html`` on it. ``TipTapCodec`` is the default codec and
covers the node and mark types the page editor's rich-text surface produces.
"""

import html
import re
from typing import Any, Optional, Protocol

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from pageblocks.core.exceptions import RichTextError


class RichTextCodec(Protocol):
    def to_html(self, content: dict[str, Any]) -> str: ...

    def from_html(self, fragment: str) -> dict[str, Any]: ...


HEADING_TAGS: dict[str, int] = {f"h{n}": n for n in range(1, 7)}

_MARK_TAGS = {"bold": "strong", "italic": "em", "underline": "u", "strike": "s", "code": "code"}
_NODE_TAGS = {"paragraph": "p", "bulletList": "ul", "listItem": "li", "blockquote": "blockquote"}
_INLINE_MARKS = {
    "strong": "bold", "b": "bold",
    "em": "italic", "i": "italic",
    "u": "underline",
    "s": "strike", "strike": "strike", "del": "strike",
    "code": "code",
}
_CONTAINER_TAGS = {"div", "section", "article", "header", "footer", "main", "aside", "nav", "figure", "figcaption"}
_SKIP_TAGS = {"script", "style", "noscript", "template"}
_LANGUAGE_RE = re.compile(r"language-(\w+)")
_WHITESPACE_RE = re.compile(r"\s+")


# --- payload helpers ---

def empty_text_content() -> dict[str, Any]:
    return {"type": "doc", "content": [{"type": "paragraph", "content": []}]}


def plain_text_content(text: str) -> dict[str, Any]:
    """Single paragraph holding text verbatim (no marks)."""
    inline = [{"type": "text", "text": text}] if text else []
    return {"type": "doc", "content": [{"type": "paragraph", "content": inline}]}


def heading_content(level: int, text: str = "") -> dict[str, Any]:
    inline = [{"type": "text", "text": text}] if text else []
    return {"type": "doc", "content": [{"type": "heading", "attrs": {"level": level}, "content": inline}]}


def plain_text(content: Any) -> str:
    """Flatten a rich-text payload (or any node of it) to its text."""
    if not content:
        return ""
    if isinstance(content, str):
        return content
    if not isinstance(content, dict):
        return ""
    if content.get("text"):
        return str(content["text"])
    children = content.get("content")
    if isinstance(children, list):
        return "".join(plain_text(c) for c in children)
    return ""


def language_from_class(tag: Optional[Tag]) -> Optional[str]:
    """Return <x> from a `language-<x>` class token on tag, else None."""
    if tag is None:
        return None
    for token in tag.get("class") or []:
        m = _LANGUAGE_RE.match(token)
        if m:
            return m.group(1)
    return None


# --- JSON -> HTML ---

def _escape(text: str) -> str:
    return html.escape(text, quote=True)


def _attrs(node: dict) -> dict:
    attrs = node.get("attrs") or {}
    if not isinstance(attrs, dict):
        raise RichTextError(f"Node '{node.get('type')}' has non-mapping attrs")
    return attrs


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _render_text(node: dict) -> str:
    out = _escape(str(node.get("text", "")))
    marks = node.get("marks") or []
    if not isinstance(marks, list):
        raise RichTextError("Text node has non-list marks")
    for mark in marks:
        if not isinstance(mark, dict):
            raise RichTextError(f"Expected a mark mapping, got {type(mark).__name__}")
        kind = mark.get("type")
        if not isinstance(kind, (str, type(None))):
            raise RichTextError(f"Invalid mark type: {kind!r}")
        if kind == "link":
            href = _attrs(mark).get("href") or ""
            if not isinstance(href, str):
                raise RichTextError(f"Invalid link href: {href!r}")
            out = f'<a href="{_escape(href)}">{out}</a>'
        elif kind in _MARK_TAGS:
            tag = _MARK_TAGS[kind]
            out = f"<{tag}>{out}</{tag}>"
    return out


def _render_node(node: Any) -> str:
    if not isinstance(node, dict):
        raise RichTextError(f"Expected a node mapping, got {type(node).__name__}")
    kind = node.get("type")
    if not isinstance(kind, (str, type(None))):
        raise RichTextError(f"Invalid node type: {kind!r}")
    attrs = _attrs(node)

    if kind == "text":
        return _render_text(node)
    if kind == "hardBreak":
        return "<br>"
    if kind == "horizontalRule":
        return "<hr>"
    if kind == "codeBlock":
        lang = attrs.get("language")
        if lang is not None and not isinstance(lang, str):
            raise RichTextError(f"Invalid code language: {lang!r}")
        cls = f' class="language-{_escape(lang)}"' if lang else ""
        return f"<pre><code{cls}>{_escape(plain_text(node))}</code></pre>"

    children = node.get("content") or []
    if not isinstance(children, list):
        raise RichTextError(f"Node '{kind}' has non-list content")
    inner = "".join(_render_node(c) for c in children)

    if kind == "heading":
        level = attrs.get("level", 1)
        if not _is_int(level) or not 1 <= level <= 6:
            raise RichTextError(f"Invalid heading level: {level!r}")
        return f"<h{level}>{inner}</h{level}>"
    if kind == "orderedList":
        start = attrs.get("start", 1)
        if start is not None and not _is_int(start):
            raise RichTextError(f"Invalid list start: {start!r}")
        opening = "<ol>" if start in (None, 1) else f'<ol start="{start}">'
        return f"{opening}{inner}</ol>"
    tag = _NODE_TAGS.get(kind)
    if tag:
        return f"<{tag}>{inner}</{tag}>"
    return inner  # doc, and unknown node types render their children


# --- HTML -> JSON ---

def _is_text(node) -> bool:
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def _text_node(text: str, marks: list[dict]) -> dict:
    node: dict[str, Any] = {"type": "text", "text": text}
    if marks:
        node["marks"] = [dict(m) for m in marks]
    return node


def _parse_inline(nodes, marks: list[dict]) -> list[dict]:
    out: list[dict] = []
    for node in nodes:
        if _is_text(node):
            text = _WHITESPACE_RE.sub(" ", str(node))
            if text:
                out.append(_text_node(text, marks))
        elif isinstance(node, Tag):
            if node.name in _SKIP_TAGS:
                continue
            if node.name == "br":
                out.append({"type": "hardBreak"})
            elif node.name == "a":
                link = {"type": "link", "attrs": {"href": node.get("href") or ""}}
                out.extend(_parse_inline(node.contents, marks + [link]))
            elif node.name in _INLINE_MARKS:
                out.extend(_parse_inline(node.contents, marks + [{"type": _INLINE_MARKS[node.name]}]))
            else:
                out.extend(_parse_inline(node.contents, marks))
    return out


def _trim(run: list[dict]) -> list[dict]:
    """Strip outer whitespace of an inline run and drop emptied text nodes."""
    run = [dict(n) for n in run]
    if run and run[0]["type"] == "text":
        run[0]["text"] = run[0]["text"].lstrip()
    if run and run[-1]["type"] == "text":
        run[-1]["text"] = run[-1]["text"].rstrip()
    return [n for n in run if n["type"] != "text" or n["text"]]


def _is_block(tag: Tag) -> bool:
    return (
        tag.name in HEADING_TAGS
        or tag.name in _CONTAINER_TAGS
        or tag.name in {"p", "ul", "ol", "li", "blockquote", "pre", "hr"}
    )


def _list_item(tag: Tag) -> dict:
    return {"type": "listItem", "content": _parse_blocks(tag.contents) or [{"type": "paragraph", "content": []}]}


def _parse_block(tag: Tag) -> list[dict]:
    name = tag.name
    if name in HEADING_TAGS:
        return [{
            "type": "heading",
            "attrs": {"level": HEADING_TAGS[name]},
            "content": _trim(_parse_inline(tag.contents, [])),
        }]
    if name == "p":
        return [{"type": "paragraph", "content": _trim(_parse_inline(tag.contents, []))}]
    if name in ("ul", "ol"):
        items = [_list_item(li) for li in tag.find_all("li", recursive=False)]
        if name == "ul":
            return [{"type": "bulletList", "content": items}]
        start = tag.get("start")
        return [{
            "type": "orderedList",
            "attrs": {"start": int(start) if start and start.isdigit() else 1},
            "content": items,
        }]
    if name == "li":
        return [_list_item(tag)]
    if name == "blockquote":
        return [{"type": "blockquote", "content": _parse_blocks(tag.contents) or [{"type": "paragraph", "content": []}]}]
    if name == "pre":
        code = tag.find("code")
        text = (code or tag).get_text()
        return [{
            "type": "codeBlock",
            "attrs": {"language": language_from_class(code)},
            "content": [{"type": "text", "text": text}] if text else [],
        }]
    if name == "hr":
        return [{"type": "horizontalRule"}]
    return _parse_blocks(tag.contents)


def _parse_blocks(nodes) -> list[dict]:
    """Parse sibling nodes into block nodes, wrapping loose inline runs in paragraphs."""
    blocks: list[dict] = []
    pending: list[dict] = []

    for node in nodes:
        if isinstance(node, Tag) and node.name in _SKIP_TAGS:
            continue
        if isinstance(node, Tag) and _is_block(node):
            run = _trim(pending)
            if run:
                blocks.append({"type": "paragraph", "content": run})
            pending = []
            blocks.extend(_parse_block(node))
        else:
            pending.extend(_parse_inline([node], []))

    run = _trim(pending)
    if run:
        blocks.append({"type": "paragraph", "content": run})
    return blocks


class TipTapCodec:
    """Converts TipTap JSON documents to HTML and back."""

    def to_html(self, content: dict[str, Any]) -> str:
        if not isinstance(content, dict):
            raise RichTextError(f"Rich-text payload must be a mapping, got {type(content).__name__}")
        return _render_node(content)

    def from_html(self, fragment: str) -> dict[str, Any]:
        if not isinstance(fragment, str):
            raise RichTextError(f"Markup fragment must be a string, got {type(fragment).__name__}")
        soup = BeautifulSoup(fragment, "html.parser")
        root = soup.body or soup
        return {"type": "doc", "content": _parse_blocks(root.contents) or [{"type": "paragraph", "content": []}]}


DEFAULT_CODEC = TipTapCodec()
