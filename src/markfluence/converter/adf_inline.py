"""Build ADF inline nodes from canonical inline tokens.

An inline leaf is either a text node::

    {"type": "text", "text": "hello",
     "marks": [{"type": "strong"}, {"type": "link", "attrs": {"href": "..."}}]}

or a ``{"type": "hardBreak"}``.  Formatting never nests in ADF: every
wrapper token (strong, emphasis, strikethrough, link) instead appends a
mark to the list threaded down to its leaves, so the marks on a leaf are
in the order their wrappers were entered.
"""

from __future__ import annotations

# Inline wrapper tokens and the mark each one contributes.
_WRAPPER_MARKS: dict[str, str] = {
    "strong": "strong",
    "emphasis": "em",
    "strikethrough": "strike",
}


def build_inline_nodes(
    children: list[dict],
    marks: list[dict] | None = None,
) -> list[dict]:
    """Convert inline tokens to a list of ADF inline nodes.

    Parameters
    ----------
    children:
        Canonical inline tokens from :mod:`markfluence.converter.lexer`.
    marks:
        Marks inherited from enclosing wrapper tokens.  Never mutated.

    Returns
    -------
    list[dict]
        ADF ``text`` and ``hardBreak`` nodes.  Neighbouring text nodes never
        carry equal marks; such runs are merged into one node.
    """
    if marks is None:
        marks = []

    nodes: list[dict] = []

    for token in children:
        token_type = token.get("type", "")

        if token_type == "text":
            raw = token.get("raw", "")
            if raw:
                nodes.append(_make_text_node(raw, marks))

        elif token_type in _WRAPPER_MARKS:
            child_marks = [*marks, {"type": _WRAPPER_MARKS[token_type]}]
            nodes.extend(build_inline_nodes(token.get("children", []), child_marks))

        elif token_type == "code_span":
            raw = token.get("raw", "")
            if raw:
                nodes.append(_make_text_node(raw, [*marks, {"type": "code"}]))

        elif token_type == "link":
            attrs = token.get("attrs", {})
            link_mark = _link_mark(attrs.get("url", ""), attrs.get("title"))
            nodes.extend(build_inline_nodes(
                token.get("children", []), [*marks, link_mark],
            ))

        elif token_type == "image":
            # Images next to other inline content become linked text.
            attrs = token.get("attrs", {})
            url = attrs.get("url", "")
            text = attrs.get("alt") or url
            if text:
                nodes.append(_make_text_node(text, [*marks, _link_mark(url)]))

        elif token_type == "line_break":
            nodes.append({"type": "hardBreak"})

        else:
            # html_inline and anything unrecognised: keep the raw text.
            raw = token.get("raw")
            if isinstance(raw, str) and raw:
                nodes.append(_make_text_node(raw, marks))

    return _merge_text_nodes(nodes)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _make_text_node(text: str, marks: list[dict]) -> dict:
    node: dict = {"type": "text", "text": text}
    # ADF rejects an empty marks array.
    if marks:
        node["marks"] = [_copy_mark(mark) for mark in marks]
    return node


def _merge_text_nodes(nodes: list[dict]) -> list[dict]:
    merged: list[dict] = []
    for node in nodes:
        if (
            merged
            and node["type"] == "text"
            and merged[-1]["type"] == "text"
            and merged[-1].get("marks") == node.get("marks")
        ):
            merged[-1] = {**merged[-1], "text": merged[-1]["text"] + node["text"]}
        else:
            merged.append(node)
    return merged


def _link_mark(href: str, title: str | None = None) -> dict:
    attrs: dict = {"href": href}
    if title:
        attrs["title"] = title
    return {"type": "link", "attrs": attrs}


def _copy_mark(mark: dict) -> dict:
    copied = dict(mark)
    if "attrs" in copied:
        copied["attrs"] = dict(copied["attrs"])
    return copied
