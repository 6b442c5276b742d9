"""Escaping helpers shared by the storage renderer.

Three contexts need different treatment:

* attribute values — the five reserved XML characters;
* element text — mistune's HTML escaping (``& < > "``);
* CDATA bodies — only the ``]]>`` terminator is special.
"""

from __future__ import annotations

from mistune.util import escape as _escape_html

# Ampersand first so that later replacements are not escaped twice.
_XML_ESCAPES: tuple[tuple[str, str], ...] = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)

CDATA_TERMINATOR = "]]>"
CDATA_SPLIT = "]]]]><![CDATA[>"


def escape_xml(text: str) -> str:
    """Escape *text* for use inside a double-quoted XML attribute.

    >>> escape_xml('a < b & "c"')
    'a &lt; b &amp; &quot;c&quot;'
    """
    for char, entity in _XML_ESCAPES:
        text = text.replace(char, entity)
    return text


def escape_cdata(text: str) -> str:
    """Split every ``]]>`` so it cannot close the enclosing CDATA section.

    Concatenating the resulting CDATA sections reproduces *text* exactly.
    """
    return text.replace(CDATA_TERMINATOR, CDATA_SPLIT)


def escape_text(text: str) -> str:
    """Escape *text* for use as element content.

    *text* must already be decoded: the lexer resolves character references,
    so a literal ``&amp;`` here is escaped again on purpose.
    """
    return _escape_html(text)
