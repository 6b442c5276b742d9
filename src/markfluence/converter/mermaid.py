"""Diagram extension nodes for mermaid code blocks.

The remote platform renders mermaid diagrams through an ecosystem app that
looks for ``extension`` nodes carrying its key and pairs each one with the
closest preceding mermaid code block.  Both renderers therefore emit such a
node immediately after every mermaid block; each occurrence gets its own
``localId``.
"""

from __future__ import annotations

import uuid

from markfluence.converter.escaping import escape_xml

MERMAID_EXTENSION_KEY = (
    "23392b90-4271-4239-98ca-a3e96c663cbb"
    "/63d4d207-ac2f-4273-865c-0240d37f044a"
    "/static/mermaid-diagram"
)
"""Key of the "Mermaid Diagrams for Confluence" app (app/environment/module)."""

MERMAID_EXTENSION_TYPE = "com.atlassian.ecosystem"


def new_local_id() -> str:
    """Return a fresh random identifier for one extension occurrence."""
    return str(uuid.uuid4())


def is_diagram_block(language: str | None, diagram_language: str) -> bool:
    return language is not None and language == diagram_language


def build_extension_node(local_id: str | None = None) -> dict:
    """Build the ADF ``extension`` node that follows a mermaid ``codeBlock``."""
    if local_id is None:
        local_id = new_local_id()
    return {
        "type": "extension",
        "attrs": {
            "extensionType": MERMAID_EXTENSION_TYPE,
            "extensionKey": MERMAID_EXTENSION_KEY,
            "parameters": {"localId": local_id},
            "localId": local_id,
        },
    }


def render_extension_macro(local_id: str | None = None) -> str:
    """Render the storage-format counterpart of :func:`build_extension_node`."""
    if local_id is None:
        local_id = new_local_id()
    lid = escape_xml(local_id)
    return (
        '<ac:adf-extension><ac:adf-node type="extension">'
        f'<ac:adf-attribute key="extension-key">{escape_xml(MERMAID_EXTENSION_KEY)}</ac:adf-attribute>'
        f'<ac:adf-attribute key="extension-type">{MERMAID_EXTENSION_TYPE}</ac:adf-attribute>'
        '<ac:adf-attribute key="parameters">'
        f'<ac:adf-parameter key="local-id">{lid}</ac:adf-parameter>'
        '</ac:adf-attribute>'
        f'<ac:adf-attribute key="local-id">{lid}</ac:adf-attribute>'
        '</ac:adf-node></ac:adf-extension>\n'
    )
