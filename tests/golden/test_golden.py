"""Golden document tests.

A realistic README-style document is rendered in both formats and the
output is checked block by block.  Unlike the unit tests these exercise
every block type together, so ordering and nesting bugs between
renderers show up here.
"""
from __future__ import annotations

import copy
import json

import pytest

from markfluence.converter.mermaid import MERMAID_EXTENSION_KEY
from markfluence.converter.pipeline import build_body, render_adf, render_storage

DOCUMENT = """\
# Project Setup

Welcome to the **setup** guide. See [the FAQ](faq.md#install) or
[the website](https://example.com "Home").

## Steps

1. Install the tool
2. Run `setup --init`
   - check the *output*
3. Done

```bash
./configure && make
```

```mermaid
graph TD
  A --> B
```

| Option | Default |
| :--- | ---: |
| verbose | `false` |
| retries | 3 |

> Note: ~~old~~ new behaviour.

![Architecture](https://example.com/arch.png)

---
"""


@pytest.fixture(scope="module")
def storage() -> str:
    return render_storage(DOCUMENT)


@pytest.fixture(scope="module")
def adf() -> dict:
    return render_adf(DOCUMENT)


class TestGoldenStorage:

    def test_block_sequence(self, storage):
        positions = [
            storage.index("<h1>Project Setup</h1>"),
            storage.index("<p>Welcome"),
            storage.index("<h2>Steps</h2>"),
            storage.index("<ol>"),
            storage.index('<ac:parameter ac:name="language">bash</ac:parameter>'),
            storage.index('<ac:parameter ac:name="language">mermaid</ac:parameter>'),
            storage.index("<ac:adf-extension>"),
            storage.index("<table>"),
            storage.index("<blockquote>"),
            storage.index("<ac:image"),
            storage.index("<hr />"),
        ]
        assert positions == sorted(positions)

    def test_inline_content(self, storage):
        assert "<strong>setup</strong>" in storage
        assert "<code>setup --init</code>" in storage
        assert "<em>output</em>" in storage
        assert "<del>old</del>" in storage

    def test_links(self, storage):
        assert (
            '<ac:link ac:anchor="install"><ri:page ri:content-title="faq" />'
            "<ac:link-body>the FAQ</ac:link-body></ac:link>"
        ) in storage
        assert '<a href="https://example.com" title="Home">the website</a>' in storage

    def test_code_bodies(self, storage):
        assert "<![CDATA[./configure && make]]>" in storage
        assert "<![CDATA[graph TD\n  A --> B]]>" in storage
        assert MERMAID_EXTENSION_KEY in storage

    def test_table(self, storage):
        assert '<th style="text-align: left;">Option</th>' in storage
        assert '<td style="text-align: right;"><code>false</code></td>' in storage

    def test_nested_list(self, storage):
        assert "<ul>\n<li>check the <em>output</em></li>\n</ul>" in storage

    def test_image(self, storage):
        assert (
            '<ac:image ac:alt="Architecture">'
            '<ri:url ri:value="https://example.com/arch.png" /></ac:image>'
        ) in storage


class TestGoldenAdf:

    def test_top_level_types(self, adf):
        assert [n["type"] for n in adf["content"]] == [
            "heading",
            "paragraph",
            "heading",
            "orderedList",
            "codeBlock",
            "codeBlock",
            "extension",
            "table",
            "blockquote",
            "mediaSingle",
            "rule",
        ]

    def test_heading_levels(self, adf):
        assert adf["content"][0]["attrs"] == {"level": 1}
        assert adf["content"][2]["attrs"] == {"level": 2}

    def test_links_as_marks(self, adf):
        hrefs = [
            mark["attrs"]["href"]
            for node in adf["content"][1]["content"]
            for mark in node.get("marks", [])
            if mark["type"] == "link"
        ]
        assert hrefs == ["faq.md#install", "https://example.com"]

    def test_nested_list_item(self, adf):
        second = adf["content"][3]["content"][1]
        assert [n["type"] for n in second["content"]] == ["paragraph", "bulletList"]

    def test_table_rows(self, adf):
        table = adf["content"][7]
        assert len(table["content"]) == 3
        assert table["content"][0]["content"][0]["type"] == "tableHeader"

    def test_media(self, adf):
        media = adf["content"][9]["content"][0]
        assert media["attrs"]["url"] == "https://example.com/arch.png"
        assert media["attrs"]["alt"] == "Architecture"

    def test_body_round_trips_through_json(self, adf):
        body = build_body(DOCUMENT, "atlas_doc_format")
        decoded = json.loads(body.value)
        expected = copy.deepcopy(adf)
        # localIds are random, so compare everything else.
        for document in (decoded, expected):
            for node in document["content"]:
                if node["type"] == "extension":
                    node["attrs"].pop("localId")
                    node["attrs"].pop("parameters")
        assert decoded == expected
