"""Performance benchmarks for markfluence.

Run with: pytest tests/perf/ -v -s
"""
import subprocess
import sys
import time

from markfluence.config import MarkfluenceConfig
from markfluence.converter.pipeline import MarkdownConverter


def _make_large_markdown(n_sections: int = 100) -> str:
    """Generate a large markdown document."""
    lines = ["# Large Document\n"]
    for i in range(n_sections):
        lines.append(f"## Section {i}\n")
        lines.append(f"This is paragraph {i} with **bold**, *italic* and [a link](page-{i}.md).\n")
        lines.append(f"- Item {i}a\n- Item {i}b\n  - Nested {i}\n")
        if i % 5 == 0:
            lines.append(f"```python\ndef func_{i}():\n    return {i}\n```\n")
        if i % 10 == 0:
            lines.append(f"```mermaid\ngraph TD\n  A{i} --> B{i}\n```\n")
            lines.append(f"| Col A | Col B |\n| --- | --- |\n| {i} | `{i * 2}` |\n")
            lines.append(f"> A blockquote in section {i}\n")
    return "\n".join(lines)


class TestImportPerformance:
    """Benchmark package import time."""

    def test_import_time_under_500ms(self):
        """Import 'markfluence' in a fresh subprocess; best of 3 runs."""
        code = (
            "import time; "
            "t0 = time.perf_counter(); "
            "import markfluence; "
            "elapsed = (time.perf_counter() - t0) * 1000; "
            "print(f'{elapsed:.2f}')"
        )
        times = []
        for _ in range(3):
            result = subprocess.run(
                [sys.executable, "-c", code],
                capture_output=True,
                text=True,
                timeout=10,
            )
            assert result.returncode == 0, f"Import failed: {result.stderr}"
            times.append(float(result.stdout.strip()))
        best_ms = min(times)
        print(f"\n  Package import times: {times} best={best_ms:.2f}ms")
        assert best_ms < 500, f"Import too slow: best {best_ms:.2f}ms of {times} (limit: 500ms)"


class TestConverterPerformance:
    """Benchmark both renderers."""

    def test_small_document_under_20ms(self):
        converter = MarkdownConverter(MarkfluenceConfig())
        md = "# Hello\n\nWorld with **bold** text.\n\n- a\n- b\n"

        start = time.perf_counter()
        for _ in range(100):
            converter.convert_storage(md)
            converter.convert_adf(md)
        elapsed = time.perf_counter() - start

        avg_ms = (elapsed / 100) * 1000
        print(f"\n  Small doc (both formats): {avg_ms:.2f}ms avg")
        assert avg_ms < 20, f"Small document conversion too slow: {avg_ms:.2f}ms"

    def test_medium_document_under_200ms(self):
        converter = MarkdownConverter(MarkfluenceConfig())
        md = _make_large_markdown(20)

        start = time.perf_counter()
        for _ in range(10):
            converter.convert_adf(md)
        elapsed = time.perf_counter() - start

        avg_ms = (elapsed / 10) * 1000
        print(f"\n  Medium doc ADF (20 sections): {avg_ms:.2f}ms avg")
        assert avg_ms < 200, f"Medium document conversion too slow: {avg_ms:.2f}ms"

    def test_large_document_under_1s(self):
        converter = MarkdownConverter(MarkfluenceConfig())
        md = _make_large_markdown(100)

        start = time.perf_counter()
        storage = converter.convert_storage(md).output
        document = converter.convert_adf(md).output
        elapsed_ms = (time.perf_counter() - start) * 1000

        print(f"\n  Large doc (100 sections, both formats): {elapsed_ms:.2f}ms")
        assert storage.count("<h2>") == 100
        assert sum(1 for n in document["content"] if n["type"] == "extension") == 10
        assert elapsed_ms < 1000, f"Large document conversion too slow: {elapsed_ms:.2f}ms"
