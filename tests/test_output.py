"""
Unit tests for result emission and export.
"""

import io
import json
import threading

from photoprint.models import Classification, MatchResult
from photoprint.output import ResultWriter, export_pairs, read_matches


class TestResultWriter:
    """Test line-atomic writing."""

    def test_metadata_line(self):
        stream = io.StringIO()
        ResultWriter(stream).write_metadata("/p/a.jpg", "2019-07-04 18:30:05")
        assert stream.getvalue() == "/p/a.jpg\t2019-07-04 18:30:05\n"

    def test_concurrent_lines_never_interleave(self):
        stream = io.StringIO()
        writer = ResultWriter(stream)

        def emit(worker):
            for i in range(200):
                writer.write_match(MatchResult(
                    f"/search/{worker}/{i}.jpg", f"/orig/{i}.jpg", i, Classification.SIMILAR
                ))

        threads = [threading.Thread(target=emit, args=(w,)) for w in range(6)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        lines = stream.getvalue().splitlines()
        assert len(lines) == 6 * 200
        assert len(read_matches(lines)) == 6 * 200


class TestExportPairs:
    """Test the review tool pair file."""

    def test_export_pairs(self, temp_dir):
        results = [
            MatchResult("/s/z.jpg", "/orig/z.jpg", 0, Classification.IDENTICAL),
            MatchResult("/s/b.jpg", "/orig/a.jpg", 40, Classification.SIMILAR),
        ]
        output = temp_dir / "pairs.json"

        count = export_pairs(results, output)

        assert count == 2
        assert json.loads(output.read_text(encoding="utf-8")) == [
            ["/s/b.jpg", "/orig/a.jpg"],
            ["/s/z.jpg", "/orig/z.jpg"],
        ]

    def test_export_empty(self, temp_dir):
        output = temp_dir / "pairs.json"
        assert export_pairs([], output) == 0
        assert json.loads(output.read_text(encoding="utf-8")) == []

    def test_read_matches_skips_blank_lines(self):
        line = MatchResult("/s/b.jpg", "a", 0, Classification.IDENTICAL).to_json()
        assert len(read_matches([line, "", "  "])) == 1
