"""Tests for logging_utils module."""

from __future__ import annotations

from projkit.logging_utils import pretty, summarize_license_summary


class TestSummarizeLicenseSummary:
    """Test summarize_license_summary function."""

    def test_empty_output(self):
        assert summarize_license_summary("") == {"licenses": {}, "total": 0}

    def test_tree_output(self):
        text = """
├─ MIT: 812
├─ ISC: 64
├─ (MIT OR Apache-2.0): 2
└─ BSD-3-Clause: 11
"""
        result = summarize_license_summary(text)

        assert result["licenses"] == {
            "MIT": 812,
            "ISC": 64,
            "(MIT OR Apache-2.0)": 2,
            "BSD-3-Clause": 11,
        }
        assert result["total"] == 889

    def test_custom_license_with_colons(self):
        text = "├─ MIT: 3\n└─ Custom: https://example.org/LICENSE: 1\n"
        result = summarize_license_summary(text)
        assert result["licenses"] == {"MIT": 3, "Custom: https://example.org/LICENSE": 1}
        assert result["total"] == 4

    def test_ignores_unrelated_lines(self):
        text = "npm WARN something happened\n├─ MIT: 3\n"
        result = summarize_license_summary(text)
        assert result["licenses"] == {"MIT": 3}


class TestPretty:
    def test_dict(self):
        assert pretty({"a": 1}) == '{\n  "a": 1\n}'

    def test_non_serializable_uses_str(self):
        class Thing:
            def __str__(self) -> str:
                return "thing"

        assert pretty({"x": Thing()}, indent=0) == '{\n"x": "thing"\n}'
