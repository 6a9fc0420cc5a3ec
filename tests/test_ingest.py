"""
Tests for Claude session-log ingestion — tool mapping and JSONL parsing
"""

import orjson
import pytest

from ambit.core.ledger import ReadDepth
from ambit.core.symbols import LineRange
from ambit.ingest.claude import map_tool_call, parse_jsonl_line, parse_log_file, short_path


def assistant_line(*blocks, session_id="sess-1", timestamp="2025-01-15T10:30:00Z"):
    record = {
        "type": "assistant",
        "sessionId": session_id,
        "timestamp": timestamp,
        "message": {"content": list(blocks)},
    }
    if session_id is None:
        del record["sessionId"]
    return orjson.dumps(record).decode()


def tool_use(name, **input):
    return {"type": "tool_use", "id": "t1", "name": name, "input": input}


class TestMapToolCall:
    """The tool table."""

    def _map(self, name, **input):
        return map_tool_call(name, input, "agent", "ts")

    def test_read(self):
        event = self._map("Read", file_path="/p/src/lib.py")
        assert event.read_depth is ReadDepth.FULL_BODY
        assert event.file_path == "/p/src/lib.py"
        assert event.description == "Read src/lib.py"
        assert event.target_lines is None

    def test_read_with_offset_and_limit(self):
        event = self._map("Read", file_path="a.py", offset=10, limit=5)
        assert event.target_lines == LineRange(10, 15)

    def test_read_with_only_offset_is_whole_file(self):
        assert self._map("Read", file_path="a.py", offset=10).target_lines is None

    def test_read_without_path(self):
        assert self._map("Read") is None

    @pytest.mark.parametrize("name,key", [
        ("Edit", "file_path"),
        ("Write", "file_path"),
        ("NotebookEdit", "notebook_path"),
        ("mcp__plugin_serena_serena__replace_content", "relative_path"),
    ])
    def test_file_writes_are_full_body(self, name, key):
        event = self._map(name, **{key: "src/a.py"})
        assert event.read_depth is ReadDepth.FULL_BODY
        assert event.file_path == "src/a.py"

    def test_glob_is_name_only(self):
        event = self._map("Glob", pattern="**/*.py")
        assert event.read_depth is ReadDepth.NAME_ONLY
        assert event.file_path is None
        assert event.description == "Glob **/*.py"

    def test_grep_is_overview(self):
        event = self._map("Grep", pattern="def main", path="src/cli.py")
        assert event.read_depth is ReadDepth.OVERVIEW
        assert event.file_path == "src/cli.py"
        assert event.description == 'Search "def main"'

    @pytest.mark.parametrize("prefix", ["mcp__serena__", "mcp__plugin_serena_serena__"])
    def test_find_symbol(self, prefix):
        event = self._map(f"{prefix}find_symbol", name_path_pattern="App/run", relative_path="a.py")
        assert event.read_depth is ReadDepth.SIGNATURE
        assert event.target_symbol == "App/run"

        event = self._map(f"{prefix}find_symbol", name_path_pattern="App/run",
                          relative_path="a.py", include_body=True)
        assert event.read_depth is ReadDepth.FULL_BODY

    def test_symbols_overview(self):
        event = self._map("mcp__serena__get_symbols_overview", relative_path="a.py")
        assert event.read_depth is ReadDepth.OVERVIEW
        assert event.target_symbol is None

    def test_referencing_symbols(self):
        event = self._map("mcp__serena__find_referencing_symbols", name_path="App", relative_path="a.py")
        assert event.read_depth is ReadDepth.OVERVIEW
        assert event.target_symbol == "App"

    @pytest.mark.parametrize("tool", [
        "replace_symbol_body", "insert_after_symbol", "insert_before_symbol", "rename_symbol",
    ])
    def test_symbol_edits_are_full_body(self, tool):
        event = self._map(f"mcp__serena__{tool}", name_path="App/run", relative_path="a.py")
        assert event.read_depth is ReadDepth.FULL_BODY
        assert event.target_symbol == "App/run"

    def test_unknown_tool(self):
        assert self._map("TodoWrite", todos=[]) is None

    def test_non_dict_input(self):
        assert map_tool_call("Read", "not a dict", "agent", "ts") is None

    def test_short_path(self):
        assert short_path("/a/b/c/d.py") == "c/d.py"
        assert short_path("d.py") == "d.py"


class TestParseLine:
    """JSONL records to events."""

    def test_assistant_tool_uses(self):
        line = assistant_line(
            {"type": "text", "text": "Let me look"},
            tool_use("Read", file_path="a.py"),
            tool_use("Grep", pattern="x"),
        )
        events = parse_jsonl_line(line, "fallback")
        assert [e.tool_name for e in events] == ["Read", "Grep"]
        assert all(e.agent_id == "sess-1" for e in events)
        assert events[0].timestamp == "2025-01-15T10:30:00Z"

    def test_unknown_tool_is_untracked(self):
        events = parse_jsonl_line(assistant_line(tool_use("TodoWrite")), "fallback")
        assert len(events) == 1
        assert events[0].read_depth is ReadDepth.UNSEEN
        assert events[0].description == "TodoWrite (untracked)"
        assert not events[0].is_tracked

    def test_default_agent_id(self):
        events = parse_jsonl_line(assistant_line(tool_use("Read", file_path="a.py"), session_id=None), "fallback")
        assert events[0].agent_id == "fallback"

    @pytest.mark.parametrize("line", [
        "",
        "   ",
        "{not json",
        '"a string"',
        '{"type": "user", "message": {"content": []}}',
        '{"type": "assistant", "message": {"content": "plain text"}}',
        '{"type": "assistant"}',
    ])
    def test_ignored_lines(self, line):
        assert parse_jsonl_line(line, "fallback") == []


class TestParseLogFile:
    """Whole files."""

    def test_reads_all_lines(self, tmp_path):
        log = tmp_path / "abc123.jsonl"
        log.write_text("\n".join([
            assistant_line(tool_use("Read", file_path="a.py"), session_id=None),
            '{"type": "user"}',
            "garbage",
            assistant_line(tool_use("Glob", pattern="*"), session_id=None),
        ]) + "\n")

        events = parse_log_file(log)
        assert [e.tool_name for e in events] == ["Read", "Glob"]
        assert all(e.agent_id == "abc123" for e in events)

    def test_missing_file_yields_nothing(self, tmp_path):
        assert parse_log_file(tmp_path / "missing.jsonl") == []
