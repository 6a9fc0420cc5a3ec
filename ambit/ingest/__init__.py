"""
Ingest module — Agent event sources.

Each source turns an agent framework's records into ToolCall events.
"""

from .claude import map_tool_call, parse_jsonl_line, parse_log_file, TOOL_HANDLERS

__all__ = ['map_tool_call', 'parse_jsonl_line', 'parse_log_file', 'TOOL_HANDLERS']
