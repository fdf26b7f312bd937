"""
Built-in tool definitions for a note-vault companion.

Only the definitions live here. The tools themselves are run by whatever
tool executor the caller passes to ConversationEngine.send_message.
"""

from typing import List

from .tools import create_tool
from .types import ToolDefinition

_PATH = {"type": "string", "description": "File path relative to vault root"}

# =============================================================================
# Vault
# =============================================================================

VAULT_TOOLS: List[ToolDefinition] = [
    create_tool(
        name="search_vault",
        description=(
            "Search for notes in the vault by keyword. Returns matching file paths and line "
            "content. Use this to find relevant notes before reading them."
        ),
        properties={
            "query": {
                "type": "string",
                "description": "The keyword or phrase to search for across all notes",
            },
        },
        required=["query"],
    ),
    create_tool(
        name="read_note",
        description=(
            "Read the full content of a specific note. Use this after search_vault to read "
            "relevant notes, or when you know the exact path."
        ),
        properties={
            "path": {
                "type": "string",
                "description": "The file path relative to vault root, e.g. 'ideas/side-projects/ai-tutor.md'",
            },
        },
        required=["path"],
    ),
    create_tool(
        name="write_note",
        description=(
            "Create a new note or overwrite an existing note. Creates parent folders "
            "automatically. Use [[wiki links]] to link to other notes. IMPORTANT: Always ask "
            "the user for confirmation before writing."
        ),
        properties={
            "path": {
                "type": "string",
                "description": "File path relative to vault root, e.g. 'ideas/side-projects/ai-tutor.md'",
            },
            "content": {
                "type": "string",
                "description": "The full markdown content to write. Use [[wiki links]] for cross-references.",
            },
        },
        required=["path", "content"],
    ),
    create_tool(
        name="move_note",
        description=(
            "Move or rename a note to a new path. Creates target folders automatically. "
            "IMPORTANT: Always ask the user for confirmation before moving."
        ),
        properties={
            "from": {"type": "string", "description": "Current file path"},
            "to": {"type": "string", "description": "New file path"},
        },
        required=["from", "to"],
    ),
    create_tool(
        name="list_folder",
        description="List files and subfolders in a specific folder. Use this to explore vault structure.",
        properties={
            "path": {
                "type": "string",
                "description": "Folder path relative to vault root, e.g. 'ideas/' or '' for root",
            },
        },
        required=["path"],
    ),
    create_tool(
        name="get_recent_notes",
        description=(
            "Get recently modified notes within a time period. Useful for reviews and "
            "understanding recent activity."
        ),
        properties={
            "days": {
                "type": "number",
                "description": "Number of days to look back, e.g. 7 for last week",
            },
        },
        required=["days"],
    ),
]

# =============================================================================
# Knowledge (frontmatter, tags)
# =============================================================================

KNOWLEDGE_TOOLS: List[ToolDefinition] = [
    create_tool(
        name="append_note",
        description=(
            "Append content to the end of an existing note. Use when adding to a note without "
            "overwriting. IMPORTANT: Always ask user first."
        ),
        properties={
            "path": _PATH,
            "content": {"type": "string", "description": "Markdown content to append at the end"},
        },
        required=["path", "content"],
    ),
    create_tool(
        name="read_properties",
        description=(
            "Read YAML frontmatter properties of a note. Returns all key-value pairs from the "
            "--- block."
        ),
        properties={"path": _PATH},
        required=["path"],
    ),
    create_tool(
        name="update_properties",
        description=(
            "Set or update YAML frontmatter properties on a note. Creates frontmatter if none "
            "exists. IMPORTANT: Always ask user first."
        ),
        properties={
            "path": _PATH,
            "properties": {
                "type": "object",
                "description": 'Key-value pairs to set, e.g. {"status": "done", "tags": ["project"]}',
            },
        },
        required=["path", "properties"],
    ),
    create_tool(
        name="get_tags",
        description=(
            "List all tags used across the vault with their note counts. Useful for "
            "understanding vault organization."
        ),
        properties={},
    ),
    create_tool(
        name="search_by_tag",
        description="Find all notes that contain a specific tag. Returns file paths.",
        properties={
            "tag": {
                "type": "string",
                "description": "Tag to search for (with or without #), e.g. 'project' or '#project'",
            },
        },
        required=["tag"],
    ),
    create_tool(
        name="get_vault_stats",
        description="Get vault statistics: total notes, folders, tags, and recent activity summary.",
        properties={},
    ),
]

# =============================================================================
# Graph
# =============================================================================

GRAPH_TOOLS: List[ToolDefinition] = [
    create_tool(
        name="get_backlinks",
        description=(
            "Get all notes that link TO a given note (incoming links). Useful for "
            "understanding note connections."
        ),
        properties={"path": _PATH},
        required=["path"],
    ),
    create_tool(
        name="get_outgoing_links",
        description="Get all wiki links FROM a given note (outgoing links) and whether the targets exist.",
        properties={"path": _PATH},
        required=["path"],
    ),
]

# =============================================================================
# Tasks
# =============================================================================

TASK_TOOLS: List[ToolDefinition] = [
    create_tool(
        name="get_tasks",
        description=(
            "Extract all tasks (- [ ] and - [x] checkboxes) from a note or all notes in a "
            "folder. Returns task text, status, file path, and line number."
        ),
        properties={
            "path": {"type": "string", "description": "File or folder path. Use '' for entire vault."},
            "includeCompleted": {"type": "boolean", "description": "Include completed tasks (default true)"},
        },
        required=["path"],
    ),
    create_tool(
        name="toggle_task",
        description="Toggle a task checkbox between done and undone at a specific line in a note.",
        properties={
            "path": _PATH,
            "line": {"type": "number", "description": "Line number (1-based) of the task to toggle"},
        },
        required=["path", "line"],
    ),
]

# =============================================================================
# Daily notes
# =============================================================================

DAILY_TOOLS: List[ToolDefinition] = [
    create_tool(
        name="get_daily_note",
        description="Get the daily note for today or a specific date. Returns content or 'not found'.",
        properties={
            "date": {"type": "string", "description": "Date in YYYY-MM-DD format. Omit or empty for today."},
        },
    ),
    create_tool(
        name="create_daily_note",
        description=(
            "Create a daily note for today or a specific date with optional content. Uses "
            "'Daily Notes/' folder."
        ),
        properties={
            "date": {"type": "string", "description": "Date in YYYY-MM-DD format. Omit or empty for today."},
            "content": {"type": "string", "description": "Initial content. If empty, creates with a date heading."},
        },
    ),
]

# =============================================================================
# Web
# =============================================================================

WEB_TOOLS: List[ToolDefinition] = [
    create_tool(
        name="web_search",
        description=(
            "Search the web for information using DuckDuckGo. Returns top results with titles, "
            "URLs, and snippets. Use for research, fact-checking, or finding current information."
        ),
        properties={"query": {"type": "string", "description": "The search query"}},
        required=["query"],
    ),
    create_tool(
        name="web_fetch",
        description=(
            "Fetch and read the text content of a web page. Use after web_search to read a "
            "specific result in detail."
        ),
        properties={
            "url": {
                "type": "string",
                "description": "The full URL to fetch (must start with http:// or https://)",
            },
        },
        required=["url"],
    ),
]

ALL_TOOLS: List[ToolDefinition] = [
    *VAULT_TOOLS,
    *KNOWLEDGE_TOOLS,
    *GRAPH_TOOLS,
    *TASK_TOOLS,
    *DAILY_TOOLS,
    *WEB_TOOLS,
]
