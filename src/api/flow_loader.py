"""Load and validate the YAML message catalogue used by the flow adapter."""

import os
from pathlib import Path

import yaml

REQUIRED_MESSAGES = (
    "welcome",
    "empty_list",
    "form_title_create",
    "form_title_update",
    "field_prompt",
    "field_prompt_optional",
    "person_saved",
    "deleting",
    "person_deleted",
    "undo_label",
    "nothing_to_undo",
    "person_not_found",
    "unsupported",
    "form_unsupported",
    "form_expired",
)


def _repo_root() -> Path:
    """Return repo root (parent of src)."""
    return Path(__file__).resolve().parent.parent.parent


def get_messages_path() -> Path:
    """Return path to the messages YAML (MESSAGES_PATH env or flows/messages.yaml)."""
    default = _repo_root() / "flows" / "messages.yaml"
    path = os.environ.get("MESSAGES_PATH", "").strip()
    if path:
        return Path(path).resolve()
    return default


def load_messages(path: Path | None = None) -> dict[str, str]:
    """Load messages YAML and return message_id -> text. Validates required ids."""
    if path is None:
        path = get_messages_path()
    raw = path.read_text(encoding="utf-8")
    doc = yaml.safe_load(raw)
    if not isinstance(doc, dict) or not isinstance(doc.get("messages"), dict):
        raise ValueError("Messages YAML must have a 'messages' mapping")
    messages = doc["messages"]
    for key, value in messages.items():
        if not isinstance(value, str):
            raise ValueError(f"Message '{key}' must be a string")
    missing = [m for m in REQUIRED_MESSAGES if m not in messages]
    if missing:
        raise ValueError(f"Missing messages: {', '.join(missing)}")
    return dict(messages)


# Module-level cache for loaded messages
_messages_cache: dict[str, str] | None = None


def get_messages(cache: bool = True) -> dict[str, str]:
    """Load messages (cached by default). Pass cache=False to reload."""
    global _messages_cache
    if cache and _messages_cache is not None:
        return _messages_cache
    _messages_cache = load_messages()
    return _messages_cache
