"""Command and response messages for the canvas mind map.

A command names one mind map action and the canvas it targets; hotkeys,
the demo toolbar and tests all build the same message and hand it to
``handlers.handle_message``.
"""

import json
import uuid
import datetime
from typing import Dict, Any, Optional
from dataclasses import dataclass, asdict, fields

NAVIGATION_ACTIONS = {
    f"{prefix}navigate_{direction}{suffix}"
    for prefix in ('', 'free_')
    for direction in ('up', 'down', 'left', 'right')
    for suffix in ('', '_until_end')
}

VALID_ACTIONS = {
    'create_root', 'create_sibling_or_root', 'create_child', 'delete_node',
    'edit_or_select', 'finish_editing', 'set_text', 'select_node', 'relayout',
} | NAVIGATION_ACTIONS

VALID_SOURCES = {'frontend', 'backend', 'hotkey'}


def _now_ms() -> float:
    return datetime.datetime.now().timestamp() * 1000


@dataclass
class Message:
    """A mind map command, or the response to one.

    ``payload`` carries 'canvas_id' plus action arguments such as 'id',
    'text' or 'granularity'. Responses carry 'changed' and the ids touched.
    """
    source: str
    action: str
    payload: Dict[str, Any]
    message_id: str
    timestamp: float  # ms
    status: str = 'pending'  # pending, completed or failed
    error: Optional[str] = None

    @property
    def canvas_id(self) -> Optional[str]:
        return self.payload.get('canvas_id')

    @classmethod
    def create(cls, source: str, action: str, payload: Dict[str, Any]) -> 'Message':
        return cls(source, action, payload, uuid.uuid4().hex, _now_ms())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Message':
        """Build a message, ignoring keys that are not message fields."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_json(cls, json_str: str) -> 'Message':
        return cls.from_dict(json.loads(json_str))


def validate_message(msg_data: Dict[str, Any]) -> bool:
    """Check that a raw command dict has every field, the right types and a known action."""
    required_fields = {'message_id', 'source', 'action', 'payload', 'timestamp'}
    if not isinstance(msg_data, dict) or not required_fields.issubset(msg_data):
        return False

    if not isinstance(msg_data['message_id'], str):
        return False
    if not isinstance(msg_data['source'], str) or msg_data['source'] not in VALID_SOURCES:
        return False
    if not isinstance(msg_data['action'], str) or msg_data['action'] not in VALID_ACTIONS:
        return False
    if not isinstance(msg_data['payload'], dict):
        return False
    # bool is an int subclass but never a timestamp
    if isinstance(msg_data['timestamp'], bool) or not isinstance(msg_data['timestamp'], (int, float)):
        return False
    return True


def create_response_message(original_message: Message, status: str, error: Optional[str] = None,
                            payload: Optional[Dict[str, Any]] = None) -> Message:
    """Answer ``original_message`` with a '<action>_response' from the backend.

    Failed responses also copy ``error`` into the payload.
    """
    response_payload = payload if payload is not None else {}
    if status == 'failed' and error:
        response_payload['error'] = error

    return Message(
        source='backend',
        action=f"{original_message.action}_response",
        payload=response_payload,
        message_id=uuid.uuid4().hex,
        timestamp=_now_ms(),
        status=status,
        error=error
    )
