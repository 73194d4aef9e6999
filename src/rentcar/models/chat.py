from dataclasses import dataclass, asdict
from typing import Dict, Optional

DIRECTION_INCOMING = "incoming"
DIRECTION_OUTGOING = "outgoing"


@dataclass
class WhatsAppMessage:
    id: str
    phone: str
    name: str
    message: str
    timestamp: str
    is_group: bool = False
    group: Optional[Dict[str, str]] = None  # {"id": ..., "name": ...}

    def to_chat_log(self) -> Dict:
        group = self.group or {}
        return {
            "message_id": self.id,
            "sender_phone": self.phone,
            "sender_name": self.name,
            "message_content": self.message,
            "is_group": self.is_group,
            "group_id": group.get("id"),
            "group_name": group.get("name"),
            "created_at": self.timestamp,
            "direction": DIRECTION_INCOMING,
        }

    def to_dict(self) -> Dict: return asdict(self)
