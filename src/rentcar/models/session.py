from dataclasses import dataclass, asdict
from typing import Dict, Optional

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"


@dataclass
class Session:
    user_id: str
    email: str
    role: Optional[str] = None
    access_token: str = ""
    refresh_token: str = ""

    def to_dict(self) -> Dict:
        data = asdict(self)
        data.pop("refresh_token")
        return data
