import logging
from typing import Optional

import requests

from rentcar.config.config import Config

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Maaf, saya tidak bisa menjawab saat ini."


class ChatbotService:
    """Rental assistant replies through an OpenAI-compatible chat-completion API."""

    def __init__(self, api_key: str, model: Optional[str] = None, api_url: Optional[str] = None,
                 system_prompt: Optional[str] = None, timeout: Optional[float] = None):
        self.api_key = api_key
        self.model = model or Config.OPENAI_MODEL
        self.api_url = api_url or Config.OPENAI_API_URL
        self.system_prompt = system_prompt or Config.CHATBOT_SYSTEM_PROMPT
        self.timeout = timeout or Config.HTTP_TIMEOUT

    def generate_reply(self, user_message: str) -> str:
        """
        Ask the model for a reply to a customer message.

        Returns:
            str: The first choice's content, or FALLBACK_REPLY when the API
            fails or returns nothing.
        """
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": user_message},
            ],
        }
        try:
            r = requests.post(
                self.api_url,
                json=body,
                headers={"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"},
                timeout=self.timeout,
            )
            r.raise_for_status()
            data = r.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("Chat completion failed: %s", e)
            return FALLBACK_REPLY

        choices = data.get("choices") if isinstance(data, dict) else None
        if not choices:
            return FALLBACK_REPLY
        content = ((choices[0] or {}).get("message") or {}).get("content")
        return content.strip() if content and content.strip() else FALLBACK_REPLY


def chatbot_service(user_message: str) -> str:
    return ChatbotService(Config.OPENAI_API_KEY).generate_reply(user_message)
