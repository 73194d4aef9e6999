import logging
from typing import Optional

import requests

from rentcar.config.config import Config

logger = logging.getLogger(__name__)


class FonnteService:
    """
    WhatsApp sender backed by the Fonnte HTTP API.

    Incoming messages reach the app through the webhook configured in the
    Fonnte dashboard (Settings > Webhook -> https://<host>/api/whatsapp-webhook).
    """

    def __init__(self, api_key: str, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.api_key = api_key
        self.base_url = base_url or Config.FONNTE_API_URL
        self.timeout = timeout or Config.HTTP_TIMEOUT

    def send_message(self, target: str, message: str, delay: int = 0, country_code: Optional[str] = None) -> dict:
        """
        Send a WhatsApp message.

        Args:
            target (str): Phone number, e.g. 628xxxxxxxxxx.
            message (str): Message body.
            delay (int): Delay in seconds before Fonnte sends it.
            country_code (str): Country code prefix (default from config, 62).

        Returns:
            dict: Fonnte response {"status": bool, "reason"?: str, "id"?: str}.
            Transport and HTTP errors are returned as {"status": False, "reason": ...}.
        """
        payload = {
            "target": target,
            "message": message,
            "delay": delay or 0,
            "countryCode": country_code or Config.DEFAULT_COUNTRY_CODE,
        }
        try:
            r = requests.post(
                self.base_url,
                json=payload,
                headers={"Authorization": self.api_key},
                timeout=self.timeout,
            )
            r.raise_for_status()
            return r.json()
        except requests.HTTPError as e:
            logger.error("Error sending message via Fonnte: %s", e)
            response = e.response
            return {
                "status": False,
                "reason": f"API Error: {response.status_code} - {response.text}" if response is not None else str(e),
            }
        except (requests.RequestException, ValueError) as e:
            logger.error("Error sending message via Fonnte: %s", e)
            return {"status": False, "reason": str(e) or "Unknown error"}


_fonnte_service: Optional[FonnteService] = None


def get_fonnte_service(api_key: Optional[str] = None) -> FonnteService:
    """
    Get the shared Fonnte service instance.

    Args:
        api_key (str): Optional API key (FONNTE_API_KEY is used if not provided).

    Raises:
        RuntimeError: If no API key is available.
    """
    global _fonnte_service
    if _fonnte_service is None:
        key = api_key or Config.FONNTE_API_KEY
        if not key:
            raise RuntimeError("Fonnte API key is not defined")
        _fonnte_service = FonnteService(key)
    return _fonnte_service
