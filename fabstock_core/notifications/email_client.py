"""
EmailJS client for team invitations.

Sends a templated email through the EmailJS REST endpoint. The template is
expected to use ``{{to_name}}``, ``{{to_email}}`` and ``{{invite_link}}``.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from fabstock_core.errors import ConfigurationError, RemoteError
from fabstock_core.logging import get_logger
from fabstock_core.models import AppSettings

logger = get_logger(__name__)

EMAILJS_SEND_URL = "https://api.emailjs.com/api/v1.0/email/send"


@dataclass
class EmailConfig:
    """EmailJS account keys"""
    service_id: str = ""
    template_id: str = ""
    public_key: str = ""
    timeout: int = 15


class EmailClient:
    """Sends invitation emails through EmailJS"""

    def __init__(
        self,
        service_id: str = "",
        template_id: str = "",
        public_key: str = "",
        session: Optional[requests.Session] = None,
    ):
        self.config = EmailConfig(
            service_id=service_id.strip(),
            template_id=template_id.strip(),
            public_key=public_key.strip(),
        )
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    @classmethod
    def from_settings(cls, settings: AppSettings, **kwargs) -> "EmailClient":
        return cls(
            service_id=settings.email_service_id,
            template_id=settings.email_template_id,
            public_key=settings.email_public_key,
            **kwargs,
        )

    def is_configured(self) -> bool:
        """True when all three EmailJS keys are set"""
        return all([self.config.service_id, self.config.template_id, self.config.public_key])

    def _payload(self, template_params: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "service_id": self.config.service_id,
            "template_id": self.config.template_id,
            "user_id": self.config.public_key,
            "template_params": template_params,
        }

    def send_invitation(self, to_name: str, to_email: str, invite_link: str) -> None:
        """
        Send the invitation template to a new member.

        Raises:
            ConfigurationError: EmailJS keys are missing
            RemoteError: the service rejected the request or was unreachable
        """
        if not self.is_configured():
            raise ConfigurationError(
                "EmailJS is not configured (service id, template id and public key required)",
                config_key="emailServiceId",
            )

        payload = self._payload({
            "to_name": to_name,
            "to_email": to_email,
            "invite_link": invite_link,
        })

        try:
            response = self.session.post(EMAILJS_SEND_URL, json=payload, timeout=self.config.timeout)
        except requests.exceptions.RequestException as e:
            raise RemoteError(f"Email service unreachable: {e}", operation="email") from e

        if not response.ok:
            raise RemoteError(
                f"Email sending failed: {response.text}",
                operation="email",
                details={"status_code": response.status_code},
            )

        logger.info(f"Invitation sent to {to_email}")
