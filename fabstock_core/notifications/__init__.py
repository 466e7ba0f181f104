"""
Outgoing notifications (EmailJS invitations).
"""

from .email_client import EmailClient, EmailConfig, EMAILJS_SEND_URL

__all__ = [
    "EmailClient",
    "EmailConfig",
    "EMAILJS_SEND_URL",
]
