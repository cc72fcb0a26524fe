"""
Notification senders: Gmail API and an in-memory recorder
"""
import base64
import logging
from email.mime.text import MIMEText
from typing import Dict, List, Optional, Sequence, Union

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

logger = logging.getLogger(__name__)

Recipients = Union[str, Sequence[str]]


def _recipient_list(recipients: Recipients) -> List[str]:
    if isinstance(recipients, str):
        recipients = recipients.split(",")
    return [address.strip() for address in recipients if address and address.strip()]


class GmailNotifier:
    """Sends HTML email through the Gmail API as the authorized account"""

    def __init__(self, config, service=None):
        self.config = config
        self._service = service

    def _get_credentials(self) -> Credentials:
        token_path = self.config.get_token_path()
        return Credentials.from_authorized_user_file(token_path, self.config.GOOGLE_SCOPES)

    def _gmail(self):
        if self._service is None:
            self._service = build("gmail", "v1", credentials=self._get_credentials(), cache_discovery=False)
        return self._service

    def _build_message(self, to: List[str], subject: str, body: str,
                       bcc: List[str], html: bool) -> Dict[str, str]:
        message = MIMEText(body, "html" if html else "plain", "utf-8")
        message["To"] = ", ".join(to)
        message["Subject"] = subject
        if bcc:
            message["Bcc"] = ", ".join(bcc)
        raw = base64.urlsafe_b64encode(message.as_bytes()).decode("ascii")
        return {"raw": raw}

    def send(self, recipients: Recipients, subject: str, body: str,
             bcc: Optional[Recipients] = None, html: bool = True) -> bool:
        """Send one message; delivery failures are logged and reported as False"""
        to = _recipient_list(recipients)
        if not to:
            logger.warning(f"Not sending '{subject}': no recipients")
            return False

        try:
            payload = self._build_message(to, subject, body, _recipient_list(bcc or []), html)
            self._gmail().users().messages().send(
                userId=self.config.SENDER_EMAIL, body=payload
            ).execute()
            logger.info(f"📧 Sent '{subject}' to {', '.join(to)}")
            return True
        except HttpError as e:
            logger.error(f"HTTP error sending '{subject}' to {', '.join(to)}: {e}")
            return False
        except Exception as e:
            logger.error(f"Error sending '{subject}' to {', '.join(to)}: {e}")
            return False


class RecordingNotifier:
    """Notifier for tests and dry runs: records messages instead of sending"""

    def __init__(self, failing_recipients: Sequence[str] = ()):
        self.sent: List[Dict[str, object]] = []
        self.failing_recipients = set(failing_recipients)

    def send(self, recipients: Recipients, subject: str, body: str,
             bcc: Optional[Recipients] = None, html: bool = True) -> bool:
        to = _recipient_list(recipients)
        if not to or self.failing_recipients.intersection(to):
            logger.info(f"📧 MOCK: Failed to send '{subject}' to {to}")
            return False
        self.sent.append({
            "to": to,
            "bcc": _recipient_list(bcc or []),
            "subject": subject,
            "body": body,
        })
        logger.info(f"📧 MOCK: Sent '{subject}' to {', '.join(to)}")
        return True

    def messages_to(self, address: str) -> List[Dict[str, object]]:
        return [message for message in self.sent if address in message["to"]]
