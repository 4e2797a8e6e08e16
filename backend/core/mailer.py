"""Feedback delivery over Gmail SMTP.

Formats a feedback submission as an HTML email and sends it to the
configured mailbox. All submitted values are escaped before rendering.
"""

import html
import os
import smtplib
from datetime import datetime, timezone
from email.message import EmailMessage

import structlog

from backend.api.schemas import FeedbackRequest

logger = structlog.get_logger(__name__)


class FeedbackError(Exception):
    """Feedback could not be delivered."""
    pass


def format_timestamp(value: int | float | str | None) -> str:
    """Render an epoch-millis or ISO-8601 timestamp for humans.

    Unparsable values are returned as given; a missing value renders as ``unknown``.
    """
    if value is None or value == "":
        return "unknown"
    try:
        if isinstance(value, (int, float)):
            moment = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        else:
            moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, OverflowError, OSError):
        return str(value)
    return moment.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def _esc(value: object) -> str:
    return html.escape(str(value)) if value is not None else "unknown"


def build_feedback_html(req: FeedbackRequest) -> str:
    """Render the HTML body for a feedback email."""
    tier = "Pro ⭐" if req.is_pro else "Free"
    return (
        "<h2>New Feedback Received</h2>\n"
        f"<p><strong>User:</strong> {_esc(req.username)} ({tier})</p>\n"
        f"<p><strong>Email:</strong> {_esc(req.user_email)}</p>\n"
        f"<p><strong>Platform:</strong> {_esc(req.platform)}</p>\n"
        f"<p><strong>Time:</strong> {html.escape(format_timestamp(req.timestamp))}</p>\n"
        "<hr />\n"
        f"<pre>{html.escape(req.feedback or '')}</pre>\n"
    )


class FeedbackMailer:
    """Sends feedback emails from and to the configured Gmail account."""

    def __init__(self):
        self.user = os.environ.get("GMAIL_USER", "")
        self.password = os.environ.get("GMAIL_APP_PASSWORD", "")
        self.host = os.environ.get("SMTP_HOST", "smtp.gmail.com")
        self.port = int(os.environ.get("SMTP_PORT", "465"))

    def is_configured(self) -> bool:
        """Check whether mailbox credentials are present."""
        return bool(self.user)

    def build_message(self, req: FeedbackRequest) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = f"BloatFest Feedback from {req.username}"
        msg["From"] = self.user
        msg["To"] = self.user
        msg.set_content(req.feedback or "")
        msg.add_alternative(build_feedback_html(req), subtype="html")
        return msg

    def send(self, req: FeedbackRequest) -> None:
        """Deliver a feedback submission.

        Raises:
            FeedbackError: If the SMTP exchange fails for any reason.
        """
        try:
            msg = self.build_message(req)
            with smtplib.SMTP_SSL(self.host, self.port) as smtp:
                smtp.login(self.user, self.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError, ValueError) as e:
            logger.error("feedback.send_failed", error=str(e), host=self.host)
            raise FeedbackError(f"Failed to send feedback: {e}") from e

        logger.info("feedback.sent", username=req.username, platform=req.platform)
