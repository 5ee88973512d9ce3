"""
E-mail delivery via AWS SES.

In development mode messages are written to the log instead of being
sent, so the API runs locally without AWS credentials.  Delivery failures
raise ``EmailDeliveryError``; callers sending to many recipients decide
whether a single failure matters.
"""
import asyncio
import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from intranet.config import settings
from intranet.exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)


class EmailService:
    """
    Sends HTML e-mails through AWS SES.

    Attributes:
        from_email: Configured sender address.
        from_name: Configured sender display name.
        development_mode: Log messages instead of sending them.
    """

    def __init__(self, development_mode: bool | None = None) -> None:
        if development_mode is None:
            development_mode = settings.EMAIL_DEVELOPMENT_MODE

        self.from_email = settings.SES_FROM_EMAIL
        self.from_name = settings.SES_FROM_NAME
        self.development_mode = development_mode
        self.ses_client = None

        if not self.development_mode:
            self.ses_client = boto3.client(
                "ses",
                region_name=settings.AWS_REGION,
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            )
            logger.info("AWS SES client initialized (region=%s)", settings.AWS_REGION)
        else:
            logger.info("Email service in development mode (emails will be logged)")

    @property
    def source(self) -> str:
        return f"{self.from_name} <{self.from_email}>"

    async def send_email(self, to_email: str, subject: str, html_body: str) -> None:
        """
        Send one HTML e-mail to *to_email*.

        Raises:
            EmailDeliveryError: SES rejected the message or was unreachable.
        """
        if self.development_mode:
            logger.info(
                "EMAIL (development mode, not sent) from=%s to=%s subject=%r\n%s",
                self.source,
                to_email,
                subject,
                html_body[:500] + "..." if len(html_body) > 500 else html_body,
            )
            return

        try:
            response = await asyncio.to_thread(
                self.ses_client.send_email,
                Source=self.source,
                Destination={"ToAddresses": [to_email]},
                Message={
                    "Subject": {"Charset": "UTF-8", "Data": subject},
                    "Body": {"Html": {"Charset": "UTF-8", "Data": html_body}},
                },
            )
        except ClientError as e:
            error = e.response.get("Error", {})
            raise EmailDeliveryError(
                f"SES error sending to {to_email}: {error.get('Code')} - {error.get('Message')}"
            ) from e
        except BotoCoreError as e:
            raise EmailDeliveryError(f"SES unreachable sending to {to_email}: {e}") from e

        logger.info(
            "Email sent to %s (MessageId: %s)", to_email, response.get("MessageId", "unknown")
        )


_email_service: EmailService | None = None


def get_email_service() -> EmailService:
    """FastAPI dependency returning the process-wide mailer."""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service
