"""
Outgoing e-mail: SES delivery, HTML templates, markdown rendering and the
front-end URLs embedded in messages.
"""
from intranet.mailing.email_service import EmailService, get_email_service

__all__ = ["EmailService", "get_email_service"]
