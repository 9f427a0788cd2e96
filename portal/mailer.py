# portal/mailer.py
import logging

from flask import current_app
from flask_mail import Message

from . import mail

logger = logging.getLogger(__name__)


def send_email(to, subject, body):
    """Send a plain-text email, best effort.

    With ``MAIL_SUPPRESS_SEND`` (the default) nothing leaves the process and the
    message is only logged. Failures are logged and reported as ``False``; they
    never propagate to the request that triggered them.
    """
    logger.info("Email to %s: %s", to, subject)
    logger.debug("Email body:\n%s", body)
    try:
        msg = Message(
            subject=subject,
            recipients=[to],
            body=body,
            sender=current_app.config.get("MAIL_DEFAULT_SENDER"),
        )
        mail.send(msg)
        return True
    except Exception:
        logger.exception("Could not send email to %s", to)
        return False
