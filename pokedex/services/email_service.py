"""Email delivery of spreadsheet exports over SMTP.

Connection details come from ``settings``.  STARTTLS is negotiated when the
server advertises it, and login is attempted only when ``SMTP_USER`` is set.
"""

import logging
from email.message import EmailMessage
from email.utils import formataddr

import aiosmtplib

from pokedex.config import settings
from pokedex.services.export_service import EXPORT_FILENAME, XLSX_MIME_TYPE

logger = logging.getLogger(__name__)

EMAIL_SUBJECT = "Pokemons export"
EMAIL_BODY = "Attached list of pokemons."


def build_message(to_email: str, attachment: bytes) -> EmailMessage:
    """Compose the export email with the spreadsheet attached."""
    message = EmailMessage()
    message["From"] = formataddr((settings.SMTP_FROM_NAME, settings.SMTP_FROM))
    message["To"] = to_email
    message["Subject"] = EMAIL_SUBJECT
    message.set_content(EMAIL_BODY)

    maintype, subtype = XLSX_MIME_TYPE.split("/", 1)
    message.add_attachment(attachment, maintype=maintype, subtype=subtype, filename=EXPORT_FILENAME)
    return message


async def send_export(to_email: str, attachment: bytes) -> None:
    """Send the spreadsheet to *to_email*. SMTP errors propagate to the caller."""
    message = build_message(to_email, attachment)
    await aiosmtplib.send(
        message,
        hostname=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USER or None,
        password=settings.SMTP_PASS or None,
        start_tls=None,
    )
    logger.info("Export emailed to %s", to_email)
