import logging
from flask_mail import Mail, Message
from flask import current_app

# Attached to the app in create_app via mail.init_app
mail = Mail()

logger = logging.getLogger(__name__)


def send_email(recipient: str, subject: str, body: str, reply_to: str = None, is_html: bool = False) -> bool:
    """Send a basic email (text or HTML)."""
    try:
        msg = Message(
            subject=subject,
            recipients=[recipient],
            sender=current_app.config.get("MAIL_DEFAULT_SENDER"),
            reply_to=reply_to
        )
        if is_html:
            msg.html = body
        else:
            msg.body = body

        mail.send(msg)
        logger.info(f"Email sent to {recipient}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {recipient}: {e}")
        return False


def send_contact_notification(contact: dict) -> bool:
    """Forward a contact-form message to CONTACT_RECIPIENT.

    Returns False without sending when no recipient is configured.
    """
    recipient = current_app.config.get("CONTACT_RECIPIENT")
    if not recipient:
        logger.info("CONTACT_RECIPIENT not set, contact message only logged")
        return False

    body = (
        f"New message from the CollabZone contact form\n\n"
        f"Name: {contact['name']}\n"
        f"Email: {contact['email']}\n"
        f"Subject: {contact['subject']}\n\n"
        f"{contact['message']}\n"
    )
    return send_email(recipient, f"[CollabZone] {contact['subject']}", body, reply_to=contact["email"])
