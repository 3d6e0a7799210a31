from flask_restful import Resource
import logging

from email_utils import send_contact_notification
from resources.base import json_body
from schemas import ValidationError, validate_contact

logger = logging.getLogger(__name__)


class ContactResource(Resource):

    def post(self):
        """Accept a contact-form message; mail it on when a recipient is configured."""
        data = json_body()
        if data is None:
            return {"message": "All fields are required"}, 400

        try:
            contact = validate_contact(data)
        except ValidationError as e:
            return e.as_dict(), 400

        logger.info(f"Contact message from {contact['name']} <{contact['email']}>: {contact['subject']}")
        forwarded = send_contact_notification(contact)
        return {"message": "Message sent successfully", "forwarded": forwarded}, 200


def register_contact_resources(api):
    """Registers the contact route with Flask-RESTful API."""
    api.add_resource(ContactResource, "/contact")
