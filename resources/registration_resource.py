from flask import current_app
from sqlalchemy.exc import OperationalError, SQLAlchemyError
import logging

from resources.base import StorageResource, json_body, parse_id
from schemas import ValidationError, validate_registration
from storage import CapacityError

logger = logging.getLogger(__name__)


class RegistrationResource(StorageResource):

    def get(self, registration_id=None):
        if registration_id is None:
            return {"message": "Method not allowed"}, 405
        registration_pk = parse_id(registration_id)
        if registration_pk is None:
            return {"message": "Invalid registration id"}, 400

        try:
            registration = self.storage.get_registration(registration_pk)
            if not registration:
                return {"message": "Registration not found"}, 404
            return registration.as_dict(), 200
        except (OperationalError, SQLAlchemyError) as e:
            logger.error(f"Database error: {str(e)}")
            return {"message": "Database error"}, 500
        except Exception as e:
            logger.error(f"Error fetching registration {registration_pk}: {str(e)}")
            return {"message": "Failed to fetch registration"}, 500

    def post(self):
        """Register a participant and bump the event's participant count."""
        data = json_body()
        if data is None:
            return {"message": "No data provided"}, 400

        try:
            registration_data = validate_registration(data, region=current_app.config.get("PHONE_REGION", "IN"))
            registration = self.storage.create_registration(
                registration_data,
                enforce_capacity=current_app.config.get("ENFORCE_EVENT_CAPACITY", False)
            )
            if not registration:
                return {"message": "Event not found"}, 404
            return registration.as_dict(), 201
        except ValidationError as e:
            return e.as_dict(), 400
        except CapacityError as e:
            logger.warning(f"Registration refused: {str(e)}")
            return {"message": "Event is full"}, 409
        except (OperationalError, SQLAlchemyError) as e:
            logger.error(f"Database error while registering: {str(e)}")
            return {"message": "Database error"}, 500
        except Exception as e:
            logger.error(f"Error creating registration: {str(e)}")
            return {"message": "Failed to register for event"}, 500

    def put(self, registration_id=None):
        """Update a registration, typically to mark it verified."""
        if registration_id is None:
            return {"message": "Method not allowed"}, 405
        registration_pk = parse_id(registration_id)
        if registration_pk is None:
            return {"message": "Invalid registration id"}, 400

        data = json_body()
        if data is None:
            return {"message": "No data provided"}, 400

        try:
            changes = validate_registration(data, partial=True, region=current_app.config.get("PHONE_REGION", "IN"))
            # A registration stays attached to the event it was counted against
            changes.pop("event_id", None)
            registration = self.storage.update_registration(registration_pk, changes)
            if not registration:
                return {"message": "Registration not found"}, 404
            return registration.as_dict(), 200
        except ValidationError as e:
            return e.as_dict(), 400
        except (OperationalError, SQLAlchemyError) as e:
            logger.error(f"Database error while updating registration {registration_pk}: {str(e)}")
            return {"message": "Database error"}, 500
        except Exception as e:
            logger.error(f"Error updating registration {registration_pk}: {str(e)}")
            return {"message": "Failed to update registration"}, 500

    def delete(self, registration_id=None):
        if registration_id is None:
            return {"message": "Method not allowed"}, 405
        registration_pk = parse_id(registration_id)
        if registration_pk is None:
            return {"message": "Invalid registration id"}, 400

        try:
            if not self.storage.delete_registration(registration_pk):
                return {"message": "Registration not found"}, 404
            logger.info(f"Deleted registration {registration_pk}")
            return {"message": "Registration deleted successfully"}, 200
        except (OperationalError, SQLAlchemyError) as e:
            logger.error(f"Database error while deleting registration {registration_pk}: {str(e)}")
            return {"message": "Database error"}, 500
        except Exception as e:
            logger.error(f"Error deleting registration {registration_pk}: {str(e)}")
            return {"message": "Failed to delete registration"}, 500


def register_registration_resources(api, storage):
    """Registers the registration routes with Flask-RESTful API."""
    api.add_resource(RegistrationResource, "/registrations", "/registrations/<string:registration_id>",
                     resource_class_kwargs={"storage": storage})
