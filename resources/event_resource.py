from flask import request
from sqlalchemy.exc import OperationalError, SQLAlchemyError
import logging

from resources.base import StorageResource, json_body, parse_id
from schemas import ValidationError, validate_event
from storage import UPCOMING, PAST

logger = logging.getLogger(__name__)

EVENT_TYPES = (UPCOMING, PAST)


class EventResource(StorageResource):

    def get(self, event_id=None):
        """Retrieve one event with its host college name, or list events.

        The list accepts `category`, `type` (upcoming or past) and `collegeId`
        query parameters. Category and type filters only show active events.
        """
        if event_id is not None:
            event_pk = parse_id(event_id)
            if event_pk is None:
                return {"message": "Invalid event id"}, 400
            try:
                event = self.storage.get_event(event_pk)
                if not event:
                    return {"message": "Event not found"}, 404

                college = self.storage.get_college(event.college_id)
                event_data = event.as_dict()
                event_data["collegeName"] = college.name if college else None
                return event_data, 200
            except (OperationalError, SQLAlchemyError) as e:
                logger.error(f"Database error: {str(e)}")
                return {"message": "Database error"}, 500
            except Exception as e:
                logger.error(f"Error fetching event {event_pk}: {str(e)}")
                return {"message": "Error fetching event"}, 500

        category = request.args.get('category', '').strip() or None
        event_type = request.args.get('type', '').strip().lower() or None
        college_param = request.args.get('collegeId')

        if event_type and event_type not in EVENT_TYPES:
            return {"message": "Invalid event type", "errors": ["type must be one of: upcoming, past"]}, 400

        college_id = None
        if college_param:
            college_id = parse_id(college_param)
            if college_id is None:
                return {"message": "Invalid college id"}, 400

        try:
            active = True if (category or event_type) else None
            events = self.storage.list_events(college_id=college_id, category=category,
                                              when=event_type, active=active)
            return [event.as_dict() for event in events], 200
        except (OperationalError, SQLAlchemyError) as e:
            logger.error(f"Database error: {str(e)}")
            return {"message": "Database error"}, 500
        except Exception as e:
            logger.error(f"Error fetching events: {str(e)}")
            return {"message": "Error fetching events"}, 500

    def post(self):
        """Create a new event for an existing college."""
        data = json_body()
        if data is None:
            return {"message": "No data provided"}, 400

        try:
            event_data = validate_event(data)
            if not self.storage.get_college(event_data["college_id"]):
                return {"message": "College not found"}, 404

            event = self.storage.create_event(event_data)
            return event.as_dict(), 201
        except ValidationError as e:
            return e.as_dict(), 400
        except (OperationalError, SQLAlchemyError) as e:
            logger.error(f"Database error while creating event: {str(e)}")
            return {"message": "Database error"}, 500
        except Exception as e:
            logger.error(f"Error creating event: {str(e)}")
            return {"message": "Failed to create event"}, 500

    def put(self, event_id=None):
        """Shallow-merge the supplied fields into an event."""
        if event_id is None:
            return {"message": "Method not allowed"}, 405
        event_pk = parse_id(event_id)
        if event_pk is None:
            return {"message": "Invalid event id"}, 400

        data = json_body()
        if data is None:
            return {"message": "No data provided"}, 400

        try:
            changes = validate_event(data, partial=True)
            if not self.storage.get_event(event_pk):
                return {"message": "Event not found"}, 404
            if "college_id" in changes and not self.storage.get_college(changes["college_id"]):
                return {"message": "College not found"}, 404

            event = self.storage.update_event(event_pk, changes)
            if not event:
                return {"message": "Event not found"}, 404
            return event.as_dict(), 200
        except ValidationError as e:
            return e.as_dict(), 400
        except (OperationalError, SQLAlchemyError) as e:
            logger.error(f"Database error while updating event {event_pk}: {str(e)}")
            return {"message": "Database error"}, 500
        except Exception as e:
            logger.error(f"Error updating event {event_pk}: {str(e)}")
            return {"message": "Failed to update event"}, 500

    def delete(self, event_id=None):
        """Delete an event along with its registrations."""
        if event_id is None:
            return {"message": "Method not allowed"}, 405
        event_pk = parse_id(event_id)
        if event_pk is None:
            return {"message": "Invalid event id"}, 400

        try:
            if not self.storage.delete_event(event_pk):
                return {"message": "Event not found"}, 404
            logger.info(f"Deleted event {event_pk}")
            return {"message": "Event deleted successfully"}, 200
        except (OperationalError, SQLAlchemyError) as e:
            logger.error(f"Database error while deleting event {event_pk}: {str(e)}")
            return {"message": "Database error"}, 500
        except Exception as e:
            logger.error(f"Error deleting event {event_pk}: {str(e)}")
            return {"message": "Failed to delete event"}, 500


class EventRegistrationsResource(StorageResource):

    def get(self, event_id):
        """Registrations for one event, newest first."""
        event_pk = parse_id(event_id)
        if event_pk is None:
            return {"message": "Invalid event id"}, 400

        try:
            if not self.storage.get_event(event_pk):
                return {"message": "Event not found"}, 404
            registrations = self.storage.list_registrations(event_pk)
            return [registration.as_dict() for registration in registrations], 200
        except (OperationalError, SQLAlchemyError) as e:
            logger.error(f"Database error: {str(e)}")
            return {"message": "Database error"}, 500
        except Exception as e:
            logger.error(f"Error fetching registrations for event {event_pk}: {str(e)}")
            return {"message": "Failed to fetch registrations"}, 500


def register_event_resources(api, storage):
    """Registers the event routes with Flask-RESTful API."""
    api.add_resource(EventResource, "/events", "/events/<string:event_id>",
                     resource_class_kwargs={"storage": storage})
    api.add_resource(EventRegistrationsResource, "/events/<string:event_id>/registrations",
                     resource_class_kwargs={"storage": storage})
