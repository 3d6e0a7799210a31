from flask import current_app
from sqlalchemy.exc import OperationalError, SQLAlchemyError
import logging

from resources.base import StorageResource, json_body, parse_id
from schemas import ValidationError, validate_college

logger = logging.getLogger(__name__)


class CollegeResource(StorageResource):

    def get(self, college_id=None):
        """Approved colleges, or one college together with its events."""
        if college_id is None:
            try:
                colleges = self.storage.list_colleges(approved=True)
                return [college.as_dict() for college in colleges], 200
            except (OperationalError, SQLAlchemyError) as e:
                logger.error(f"Database error: {str(e)}")
                return {"message": "Database error"}, 500
            except Exception as e:
                logger.error(f"Error fetching colleges: {str(e)}")
                return {"message": "Failed to fetch colleges"}, 500

        college_pk = parse_id(college_id)
        if college_pk is None:
            return {"message": "Invalid college id"}, 400

        try:
            college = self.storage.get_college(college_pk)
            if not college:
                return {"message": "College not found"}, 404

            events = self.storage.list_events(college_id=college_pk)
            return {
                "college": college.as_dict(),
                "events": [event.as_dict() for event in events]
            }, 200
        except (OperationalError, SQLAlchemyError) as e:
            logger.error(f"Database error: {str(e)}")
            return {"message": "Database error"}, 500
        except Exception as e:
            logger.error(f"Error fetching college {college_pk}: {str(e)}")
            return {"message": "Failed to fetch college details"}, 500

    def post(self):
        """Register a new college."""
        data = json_body()
        if data is None:
            return {"message": "No data provided"}, 400

        try:
            college_data = validate_college(data)
            if self.storage.get_college_by_email(college_data["email"]):
                return {"message": "Invalid college data", "errors": ["email is already registered"]}, 400

            college_data["is_approved"] = current_app.config.get("AUTO_APPROVE_COLLEGES", True)
            college = self.storage.create_college(college_data)
            return college.as_dict(), 201
        except ValidationError as e:
            return e.as_dict(), 400
        except (OperationalError, SQLAlchemyError) as e:
            logger.error(f"Database error while creating college: {str(e)}")
            return {"message": "Database error"}, 500
        except Exception as e:
            logger.error(f"Error creating college: {str(e)}")
            return {"message": "Failed to create college"}, 500


def register_college_resources(api, storage):
    """Registers the college routes with Flask-RESTful API."""
    api.add_resource(CollegeResource, "/colleges", "/colleges/<string:college_id>",
                     resource_class_kwargs={"storage": storage})
