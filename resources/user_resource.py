from sqlalchemy.exc import OperationalError, SQLAlchemyError
import logging

from resources.base import StorageResource, json_body
from schemas import ValidationError, validate_user

logger = logging.getLogger(__name__)


class UserResource(StorageResource):

    def get(self):
        try:
            users = self.storage.list_users()
            return [user.as_dict() for user in users], 200
        except (OperationalError, SQLAlchemyError) as e:
            logger.error(f"Database error: {str(e)}")
            return {"message": "Database error"}, 500
        except Exception as e:
            logger.error(f"Error fetching users: {str(e)}")
            return {"message": "Failed to fetch users"}, 500

    def post(self):
        """Create a user with a unique username and email."""
        data = json_body()
        if data is None:
            return {"message": "No data provided"}, 400

        try:
            user_data = validate_user(data)

            errors = []
            if self.storage.get_user_by_username(user_data["username"]):
                errors.append("username is already taken")
            if self.storage.get_user_by_email(user_data["email"]):
                errors.append("email is already registered")
            if errors:
                return {"message": "Invalid user data", "errors": errors}, 400

            if user_data.get("college_id") and not self.storage.get_college(user_data["college_id"]):
                return {"message": "College not found"}, 404

            user = self.storage.create_user(user_data)
            return user.as_dict(), 201
        except ValidationError as e:
            return e.as_dict(), 400
        except (OperationalError, SQLAlchemyError) as e:
            logger.error(f"Database error while creating user: {str(e)}")
            return {"message": "Database error"}, 500
        except Exception as e:
            logger.error(f"Error creating user: {str(e)}")
            return {"message": "Failed to create user"}, 500


def register_user_resources(api, storage):
    """Registers the user routes with Flask-RESTful API."""
    api.add_resource(UserResource, "/users", resource_class_kwargs={"storage": storage})
