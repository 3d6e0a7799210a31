from flask import current_app
from sqlalchemy.exc import OperationalError, SQLAlchemyError
import logging

from resources.base import StorageResource, json_body, parse_id
from schemas import ValidationError, validate_feed_post

logger = logging.getLogger(__name__)


class FeedResource(StorageResource):

    def get(self, post_id=None):
        """Approved feed posts, newest first."""
        if post_id is not None:
            return {"message": "Method not allowed"}, 405
        try:
            posts = self.storage.list_feed_posts(approved=True)
            return [post.as_dict() for post in posts], 200
        except (OperationalError, SQLAlchemyError) as e:
            logger.error(f"Database error: {str(e)}")
            return {"message": "Database error"}, 500
        except Exception as e:
            logger.error(f"Error fetching feed: {str(e)}")
            return {"message": "Failed to fetch feed"}, 500

    def post(self):
        data = json_body()
        if data is None:
            return {"message": "No data provided"}, 400

        try:
            post_data = validate_feed_post(data)
            if post_data.get("college_id") and not self.storage.get_college(post_data["college_id"]):
                return {"message": "College not found"}, 404
            post_data.setdefault("is_approved", current_app.config.get("AUTO_APPROVE_FEED_POSTS", True))

            post = self.storage.create_feed_post(post_data)
            return post.as_dict(), 201
        except ValidationError as e:
            return e.as_dict(), 400
        except (OperationalError, SQLAlchemyError) as e:
            logger.error(f"Database error while creating post: {str(e)}")
            return {"message": "Database error"}, 500
        except Exception as e:
            logger.error(f"Error creating post: {str(e)}")
            return {"message": "Failed to create post"}, 500

    def put(self, post_id=None):
        """Moderation edit, e.g. toggling isApproved."""
        if post_id is None:
            return {"message": "Method not allowed"}, 405
        post_pk = parse_id(post_id)
        if post_pk is None:
            return {"message": "Invalid post id"}, 400

        data = json_body()
        if data is None:
            return {"message": "No data provided"}, 400

        try:
            changes = validate_feed_post(data, partial=True)
            if changes.get("college_id") and not self.storage.get_college(changes["college_id"]):
                return {"message": "College not found"}, 404

            post = self.storage.update_feed_post(post_pk, changes)
            if not post:
                return {"message": "Post not found"}, 404
            logger.info(f"Updated feed post {post_pk}")
            return post.as_dict(), 200
        except ValidationError as e:
            return e.as_dict(), 400
        except (OperationalError, SQLAlchemyError) as e:
            logger.error(f"Database error while updating post {post_pk}: {str(e)}")
            return {"message": "Database error"}, 500
        except Exception as e:
            logger.error(f"Error updating post {post_pk}: {str(e)}")
            return {"message": "Failed to update post"}, 500

    def delete(self, post_id=None):
        if post_id is None:
            return {"message": "Method not allowed"}, 405
        post_pk = parse_id(post_id)
        if post_pk is None:
            return {"message": "Invalid post id"}, 400

        try:
            if not self.storage.delete_feed_post(post_pk):
                return {"message": "Post not found"}, 404
            logger.info(f"Deleted feed post {post_pk}")
            return {"message": "Post deleted successfully"}, 200
        except (OperationalError, SQLAlchemyError) as e:
            logger.error(f"Database error while deleting post {post_pk}: {str(e)}")
            return {"message": "Database error"}, 500
        except Exception as e:
            logger.error(f"Error deleting post {post_pk}: {str(e)}")
            return {"message": "Failed to delete post"}, 500


def register_feed_resources(api, storage):
    """Registers the feed routes with Flask-RESTful API."""
    api.add_resource(FeedResource, "/feed", "/feed/<string:post_id>",
                     resource_class_kwargs={"storage": storage})
