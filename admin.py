from flask_restful import Resource
from sqlalchemy.exc import SQLAlchemyError
import logging

from resources.base import parse_id

logger = logging.getLogger(__name__)


class AdminOperations:
    """Super-admin views over the record store."""

    def __init__(self, storage):
        self.storage = storage

    def get_all_events(self):
        """Every event, active or not, newest first."""
        return [event.as_dict() for event in self.storage.list_events()]

    def get_all_feed_posts(self):
        """Every feed post regardless of approval, newest first."""
        return [post.as_dict() for post in self.storage.list_feed_posts()]

    def get_pending_colleges(self):
        """Colleges waiting for approval, newest first."""
        return [college.as_dict() for college in self.storage.list_colleges(approved=False)]

    def approve_college(self, college_id):
        """Mark a college approved; None when it does not exist."""
        college = self.storage.update_college(college_id, {"is_approved": True})
        if not college:
            return None
        logger.info(f"Approved college {college_id}")
        return college.as_dict()


class AdminResource(Resource):

    def __init__(self, storage):
        self.admin_ops = AdminOperations(storage)


class AdminGetAllEvents(AdminResource):
    def get(self):
        try:
            return self.admin_ops.get_all_events(), 200
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving all events: {e}")
            return {"message": "Database error"}, 500


class AdminGetAllFeedPosts(AdminResource):
    def get(self):
        try:
            return self.admin_ops.get_all_feed_posts(), 200
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving feed posts: {e}")
            return {"message": "Database error"}, 500


class AdminGetPendingColleges(AdminResource):
    def get(self):
        try:
            return self.admin_ops.get_pending_colleges(), 200
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving pending colleges: {e}")
            return {"message": "Failed to fetch pending colleges"}, 500


class AdminApproveCollege(AdminResource):
    def put(self, college_id):
        college_pk = parse_id(college_id)
        if college_pk is None:
            return {"message": "Invalid college id"}, 400
        try:
            college = self.admin_ops.approve_college(college_pk)
        except SQLAlchemyError as e:
            logger.error(f"Error approving college {college_pk}: {e}")
            return {"message": "Failed to approve college"}, 500
        if college:
            return college, 200
        return {"message": "College not found"}, 404


def register_admin_resources(api, storage):
    kwargs = {"storage": storage}
    api.add_resource(AdminGetAllEvents, "/admin/events", resource_class_kwargs=kwargs)
    api.add_resource(AdminGetAllFeedPosts, "/admin/feed", resource_class_kwargs=kwargs)
    api.add_resource(AdminGetPendingColleges, "/admin/pending-colleges", resource_class_kwargs=kwargs)
    api.add_resource(AdminApproveCollege, "/admin/colleges/<string:college_id>/approve",
                     resource_class_kwargs=kwargs)
