from resources.college_resource import register_college_resources
from resources.event_resource import register_event_resources
from resources.registration_resource import register_registration_resources
from resources.feed_resource import register_feed_resources
from resources.user_resource import register_user_resources
from resources.contact_resource import register_contact_resources


def register_resources(api, storage):
    """Mount every public API resource on the given Flask-RESTful Api."""
    register_college_resources(api, storage)
    register_event_resources(api, storage)
    register_registration_resources(api, storage)
    register_feed_resources(api, storage)
    register_user_resources(api, storage)
    register_contact_resources(api)
