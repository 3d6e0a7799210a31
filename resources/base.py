from flask import request
from flask_restful import Resource


def parse_id(raw):
    """Turn a path segment into an int id, or None when it is not numeric."""
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def json_body():
    """The request's JSON object, or None when the body is missing or not an object."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        return None
    return data


class StorageResource(Resource):
    """Resource with the app's record store injected through resource_class_kwargs."""

    def __init__(self, storage):
        self.storage = storage
