"""
Request payload validation.

One function per entity turns a raw JSON body into a dict of model
attribute values. Keys are accepted in camelCase (what the front-end
sends) or snake_case. Every problem is collected before a single
ValidationError is raised so clients see all bad fields at once.
"""
from datetime import datetime, timezone
import logging
import re

from email_validator import validate_email, EmailNotValidError
import phonenumbers as pn

from model import User

logger = logging.getLogger(__name__)

DEFAULT_PHONE_REGION = "IN"

# Largest value an Integer column holds on every supported database
MAX_INTEGER = 2**31 - 1

INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


class ValidationError(ValueError):
    """Raised when a payload fails validation; `errors` lists each bad field."""

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.message = message
        self.errors = list(errors or [])

    def as_dict(self):
        return {"message": self.message, "errors": self.errors}


def parse_datetime(value):
    """Parse an ISO-8601 string into a naive UTC datetime."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError("expected an ISO-8601 date string")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def is_possible_phone(phone, region=DEFAULT_PHONE_REGION):
    try:
        parsed = pn.parse(phone, region)
    except pn.NumberParseException:
        return False
    return pn.is_possible_number(parsed)


class _Checker:
    """Collects cleaned values and field errors for one payload."""

    def __init__(self, data, partial):
        self.data = data
        self.partial = partial
        self.cleaned = {}
        self.errors = []

    def _lookup(self, key, attr):
        if key in self.data:
            return True, self.data[key]
        if attr in self.data:
            return True, self.data[attr]
        return False, None

    def _field(self, key, attr, required, nullable=True):
        present, value = self._lookup(key, attr)
        if not present:
            if required and not self.partial:
                self.errors.append(f"{key} is required")
            return False, None
        if value is None:
            if required or not nullable:
                self.errors.append(f"{key} cannot be null")
                return False, None
            self.cleaned[attr] = None
            return False, None
        return True, value

    def string(self, key, attr, required=False, max_length=255, strip=True):
        ok, value = self._field(key, attr, required)
        if not ok:
            return
        if not isinstance(value, str):
            self.errors.append(f"{key} must be a string")
            return
        if strip:
            value = value.strip()
        if required and not value:
            self.errors.append(f"{key} cannot be empty")
            return
        if max_length and len(value) > max_length:
            self.errors.append(f"{key} must be at most {max_length} characters")
            return
        self.cleaned[attr] = value

    def text(self, key, attr, required=False):
        self.string(key, attr, required=required, max_length=None)

    def integer(self, key, attr, required=False, minimum=None, maximum=MAX_INTEGER, nullable=True):
        ok, value = self._field(key, attr, required, nullable)
        if not ok:
            return
        if isinstance(value, bool):
            self.errors.append(f"{key} must be an integer")
            return
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        elif isinstance(value, str) and INTEGER_PATTERN.fullmatch(value.strip()):
            value = int(value.strip())
        if not isinstance(value, int):
            self.errors.append(f"{key} must be an integer")
            return
        if minimum is not None and value < minimum:
            self.errors.append(f"{key} must be at least {minimum}")
            return
        if maximum is not None and value > maximum:
            self.errors.append(f"{key} must be at most {maximum}")
            return
        self.cleaned[attr] = value

    def boolean(self, key, attr):
        ok, value = self._field(key, attr, False, nullable=False)
        if not ok:
            return
        if not isinstance(value, bool):
            self.errors.append(f"{key} must be a boolean")
            return
        self.cleaned[attr] = value

    def timestamp(self, key, attr, required=False):
        ok, value = self._field(key, attr, required)
        if not ok:
            return
        try:
            self.cleaned[attr] = parse_datetime(value)
        except (TypeError, ValueError):
            self.errors.append(f"{key} must be an ISO-8601 date")

    def string_list(self, key, attr):
        ok, value = self._field(key, attr, False, nullable=False)
        if not ok:
            return
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            self.errors.append(f"{key} must be a list of strings")
            return
        self.cleaned[attr] = [item.strip() for item in value if item.strip()]

    def email(self, key, attr, required=False):
        ok, value = self._field(key, attr, required)
        if not ok:
            return
        if not isinstance(value, str):
            self.errors.append(f"{key} must be a string")
            return
        try:
            self.cleaned[attr] = validate_email(value.strip(), check_deliverability=False).normalized
        except EmailNotValidError as e:
            self.errors.append(f"{key} is not a valid email address: {e}")

    def phone(self, key, attr, region, required=False):
        ok, value = self._field(key, attr, required)
        if not ok:
            return
        if not isinstance(value, str):
            self.errors.append(f"{key} must be a string")
            return
        value = value.strip()
        if not is_possible_phone(value, region):
            self.errors.append(f"{key} is not a valid phone number")
            return
        self.cleaned[attr] = value

    def result(self, message):
        if self.errors:
            logger.debug(f"{message}: {self.errors}")
            raise ValidationError(message, self.errors)
        return self.cleaned


def _require_object(data, message):
    if not isinstance(data, dict):
        raise ValidationError(message, ["request body must be a JSON object"])


def validate_college(data, partial=False):
    _require_object(data, "Invalid college data")
    check = _Checker(data, partial)
    check.string("name", "name", required=True)
    check.email("email", "email", required=True)
    check.string("password", "password", strip=False)
    check.string("location", "location")
    check.text("description", "description")
    check.string("logoUrl", "logo_url", max_length=512)
    check.integer("establishedYear", "established_year", minimum=0)
    check.boolean("isApproved", "is_approved")
    check.integer("studentsCount", "students_count", minimum=0, nullable=False)
    return check.result("Invalid college data")


def validate_event(data, partial=False):
    _require_object(data, "Invalid event data")
    check = _Checker(data, partial)
    check.text("name", "name", required=True)
    check.integer("collegeId", "college_id", required=True, minimum=1)
    check.timestamp("date", "date", required=True)
    check.integer("fee", "fee", minimum=0, nullable=False)
    check.string("category", "category", max_length=100)
    check.text("location", "location")
    check.text("description", "description")
    check.text("eligibility", "eligibility")
    check.string("prize", "prize")
    check.string("posterUrl", "poster_url", max_length=512)
    check.integer("maxParticipants", "max_participants", minimum=0)
    check.string_list("hosts", "hosts")
    check.string_list("contactNumbers", "contact_numbers")
    check.boolean("isActive", "is_active")
    if partial:
        check.integer("currentParticipants", "current_participants", minimum=0, nullable=False)
    return check.result("Invalid event data")


def validate_registration(data, partial=False, region=DEFAULT_PHONE_REGION):
    _require_object(data, "Invalid registration data")
    check = _Checker(data, partial)
    check.integer("eventId", "event_id", required=True, minimum=1)
    check.string("fullName", "full_name", required=True)
    check.email("email", "email", required=True)
    check.phone("phone", "phone", region, required=True)
    check.string("college", "college")
    check.string("course", "course")
    check.string("year", "year", max_length=32)
    check.text("address", "address")
    check.boolean("isVerified", "is_verified")
    return check.result("Invalid registration data")


def validate_feed_post(data, partial=False):
    _require_object(data, "Invalid post data")
    check = _Checker(data, partial)
    check.string("author", "author", required=True)
    check.text("content", "content", required=True)
    check.string("college", "college")
    check.integer("collegeId", "college_id", minimum=1)
    check.string("imageUrl", "image_url", max_length=512)
    check.integer("likes", "likes", minimum=0, nullable=False)
    check.integer("comments", "comments", minimum=0, nullable=False)
    check.boolean("isApproved", "is_approved")
    return check.result("Invalid post data")


def validate_user(data, partial=False):
    _require_object(data, "Invalid user data")
    check = _Checker(data, partial)
    check.string("username", "username", required=True, max_length=100)
    check.email("email", "email", required=True)
    check.string("role", "role", max_length=50)
    check.integer("collegeId", "college_id", minimum=1)
    cleaned = check.result("Invalid user data")
    if cleaned.get("role") is not None:
        try:
            cleaned["role"] = User.validate_role(cleaned["role"])
        except ValueError:
            raise ValidationError("Invalid user data", ["role must be one of: student, college_admin, admin"])
    return cleaned


def validate_login(data, identifier="email"):
    """Check that a login body carries a non-empty identifier and password."""
    label = identifier.capitalize()
    if not isinstance(data, dict):
        raise ValidationError(f"{label} and password are required")
    missing = [key for key in (identifier, "password")
               if not isinstance(data.get(key), str) or not data.get(key).strip()]
    if missing:
        raise ValidationError(f"{label} and password are required", [f"{key} is required" for key in missing])
    return data[identifier].strip(), data["password"]


def validate_contact(data):
    if not isinstance(data, dict):
        raise ValidationError("All fields are required")
    check = _Checker(data, partial=False)
    check.string("name", "name", required=True)
    check.email("email", "email", required=True)
    check.string("subject", "subject", required=True)
    check.text("message", "message", required=True)
    if check.errors:
        raise ValidationError("All fields are required", check.errors)
    return check.cleaned
