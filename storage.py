"""
Record store for colleges, events, registrations, feed posts, admins and users.

Two interchangeable backends share the `Storage` interface:

- `MemStorage` keeps detached model objects in per-entity dicts and hands
  out copies, so callers can never mutate stored state by accident.
- `DatabaseStorage` goes through the Flask-SQLAlchemy session.

Both return model instances (or None / False when nothing matched) and
never reuse an id once it has been handed out. One store is built per app
by `create_storage` and injected into the resources that need it.
"""
from abc import ABC, abstractmethod
from datetime import datetime
import itertools
import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from model import db, College, Event, Registration, FeedPost, Admin, User, utcnow

logger = logging.getLogger(__name__)

# Key under app.extensions holding the store built by create_storage
STORAGE_EXTENSION = "collabzone_storage"

UPCOMING = "upcoming"
PAST = "past"


class CapacityError(Exception):
    """Raised when a registration would push an event past maxParticipants."""

    def __init__(self, event_id):
        super().__init__(f"Event {event_id} is full")
        self.event_id = event_id


class Storage(ABC):
    backend = None

    # ----- Colleges -----
    @abstractmethod
    def get_college(self, college_id):
        pass

    @abstractmethod
    def get_college_by_email(self, email):
        pass

    @abstractmethod
    def list_colleges(self, approved=None):
        """All colleges by name; approved=False lists pending ones newest first."""

    @abstractmethod
    def create_college(self, data):
        pass

    @abstractmethod
    def update_college(self, college_id, changes):
        pass

    @abstractmethod
    def delete_college(self, college_id):
        pass

    # ----- Events -----
    @abstractmethod
    def get_event(self, event_id):
        pass

    @abstractmethod
    def list_events(self, college_id=None, category=None, when=None, active=None):
        """Newest first; `when` narrows to upcoming (soonest first) or past events."""

    @abstractmethod
    def create_event(self, data):
        pass

    @abstractmethod
    def update_event(self, event_id, changes):
        pass

    @abstractmethod
    def delete_event(self, event_id):
        pass

    # ----- Registrations -----
    @abstractmethod
    def get_registration(self, registration_id):
        pass

    @abstractmethod
    def list_registrations(self, event_id):
        pass

    @abstractmethod
    def create_registration(self, data, enforce_capacity=False):
        """Store a registration and bump its event's currentParticipants by one.

        Returns None when the event does not exist. Raises CapacityError when
        enforce_capacity is set and the event is already full.
        """

    @abstractmethod
    def update_registration(self, registration_id, changes):
        pass

    @abstractmethod
    def delete_registration(self, registration_id):
        pass

    # ----- Feed posts -----
    @abstractmethod
    def get_feed_post(self, post_id):
        pass

    @abstractmethod
    def list_feed_posts(self, approved=None):
        pass

    @abstractmethod
    def create_feed_post(self, data):
        pass

    @abstractmethod
    def update_feed_post(self, post_id, changes):
        pass

    @abstractmethod
    def delete_feed_post(self, post_id):
        pass

    # ----- Admins -----
    @abstractmethod
    def get_admin(self, admin_id):
        pass

    @abstractmethod
    def get_admin_by_username(self, username):
        pass

    @abstractmethod
    def create_admin(self, data):
        pass

    # ----- Users -----
    @abstractmethod
    def get_user(self, user_id):
        pass

    @abstractmethod
    def get_user_by_email(self, email):
        pass

    @abstractmethod
    def get_user_by_username(self, username):
        pass

    @abstractmethod
    def list_users(self):
        pass

    @abstractmethod
    def create_user(self, data):
        pass

    # ----- Seeding -----
    def seed_admin(self, username, email, password):
        """Create the super admin unless one with this username exists."""
        existing = self.get_admin_by_username(username)
        if existing:
            logger.info(f"Admin '{username}' already present, skipping seed")
            return existing
        admin = self.create_admin({"username": username, "email": email, "password": password})
        logger.info(f"Seeded admin '{username}' with id {admin.id}")
        return admin

    def seed_sample_data(self):
        """Two demo colleges with one event each, only into an empty store."""
        if self.list_colleges():
            logger.info("Colleges already present, skipping sample data")
            return False

        tech = self.create_college({
            "name": "Tech University",
            "email": "admin@techuni.edu",
            "password": "techuni123",
            "location": "Silicon Valley, CA",
            "description": "Leading technology university",
            "students_count": 5000,
            "established_year": 1985,
        })
        arts = self.create_college({
            "name": "Arts College",
            "email": "admin@artscollege.edu",
            "password": "arts123",
            "location": "New York, NY",
            "description": "Premier arts and design institution",
            "students_count": 2500,
            "established_year": 1920,
        })
        self.create_event({
            "name": "TechFest 2024",
            "college_id": tech.id,
            "date": datetime(2024, 3, 15, 10, 0),
            "fee": 500,
            "category": "technical",
            "eligibility": "All students",
            "hosts": ["Tech Club", "Innovation Society"],
            "contact_numbers": ["+1-555-0123", "+1-555-0124"],
            "prize": "₹50,000",
            "max_participants": 100,
            "description": "Annual technology festival",
        })
        self.create_event({
            "name": "Art Exhibition",
            "college_id": arts.id,
            "date": datetime(2024, 2, 20, 14, 0),
            "fee": 0,
            "category": "cultural",
            "eligibility": "Art students",
            "hosts": ["Fine Arts Department"],
            "contact_numbers": ["+1-555-0125"],
            "prize": "₹25,000",
            "max_participants": 50,
            "description": "Student art showcase",
        })
        logger.info("Seeded sample colleges and events")
        return True


def _newest_first(records, attr="created_at"):
    return sorted(records, key=lambda r: (getattr(r, attr), r.id), reverse=True)


class MemStorage(Storage):
    backend = "memory"

    def __init__(self):
        self._tables = {model: {} for model in (College, Event, Registration, FeedPost, Admin, User)}
        self._counters = {model: itertools.count(1) for model in self._tables}

    # ----- generic helpers -----
    def _get(self, model, record_id):
        record = self._tables[model].get(record_id)
        return record.clone() if record else None

    def _all(self, model):
        return [record.clone() for record in self._tables[model].values()]

    def _insert(self, model, data):
        record = model(**data)
        record.id = next(self._counters[model])
        self._tables[model][record.id] = record
        return record.clone()

    def _update(self, model, record_id, changes):
        record = self._tables[model].get(record_id)
        if not record:
            return None
        record.apply(changes)
        return record.clone()

    def _delete(self, model, record_id):
        return self._tables[model].pop(record_id, None) is not None

    # ----- Colleges -----
    def get_college(self, college_id):
        return self._get(College, college_id)

    def get_college_by_email(self, email):
        email = email.lower()
        for college in self._tables[College].values():
            if college.email.lower() == email:
                return college.clone()
        return None

    def list_colleges(self, approved=None):
        colleges = self._all(College)
        if approved is None:
            return sorted(colleges, key=lambda c: (c.name.lower(), c.id))
        colleges = [c for c in colleges if bool(c.is_approved) == approved]
        if approved:
            return sorted(colleges, key=lambda c: (c.name.lower(), c.id))
        return _newest_first(colleges)

    def create_college(self, data):
        college = self._insert(College, data)
        logger.info(f"Created college {college.id} ({college.email})")
        return college

    def update_college(self, college_id, changes):
        return self._update(College, college_id, changes)

    def delete_college(self, college_id):
        if not self._delete(College, college_id):
            return False
        # Mirror the ORM: events cascade, loose links are cleared
        for event_id in [e.id for e in self._tables[Event].values() if e.college_id == college_id]:
            self.delete_event(event_id)
        for record in itertools.chain(self._tables[FeedPost].values(), self._tables[User].values()):
            if record.college_id == college_id:
                record.college_id = None
        return True

    # ----- Events -----
    def get_event(self, event_id):
        return self._get(Event, event_id)

    def list_events(self, college_id=None, category=None, when=None, active=None):
        events = self._all(Event)
        if college_id is not None:
            events = [e for e in events if e.college_id == college_id]
        if category:
            events = [e for e in events if (e.category or "").lower() == category.lower()]
        if active is not None:
            events = [e for e in events if bool(e.is_active) == active]

        now = utcnow()
        if when == UPCOMING:
            return sorted([e for e in events if e.date >= now], key=lambda e: (e.date, e.id))
        if when == PAST:
            return sorted([e for e in events if e.date < now], key=lambda e: (e.date, e.id), reverse=True)
        return _newest_first(events)

    def create_event(self, data):
        data = dict(data, current_participants=0, is_active=data.get("is_active", True))
        event = self._insert(Event, data)
        logger.info(f"Created event {event.id} for college {event.college_id}")
        return event

    def update_event(self, event_id, changes):
        return self._update(Event, event_id, changes)

    def delete_event(self, event_id):
        if not self._delete(Event, event_id):
            return False
        registrations = self._tables[Registration]
        for registration_id in [r.id for r in registrations.values() if r.event_id == event_id]:
            del registrations[registration_id]
        return True

    # ----- Registrations -----
    def get_registration(self, registration_id):
        return self._get(Registration, registration_id)

    def list_registrations(self, event_id):
        registrations = [r for r in self._all(Registration) if r.event_id == event_id]
        return _newest_first(registrations, attr="registered_at")

    def create_registration(self, data, enforce_capacity=False):
        event = self._tables[Event].get(data["event_id"])
        if not event:
            logger.warning(f"Registration rejected, event {data['event_id']} not found")
            return None
        if enforce_capacity and event.is_full():
            raise CapacityError(event.id)

        registration = self._insert(Registration, data)
        event.current_participants += 1
        logger.info(f"Registration {registration.id} added to event {event.id} "
                    f"({event.current_participants} participants)")
        return registration

    def update_registration(self, registration_id, changes):
        return self._update(Registration, registration_id, changes)

    def delete_registration(self, registration_id):
        return self._delete(Registration, registration_id)

    # ----- Feed posts -----
    def get_feed_post(self, post_id):
        return self._get(FeedPost, post_id)

    def list_feed_posts(self, approved=None):
        posts = self._all(FeedPost)
        if approved is not None:
            posts = [p for p in posts if bool(p.is_approved) == approved]
        return _newest_first(posts)

    def create_feed_post(self, data):
        post = self._insert(FeedPost, data)
        logger.info(f"Created feed post {post.id} by {post.author}")
        return post

    def update_feed_post(self, post_id, changes):
        return self._update(FeedPost, post_id, changes)

    def delete_feed_post(self, post_id):
        return self._delete(FeedPost, post_id)

    # ----- Admins -----
    def get_admin(self, admin_id):
        return self._get(Admin, admin_id)

    def get_admin_by_username(self, username):
        for admin in self._tables[Admin].values():
            if admin.username == username:
                return admin.clone()
        return None

    def create_admin(self, data):
        return self._insert(Admin, data)

    # ----- Users -----
    def get_user(self, user_id):
        return self._get(User, user_id)

    def get_user_by_email(self, email):
        email = email.lower()
        for user in self._tables[User].values():
            if user.email.lower() == email:
                return user.clone()
        return None

    def get_user_by_username(self, username):
        for user in self._tables[User].values():
            if user.username == username:
                return user.clone()
        return None

    def list_users(self):
        return sorted(self._all(User), key=lambda u: u.id)

    def create_user(self, data):
        user = self._insert(User, data)
        logger.info(f"Created user {user.id} ({user.username})")
        return user


class DatabaseStorage(Storage):
    backend = "database"

    def __init__(self, database=db):
        self.db = database

    @property
    def session(self):
        return self.db.session

    # ----- generic helpers -----
    def _commit(self):
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Database commit failed: {str(e)}")
            raise

    def _get(self, model, record_id):
        return self.session.get(model, record_id)

    def _insert(self, model, data):
        record = model(**data)
        self.session.add(record)
        self._commit()
        return record

    def _update(self, model, record_id, changes):
        record = self._get(model, record_id)
        if not record:
            return None
        record.apply(changes)
        self._commit()
        return record

    def _delete(self, model, record_id):
        record = self._get(model, record_id)
        if not record:
            return False
        self.session.delete(record)
        self._commit()
        return True

    # ----- Colleges -----
    def get_college(self, college_id):
        return self._get(College, college_id)

    def get_college_by_email(self, email):
        return College.query.filter(func.lower(College.email) == email.lower()).first()

    def list_colleges(self, approved=None):
        query = College.query
        if approved is None:
            return query.order_by(College.name.asc(), College.id.asc()).all()
        query = query.filter(College.is_approved == approved)
        if approved:
            return query.order_by(College.name.asc(), College.id.asc()).all()
        return query.order_by(College.created_at.desc(), College.id.desc()).all()

    def create_college(self, data):
        college = self._insert(College, data)
        logger.info(f"Created college {college.id} ({college.email})")
        return college

    def update_college(self, college_id, changes):
        return self._update(College, college_id, changes)

    def delete_college(self, college_id):
        return self._delete(College, college_id)

    # ----- Events -----
    def get_event(self, event_id):
        return self._get(Event, event_id)

    def list_events(self, college_id=None, category=None, when=None, active=None):
        query = Event.query
        if college_id is not None:
            query = query.filter(Event.college_id == college_id)
        if category:
            query = query.filter(func.lower(Event.category) == category.lower())
        if active is not None:
            query = query.filter(Event.is_active == active)

        now = utcnow()
        if when == UPCOMING:
            return query.filter(Event.date >= now).order_by(Event.date.asc(), Event.id.asc()).all()
        if when == PAST:
            return query.filter(Event.date < now).order_by(Event.date.desc(), Event.id.desc()).all()
        return query.order_by(Event.created_at.desc(), Event.id.desc()).all()

    def create_event(self, data):
        data = dict(data, current_participants=0, is_active=data.get("is_active", True))
        event = self._insert(Event, data)
        logger.info(f"Created event {event.id} for college {event.college_id}")
        return event

    def update_event(self, event_id, changes):
        return self._update(Event, event_id, changes)

    def delete_event(self, event_id):
        return self._delete(Event, event_id)

    # ----- Registrations -----
    def get_registration(self, registration_id):
        return self._get(Registration, registration_id)

    def list_registrations(self, event_id):
        return (Registration.query
                .filter(Registration.event_id == event_id)
                .order_by(Registration.registered_at.desc(), Registration.id.desc())
                .all())

    def create_registration(self, data, enforce_capacity=False):
        event = self._get(Event, data["event_id"])
        if not event:
            logger.warning(f"Registration rejected, event {data['event_id']} not found")
            return None
        if enforce_capacity and event.is_full():
            raise CapacityError(event.id)

        registration = Registration(**data)
        self.session.add(registration)
        event.current_participants = (event.current_participants or 0) + 1
        self._commit()
        logger.info(f"Registration {registration.id} added to event {event.id} "
                    f"({event.current_participants} participants)")
        return registration

    def update_registration(self, registration_id, changes):
        return self._update(Registration, registration_id, changes)

    def delete_registration(self, registration_id):
        return self._delete(Registration, registration_id)

    # ----- Feed posts -----
    def get_feed_post(self, post_id):
        return self._get(FeedPost, post_id)

    def list_feed_posts(self, approved=None):
        query = FeedPost.query
        if approved is not None:
            query = query.filter(FeedPost.is_approved == approved)
        return query.order_by(FeedPost.created_at.desc(), FeedPost.id.desc()).all()

    def create_feed_post(self, data):
        post = self._insert(FeedPost, data)
        logger.info(f"Created feed post {post.id} by {post.author}")
        return post

    def update_feed_post(self, post_id, changes):
        return self._update(FeedPost, post_id, changes)

    def delete_feed_post(self, post_id):
        return self._delete(FeedPost, post_id)

    # ----- Admins -----
    def get_admin(self, admin_id):
        return self._get(Admin, admin_id)

    def get_admin_by_username(self, username):
        return Admin.query.filter_by(username=username).first()

    def create_admin(self, data):
        return self._insert(Admin, data)

    # ----- Users -----
    def get_user(self, user_id):
        return self._get(User, user_id)

    def get_user_by_email(self, email):
        return User.query.filter(func.lower(User.email) == email.lower()).first()

    def get_user_by_username(self, username):
        return User.query.filter_by(username=username).first()

    def list_users(self):
        return User.query.order_by(User.id.asc()).all()

    def create_user(self, data):
        user = self._insert(User, data)
        logger.info(f"Created user {user.id} ({user.username})")
        return user


def create_storage(app):
    """Build the store selected by STORAGE_BACKEND."""
    backend = app.config.get("STORAGE_BACKEND", "memory")
    if backend == "database":
        storage = DatabaseStorage(db)
    elif backend == "memory":
        storage = MemStorage()
    else:
        raise ValueError(f"Unknown STORAGE_BACKEND '{backend}'")
    logger.info(f"Using {storage.backend} record store")
    return storage
