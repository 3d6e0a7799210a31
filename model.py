from flask_sqlalchemy import SQLAlchemy
from datetime import datetime, timezone
import enum

# Initialize SQLAlchemy
db = SQLAlchemy()


def utcnow():
    """Naive UTC timestamp, the form every datetime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat_utc(value):
    if value is None:
        return None
    return value.isoformat() + "Z"


# ===== ENUMS =====
class UserRole(enum.Enum):
    STUDENT = "student"
    COLLEGE_ADMIN = "college_admin"
    ADMIN = "admin"
    def __str__(self):
        return self.value


class RecordMixin:
    """Column-level helpers shared by the in-memory and ORM stores."""

    def column_values(self):
        values = {}
        for column in self.__table__.columns:
            value = getattr(self, column.key)
            if isinstance(value, list):
                value = list(value)
            values[column.key] = value
        return values

    def clone(self):
        return type(self)(**self.column_values())

    def apply(self, changes):
        for key, value in changes.items():
            setattr(self, key, value)


# ===== CORE MODELS =====
class College(RecordMixin, db.Model):
    __tablename__ = 'colleges'
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    # Plaintext, compared verbatim at login
    password = db.Column(db.String(255), nullable=True)
    location = db.Column(db.String(255), nullable=True)
    description = db.Column(db.Text, nullable=True)
    logo_url = db.Column(db.String(512), nullable=True)
    established_year = db.Column(db.Integer, nullable=True)
    is_approved = db.Column(db.Boolean, default=True, nullable=False)
    students_count = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    events = db.relationship('Event', backref='host_college', lazy=True, cascade="all, delete")
    feed_posts = db.relationship('FeedPost', backref='linked_college', lazy=True)
    users = db.relationship('User', backref='linked_college', lazy=True)

    def __init__(self, name, email, password=None, location=None, description=None,
                 logo_url=None, established_year=None, is_approved=True,
                 students_count=0, created_at=None, id=None):
        self.id = id
        self.name = name
        self.email = email
        self.password = password
        self.location = location
        self.description = description
        self.logo_url = logo_url
        self.established_year = established_year
        self.is_approved = is_approved
        self.students_count = students_count if students_count is not None else 0
        self.created_at = created_at or utcnow()

    def as_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "location": self.location,
            "description": self.description,
            "logoUrl": self.logo_url,
            "establishedYear": self.established_year,
            "isApproved": self.is_approved,
            "studentsCount": self.students_count,
            "createdAt": isoformat_utc(self.created_at)
        }


class Event(RecordMixin, db.Model):
    __tablename__ = 'events'
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.Text, nullable=False)
    college_id = db.Column(db.Integer, db.ForeignKey('colleges.id'), nullable=False, index=True)
    date = db.Column(db.DateTime, nullable=False, index=True)
    fee = db.Column(db.Integer, default=0, nullable=False)
    category = db.Column(db.String(100), nullable=True, index=True)
    location = db.Column(db.Text, nullable=True)
    description = db.Column(db.Text, nullable=True)
    eligibility = db.Column(db.Text, nullable=True)
    prize = db.Column(db.String(255), nullable=True)
    poster_url = db.Column(db.String(512), nullable=True)
    max_participants = db.Column(db.Integer, nullable=True)
    current_participants = db.Column(db.Integer, default=0, nullable=False)
    hosts = db.Column(db.JSON, nullable=True)
    contact_numbers = db.Column(db.JSON, nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    registrations = db.relationship('Registration', backref='event', lazy=True, cascade="all, delete")

    def __init__(self, name, college_id, date, fee=0, category=None, location=None,
                 description=None, eligibility=None, prize=None, poster_url=None,
                 max_participants=None, current_participants=0, hosts=None,
                 contact_numbers=None, is_active=True, created_at=None, id=None):
        self.id = id
        self.name = name
        self.college_id = college_id
        self.date = date
        self.fee = fee if fee is not None else 0
        self.category = category
        self.location = location
        self.description = description
        self.eligibility = eligibility
        self.prize = prize
        self.poster_url = poster_url
        self.max_participants = max_participants
        self.current_participants = current_participants or 0
        self.hosts = list(hosts or [])
        self.contact_numbers = list(contact_numbers or [])
        self.is_active = is_active if is_active is not None else True
        self.created_at = created_at or utcnow()

    def is_full(self):
        return (self.max_participants is not None
                and self.current_participants >= self.max_participants)

    def as_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "collegeId": self.college_id,
            "date": isoformat_utc(self.date),
            "fee": self.fee,
            "category": self.category,
            "location": self.location,
            "description": self.description,
            "eligibility": self.eligibility,
            "prize": self.prize,
            "posterUrl": self.poster_url,
            "maxParticipants": self.max_participants,
            "currentParticipants": self.current_participants,
            "hosts": list(self.hosts or []),
            "contactNumbers": list(self.contact_numbers or []),
            "isActive": self.is_active,
            "createdAt": isoformat_utc(self.created_at)
        }


class Registration(RecordMixin, db.Model):
    __tablename__ = 'registrations'
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    event_id = db.Column(db.Integer, db.ForeignKey('events.id'), nullable=False, index=True)
    full_name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(32), nullable=False)
    college = db.Column(db.String(255), nullable=True)
    course = db.Column(db.String(255), nullable=True)
    year = db.Column(db.String(32), nullable=True)
    address = db.Column(db.Text, nullable=True)
    is_verified = db.Column(db.Boolean, default=False, nullable=False)
    registered_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def __init__(self, event_id, full_name, email, phone, college=None, course=None,
                 year=None, address=None, is_verified=False, registered_at=None, id=None):
        self.id = id
        self.event_id = event_id
        self.full_name = full_name
        self.email = email
        self.phone = phone
        self.college = college
        self.course = course
        self.year = year
        self.address = address
        self.is_verified = bool(is_verified)
        self.registered_at = registered_at or utcnow()

    def as_dict(self):
        return {
            "id": self.id,
            "eventId": self.event_id,
            "fullName": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "college": self.college,
            "course": self.course,
            "year": self.year,
            "address": self.address,
            "isVerified": self.is_verified,
            "registeredAt": isoformat_utc(self.registered_at)
        }


class FeedPost(RecordMixin, db.Model):
    __tablename__ = 'feed_posts'
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    author = db.Column(db.String(255), nullable=False)
    college = db.Column(db.String(255), nullable=True)
    college_id = db.Column(db.Integer, db.ForeignKey('colleges.id'), nullable=True)
    content = db.Column(db.Text, nullable=False)
    image_url = db.Column(db.String(512), nullable=True)
    likes = db.Column(db.Integer, default=0, nullable=False)
    comments = db.Column(db.Integer, default=0, nullable=False)
    is_approved = db.Column(db.Boolean, default=True, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def __init__(self, author, content, college=None, college_id=None, image_url=None,
                 likes=0, comments=0, is_approved=True, created_at=None, id=None):
        self.id = id
        self.author = author
        self.content = content
        self.college = college
        self.college_id = college_id
        self.image_url = image_url
        self.likes = likes or 0
        self.comments = comments or 0
        self.is_approved = is_approved
        self.created_at = created_at or utcnow()

    def as_dict(self):
        return {
            "id": self.id,
            "author": self.author,
            "college": self.college,
            "collegeId": self.college_id,
            "content": self.content,
            "imageUrl": self.image_url,
            "likes": self.likes,
            "comments": self.comments,
            "isApproved": self.is_approved,
            "createdAt": isoformat_utc(self.created_at)
        }


class Admin(RecordMixin, db.Model):
    __tablename__ = 'admins'
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    username = db.Column(db.String(100), nullable=False, unique=True, index=True)
    email = db.Column(db.String(255), nullable=False)
    password = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(50), default="super_admin", nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def __init__(self, username, email, password, role="super_admin", created_at=None, id=None):
        self.id = id
        self.username = username
        self.email = email
        self.password = password
        self.role = role or "super_admin"
        self.created_at = created_at or utcnow()

    def as_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role,
            "createdAt": isoformat_utc(self.created_at)
        }


class User(RecordMixin, db.Model):
    __tablename__ = 'users'
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    username = db.Column(db.String(100), nullable=False, unique=True)
    email = db.Column(db.String(255), nullable=False, unique=True)
    role = db.Column(db.Enum(UserRole), default=UserRole.STUDENT, nullable=False)
    college_id = db.Column(db.Integer, db.ForeignKey('colleges.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def __init__(self, username, email, role=UserRole.STUDENT, college_id=None, created_at=None, id=None):
        self.id = id
        self.username = username
        self.email = email
        self.role = self.validate_role(role) if role is not None else UserRole.STUDENT
        self.college_id = college_id
        self.created_at = created_at or utcnow()

    def as_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role.value,
            "collegeId": self.college_id,
            "createdAt": isoformat_utc(self.created_at)
        }

    @staticmethod
    def validate_role(role):
        if isinstance(role, UserRole):
            return role
        if isinstance(role, str):
            role = role.lower()
        return UserRole(role)
