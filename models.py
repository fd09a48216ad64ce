#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Event registration service - record models

Every record maps to one worksheet row. Rows are read and written by header
name, so the column order below only matters when a sheet is first created.
"""

from enum import Enum

from utils.helpers import parse_bool, utc_timestamp


COMPANY_HEADERS = ['ID', 'Name', 'Username', 'Password', 'Image', 'Status', 'Deleted']

EVENT_HEADERS = ['Event', 'Status', 'Image', 'Table', 'CreatedAt']

REGISTRATION_HEADERS = [
    'Name',
    'WhatsApp',
    'NationalID',
    'Email',
    'Education',
    'UniversityCollege',
    'Age',
    'Gender',
    'RegistrationDate',
]


class UserRole(Enum):
    """Session roles"""
    ADMIN = 'admin'
    COMPANY = 'company'


class CompanyStatus(Enum):
    """Company status"""
    ENABLED = 'enabled'
    DISABLED = 'disabled'


class EventStatus(Enum):
    """Event status"""
    ENABLED = 'enabled'
    DISABLED = 'disabled'


def _coerce_status(value, enum_cls):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return enum_cls(value.strip().lower())
        except ValueError:
            pass
    return enum_cls.ENABLED


def _clean(value):
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class Company:
    """Tenant that owns a sheet of events"""

    def __init__(self, company_id=None, name=None, username=None, password_hash=None,
                 image=None, status=CompanyStatus.ENABLED, deleted=False):
        self.company_id = company_id
        self.name = name
        self.username = username
        self.password_hash = password_hash
        self.image = image
        self.status = _coerce_status(status, CompanyStatus)
        self.deleted = parse_bool(deleted)

    @property
    def is_enabled(self):
        return self.status == CompanyStatus.ENABLED

    @classmethod
    def from_record(cls, record):
        return cls(
            company_id=_clean(record.get('ID')),
            name=_clean(record.get('Name')),
            username=_clean(record.get('Username')),
            password_hash=_clean(record.get('Password')),
            image=_clean(record.get('Image')),
            status=record.get('Status'),
            deleted=record.get('Deleted'),
        )

    def to_record(self):
        return {
            'ID': self.company_id,
            'Name': self.name,
            'Username': self.username,
            'Password': self.password_hash,
            'Image': self.image,
            'Status': self.status.value,
            'Deleted': self.deleted,
        }

    def to_dict(self):
        """Public representation; the password hash never leaves the service"""
        return {
            'id': self.company_id,
            'name': self.name,
            'username': self.username,
            'image': self.image,
            'status': self.status.value,
            'deleted': self.deleted,
        }

    def __repr__(self):
        return f"<Company {self.company_id} {self.name!r}>"


class Event:
    """Registration campaign listed in a company sheet"""

    def __init__(self, name=None, status=EventStatus.ENABLED, image=None, table=None,
                 created_at=None, registrations=0):
        self.name = name
        self.status = _coerce_status(status, EventStatus)
        self.image = image
        self.table = table
        self.created_at = created_at
        self.registrations = registrations

    @property
    def is_enabled(self):
        return self.status == EventStatus.ENABLED

    @classmethod
    def from_record(cls, record):
        return cls(
            name=_clean(record.get('Event')),
            status=record.get('Status'),
            image=_clean(record.get('Image')),
            table=_clean(record.get('Table')),
            created_at=_clean(record.get('CreatedAt')),
        )

    def to_record(self):
        return {
            'Event': self.name,
            'Status': self.status.value,
            'Image': self.image,
            'Table': self.table,
            'CreatedAt': self.created_at,
        }

    def to_dict(self, company_status=CompanyStatus.ENABLED):
        return {
            'id': self.name,
            'name': self.name,
            'image': self.image,
            'registrations': self.registrations,
            'status': self.status.value,
            'companyStatus': company_status.value,
        }


class Registration:
    """One attendee's submission for an event"""

    def __init__(self, name=None, whatsapp=None, national_id=None, email=None,
                 education=None, university_college=None, age=None, gender=None,
                 registration_date=None):
        self.name = name
        self.whatsapp = whatsapp
        self.national_id = national_id
        self.email = email
        self.education = education
        self.university_college = university_college
        self.age = age
        self.gender = gender
        self.registration_date = registration_date or utc_timestamp()

    @classmethod
    def from_record(cls, record):
        whatsapp = record.get('WhatsApp')
        return cls(
            name=_clean(record.get('Name')),
            whatsapp=str(whatsapp).strip() if whatsapp is not None else None,
            national_id=_clean(record.get('NationalID')),
            email=_clean(record.get('Email')),
            education=_clean(record.get('Education')),
            university_college=_clean(record.get('UniversityCollege')),
            age=record.get('Age'),
            gender=_clean(record.get('Gender')),
            registration_date=_clean(record.get('RegistrationDate')),
        )

    def to_record(self):
        return {
            'Name': self.name,
            'WhatsApp': self.whatsapp,
            'NationalID': self.national_id,
            'Email': self.email,
            'Education': self.education,
            'UniversityCollege': self.university_college,
            'Age': self.age,
            'Gender': self.gender,
            'RegistrationDate': self.registration_date,
        }

    def matches(self, email=None, whatsapp=None):
        """True when this registration uses the same email or phone"""
        if email and self.email and self.email.lower() == email.lower():
            return True
        if whatsapp and self.whatsapp and self.whatsapp == whatsapp:
            return True
        return False


class Identity:
    """Authenticated caller of the current request"""

    def __init__(self, user_id, username, role, company_name=None):
        self.user_id = user_id
        self.username = username
        self.role = role if isinstance(role, UserRole) else UserRole(role)
        self.company_name = company_name

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN

    @classmethod
    def from_session(cls, session):
        if not session.get('logged_in'):
            return None
        try:
            return cls(
                user_id=session.get('user_id'),
                username=session.get('username'),
                role=session.get('user_role'),
                company_name=session.get('company_name'),
            )
        except ValueError:
            return None

    def to_session(self, session):
        session['logged_in'] = True
        session['user_id'] = self.user_id
        session['username'] = self.username
        session['user_role'] = self.role.value
        session['company_name'] = self.company_name

    def to_dict(self):
        return {
            'id': self.user_id,
            'username': self.username,
            'role': self.role.value,
            'companyName': self.company_name,
        }
