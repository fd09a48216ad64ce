#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Event registration service - helper functions
"""

import os
import re
import time
import hashlib
import hmac
from datetime import datetime, timezone

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
PHONE_PATTERN = re.compile(r'^\d{10,15}$', re.ASCII)

# Characters Excel refuses in worksheet titles
INVALID_SHEET_TITLE_CHARS = re.compile(r'[\\*?:/\[\]]')
MAX_SHEET_TITLE_LENGTH = 31


def validate_email(email):
    """Check email format"""
    if not email or not isinstance(email, str):
        return False
    return EMAIL_PATTERN.fullmatch(email) is not None


def validate_phone(phone):
    """Check a WhatsApp number: 10 to 15 digits, nothing else"""
    if phone is None:
        return False
    return PHONE_PATTERN.fullmatch(str(phone)) is not None


def parse_age(value):
    """Return the age as a number, or None when it is not numeric"""
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    # float() also takes non-ASCII digits and underscores
    if not text.isascii() or '_' in text:
        return None
    try:
        age = float(text)
    except ValueError:
        return None
    if age != age:  # NaN
        return None
    return int(age) if age.is_integer() else age


def parse_bool(value):
    """Read a boolean that may have been stored as text"""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() in ('true', '1', 'yes')


def is_valid_sheet_title(title):
    """Check that a name can be used as a worksheet title"""
    if not title or not isinstance(title, str):
        return False
    if len(title) > MAX_SHEET_TITLE_LENGTH:
        return False
    if title != title.strip() or title.startswith("'") or title.endswith("'"):
        return False
    return INVALID_SHEET_TITLE_CHARS.search(title) is None


def generate_company_id():
    """Timestamp based company id, e.g. company_1718000000000"""
    return f"company_{int(time.time() * 1000)}"


def utc_timestamp():
    """ISO-8601 UTC timestamp with millisecond precision"""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def generate_password_hash(password, salt_length=16):
    """Hash a password

    Returns salt+hash as a hex string so the value can sit in a plain text cell.
    """
    salt = os.urandom(salt_length)
    password_hash = hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt, 100000)
    data = salt + password_hash
    return data.hex()


def verify_password(password, password_hash):
    """Verify a password against a hex salt+hash string"""
    if not password or not password_hash or not isinstance(password_hash, str):
        return False

    try:
        raw = bytes.fromhex(password_hash)
    except ValueError:
        return False

    # 16 bytes of salt + 32 bytes of hash
    if len(raw) < 16 + 32:
        return False

    salt = raw[:16]
    stored_hash = raw[16:]
    new_hash = hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt, 100000)
    return hmac.compare_digest(new_hash, stored_hash)


def safe_filename(value, default='export'):
    """Strip characters that are not allowed in file names"""
    if not value:
        return default
    cleaned = ''.join(ch for ch in str(value) if ch not in '\\/:*?"<>|')
    return cleaned.strip() or default
