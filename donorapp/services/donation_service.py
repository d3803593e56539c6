"""
Donation intake and aggregation.

Handlers are built with the key-value store they read and write, plus a
clock returning an aware UTC datetime. They keep no state of their own: every
read re-scans the store.
"""
import logging
import math
import re
from datetime import datetime, timedelta, timezone

from werkzeug.exceptions import BadRequest, Unauthorized

from donorapp.models.donation_record_model import (
    DONATION_PREFIX, DonationRecord, format_timestamp, parse_timestamp
)
from donorapp.services import eligibility

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('donorName', 'age', 'gender', 'bloodGroup', 'weight')

ELIGIBLE_MESSAGE = "Thanks for filling data. You are eligible to donate!"
INELIGIBLE_MESSAGE = "You aren't eligible to give blood."

RECENT_WINDOW = timedelta(days=7)
RECENT_LIMIT = 10

_INT_PREFIX = re.compile(r'\s*([+-]?\d+)')
_FLOAT_PREFIX = re.compile(r'\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')


def utc_now():
    return datetime.now(timezone.utc)


def parse_age(value):
    """Parse an age the lenient way form input is read: leading digits win, fractions truncate."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _INT_PREFIX.match(value)
        return int(match.group(1)) if match else None
    return None


def parse_weight(value):
    """Parse a weight in kilograms from the leading decimal literal of the input."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _FLOAT_PREFIX.match(value)
        if not match:
            return None
        number = float(match.group(1))
    else:
        return None
    return number if math.isfinite(number) else None


def _is_missing(value):
    return value is None or value == ''


class DonationIntakeHandler:
    """Validates a donation form, scores it, and stores it when the donor is eligible."""

    def __init__(self, store, clock=utc_now):
        self.store = store
        self.clock = clock

    def submit(self, principal, payload):
        if principal is None:
            raise Unauthorized('Unauthorized - Please login first')

        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise BadRequest('All fields are required')
        if any(_is_missing(payload.get(field)) for field in REQUIRED_FIELDS):
            raise BadRequest('All fields are required')

        age = parse_age(payload['age'])
        weight = parse_weight(payload['weight'])
        if age is None or weight is None:
            raise BadRequest('Invalid age or weight format')

        is_eligible = eligibility.evaluate(age, weight)

        record = DonationRecord(
            user_id=principal.user_id,
            user_email=principal.email,
            donor_name=payload['donorName'],
            age=age,
            gender=payload['gender'],
            blood_group=payload['bloodGroup'],
            weight=weight,
            is_eligible=is_eligible,
            timestamp=format_timestamp(self.clock())
        )

        # Only successful donations are kept
        if is_eligible:
            key = record.storage_key()
            self.store.set(key, record.to_dict())
            logger.info("Stored donation %s", key)

        return {
            'success': True,
            'isEligible': is_eligible,
            'message': ELIGIBLE_MESSAGE if is_eligible else INELIGIBLE_MESSAGE
        }


class DonationStatsHandler:
    """Counts stored donations."""

    def __init__(self, store):
        self.store = store

    def stats(self):
        donations = self.store.scan_by_prefix(DONATION_PREFIX)
        eligible = [d for d in donations if d.get('isEligible')]
        return {
            'totalDonations': len(eligible),
            'allDonations': len(donations)
        }


class RecentDonorsHandler:
    """Lists the most recent eligible donors from the trailing week."""

    def __init__(self, store, clock=utc_now, window=RECENT_WINDOW, limit=RECENT_LIMIT):
        self.store = store
        self.clock = clock
        self.window = window
        self.limit = limit

    def recent_donors(self):
        cutoff = self.clock() - self.window

        recent = []
        for data in self.store.scan_by_prefix(DONATION_PREFIX):
            record = DonationRecord.from_dict(data)
            try:
                created_at = record.created_at
            except (TypeError, ValueError, AttributeError):
                logger.warning("Skipping donation with unreadable timestamp: %r", record.timestamp)
                continue
            # Stored records are all eligible today; keep the check for any other writer
            if record.is_eligible and created_at >= cutoff:
                recent.append((created_at, record))

        recent.sort(key=lambda item: item[0], reverse=True)
        return [record.public_dict() for _, record in recent[:self.limit]]
