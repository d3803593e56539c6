from datetime import datetime, timedelta, timezone

DONATION_PREFIX = 'donation:'

# Fields exposed by the recent-donors listing
PUBLIC_FIELDS = ('donorName', 'bloodGroup', 'timestamp', 'age', 'gender')

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def format_timestamp(moment):
    """Render an aware datetime as ISO-8601 UTC with millisecond precision."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime('%Y-%m-%dT%H:%M:%S.') + f'{moment.microsecond // 1000:03d}Z'


def parse_timestamp(value):
    """Parse a stored timestamp; naive values are taken as UTC."""
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    moment = datetime.fromisoformat(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def epoch_millis(moment):
    return (moment - EPOCH) // timedelta(milliseconds=1)


class DonationRecord:
    """A donation accepted through the intake form. Stored as a JSON value."""

    def __init__(self, user_id, user_email, donor_name, age, gender, blood_group,
                 weight, is_eligible, timestamp):
        self.user_id = user_id
        self.user_email = user_email
        self.donor_name = donor_name
        self.age = age
        self.gender = gender
        self.blood_group = blood_group
        self.weight = weight
        self.is_eligible = is_eligible
        self.timestamp = timestamp

    @property
    def created_at(self):
        return parse_timestamp(self.timestamp)

    def storage_key(self):
        return f'{DONATION_PREFIX}{self.user_id}:{epoch_millis(self.created_at)}'

    def to_dict(self):
        return {
            'userId': self.user_id,
            'userEmail': self.user_email,
            'donorName': self.donor_name,
            'age': self.age,
            'gender': self.gender,
            'bloodGroup': self.blood_group,
            'weight': self.weight,
            'isEligible': self.is_eligible,
            'timestamp': self.timestamp
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            user_id=data.get('userId'),
            user_email=data.get('userEmail'),
            donor_name=data.get('donorName'),
            age=data.get('age'),
            gender=data.get('gender'),
            blood_group=data.get('bloodGroup'),
            weight=data.get('weight'),
            is_eligible=bool(data.get('isEligible')),
            timestamp=data.get('timestamp')
        )

    def public_dict(self):
        data = self.to_dict()
        return {field: data[field] for field in PUBLIC_FIELDS}

    def __repr__(self):
        return f'<DonationRecord {self.donor_name} {self.timestamp}>'
