"""
Event registry records as observed on the ledger
"""

from dataclasses import dataclass, asdict

from services.errors import InvalidEventError
from utils.formatting import format_content_hash

# Field order of the getEventData struct
EVENT_DATA_FIELDS = (
    'eventCode', 'eventName', 'location', 'timestamp',
    'hostName', 'attendeeCount', 'ipfsHash', 'isActive',
)


def _text(data, key):
    value = data.get(key)
    if value is None:
        return ''
    if not isinstance(value, str):
        raise InvalidEventError(f"{key} must be a string")
    return value.strip()


@dataclass
class EventRecord:
    """An event as registered on the EventNFT contract"""
    event_code: str
    event_name: str = ''
    location: str = ''
    timestamp: int = 0  # unix seconds
    host_name: str = ''
    attendee_count: int = 0
    content_hash: str = ''
    is_active: bool = True
    token_id: int = 0  # 0 means not registered

    @property
    def is_registered(self):
        return self.token_id > 0

    @classmethod
    def from_contract(cls, token_id, data):
        """Build a record from the getEventData result (tuple or mapping)"""
        if hasattr(data, 'keys'):
            values = [data[name] for name in EVENT_DATA_FIELDS]
        else:
            values = list(data)
        code, name, location, timestamp, host, attendees, content_hash, active = values
        return cls(
            event_code=code,
            event_name=name,
            location=location,
            timestamp=int(timestamp),
            host_name=host,
            attendee_count=int(attendees),
            content_hash=content_hash,
            is_active=bool(active),
            token_id=int(token_id),
        )

    @classmethod
    def from_dict(cls, data):
        """Build an unregistered record from request JSON"""
        if not isinstance(data, dict):
            raise InvalidEventError("Event data must be an object")
        try:
            return cls(
                event_code=_text(data, 'event_code'),
                event_name=_text(data, 'event_name'),
                location=_text(data, 'location'),
                timestamp=int(data.get('timestamp') or 0),
                host_name=_text(data, 'host_name'),
                attendee_count=int(data.get('attendee_count') or 0),
                content_hash=_text(data, 'content_hash'),
            )
        except (TypeError, ValueError, OverflowError) as e:
            raise InvalidEventError(f"Invalid event data: {e}")

    def validate(self):
        """Reject records the contract would refuse to register"""
        if not self.event_code:
            raise InvalidEventError("Event code is required")
        if not self.event_name:
            raise InvalidEventError("Event name is required")
        if self.timestamp < 0:
            raise InvalidEventError("Timestamp cannot be negative")
        if self.attendee_count < 0:
            raise InvalidEventError("Attendee count cannot be negative")

    def registration_args(self):
        """Arguments for registerEvent, in contract order"""
        return (
            self.event_code,
            self.event_name,
            self.location,
            int(self.timestamp),
            self.host_name,
            int(self.attendee_count),
            format_content_hash(self.content_hash),
        )

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class MintRecord:
    """Whether an account has minted the NFT of an event"""
    event_code: str
    account: str
    has_minted: bool = False

    def to_dict(self):
        return asdict(self)
