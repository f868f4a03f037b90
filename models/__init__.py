# Models package
from .event import EventRecord, MintRecord, EVENT_DATA_FIELDS
