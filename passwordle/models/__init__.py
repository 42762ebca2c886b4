# Models package
from .session import Session, GuessOutcome, serialize_session, deserialize_session
