# Theme Park Wait Watch - Models Package

# Import all ORM models to register them with SQLAlchemy's declarative base
# This ensures string-based relationship() forward references can be resolved
# IMPORTANT: Use relative imports to avoid duplicate module loading issues
from .base import Base, utc_now
from .orm_park import Park
from .orm_attraction import Attraction
from .orm_wait_time import WaitTimeCache
from .orm_user import User, NotificationPreference
from .wait_time import AttractionStatus, Trend, WaitTimeSample

__all__ = [
    'Base',
    'utc_now',
    'Park',
    'Attraction',
    'WaitTimeCache',
    'User',
    'NotificationPreference',
    'AttractionStatus',
    'Trend',
    'WaitTimeSample',
]
