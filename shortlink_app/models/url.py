from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime
from shortlink_app.database.connection import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UrlMapping(Base):
    """
    Persisted association between a short code and its original URL.

    visits is only ever changed by an atomic UPDATE ... SET visits = visits + 1
    issued by the mapping store on a resolved redirect.
    """
    __tablename__ = "url_mappings"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    original_url = Column(String, nullable=False)
    # unique=True is what the collision-retry loop relies on
    short_code = Column(String(16), unique=True, nullable=False, index=True)
    visits = Column(Integer, nullable=False, default=0)
    # Python-side defaults keep sub-second ordering on SQLite
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
