from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text
from datetime import datetime, timezone
from app.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Article(Base):
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String, nullable=False, unique=True, index=True)  # unique across all articles
    description = Column(String, nullable=True)   # optional, no default
    body = Column(Text, nullable=False)
    published = Column(Boolean, nullable=False, default=False)

    # --- Metadata (managed by ArticleStore) ---
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)  # never changes
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)  # bumped on every update

    def __repr__(self) -> str:
        return f"<Article(id={self.id}, title='{self.title}', published={self.published})>"
