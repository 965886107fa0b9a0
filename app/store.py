import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import ArticleConflictError, ArticleNotFoundError
from app.models import Article, utcnow
from app.schemas import ArticleCreate, ArticleResponse, ArticleUpdate

logger = logging.getLogger(__name__)

MAX_ARTICLE_ID = 2**63 - 1  # largest signed 64-bit integer key


def _next_timestamp(previous: datetime) -> datetime:
    """
    Return the current UTC time, nudged past `previous` if the clock has not
    advanced since the last write, so updated_at strictly increases.
    """
    # SQLite hands back naive datetimes even for timezone-aware columns
    if previous.tzinfo is None:
        previous = previous.replace(tzinfo=timezone.utc)
    now = utcnow()
    if now <= previous:
        now = previous + timedelta(microseconds=1)
    return now


class ArticleStore:
    """
    Sole writer for the articles table.

    Every public method runs as one transaction on the given session: at most one
    commit, rolled back on failure. Results are returned as ArticleResponse
    snapshots so callers never hold expired ORM instances.
    """

    def __init__(self, db: Session):
        self.db = db

    # ---------------------------------------------------------------------------
    # Reads
    # ---------------------------------------------------------------------------

    def list_published(self) -> List[ArticleResponse]:
        return self._list(published=True)

    def list_drafts(self) -> List[ArticleResponse]:
        return self._list(published=False)

    def get_by_id(self, article_id: int) -> ArticleResponse:
        return ArticleResponse.model_validate(self._get_or_raise(article_id))

    # ---------------------------------------------------------------------------
    # Writes
    # ---------------------------------------------------------------------------

    def create(self, data: ArticleCreate) -> ArticleResponse:
        """
        Insert a new article. created_at and updated_at start out identical.

        Raises:
            ArticleConflictError: another article already uses data.title
        """
        self._ensure_title_free(data.title)

        now = utcnow()
        article = Article(
            title=data.title,
            description=data.description,
            body=data.body,
            published=data.published,
            created_at=now,
            updated_at=now,
        )
        self.db.add(article)
        self._commit(data.title)
        self.db.refresh(article)

        logger.info(f"Created article {article.id} '{article.title}' (published={article.published})")
        return ArticleResponse.model_validate(article)

    def update(self, article_id: int, data: ArticleUpdate) -> ArticleResponse:
        """
        Apply only the fields present in `data`; absent fields keep their value.

        Raises:
            ArticleNotFoundError: no article with article_id
            ArticleConflictError: the new title belongs to a different article
        """
        article = self._get_or_raise(article_id)
        changes = data.model_dump(exclude_unset=True)

        new_title = changes.get("title")
        if new_title is not None and new_title != article.title:
            self._ensure_title_free(new_title, exclude_id=article_id)

        for field, value in changes.items():
            setattr(article, field, value)
        article.updated_at = _next_timestamp(article.updated_at)

        self._commit(article.title)
        self.db.refresh(article)

        logger.info(f"Updated article {article_id} (fields={sorted(changes)})")
        return ArticleResponse.model_validate(article)

    def delete(self, article_id: int) -> ArticleResponse:
        """
        Hard-delete an article and return what was removed.

        Raises:
            ArticleNotFoundError: no article with article_id
        """
        article = self._get_or_raise(article_id)
        # Snapshot before the row disappears
        removed = ArticleResponse.model_validate(article)

        self.db.delete(article)
        self.db.commit()

        logger.info(f"Deleted article {article_id} '{removed.title}'")
        return removed

    # ---------------------------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------------------------

    def _list(self, published: bool) -> List[ArticleResponse]:
        articles = (
            self.db.query(Article)
            .filter(Article.published == published)
            .order_by(Article.id)
            .all()
        )
        return [ArticleResponse.model_validate(a) for a in articles]

    def _get_or_raise(self, article_id: int) -> Article:
        # Ids outside the signed 64-bit range can't exist and overflow the driver
        if not 0 < article_id <= MAX_ARTICLE_ID:
            raise ArticleNotFoundError(article_id)
        article = self.db.get(Article, article_id)
        if article is None:
            raise ArticleNotFoundError(article_id)
        return article

    def _ensure_title_free(self, title: str, exclude_id: Optional[int] = None):
        query = self.db.query(Article.id).filter(Article.title == title)
        if exclude_id is not None:
            query = query.filter(Article.id != exclude_id)
        if query.first() is not None:
            logger.warning(f"Refused write: title '{title}' is already taken")
            raise ArticleConflictError(title)

    def _commit(self, title: str):
        """Commit, mapping a lost unique-title race to ArticleConflictError."""
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Refused write: unique constraint hit for title '{title}'")
            raise ArticleConflictError(title)
