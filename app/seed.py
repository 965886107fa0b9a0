"""
Sample articles for local development.

Run with: python -m app.seed
"""
import logging

from sqlalchemy.orm import Session

from app.database import Base, SessionLocal, engine
from app.models import Article
from app.schemas import ArticleCreate, ArticleUpdate
from app.store import ArticleStore

logger = logging.getLogger(__name__)

SEED_ARTICLES = [
    ArticleCreate(
        title="Adding MongoDB support to the ORM",
        description="We are excited to share that MongoDB support is now generally available.",
        body="Our long-awaited MongoDB connector is finally here...",
        published=False,
    ),
    ArticleCreate(
        title="What's new this quarter?",
        description="Learn about everything that shipped in the last three months.",
        body="Our engineers have been working hard, issuing new releases with many improvements...",
        published=True,
    ),
]


def seed(db: Session) -> int:
    """
    Upsert SEED_ARTICLES keyed by title: existing articles are overwritten with the
    seed values, missing ones are created. Safe to run repeatedly.

    Returns:
        number of articles processed
    """
    store = ArticleStore(db)

    for data in SEED_ARTICLES:
        existing = db.query(Article.id).filter(Article.title == data.title).first()
        if existing is None:
            store.create(data)
        else:
            store.update(existing.id, ArticleUpdate(**data.model_dump(exclude={"title"})))

    logger.info(f"Seeded {len(SEED_ARTICLES)} articles")
    return len(SEED_ARTICLES)


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed(db)
    finally:
        db.close()
