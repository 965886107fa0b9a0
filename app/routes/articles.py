import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.exceptions import ArticleConflictError, ArticleNotFoundError
from app.schemas import ArticleCreate, ArticleResponse, ArticleUpdate
from app.store import ArticleStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/articles", tags=["articles"])


def get_store(db: Session = Depends(get_db)) -> ArticleStore:
    """FastAPI dependency that wraps the request's DB session in an ArticleStore."""
    return ArticleStore(db)


@router.post("", response_model=ArticleResponse, status_code=status.HTTP_201_CREATED)
def create_article(data: ArticleCreate, store: ArticleStore = Depends(get_store)):
    """Create a new article. Articles are drafts unless `published` is sent as true."""
    try:
        return store.create(data)
    except ArticleConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get("", response_model=List[ArticleResponse])
def list_published(store: ArticleStore = Depends(get_store)):
    """Return all published articles."""
    articles = store.list_published()
    logger.info(f"[GET /articles] Returning {len(articles)} published articles")
    return articles


# Declared before /{article_id} so "drafts" is not parsed as an id
@router.get("/drafts", response_model=List[ArticleResponse])
def list_drafts(store: ArticleStore = Depends(get_store)):
    """Return all unpublished articles."""
    articles = store.list_drafts()
    logger.info(f"[GET /articles/drafts] Returning {len(articles)} drafts")
    return articles


@router.get("/{article_id}", response_model=ArticleResponse)
def get_article(article_id: int, store: ArticleStore = Depends(get_store)):
    """Return a single article by id."""
    try:
        return store.get_by_id(article_id)
    except ArticleNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.patch("/{article_id}", response_model=ArticleResponse)
def update_article(article_id: int, data: ArticleUpdate, store: ArticleStore = Depends(get_store)):
    """
    Partially update an article. Only the keys present in the body are changed;
    send `"description": null` to clear the description.
    """
    try:
        return store.update(article_id, data)
    except ArticleNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ArticleConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.delete("/{article_id}", response_model=ArticleResponse)
def delete_article(article_id: int, store: ArticleStore = Depends(get_store)):
    """Delete an article and echo the removed record back."""
    try:
        return store.delete(article_id)
    except ArticleNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
