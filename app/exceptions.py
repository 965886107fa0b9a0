"""Errors raised by ArticleStore. Routes translate them into HTTP responses."""


class ArticleStoreError(Exception):
    """Base class for all store errors."""


class ArticleNotFoundError(ArticleStoreError):
    """Raised when no article has the requested id."""

    def __init__(self, article_id: int):
        self.article_id = article_id
        super().__init__(f"Article with id '{article_id}' not found")


class ArticleConflictError(ArticleStoreError):
    """Raised when a write would duplicate another article's title."""

    def __init__(self, title: str):
        self.field = "title"
        self.value = title
        super().__init__(f"Article with title='{title}' already exists")
