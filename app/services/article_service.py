"""
Article Service
===============

Read-only access to the shared article library.
"""

from typing import Iterable, Optional
import uuid

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ErrorCodes, NotFoundError
from app.models.article import Article

# Topic tags offered on the article list and the words they match
FILTER_KEYWORDS: dict[str, list[str]] = {
    "HEALTH": ["health", "wellbeing", "mental health", "wellness"],
    "MEDITATION": ["meditation", "mindfulness", "breathing"],
    "STRESS": ["stress", "burnout", "overwhelm"],
    "ANXIETY": ["anxiety", "worry", "panic"],
    "IMPROVE HELP": ["support", "help", "therapy", "treatment", "improve"],
}


def filter_by_tag(articles: Iterable[Article], tag: Optional[str]) -> list[Article]:
    """
    Keep articles whose title or content mentions one of the tag's
    keywords. Unknown tags match on the tag text itself.
    """
    articles = list(articles)
    if not tag:
        return articles

    keywords = [kw.lower() for kw in FILTER_KEYWORDS.get(tag.upper(), [tag])]
    return [
        article
        for article in articles
        if any(kw in f"{article.title} {article.content or ''}".lower() for kw in keywords)
    ]


class ArticleService:
    """Service for article operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_articles(self, limit: Optional[int] = None) -> list[Article]:
        """Articles, newest first."""
        stmt = select(Article).order_by(Article.date_published.desc().nulls_last())
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_article(self, article_id: uuid.UUID) -> Article:
        result = await self.db.execute(select(Article).where(Article.id == article_id))
        article = result.scalar_one_or_none()
        if article is None:
            raise NotFoundError(code=ErrorCodes.ARTICLE_NOT_FOUND, message="Article not found")
        return article

    async def search_articles(self, query: Optional[str]) -> list[Article]:
        """Case-insensitive match on title or content; blank lists everything."""
        query = (query or "").strip()
        if not query:
            return await self.get_articles()

        pattern = f"%{query}%"
        stmt = (
            select(Article)
            .where(or_(Article.title.ilike(pattern), Article.content.ilike(pattern)))
            .order_by(Article.date_published.desc().nulls_last())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
