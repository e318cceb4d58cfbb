"""
Articles API Endpoints
======================

Public reading list with search and topic tags.
"""

from typing import Optional
import uuid

from fastapi import APIRouter, Query

from app.dependencies import DBSession
from app.schemas.common import BaseResponse, ErrorResponse
from app.schemas.tracking import ArticleOut
from app.services.article_service import ArticleService, filter_by_tag

router = APIRouter()


@router.get("", response_model=BaseResponse[list[ArticleOut]])
async def get_articles(
    db: DBSession,
    q: Optional[str] = Query(None, description="Search title and content"),
    tag: Optional[str] = Query(None, description="Topic tag, e.g. STRESS"),
):
    """Articles newest first, optionally searched and narrowed by tag."""
    articles = await ArticleService(db).search_articles(q)
    articles = filter_by_tag(articles, tag)
    return BaseResponse(data=[ArticleOut.model_validate(a) for a in articles])


@router.get(
    "/{article_id}",
    response_model=BaseResponse[ArticleOut],
    responses={404: {"model": ErrorResponse, "description": "Article not found"}},
)
async def get_article(article_id: uuid.UUID, db: DBSession):
    article = await ArticleService(db).get_article(article_id)
    return BaseResponse(data=ArticleOut.model_validate(article))
