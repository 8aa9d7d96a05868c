from typing import List

from fastapi import APIRouter, Depends, Request
from loguru import logger

from ghs_games.cache.schedule_cache import EventsLoader
from ghs_games.models.api_result import APIResult
from ghs_games.models.event import Event
from ghs_games.normalization.normalizer import NormalizationError
from ghs_games.scrapers.base_scraper import ScraperError

router = APIRouter(tags=["schedule"])


def get_events_loader(request: Request) -> EventsLoader:
    return request.app.state.events_loader


@router.get("/current-week", response_model=APIResult[List[Event]])
async def current_week(
    events_loader: EventsLoader = Depends(get_events_loader),
) -> APIResult[List[Event]]:
    try:
        events = await events_loader()
    except ScraperError as e:
        logger.error(f"Fetching the current week failed: {e}")
        return APIResult[List[Event]].failure(str(e))
    except NormalizationError as e:
        logger.error(f"Normalizing the current week failed: {e}")
        return APIResult[List[Event]].failure(str(e))
    return APIResult[List[Event]].success(events)
