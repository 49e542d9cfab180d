"""Main API router."""

from fastapi import APIRouter

from videotube.api.comments import router as comments_router
from videotube.api.dashboard import router as dashboard_router
from videotube.api.likes import router as likes_router
from videotube.api.playlists import router as playlists_router
from videotube.api.subscriptions import router as subscriptions_router
from videotube.api.tweets import router as tweets_router
from videotube.api.users import router as users_router
from videotube.api.videos import router as videos_router
from videotube.constants import API_PREFIX

api_router = APIRouter(prefix=API_PREFIX)

api_router.include_router(users_router, prefix="/users", tags=["users"])
api_router.include_router(videos_router, prefix="/videos", tags=["videos"])
api_router.include_router(playlists_router, prefix="/playlist", tags=["playlist"])
api_router.include_router(subscriptions_router, prefix="/subscriptions", tags=["subscriptions"])
api_router.include_router(likes_router, prefix="/likes", tags=["likes"])
api_router.include_router(comments_router, prefix="/comments", tags=["comments"])
api_router.include_router(tweets_router, prefix="/tweets", tags=["tweets"])
api_router.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
