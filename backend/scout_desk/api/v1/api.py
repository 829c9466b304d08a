from fastapi import APIRouter

from scout_desk.api.v1.routes import auth, dashboard, health, players, schedule, shadow_team, users, watchlist

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(players.router, prefix="/players", tags=["players"])
api_router.include_router(shadow_team.router, prefix="/shadow-team", tags=["shadow-team"])
api_router.include_router(schedule.router, prefix="/schedule", tags=["schedule"])
api_router.include_router(watchlist.router, prefix="/watchlist", tags=["watchlist"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
