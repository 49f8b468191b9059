from fastapi import APIRouter

from angelic.api.routes import admin, auth, chat, conversations, feedback, health, leaderboard, payments, reports

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(chat.router, tags=["chat"])
api_router.include_router(conversations.router, tags=["conversations"])
api_router.include_router(reports.router, tags=["reports"])
api_router.include_router(payments.router, tags=["payments"])
api_router.include_router(feedback.router, tags=["feedback"])
api_router.include_router(admin.router, tags=["admin"])
api_router.include_router(leaderboard.router, tags=["leaderboard"])
