from .admin import router as admin_router
from .cashier import router as cashier_router
from .dinner import router as dinner_router
from .live_game import router as live_game_router
from .players import router as players_router
from .ranking import router as ranking_router
from .report import router as report_router
from .sessions import router as sessions_router

__all__ = [
    "admin_router",
    "cashier_router",
    "dinner_router",
    "live_game_router",
    "players_router",
    "ranking_router",
    "report_router",
    "sessions_router",
]
