from sprintboard.db.database import init_db, dispose_db, get_async_session

__all__ = ["init_db", "dispose_db", "get_async_session"]
