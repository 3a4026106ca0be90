import logging

from care_schedule.config import Settings
from care_schedule.data.data_manager import JsonRepo
from care_schedule.data.repo import Repo

logger = logging.getLogger(__name__)


def open_backend(settings: Settings):
    """설정에 따라 JSON / SQLite 저장소 반환"""
    if settings.backend == "sqlite":
        logger.info("using sqlite backend: %s", settings.sqlite_path)
        return Repo(str(settings.sqlite_path), default_start_time=settings.start_time)
    logger.info("using json backend: %s", settings.data_dir)
    return JsonRepo(settings.data_dir, default_start_time=settings.start_time)
