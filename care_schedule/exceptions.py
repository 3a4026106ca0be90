class CancelAction(Exception):
    """사용자가 '취소/cancel' 입력 → 메인 메뉴로"""


class GoBackAction(Exception):
    """사용자가 '뒤로/back' 입력 → 이전 메뉴로"""


class ScheduleError(Exception):
    code = "SCHEDULE_ERROR"

    def __init__(self, message: str = "", **details):
        super().__init__(message or self.code)
        self.message = message or self.code
        self.details = details


class ValidationError(ScheduleError):
    code = "VALIDATION_ERROR"


class ConflictError(ScheduleError):
    """같은 직원이 겹치는 시간대에 이미 배정됨"""
    code = "CONFLICT"


class LockedDateError(ScheduleError):
    """PAD 시작일 이전 날짜 → 편집 불가"""
    code = "LOCKED"


class NotAuthorizedError(ScheduleError):
    code = "NOT_AUTHORIZED"


class UnsavedChangesError(ScheduleError):
    code = "UNSAVED_CHANGES"


class StorageError(ScheduleError):
    code = "STORAGE_ERROR"
