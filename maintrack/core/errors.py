"""
Structured error taxonomy.

Services raise ``MaintrackError`` with a stable ``ErrorCode``; the exception
handler in ``maintrack.main`` renders it with the mapped HTTP status.
"""
from enum import Enum
from typing import Any, Optional

from fastapi import status


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    ACCESS_DENIED = "ACCESS_DENIED"
    CONFLICT = "CONFLICT"

    # Equipment
    EQUIPMENT_NOT_FOUND = "EQUIPMENT_NOT_FOUND"
    LICENSE_PLATE_EXISTS = "LICENSE_PLATE_EXISTS"
    EQUIPMENT_CODE_EXISTS = "EQUIPMENT_CODE_EXISTS"
    EQUIPMENT_HAS_RECORDS = "EQUIPMENT_HAS_RECORDS"
    INVALID_SORT_FIELD = "INVALID_SORT_FIELD"

    # Maintenance plans and stages
    MAINTENANCE_PLAN_NOT_FOUND = "MAINTENANCE_PLAN_NOT_FOUND"
    MAINTENANCE_PLAN_NAME_EXISTS = "MAINTENANCE_PLAN_NAME_EXISTS"
    MAINTENANCE_PLAN_HAS_STAGES = "MAINTENANCE_PLAN_HAS_STAGES"
    MAINTENANCE_STAGE_NOT_FOUND = "MAINTENANCE_STAGE_NOT_FOUND"
    INVALID_STAGE_VALUE = "INVALID_STAGE_VALUE"
    DUPLICATE_STAGE_KILOMETERS = "DUPLICATE_STAGE_KILOMETERS"
    DUPLICATE_STAGE_DAYS = "DUPLICATE_STAGE_DAYS"
    STAGES_NOT_IN_SAME_PLAN = "STAGES_NOT_IN_SAME_PLAN"

    # Maintenance types
    MAINTENANCE_TYPE_NOT_FOUND = "MAINTENANCE_TYPE_NOT_FOUND"
    MAINTENANCE_TYPE_HAS_CHILDREN = "MAINTENANCE_TYPE_HAS_CHILDREN"
    MAINTENANCE_TYPE_IN_USE = "MAINTENANCE_TYPE_IN_USE"
    MAINTENANCE_TYPE_CYCLE = "MAINTENANCE_TYPE_CYCLE"

    # Activities and spare parts
    ACTIVITY_NOT_FOUND = "ACTIVITY_NOT_FOUND"
    ACTIVITY_NAME_EXISTS = "ACTIVITY_NAME_EXISTS"
    ACTIVITY_IN_USE = "ACTIVITY_IN_USE"
    SPARE_PART_NOT_FOUND = "SPARE_PART_NOT_FOUND"
    FACTORY_CODE_EXISTS = "FACTORY_CODE_EXISTS"
    SPARE_PART_IN_USE = "SPARE_PART_IN_USE"
    INVALID_PRICE_RANGE = "INVALID_PRICE_RANGE"

    # Records
    MAINTENANCE_RECORD_NOT_FOUND = "MAINTENANCE_RECORD_NOT_FOUND"
    INVALID_DATETIME_RANGE = "INVALID_DATETIME_RANGE"
    MAINTENANCE_RECORD_COMPLETED = "MAINTENANCE_RECORD_COMPLETED"
    DUPLICATE_LINE_ITEM = "DUPLICATE_LINE_ITEM"
    MILEAGE_RECORD_NOT_FOUND = "MILEAGE_RECORD_NOT_FOUND"
    DUPLICATE_MILEAGE_DATE = "DUPLICATE_MILEAGE_DATE"
    INVALID_KILOMETERS = "INVALID_KILOMETERS"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    MILEAGE_RECORD_IN_USE = "MILEAGE_RECORD_IN_USE"


HTTP_STATUS_BY_CODE = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ACCESS_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.EQUIPMENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.LICENSE_PLATE_EXISTS: status.HTTP_409_CONFLICT,
    ErrorCode.EQUIPMENT_CODE_EXISTS: status.HTTP_409_CONFLICT,
    ErrorCode.EQUIPMENT_HAS_RECORDS: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_SORT_FIELD: status.HTTP_400_BAD_REQUEST,
    ErrorCode.MAINTENANCE_PLAN_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.MAINTENANCE_PLAN_NAME_EXISTS: status.HTTP_409_CONFLICT,
    ErrorCode.MAINTENANCE_PLAN_HAS_STAGES: status.HTTP_409_CONFLICT,
    ErrorCode.MAINTENANCE_STAGE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_STAGE_VALUE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DUPLICATE_STAGE_KILOMETERS: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DUPLICATE_STAGE_DAYS: status.HTTP_400_BAD_REQUEST,
    ErrorCode.STAGES_NOT_IN_SAME_PLAN: status.HTTP_400_BAD_REQUEST,
    ErrorCode.MAINTENANCE_TYPE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.MAINTENANCE_TYPE_HAS_CHILDREN: status.HTTP_409_CONFLICT,
    ErrorCode.MAINTENANCE_TYPE_IN_USE: status.HTTP_409_CONFLICT,
    ErrorCode.MAINTENANCE_TYPE_CYCLE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ACTIVITY_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ACTIVITY_NAME_EXISTS: status.HTTP_409_CONFLICT,
    ErrorCode.ACTIVITY_IN_USE: status.HTTP_409_CONFLICT,
    ErrorCode.SPARE_PART_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.FACTORY_CODE_EXISTS: status.HTTP_409_CONFLICT,
    ErrorCode.SPARE_PART_IN_USE: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_PRICE_RANGE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.MAINTENANCE_RECORD_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_DATETIME_RANGE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.MAINTENANCE_RECORD_COMPLETED: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_LINE_ITEM: status.HTTP_400_BAD_REQUEST,
    ErrorCode.MILEAGE_RECORD_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.DUPLICATE_MILEAGE_DATE: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_KILOMETERS: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_DATE_RANGE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.MILEAGE_RECORD_IN_USE: status.HTTP_409_CONFLICT,
}


class MaintrackError(Exception):
    """Domain failure carrying a machine-readable code."""

    def __init__(self, code: ErrorCode, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_CODE.get(self.code, status.HTTP_500_INTERNAL_SERVER_ERROR)

    def to_dict(self) -> dict:
        body = {"success": False, "message": self.message, "code": self.code.value}
        if self.details is not None:
            body["details"] = self.details
        return body


def validation_error(message: str, details: Optional[Any] = None) -> MaintrackError:
    return MaintrackError(ErrorCode.VALIDATION_ERROR, message, details)
