# Import all models in correct order so string relationships resolve
from maintrack.models.maintenance_type import MaintenanceType
from maintrack.models.activity import Activity, activity_maintenance_types
from maintrack.models.maintenance_plan import MaintenancePlan, MaintenanceStage
from maintrack.models.equipment import Equipment
from maintrack.models.spare_part import SparePart
from maintrack.models.mileage_record import MileageRecord
from maintrack.models.maintenance_record import (
    MaintenanceRecord,
    MaintenanceSparePart,
    MaintenanceActivity,
    ActivityStatus,
    ActivityPriority,
)

__all__ = [
    "MaintenanceType",
    "Activity",
    "activity_maintenance_types",
    "MaintenancePlan",
    "MaintenanceStage",
    "Equipment",
    "SparePart",
    "MileageRecord",
    "MaintenanceRecord",
    "MaintenanceSparePart",
    "MaintenanceActivity",
    "ActivityStatus",
    "ActivityPriority",
]
