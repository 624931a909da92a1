from maintrack.api.routes.equipments import router as equipments_router
from maintrack.api.routes.maintenance_plans import router as maintenance_plans_router
from maintrack.api.routes.maintenance_stages import (
    router as maintenance_stages_router,
    reorder_router as stage_reorder_router,
)
from maintrack.api.routes.maintenance_types import router as maintenance_types_router
from maintrack.api.routes.maintenance_records import router as maintenance_records_router
from maintrack.api.routes.mileage_records import router as mileage_records_router
from maintrack.api.routes.activities import router as activities_router
from maintrack.api.routes.spare_parts import router as spare_parts_router

__all__ = [
    "equipments_router",
    "maintenance_plans_router",
    "maintenance_stages_router",
    "stage_reorder_router",
    "maintenance_types_router",
    "maintenance_records_router",
    "mileage_records_router",
    "activities_router",
    "spare_parts_router",
]
