from backoffice.models.fleet import (  # noqa: F401
    Driver,
    DriverVehicle,
    FuelPurchase,
    Owner,
    Vehicle,
)
from backoffice.models.logistics import (  # noqa: F401
    Client,
    Material,
    MaterialType,
    Project,
    ProjectMaterialPrice,
    Trip,
    TripMeasure,
    TripRequest,
    TripRequestMaterial,
    TripRequestPriority,
    TripRequestStatus,
    TripStatus,
    UnitOfMeasure,
)
from backoffice.models.preoperational import (  # noqa: F401
    PreoperationalInspection,
    PreoperationalInspectionDetail,
    PreoperationalItem,
)
from backoffice.models.siigo import (  # noqa: F401
    GeneratedState,
    ImportStatus,
    SiigoAccountsPayable,
    SiigoAccountsPayableGenerated,
    SiigoCostCenter,
    SiigoCredentials,
    SiigoPlatform,
    SiigoWarehouse,
)
