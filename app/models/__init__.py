# Import every model so Base.metadata knows all tables
from .user import User, UserRole, DriverStatus
from .route import Route, Stop, RouteStop
from .bus import Bus, BusStatus
