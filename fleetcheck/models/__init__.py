# FleetCheck Database Models
# Import all models here for SQLAlchemy discovery

from fleetcheck.models.auth_user import AuthUser, AuthSession       # noqa
from fleetcheck.models.profile import Profile, Role                  # noqa
from fleetcheck.models.vehicle import Vehicle                        # noqa
from fleetcheck.models.checklist import Checklist, ChecklistItem     # noqa
from fleetcheck.models.damage import Damage                          # noqa
from fleetcheck.models.fuel_log import FuelLog                       # noqa
from fleetcheck.models.notification import Notification              # noqa
