"""Vehicle and VehicleAssignment classes."""

from datetime import datetime
from typing import Optional


class Vehicle:
    """A fleet vehicle. Its mileage is the "now" for mileage-based schedules."""

    def __init__(self, id: int, name: str, mileage: float = 0):
        self.id = id
        self.name = name
        self.mileage = mileage or 0


class VehicleAssignment:
    """Membership of a vehicle in a service program."""

    def __init__(self, vehicle: Optional[Vehicle], added_at: datetime):
        self.vehicle = vehicle
        self.added_at = added_at
