"""Vehicle class for fleet vehicle identification."""

from typing import Optional


class Vehicle:
    """A customer's vehicle, identified by VIN."""

    def __init__(
        self,
        id: int,
        vin: str,
        make: str,
        model: str,
        year: int,
        customer_id: int,
        created_at: Optional[str] = None,
    ):
        self.id = id
        self.vin = vin
        self.make = make
        self.model = model
        self.year = year
        self.customer_id = customer_id
        self.created_at = created_at

    @property
    def name(self) -> str:
        """Human-readable vehicle name."""
        return f"{self.year} {self.make} {self.model}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "vin": self.vin,
            "make": self.make,
            "model": self.model,
            "year": self.year,
            "customerId": self.customer_id,
            "createdAt": self.created_at,
        }
