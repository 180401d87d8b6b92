"""Static service catalog offered by the salon."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SalonService:
    id: str
    name: str
    price: float
    description: str


SERVICE_CATALOG: dict[str, SalonService] = {
    service.id: service
    for service in (
        SalonService("hair", "Signature Cut", 350, "Wash, Cut & Blowdry"),
        SalonService("barber", "Gents Grooming", 200, "Cut & Beard Trim"),
        SalonService("nails", "Mani-Pedi", 250, "Gel or Acrylic"),
        SalonService("makeup", "Event Glam", 450, "Full Face & Lashes"),
    )
}


def get_service(service_id: str) -> SalonService | None:
    return SERVICE_CATALOG.get(service_id)
