from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Service:
    id: str
    name: str
    duration_minutes: int
    price: int
    description: str | None = None


@dataclass(frozen=True)
class Provider:
    id: str
    name: str
    specialty: str
    phone: str
    address: str
    city: str
    services: tuple[Service, ...] = ()
    email: str | None = None
    bio: str | None = None
    photo: str | None = None

    def find_service(self, service_id: str | None) -> Service | None:
        if not service_id:
            return None
        for service in self.services:
            if service.id == service_id:
                return service
        return None

    def offers(self, service_id: str | None) -> bool:
        return self.find_service(service_id) is not None
