from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from booking.domain.entities.provider import Provider, Service


class ServicePayloadDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str
    duration: int = Field(ge=0)
    price: int = Field(ge=0)
    description: str | None = None

    def to_entity(self) -> Service:
        return Service(
            id=self.id,
            name=self.name,
            duration_minutes=self.duration,
            price=self.price,
            description=self.description or None,
        )


class ProviderPayloadDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str
    specialty: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    email: str | None = None
    bio: str | None = None
    photo: str | None = None
    services: list[ServicePayloadDTO] = Field(default_factory=list)

    def to_entity(self) -> Provider:
        services: list[Service] = []
        seen: set[str] = set()
        for service in self.services:
            if service.id in seen:
                continue
            seen.add(service.id)
            services.append(service.to_entity())
        return Provider(
            id=self.id,
            name=self.name,
            specialty=self.specialty,
            phone=self.phone,
            address=self.address,
            city=self.city,
            services=tuple(services),
            email=self.email or None,
            bio=self.bio or None,
            photo=self.photo or None,
        )
