"""Pydantic request/response models for service-area endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .location import CoordinatesModel


class ServiceAreaBoundaryModel(BaseModel):
    type: Literal["polygon", "circle"]
    coordinates: Optional[List[CoordinatesModel]] = Field(default=None, description="Polygon vertices.")
    center: Optional[CoordinatesModel] = Field(default=None, description="Circle center.")
    radius: Optional[float] = Field(default=None, description="Circle radius in kilometers.")


class CreateServiceAreaRequest(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    boundaries: ServiceAreaBoundaryModel
    base_travel_surcharge: float = Field(..., ge=0)
    per_km_surcharge: Optional[float] = Field(default=None, ge=0)
    max_travel_distance: float = Field(default=0.0, ge=0)
    estimated_travel_time: int = Field(default=0, ge=0, description="Base travel time in minutes.")
    available_services: List[str] = Field(
        default_factory=list,
        description="Service IDs offered in this area. Empty means all services.",
    )


class UpdateServiceAreaRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    boundaries: Optional[ServiceAreaBoundaryModel] = None
    base_travel_surcharge: Optional[float] = Field(default=None, ge=0)
    per_km_surcharge: Optional[float] = Field(default=None, ge=0)
    max_travel_distance: Optional[float] = Field(default=None, ge=0)
    estimated_travel_time: Optional[int] = Field(default=None, ge=0)
    available_services: Optional[List[str]] = None
    is_active: Optional[bool] = None


class ServiceAreaResponse(BaseModel):
    id: str
    tenant_id: str
    name: str
    description: Optional[str] = None
    is_active: bool
    boundaries: ServiceAreaBoundaryModel
    base_travel_surcharge: float
    per_km_surcharge: Optional[float] = None
    max_travel_distance: float
    estimated_travel_time: int
    available_services: List[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
