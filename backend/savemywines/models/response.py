"""
Pydantic models for the SaveMyWines API.

API Contract (/scan_wine, DO NOT CHANGE):
{
  "ok": true,
  "device_id": "string",
  "name": "string",
  "producer": "string",
  "varietal": "string",
  "vintage": 2019,
  "region": "",
  "alcohol": "",
  "notes": "",
  "label_image_url": "string"
}

On failure: {"ok": false, "error": "string"}
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ScanResult(BaseModel):
    """Successful label scan, used to pre-fill the add-wine form."""
    ok: bool = Field(True, description="Always true for a completed scan")
    device_id: str = Field(..., description="Client device identifier")
    name: str = Field("", description="Best-effort wine name")
    producer: str = Field("", description="Best-effort producer")
    varietal: str = Field("", description="Varietal from the controlled vocabulary, or empty")
    vintage: Optional[int] = Field(None, description="Harvest year (19xx/20xx) or null")
    region: str = Field("", description="Not extracted; always empty")
    alcohol: str = Field("", description="Not extracted; always empty")
    notes: str = Field("", description="Not extracted; always empty")
    label_image_url: str = Field("", description="Public URL of the stored label image")


class ErrorResponse(BaseModel):
    """Failure envelope shared by all endpoints."""
    ok: bool = False
    error: str


class AddWineRequest(BaseModel):
    """Wine to add to a device's collection."""
    device_id: Optional[str] = None
    name: Optional[str] = None
    producer: Optional[str] = None
    varietal: Optional[str] = None
    vintage: Optional[int] = Field(None, description="Harvest year")
    date_purchased: Optional[str] = Field(None, description="ISO date the bottle was bought")
    best_drink_date: Optional[str] = Field(None, description="ISO date to drink by")
    notes: Optional[str] = None
    label_image_url: Optional[str] = None

    @field_validator("vintage", mode="before")
    @classmethod
    def blank_vintage_is_none(cls, v):
        """The client form posts an empty string when the year is unknown."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def missing_required(self) -> list[str]:
        """Names of required fields that are absent or blank."""
        return [
            field_name
            for field_name in ("device_id", "name", "date_purchased")
            if not (getattr(self, field_name) or "").strip()
        ]


class AddWineResponse(BaseModel):
    """Response after storing a wine."""
    ok: bool = True
    id: int


class WineRecord(BaseModel):
    """A wine stored in a device's collection."""
    id: int
    device_id: str
    name: str
    producer: Optional[str] = None
    varietal: Optional[str] = None
    vintage: Optional[int] = None
    date_purchased: str
    best_drink_date: Optional[str] = None
    notes: Optional[str] = None
    label_image_url: Optional[str] = None
    created_at: str
