from typing import Literal, Optional
from pydantic import BaseModel, Field, ConfigDict

OfficeType = Literal[
    'passport',
    'aadhaar',
    'driving_license',
    'ration_card',
    'birth_certificate',
    'police_station',
    'municipal_corporation',
    'other',
]

class Office(BaseModel):
    """
    A government office that citizens report crowd levels for.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique office identifier")
    name: str = Field(..., description="Human readable name")
    type: OfficeType = Field('other', description="Kind of office")
    city: str = Field(..., description="City (lowercase)")
    latitude: float = Field(..., ge=-90, le=90, description="Latitude")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude")
    address: Optional[str] = Field(None, description="Street address")
