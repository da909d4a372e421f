"""
Pydantic models for roof polygons, property metadata and measurement results
"""

from typing import List, Optional, Literal
from pydantic import BaseModel, ConfigDict, Field


# ============================================================
# Geometry Types
# ============================================================

class GeoPoint(BaseModel):
    lat: float
    lng: float

    def as_lng_lat(self) -> List[float]:
        return [self.lng, self.lat]


class GeoJSONPolygon(BaseModel):
    type: Literal["Polygon"] = "Polygon"
    coordinates: List[List[List[float]]]  # [[[lng, lat], ...]]


# ============================================================
# Property Metadata
# ============================================================

class PropertyData(BaseModel):
    """
    Building record attached to an address.

    Field aliases match the camelCase keys sent by the estimate form, so
    ``PropertyData.model_validate({"buildingSize": 2400})`` works as well as
    ``PropertyData(building_size=2400)``.
    """
    model_config = ConfigDict(populate_by_name=True)

    property_type: Optional[str] = Field(default=None, alias="propertyType")
    building_size: Optional[float] = Field(default=None, alias="buildingSize")
    stories: Optional[int] = None
    roof_type: Optional[str] = Field(default=None, alias="roofType")
    roof_pitch: Optional[str] = Field(default=None, alias="roofPitch")

    @property
    def story_count(self) -> int:
        if not self.stories or self.stories < 1:
            return 1
        return self.stories

    @property
    def roof_type_key(self) -> str:
        return (self.roof_type or "unknown").strip().lower()

    @property
    def roof_pitch_key(self) -> Optional[str]:
        if not self.roof_pitch:
            return None
        return self.roof_pitch.strip().lower()


# ============================================================
# Reports
# ============================================================

class PolygonDimensions(BaseModel):
    width_ft: int
    height_ft: int
    diagonal_ft: int


class PolygonReport(BaseModel):
    vertex_count: int
    centroid: GeoPoint
    dimensions: PolygonDimensions
    planar_area_sqft: float
    geodesic_area_sqft: Optional[float] = None
    is_simple: bool
    expected_size_sqft: Optional[float] = None
    size_ratio: Optional[float] = None
    recommended_scale_factor: Optional[float] = None


class MeasurementResult(BaseModel):
    polygon: Optional[List[GeoPoint]] = None
    area_sqft: int
    source: Literal["generated", "edited", "default"] = "generated"
