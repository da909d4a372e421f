"""
Map widget adapter

One adapter for every map backend. The backend is passed in as a Renderer
that only knows how to draw; polygon synthesis and area estimation stay in
the core.
"""

from typing import Callable, List, Optional, Any, Protocol

from loguru import logger

from .estimation.area_estimator import AreaEstimator, parse_polygon
from .exceptions import InvalidInput
from .geometry import units
from .models import GeoPoint, MeasurementResult
from .synthesis.polygon_generator import PolygonGenerator, PropertyInput


class Renderer(Protocol):
    """Drawing capability supplied by a map backend"""

    def draw_polygon(self, points: List[GeoPoint]) -> None:
        ...

    def clear(self) -> None:
        ...


class DummyRenderer:
    """Renderer for when the map is disabled; records calls, draws nothing"""

    def __init__(self):
        self.drawn: List[List[GeoPoint]] = []
        self.clear_count = 0

    def draw_polygon(self, points: List[GeoPoint]) -> None:
        self.drawn.append(list(points))

    def clear(self) -> None:
        self.clear_count += 1


class MapAdapter:
    """
    Connect a renderer to the polygon generator and area estimator

    Usage:
        adapter = MapAdapter(renderer, on_measurement=callback)
        adapter.load(lat=39.74, lng=-104.99, size=2200)
        adapter.polygon_edited(new_points)
    """

    def __init__(
        self,
        renderer: Renderer,
        on_measurement: Optional[Callable[[MeasurementResult], None]] = None
    ):
        self.renderer = renderer
        self.on_measurement = on_measurement
        self.generator = PolygonGenerator()
        self.estimator = AreaEstimator()

        self.size: Optional[float] = None
        self.property_data: PropertyInput = None
        self.last_result: Optional[MeasurementResult] = None

    def load(
        self,
        lat: Any,
        lng: Any,
        size: Optional[float] = None,
        property_data: PropertyInput = None
    ) -> MeasurementResult:
        """Draw the initial footprint for a location and report its area"""
        self.size = size
        self.property_data = property_data
        self.renderer.clear()

        if not units.is_finite_number(lat) or not units.is_finite_number(lng):
            logger.warning(f"No usable location ({lat!r}, {lng!r}), reporting default area")
            area = self.estimator.estimate(None, property_data, size)
            return self._publish(MeasurementResult(polygon=None, area_sqft=area, source="default"))

        points = self.generator.generate(lat, lng, size, property_data)
        self.renderer.draw_polygon(points)

        area = self.estimator.estimate(points, property_data, size)
        return self._publish(MeasurementResult(polygon=points, area_sqft=area, source="generated"))

    def polygon_edited(self, points: List[Any]) -> MeasurementResult:
        """Re-estimate after the user redraws or edits the footprint"""
        area = self.estimator.estimate(points, self.property_data, self.size)

        try:
            polygon = parse_polygon(points)
        except InvalidInput:
            polygon = None

        return self._publish(MeasurementResult(polygon=polygon, area_sqft=area, source="edited"))

    def reset(self) -> None:
        self.renderer.clear()
        self.last_result = None

    def _publish(self, result: MeasurementResult) -> MeasurementResult:
        self.last_result = result
        if self.on_measurement is not None:
            self.on_measurement(result)
        return result
