import math

from shapely.geometry import Polygon, box

from .area_calculator import SPHERE_RADIUS_M, GeodesicAreaCalculator
from .haversine_calculator import HaversineCalculator


def test_one_degree_of_longitude_at_equator() -> None:
    km = HaversineCalculator.calculate_distance(0.0, 0.0, 0.0, 1.0, units="kilometers")
    assert math.isclose(km, 111.195, rel_tol=1e-4)


def test_vectorized_matches_scalar() -> None:
    lats = [59.9, 60.4, 69.6]
    lngs = [10.7, 5.3, 18.9]
    vectorized = HaversineCalculator.distances_to(63.4, 10.4, lats, lngs)
    for lat, lng, value in zip(lats, lngs, vectorized):
        assert math.isclose(value, HaversineCalculator.calculate_distance(63.4, 10.4, lat, lng), rel_tol=1e-12)


def test_geodesic_area_of_one_degree_cell() -> None:
    area = GeodesicAreaCalculator().area_m2(box(0, 0, 1, 1))
    assert 1.2e10 < area < 1.25e10


def test_geodesic_area_subtracts_holes_regardless_of_orientation() -> None:
    calculator = GeodesicAreaCalculator()
    outer = [(10, 59), (12, 59), (12, 60), (10, 60), (10, 59)]
    hole = [(10.5, 59.25), (11.5, 59.25), (11.5, 59.75), (10.5, 59.75), (10.5, 59.25)]

    full = calculator.area_m2(Polygon(outer))
    holed = calculator.area_m2(Polygon(outer, [hole]))
    assert holed < full
    assert math.isclose(holed, calculator.area_m2(Polygon(list(reversed(outer)), [hole])))


def test_spherical_area_of_octant() -> None:
    octant = Polygon([(0, 0), (90, 0), (0, 90), (0, 0)])
    area = GeodesicAreaCalculator.spherical().area_m2(octant)
    assert math.isclose(area, math.pi * SPHERE_RADIUS_M ** 2 / 2, rel_tol=1e-9)


def test_spherical_and_ellipsoidal_areas_differ() -> None:
    cell = box(10, 59, 11, 60)
    spherical = GeodesicAreaCalculator.spherical().area_m2(cell)
    ellipsoidal = GeodesicAreaCalculator().area_m2(cell)
    assert not math.isclose(spherical, ellipsoidal, rel_tol=1e-4)
    assert math.isclose(spherical, ellipsoidal, rel_tol=1e-2)
