"""
CatTrack Backend — Geo Query Builder Unit Tests
================================================

What we test:
    ✅ Ring shape: five vertices, closed, each corner once, fixed order
    ✅ Query shape handed to the store
    ✅ No ordering validation on inverted boxes
"""

from cattrack.services.geo import BoundingBox, bounding_box_ring, within_box_query


class TestBoundingBoxRing:
    def test_ring_is_closed_with_five_vertices(self):
        ring = bounding_box_ring(min_lat=10, max_lat=20, min_lon=30, max_lon=40)
        assert len(ring) == 5
        assert ring[0] == ring[-1]

    def test_each_corner_appears_once(self):
        ring = bounding_box_ring(min_lat=10, max_lat=20, min_lon=30, max_lon=40)
        corners = [tuple(p) for p in ring[:-1]]
        assert sorted(corners) == sorted([(30, 10), (30, 20), (40, 20), (40, 10)])
        assert len(set(corners)) == 4

    def test_fixed_traversal_order(self):
        ring = bounding_box_ring(min_lat=10, max_lat=20, min_lon=30, max_lon=40)
        assert ring == [[30, 10], [30, 20], [40, 20], [40, 10], [30, 10]]

    def test_inverted_box_is_not_rejected(self):
        ring = bounding_box_ring(min_lat=20, max_lat=10, min_lon=40, max_lon=30)
        assert ring == [[40, 20], [40, 10], [30, 10], [30, 20], [40, 20]]


class TestWithinBoxQuery:
    def test_query_shape(self):
        query = within_box_query(min_lat=10, max_lat=20, min_lon=30, max_lon=40)
        geometry = query["location"]["$geoWithin"]["$geometry"]
        assert geometry["type"] == "Polygon"
        assert geometry["coordinates"] == [bounding_box_ring(10, 20, 30, 40)]

    def test_bounding_box_object_matches_function(self):
        box = BoundingBox(min_lat=-1.5, max_lat=2.5, min_lon=-3.0, max_lon=4.0)
        assert box.query() == within_box_query(-1.5, 2.5, -3.0, 4.0)
        assert box.query(field="where")["where"] == box.query()["location"]
