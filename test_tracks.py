"""Tests for detection parsing and track assignment."""

import math

import pytest

from privacy_overlay.detection import Detection, parse_detection, parse_detections
from privacy_overlay.tracks import assign_tracks, group_by_timestamp


def face(x, start, end=None, y=0.2, width=0.1, height=0.1):
    return Detection(x=x, y=y, width=width, height=height,
                     start_time_ms=start, end_time_ms=start + 400 if end is None else end)


def raw(**overrides):
    entry = {"x": 0.1, "y": 0.2, "width": 0.3, "height": 0.4, "startTimeMs": 0, "endTimeMs": 500}
    entry.update(overrides)
    return entry


class TestParseDetection:

    def test_valid_entry(self):
        detection = parse_detection(raw())

        assert detection == Detection(0.1, 0.2, 0.3, 0.4, 0, 500)

    def test_integer_coordinates_and_float_times(self):
        detection = parse_detection(raw(x=0, startTimeMs=100.9, endTimeMs=200.2))

        assert detection.x == 0.0
        assert detection.start_time_ms == 100
        assert detection.end_time_ms == 200

    @pytest.mark.parametrize("key", ["x", "y", "width", "height", "startTimeMs", "endTimeMs"])
    def test_missing_field_is_dropped(self, key):
        entry = raw()
        del entry[key]

        assert parse_detection(entry) is None

    @pytest.mark.parametrize("bad", ["0.5", None, True, math.nan, math.inf, [0.1]])
    def test_mistyped_value_is_dropped(self, bad):
        assert parse_detection(raw(width=bad)) is None

    def test_negative_spatial_value_is_dropped(self):
        assert parse_detection(raw(y=-0.01)) is None

    def test_inverted_window_is_dropped(self):
        assert parse_detection(raw(startTimeMs=600, endTimeMs=500)) is None

    def test_box_past_frame_edge_is_kept(self):
        detection = parse_detection(raw(x=0.9, width=0.3))

        assert detection is not None
        assert detection.x + detection.width > 1.0

    def test_non_mapping_is_dropped(self):
        assert parse_detection([0.1, 0.2]) is None

    def test_large_integer_times_stay_exact(self):
        start = 2 ** 53 + 1

        detection = parse_detection(raw(startTimeMs=start, endTimeMs=start + 2))

        assert detection.start_time_ms == start
        assert detection.end_time_ms == start + 2


class TestDetection:

    @pytest.mark.parametrize("field, value", [
        ("x", -0.1), ("width", -1.0), ("y", math.nan), ("height", math.inf),
    ])
    def test_invalid_box_rejected(self, field, value):
        kwargs = dict(x=0.1, y=0.1, width=0.2, height=0.2, start_time_ms=0, end_time_ms=10)
        kwargs[field] = value

        with pytest.raises(ValueError):
            Detection(**kwargs)

    def test_inverted_window_rejected(self):
        with pytest.raises(ValueError):
            Detection(0.1, 0.1, 0.2, 0.2, start_time_ms=20, end_time_ms=10)

    def test_box_past_frame_edge_allowed(self):
        detection = Detection(0.9, 0.9, 0.5, 0.5, 0, 0)

        assert detection.center == pytest.approx((1.15, 1.15))


class TestParseDetections:

    def test_malformed_entries_do_not_fail_request(self):
        entries = [raw(x=0.1), raw(x=0.6, endTimeMs=None), raw(x=0.3, startTimeMs=500, endTimeMs=900)]

        detections = parse_detections(entries)

        assert [d.x for d in detections] == [0.1, 0.3]

    def test_malformed_entry_does_not_count_towards_group(self):
        entries = [raw(x=0.1), {"x": 0.6, "y": 0.1, "width": 0.1, "height": 0.1, "startTimeMs": 0}]

        tracks = assign_tracks(parse_detections(entries))

        assert len(tracks) == 1


class TestAssignTracks:

    def test_empty_input(self):
        assert assign_tracks([]) == []

    def test_track_count_is_largest_group(self):
        detections = [face(0.1, 0), face(0.6, 0), face(0.3, 500)]

        tracks = assign_tracks(detections)

        assert len(tracks) == 2

    def test_faces_sorted_left_to_right_within_group(self):
        detections = [face(0.7, 0), face(0.2, 0), face(0.5, 0)]

        tracks = assign_tracks(detections)

        assert [t.detections[0].x for t in tracks] == [0.2, 0.5, 0.7]
        assert [t.index for t in tracks] == [0, 1, 2]

    def test_short_group_leaves_later_tracks_empty(self):
        detections = [face(0.1, 0), face(0.6, 0), face(0.3, 500)]

        tracks = assign_tracks(detections)

        assert [d.start_time_ms for d in tracks[0].detections] == [0, 500]
        assert [d.start_time_ms for d in tracks[1].detections] == [0]

    def test_groups_processed_in_time_order(self):
        detections = [face(0.1, 1000), face(0.1, 0), face(0.1, 500)]

        tracks = assign_tracks(detections)

        assert [d.start_time_ms for d in tracks[0].detections] == [0, 500, 1000]

    def test_at_most_one_detection_per_group_per_track(self):
        detections = [face(x / 10, t) for t in (0, 200, 400) for x in range(1, 4)]

        for track in assign_tracks(detections):
            starts = [d.start_time_ms for d in track.detections]
            assert len(starts) == len(set(starts))

    def test_deterministic_regardless_of_input_order(self):
        detections = [face(0.4, 0), face(0.4, 0, y=0.6), face(0.1, 300), face(0.8, 300), face(0.5, 0)]

        forward = assign_tracks(detections)
        backward = assign_tracks(list(reversed(detections)))

        assert forward == backward

    def test_group_by_timestamp_orders_keys(self):
        groups = group_by_timestamp([face(0.5, 900), face(0.2, 100), face(0.1, 900)])

        assert list(groups) == [100, 900]
        assert [d.x for d in groups[900]] == [0.1, 0.5]
