"""Tests for aircraft reference profiles and profile validation."""

import math

import pytest

from airlift.contracts.aircraft import LanePosition
from airlift.contracts.enums import AircraftType, PalletOrientation
from airlift.errors import ProfileConfigError
from airlift.reference.aircraft_profiles import (
    AIRCRAFT_PROFILES,
    C17_PROFILE,
    C130_PROFILE,
    PALLET_463L,
    get_profile,
    validate_profile,
)


class TestPlatformSpec:
    def test_gross_limit_by_height(self):
        assert PALLET_463L.gross_limit_for_height(60) == 10_000
        assert PALLET_463L.gross_limit_for_height(96) == 10_000
        assert PALLET_463L.gross_limit_for_height(98) == 8_000
        assert PALLET_463L.gross_limit_for_height(100) == 8_000
        assert PALLET_463L.gross_limit_for_height(101) == 0

    def test_orientation(self):
        assert PALLET_463L.length_along_axis(PalletOrientation.LENGTHWISE) == 108
        assert PALLET_463L.length_along_axis("crosswise") == 88
        assert PALLET_463L.width_across_axis(PalletOrientation.CROSSWISE) == 108


class TestReferenceProfiles:
    def test_lookup_by_string_and_enum(self):
        assert get_profile("C-17") is C17_PROFILE
        assert get_profile(AircraftType.C130) is C130_PROFILE
        assert set(AIRCRAFT_PROFILES) == {"C-17", "C-130"}

    def test_unknown_type(self):
        with pytest.raises(ProfileConfigError) as exc_info:
            get_profile("C-5")
        assert exc_info.value.aircraft_type == "C-5"
        assert "unknown" in exc_info.value.reason

    def test_c17_geometry(self):
        p = C17_PROFILE
        assert p.cargo_length_in == 1056
        assert p.pallet_positions == 18
        assert p.ramp_start_in == 876
        assert p.target_cg_percent == 28
        assert p.envelope_length_percent == 24
        assert p.ramp_clearance_width_in == 144

    def test_c130_single_center_lane(self):
        p = C130_PROFILE
        assert [lane.y_center_in for lane in p.lanes] == [0]
        assert p.pallet_orientation == PalletOrientation.CROSSWISE
        assert p.target_cg_percent == pytest.approx(25.5)

    def test_profiles_serialize(self):
        data = C17_PROFILE.to_json()
        assert data["aircraft_type"] == "C-17"
        assert data["pallet_orientation"] == "lengthwise"


class TestValidateProfile:
    def test_reference_profiles_pass(self):
        assert validate_profile(C17_PROFILE) is C17_PROFILE
        assert validate_profile(C130_PROFILE) is C130_PROFILE

    def test_zero_mac_length(self):
        with pytest.raises(ProfileConfigError, match="mac_length_in"):
            validate_profile(C17_PROFILE.model_copy(update={"mac_length_in": 0}))

    def test_zero_payload(self):
        with pytest.raises(ProfileConfigError, match="max_payload_lb"):
            validate_profile(C130_PROFILE.model_copy(update={"max_payload_lb": 0}))

    def test_zero_ramp_width(self):
        with pytest.raises(ProfileConfigError, match="ramp_clearance_width_in"):
            validate_profile(C17_PROFILE.model_copy(update={"ramp_clearance_width_in": 0}))

    def test_non_finite_limit(self):
        with pytest.raises(ProfileConfigError, match="finite"):
            validate_profile(C17_PROFILE.model_copy(update={"cob_min_percent": math.nan}))

    def test_empty_envelope(self):
        bad = C17_PROFILE.model_copy(update={"cob_min_percent": 30, "cob_max_percent": 30})
        with pytest.raises(ProfileConfigError, match="envelope"):
            validate_profile(bad)

    def test_ramp_longer_than_bay(self):
        with pytest.raises(ProfileConfigError, match="ramp"):
            validate_profile(C130_PROFILE.model_copy(update={"ramp_length_in": 600}))

    def test_no_lanes(self):
        with pytest.raises(ProfileConfigError, match="lane"):
            validate_profile(C17_PROFILE.model_copy(update={"lanes": []}))

    def test_lane_outside_bay(self):
        bad = C130_PROFILE.model_copy(
            update={"lanes": [LanePosition(name="Offset Lane", y_center_in=40)]}
        )
        with pytest.raises(ProfileConfigError, match="outside the bay"):
            validate_profile(bad)
