import pytest

from jurisdiction_map.models.jurisdiction import PayloadShape
from jurisdiction_map.utils.errors import (
    MalformedInput, NoValidData, UnrecognizedShape, ValidationFailure
)
from jurisdiction_map.utils.shape_detector import detect_shape, parse_json
from jurisdiction_map.utils.validator import PayloadValidator


def envelope(*patents):
    return {
        "pubchemResults": {
            "currentCompound": {"cid": 23327, "name": "D-Glutamic Acid"},
            "patents": list(patents),
        }
    }


class TestShapeDetection:
    """Test top-level payload classification."""

    def test_jurisdiction_status_array(self):
        detected = detect_shape([{"country": "Japan", "leagueStatus": "Premier", "active": True}])
        assert detected.shape == PayloadShape.JURISDICTION_STATUS

    def test_patent_application_array(self):
        detected = detect_shape([{"country_code": "JP", "legal_status": "active"}])
        assert detected.shape == PayloadShape.PATENT_APPLICATIONS

    def test_pubchem_envelope(self):
        detected = detect_shape(envelope())
        assert detected.shape == PayloadShape.PUBCHEM_ENVELOPE

    def test_application_keys_win_over_status_keys(self):
        detected = detect_shape([{
            "country": "Japan", "leagueStatus": "Basic",
            "country_code": "JP", "legal_status": "active",
        }])
        assert detected.shape == PayloadShape.PATENT_APPLICATIONS

    def test_only_first_element_is_inspected(self):
        detected = detect_shape([
            {"country": "Japan", "leagueStatus": "Premier", "active": True},
            {"country_code": "JP", "legal_status": "active"},
        ])
        assert detected.shape == PayloadShape.JURISDICTION_STATUS

    def test_empty_array_has_no_valid_data(self):
        with pytest.raises(NoValidData) as exc_info:
            detect_shape([])
        assert exc_info.value.report.valid == 0
        assert exc_info.value.report.shape is None

    @pytest.mark.parametrize("payload", [
        [1, 2, 3],
        [["JP"]],
        [{"name": "Japan"}],
        {"patents": []},
        {"pubchemResults": {"currentCompound": {}}},
        {"pubchemResults": []},
    ])
    def test_unrecognized_shapes(self, payload):
        with pytest.raises(UnrecognizedShape) as exc_info:
            detect_shape(payload)
        assert "expected" in exc_info.value.message

    @pytest.mark.parametrize("payload", ["text", 42, None, True])
    def test_scalars_are_malformed(self, payload):
        with pytest.raises(MalformedInput):
            detect_shape(payload)

    @pytest.mark.parametrize("raw", [b"", b"{not json", "[1, 2,", "null garbage"])
    def test_parse_json_rejects_invalid_text(self, raw):
        with pytest.raises(MalformedInput):
            parse_json(raw)

    def test_parse_json(self):
        assert parse_json(b'[{"country": "Japan"}]') == [{"country": "Japan"}]


class TestPayloadValidator:
    """Test per-element validation for each shape."""

    @pytest.fixture
    def validator(self):
        return PayloadValidator()

    def test_status_partition(self, validator):
        """Valid, invalid, empty and duplicate elements are each counted once."""
        payload = [
            {"country": "Japan", "leagueStatus": "Premier", "active": True},
            {"country": "France", "leagueStatus": "Standard", "active": "yes"},
            {},
            {"country": "Brazil", "leagueStatus": "Basic", "active": False},
            {"country": " japan ", "leagueStatus": "Basic", "active": False},
        ]

        result = validator.validate(detect_shape(payload))
        report = result.report

        assert report.valid == 2
        assert report.invalid == 1
        assert report.empty == 1
        assert report.duplicate == 1
        assert report.valid + report.rejected == len(payload)
        assert [status.country for status in result.statuses] == ["Japan", "Brazil"]
        assert result.statuses[0].active is True

    def test_status_detail_paths(self, validator):
        payload = [
            {"country": "Japan", "leagueStatus": "Premier", "active": True},
            {"country": "", "leagueStatus": "Premier", "active": True},
            {"country": "Japan", "leagueStatus": "Basic", "active": False},
        ]

        report = validator.validate(detect_shape(payload)).report
        paths = [detail.path for detail in report.details]

        assert paths == ["[1].country", "[2].country"]

    def test_status_names_are_trimmed(self, validator):
        result = validator.validate_statuses([
            {"country": "  Germany ", "leagueStatus": "Standard", "active": True}
        ])
        assert result.statuses[0].country == "Germany"

    def test_status_all_invalid(self, validator):
        payload = [
            {"country": "Japan", "leagueStatus": 3, "active": True},
            "Japan",
        ]
        with pytest.raises(NoValidData) as exc_info:
            validator.validate(detect_shape(payload))

        assert isinstance(exc_info.value, ValidationFailure)
        assert exc_info.value.report.invalid == 2
        assert len(exc_info.value.details) == 2

    def test_applications(self, validator):
        payload = [
            {"country_code": " jp ", "legal_status": "active", "filing_date": "2009-01-30"},
            {"country_code": "US", "legal_status": "expired"},
            {"country_code": "", "legal_status": "active"},
            {},
            {"country_code": "EP", "legal_status": "not_active", "filing_date": 20090130},
        ]

        result = validator.validate(detect_shape(payload))

        assert result.report.valid == 2
        assert result.report.invalid == 2
        assert result.report.empty == 1
        assert [app.country_code for app in result.applications] == ["JP", "EP"]
        assert result.applications[1].filing_date == ""

    def test_applications_keep_duplicates(self, validator):
        """Repeated codes are resolved by aggregation, not validation."""
        payload = [
            {"country_code": "JP", "legal_status": "active"},
            {"country_code": "JP", "legal_status": "not_active"},
        ]

        result = validator.validate(detect_shape(payload))

        assert result.report.duplicate == 0
        assert len(result.applications) == 2

    def test_envelope_flattening(self, validator):
        payload = envelope(
            {"applications": [
                {"country_code": "JP", "legal_status": "not_active"},
                {"country_code": "EP", "legal_status": "active"},
            ]},
            {"title": "no applications"},
            {"applications": "JP"},
            {"applications": [{"country_code": "US", "legal_status": "active"}, {}]},
        )

        result = validator.validate(detect_shape(payload))
        report = result.report

        assert report.shape == PayloadShape.PUBCHEM_ENVELOPE
        assert report.valid == 3
        assert report.skipped_patents == 2
        assert report.empty == 1
        assert [app.country_code for app in result.applications] == ["JP", "EP", "US"]
        assert "pubchemResults.patents[3].applications[1]" in [d.path for d in report.details]

    def test_envelope_without_applications(self, validator):
        with pytest.raises(NoValidData) as exc_info:
            validator.validate(detect_shape(envelope({"title": "x"})))
        assert exc_info.value.report.skipped_patents == 1

    def test_envelope_patents_not_a_list(self, validator):
        result = validator.extract_envelope({"pubchemResults": {"patents": None}})

        assert result.applications == []
        assert result.report.details[0].path == "pubchemResults.patents"

    def test_envelope_empty_patents(self, validator):
        with pytest.raises(NoValidData):
            validator.validate(detect_shape(envelope()))
