"""
Tests for the dashboard map and projection
"""
import folium

from src.crowdsource.dashboard import build_dashboard, sensor_chart, status_counts
from src.ingestion.sensors import SensorSimulator
from src.visualization.map_generator import (
    create_flood_map,
    generate_flood_map,
    get_water_level_color,
    get_water_level_radius,
)


class TestMapGenerator:
    """Test suite for the folium map."""

    def test_water_level_styles(self):
        assert get_water_level_color(0.2) == "green"
        assert get_water_level_color(0.7) == "orange"
        assert get_water_level_color(1.2) == "red"
        assert get_water_level_color(2.0) == "darkred"
        assert get_water_level_radius(0.2) < get_water_level_radius(2.0)

    def test_only_validated_reports_drawn(self, sample_reports):
        flood_map = create_flood_map(sample_reports, SensorSimulator(seed=1).read_all())
        html = flood_map.get_root().render()

        assert isinstance(flood_map, folium.Map)
        assert "1 validated reports, 3 sensors" in html
        assert "Lekki" in html
        assert "Surulere" not in html

    def test_empty_map_centers_on_lagos(self):
        flood_map = create_flood_map([])
        assert list(flood_map.location) == [6.5244, 3.3792]

    def test_generate_writes_file(self, sample_reports, tmp_path):
        output = tmp_path / "flood_map.html"
        path = generate_flood_map(sample_reports, output_path=str(output))

        assert path == str(output)
        assert output.exists()


class TestDashboardProjection:
    """Test suite for the dashboard view."""

    def test_status_counts(self, sample_reports, make_report):
        reports = sample_reports + [make_report("6", downvotes=3)]
        assert status_counts(reports) == {"pending": 4, "validated": 1, "rejected": 1}

    def test_projection(self, sample_reports, make_report):
        reports = sample_reports + [make_report("6", downvotes=3)]
        snapshot = build_dashboard(reports, SensorSimulator(seed=2).read_all())
        data = snapshot.to_dict()

        assert [r["id"] for r in data["validated_reports"]] == ["2"]
        assert len(data["reports"]) == 6
        assert data["reports"][5]["status"] == "rejected"
        assert len(data["sensors"]) == 3

    def test_chart_without_sensors(self):
        chart = sensor_chart([])
        assert chart["data"] == []
        assert chart["labels"] == []
