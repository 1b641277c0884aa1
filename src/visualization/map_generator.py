"""
Map Visualization Module for FloodDataSync

Generates interactive maps using Folium to display validated flood
reports and water-level sensors.
"""

import logging
from typing import List, Optional

import folium
from folium.plugins import HeatMap, MarkerCluster

from src.core.constants import LAGOS_CENTER
from src.core.geo_utils import calculate_center
from src.crowdsource.report_handler import FloodReport
from src.ingestion.sensors import SensorReading

logger = logging.getLogger(__name__)


def get_water_level_color(level: float) -> str:
    """Get marker color based on water level in meters."""
    if level < 0.5:
        return "green"
    elif level < 1.0:
        return "orange"
    elif level < 1.5:
        return "red"
    else:
        return "darkred"


def get_water_level_radius(level: float) -> int:
    """Calculate marker radius based on water level."""
    if level < 0.5:
        return 6
    elif level < 1.0:
        return 9
    elif level < 1.5:
        return 12
    else:
        return 16


def _report_popup(report: FloodReport) -> str:
    return f"""
    <div style="font-family: Arial; min-width: 200px;">
        <h4 style="margin: 0;">Flood Report</h4>
        <hr style="margin: 5px 0;">
        <b>Location:</b> {report.location}<br>
        <b>Water Level:</b> {report.water_level}m<br>
        <b>Description:</b> {report.description}<br>
        <b>Status:</b> {"Validated" if report.validated else "Pending/Rejected"}<br>
        <b>Votes:</b> &uarr;{report.upvotes} &darr;{report.downvotes}<br>
        <img src="{report.image_url}" alt="Flood scene" style="width: 100px; height: auto;">
    </div>
    """


def _sensor_popup(sensor: SensorReading) -> str:
    return f"""
    <div style="font-family: Arial; min-width: 180px;">
        <b>IoT Sensor:</b> {sensor.location}<br>
        <b>Current Level:</b> {sensor.current_water_level}m<br>
        <b>Last Updated:</b> {sensor.timestamp.strftime("%H:%M:%S")}
    </div>
    """


def create_flood_map(
    reports: List[FloodReport],
    sensors: Optional[List[SensorReading]] = None,
    center: Optional[tuple] = None,
    zoom: int = 12,
    title: str = "FloodDataSync - Real-time Flood Incidents",
    show_heatmap: bool = True,
    cluster_markers: bool = False,
) -> folium.Map:
    """
    Create an interactive map with validated flood reports.

    Only validated reports are drawn; pending and rejected ones are
    skipped.

    Args:
        reports: Flood reports (any status)
        sensors: Sensor readings to draw alongside
        center: Map center (lat, lon). Auto-calculated if None.
        zoom: Initial zoom level (1-18)
        title: Map title
        show_heatmap: Include water-level heatmap layer
        cluster_markers: Cluster report markers when zoomed out

    Returns:
        Folium Map object
    """
    sensors = sensors or []
    validated = [r for r in reports if r.validated]

    if center is None:
        center = calculate_center(
            [(r.latitude, r.longitude) for r in validated],
            default=LAGOS_CENTER,
        )

    flood_map = folium.Map(
        location=center,
        zoom_start=zoom,
        tiles=None,
    )

    folium.TileLayer(
        tiles="OpenStreetMap",
        name="Street",
    ).add_to(flood_map)

    folium.TileLayer(
        tiles="CartoDB positron",
        name="Light",
        attr="CartoDB",
    ).add_to(flood_map)

    if show_heatmap and validated:
        heat_data = [[r.latitude, r.longitude, r.water_level] for r in validated]
        HeatMap(
            heat_data,
            name="Water Level Heatmap",
            radius=20,
            blur=15,
            max_zoom=15,
        ).add_to(flood_map)

    if cluster_markers:
        report_group = MarkerCluster(name="Flood Reports")
    else:
        report_group = folium.FeatureGroup(name="Flood Reports")

    for report in validated:
        color = get_water_level_color(report.water_level)
        folium.CircleMarker(
            location=[report.latitude, report.longitude],
            radius=get_water_level_radius(report.water_level),
            popup=folium.Popup(_report_popup(report), max_width=300),
            color=color,
            fill=True,
            fill_color=color,
            fill_opacity=0.7,
            weight=2,
        ).add_to(report_group)

    report_group.add_to(flood_map)

    sensor_group = folium.FeatureGroup(name="IoT Sensors")
    for sensor in sensors:
        folium.Marker(
            location=[sensor.latitude, sensor.longitude],
            popup=folium.Popup(_sensor_popup(sensor), max_width=250),
            icon=folium.Icon(color="blue", icon="tint"),
        ).add_to(sensor_group)
    sensor_group.add_to(flood_map)

    folium.LayerControl(position="topright").add_to(flood_map)

    title_html = f'''
    <div style="position: fixed;
                top: 10px; left: 50px;
                background-color: rgba(44,62,80,0.9);
                padding: 10px 20px;
                border-radius: 5px;
                z-index: 9999;
                font-family: Arial;">
        <h3 style="margin: 0; color: white;">{title}</h3>
        <p style="margin: 5px 0 0 0; color: #ccc; font-size: 12px;">
            {len(validated)} validated reports, {len(sensors)} sensors
        </p>
    </div>
    '''
    flood_map.get_root().html.add_child(folium.Element(title_html))

    legend_html = '''
    <div style="position: fixed;
                bottom: 30px; right: 30px;
                background-color: rgba(44,62,80,0.9);
                padding: 10px;
                border-radius: 5px;
                z-index: 9999;
                font-family: Arial;
                font-size: 12px;
                color: white;">
        <b>Water Level</b><br>
        <span style="color: green;">&#9679;</span> &lt; 0.5 m<br>
        <span style="color: orange;">&#9679;</span> 0.5 - 1.0 m<br>
        <span style="color: red;">&#9679;</span> 1.0 - 1.5 m<br>
        <span style="color: darkred;">&#9679;</span> &ge; 1.5 m
    </div>
    '''
    flood_map.get_root().html.add_child(folium.Element(legend_html))

    logger.info(f"Created map with {len(validated)} validated reports and {len(sensors)} sensors")
    return flood_map


def generate_flood_map(
    reports: List[FloodReport],
    sensors: Optional[List[SensorReading]] = None,
    output_path: str = "flood_map.html",
    **kwargs,
) -> str:
    """
    Generate and save the dashboard map.

    Args:
        reports: Flood reports
        sensors: Sensor readings
        output_path: Path to save HTML file

    Returns:
        Path to saved file
    """
    flood_map = create_flood_map(reports=reports, sensors=sensors, **kwargs)
    flood_map.save(output_path)
    logger.info(f"Map saved to {output_path}")

    return output_path
