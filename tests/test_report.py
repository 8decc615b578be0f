"""Tests for text and JSON rendering."""
import json

from pestr.models import Geometry
from pestr.packing import compute_reservation
from pestr.recommend import alternates
from pestr.report import build_report, render_json, render_text


def test_text_unfilled_reservation(partial_geometry):
    res = compute_reservation(partial_geometry)
    assert render_text(res, []) == (
        "3 nodes (108 CPU cores)\n"
        "warning: reservation is not filled\n"
        "  96 CPU cores in use\n"
        "  12 CPU cores idle across 1 nodes\n"
    )


def test_text_filled_reservation_with_alternates():
    g = Geometry.new(36, False, 120, 6)
    res = compute_reservation(g)
    alts = [(Geometry.new(36, False, 18, 2), compute_reservation(Geometry.new(36, False, 18, 2)))]
    assert render_text(res, alts) == (
        "20 nodes (720 CPU cores)\n"
        "alternate geometries that fill the reservation:\n"
        "  18 x 2 (1 nodes; 36 CPU cores)\n"
    )


def test_json_report(partial_geometry):
    res = compute_reservation(partial_geometry)
    alts = alternates(partial_geometry, 0.25, 0.5)
    data = json.loads(render_json(partial_geometry, res, alts))
    assert set(data) == {"geometry", "reservation", "alternatives"}
    assert data["geometry"] == {
        "cpus_per_node": 36,
        "hyperthreading": False,
        "tasks": 24,
        "threads": 4,
        "logical_cpus": 36,
    }
    assert data["reservation"] == {
        "nodes": 3,
        "cpus": 108,
        "used_cpus": 96,
        "idle_cpus": 12,
        "partial_nodes": 1,
        "is_filled": False,
    }
    assert len(data["alternatives"]) == len(alts)
    first = data["alternatives"][0]
    assert first["geometry"]["tasks"] == 18
    assert first["geometry"]["threads"] == 2
    assert first["reservation"]["nodes"] == 1
    assert first["reservation"]["is_filled"] is True


def test_json_report_without_alternates(partial_geometry):
    res = compute_reservation(partial_geometry)
    report = build_report(partial_geometry, res, [])
    assert report.alternatives == []
    assert json.loads(render_json(partial_geometry, res, []))["alternatives"] == []
