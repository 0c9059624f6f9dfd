"""
Tests for the command-line interface
"""

import json
import pytest
from unittest.mock import MagicMock, patch

import cli
from osm_services import GeocodeNotFoundError


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 1
    assert "usage" in capsys.readouterr().out


def test_search_file(capsys, files_dir):
    code = cli.main(["search", "--file", str(files_dir / "osm.osm"), "--tag", "amenity=pub"])
    assert code == 0

    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 1
    result = json.loads(lines[0])
    assert result["id"] == 292700102
    assert result["tags"]["name"] == "The Plough"


def test_search_file_as_xml(capsys, files_dir):
    code = cli.main(["search", "--file", str(files_dir / "osm.osm"), "--tag", "route=bus", "--xml"])
    assert code == 0
    assert capsys.readouterr().out.startswith('<relation id="56688"')


def test_search_missing_file(tmp_path):
    assert cli.main(["search", "--file", str(tmp_path / "missing.osm")]) == 1


def test_search_bad_tag(files_dir):
    assert cli.main(["search", "--file", str(files_dir / "osm.osm"), "--tag", "amenity"]) == 1


def test_geocode(capsys):
    fake = MagicMock()
    fake.get_coords_of_place.return_value = {"lat": "52.6612577", "lon": "-8.6302084"}
    with patch.object(cli, "Nominatim", return_value=fake) as nominatim:
        code = cli.main(["geocode", "Limerick, Ireland", "--format", "json"])

    assert code == 0
    assert nominatim.call_args[0][1].format == "json"
    assert json.loads(capsys.readouterr().out) == {"lat": "52.6612577", "lon": "-8.6302084"}


def test_geocode_not_found():
    fake = MagicMock()
    fake.get_coords_of_place.side_effect = GeocodeNotFoundError("Neeenaaa")
    with patch.object(cli, "Nominatim", return_value=fake):
        assert cli.main(["geocode", "Neeenaaa"]) == 1


@pytest.mark.parametrize("values,expected", [
    (None, {}),
    (["amenity=pub"], {"amenity": "pub"}),
    (["amenity = pub", "name=A=B"], {"amenity": "pub", "name": "A=B"}),
])
def test_parse_tags(values, expected):
    assert cli.parse_tags(values) == expected
