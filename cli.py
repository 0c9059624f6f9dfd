#!/usr/bin/env python
"""
Command-line interface for osm-services

Usage:
    python cli.py geocode "Limerick, Ireland"
    python cli.py search --file map.osm --tag amenity=pub
    python cli.py search --bbox -8.2472 52.8482 -8.1741 52.8995 --tag amenity=pharmacy
    python cli.py capabilities
"""

import os
import sys
import json
import argparse

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from loguru import logger
from osm_services import ClientConfig, Document, Nominatim, OSMClient, OSMError
from osm_services.transport import HttpTransport


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def parse_tags(values):
    """Turn ["k=v", ...] into {"k": "v", ...}"""
    criteria = {}
    for value in values or []:
        if "=" not in value:
            raise ValueError(f"Tag criterion must be key=value, got {value!r}")
        key, _, expected = value.partition("=")
        criteria[key.strip()] = expected.strip()
    return criteria


def build_config(args) -> ClientConfig:
    config = ClientConfig.from_env()
    if getattr(args, "server", None):
        config.api.server = args.server
    if getattr(args, "nominatim_server", None):
        config.nominatim.server = args.nominatim_server
    return config


def cmd_geocode(args):
    """Print the coordinates of a place"""
    setup_logging(args.verbose)

    config = build_config(args)
    if args.format:
        config.nominatim.format = args.format
    nominatim = Nominatim(HttpTransport(config.api), config.nominatim)

    try:
        coords = nominatim.get_coords_of_place(args.place)
    except OSMError as e:
        logger.error(f"Geocoding failed: {e}")
        return 1

    print(json.dumps(coords, indent=2))
    return 0


def cmd_search(args):
    """Search elements by tag in an .osm file or a bounding box"""
    setup_logging(args.verbose)

    try:
        criteria = parse_tags(args.tag)
    except ValueError as e:
        logger.error(str(e))
        return 1

    try:
        if args.file:
            if not os.path.exists(args.file):
                logger.error(f"Input file not found: {args.file}")
                return 1
            document = Document().load_file(args.file)
            results = document.search(criteria, element_type=args.type)
        else:
            client = OSMClient(build_config(args))
            client.get(*args.bbox)
            results = client.search(criteria, element_type=args.type)
    except OSMError as e:
        logger.error(f"Search failed: {e}")
        return 1

    logger.info(f"{len(results)} elements matched {criteria}")
    for element in results:
        if args.xml:
            print(element)
        else:
            print(json.dumps({
                "type": element.element_type,
                "id": element.id,
                "version": element.version,
                "tags": element.tags,
            }, ensure_ascii=False))
    return 0


def cmd_capabilities(args):
    """Print the server's advertised capabilities"""
    setup_logging(args.verbose)

    try:
        client = OSMClient(build_config(args))
    except OSMError as e:
        logger.error(f"Capabilities check failed: {e}")
        return 1

    caps = client.capabilities
    summary = {
        "server": client.server,
        "min_version": caps.min_version,
        "max_version": caps.max_version,
        "max_area": caps.max_area,
        "tracepoints_per_page": caps.tracepoints_per_page,
        "max_nodes": caps.max_nodes,
        "max_elements": caps.max_elements,
        "timeout": caps.timeout,
        "database_status": caps.database_status.value if caps.database_status else None,
        "api_status": caps.api_status.value if caps.api_status else None,
        "gpx_status": caps.gpx_status.value if caps.gpx_status else None,
    }
    print(json.dumps(summary, indent=2))
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="OpenStreetMap API and Nominatim CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Geocode a place:
    python cli.py geocode "Limerick, Ireland"

  Search a local file:
    python cli.py search --file map.osm --tag amenity=restaurant

  Search a bounding box (min_lon min_lat max_lon max_lat):
    python cli.py search --bbox -8.2472 52.8482 -8.1741 52.8995 --tag amenity=pharmacy
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--server", help="OSM API base URL")
    parser.add_argument("--nominatim-server", help="Nominatim alias (nominatim, mapquest) or URL")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Geocode command
    geo_parser = subparsers.add_parser("geocode", help="Get coordinates of a place")
    geo_parser.add_argument("place", help="Place name, e.g. 'Limerick, Ireland'")
    geo_parser.add_argument("--format", choices=["json", "xml"], help="Nominatim response format to request")
    geo_parser.set_defaults(func=cmd_geocode)

    # Search command
    search_parser = subparsers.add_parser("search", help="Search elements by tag")
    source = search_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", "-f", help="OSM XML file")
    source.add_argument(
        "--bbox", nargs=4, type=float,
        metavar=("MIN_LON", "MIN_LAT", "MAX_LON", "MAX_LAT"),
        help="Bounding box to fetch from the API"
    )
    search_parser.add_argument("--tag", "-t", action="append", help="key=value criterion (repeatable)")
    search_parser.add_argument("--type", choices=["node", "way", "relation"], help="Restrict to one element type")
    search_parser.add_argument("--xml", action="store_true", help="Print matches as OSM XML")
    search_parser.set_defaults(func=cmd_search)

    # Capabilities command
    caps_parser = subparsers.add_parser("capabilities", help="Show server capabilities")
    caps_parser.set_defaults(func=cmd_capabilities)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
