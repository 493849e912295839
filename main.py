import argparse
import json
import logging
import sys
from pathlib import Path

from constants.parameters import LinkViewParameters, OrbitViewParameters
from utilities.event_parser import load_event_links
from utilities.exceptions import Sp3CzmlError
from utilities.logger_utils import log_link_summary, log_orbit_summary
from utilities.sp3_parser import parse_sp3_file
from utilities.time_utils import iso_interval, parse_iso_interval
from visualization.czml_utils import build_czml_document
from visualization.event_czml import event_to_czml
from visualization.orbit_czml import sp3_to_czml

LOG_PATH = Path("logs/sp3_czml.log")

logger = logging.getLogger("sp3_czml")


def _configure_logging(log_path: Path, verbose: bool) -> None:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handlers = [logging.FileHandler(log_path, mode="w")]
    if verbose:
        handlers.append(logging.StreamHandler())
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert SP3 orbits and link events to a CZML scene."
    )
    parser.add_argument("--sp3", action="append", default=[], help="SP3 file (repeatable)")
    parser.add_argument("--events", help="Link event JSON file")
    parser.add_argument(
        "--keyword", default="P", help="Keep SP3 position records containing this fragment (P keeps all)"
    )
    parser.add_argument(
        "--sat-keywords", nargs="*", default=None, help="Keep satellites whose id contains one of these"
    )
    parser.add_argument(
        "--gnss-keywords", nargs="*", default=None, help="Keep events whose GNSS id contains one of these"
    )
    parser.add_argument("--style", help="JSON file with 'orbit' and 'link' view options")
    parser.add_argument("--leo-id", default=None, help="Override the LEO end of link lines")
    parser.add_argument("--name", default="sp3-czml", help="CZML document name")
    parser.add_argument("--output", "-o", help="Output CZML file (stdout if omitted)")
    parser.add_argument("--log-file", type=Path, default=LOG_PATH)
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def _load_json(path: str):
    with open(path, "r") as f:
        return json.load(f)


def _union_interval(intervals):
    bounds = [parse_iso_interval(interval) for interval in intervals]
    return iso_interval(min(b[0] for b in bounds), max(b[1] for b in bounds))


def run(args: argparse.Namespace) -> list:
    """Parse the inputs and return the CZML document as a list of packets."""
    style = _load_json(args.style) if args.style else {}
    orbit_view = OrbitViewParameters.fromDict(style.get("orbit", {}))
    link_view = LinkViewParameters.fromDict(style.get("link", {}))

    packets = []
    intervals = []

    orbits = [parse_sp3_file(path, args.keyword) for path in args.sp3]
    for orbit in orbits:
        log_orbit_summary(logger, orbit)
    if orbits:
        orbit_interval = _union_interval(o.interval for o in orbits)
        start, end = parse_iso_interval(orbit_interval)
        packets.extend(sp3_to_czml(orbits, orbit_view, start, end, args.sat_keywords))
        intervals.append(orbit_interval)

    if args.events:
        links = load_event_links(_load_json(args.events), args.gnss_keywords)
        log_link_summary(logger, links)
        packets.extend(event_to_czml(links, link_view, args.leo_id))
        intervals.append(links.interval)

    return build_czml_document(packets, args.name, _union_interval(intervals))


def main(argv=None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    if not args.sp3 and not args.events:
        parser.error("at least one of --sp3 or --events is required")

    _configure_logging(args.log_file, args.verbose)

    try:
        document = run(args)
    except (Sp3CzmlError, ValueError, OSError) as e:
        logger.error("Conversion failed: %s", e)
        print(f"Conversion failed: {e}", file=sys.stderr)
        return 1

    text = json.dumps(document, indent=2)
    if args.output:
        Path(args.output).write_text(text)
        print(f"Saved {len(document) - 1} packets to {args.output}")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
