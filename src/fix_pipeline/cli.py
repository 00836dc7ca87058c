from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .config import build_config
from .errors import VersioningError
from .repository import RepositoryMetadataProvider
from .utils import save_json, setup_logging
from .versioning import extended_report, resolve_version, short_report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="show_version",
        description="Print the version of this FIX pipeline installation",
    )
    parser.add_argument("--short", action="store_true", help="Print only the version string")
    parser.add_argument("--json", metavar="PATH", help="Also write the resolved version as JSON")
    parser.add_argument("--root", help="Install root (default: $FSL_FIXDIR or this checkout)")
    parser.add_argument("--config", help="Optional YAML config file")
    parser.add_argument("--versioning-dir", help="Directory holding base.txt/release.txt/candidate.txt")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages to stderr")
    return parser


def main(argv: Optional[List[str]] = None, provider: Optional[RepositoryMetadataProvider] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = setup_logging(verbose=args.verbose)

    try:
        cfg = build_config(
            root_dir=args.root,
            config_path=args.config,
            versioning_dir=args.versioning_dir,
        )
        if cfg.logs_dir is not None:
            logger = setup_logging(str(cfg.logs_dir), verbose=args.verbose)
        info = resolve_version(cfg, provider)
    except VersioningError as e:
        logger.error("%s", e)
        return 1

    # written before printing so a failed write leaves stdout empty
    if args.json:
        try:
            save_json(info.to_dict(), args.json)
        except OSError as e:
            logger.error("could not write %s: %s", args.json, e)
            return 1
        logger.debug("Wrote %s", args.json)

    print(short_report(info) if args.short else extended_report(info))
    return 0


if __name__ == "__main__":
    sys.exit(main())
