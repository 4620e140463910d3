"""
Command line report.

    python -m biomcyl.main --k-flat 43.00 --k-steep 44.50 --axis-steep 100
    python -m biomcyl.main --payload biom.json --eye left
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import settings
from .errors import BiometryResponseError
from .logging_conf import configure_logging
from .models.schema import ANTERIOR_FIELDS, POSTERIOR_FIELDS
from .services.biometry import parse_biometry_response
from .services.formatting import format_report
from .services.session import KeratometrySession

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="biomcyl", description="Corneal astigmatism report (measured, AK, SO, TK)")
    p.add_argument("--payload", type=Path, help="saved BiomAPI JSON response")
    p.add_argument("--eye", choices=["right", "left"], default=None)
    p.add_argument("--log-level", default=None)
    for name in ANTERIOR_FIELDS + POSTERIOR_FIELDS:
        p.add_argument("--" + name.replace("_", "-"), dest=name, default=None,
                       help="comma decimals accepted")
    return p


def run(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    session = KeratometrySession()

    if args.payload:
        try:
            payload = json.loads(args.payload.read_text(encoding="utf-8"))
            session.load_record(parse_biometry_response(payload), args.eye)
        except (OSError, json.JSONDecodeError, BiometryResponseError) as e:
            log.error("Could not load %s: %s", args.payload, e)
            return 1
    else:
        session.select_eye(args.eye or settings.default_eye)
        if any(getattr(args, name) is not None for name in POSTERIOR_FIELDS):
            session.show_posterior()
        for name in ANTERIOR_FIELDS + POSTERIOR_FIELDS:
            value = getattr(args, name)
            if value is not None:
                session.set_field(name, value)

    print(format_report(session.display(), session.selected_eye))
    return 0 if session.results.has_data else 2


if __name__ == "__main__":
    sys.exit(run())
