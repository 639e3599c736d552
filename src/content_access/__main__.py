"""
Content Access - Entry Point

Evaluates a single capability against a site snapshot. Useful for checking
a permission setup without running the surrounding system.
"""

import argparse
import logging
import sys
from typing import List, Optional

import yaml

from .config import load_config
from .core.engine import Capability
from .core.errors import AccessError
from .snapshot import load_snapshot

logger = logging.getLogger(__name__)

EXIT_ALLOW = 0
EXIT_DENY = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="content_access",
        description="Evaluate a capability against a site snapshot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Can ada edit resource 1042?
  python -m content_access --snapshot site.yaml --principal ada edit 1042

  # ...and its title field?
  python -m content_access --snapshot site.yaml --principal ada edit-field 1042 --field title

  # Can ada move 1042 under 17?
  python -m content_access --snapshot site.yaml --principal ada move 1042 --target 17

  # Is 1042 viewable to the guest, checked on ada's behalf?
  python -m content_access --snapshot site.yaml --principal ada view 1042 --as guest
"""
    )

    parser.add_argument(
        'capability',
        choices=[c.value for c in Capability],
        help='Capability to evaluate'
    )

    parser.add_argument(
        'resource',
        type=int,
        help='Target resource id'
    )

    parser.add_argument(
        '--snapshot', '-s',
        required=True,
        help='Site snapshot (YAML or JSON)'
    )

    parser.add_argument(
        '--principal', '-p',
        required=True,
        help='Principal id asking'
    )

    parser.add_argument(
        '--config', '-c',
        help='Engine configuration (access.yaml); overrides the snapshot config'
    )

    parser.add_argument(
        '--field', '-f',
        help='Field name for edit / edit-field'
    )

    parser.add_argument(
        '--target', '-t',
        type=int,
        help='Candidate child (add) or new parent (move) resource id'
    )

    parser.add_argument(
        '--as',
        dest='view_as',
        help='Principal id to evaluate view for instead of --principal'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        config = load_config(args.config) if args.config else None
        snapshot = load_snapshot(args.snapshot, config)
        principal = snapshot.principal(args.principal)
        resource = snapshot.resource(args.resource)

        extra = []
        capability = Capability(args.capability)
        if capability in (Capability.EDIT, Capability.EDIT_FIELD) and args.field is not None:
            extra.append(args.field)
        elif capability in (Capability.ADD, Capability.MOVE) and args.target is not None:
            extra.append(snapshot.resource(args.target))
        elif capability == Capability.VIEW and args.view_as:
            extra.append(snapshot.principal(args.view_as))

        allowed = snapshot.engine().check(capability, resource, principal, *extra)
    except (AccessError, FileNotFoundError, KeyError, ValueError, yaml.YAMLError) as e:
        logger.error(f"{e}")
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR

    print("allow" if allowed else "deny")
    return EXIT_ALLOW if allowed else EXIT_DENY


def run():
    """Entry point for console script"""
    sys.exit(main())


if __name__ == '__main__':
    run()
