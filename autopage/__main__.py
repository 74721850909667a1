"""
CLI entry point for autopage.

Usage:
    autopage https://example.com                         # Open and print title/url
    autopage 'https://example.com/u/${param.user}' --param user=alice
    autopage https://example.com --headless --source     # Dump page source
    autopage https://example.com --attach --port 9333    # Use a running Chrome
"""

import argparse
import sys
from typing import Dict, List

from .config import EngineConfig
from .dynamic_data import SystemDynamicData
from .engine import Engine
from .page import Page


def parse_params(parser: argparse.ArgumentParser, items: List[str]) -> Dict[str, str]:
    """KEY=VALUE pairs to a dict; exits with usage error on bad input."""
    params = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key:
            parser.error(f"--param expects KEY=VALUE, got {item!r}")
        params[key] = value
    return params


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autopage",
        description="Open a page object in Chrome and report its state",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
URL templates:
  ${param.KEY}     replaced with --param KEY=VALUE (prefix set by --prefix)
  ${NAME}          replaced with a system property or environment variable
                   (os.name, user.name, user.home, user.dir, HOME, ...)

Environment:
  AUTOPAGE_HOST, AUTOPAGE_PORT, AUTOPAGE_LAUNCH, AUTOPAGE_HEADLESS,
  AUTOPAGE_CHROME, AUTOPAGE_PROFILE, AUTOPAGE_LOAD_TIMEOUT
        """
    )

    parser.add_argument("url", help="Page url template")
    parser.add_argument(
        "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Page data used to fill the url template (repeatable)"
    )
    parser.add_argument(
        "--prefix",
        default=None,
        help="Parameter prefix (default: param)"
    )

    # Browser options
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run Chrome in headless mode (no visible window)"
    )
    parser.add_argument(
        "--attach",
        action="store_true",
        help="Attach to a running Chrome instead of launching one"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Chrome remote debugging port (default: 9222)"
    )

    # Actions
    parser.add_argument(
        "--close-others",
        action="store_true",
        help="Close windows whose title differs from the opened page"
    )
    parser.add_argument(
        "--source",
        action="store_true",
        help="Print page source instead of title and url"
    )
    parser.add_argument(
        "--keep-open",
        action="store_true",
        help="Leave the browser running on exit"
    )
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    params = parse_params(parser, args.param)

    overrides = {}
    if args.headless:
        overrides["headless"] = True
    if args.attach:
        overrides["launch"] = False
    if args.port is not None:
        overrides["port"] = args.port
    config = EngineConfig.from_env(**overrides)

    engine = Engine(config)
    try:
        engine.start()
        page = Page(engine, url=args.url, param_prefix=args.prefix,
                    dynamic_data=[SystemDynamicData()])
        page.put_all_data(params)
        page.open()

        if args.close_others:
            page.close_others()

        if args.source:
            print(page.page_source)
        else:
            print(f"Title: {page.title}")
            print(f"URL: {page.current_url}")
    finally:
        if args.keep_open:
            print("[*] Leaving browser open", file=sys.stderr)
            engine.detach()
        else:
            engine.quit()


if __name__ == "__main__":
    main()
