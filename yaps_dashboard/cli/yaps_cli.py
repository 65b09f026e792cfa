"""
Command-Line Interface for the Yaps dashboard
Proxy server, web dashboard, terminal dashboard and reports
"""

import argparse
import json
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from yaps_dashboard.client import YapsClient
from yaps_dashboard.config import MAX_USERS, load_settings
from yaps_dashboard.dashboard import DashboardState, run_dashboard
from yaps_dashboard.errors import YapsError


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _settings(args):
    return load_settings().with_overrides(
        api_url=args.api_url,
        request_timeout=args.timeout,
        host=getattr(args, 'host', None),
        port=getattr(args, 'port', None),
    )


def _client(settings):
    return YapsClient(settings.api_url, timeout=settings.request_timeout)


def cmd_serve(args):
    """Run the proxy server"""
    from yaps_dashboard.backend.api_server import create_app

    settings = _settings(args)
    create_app(settings).run(host=settings.host, port=settings.port)
    return 0


def cmd_web(args):
    """Run the web dashboard"""
    from yaps_dashboard.web_server import create_web_app

    settings = _settings(args)
    create_web_app(settings).run(host=settings.host, port=settings.port)
    return 0


def cmd_fetch(args):
    """Print fetched records as JSON"""
    client = _client(_settings(args))
    records = []
    for username in args.usernames:
        try:
            records.append(client.fetch(username).to_dict())
        except YapsError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1
    print(json.dumps(records, indent=2))
    return 0


def cmd_dashboard(args):
    """Render the terminal dashboard"""
    state = run_dashboard(
        _client(_settings(args)),
        args.usernames,
        interval=args.interval,
        duration=args.duration,
    )
    return 1 if state.error else 0


def cmd_report(args):
    """Fetch records and write reports"""
    from yaps_dashboard.reporting.report_generator import ReportGenerator

    state = DashboardState(_client(_settings(args)), args.usernames)
    state.submit()
    if state.error:
        print(f"Error: {state.error}", file=sys.stderr)
    if not state.has_results:
        return 1

    generator = ReportGenerator(args.output)

    if args.format in ['html', 'both']:
        html_path = generator.generate_html_report(state.results, not args.no_charts)
        print(f"HTML report generated: {html_path}")

    if args.format in ['json', 'both']:
        json_path = generator.generate_json_report(state.results)
        print(f"JSON report generated: {json_path}")

    return 1 if state.error else 0


def _usernames(parser):
    parser.add_argument('usernames', nargs='+', metavar='USERNAME',
                        help=f'X usernames without @ (up to {MAX_USERS})')


def build_parser():
    parser = argparse.ArgumentParser(
        description='Yaps Analytics - attention metrics for X users'
    )
    parser.add_argument('--log-level', default=None, help='Logging level (default: YAPS_LOG_LEVEL or INFO)')
    parser.add_argument('--api-url', default=None, help='Yaps API or proxy URL')
    parser.add_argument('--timeout', type=float, default=None, help='Request timeout in seconds')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    for name, func, help_text in (('serve', cmd_serve, 'Run the CORS proxy'),
                                  ('web', cmd_web, 'Run the web dashboard')):
        server_parser = subparsers.add_parser(name, help=help_text)
        server_parser.add_argument('--host', help='Bind address')
        server_parser.add_argument('--port', type=int, help='Bind port')
        server_parser.set_defaults(func=func)

    fetch_parser = subparsers.add_parser('fetch', help='Print Yaps records as JSON')
    _usernames(fetch_parser)
    fetch_parser.set_defaults(func=cmd_fetch)

    dash_parser = subparsers.add_parser('dashboard', help='Terminal dashboard')
    _usernames(dash_parser)
    dash_parser.add_argument('--interval', type=float, help='Refresh interval in seconds')
    dash_parser.add_argument('--duration', type=int, help='Run for N seconds then exit')
    dash_parser.set_defaults(func=cmd_dashboard)

    report_parser = subparsers.add_parser('report', help='Generate HTML/JSON reports')
    _usernames(report_parser)
    report_parser.add_argument('--output', default='reports', help='Output directory')
    report_parser.add_argument('--format', choices=['html', 'json', 'both'], default='html',
                               help='Report format')
    report_parser.add_argument('--no-charts', action='store_true', help='Disable charts in HTML')
    report_parser.set_defaults(func=cmd_report)

    return parser


def main(argv=None):
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if len(getattr(args, 'usernames', [])) > MAX_USERS:
        parser.error(f"At most {MAX_USERS} usernames are supported")

    configure_logging(args.log_level or load_settings().log_level)
    return args.func(args)


if __name__ == '__main__':
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("Exiting...")
