#!/usr/bin/env python3
"""
Farm Client - Main Entry Point

Command-line access to the farm-management backend with persistent farmer
and admin sessions.
"""

import asyncio
import argparse
import getpass
import json
import sys
from pathlib import Path
from typing import List, Optional

from farm_client import __version__
from farm_client.api.auth import AuthService
from farm_client.api.client import ApiClient, decode_json
from farm_client.api.polling import NotificationPoller, WeatherAlertPoller
from farm_client.api.resources import FarmApi
from farm_client.core.session_store import JsonFileStorage, SessionStore
from farm_client.utils.config import Config
from farm_client.utils.error_handler import (
    ApiError,
    FarmClientError,
    SessionInvalidatedError,
    ValidationError,
)
from farm_client.utils.logging_setup import get_logger, setup_logging

logger = get_logger('main')


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from file, or from the environment when no file is given"""
    try:
        if config_path is None:
            config = Config.from_env()
        else:
            config_file = Path(config_path)
            if not config_file.exists():
                print(f"❌ Configuration file not found: {config_path}", file=sys.stderr)
                sys.exit(1)
            config = Config.load_from_file(config_file)

        config.validate()
    except ValueError as e:
        print(f"❌ Failed to load configuration: {e}", file=sys.stderr)
        sys.exit(1)

    return config


def show_alert(message: str):
    print(f"⚠️  {message}", file=sys.stderr)


def show_redirect(path: str):
    print(f"↩️  Session ended, returning to {path}", file=sys.stderr)


class FarmClientApp:
    """Wires configuration, storage, client and services together"""

    def __init__(self, config: Config):
        self.config = config
        self.store = SessionStore(JsonFileStorage(config.storage.path))
        self.client = ApiClient.from_config(
            config,
            store=self.store,
            alert=show_alert,
            redirect=show_redirect
        )
        self.auth = AuthService(self.client)
        self.api = FarmApi(self.client)

    def close(self):
        self.client.close()

    def login(self, args) -> int:
        password = args.password or getpass.getpass("Password: ")
        session = self.auth.farmer_login(args.phone, password)
        print(f"✅ Logged in as {session.farmer_name or session.farmer_id}")
        return 0

    def admin_login(self, args) -> int:
        password = args.password or getpass.getpass("Password: ")
        session = self.auth.admin_login(args.username, password)
        role = session.role.value if session.role else "unknown role"
        print(f"✅ Logged in as admin {session.name or session.username} ({role})")
        return 0

    def register(self, args) -> int:
        password = args.password or getpass.getpass("Password: ")
        data = self.auth.register_farmer(args.name, args.phone, password, address=args.address)
        print(f"✅ {data.get('message', 'Registered')}")
        return 0

    def logout(self, args) -> int:
        cleared = []
        if args.who in ("farmer", "all") and self.auth.logout_farmer():
            cleared.append("farmer")
        if args.who in ("admin", "all") and self.auth.logout_admin():
            cleared.append("admin")

        if cleared:
            print(f"👋 Logged out: {', '.join(cleared)}")
        else:
            print("ℹ️  No matching session was stored")
        return 0

    def whoami(self, args) -> int:
        print(json.dumps(self.store.get_stats(), indent=2))
        return 0

    def get(self, args) -> int:
        params = dict(_parse_param(p) for p in args.param)
        data = decode_json(self.client.get(args.path, params=params or None))
        print(json.dumps(data, indent=2, default=str))
        return 0

    async def watch(self, args) -> int:
        polling = self.config.polling

        def report_unread(count: int):
            print(f"🔔 Unread notifications: {count}")

        def report_alerts(alerts: List[dict]):
            for alert in alerts:
                print(f"🌦️  {alert.get('title') or alert.get('message') or alert}")

        pollers = [
            NotificationPoller(self.api, polling.unread_count_interval, report_unread),
            WeatherAlertPoller(self.api, polling.weather_alert_interval, on_result=report_alerts),
        ]

        for poller in pollers:
            await poller.start()

        print("🛑 Press Ctrl+C to stop")
        try:
            while True:
                await asyncio.sleep(3600)
        finally:
            for poller in pollers:
                await poller.stop()


def _parse_param(value: str):
    if "=" not in value:
        raise ValidationError(f"Query parameter must look like key=value: {value}")
    key, _, raw = value.partition("=")
    return key, raw


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="farm-client",
        description="Farm Client - farmer and admin access to the farm-management API"
    )
    parser.add_argument(
        "--config", "-c",
        help="Configuration file path (default: environment variables only)",
        default=None
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"Farm Client {__version__}"
    )

    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Log in as a farmer")
    login.add_argument("--phone", required=True)
    login.add_argument("--password")

    admin_login = sub.add_parser("admin-login", help="Log in as an administrator")
    admin_login.add_argument("--username", required=True)
    admin_login.add_argument("--password")

    register = sub.add_parser("register", help="Register a farmer account")
    register.add_argument("--name", required=True)
    register.add_argument("--phone", required=True)
    register.add_argument("--address")
    register.add_argument("--password")

    logout = sub.add_parser("logout", help="Remove a stored session")
    logout.add_argument("who", nargs="?", choices=("farmer", "admin", "all"), default="all")

    sub.add_parser("whoami", help="Show which sessions are stored")

    get = sub.add_parser("get", help="GET an API path and print the JSON body")
    get.add_argument("path")
    get.add_argument("--param", "-p", action="append", default=[], help="key=value query parameter")

    sub.add_parser("watch", help="Poll notifications and weather alerts")

    return parser


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    setup_logging(config.logging)

    app = None
    try:
        app = FarmClientApp(config)
        if args.command == "watch":
            return asyncio.run(app.watch(args))
        handler = getattr(app, args.command.replace("-", "_"))
        return handler(args)
    except ValidationError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2
    except SessionInvalidatedError:
        # The alert has already been shown
        return 1
    except ApiError as e:
        print(f"❌ {e.message} (HTTP {e.status_code})", file=sys.stderr)
        return 1
    except FarmClientError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"❌ I/O error: {e}", file=sys.stderr)
        return 1
    finally:
        if app is not None:
            app.close()


def main():
    """Console script entry point"""
    try:
        sys.exit(run())
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")


if __name__ == "__main__":
    main()
