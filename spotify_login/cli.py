"""
Command line login helper.

Reads client credentials from the environment (or a .env file), walks the
user through the authorization flow and prints tokens for scripts.
"""
import argparse
import sys
import webbrowser
from typing import List, Optional

from .auth import AuthenticationURLType, Scope, SpotifyLoginError, get_shared_manager
from .auth.scopes import split_scopes
from .config import get_config
from .utils import setup_logger, set_log_level, mask_secret


logger = setup_logger(__name__)


def _scopes(values: Optional[List[str]]) -> List[Scope]:
    if values:
        return [Scope(value) for value in values]
    return split_scopes(get_config().spotify.scopes)


def cmd_url(args) -> int:
    manager = get_shared_manager()
    url_type = AuthenticationURLType.APP if args.app else AuthenticationURLType.WEB
    print(manager.authentication_url(url_type, _scopes(args.scope)))
    return 0


def cmd_login(args) -> int:
    manager = get_shared_manager()
    auth_url = manager.authentication_url(AuthenticationURLType.WEB, _scopes(args.scope))

    logger.info("🔐 Starting Spotify authorization...")
    logger.info(f"If browser doesn't open, visit: {auth_url}")
    if not args.no_browser:
        try:
            webbrowser.open(auth_url)
        except webbrowser.Error as e:
            logger.warning(f"Couldn't open browser: {e}")

    redirect = input("Paste the URL you were redirected to: ").strip()
    future = manager.handle_url(redirect)
    if future is None:
        logger.error(f"❌ Not a redirect for {manager.config.redirect_uri}")
        return 1

    try:
        session = future.result(timeout=args.timeout)
    except SpotifyLoginError as e:
        logger.error(f"❌ {e}")
        return 1

    logger.info(f"✅ Authorization complete! Logged in as {session.user.display_name or session.user.id}")
    return 0


def cmd_token(args) -> int:
    try:
        token = get_shared_manager().get_access_token().result(timeout=args.timeout)
    except SpotifyLoginError as e:
        logger.error(f"❌ {e}")
        return 1

    logger.debug(f"Access token {mask_secret(token)}")
    print(token)
    return 0


def cmd_whoami(args) -> int:
    user = get_shared_manager().user
    if user is None:
        logger.info("Not logged in")
        return 1
    print(f"{user.display_name or '-'} ({user.id}, {user.country or '??'})")
    return 0


def cmd_logout(args) -> int:
    get_shared_manager().logout()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='spotify-login',
        description='Log in to Spotify and manage the stored session'
    )
    parser.add_argument(
        '--log-level',
        help='Logging level (defaults to LOG_LEVEL, then INFO)'
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    url_parser = subparsers.add_parser('url', help='Print the authorization URL')
    url_parser.add_argument(
        '--app',
        action='store_true',
        help='Build the native app hand-off URL instead of the web one'
    )
    url_parser.add_argument(
        '--scope',
        action='append',
        help='Scope to request (repeatable, defaults to SPOTIFY_SCOPES)'
    )
    url_parser.set_defaults(func=cmd_url)

    login_parser = subparsers.add_parser('login', help='Run the authorization flow')
    login_parser.add_argument('--scope', action='append', help='Scope to request (repeatable)')
    login_parser.add_argument(
        '--no-browser',
        action='store_true',
        help='Only print the authorization URL'
    )
    login_parser.add_argument('--timeout', type=float, default=60.0, help='Seconds to wait for the exchange')
    login_parser.set_defaults(func=cmd_login)

    token_parser = subparsers.add_parser('token', help='Print a valid access token')
    token_parser.add_argument('--timeout', type=float, default=60.0, help='Seconds to wait for a refresh')
    token_parser.set_defaults(func=cmd_token)

    subparsers.add_parser('whoami', help='Show the logged in user').set_defaults(func=cmd_whoami)
    subparsers.add_parser('logout', help='Forget the stored session').set_defaults(func=cmd_logout)

    return parser


def _log_level(args) -> str:
    if args.log_level:
        return args.log_level
    try:
        return get_config().log_level
    except ValueError:
        # No credentials yet; commands report that themselves
        return 'INFO'


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        set_log_level(_log_level(args))
        return args.func(args)
    except (ValueError, SpotifyLoginError) as e:
        logger.error(f"❌ Configuration error: {e}")
        return 2


if __name__ == '__main__':
    sys.exit(main())
