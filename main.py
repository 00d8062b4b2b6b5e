"""
SportsBuddy client - command line entry point.

Drives the client state layer against a running SportsBuddy server:
restores or opens a session, prints the leaderboard and unread notifications
and optionally stays
attached to the realtime channel, logging every push as it lands in a store.

Usage:
    python main.py --login
    python main.py --leaderboard 10
    python main.py --login --watch
"""

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from adapters.cli.loader import build_store
from config.features import features
from config.settings import settings
from core.store import AppStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler("sportsbuddy.log", encoding="utf-8"),
    ],
)
logger = logging.getLogger(__name__)

# Set DEBUG level only for our app loggers, not for noisy libraries
if features.DEBUG_MODE:
    for name in ['adapters', 'core', 'infrastructure', '__main__']:
        logging.getLogger(name).setLevel(logging.DEBUG)
    # Silence noisy HTTP and socket debug logs
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)
    logging.getLogger('socketio').setLevel(logging.WARNING)
    logging.getLogger('engineio').setLevel(logging.WARNING)

# Retry settings
MAX_RETRIES = 5
RETRY_DELAY = 10  # seconds


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="SportsBuddy client state layer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python main.py --login --leaderboard 10
    python main.py --login --watch
        """
    )
    parser.add_argument(
        "--login",
        action="store_true",
        help="Log in with SPORTSBUDDY_SESSION_EMAIL / SPORTSBUDDY_SESSION_PASSWORD",
    )
    parser.add_argument(
        "--leaderboard", "-l",
        type=int,
        metavar="N",
        help="Print the top N leaderboard entries",
    )
    parser.add_argument(
        "--watch", "-w",
        action="store_true",
        help="Stay connected and log realtime updates (Ctrl+C to stop)",
    )
    return parser.parse_args()


async def open_session(store: AppStore, login: bool) -> bool:
    if login:
        if not settings.session_email or not settings.session_password:
            logger.error("Set SPORTSBUDDY_SESSION_EMAIL and SPORTSBUDDY_SESSION_PASSWORD to log in.")
            return False
        result = await store.auth.login({
            "email": settings.session_email,
            "password": settings.session_password,
        })
        if not result:
            logger.error(f"Login failed: {result.message}")
            return False
    else:
        await store.auth.check_auth()

    if store.auth.user:
        logger.info(f"Session: {store.auth.user.name or store.auth.user.email} ({store.auth.viewer_id})")
    else:
        logger.info("Session: anonymous")
    return True


async def print_leaderboard(store: AppStore, limit: int) -> None:
    result = await store.leaderboard.get_leaderboard(limit=limit)
    if not result:
        logger.error(f"Leaderboard unavailable: {result.message}")
        return
    for entry in result.data:
        name = entry.user.name or entry.user.username or entry.user_id
        print(f"#{entry.rank:<4} {name:<30} {entry.points:>8} pts")


async def print_notifications(store: AppStore) -> None:
    if not store.auth.is_authenticated:
        return
    if not store.notifications.notifications:
        await store.notifications.fetch_notifications()
    logger.info(f"Unread notifications: {store.notifications.unread_count}")
    for notification in store.notifications.notifications:
        if not notification.read:
            print(f"  * {notification.message}")


async def watch(store: AppStore) -> None:
    """Keep the stores mounted; reopen the channel when it drops."""
    if not store.auth.is_authenticated:
        logger.error("--watch needs an authenticated session (use --login).")
        sys.exit(1)

    retries = 0
    while retries < MAX_RETRIES:
        async with store.mounted():
            if store.channel.connected:
                retries = 0
                logger.info(f"Watching realtime updates on {settings.socket_url} (Ctrl+C to stop)")
                while store.channel.connected:
                    await asyncio.sleep(1)
                logger.warning("Realtime channel closed.")

        retries += 1
        if retries >= MAX_RETRIES:
            logger.error(
                "Could not keep a realtime connection.\n"
                "   Check that the server is running and SPORTSBUDDY_SOCKET_URL is correct."
            )
            sys.exit(1)
        logger.warning(f"Reconnecting in {RETRY_DELAY}s... ({retries}/{MAX_RETRIES})")
        await asyncio.sleep(RETRY_DELAY)


async def main():
    """Main function - opens the store and runs the requested commands."""
    args = parse_args()

    # Log feature status
    logger.info("=== SportsBuddy Client Starting ===")
    logger.info(f"API: {settings.api_base_url}")
    logger.info("Feature Flags:")
    for key, value in features.to_dict().items():
        logger.info(f"  {key}: {value}")

    store = build_store(settings)
    try:
        if not await open_session(store, args.login):
            sys.exit(1)
        if args.leaderboard:
            await print_leaderboard(store, args.leaderboard)
        await print_notifications(store)
        if args.watch:
            await watch(store)
    finally:
        await store.aclose()
        logger.info("Client closed.")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Client stopped by user (Ctrl+C)")
    except SystemExit as e:
        sys.exit(e.code)
