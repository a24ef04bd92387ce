import asyncio
import signal
import sys
from typing import Dict

from core.initialization import initialize_components, load_configuration
from utils.logger import setup_logger


async def run_bot(components: Dict[str, object]) -> None:
    """
    Entrypoint coroutine for the account status bot.

    Runs the status loop until SIGINT/SIGTERM.  An in-flight cycle is simply
    cancelled; HTTP sessions are closed on the way out.
    """
    logger = components["logger"]
    scheduler = components["scheduler"]

    task = asyncio.create_task(scheduler.run())
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, task.cancel)
        except NotImplementedError:  # Windows: KeyboardInterrupt still works
            pass

    try:
        await task
    except asyncio.CancelledError:
        logger.info("Shutdown requested")
    finally:
        await components["bybit_client"].close()
        await components["notifier"].close()


def main():
    logger = setup_logger("StatusBot", to_console=True)

    # configuration problems are the only fatal errors
    try:
        config = load_configuration()
        components = initialize_components(config, logger=logger)
    except (ValueError, TypeError) as e:
        logger.error("❌ Configuration error: %s", e)
        sys.exit(1)

    try:
        asyncio.run(run_bot(components))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
