import asyncio
import sys

from core.container import container
from core.exception_handler import short_reason
from core.exceptions import BaseCustomException
from core.logging.providers import configure_logger
from restake.session import SessionLoop


async def run() -> int:
    """
    Resolve the session loop and run it.

    Returns
    -------
    int
        Process exit code
    """
    try:
        try:
            session = await container.get(SessionLoop, component="restake")
        except BaseCustomException as e:
            configure_logger().critical(e.message)
            return e.get_exit_code()

        return await session.run()
    finally:
        await container.close()


def main() -> None:
    """
    Console entry point.
    """
    try:
        code = asyncio.run(run())
    except KeyboardInterrupt:
        configure_logger().info("Interrupted, exiting.")
        code = 0
    except Exception as e:
        configure_logger().critical(short_reason(e))
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
