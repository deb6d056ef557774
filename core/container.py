from dishka import make_async_container

from core.environment.providers import EnvironmentProvider
from core.logging.providers import LoggerProvider
from core.terminal.providers import TerminalProvider
from restake.providers import RestakeProvider

container = make_async_container(
    EnvironmentProvider(),
    LoggerProvider(),
    TerminalProvider(),
    RestakeProvider()
)
