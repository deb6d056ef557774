from dishka import Provider, Scope, provide
from pydantic import ValidationError

from core.environment.config import Settings
from core.exceptions import ConfigurationException


class EnvironmentProvider(Provider):
    """
    Provider for environment configuration.
    """

    component = "environment"
    scope = Scope.APP

    @provide
    def get_environment(self) -> Settings:
        """
        Provide application settings.

        Returns
        -------
        Settings
            Application settings instance

        Raises
        ------
        ConfigurationException
            If a configured value fails validation
        """
        try:
            return Settings()
        except ValidationError as e:
            errors = "; ".join(
                f"{'.'.join(str(x) for x in error['loc'])}: {error['msg']}"
                for error in e.errors()
            )
            raise ConfigurationException(f"Invalid settings: {errors}") from e
