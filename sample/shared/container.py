# sample/shared/container.py
from dependency_injector import containers, providers

from sample.adapters.health import HealthCheckService
from sample.adapters.persistence.database import Database
from sample.adapters.register import add_infrastructure_services
from sample.core.register import add_application_services
from sample.shared.config import Settings, settings as app_settings
from sample.shared.services import ServiceCollection, ServiceProvider


def build_service_provider(settings: Settings, database: Database) -> ServiceProvider:
    """
    Composition root for request-scoped services.
    Runs both registration modules exactly once per container.
    """
    services = ServiceCollection()
    add_infrastructure_services(services, settings, database)
    add_application_services(services, settings)
    return services.build_provider()


class Container(containers.DeclarativeContainer):
    """
    Dependency Injection Container.

    Process-wide objects live here; per-request objects (context,
    repositories, use cases) come from the keyed ServiceProvider it builds.
    Tests override ``settings`` (or any other provider) before first use.
    """

    # 1. Configuration
    settings = providers.Object(app_settings)

    # 2. Gateways (Singleton: one engine / connection pool per process)
    database = providers.Singleton(
        Database,
        url=settings.provided.DATABASE_URL,
        echo=settings.provided.DB_ECHO,
    )

    health_checks = providers.Singleton(
        HealthCheckService.from_settings,
        settings=settings,
        database=database,
    )

    # 3. Keyed registrations resolved per request scope
    services = providers.Singleton(
        build_service_provider,
        settings=settings,
        database=database,
    )


# Instantiate the container for global access (e.g. by FastAPI)
container = Container()
