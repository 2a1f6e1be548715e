# sample/adapters/register.py
from typing import Optional

import structlog

from sample.adapters.persistence import ApplicationDbContext, Database
from sample.adapters.persistence.repositories import CommandDefaultRepository, QueryDefaultRepository
from sample.core.domain.constants import ServiceKeys
from sample.core.ports.repositories import ICommandRepository, IQueryRepository
from sample.shared.config import Settings
from sample.shared.services import ServiceCollection

logger = structlog.get_logger(__name__)


def add_infrastructure_services(
    services: ServiceCollection,
    settings: Settings,
    database: Optional[Database] = None,
) -> ServiceCollection:
    """
    Binds the persistence context and the repository roles.

    Called once at startup. The command repository uses the unconditional
    ``add`` (a later call replaces an earlier binding); the query repository
    uses ``try_add`` (an earlier binding, e.g. an alternate store, wins).

    Raises:
        InvalidConfigurationError: no usable DATABASE_URL and no database given.
    """
    # 1. Persistence context (one engine per process, one session per scope)
    if database is None:
        database = Database(settings.DATABASE_URL, echo=settings.DB_ECHO)
    services.add_singleton(Database, instance=database)
    services.add_scoped(ApplicationDbContext)

    # 2. Repositories
    services.add_keyed_scoped(
        ICommandRepository,
        ServiceKeys.COMMAND_REPOSITORY,
        CommandDefaultRepository,
    )
    services.try_add_keyed_scoped(
        IQueryRepository,
        ServiceKeys.QUERY_REPOSITORY,
        QueryDefaultRepository,
    )

    logger.info("infrastructure_services_registered", bindings=len(services))
    return services
