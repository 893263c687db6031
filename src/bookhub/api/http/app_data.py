from dataclasses import dataclass

from src.bookhub.core.services import AccessTokenService, DbSessionService


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    token_service: AccessTokenService
