from permit_portal.repositories.application_repository import (
    ApplicationRepository,
    BeanieApplicationRepository,
    InMemoryApplicationRepository,
    get_application_repository,
)
