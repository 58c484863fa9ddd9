from permit_portal.core.config import Settings, settings
from permit_portal.core.security import (
    hash_password,
    verify_password,
    create_access_token,
    decode_token,
    password_problem,
)
