"""
Shared module for common utilities of the REST API and the CLI.

STRUCTURE:
- shared.security: Authentication, password hashing, rate limiting
  - auth.py: JWT signing/verification, bearer token parsing
  - password.py: Bcrypt hashing
  - rate_limit.py: Login rate limiting (slowapi)

- shared.infrastructure: Database and request correlation
  - db.py: SQLAlchemy engine and sessions, safe_commit()
  - correlation.py: X-Request-ID middleware and logging filter

- shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging, PII masking
  - constants.py: Roles, capabilities, order lifecycle

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - validators.py: Input sanitization, SSRF prevention
  - schemas.py: Pydantic request/response schemas

IMPORT EXAMPLES:
    from shared.security.auth import sign_access_token, verify_jwt
    from shared.infrastructure.db import get_db, safe_commit
    from shared.config.settings import settings
    from shared.config.constants import Role, OrderStatus
    from shared.utils.exceptions import NotFoundError, ForbiddenError
    from shared.utils.validators import validate_image_url
"""
