"""
Shared module for the ambient concerns of the service layer.

STRUCTURE:
- entity_service.shared.config: Configuration
  - settings.py: Environment config (Pydantic)
  - logging.py: Structured logging

- entity_service.shared.infrastructure: Database
  - db.py: build_engine(), safe_commit()

- entity_service.shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging

IMPORT EXAMPLES:
    from entity_service.shared.infrastructure.db import build_engine, safe_commit
    from entity_service.shared.config.settings import settings
    from entity_service.shared.config.logging import get_logger
    from entity_service.shared.utils.exceptions import NotFoundError, ValidationError
"""
