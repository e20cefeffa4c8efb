"""
Configuration module for the wscadence timing harness.

Provides environment based configuration for both sides of the exchange.

### Usage Examples:

```python
from wscadence.config import get_config, load_env_file
load_env_file()
config = get_config()
print(f"Sender: {config.sender.host}:{config.sender.port}")
print(f"Receiver target: {config.receiver.target_url}")

from wscadence.config.logging_config import configure_logging
logger = configure_logging(config=config.logging)
```
"""

from .constants import LOGGER_NAME
from .env_loader import load_env_file
from .models import (
    ApplicationConfig,
    LoggingConfig,
    LogLevel,
    ReceiverConfig,
    Role,
    SenderConfig,
)
from .settings import (
    get_config,
    reload_config,
    set_config,
)

__all__ = [
    "LOGGER_NAME",
    "ApplicationConfig",
    "LoggingConfig",
    "LogLevel",
    "ReceiverConfig",
    "Role",
    "SenderConfig",
    "get_config",
    "load_env_file",
    "reload_config",
    "set_config",
]
