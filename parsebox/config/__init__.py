from .loader import DEFAULT_CONFIG_TEMPLATE, load_config
from .models import ConversionConfig, ParseBoxConfig

__all__ = [
    "ConversionConfig",
    "DEFAULT_CONFIG_TEMPLATE",
    "ParseBoxConfig",
    "load_config",
]
