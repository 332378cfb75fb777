from ._logging import LogFormatType, create_logger, create_null_logger
from ._paths import get_user_config_path, is_privileged_user, shorten_path

__all__ = [
    "LogFormatType",
    "create_logger",
    "create_null_logger",
    "get_user_config_path",
    "is_privileged_user",
    "shorten_path",
]
