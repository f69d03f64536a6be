from .error_handling import database_error_handler, is_connection_error

__all__ = ["database_error_handler", "is_connection_error"]
