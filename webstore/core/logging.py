import structlog

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.JSONRenderer(),
    ],
    cache_logger_on_first_use=True,
)


def get_logger(name: str):
    """Логгер модуля со структурированным выводом"""
    return structlog.get_logger(name)
