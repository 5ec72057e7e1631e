import logging

from frameplot.core.config import LOG_LEVEL


def configure_logging(level_name: str | None = None) -> None:
    """Configure root logging once for scripts using frameplot."""
    level_name = (level_name or LOG_LEVEL).upper()
    level = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
    else:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    logging.getLogger("matplotlib").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)
