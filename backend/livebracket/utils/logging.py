import logging


def create_logger(level: int) -> logging.Logger:
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(log_format))

    logger_ = logging.getLogger("livebracket")
    logger_.setLevel(level)
    if not logger_.handlers:
        logger_.addHandler(handler)
    return logger_


logger = create_logger(logging.INFO)
