import logging


def setup_logger(level: int = logging.INFO) -> logging.Logger:
    """
    Создаёт и настраивает корневой логгер проекта ``pkmeans``.

    :param level: минимальный уровень логирования
    :return: настроенный экземпляр :class:`logging.Logger`
    """
    logger = logging.getLogger("pkmeans")
    logger.setLevel(level)

    if not logger.handlers:
        # stderr: stdout занят отчётом по кластерам
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "[%(asctime)s] %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.propagate = False

    return logger


def format_instance_prefix(n_points: int, dimensionality: int, k: int) -> str:
    """Текстовый префикс для логов по параметрам экземпляра задачи."""
    return f"[N={n_points} D={dimensionality} K={k}]"
