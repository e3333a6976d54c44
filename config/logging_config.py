import logging
import os
from logging.handlers import RotatingFileHandler


def _rotating_handler(path, level, formatter, backup_count=10):
    handler = RotatingFileHandler(
        path,
        maxBytes=10485760,  # 10MB
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setFormatter(formatter)
    handler.setLevel(level)
    return handler


def _reemplazar_handlers(logger, *handlers):
    """Quita los file handlers de una app anterior antes de agregar los nuevos"""
    for handler in list(logger.handlers):
        if isinstance(handler, RotatingFileHandler):
            logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        logger.addHandler(handler)


def setup_logging(app):
    """Configura logging estructurado para la aplicacion"""

    log_dir = app.config.get('LOG_DIR') or os.path.join(app.root_path, 'logs')
    os.makedirs(log_dir, exist_ok=True)

    formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s in %(module)s: %(message)s'
    )

    # Archivo general de aplicacion y errores criticos
    _reemplazar_handlers(
        app.logger,
        _rotating_handler(os.path.join(log_dir, 'app.log'), logging.INFO, formatter),
        _rotating_handler(os.path.join(log_dir, 'errors.log'), logging.ERROR, formatter),
    )
    app.logger.setLevel(logging.INFO)

    # Logger especifico para los PDF generados
    reportes_logger = logging.getLogger('reportes')
    _reemplazar_handlers(
        reportes_logger,
        _rotating_handler(os.path.join(log_dir, 'reportes.log'), logging.INFO, formatter, backup_count=5),
    )
    reportes_logger.setLevel(logging.INFO)
    reportes_logger.propagate = False

    app.logger.info('Sistema de logging configurado correctamente')
    app.logger.info(f'Logs guardados en: {log_dir}')
