"""Application factory and bootstrap helpers."""
from __future__ import annotations

from dotenv import load_dotenv

load_dotenv()

import importlib
import os
from typing import Optional

import click
from flask import Flask, jsonify
from flask.cli import AppGroup
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.middleware.proxy_fix import ProxyFix

from config.logging_config import setup_logging
from extensions import db, migrate
from services.avance import redondear_porcentaje
from services.base import (
    MissingRelationException,
    NotFoundException,
    ServiceException,
    ValidationException,
)
from utils.formato import formatear_fecha, formatear_moneda

from .config import AppConfig


def _import_blueprint(module_name: str, attr_name: str):
    module = importlib.import_module(module_name)
    return getattr(module, attr_name)


def _register_avance_cli(app: Flask) -> None:
    avance_cli = AppGroup("avance", help="Consulta de avances por nivel")

    @avance_cli.command("zonas")
    def avance_zonas():
        """Imprime el avance de cada zona"""
        from services.jerarquia_service import JerarquiaService, ZonaService

        with app.app_context():
            zonas = ZonaService().get_all(order_by="nombre")
            if not zonas:
                click.echo("[INFO] No hay zonas cargadas.")
                return
            avances = JerarquiaService().avances_zonas(zonas)
            for zona in zonas:
                click.echo(f"{zona.nombre}: {avances.get(zona.id, 0)}%")

    app.cli.add_command(avance_cli)


def _register_reporte_cli(app: Flask) -> None:
    reporte_cli = AppGroup("reporte", help="Generación de reportes")

    @reporte_cli.command("obra")
    @click.argument("obra_id", type=int)
    @click.option("--output", "output_dir", default=None, help="Directorio destino del PDF")
    def reporte_obra(obra_id: int, output_dir: Optional[str]):
        """Genera el resumen PDF de una obra y lo guarda en disco"""
        from services.reporte_pdf import generar_resumen_obra

        destino = output_dir or app.config["REPORTES_DIR"]
        with app.app_context():
            try:
                nombre_archivo, contenido = generar_resumen_obra(obra_id)
            except ServiceException as exc:
                raise click.ClickException(exc.message) from exc

        os.makedirs(destino, exist_ok=True)
        ruta = os.path.join(destino, nombre_archivo)
        with open(ruta, "wb") as archivo:
            archivo.write(contenido)
        click.echo(f"[OK] Reporte guardado en {ruta}")

    app.cli.add_command(reporte_cli)


def _register_clis(app: Flask) -> None:
    _register_avance_cli(app)
    _register_reporte_cli(app)


def _register_blueprints(app: Flask) -> None:
    for module_name, attr_name in [
        ("zonas", "zonas_bp"),
        ("escuelas", "escuelas_bp"),
        ("obras", "obras_bp"),
        ("configuracion", "configuracion_bp"),
    ]:
        app.register_blueprint(_import_blueprint(module_name, attr_name))
    app.logger.info("Core blueprints registered successfully")


def _status_for(exc: ServiceException) -> int:
    if isinstance(exc, ValidationException):
        return 400
    if isinstance(exc, NotFoundException):
        return 404
    if isinstance(exc, MissingRelationException):
        return 409
    return 500


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ServiceException)
    def handle_service_exception(exc: ServiceException):
        status = _status_for(exc)
        if status >= 500:
            app.logger.error(f"[{exc.code}] {exc.message}")
        else:
            app.logger.info(f"[{exc.code}] {exc.message}")
        return jsonify({
            "ok": False,
            "error": exc.message,
            "code": exc.code,
            "details": exc.details,
        }), status

    @app.errorhandler(404)
    def handle_404(error):
        return jsonify({"ok": False, "error": "Recurso no encontrado"}), 404

    @app.errorhandler(405)
    def handle_405(error):
        return jsonify({"ok": False, "error": "Método no permitido"}), 405


def _register_routes(app: Flask) -> None:
    @app.route("/health")
    def health():
        """Endpoint de salud: verifica la conexión a la base"""
        try:
            db.session.execute(text("SELECT 1"))
            database = True
        except SQLAlchemyError as exc:
            app.logger.error(f"Health check sin base de datos: {exc}")
            database = False
        return jsonify({"ok": database, "database": database}), 200 if database else 503


def _register_template_filters(app: Flask) -> None:
    @app.template_filter("fecha")
    def fecha_filter(fecha):
        return formatear_fecha(fecha)

    @app.template_filter("moneda")
    def moneda_filter(valor):
        return formatear_moneda(valor)

    @app.template_filter("porcentaje")
    def porcentaje_filter(valor):
        if valor is None:
            return "0%"
        return f"{redondear_porcentaje(valor)}%"


def create_app(config: Optional[AppConfig] = None) -> Flask:
    app = Flask(__name__)
    app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)

    cfg = config or AppConfig()
    cfg.init_app(app)

    setup_logging(app)

    db.init_app(app)
    migrate.init_app(
        app, db, compare_type=True,
        directory=os.path.join(os.path.dirname(app.root_path), "migrations"),
    )

    _register_clis(app)
    _register_blueprints(app)
    _register_error_handlers(app)
    _register_routes(app)
    _register_template_filters(app)

    return app


__all__ = ["AppConfig", "create_app", "db", "migrate"]
