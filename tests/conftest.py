"""
Pytest configuration and fixtures for the seguimiento de obras test-suite.
"""
import os

import pytest

# Set test environment variables before importing app
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['ALLOW_SQLITE'] = '1'

from app import create_app
from app.config import AppConfig
from extensions import db
from models import Empresa, Escuela, Obra, Rubro, Tarea, Zona


@pytest.fixture(scope='function')
def app(tmp_path):
    """Create and configure a Flask app instance on in-memory SQLite."""
    config = AppConfig(
        database_url='sqlite://',
        allow_sqlite=True,
        secret_key='test-secret-key',
        log_dir=str(tmp_path / 'logs'),
        reportes_dir=str(tmp_path / 'reportes'),
        testing=True,
    )
    flask_app = create_app(config)

    with flask_app.app_context():
        db.create_all()

        yield flask_app

        # Cleanup
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create a test client for making requests."""
    return app.test_client()


@pytest.fixture(scope='function')
def runner(app):
    """Create a CLI runner for testing CLI commands."""
    return app.test_cli_runner()


class Fabrica:
    """Alta rápida de registros de la jerarquía para los tests"""

    def __init__(self):
        self._rubro = None

    def _guardar(self, instancia):
        db.session.add(instancia)
        db.session.commit()
        return instancia

    def zona(self, nombre='Zona Norte'):
        return self._guardar(Zona(nombre=nombre))

    def escuela(self, zona, nombre='Escuela N°1', direccion=None):
        return self._guardar(Escuela(nombre=nombre, direccion=direccion, zona_id=zona.id))

    def obra(self, escuela=None, nombre='Ampliación', **campos):
        return self._guardar(Obra(nombre=nombre, escuela_id=escuela.id if escuela else None, **campos))

    def rubro(self, nombre='Albañilería'):
        return self._guardar(Rubro(nombre=nombre))

    def empresa(self, nombre='Constructora Sur'):
        return self._guardar(Empresa(nombre=nombre))

    def tarea(self, obra, avance=0, nombre='Tarea', descripcion='', **campos):
        if 'rubro_id' not in campos:
            if self._rubro is None:
                self._rubro = self.rubro()
            campos['rubro_id'] = self._rubro.id
        return self._guardar(Tarea(obra_id=obra.id, avance=avance, nombre=nombre,
                                   descripcion=descripcion, **campos))


@pytest.fixture(scope='function')
def fabrica(app):
    """Factory for zonas, escuelas, obras, rubros and tareas."""
    return Fabrica()


# Markers for categorizing tests
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests (fast)"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (slower)"
    )
