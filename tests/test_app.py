"""
Basic smoke tests for the application factory, config and CLI.
"""
import os

import pytest

from app.config import AppConfig, InvalidDatabaseURL, _normalize_db_url


@pytest.mark.unit
def test_app_exists(app):
    """Test that the Flask app instance exists."""
    assert app is not None


@pytest.mark.unit
def test_app_is_testing(app):
    """Test that the app is in testing mode."""
    assert app.config['TESTING'] is True


@pytest.mark.unit
def test_secret_key_is_set(app):
    """Test that a secret key is configured."""
    assert app.secret_key == 'test-secret-key'


@pytest.mark.unit
def test_sqlite_has_no_pool_options(app):
    """Pool sizing is skipped for SQLite."""
    assert app.config['SQLALCHEMY_DATABASE_URI'] == 'sqlite://'
    assert 'SQLALCHEMY_ENGINE_OPTIONS' not in app.config or not app.config['SQLALCHEMY_ENGINE_OPTIONS']


@pytest.mark.unit
def test_blueprints_registered(app):
    """Test that the core blueprints are registered."""
    assert {'zonas', 'escuelas', 'obras', 'configuracion'} <= set(app.blueprints)


@pytest.mark.unit
def test_extensions_initialized(app):
    """Test that Flask extensions are properly initialized."""
    assert 'sqlalchemy' in app.extensions
    assert 'migrate' in app.extensions


@pytest.mark.unit
def test_log_files_created(app):
    """Logging writes to the configured LOG_DIR."""
    assert os.path.exists(os.path.join(app.config['LOG_DIR'], 'app.log'))


@pytest.mark.unit
def test_template_filters(app):
    from datetime import date

    render = app.jinja_env.from_string('{{ f|fecha }} {{ m|moneda }} {{ p|porcentaje }}')
    assert render.render(f=date(2024, 5, 6), m=1234.5, p=33.5) == '06/05/2024 $1.234,5 34%'


@pytest.mark.integration
def test_health_endpoint(client):
    """Test health check endpoint."""
    response = client.get('/health')
    assert response.status_code == 200
    assert response.get_json() == {'ok': True, 'database': True}


@pytest.mark.integration
def test_unknown_route_is_json_404(client):
    response = client.get('/no-existe')
    assert response.status_code == 404
    assert response.get_json()['ok'] is False


# ===== Config =====

@pytest.mark.unit
def test_normalize_postgres_url(monkeypatch):
    monkeypatch.delenv('DB_SSLMODE', raising=False)
    url = _normalize_db_url('postgres://user:pw@localhost:5432/obras')
    assert url == 'postgresql+psycopg://user:pw@localhost:5432/obras?sslmode=require'


@pytest.mark.unit
def test_sqlite_requires_opt_in():
    with pytest.raises(InvalidDatabaseURL):
        _normalize_db_url('sqlite:///obras.db')
    assert _normalize_db_url('sqlite:///obras.db', allow_sqlite=True) == 'sqlite:///obras.db'


@pytest.mark.unit
def test_empty_database_url_is_rejected():
    with pytest.raises(InvalidDatabaseURL):
        AppConfig(database_url='', allow_sqlite=True)


# ===== CLI =====

@pytest.mark.integration
def test_cli_avance_zonas(runner, fabrica):
    zona = fabrica.zona('Zona Norte')
    escuela = fabrica.escuela(zona)
    obra = fabrica.obra(escuela)
    fabrica.tarea(obra, avance=60)

    result = runner.invoke(args=['avance', 'zonas'])
    assert result.exit_code == 0
    assert 'Zona Norte: 60%' in result.output


@pytest.mark.integration
def test_cli_reporte_obra(runner, fabrica, tmp_path):
    zona = fabrica.zona()
    escuela = fabrica.escuela(zona)
    obra = fabrica.obra(escuela, 'Techos')

    result = runner.invoke(args=['reporte', 'obra', str(obra.id), '--output', str(tmp_path)])

    assert result.exit_code == 0
    archivos = list(tmp_path.glob('Resumen_Obra_Techos_*.pdf'))
    assert len(archivos) == 1
    assert archivos[0].read_bytes().startswith(b'%PDF')


@pytest.mark.integration
def test_cli_reporte_obra_sin_escuela(runner, fabrica):
    obra = fabrica.obra(None)
    result = runner.invoke(args=['reporte', 'obra', str(obra.id)])

    assert result.exit_code != 0
    assert 'No se puede generar el PDF' in result.output
