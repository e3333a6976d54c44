import os

from app import create_app

app = create_app()

if __name__ == '__main__':
    # DEBUG solo se activa si FLASK_DEBUG=1 (nunca en producción)
    debug_mode = os.environ.get('FLASK_DEBUG', '0').lower() in ('1', 'true', 'yes')
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', 5000)), debug=debug_mode)
