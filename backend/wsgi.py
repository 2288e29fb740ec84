try:
    from backend.teadraw.server import create_app
except ImportError:  # pragma: no cover
    from teadraw.server import create_app

app, socketio = create_app()
