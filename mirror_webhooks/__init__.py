import logging
import os
import sys

from flask import Flask
import sentry_sdk
from sentry_sdk.integrations.flask import FlaskIntegration
from werkzeug.middleware.proxy_fix import ProxyFix
from werkzeug.utils import import_string

__version__ = "0.1.0"

log_level = os.environ.get('LOGLEVEL', 'INFO').upper()
logger = logging.getLogger(__name__)
handler = logging.StreamHandler(sys.stderr)
handler.setLevel(log_level)
handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
logger.addHandler(handler)
logger.setLevel(log_level)


def expand_config(name=None):
    if not name:
        name = "default"
    return "mirror_webhooks.config.{classname}Config".format(
        classname=name.capitalize(),
    )


def create_app(config=None):
    app = Flask(__name__)
    app.wsgi_app = ProxyFix(app.wsgi_app)   # type: ignore[method-assign]
    config = config or os.environ.get("MIRROR_WEBHOOKS_CONFIG") or "default"
    # Instantiate the config object because __init__ normalizes the
    # string values that came from the environment.
    config_obj = import_string(expand_config(config))()
    app.config.from_object(config_obj)

    if os.environ.get("SENTRY_DSN", "") and not app.testing:
        sentry_sdk.init(integrations=[FlaskIntegration()])

    from .config import MirrorSettings
    app.extensions["mirror_settings"] = MirrorSettings.from_mapping(app.config)

    # attach our blueprints
    from .views import hook_bp
    app.register_blueprint(hook_bp)

    return app
