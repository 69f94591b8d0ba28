import logging

from flask import Flask
from flask_cors import CORS
from flask_migrate import Migrate

from .config import Config
from .models import db

logging.basicConfig(level=getattr(logging, Config.LOG_LEVEL, logging.DEBUG))
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config.from_object(Config)

CORS(app, resources={
    r"/api/*": {
        "origins": app.config["FRONTEND_URLS"],
        "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        "allow_headers": ["Authorization", "Content-Type"],
        "supports_credentials": True,
        "expose_headers": ["Authorization"]
    }
})

db.init_app(app)
Migrate(app, db)



def init_db():
    with app.app_context():
        db.create_all()
    logger.info("Database tables created")

from . import auth, habits  # noqa: E402,F401  registers routes
