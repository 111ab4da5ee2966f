"""Flask-SQLAlchemy extension initialization."""

from flask_sqlalchemy import SQLAlchemy

# Initialized in the app factory with db.init_app(app)
db = SQLAlchemy()
