# Overview: Flask extension instances for the pooled database handle and migrations.

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

# One engine (and connection pool) per process; sessions are scoped per request.
db = SQLAlchemy(engine_options={"pool_pre_ping": True})
migrate = Migrate()
