import os
import sys

from . import app, init_db
from .migrate import check_connection

if __name__ == "__main__":
    if not check_connection(app.config["SQLALCHEMY_DATABASE_URI"]):
        sys.exit(1)
    init_db()
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", 5000)))
