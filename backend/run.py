import os
import sys

from lobbyhub import create_app, check_database_connection

app = create_app()

if __name__ == '__main__':
    try:
        check_database_connection(app)
    except Exception as exc:
        app.logger.error(f"[startup] database connection failed: {exc}")
        sys.exit(1)
    app.run(debug=True, port=int(os.environ.get('PORT', '5000')))
