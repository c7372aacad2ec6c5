# app.py
"""
devconnect API entry point.

Configure via environment variables (see devconnect/config.py), then serve
with a WSGI server, e.g.
    gunicorn -w 4 -b 0.0.0.0:5000 app:app
"""

import os

from devconnect import create_app

app = create_app()

# -----------------------
# Run server (for dev only). For production use a WSGI server.
# -----------------------
if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)), debug=os.environ.get("FLASK_DEBUG", "0") == "1")
