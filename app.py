#!/usr/bin/env python3
"""
ThorEye Audit Engine Web Interface

Flask app exposing form resolution, scoring and report review.
"""

from flask import Flask, jsonify
from dotenv import load_dotenv

# Load .env before config reads the environment
load_dotenv()

from config import WEB_PORT, REPOSITORY_BACKEND
from routes import forms_bp, audits_bp

app = Flask(__name__)
app.json.sort_keys = False

app.register_blueprint(forms_bp)
app.register_blueprint(audits_bp)


@app.route("/")
def index():
    """Service banner."""
    return jsonify({
        "service": "thoreye-audit-engine",
        "status": "ok",
        "backend": REPOSITORY_BACKEND,
        "endpoints": sorted({
            rule.rule for rule in app.url_map.iter_rules()
            if rule.rule.startswith("/api/")
        }),
    })


if __name__ == "__main__":
    print("\n" + "="*60)
    print("  ThorEye Audit Engine")
    print("="*60)
    print(f"  Listening on http://localhost:{WEB_PORT}")
    print("="*60 + "\n")
    app.run(debug=True, port=WEB_PORT)
