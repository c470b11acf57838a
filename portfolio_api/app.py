# portfolio_api/app.py
from flask import Flask, Response, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import BadRequest
from datetime import datetime, timezone
import sys

HOST = "0.0.0.0"
PORT = 8081

CORS_ALLOW_ORIGIN = "*"
CORS_ALLOW_METHODS = "GET, POST, OPTIONS"
CORS_ALLOW_HEADERS = "Content-Type"

CONTACT_ACCEPTED_BODY = '{"status":"accepted","message":"Thanks, your request has been received."}'
CONTACT_FIELDS = ("name", "email", "company", "message")

app = Flask(__name__)
# keep declaration order and raw UTF-8 on the wire
app.json.sort_keys = False
app.json.ensure_ascii = False


# ------------------------------
# Logging
# ------------------------------
def log_event(event, level="INFO"):
    ts = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    print(f"[API {ts}] [{level}] {event}", file=sys.stderr, flush=True)


# ------------------------------
# CORS
# ------------------------------
# Registered before CORS() so it runs after flask-cors has set its headers.
@app.after_request
def apply_cors_policy(response):
    """
    flask-cors only emits Allow-Methods/Allow-Headers on negotiated
    preflights; every response here carries all three.
    """
    response.headers.setdefault("Access-Control-Allow-Origin", CORS_ALLOW_ORIGIN)
    response.headers["Access-Control-Allow-Methods"] = CORS_ALLOW_METHODS
    response.headers["Access-Control-Allow-Headers"] = CORS_ALLOW_HEADERS
    return response


CORS(
    app,
    origins=CORS_ALLOW_ORIGIN,
    send_wildcard=True,
    methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.before_request
def short_circuit():
    # preflight on any path, registered or not
    if request.method == "OPTIONS":
        return Response(status=204)
    # Flask adds HEAD to every GET rule; only the declared method is served
    if request.method == "HEAD" and request.url_rule is not None:
        return method_not_allowed(None)


@app.errorhandler(405)
def method_not_allowed(e):
    return Response("method not allowed", status=405, mimetype="text/plain")


# ------------------------------
# Content
# ------------------------------
def build_profile():
    return {
        "name": "Tosin Femi",
        "title": "Cloud & DevOps Consultant",
        "tagline": "Modern cloud solutions for resilient, secure and scalable systems.",
        "summary": (
            "I help teams design, build, and operate cloud infrastructure on Azure and AWS "
            "with a strong focus on Kubernetes, Terraform, automation, and observability."
        ),
        "technologies": [
            "Azure",
            "AWS",
            "Kubernetes (AKS/EKS)",
            "Terraform",
            "GitHub Actions",
            "Azure DevOps",
            "Docker",
            "Argo CD",
        ],
        "location": "Calgary · Remote-friendly",
    }


def build_services():
    return [
        {
            "slug": "cloud-architecture",
            "name": "Cloud Architecture & Migration",
            "description": "Azure & AWS landing zones, workload migration plans, and security-focused network design.",
            "category": "Cloud",
        },
        {
            "slug": "kubernetes-platform",
            "name": "Kubernetes & Platform Engineering",
            "description": "Production-ready AKS/EKS clusters, GitOps workflows, and multi-environment platform design.",
            "category": "Kubernetes",
        },
        {
            "slug": "devops-automation",
            "name": "DevOps & Automation",
            "description": "Infrastructure as Code, CI/CD pipelines, and release automation for faster, safer delivery.",
            "category": "DevOps",
        },
        {
            "slug": "observability-reliability",
            "name": "Observability & Reliability",
            "description": "Logging, metrics, alerting, and SLOs so your team can detect and fix issues quickly.",
            "category": "Operations",
        },
    ]


def write_json(payload, status=200):
    try:
        resp = jsonify(payload)
    except (TypeError, ValueError) as e:
        log_event(f"Error writing JSON: {e}", "ERROR")
        return Response("Internal Server Error", status=500, mimetype="text/plain")
    resp.status_code = status
    return resp


def parse_contact(body):
    """Project a decoded JSON object onto the contact fields; absent ones are empty."""
    contact = {}
    for field in CONTACT_FIELDS:
        value = body.get(field)
        contact[field] = "" if value is None else str(value)
    return contact


# ------------------------------
# API
# ------------------------------
@app.route("/api/profile", methods=["GET"])
def get_profile():
    return write_json(build_profile())


@app.route("/api/services", methods=["GET"])
def get_services():
    return write_json({"items": build_services()})


@app.route("/api/contact", methods=["POST"])
def post_contact():
    try:
        body = request.get_json(force=True)
    except BadRequest:
        return Response("invalid JSON", status=400, mimetype="text/plain")
    # null decodes to an empty request
    if body is None:
        body = {}
    if not isinstance(body, dict):
        return Response("invalid JSON", status=400, mimetype="text/plain")

    contact = parse_contact(body)
    log_event(f"New contact request: {contact}")

    return Response(CONTACT_ACCEPTED_BODY, status=202, mimetype="application/json")


def main():
    log_event(f"Starting API service on :{PORT}")
    try:
        app.run(host=HOST, port=PORT, threaded=True)
    except OSError as e:
        log_event(f"API server failed: {e}", "FATAL")
        sys.exit(1)


if __name__ == "__main__":
    main()
