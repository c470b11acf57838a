# portfolio_web/app.py
from flask import Flask, Response, render_template
from jinja2 import TemplateError
import glob
import os
import sys

from portfolio_web import api_client
from portfolio_web.api_client import log_event

HOST = "0.0.0.0"
PORT = 8080

# Base URL the browser posts the contact form to
PUBLIC_API_URL = os.environ.get("PORTFOLIO_PUBLIC_API_URL", "http://localhost:8081")

HOME_ERROR = "Some data could not be loaded from the API. Please try again later."
SERVICES_ERROR = "Unable to load services from the API."
ABOUT_ERROR = "Unable to load profile information from the API."

app = Flask(__name__, static_folder="static", template_folder="templates")


# ---- Templates ----
def load_templates():
    """
    Compile every templates/*.html once, keyed by base file name.
    Any parse failure (or an empty directory) aborts startup.
    """
    pattern = os.path.join(app.root_path, app.template_folder, "*.html")
    paths = sorted(glob.glob(pattern))
    if not paths:
        log_event(f"Error parsing templates: no files match {pattern}", "FATAL")
        raise SystemExit(1)

    templates = {}
    for path in paths:
        name = os.path.basename(path)
        try:
            templates[name] = app.jinja_env.get_template(name)
        except TemplateError as e:
            log_event(f"Error parsing templates: {name}: {e}", "FATAL")
            raise SystemExit(1)
    return templates


TEMPLATES = load_templates()


def page_data(title, tagline, description, profile=None, services=None, error=""):
    return {
        "title": title,
        "tagline": tagline,
        "description": description,
        "profile": profile,
        "services": services or [],
        "error": error,
    }


def render_page(name, page, **context):
    template = TEMPLATES.get(os.path.basename(name))
    if template is None:
        return Response("Template not found", status=500, mimetype="text/plain")
    try:
        html = render_template(template, page=page, **context)
    except Exception as e:
        log_event(f"Error executing template {name}: {e}", "ERROR")
        return Response("Internal Server Error", status=500, mimetype="text/plain")
    return Response(html, status=200, mimetype="text/html")


# ---- Pages ----
@app.route("/")
def home():
    data, errors = api_client.load_core_data("profile", "services")
    page = page_data(
        "Cloud & DevOps Consulting",
        "Modern cloud solutions for resilient, secure and scalable systems.",
        "I help teams design, build, and operate cloud infrastructure on Azure and AWS "
        "with a strong focus on Kubernetes, Terraform, automation, and observability.",
        profile=data["profile"],
        services=data["services"],
    )
    if errors:
        page["error"] = HOME_ERROR
    return render_page("home.html", page)


@app.route("/services")
def services():
    # profile is fetched alongside but not shown on this page
    data, errors = api_client.load_core_data("profile", "services")
    page = page_data(
        "Services",
        "End-to-end consulting across Cloud, DevOps, and Platform Engineering.",
        "From greenfield builds to rescuing existing platforms, I partner with teams "
        "to design and implement pragmatic cloud solutions.",
        services=data["services"],
    )
    if errors:
        page["error"] = SERVICES_ERROR
    return render_page("services.html", page)


@app.route("/about")
def about():
    data, errors = api_client.load_core_data("profile")
    page = page_data(
        "About",
        "Hands-on Cloud Engineer & IT Consultant.",
        "I work with organizations to modernize infrastructure, improve reliability, "
        "and ship faster using proven DevOps practices.",
        profile=data["profile"],
    )
    if errors:
        page["error"] = ABOUT_ERROR
    return render_page("about.html", page)


@app.route("/contact")
def contact():
    page = page_data(
        "Contact",
        "Let’s talk about your infrastructure and delivery challenges.",
        "Use the form below to describe your current environment and what you’d like "
        "to improve. I’ll respond with practical next steps.",
    )
    return render_page("contact.html", page, contact_endpoint=f"{PUBLIC_API_URL}/api/contact")


def main():
    log_event(f"Starting Web (frontend) service on :{PORT}")
    try:
        app.run(host=HOST, port=PORT, threaded=True)
    except OSError as e:
        log_event(f"Web server failed: {e}", "FATAL")
        sys.exit(1)


if __name__ == "__main__":
    main()
