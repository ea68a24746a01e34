"""
DocBase Export Viewer
A Flask application that serves an exported DocBase tree as read-only HTML pages.
"""

import logging
import os
import secrets
from pathlib import Path

from flask import Blueprint, Flask, Response, abort, current_app, render_template, request, send_from_directory
from markupsafe import Markup
from werkzeug.exceptions import HTTPException
from werkzeug.security import safe_join

from docbaseview.core.catalog import read_title_and_body
from docbaseview.core.renderer import render_markdown
from docbaseview.core.site import SiteContext
from docbaseview.core.sniff import detect_content_type
from docbaseview.version_info import __version__ as VERSION

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent
STATIC_DIR = PACKAGE_DIR / 'static'
IMAGE_SUFFIXES = ('.jpg', '.jpeg', '.png', '.gif')
AUTH_REALM = 'docbaseview'
# Endpoints answered without credentials
PUBLIC_ENDPOINTS = {'views.favicon'}

views = Blueprint('views', __name__)


def get_site() -> SiteContext:
    return current_app.config['SITE']


def request_uri() -> str:
    return request.full_path.rstrip('?')


def _matches(given, expected: str) -> bool:
    if given is None:
        return False
    return secrets.compare_digest(given.encode('utf-8'), expected.encode('utf-8'))


@views.before_app_request
def require_credentials():
    """Enforce the shared Basic credential when one is configured."""
    # Routing failures such as 405 are reported before authentication
    if request.routing_exception is not None:
        return None
    if request.endpoint in PUBLIC_ENDPOINTS:
        return None
    site = get_site()
    if not site.auth_enabled:
        return None

    auth = request.authorization
    if (auth is None or auth.type != 'basic'
            or not _matches(auth.username, site.basic_user)
            or not _matches(auth.password, site.basic_password)):
        logger.warning(f"[{request_uri()}] missing or invalid credentials")
        response = Response('401 Unauthorized\n', 401, mimetype='text/plain')
        response.headers['WWW-Authenticate'] = f'Basic realm="{AUTH_REALM}"'
        return response
    return None


@views.after_app_request
def log_response(response):
    logger.info(f"[{request_uri()}] HTTP {response.status_code}")
    return response


@views.app_errorhandler(HTTPException)
def http_error(error):
    """Plain-text error bodies; 500s carry the underlying cause."""
    response = error.get_response()
    if error.code == 500:
        body = f"{error.description}\n"
    else:
        body = f"{error.code} {error.name}\n"
    response.set_data(body)
    response.mimetype = 'text/plain'
    return response


@views.route('/', provide_automatic_options=False)
def index():
    """List every cataloged document."""
    site = get_site()
    return render_template('index.html', documents=site.documents, version=VERSION)


@views.route('/favicon.ico', provide_automatic_options=False)
def favicon():
    abort(404)


@views.route('/doc.css', provide_automatic_options=False)
def stylesheet():
    return send_from_directory(STATIC_DIR, 'doc.css', mimetype='text/css')


@views.route('/<path:filename>', provide_automatic_options=False)
def catch_all(filename):
    """Dispatch by suffix: documents, images, then attachments."""
    site = get_site()
    lowered = filename.lower()
    if lowered.endswith('.md'):
        return view_document(site, filename)
    if lowered.endswith(IMAGE_SUFFIXES):
        return serve_indexed(filename, site.image_dir, site.image_index)
    return serve_indexed(filename, site.file_dir, site.file_index)


def view_document(site: SiteContext, filename: str):
    # Documents are addressed by their real file name, no index lookup
    file_path = safe_join(str(site.markdown_dir), filename)
    if file_path is None or not os.path.isfile(file_path):
        abort(404)

    try:
        title, body = read_title_and_body(file_path)
    except OSError as e:
        logger.error(f"[{request_uri()}] failed to read {file_path}: {e}")
        abort(500, description=str(e))

    html_content = render_markdown(body)
    return render_template('document.html', title=title, html_content=Markup(html_content), version=VERSION)


def serve_indexed(name: str, directory: Path, name_index) -> Response:
    """Resolve a public link name through a name index and return the raw file."""
    actual_name = name_index.get(name)
    if actual_name is None:
        abort(404)

    file_path = directory / actual_name
    try:
        content = file_path.read_bytes()
    except OSError as e:
        logger.error(f"[{request_uri()}] failed to read {file_path}: {e}")
        abort(500, description=str(e))

    return Response(content, content_type=detect_content_type(content))


def create_app(site: SiteContext) -> Flask:
    """Build the Flask application around an already loaded site."""
    app = Flask(__name__, static_folder=None)
    app.config['SITE'] = site
    app.register_blueprint(views)
    logger.info(
        f"Serving {len(site.documents)} documents, {len(site.image_index)} images, "
        f"{len(site.file_index)} attachments (auth {'on' if site.auth_enabled else 'off'})"
    )
    return app
