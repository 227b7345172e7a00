# app.py: Flask shell for the materials dashboard
#
# Login gate for a single account, dashboard page with balanced columns,
# add/edit/delete via a modal form, drag & drop reordering per category.
# Storage and auth live in the managed backend; see session.py / store.py.

from functools import wraps
from urllib.parse import urlparse

from flask import (
    Flask, request, redirect, url_for, session, flash, g,
    render_template_string, jsonify
)

from .config import Settings
from .dashboard import Dashboard
from .errors import GENERIC_CONFIG_MESSAGE, AuthError, ConfigurationError, FetchError, SessionExpired
from .log import configure_logging
from .models import CATEGORY_ORDER
from .session import SessionContext, SessionGateway
from .store import MaterialStore
from .templates import BASE, INDEX, LOGIN


def favicon_filter(url):
    try:
        host = urlparse(url).netloc or ""
        host = host.split("@")[-1]
    except ValueError:
        host = ""
    if not host:
        return ""
    return f"https://icons.duckduckgo.com/ip3/{host}.ico"

def wants_json():
    return request.is_json or "application/json" in request.headers.get("Accept", "")

def json_body():
    payload = request.get_json(force=True, silent=True)
    return payload if isinstance(payload, dict) else {}

def safe_next(target):
    # only same-site relative paths
    if target and target.startswith("/") and target[1:2] not in ("/", "\\"):
        return target
    return None


def create_app(settings: Settings | None = None, http=None) -> Flask:
    """Build the app. ``http`` is a requests.Session-like object shared by
    every backend call (tests pass a fake)."""
    settings = settings or Settings.from_env()
    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.config["MATERIALS_SETTINGS"] = settings
    app.add_template_filter(favicon_filter, "favicon")
    gateway = SessionGateway(settings, http)

    def page(tpl, **ctx):
        ctx.setdefault("logged_in", bool(session.get("access_token")))
        ctx.setdefault("status", None)
        return render_template_string(BASE, content=render_template_string(tpl, **ctx), **ctx)

    def dashboard_for_request():
        store = MaterialStore(settings, g.auth.access_token, http)
        return Dashboard(store, g.account_id, settings.max_columns)

    # ----------------------------
    # Auth
    # ----------------------------
    def login_required(fn):
        @wraps(fn)
        def wrapper(*a, **kw):
            if not settings.configured:
                if wants_json():
                    return jsonify({"error": GENERIC_CONFIG_MESSAGE}), 500
                flash(GENERIC_CONFIG_MESSAGE, "danger")
                return redirect(url_for("login"))
            auth = SessionContext(gateway, session)
            try:
                g.account_id = auth.verify()
            except SessionExpired:
                if wants_json():
                    return jsonify({"error": "Session expired."}), 401
                return redirect(url_for("login", next=request.path))
            except FetchError as e:
                # session kept; the next load retries
                if wants_json():
                    return jsonify({"ok": False, "error": e.message}), 502
                return page(INDEX, columns=[], empty=False, status=e.message,
                            categories=CATEGORY_ORDER), 502
            g.auth = auth
            return fn(*a, **kw)
        return wrapper

    @app.route("/", methods=["GET"])
    def index():
        return redirect(url_for("dashboard"))

    @app.route("/api/login", methods=["POST"])
    def api_login():
        payload = json_body()
        try:
            tokens = gateway.login(payload.get("username"), payload.get("password"))
        except ConfigurationError as e:
            return jsonify({"error": e.user_message}), 500
        except AuthError as e:
            return jsonify({"error": e.user_message}), 401
        return jsonify(tokens.to_dict())

    @app.route("/login", methods=["GET", "POST"])
    def login():
        if request.method == "POST":
            auth = SessionContext(gateway, session)
            try:
                auth.login(request.form.get("username"), request.form.get("password"))
            except (ConfigurationError, AuthError) as e:
                flash(e.user_message, "danger")
                return page(LOGIN), 401 if isinstance(e, AuthError) else 500
            nxt = safe_next(request.args.get("next")) or url_for("dashboard")
            return redirect(nxt)
        if session.get("access_token"):
            return redirect(url_for("dashboard"))
        return page(LOGIN)

    @app.route("/logout")
    def logout():
        SessionContext(gateway, session).teardown()
        session.clear()
        flash("Logged out.", "info")
        return redirect(url_for("login"))

    # ----------------------------
    # Dashboard
    # ----------------------------
    @app.route("/dashboard", methods=["GET"])
    @login_required
    def dashboard():
        dash = dashboard_for_request()
        dash.refresh()
        return page(INDEX, columns=dash.layout(), empty=dash.empty and dash.status is None,
                    status=dash.status, categories=CATEGORY_ORDER)

    @app.route("/api/materials", methods=["GET"])
    @login_required
    def api_materials():
        dash = dashboard_for_request()
        if not dash.refresh():
            return jsonify({"error": dash.status}), 502
        columns = [
            [{"category": name, "items": [m.to_record() for m in items]} for name, items in col.groups]
            for col in dash.layout()
        ]
        return jsonify({"columns": columns})

    @app.route("/materials", methods=["POST"])
    @login_required
    def save_material():
        dash = dashboard_for_request()
        mid = request.form.get("material_id") or None
        if not dash.refresh():
            flash(dash.status, "danger")
            return redirect(url_for("dashboard"))
        ok = dash.save(request.form.get("title"), request.form.get("category"),
                       request.form.get("link"), material_id=mid)
        if ok:
            flash("Material saved." if mid else "Material added.", "success")
        else:
            flash(dash.status, "danger")
        return redirect(url_for("dashboard"))

    @app.route("/materials/<mid>/delete", methods=["POST"])
    @login_required
    def delete_material(mid):
        dash = dashboard_for_request()
        if not dash.delete(mid, confirmed=request.form.get("confirmed") == "1"):
            flash(dash.status or "Delete not confirmed.", "danger")
        return redirect(url_for("dashboard"))

    # ---- Drag & drop reorder ----
    @app.route("/reorder", methods=["POST"])
    @login_required
    def reorder():
        payload = json_body()
        dash = dashboard_for_request()
        if not dash.refresh():
            return jsonify({"ok": False, "error": dash.status}), 502
        updates = dash.drop(str(payload.get("source_id") or ""), str(payload.get("target_id") or ""),
                            str(payload.get("category") or ""))
        return jsonify({"ok": dash.status is None, "orders": dict(updates), "error": dash.status})

    return app


def main():
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    create_app(settings).run(debug=True, host="127.0.0.1", port=5000)


if __name__ == "__main__":
    main()
