"""Blueprint registration"""
from flask import Flask


def register_blueprints(app: Flask):
    """Register all blueprints"""
    from .auth import auth_bp
    from .dashboard import dashboard_bp
    from .fees import fees_bp
    from .students import students_bp
    from .payments import payments_bp
    from .receipts import receipts_bp
    from .reports import reports_bp
    from .settings import settings_bp
    from .billing import billing_bp
    from .admin import admin_bp
    from .api import api_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(fees_bp, url_prefix='/fees')
    app.register_blueprint(students_bp, url_prefix='/students')
    app.register_blueprint(payments_bp, url_prefix='/payments')
    app.register_blueprint(receipts_bp, url_prefix='/receipts')
    app.register_blueprint(reports_bp, url_prefix='/reports')
    app.register_blueprint(settings_bp, url_prefix='/settings')
    app.register_blueprint(billing_bp, url_prefix='/billing')
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(api_bp, url_prefix='/api')
