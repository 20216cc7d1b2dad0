import logging
import os
from datetime import datetime, date
from decimal import Decimal

from dotenv import load_dotenv
from flask import Flask, request, redirect, url_for, flash
from flask_login import current_user

from config import config
from extensions import login_manager, oauth
from models import db, User, PaymentMethod, SubscriptionStatus, StudentStatus
from routes import register_blueprints
from utils import format_currency, format_date

# Dynamically find and load the .env file from current project directory
basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, '.env'))

logger = logging.getLogger(__name__)

# Blueprints an expired tenant can still reach
SUBSCRIPTION_EXEMPT_BLUEPRINTS = {'auth', 'billing', 'settings', 'admin'}


def create_app(config_name=None):
    """Application factory"""
    config_name = config_name or os.environ.get('FLASK_CONFIG', 'default')

    app = Flask(__name__)
    app.config.from_object(config[config_name])

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)
    oauth.init_app(app)

    register_blueprints(app)
    register_template_helpers(app)

    app.before_request(enforce_subscription)

    with app.app_context():
        db.create_all()

    return app


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


def enforce_subscription():
    """Send tenants whose trial or subscription ran out to the billing page"""
    if not current_user.is_authenticated or current_user.is_super_admin:
        return None
    if request.endpoint is None or request.endpoint == 'static':
        return None
    if request.blueprint in SUBSCRIPTION_EXEMPT_BLUEPRINTS:
        return None

    if current_user.is_subscription_expired():
        logger.info("Subscription expired for %s, redirecting %s to billing",
                    current_user.email, request.path)
        flash('Your subscription has expired. Please renew to continue.', 'warning')
        return redirect(url_for('billing.index'))
    return None


def register_template_helpers(app):
    @app.template_filter('currency')
    def currency_filter(amount, currency=None):
        return format_currency(amount, currency or app.config['CURRENCY_CODE'])

    @app.template_filter('date')
    def date_filter(value, fmt='%d/%m/%Y'):
        return format_date(value, fmt)

    @app.template_global()
    def get_date():
        return date.today()

    @app.template_global()
    def get_datetime():
        return datetime.now()

    @app.template_global()
    def get_decimal():
        return Decimal

    @app.context_processor
    def inject_enums():
        return {
            'PaymentMethod': PaymentMethod,
            'SubscriptionStatus': SubscriptionStatus,
            'StudentStatus': StudentStatus,
            'currency_code': app.config['CURRENCY_CODE'],
        }


# ===========================
#  MAIN APPLICATION
# ===========================
if __name__ == '__main__':
    create_app().run(debug=True)
