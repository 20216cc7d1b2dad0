"""Flask extensions initialization"""
from flask_login import LoginManager
from authlib.integrations.flask_client import OAuth

# Initialize extensions
login_manager = LoginManager()
login_manager.login_view = 'auth.index'

oauth = OAuth()

google = oauth.register(
    name='google',
    server_metadata_url='https://accounts.google.com/.well-known/openid-configuration',
    client_kwargs={'scope': 'openid email profile'}
)
