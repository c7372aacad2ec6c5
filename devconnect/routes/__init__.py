from .accounts import bp as accounts_bp
from .comments import bp as comments_bp
from .messages import bp as messages_bp
from .posts import bp as posts_bp
from .profiles import bp as profiles_bp


def register_blueprints(app):
    for bp in (accounts_bp, posts_bp, comments_bp, profiles_bp, messages_bp):
        app.register_blueprint(bp)
