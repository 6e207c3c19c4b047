"""Routes package for the Bookmaru application."""


def register_routes(app):
    """Register all route blueprints with the application."""
    from .places import places_bp
    from .submissions import submissions_bp
    from .admin import admin_bp
    from .contact import contact_bp

    app.register_blueprint(places_bp, url_prefix='/api/places')
    app.register_blueprint(submissions_bp, url_prefix='/api')
    app.register_blueprint(admin_bp, url_prefix='/api')
    app.register_blueprint(contact_bp, url_prefix='/api')
