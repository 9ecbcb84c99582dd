from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate

db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()


def create_app(config_object='frontdesk.config.Config', overrides=None):
    app = Flask(__name__)
    app.config.from_object(config_object)
    if overrides:
        app.config.update(overrides)

    from frontdesk.config import configure_logging, require_secrets
    require_secrets(app.config)
    configure_logging(app.config['LOG_LEVEL'])

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    from frontdesk.notifications import SMTPOtpMailer
    from frontdesk.storage import PassthroughProofStore
    app.extensions['frontdesk.mailer'] = SMTPOtpMailer.from_config(app.config)
    app.extensions['frontdesk.proof_store'] = PassthroughProofStore()

    with app.app_context():
        from frontdesk import auth, errors, routes
        auth.init_auth(jwt)
        errors.register_error_handlers(app)
        app.register_blueprint(routes.api, url_prefix='/api')

        db.create_all()  # create tables that don't exist yet

    return app
