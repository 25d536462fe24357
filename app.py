from flask import Flask
from config import Config
from extensions import db, jwt, migrate, init_redis
from logging_config import configure_logging
from middleware import register_error_handlers, request_logger
from routes.auth import auth_bp
from routes.jobs import jobs_bp
from routes.applications import applications_bp
from routes.messages import messages_bp
from routes.notifications import notifications_bp
from routes.profiles import profiles_bp
from routes.saved_jobs import saved_jobs_bp
from routes.reported_jobs import reported_jobs_bp
from routes.feedback import feedback_bp
from routes.admin import admin_bp
from services.job_ingestion import ingest_jobs_command
import models  # noqa: F401  (registers every table with SQLAlchemy)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize extensions
    db.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)
    init_redis(app)

    # Register middleware
    register_error_handlers(app)
    request_logger(app)

    # Register blueprints
    app.register_blueprint(auth_bp, url_prefix='/api')
    app.register_blueprint(jobs_bp, url_prefix='/api/jobs')
    app.register_blueprint(applications_bp, url_prefix='/api')
    app.register_blueprint(messages_bp, url_prefix='/api/applications')
    app.register_blueprint(notifications_bp, url_prefix='/api/notifications')
    app.register_blueprint(profiles_bp, url_prefix='/api/profiles')
    app.register_blueprint(saved_jobs_bp, url_prefix='/api/saved-jobs')
    app.register_blueprint(reported_jobs_bp, url_prefix='/api')
    app.register_blueprint(feedback_bp, url_prefix='/api')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')

    app.cli.add_command(ingest_jobs_command)

    # Create tables
    with app.app_context():
        db.create_all()

    @app.route('/api/health')
    def health_check():
        return {'status': 'healthy', 'message': f"{app.config['APP_NAME']} API running"}, 200

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=True, host='0.0.0.0', port=5000)
