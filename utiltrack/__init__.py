import logging
from flask import Flask, jsonify
from sqlalchemy import event
from config import config
from utiltrack.errors import UtilizationError
from utiltrack.extensions import db, cors

def _enable_sqlite_savepoints(engine):
    """Let SQLAlchemy issue BEGIN itself so pysqlite honours SAVEPOINT"""
    @event.listens_for(engine, 'connect')
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, 'begin')
    def do_begin(conn):
        conn.exec_driver_sql('BEGIN')

def create_app(config_name='default'):
    """Application factory pattern"""
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])
    config[config_name].init_app(app)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    # Initialize extensions
    db.init_app(app)
    cors.init_app(app)  # Allow all domains for all routes

    # Import models to ensure they're registered with SQLAlchemy
    from utiltrack.models import (
        Consultant, ConsultantGroup, ConsultantRole, Project, User, Allocation, PTORequest
    )

    # Register blueprints
    from utiltrack.routes import (
        consultants_bp, projects_bp, utilization_bp,
        mass_load_bp, pto_requests_bp, utils_bp
    )

    app.register_blueprint(consultants_bp)
    app.register_blueprint(projects_bp)
    app.register_blueprint(utilization_bp)
    app.register_blueprint(mass_load_bp)
    app.register_blueprint(pto_requests_bp)
    app.register_blueprint(utils_bp)

    # Error handlers
    @app.errorhandler(UtilizationError)
    def utilization_error(error):
        db.session.rollback()
        return jsonify({'error': error.message}), error.status_code

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'Resource not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return jsonify({'error': 'Internal server error'}), 500

    # Create database tables
    with app.app_context():
        if db.engine.dialect.name == 'sqlite':
            _enable_sqlite_savepoints(db.engine)
        db.create_all()

    return app
