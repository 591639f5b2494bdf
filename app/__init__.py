from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
import os
from app.logger import get_logger, configure_logging

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()


def _env_flag(name, default='False'):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


def create_app(config=None):
    """
    Application factory for the order ledger.

    Configuration is read from the environment (see .env) and can be
    overridden by passing a mapping, which is how the test suite points the
    app at an in-memory database.
    """
    from pathlib import Path

    app = Flask(__name__)

    # Environment first, explicit overrides last
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY')
    app.config['LOG_LEVEL'] = os.environ.get('LOG_LEVEL', 'INFO')
    app.config['LOG_DIR'] = os.environ.get('LOG_DIR', 'logs')
    app.config['TRANSACTION_ID_PAD_WIDTH'] = int(os.environ.get('TRANSACTION_ID_PAD_WIDTH', '4'))
    app.config['SQLALCHEMY_ECHO'] = _env_flag('SQLALCHEMY_ECHO')
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    db_env = os.environ.get('DATABASE_URL')
    if db_env:
        app.config['SQLALCHEMY_DATABASE_URI'] = db_env
    else:
        # Keep the SQLite file inside instance/ so path resolution is stable
        base_dir = Path(__file__).parent.parent
        instance_dir = base_dir / 'instance'
        instance_dir.mkdir(parents=True, exist_ok=True)
        default_db_path = instance_dir / 'ledger.db'
        app.config['SQLALCHEMY_DATABASE_URI'] = f"sqlite:///{str(default_db_path.resolve())}"

    if config:
        app.config.update(config)

    configure_logging(level=app.config['LOG_LEVEL'], log_dir=app.config['LOG_DIR'] or None)
    logger = get_logger("ledger")
    logger.info("Initializing Flask application")

    # SECURITY: Require SECRET_KEY - no fallback
    if not app.config['SECRET_KEY']:
        logger.critical("SECRET_KEY not set in environment! Application cannot start.")
        raise RuntimeError("SECRET_KEY environment variable is required")

    if app.config['TRANSACTION_ID_PAD_WIDTH'] < 1:
        raise RuntimeError("TRANSACTION_ID_PAD_WIDTH must be a positive integer")

    db.init_app(app)
    migrate.init_app(app, db)
    logger.debug("Extensions initialized")

    # Import models to ensure they're registered with SQLAlchemy
    from app.data.core.party import Party
    from app.data.core.factory import Factory
    from app.data.core.associate_company import AssociateCompany
    from app.data.inventory.production_house import ProductionHouse
    from app.data.core.sequences.sequence_counter import SequenceCounter
    from app.data.ledger.transaction_record import TransactionRecord
    from app.data.ledger.transaction_item import TransactionItem

    logger.debug("Models imported and registered")
    logger.info(
        f"Flask application initialization complete "
        f"(id pad width={app.config['TRANSACTION_ID_PAD_WIDTH']})"
    )

    return app
