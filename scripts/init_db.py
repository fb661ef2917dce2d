"""Create missing tables and clear out stale reset tokens."""

from app import create_app
from models import db
from services.password_reset import purge_stale_tokens


def main() -> None:
    app = create_app()
    with app.app_context():
        db.create_all()
        removed = purge_stale_tokens()
        print(f"DB initialized: {app.config['SQLALCHEMY_DATABASE_URI']} ({removed} stale tokens removed)")


if __name__ == "__main__":
    main()
