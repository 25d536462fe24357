#!/usr/bin/env python3
"""Create database tables and, when ADMIN_* is set, the first admin account"""
import sys
from dotenv import load_dotenv
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

# Load environment variables from .env file
load_dotenv()

from app import create_app
from config import Config
from extensions import db
from models.user import User
from services.accounts import register_user
from utils.errors import Conflict


def create_admin(username, email, password):
    existing = User.query.filter((User.username == username) | (User.email == email)).first()
    if existing:
        if not existing.is_admin:
            existing.is_admin = True
            db.session.commit()
            print(f"✓ Promoted existing user {existing.username} to admin")
        else:
            print(f"  Admin {existing.username} already exists")
        return existing

    user, _ = register_user(username=username, email=email, password=password, is_admin=True)
    print(f"✓ Created admin {user.username} (referral code {user.referral_code})")
    return user


def main():
    print("Initializing Pipeline database...")
    print("-" * 60)

    app = create_app()
    with app.app_context():
        db.create_all()

        tables = inspect(db.engine).get_table_names()
        print(f"\nCreated {len(tables)} tables:")
        for table in sorted(tables):
            print(f"  ✓ {table}")

        if Config.ADMIN_USERNAME and Config.ADMIN_EMAIL and Config.ADMIN_PASSWORD:
            print("\nSeeding admin account...")
            create_admin(Config.ADMIN_USERNAME, Config.ADMIN_EMAIL.lower(), Config.ADMIN_PASSWORD)
        else:
            print("\nADMIN_USERNAME / ADMIN_EMAIL / ADMIN_PASSWORD not set, skipping admin seed")

    print("\n" + "=" * 60)
    print("✅ DATABASE INITIALIZATION COMPLETE!")
    print("=" * 60)
    print("Start the backend with: python app.py")


if __name__ == '__main__':
    try:
        main()
    except (SQLAlchemyError, Conflict) as e:
        print(f"\n❌ Error: {e}")
        sys.exit(1)
