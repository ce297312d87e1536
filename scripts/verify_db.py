import sys
import os
from sqlmodel import Session, select

# Add current directory to path so we can import fieldservice
sys.path.append(os.getcwd())

from fieldservice.db.session import engine, init_db
from fieldservice.models import AppConfig, Client, Employee, Job, Quote


def verify_database():
    print("--- Database Verification ---")
    try:
        # This will create tables if they don't exist
        print("Attempting to create tables...")
        init_db()
        print("Table creation/verification successful.")

        with Session(engine) as session:
            for model in (Client, Job, Quote, Employee, AppConfig):
                session.exec(select(model).limit(1)).first()
                print(f"  {model.__tablename__}: reachable")
            print("Database connection test: SUCCESS")

    except Exception as e:
        print("Database connection test: FAILED")
        print(f"Error: {e}")
        if "sshtunnel" in str(e).lower():
            print("\nTIP: Make sure your SSH credentials in .env are correct and you are not blocked by a firewall.")
        elif "mysql" in str(e).lower():
            print("\nTIP: Ensure the database server is running and the user has correct permissions.")
        sys.exit(1)


if __name__ == "__main__":
    verify_database()
