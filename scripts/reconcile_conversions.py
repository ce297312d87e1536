import sys
import os
from sqlmodel import Session, select

# Add current directory to path
sys.path.append(os.getcwd())

from fieldservice.core.logging_config import configure_logging
from fieldservice.db.session import engine
from fieldservice.models import Job
from fieldservice.services.quotes import reconcile_conversions


def reconcile(owner_ids):
    """Stamp quotes whose job was created but never recorded on the quote."""
    print("--- Quote Conversion Reconciliation ---")

    with Session(engine) as session:
        if not owner_ids:
            # Every owner that has at least one converted job
            statement = select(Job.owner_id).where(Job.quote_id.is_not(None)).distinct()
            owner_ids = session.exec(statement).all()

        total = 0
        for owner_id in owner_ids:
            repaired = reconcile_conversions(session, owner_id)
            for quote_id, job_id in repaired:
                print(f"  owner {owner_id}: quote {quote_id} -> job {job_id}")
            total += len(repaired)

    print(f"Repaired {total} quote(s).")


if __name__ == "__main__":
    configure_logging()
    reconcile(sys.argv[1:])
