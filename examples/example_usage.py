"""Example: use the service layer directly (no Flask).

Ingests two weeks into an in-memory store and prints the term leaderboard.
"""

from src.attendance_trends.attendance_trends.container import build_container
from src.attendance_trends.attendance_trends.database.memory_document_store import InMemoryDocumentStore
from src.attendance_trends.attendance_trends.roster.model import RosterEntry

WEEK_1 = b"Student ID,Roll Class,% Present\nS1,10A,92%\nS2,10A,60\n"
WEEK_2 = b"Student ID,Roll Class,% Present\nS1,10A,95\nS2,10A,55\n"


def main():
    container = build_container(store=InMemoryDocumentStore(), school_id="demo", secret_key="demo")
    container.roster_repo.upsert_many([RosterEntry("S1", "10A"), RosterEntry("S2", "10A")])

    for week, raw in ((1, WEEK_1), (2, WEEK_2)):
        result = container.ingestion_service.ingest_upload(
            raw=raw, filename=f"week{week}.csv", year=2025, term=3, week=week, uploaded_by="demo"
        )
        print(result.to_dict())

    board = container.leaderboard_service.get_term_leaderboard(year=2025, term=3)
    for standing in board.standings:
        print(standing.to_dict())


if __name__ == "__main__":
    main()
