import os, sys, json
sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from tripquest.config import settings
from tripquest.dependencies import get_firestore_client
from tripquest.services.firestore_service import FirestoreService

COLLECTIONS = ("personas", "itinerary_modules", "quiz_questions")


def seed_catalog(path: str = settings.catalog_path):
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    fs = FirestoreService(get_firestore_client())
    for name in COLLECTIONS:
        count = fs.seed_collection(name, data.get(name, []))
        print(f"'{name}' collection is up to date ({count} documents)")

if __name__ == "__main__":
    seed_catalog(sys.argv[1] if len(sys.argv) > 1 else settings.catalog_path)
