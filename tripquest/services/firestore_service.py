"""
Firestore Service Layer for the trip planner.

Wraps the reads and writes the planner needs:
- Reference data collections (personas, itinerary_modules, quiz_questions)
- Generated trips (stored once the whole itinerary is assembled)
"""

import uuid
from typing import Optional, Dict, Any, List
from firebase_admin import firestore


class FirestoreService:
    def __init__(self, db: firestore.Client):
        self.db = db

    # -------------------------
    # Utility
    # -------------------------
    def _new_id(self, prefix: str) -> str:
        return f"{prefix}_{uuid.uuid4().hex[:10]}"

    # -------------------------
    # Reference data
    # -------------------------
    def load_collection(self, name: str) -> List[Dict[str, Any]]:
        docs = []
        for snap in self.db.collection(name).stream():
            data = snap.to_dict() or {}
            data.setdefault("id", snap.id)
            docs.append(data)
        return docs

    def seed_collection(self, name: str, documents: List[Dict[str, Any]]) -> int:
        batch = self.db.batch()
        collection = self.db.collection(name)
        for doc in documents:
            batch.set(collection.document(doc["id"]), doc, merge=True)
        batch.commit()
        return len(documents)

    # -------------------------
    # Trips
    # -------------------------
    def save_trip(self, itinerary: Dict[str, Any], user_id: Optional[str] = None) -> str:
        trip_id = self._new_id("trip")

        trip_to_save = itinerary.copy()
        trip_to_save["id"] = trip_id
        trip_to_save["userId"] = user_id
        trip_to_save["createdAt"] = firestore.SERVER_TIMESTAMP
        trip_to_save["updatedAt"] = firestore.SERVER_TIMESTAMP

        self.db.collection("trips").document(trip_id).set(trip_to_save)
        return trip_id
