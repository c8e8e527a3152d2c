"""Infrastructure: Firestore REST client and repositories, in-memory backend, identity."""
