"""
Firestore implementation of the document store
"""
import logging
from typing import List, Dict, Any, Optional

from google.api_core import exceptions as google_exceptions

from ...core.exceptions import FirestoreException, ResourceNotFoundException
from ...core.firebase_config import initialize_firebase, get_db
from .document_store import BatchResult, DocumentStore, Mutation, MutationKind

logger = logging.getLogger(__name__)

# Firestore rejects write batches larger than this
MAX_BATCH_WRITES = 500


class FirestoreStore(DocumentStore):
    """Document store backed by Cloud Firestore"""

    def __init__(self, client=None):
        """
        Initialize the store

        Args:
            client: Optional pre-built Firestore client; the default client
                of the Firebase app is used on ``connect()`` otherwise
        """
        self.db = client

    async def connect(self) -> "FirestoreStore":
        """Resolve the Firestore client once; repeated calls are no-ops"""
        if self.db is None:
            initialize_firebase()
            self.db = get_db()
            logger.info("✅ Firestore client ready")
        return self

    def _client(self):
        if self.db is None:
            raise FirestoreException("Store used before connect()")
        return self.db

    async def get(self, path: str) -> Optional[Dict[str, Any]]:
        """
        Get a document by path

        Args:
            path: Document path

        Returns:
            Document data with ``id``, or None when it does not exist

        Raises:
            FirestoreException: If the read fails
        """
        try:
            doc = self._client().document(path).get()
            if not doc.exists:
                return None

            data = doc.to_dict()
            data['id'] = doc.id
            return data

        except Exception as e:
            logger.error(f"Error retrieving document {path}: {str(e)}")
            raise FirestoreException(str(e), details={"path": path})

    async def list(self, collection_path: str) -> List[Dict[str, Any]]:
        """
        Get every document of a collection

        Filtering happens in code so no composite index is needed.

        Raises:
            FirestoreException: If the query fails
        """
        try:
            results = []
            for doc in self._client().collection(collection_path).stream():
                data = doc.to_dict()
                data['id'] = doc.id
                results.append(data)

            logger.debug(f"Retrieved {len(results)} documents from {collection_path}")
            return results

        except Exception as e:
            logger.error(f"Error querying {collection_path}: {str(e)}")
            raise FirestoreException(str(e), details={"path": collection_path})

    async def set(self, path: str, data: Dict[str, Any]) -> None:
        try:
            self._client().document(path).set(data)
            logger.info(f"Created document {path}")
        except Exception as e:
            logger.error(f"Error creating document {path}: {str(e)}")
            raise FirestoreException(str(e), details={"path": path})

    async def update(self, path: str, data: Dict[str, Any]) -> None:
        """
        Update an existing document

        Raises:
            ResourceNotFoundException: If document not found
            FirestoreException: If update fails
        """
        try:
            self._client().document(path).update(data)
            logger.info(f"Updated document {path}")
        except google_exceptions.NotFound:
            raise ResourceNotFoundException("Document not found", details={"path": path})
        except Exception as e:
            logger.error(f"Error updating document {path}: {str(e)}")
            raise FirestoreException(str(e), details={"path": path})

    async def apply_batch(self, mutations: List[Mutation]) -> BatchResult:
        """
        Commit all mutations as one atomic write batch

        Raises:
            ResourceNotFoundException: If an update targets a missing document
            FirestoreException: If the batch is too large or the commit fails
        """
        if len(mutations) > MAX_BATCH_WRITES:
            raise FirestoreException(
                f"Batch of {len(mutations)} writes exceeds the limit of {MAX_BATCH_WRITES}",
                details={"writes": len(mutations)}
            )
        if not mutations:
            return BatchResult(applied=0)

        db = self._client()
        batch = db.batch()
        for mutation in mutations:
            ref = db.document(mutation.path)
            if mutation.kind == MutationKind.SET:
                batch.set(ref, mutation.data)
            elif mutation.kind == MutationKind.UPDATE:
                batch.update(ref, mutation.data)
            else:
                batch.delete(ref)

        try:
            batch.commit()
        except google_exceptions.NotFound as e:
            raise ResourceNotFoundException("Document not found", details={"error": str(e)})
        except Exception as e:
            logger.error(f"Error committing batch of {len(mutations)} writes: {str(e)}")
            raise FirestoreException(str(e), details={"writes": len(mutations)})

        logger.info(f"Committed batch of {len(mutations)} writes")
        return BatchResult(applied=len(mutations))
