"""Staging of raw GitHub documents between collection and aggregation."""

import os
import json
import logging
from threading import Lock
from typing import Dict, List, Optional

# Document names
PULLS = 'pulls'
MERGED_PULLS = 'merged_pulls'
ISSUE_COMMENTS = 'comments'
REVIEWS_PREFIX = 'reviews_'
REVIEW_COMMENTS_PREFIX = 'pr_comments_'


def reviews_document(pr_number: int) -> str:
    return f"{REVIEWS_PREFIX}{pr_number}"


def review_comments_document(pr_number: int) -> str:
    return f"{REVIEW_COMMENTS_PREFIX}{pr_number}"


class StagingArea:
    """Holds one JSON document per fetched resource for a single run.

    Documents live in memory unless a directory is given, in which case each
    one is written to '<directory>/<name>.json'.
    """

    def __init__(self, directory: Optional[str] = None):
        """Initialize the staging area.

        Args:
            directory: Existing directory to write documents to, or None to keep them in memory
        """
        self.directory = directory
        self._documents: Dict[str, List[Dict]] = {}
        self._lock = Lock()

    def _path(self, name: str) -> str:
        return os.path.join(self.directory, f"{name}.json")

    def write(self, name: str, records: List[Dict]):
        """Store a document.

        Args:
            name: Document name, e.g. 'pulls' or 'reviews_42'
            records: Raw records as returned by the GitHub API
        """
        if self.directory:
            with open(self._path(name), 'w', encoding='utf-8') as f:
                json.dump(records, f)
        else:
            with self._lock:
                self._documents[name] = records
        logging.debug(f"Staged {len(records)} records as '{name}'")

    def read(self, name: str) -> List[Dict]:
        """Load a document.

        Args:
            name: Document name

        Returns:
            The stored records

        Raises:
            KeyError: If the document was never written
        """
        if self.directory:
            path = self._path(name)
            if not os.path.exists(path):
                raise KeyError(name)
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)

        with self._lock:
            return self._documents[name]

    def clear(self) -> int:
        """Remove every staged document, including those left by an earlier run.

        Returns:
            Number of documents removed
        """
        stale = self.names()
        if self.directory:
            for name in stale:
                os.remove(self._path(name))
        else:
            with self._lock:
                self._documents.clear()
        if stale:
            logging.info(f"Removed {len(stale)} previously staged documents")
        return len(stale)

    def names(self, prefix: str = '') -> List[str]:
        """List stored document names starting with prefix, sorted."""
        if self.directory:
            found = [entry[:-len('.json')] for entry in os.listdir(self.directory)
                     if entry.endswith('.json')]
        else:
            with self._lock:
                found = list(self._documents)
        return sorted(name for name in found if name.startswith(prefix))

    def per_pr(self, prefix: str) -> Dict[int, List[Dict]]:
        """Read every per-PR document with the given prefix, keyed by PR number.

        Documents whose suffix is not a PR number are skipped.
        """
        documents = {}
        for name in self.names(prefix):
            suffix = name[len(prefix):]
            if not suffix.isdigit():
                logging.debug(f"Skipping staged document with unexpected name '{name}'")
                continue
            documents[int(suffix)] = self.read(name)
        return dict(sorted(documents.items()))

    def __contains__(self, name: str) -> bool:
        if self.directory:
            return os.path.exists(self._path(name))
        with self._lock:
            return name in self._documents
