"""
Accès aux données pour le registre des transactions.
- Stockage JSON Lines: une TransactionRecord par ligne, ajout en fin de fichier uniquement.
- append() ne relit jamais le fichier: pas de lecture-modification-écriture, donc
  pas de perte d'enregistrement entre deux commandes simultanées.
- Les ajouts sont sérialisés par un verrou (un seul écrivain à la fois).
"""
import json
import logging
import os
import threading
from pathlib import Path
from typing import List

from pydantic import ValidationError

from storefront.checkout.models import TransactionRecord
from storefront.errors import StorageError

logger = logging.getLogger(__name__)

# Un verrou par fichier, partagé par toutes les instances du processus
_LOCKS: dict = {}
_LOCKS_GUARD = threading.Lock()

def _lock_for(path: Path) -> threading.Lock:
    key = str(path.resolve())
    with _LOCKS_GUARD:
        if key not in _LOCKS:
            _LOCKS[key] = threading.Lock()
        return _LOCKS[key]


# module storefront.ledger.repository
class TransactionLedger:
    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = _lock_for(self.path)

    def append(self, record: TransactionRecord) -> None:
        """
        Ajoute un enregistrement en fin de registre.
        - Écriture d'une ligne complète, fsync sous verrou.
        - Tout ou rien: en cas d'échec le fichier est tronqué à sa taille d'avant l'appel,
          un StorageError signifie donc que l'enregistrement n'est pas dans le registre.
        - Une fin de fichier sans "\\n" (ajout interrompu) est refermée avant d'écrire,
          le fragment reste une ligne corrompue isolée.
        - Erreurs: StorageError si l'écriture échoue (disque plein, droits, ...).
        """
        data = (record.to_json() + "\n").encode("utf-8")
        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                # Non bufferisé: rien ne reste en mémoire à réécrire après une troncature
                with self.path.open("a+b", buffering=0) as f:
                    start = f.seek(0, os.SEEK_END)
                    if start:
                        f.seek(start - 1)
                        if f.read(1) != b"\n":
                            data = b"\n" + data
                    try:
                        self._write_all(f, data)
                        os.fsync(f.fileno())
                    except OSError:
                        self._rollback(f, start)
                        raise
            except OSError as e:
                logger.exception("ledger.append failed path=%s transaction_id=%s", self.path, record.transaction_id)
                raise StorageError(f"Failed to write transaction record: {e}") from e
        logger.info("ledger.append ok transaction_id=%s", record.transaction_id)

    @staticmethod
    def _write_all(f, data: bytes) -> None:
        view = memoryview(data)
        while view:
            written = f.write(view)
            view = view[written:]

    def _rollback(self, f, size: int) -> None:
        try:
            f.truncate(size)
            os.fsync(f.fileno())
        except OSError as e:
            logger.error("ledger.append rollback failed path=%s size=%s: %s", self.path, size, e)

    def list_all(self) -> List[TransactionRecord]:
        """
        Retourne tous les enregistrements, dans l'ordre d'ajout.
        - Fichier absent: registre vide.
        - Ligne corrompue: ignorée (log warning), les autres sont conservées.
        - Erreurs: StorageError si le fichier existe mais est illisible.
        """
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", encoding="utf-8") as f:
                lines = f.readlines()
        except (OSError, UnicodeDecodeError) as e:
            logger.exception("ledger.list_all failed path=%s", self.path)
            raise StorageError(f"Failed to read transaction ledger: {e}") from e

        records: List[TransactionRecord] = []
        for lineno, raw in enumerate(lines, start=1):
            raw = raw.strip()
            if not raw:
                continue
            try:
                records.append(TransactionRecord.model_validate(json.loads(raw)))
            except (json.JSONDecodeError, ValidationError):
                logger.warning("ledger.list_all skipping corrupt line path=%s line=%s", self.path, lineno)
        return records

    def count(self) -> int:
        return len(self.list_all())
