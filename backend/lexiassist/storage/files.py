import logging
import os

from lexiassist.models.case import Document
from lexiassist.models.base import new_id

logger = logging.getLogger(__name__)


class FileStore:
    """case attachments on local disk under <root>/<case_id>/<doc_id>_<filename>"""

    def __init__(self, root: str):
        self.root = root

    def save(self, case_id: str, filename: str, content: bytes) -> Document:
        doc_id = new_id()
        # browsers on windows may send the full client path
        safe_name = os.path.basename(filename.replace("\\", "/")) or "upload"

        case_dir = os.path.join(self.root, case_id)
        os.makedirs(case_dir, exist_ok=True)
        storage_path = os.path.join(case_id, f"{doc_id}_{safe_name}")
        with open(os.path.join(self.root, storage_path), "wb") as f:
            f.write(content)

        return Document(id=doc_id, name=safe_name, url=storage_path)

    def remove(self, storage_path: str) -> bool:
        full_path = os.path.join(self.root, storage_path)
        try:
            os.unlink(full_path)
        except FileNotFoundError:
            logger.warning("attachment already gone: %s", full_path)
            return False
        return True

    def path_for(self, storage_path: str) -> str:
        return os.path.join(self.root, storage_path)
