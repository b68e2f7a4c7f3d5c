# ayelearn/utils/file_upload.py

import logging
import uuid
from pathlib import Path
from typing import Dict, Iterable, Optional

from fastapi import HTTPException, UploadFile

from ayelearn.core.config import settings

logger = logging.getLogger(__name__)

# Allowed file extensions
ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png"}
ALLOWED_DOCUMENT_EXTENSIONS = {
    ".pdf",
    ".doc",
    ".docx",
    ".ppt",
    ".pptx",
    ".txt",
    ".xls",
    ".xlsx",
}
ALLOWED_VIDEO_EXTENSIONS = {".mp4", ".webm", ".mov", ".avi", ".mkv"}
ALLOWED_PRACTICE_EXTENSIONS = ALLOWED_DOCUMENT_EXTENSIONS | {
    ".zip",
    ".csv",
    ".json",
    ".py",
    ".js",
}

MB = 1024 * 1024

# Upload form "type" value -> stored file_type
COURSE_FILE_TYPES = {
    "documents": "document",
    "document": "document",
    "videos": "video",
    "video": "video",
    "practiceFiles": "practice",
    "practice_files": "practice",
    "practice": "practice",
}

COURSE_FILE_RULES: Dict[str, dict] = {
    "document": {"folder": "courses/documents", "extensions": ALLOWED_DOCUMENT_EXTENSIONS},
    "video": {"folder": "courses/videos", "extensions": ALLOWED_VIDEO_EXTENSIONS},
    "practice": {"folder": "courses/practice", "extensions": ALLOWED_PRACTICE_EXTENSIONS},
}

STORAGE_FOLDERS = ["admin", "learners"] + [
    rule["folder"] for rule in COURSE_FILE_RULES.values()
]


class FileUploadService:
    """Service to handle file uploads with UUID naming and storage management."""

    def __init__(self, base_storage_path: Optional[str] = None):
        """
        Initialize the file upload service.

        Args:
            base_storage_path: Base directory for file storage, defaults to settings.upload_dir
        """
        self.base_storage_path = Path(base_storage_path or settings.upload_dir)

    def ensure_storage_directories(self):
        """Create storage directories if they don't exist."""
        for folder in STORAGE_FOLDERS:
            (self.base_storage_path / folder).mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _get_file_extension(filename: str) -> str:
        """Extract file extension from filename."""
        return Path(filename).suffix.lower()

    def _validate_extension(
        self, file: UploadFile, allowed: Iterable[str], label: str
    ) -> str:
        if not file or not file.filename:
            raise HTTPException(status_code=400, detail="No file uploaded")

        extension = self._get_file_extension(file.filename)
        if extension not in allowed:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid {label} file type. Allowed types: {', '.join(sorted(allowed))}",
            )
        return extension

    async def _read_limited(self, file: UploadFile, max_size: int) -> bytes:
        try:
            contents = await file.read()
        except Exception as e:
            raise HTTPException(status_code=400, detail=f"Error reading file: {str(e)}")
        finally:
            await file.seek(0)

        if len(contents) == 0:
            raise HTTPException(status_code=400, detail="Empty file uploaded")
        if len(contents) > max_size:
            raise HTTPException(
                status_code=400,
                detail=f"File size exceeds maximum allowed size of {max_size // MB}MB",
            )
        return contents

    def _write(self, contents: bytes, folder: str, extension: str) -> tuple[str, str]:
        uuid_filename = f"{uuid.uuid4()}{extension}"

        folder_path = self.base_storage_path / folder
        folder_path.mkdir(parents=True, exist_ok=True)
        file_path = folder_path / uuid_filename

        try:
            with open(file_path, "wb") as f:
                f.write(contents)
        except OSError as e:
            logger.error(f"Error saving file {file_path}: {e}")
            raise HTTPException(status_code=500, detail="Error saving file")

        relative_path = f"{folder}/{uuid_filename}"
        logger.info(f"Stored upload at {relative_path} ({len(contents)} bytes)")
        return uuid_filename, relative_path

    async def save_image(self, file: UploadFile, folder: str) -> tuple[str, str]:
        """
        Save an uploaded JPG/PNG image with UUID naming.

        Args:
            file: The uploaded file
            folder: Subfolder within storage ('admin' or 'learners')

        Returns:
            Tuple of (uuid_filename, relative_path)
        """
        extension = self._validate_extension(file, ALLOWED_IMAGE_EXTENSIONS, "image")
        contents = await self._read_limited(file, settings.max_image_size_mb * MB)
        return self._write(contents, folder, extension)

    async def save_course_file(self, file: UploadFile, upload_type: str) -> dict:
        """
        Save a course document, video or practice file.

        Returns the descriptor the admin client posts back inside the course
        payload: fileName, originalName, filePath, fileType, fileSize.
        """
        file_type = COURSE_FILE_TYPES.get(upload_type)
        if file_type is None:
            raise HTTPException(
                status_code=400,
                detail="Invalid upload type. Must be documents, videos or practiceFiles",
            )
        rule = COURSE_FILE_RULES[file_type]

        extension = self._validate_extension(file, rule["extensions"], file_type)
        contents = await self._read_limited(file, settings.max_course_file_size_mb * MB)
        uuid_filename, relative_path = self._write(contents, rule["folder"], extension)

        return {
            "fileName": uuid_filename,
            "originalName": file.filename,
            "filePath": relative_path,
            "fileType": file_type,
            "fileSize": len(contents),
        }

    def delete_file(self, relative_path: Optional[str]) -> bool:
        """
        Delete a stored file. Missing files are ignored.

        Args:
            relative_path: Relative path to the file (e.g., 'learners/uuid.jpg')

        Returns:
            True if a file was removed, False otherwise
        """
        if not relative_path:
            return False
        storage_root = self.base_storage_path.resolve()
        file_path = (storage_root / relative_path).resolve()
        if not file_path.is_relative_to(storage_root):
            logger.warning(f"Refusing to remove file outside storage: {relative_path}")
            return False
        try:
            if file_path.is_file():
                file_path.unlink()
                logger.info(f"Removed stored file {relative_path}")
                return True
        except OSError as e:
            logger.warning(f"Could not remove stored file {relative_path}: {e}")
        return False

    def delete_files(self, relative_paths: Iterable[Optional[str]]) -> int:
        return sum(1 for path in relative_paths if self.delete_file(path))


# Create a singleton instance
file_upload_service = FileUploadService()
